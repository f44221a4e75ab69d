"""Value Object DateRange - rango de días calendario de una reservación."""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterator

from reservas.domain.errors import InvalidDateRangeError


@dataclass(frozen=True)
class DateRange:
    """
    Value Object inmutable que representa un rango de días calendario.

    Ambos extremos son inclusivos: un rango con start == end bloquea un día.

    Attributes:
        start: Primer día (retiro).
        end: Último día (devolución).
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise InvalidDateRangeError(
                f"start debe ser anterior o igual a end: {self.start} > {self.end}"
            )

    def days(self) -> Iterator[date]:
        """Itera cada día del rango, de start a end inclusive."""
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def overlaps_with(self, other: "DateRange") -> bool:
        """Verifica si este rango comparte al menos un día con otro."""
        return self.start <= other.end and other.start <= self.end

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()}"

    @classmethod
    def ordered(cls, first: date, second: date) -> "DateRange":
        """Construye el rango intercambiando los extremos si vienen invertidos."""
        if first > second:
            first, second = second, first
        return cls(start=first, end=second)
