"""
Motor de precios: total del contrato, rescisión y cambio de unidad.

Los ajustes financieros se devuelven como sugerencia calculada más valores
aplicados. Un operador puede sobrescribir uno de los dos campos emparejados
(multa/reembolso, nuevo total/diferencia) y el otro se recalcula siempre,
de modo que los invariantes se mantienen:

    penalty + refund == total
    new_total - old_total == diff
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum

from reservas.domain.constants import (
    LONG_RENTAL_PENALTY_RATE,
    SHORT_RENTAL_MAX_DAYS,
    SHORT_RENTAL_PENALTY_RATE,
)
from reservas.domain.entities.reservation import Reservation
from reservas.domain.errors import InvalidMoneyError
from reservas.domain.value_objects.money import round_half_up

SECONDS_PER_DAY = 24 * 3600


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _as_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def rental_days(start: date | datetime, end: date | datetime) -> int:
    """
    Días de renta facturables.

    Regla de negocio: cualquier fracción de 24 horas cuenta como día completo
    y el mínimo es un día, aun para un rango del mismo día.
    Ejemplo: 24.1 horas = 2 días.
    """
    start_dt, end_dt = _as_datetime(start), _as_datetime(end)
    if start_dt > end_dt:
        start_dt, end_dt = end_dt, start_dt
    seconds = int((end_dt - start_dt).total_seconds())
    days, remainder = divmod(seconds, SECONDS_PER_DAY)
    if remainder > 0:
        days += 1
    return max(1, days)


class CancellationField(str, Enum):
    PENALTY = "penalty"
    REFUND = "refund"


class SwapField(str, Enum):
    NEW_TOTAL = "new_total"
    DIFF = "diff"


@dataclass(frozen=True)
class CancellationAdjustment:
    """Multa retenida y reembolso al cliente por rescisión."""

    total: Decimal
    days: int
    rate: Decimal
    penalty: Decimal
    refund: Decimal
    suggested_penalty: Decimal
    suggested_refund: Decimal

    def __post_init__(self) -> None:
        if self.penalty + self.refund != self.total:
            raise InvalidMoneyError(
                f"multa ({self.penalty}) + reembolso ({self.refund}) != total ({self.total})"
            )

    @property
    def overridden(self) -> bool:
        return self.penalty != self.suggested_penalty

    def apply_override(
        self, field: CancellationField | str, value: Decimal | int | float | str
    ) -> "CancellationAdjustment":
        """Fija multa o reembolso a mano; el otro campo se recalcula como total - valor."""
        field = CancellationField(field)
        value = _as_decimal(value)
        if value < 0 or value > self.total:
            raise InvalidMoneyError(
                f"{field.value} debe estar entre 0 y {self.total}: {value}"
            )
        if field == CancellationField.PENALTY:
            return replace(self, penalty=value, refund=self.total - value)
        return replace(self, refund=value, penalty=self.total - value)


@dataclass(frozen=True)
class SwapAdjustment:
    """
    Nuevo total y diferencia al cambiar la unidad de una reservación.

    diff > 0: el cliente debe pagar la diferencia; diff < 0: crédito a su favor.
    """

    old_total: Decimal
    new_daily_rate: Decimal
    days: int
    new_total: Decimal
    diff: Decimal
    suggested_new_total: Decimal
    suggested_diff: Decimal

    def __post_init__(self) -> None:
        if self.new_total < 0:
            raise InvalidMoneyError(f"new_total no puede ser negativo: {self.new_total}")
        if self.new_total - self.old_total != self.diff:
            raise InvalidMoneyError(
                f"new_total ({self.new_total}) - old_total ({self.old_total}) != diff ({self.diff})"
            )

    @property
    def overridden(self) -> bool:
        return self.new_total != self.suggested_new_total

    def apply_override(
        self, field: SwapField | str, value: Decimal | int | float | str
    ) -> "SwapAdjustment":
        """Fija nuevo total o diferencia a mano; el otro campo se recalcula."""
        field = SwapField(field)
        value = _as_decimal(value)
        if field == SwapField.NEW_TOTAL:
            return replace(self, new_total=value, diff=value - self.old_total)
        return replace(self, diff=value, new_total=self.old_total + value)


class PricingEngine:
    """Cálculos de dinero del contrato. Sin estado salvo la política de multas."""

    def __init__(
        self,
        short_rental_max_days: int = SHORT_RENTAL_MAX_DAYS,
        short_rental_rate: Decimal = SHORT_RENTAL_PENALTY_RATE,
        long_rental_rate: Decimal = LONG_RENTAL_PENALTY_RATE,
    ) -> None:
        self._short_rental_max_days = short_rental_max_days
        self._short_rental_rate = _as_decimal(short_rental_rate)
        self._long_rental_rate = _as_decimal(long_rental_rate)

    def total_for_range(
        self,
        daily_rate: Decimal | int | float | str,
        start: date | datetime,
        end: date | datetime,
    ) -> Decimal:
        return rental_days(start, end) * _as_decimal(daily_rate)

    def penalty_rate(self, days: int) -> Decimal:
        if days <= self._short_rental_max_days:
            return self._short_rental_rate
        return self._long_rental_rate

    def compute_cancellation_adjustment(self, reservation: Reservation) -> CancellationAdjustment:
        total = reservation.total_amount
        days = rental_days(reservation.starts_at, reservation.ends_at)
        rate = self.penalty_rate(days)
        penalty = round_half_up(total * rate)
        refund = total - penalty
        return CancellationAdjustment(
            total=total,
            days=days,
            rate=rate,
            penalty=penalty,
            refund=refund,
            suggested_penalty=penalty,
            suggested_refund=refund,
        )

    def compute_swap_adjustment(
        self,
        old_total: Decimal | int | float | str,
        new_daily_rate: Decimal | int | float | str,
        start: date | datetime,
        end: date | datetime,
    ) -> SwapAdjustment:
        old_total = _as_decimal(old_total)
        new_daily_rate = _as_decimal(new_daily_rate)
        new_total = self.total_for_range(new_daily_rate, start, end)
        diff = new_total - old_total
        return SwapAdjustment(
            old_total=old_total,
            new_daily_rate=new_daily_rate,
            days=rental_days(start, end),
            new_total=new_total,
            diff=diff,
            suggested_new_total=new_total,
            suggested_diff=diff,
        )
