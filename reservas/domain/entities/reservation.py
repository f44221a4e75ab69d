"""Entidad Reservation - Agregado raíz del dominio."""

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum

from reservas.domain.constants import (
    LEGACY_STATUS_REQUESTED,
    ORIGIN_IMPORTED_FEED,
    ORIGIN_MANUAL,
    ORIGIN_ONLINE_BOOKING,
    RESERVATION_STATUS_CANCELLED,
    RESERVATION_STATUS_COMPLETED,
    RESERVATION_STATUS_CONFIRMED,
    RESERVATION_STATUS_PENDING,
)
from reservas.domain.errors import InvalidMoneyError, InvalidReservationStatusError
from reservas.domain.value_objects.date_range import DateRange
from reservas.domain.value_objects.money import format_brl


class ReservationStatus(str, Enum):
    """Estados posibles de una reservación."""

    PENDING = RESERVATION_STATUS_PENDING
    CONFIRMED = RESERVATION_STATUS_CONFIRMED
    COMPLETED = RESERVATION_STATUS_COMPLETED
    CANCELLED = RESERVATION_STATUS_CANCELLED

    @classmethod
    def parse(cls, value: "str | ReservationStatus") -> "ReservationStatus":
        """Acepta el valor canónico o el estado heredado 'Requested'."""
        if isinstance(value, ReservationStatus):
            return value
        if value == LEGACY_STATUS_REQUESTED:
            return cls.PENDING
        return cls(value)


class ReservationOrigin(str, Enum):
    """Procedencia de la reservación; controla la política de merge del feed."""

    MANUAL = ORIGIN_MANUAL
    ONLINE_BOOKING = ORIGIN_ONLINE_BOOKING
    IMPORTED_FEED = ORIGIN_IMPORTED_FEED


OCCUPYING_STATUSES = frozenset({ReservationStatus.CONFIRMED, ReservationStatus.COMPLETED})
ACTIVE_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})


@dataclass
class Reservation:
    """
    Entidad principal del dominio - Agregado Raíz.

    El vehículo se referencia por etiqueta libre (vehicle_label), nunca por
    clave foránea; se resuelve contra la flota por coincidencia de nombre.
    """

    # Identificación
    id: str
    client_name: str
    vehicle_label: str

    # Fechas (días calendario, inclusivos)
    start_date: date
    end_date: date

    # Financieros (BRL)
    total_amount: Decimal = Decimal("0")

    # Estado y procedencia
    status: ReservationStatus = ReservationStatus.PENDING
    origin: ReservationOrigin = ReservationOrigin.MANUAL

    # Bitácora de auditoría (sólo se agrega)
    notes: str = ""

    # Contacto
    email: str | None = None
    document_id: str | None = None
    phone: str | None = None

    # Hora de retiro y devolución (sólo reservas online con hora)
    pickup_time: time | None = None
    return_time: time | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.total_amount, Decimal):
            self.total_amount = Decimal(str(self.total_amount))
        if self.total_amount < 0:
            raise InvalidMoneyError(
                f"total_amount no puede ser negativo en {self.id}: {self.total_amount}"
            )
        if self.start_date > self.end_date:
            self.start_date, self.end_date = self.end_date, self.start_date
            self.pickup_time, self.return_time = self.return_time, self.pickup_time
        self.status = ReservationStatus.parse(self.status)
        self.origin = ReservationOrigin(self.origin)

    # === Propiedades calculadas ===

    @property
    def date_range(self) -> DateRange:
        """Retorna el rango de días como Value Object."""
        return DateRange(start=self.start_date, end=self.end_date)

    @property
    def starts_at(self) -> datetime:
        """Momento de retiro; sin hora cargada se toma el inicio del día."""
        return datetime.combine(self.start_date, self.pickup_time or time.min)

    @property
    def ends_at(self) -> datetime:
        return datetime.combine(self.end_date, self.return_time or time.min)

    @property
    def occupies_calendar(self) -> bool:
        """Sólo Confirmed y Completed bloquean días del calendario."""
        return self.status in OCCUPYING_STATUSES

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def is_imported(self) -> bool:
        return self.origin == ReservationOrigin.IMPORTED_FEED

    # === Métodos de negocio ===

    def append_note(self, note: str) -> None:
        """Agrega una línea a la bitácora sin reescribir lo anterior."""
        note = note.strip()
        if not note:
            return
        self.notes = f"{self.notes}\n{note}" if self.notes else note

    def verify_payment(self) -> None:
        """Pending -> Confirmed."""
        if self.status != ReservationStatus.PENDING:
            raise InvalidReservationStatusError(
                self.status.value, ReservationStatus.PENDING.value, "verificar el pago"
            )
        self.status = ReservationStatus.CONFIRMED

    def swap_vehicle(self, new_vehicle_label: str, new_total: Decimal, audit_note: str) -> None:
        """Cambia la unidad y el total; el estado no cambia."""
        self._ensure_active("cambiar la unidad")
        self.vehicle_label = new_vehicle_label
        self.total_amount = new_total
        self.append_note(audit_note)

    def cancel(self, audit_note: str) -> None:
        """Rescinde el contrato (estado terminal)."""
        self._ensure_active("cancelar")
        self.status = ReservationStatus.CANCELLED
        self.append_note(audit_note)

    def _ensure_active(self, operation: str) -> None:
        if self.status not in ACTIVE_STATUSES:
            raise InvalidReservationStatusError(
                self.status.value,
                [status.value for status in (ReservationStatus.PENDING, ReservationStatus.CONFIRMED)],
                operation,
            )

    def __str__(self) -> str:
        return (
            f"{self.id} {self.client_name} [{self.vehicle_label}] "
            f"{self.date_range} {format_brl(self.total_amount)} {self.status.value}"
        )
