"""Value Objects del dominio de reservas."""

from reservas.domain.value_objects.date_range import DateRange
from reservas.domain.value_objects.money import format_brl, round_half_up
from reservas.domain.value_objects.reservation_code import ReservationCode

__all__ = [
    "DateRange",
    "ReservationCode",
    "format_brl",
    "round_half_up",
]
