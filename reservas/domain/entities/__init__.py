"""Entidades del dominio de reservas."""

from reservas.domain.entities.reservation import (
    ACTIVE_STATUSES,
    OCCUPYING_STATUSES,
    Reservation,
    ReservationOrigin,
    ReservationStatus,
)
from reservas.domain.entities.vehicle import Vehicle, VehicleStatus

__all__ = [
    # Reservation
    "Reservation",
    "ReservationStatus",
    "ReservationOrigin",
    "ACTIVE_STATUSES",
    "OCCUPYING_STATUSES",
    # Vehicle
    "Vehicle",
    "VehicleStatus",
]
