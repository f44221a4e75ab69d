"""
Capa de Dominio - Motor de reservas y disponibilidad.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.

Estructura:
- entities/: Entidades del dominio (Reservation, Vehicle)
- value_objects/: Objetos de valor inmutables (DateRange, ReservationCode)
- services/: Fechas, coincidencia de unidades, disponibilidad y precios
- errors.py: Excepciones específicas del dominio
- constants.py: Constantes del dominio
"""

from reservas.domain.entities import (
    Reservation,
    ReservationOrigin,
    ReservationStatus,
    Vehicle,
    VehicleStatus,
)
from reservas.domain.errors import (
    DomainError,
    IngestError,
    InvalidMoneyError,
    InvalidReservationStatusError,
    InvariantViolationError,
    NotFoundError,
    ParseError,
    ReservationAlreadyExistsError,
    ReservationNotFoundError,
    VehicleNotFoundError,
    VehicleUnavailableError,
)
from reservas.domain.value_objects import DateRange, ReservationCode

__all__ = [
    # Entities
    "Reservation",
    "ReservationStatus",
    "ReservationOrigin",
    "Vehicle",
    "VehicleStatus",
    # Value Objects
    "DateRange",
    "ReservationCode",
    # Errors
    "DomainError",
    "ParseError",
    "IngestError",
    "InvariantViolationError",
    "InvalidReservationStatusError",
    "ReservationAlreadyExistsError",
    "VehicleUnavailableError",
    "InvalidMoneyError",
    "NotFoundError",
    "ReservationNotFoundError",
    "VehicleNotFoundError",
]
