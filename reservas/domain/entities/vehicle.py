"""Entidad Vehicle - unidad de la flota (sólo lectura para el motor)."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class VehicleStatus(str, Enum):
    """Estado operativo de la unidad."""

    AVAILABLE = "Available"
    IN_WORKSHOP = "InWorkshop"
    RENTED = "Rented"


@dataclass(frozen=True)
class Vehicle:
    """
    Unidad del catálogo de flota.

    El nombre es la clave con la que las reservaciones la referencian.
    """

    id: str
    name: str
    daily_rate: Decimal
    status: VehicleStatus = VehicleStatus.AVAILABLE
    plate: str | None = None
    color: str | None = None
    maintenance_due: date | None = None
    insurance_due: date | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.daily_rate, Decimal):
            object.__setattr__(self, "daily_rate", Decimal(str(self.daily_rate)))
        if self.daily_rate < 0:
            raise ValueError(f"daily_rate no puede ser negativo: {self.daily_rate}")
        object.__setattr__(self, "status", VehicleStatus(self.status))

    @property
    def in_workshop(self) -> bool:
        return self.status == VehicleStatus.IN_WORKSHOP
