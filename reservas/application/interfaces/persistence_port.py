"""Interface PersistencePort - carga y guarda el estado completo como un todo."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from reservas.domain.entities.reservation import Reservation
from reservas.domain.entities.vehicle import Vehicle


@dataclass
class Snapshot:
    """
    Estado persistido: colecciones con nombre, cargadas una vez al inicio y
    sobrescritas completas después de cada mutación. Las colecciones
    auxiliares (expenses, inspection_logs, thresholds, ...) no se interpretan
    aquí; sólo se conservan.
    """

    vehicles: list[Vehicle] = field(default_factory=list)
    reservations: list[Reservation] = field(default_factory=list)
    collections: dict[str, Any] = field(default_factory=dict)


class PersistencePort(ABC):
    """El motor nunca habla con el almacenamiento directamente; sólo por este puerto."""

    @abstractmethod
    def load(self) -> Snapshot:
        raise NotImplementedError

    @abstractmethod
    def save(self, snapshot: Snapshot) -> None:
        raise NotImplementedError
