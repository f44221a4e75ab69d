"""Implementación in-memory del puerto de persistencia."""

import copy

from reservas.application.interfaces.persistence_port import PersistencePort, Snapshot


class InMemoryPersistence(PersistencePort):
    """Guarda copias del snapshot en memoria para testing."""

    def __init__(self, initial: Snapshot | None = None, fail_on_save: bool = False) -> None:
        self._snapshot = copy.deepcopy(initial) if initial else Snapshot()
        self.fail_on_save = fail_on_save
        self.save_count = 0

    def load(self) -> Snapshot:
        return copy.deepcopy(self._snapshot)

    def save(self, snapshot: Snapshot) -> None:
        if self.fail_on_save:
            raise OSError("almacenamiento no disponible")
        self._snapshot = copy.deepcopy(snapshot)
        self.save_count += 1

    @property
    def last_saved(self) -> Snapshot:
        return self._snapshot
