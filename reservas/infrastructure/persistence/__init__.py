"""Persistencia del snapshot en archivo JSON."""

from reservas.infrastructure.persistence.json_file import JsonFilePersistence
from reservas.infrastructure.persistence.records import (
    ReservationRecord,
    SnapshotDocument,
    VehicleRecord,
)

__all__ = [
    "JsonFilePersistence",
    "SnapshotDocument",
    "VehicleRecord",
    "ReservationRecord",
]
