"""Capa de aplicación: puertos, ingesta del feed, store y casos de uso."""

from reservas.application.reservation_store import (
    ChangeEvent,
    FeedMergeResult,
    ReservationStore,
)

__all__ = [
    "ReservationStore",
    "ChangeEvent",
    "FeedMergeResult",
]
