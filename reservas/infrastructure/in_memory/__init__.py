"""Implementaciones in-memory para testing y modo demo."""

from reservas.infrastructure.in_memory.exchange_rate import FixedExchangeRate
from reservas.infrastructure.in_memory.feed_source import StaticFeedSource
from reservas.infrastructure.in_memory.notifier import RecordingNotifier
from reservas.infrastructure.in_memory.persistence import InMemoryPersistence

__all__ = [
    # Persistence
    "InMemoryPersistence",
    # Gateways
    "StaticFeedSource",
    "RecordingNotifier",
    "FixedExchangeRate",
]
