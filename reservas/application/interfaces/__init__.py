"""Interfaces (Puertos) de la capa de aplicación."""

from reservas.application.interfaces.clock import Clock, FakeClock, SystemClock
from reservas.application.interfaces.exchange_rate import ExchangeRateProvider
from reservas.application.interfaces.feed_source import FeedSource
from reservas.application.interfaces.persistence_port import (
    PersistencePort,
    Snapshot,
)
from reservas.application.interfaces.reservation_notifier import ReservationNotifier

__all__ = [
    # Persistence
    "PersistencePort",
    "Snapshot",
    # Gateways
    "FeedSource",
    "ReservationNotifier",
    "ExchangeRateProvider",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
]
