"""Arma el motor completo a partir de Settings."""

import logging
from typing import Any

from reservas.application.feed.ingestor import FeedIngestor
from reservas.application.interfaces.clock import Clock, SystemClock
from reservas.application.interfaces.persistence_port import PersistencePort
from reservas.application.reservation_store import ReservationStore
from reservas.application.use_cases.fleet_report import FleetReportUseCase
from reservas.application.use_cases.publish_changes import PublishChangesUseCase
from reservas.application.use_cases.sync_feed import SyncFeedUseCase
from reservas.config import Settings, get_settings
from reservas.domain.services.availability import AvailabilityIndex
from reservas.domain.services.identity import ExactIdentityMatcher, SubstringIdentityMatcher
from reservas.infrastructure.gateways.exchange_rate_http import HttpExchangeRateProvider
from reservas.infrastructure.gateways.http_feed_source import HttpFeedSource
from reservas.infrastructure.gateways.webhook_notifier import WebhookNotifier
from reservas.infrastructure.in_memory.exchange_rate import FixedExchangeRate
from reservas.infrastructure.in_memory.feed_source import StaticFeedSource
from reservas.infrastructure.in_memory.notifier import RecordingNotifier
from reservas.infrastructure.in_memory.persistence import InMemoryPersistence
from reservas.infrastructure.persistence.json_file import JsonFilePersistence

logger = logging.getLogger(__name__)


def _identity_matcher(settings: Settings):
    if settings.identity_matching == "exact":
        return ExactIdentityMatcher()
    return SubstringIdentityMatcher()


def build_engine(
    settings: Settings | None = None,
    clock: Clock | None = None,
    persistence: PersistencePort | None = None,
) -> dict[str, Any]:
    """
    Cablea store, adapters y casos de uso.

    Con ``use_in_memory`` (o sin URLs configuradas) se usan los adapters
    in-memory; en otro caso archivo JSON y gateways HTTP.
    """
    settings = settings or get_settings()
    clock = clock or SystemClock()

    if persistence is None:
        if settings.use_in_memory:
            persistence = InMemoryPersistence()
        else:
            persistence = JsonFilePersistence(settings.state_file)

    store = ReservationStore(
        persistence=persistence,
        clock=clock,
        availability=AvailabilityIndex(matcher=_identity_matcher(settings)),
    )

    if settings.feed_url and not settings.use_in_memory:
        feed_source = HttpFeedSource(settings.feed_url, timeout_seconds=settings.feed_timeout_seconds)
    else:
        feed_source = StaticFeedSource()

    if settings.webhook_url and not settings.use_in_memory:
        notifier = WebhookNotifier(settings.webhook_url, timeout_seconds=settings.webhook_timeout_seconds)
    else:
        notifier = RecordingNotifier()

    if settings.use_in_memory:
        exchange_rate = FixedExchangeRate(settings.exchange_rate_fallback)
    else:
        exchange_rate = HttpExchangeRateProvider(
            url=settings.exchange_rate_url,
            fallback=settings.exchange_rate_fallback,
            timeout_seconds=settings.exchange_rate_timeout_seconds,
        )

    logger.info(
        "Motor de reservas inicializado",
        extra={
            "in_memory": settings.use_in_memory,
            "feed": type(feed_source).__name__,
            "notifier": type(notifier).__name__,
        },
    )

    return {
        "store": store,
        "clock": clock,
        "feed_source": feed_source,
        "notifier": notifier,
        "exchange_rate": exchange_rate,
        "sync_feed": SyncFeedUseCase(
            feed_source=feed_source,
            ingestor=FeedIngestor(delimiter=settings.feed_delimiter),
            store=store,
            clock=clock,
            timeout_seconds=settings.feed_timeout_seconds,
        ),
        "publish_changes": PublishChangesUseCase(store=store, notifier=notifier),
        "fleet_report": FleetReportUseCase(
            store=store,
            clock=clock,
            exchange_rate=exchange_rate,
            maintenance_alert_days=settings.maintenance_alert_days,
        ),
    }
