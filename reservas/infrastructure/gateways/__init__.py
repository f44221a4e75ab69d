"""Adapters HTTP hacia servicios externos."""

from reservas.infrastructure.gateways.exchange_rate_http import HttpExchangeRateProvider
from reservas.infrastructure.gateways.http_feed_source import HttpFeedSource
from reservas.infrastructure.gateways.webhook_notifier import (
    ReservationWebhookPayload,
    WebhookNotifier,
)

__all__ = [
    "HttpFeedSource",
    "WebhookNotifier",
    "ReservationWebhookPayload",
    "HttpExchangeRateProvider",
]
