import logging
from decimal import Decimal, InvalidOperation

import httpx
from pybreaker import CircuitBreaker

from reservas.application.interfaces.exchange_rate import ExchangeRateProvider
from reservas.domain.value_objects.money import round_half_up
from reservas.infrastructure.circuit_breaker import CircuitBreakerError, exchange_rate_breaker

logger = logging.getLogger(__name__)

DEFAULT_EXCHANGE_RATE_URL = "https://open.er-api.com/v6/latest/BRL"
DEFAULT_BRL_TO_PYG = Decimal("1550")


class HttpExchangeRateProvider(ExchangeRateProvider):
    """Cotización BRL -> PYG de una API pública, con valor de referencia de respaldo."""

    def __init__(
        self,
        url: str = DEFAULT_EXCHANGE_RATE_URL,
        fallback: Decimal = DEFAULT_BRL_TO_PYG,
        timeout_seconds: float = 5.0,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self._url = url
        self._fallback = Decimal(str(fallback))
        self._timeout = timeout_seconds
        self._breaker = breaker or exchange_rate_breaker

    async def brl_to_pyg(self) -> Decimal:
        try:
            with self._breaker.calling():
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(self._url)
                    response.raise_for_status()
        except (CircuitBreakerError, httpx.HTTPError) as exc:
            logger.warning(
                "Cotización no disponible, se usa el valor de respaldo",
                extra={"url": self._url, "fallback": str(self._fallback), "error": str(exc)},
            )
            return self._fallback

        try:
            rate = Decimal(str(response.json()["rates"]["PYG"]))
        except (ValueError, KeyError, TypeError, InvalidOperation):
            logger.warning(
                "Respuesta de cotización inválida, se usa el valor de respaldo",
                extra={"url": self._url, "fallback": str(self._fallback)},
            )
            return self._fallback

        if rate <= 0:
            return self._fallback
        return round_half_up(rate)
