import logging
import time

import httpx
from pybreaker import CircuitBreaker

from reservas.application.interfaces.feed_source import FeedSource
from reservas.domain.errors import IngestError
from reservas.infrastructure.circuit_breaker import CircuitBreakerError, feed_breaker

logger = logging.getLogger(__name__)


class HttpFeedSource(FeedSource):
    def __init__(
        self,
        url: str,
        timeout_seconds: float = 15.0,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        """
        Descarga el export CSV publicado de la planilla de reservas.

        Args:
            url: URL pública del export (CSV).
            timeout_seconds: Timeout de la petición HTTP.
            breaker: Circuit breaker a usar (por defecto el compartido del feed).
        """
        self._url = url
        self._timeout = timeout_seconds
        self._breaker = breaker or feed_breaker

    async def fetch_text(self) -> str:
        # Parámetro anti-caché: el export publicado se cachea agresivamente
        params = {"t": str(int(time.time() * 1000))}

        try:
            with self._breaker.calling():
                async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True) as client:
                    response = await client.get(self._url, params=params)
                    response.raise_for_status()
        except CircuitBreakerError as exc:
            logger.error(
                "Feed circuit breaker is open - service unavailable",
                extra={"url": self._url, "circuit_state": str(exc)},
            )
            raise IngestError("Feed temporalmente no disponible", "CIRCUIT_OPEN") from exc
        except httpx.TimeoutException as exc:
            logger.warning("Feed request timeout", extra={"url": self._url, "timeout": self._timeout})
            raise IngestError(f"El feed no respondió en {self._timeout}s", "TIMEOUT") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Feed respondió con error",
                extra={"url": self._url, "status_code": exc.response.status_code},
            )
            raise IngestError(
                f"El feed respondió HTTP {exc.response.status_code}", "NON_2XX"
            ) from exc
        except httpx.HTTPError as exc:
            logger.error("Feed HTTP error", exc_info=exc, extra={"url": self._url})
            raise IngestError(f"Error de transporte: {exc}", "HTTP_ERROR") from exc

        logger.info(
            "Feed descargado",
            extra={"url": self._url, "status_code": response.status_code, "bytes": len(response.content)},
        )
        return response.text
