"""
Circuit Breakers para las llamadas HTTP salientes.

- CLOSED: operación normal, las llamadas pasan.
- OPEN: demasiados fallos seguidos, las llamadas fallan de inmediato.
- HALF_OPEN: pasado reset_timeout se deja pasar una llamada de prueba.

pybreaker no soporta corrutinas de forma nativa; los adapters envuelven el
``await`` con ``breaker.calling()``, que registra el éxito o el fallo del
bloque completo.
"""

import asyncio
import logging

from pybreaker import CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

logger = logging.getLogger(__name__)

DEFAULT_FAIL_MAX = 5
DEFAULT_RESET_TIMEOUT = 60


class StateChangeLogger(CircuitBreakerListener):
    """Deja en el log cada cambio de estado del breaker."""

    def __init__(self, name: str) -> None:
        self.name = name

    def state_change(self, cb, old_state, new_state) -> None:
        if old_state is not None and old_state.name == new_state.name:
            return
        logger.warning(
            "Circuit breaker state changed",
            extra={
                "breaker_name": self.name,
                "old_state": old_state.name if old_state else None,
                "new_state": new_state.name,
            },
        )


def build_breaker(
    name: str,
    fail_max: int = DEFAULT_FAIL_MAX,
    reset_timeout: int = DEFAULT_RESET_TIMEOUT,
) -> CircuitBreaker:
    # Un abort del operador no es una falla del servicio remoto
    return CircuitBreaker(
        fail_max=fail_max,
        reset_timeout=reset_timeout,
        exclude=[asyncio.CancelledError],
        name=f"{name}_circuit_breaker",
        listeners=[StateChangeLogger(name)],
    )


feed_breaker = build_breaker("feed")
webhook_breaker = build_breaker("webhook")
exchange_rate_breaker = build_breaker("exchange_rate")


__all__ = [
    "build_breaker",
    "feed_breaker",
    "webhook_breaker",
    "exchange_rate_breaker",
    "CircuitBreakerError",
]
