import logging
from datetime import date, time
from decimal import Decimal

import httpx
from pybreaker import CircuitBreaker
from pydantic import BaseModel, ConfigDict, Field

from reservas.application.interfaces.reservation_notifier import ReservationNotifier
from reservas.domain.entities.reservation import Reservation
from reservas.domain.services.dates import DateFormat, format_day
from reservas.domain.value_objects.money import format_brl
from reservas.infrastructure.circuit_breaker import CircuitBreakerError, webhook_breaker

logger = logging.getLogger(__name__)


def _stamp(day: date, moment: time | None) -> str:
    text = format_day(day, DateFormat.DMY)
    return f"{text} {moment:%H:%M}" if moment is not None else text


class ReservationWebhookPayload(BaseModel):
    """Cuerpo JSON que recibe la planilla externa por cada reservación."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    client_name: str = Field(alias="cliente")
    vehicle_label: str = Field(alias="auto")
    start_date: str = Field(alias="inicio")
    end_date: str = Field(alias="fin")
    total: Decimal
    total_formatted: str = Field(alias="totalFormatted")
    status: str
    origin: str
    notes: str = ""
    email: str | None = None
    document_id: str | None = Field(default=None, alias="documento")
    phone: str | None = Field(default=None, alias="celular")

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> "ReservationWebhookPayload":
        return cls(
            id=reservation.id,
            client_name=reservation.client_name,
            vehicle_label=reservation.vehicle_label,
            start_date=_stamp(reservation.start_date, reservation.pickup_time),
            end_date=_stamp(reservation.end_date, reservation.return_time),
            total=reservation.total_amount,
            total_formatted=format_brl(reservation.total_amount),
            status=reservation.status.value,
            origin=reservation.origin.value,
            notes=reservation.notes,
            email=reservation.email,
            document_id=reservation.document_id,
            phone=reservation.phone,
        )


class WebhookNotifier(ReservationNotifier):
    def __init__(
        self,
        url: str,
        timeout_seconds: float = 10.0,
        breaker: CircuitBreaker | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout_seconds
        self._breaker = breaker or webhook_breaker

    async def publish(self, reservation: Reservation) -> None:
        """
        POST de la reservación al webhook, protegido por Circuit Breaker.

        La respuesta se ignora. Los fallos se registran y no se propagan: la
        sincronización saliente nunca bloquea ni revierte una operación local.
        """
        payload = ReservationWebhookPayload.from_reservation(reservation).model_dump(
            mode="json", by_alias=True
        )

        try:
            with self._breaker.calling():
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._url, json=payload)
                    response.raise_for_status()
        except CircuitBreakerError as exc:
            logger.error(
                "Webhook circuit breaker is open - service unavailable",
                extra={"reservation_id": reservation.id, "circuit_state": str(exc)},
            )
            return
        except httpx.TimeoutException:
            logger.warning(
                "Webhook request timeout",
                extra={"reservation_id": reservation.id, "timeout": self._timeout},
            )
            return
        except httpx.HTTPError as exc:
            logger.error(
                "Webhook HTTP error",
                exc_info=exc,
                extra={"reservation_id": reservation.id},
            )
            return

        logger.info(
            "Reservación publicada en el webhook",
            extra={"reservation_id": reservation.id, "status_code": response.status_code},
        )
