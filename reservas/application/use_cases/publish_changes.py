import logging

from reservas.application.interfaces.reservation_notifier import ReservationNotifier
from reservas.application.reservation_store import ReservationStore
from reservas.domain.errors import ReservationNotFoundError


class PublishChangesUseCase:
    """Envía al webhook una vez cada reservación nueva o modificada desde el último envío."""

    def __init__(self, store: ReservationStore, notifier: ReservationNotifier) -> None:
        self._store = store
        self._notifier = notifier
        self._logger = logging.getLogger(__name__)

    async def execute(self) -> int:
        changes = self._store.drain_changes()
        reservation_ids = list(dict.fromkeys(change.reservation_id for change in changes))

        published = 0
        for reservation_id in reservation_ids:
            try:
                reservation = self._store.get(reservation_id)
            except ReservationNotFoundError:
                self._logger.info(
                    "Reservación eliminada antes de sincronizar",
                    extra={"reservation_id": reservation_id},
                )
                continue
            await self._notifier.publish(reservation)
            published += 1

        if published:
            self._logger.info("Cambios publicados", extra={"published": published})
        return published
