from reservas.application.interfaces.reservation_notifier import ReservationNotifier
from reservas.domain.entities.reservation import Reservation


class RecordingNotifier(ReservationNotifier):
    """Acumula lo publicado en lugar de enviarlo."""

    def __init__(self) -> None:
        self.published: list[Reservation] = []

    async def publish(self, reservation: Reservation) -> None:
        self.published.append(reservation)

    @property
    def published_ids(self) -> list[str]:
        return [reservation.id for reservation in self.published]
