from abc import ABC, abstractmethod

from reservas.domain.entities.reservation import Reservation


class ReservationNotifier(ABC):
    @abstractmethod
    async def publish(self, reservation: Reservation) -> None:
        """
        Pushes a new or changed reservation to the external sheet (fire-and-forget).
        """
        pass
