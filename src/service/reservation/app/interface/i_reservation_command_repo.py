from abc import ABC, abstractmethod
from datetime import datetime

from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.enum.reservation_status import ReservationStatus
from src.service.reservation.domain.value_object.reservation_policy import ReservationPolicy


class IReservationCommandRepo(ABC):
    """Repository interface for reservation writes"""

    @abstractmethod
    async def admit(
        self, *, reservation: Reservation, policy: ReservationPolicy, now: datetime
    ) -> Reservation:
        """
        Count-check-and-insert as one atomic step under the category lock.

        Returns the stored reservation with its id. Raises CategoryFullError,
        EventClosedError, DuplicateReservationError, ReservationLimitReachedError,
        NotFoundError.
        """
        pass

    @abstractmethod
    async def transition(
        self, *, reservation_id: int, target: ReservationStatus
    ) -> Reservation:
        """
        Move a CONFIRMED reservation to `target` with a conditional update.

        Raises the matching AlreadyTerminalError when the row already left
        CONFIRMED, NotFoundError when it does not exist.
        """
        pass
