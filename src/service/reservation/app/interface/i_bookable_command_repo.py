from abc import ABC, abstractmethod
from datetime import datetime

from src.service.reservation.domain.value_object.bookable_ref import CategoryRef


class IBookableCommandRepo(ABC):
    """
    Repository interface for capacity-affecting writes on events and categories

    Every method re-reads the confirmed count under the same category lock
    that admissions take, so none of them can race an admission.
    """

    @abstractmethod
    async def set_category_capacity(self, *, category_id: int, new_capacity: int) -> CategoryRef:
        """Raises CapacityBelowOccupancyError, NotFoundError"""
        pass

    @abstractmethod
    async def delete_category(self, *, category_id: int) -> None:
        """Raises HasActiveReservationsError, NotFoundError"""
        pass

    @abstractmethod
    async def delete_event(self, *, event_id: int) -> None:
        """Deletes the event and all of its categories. Raises HasActiveReservationsError, NotFoundError"""
        pass

    @abstractmethod
    async def deactivate_event(self, *, event_id: int, deactivated_at: datetime) -> None:
        """Idempotent; an already inactive event keeps its first deactivation time"""
        pass
