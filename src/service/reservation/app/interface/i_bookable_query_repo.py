from abc import ABC, abstractmethod
from typing import Optional

from src.service.reservation.domain.value_object.bookable_ref import CategoryRef, EventRef


class IBookableQueryRepo(ABC):
    """Repository interface for event and category reads"""

    @abstractmethod
    async def get_category_ref(self, *, category_id: int) -> Optional[CategoryRef]:
        pass

    @abstractmethod
    async def get_event_ref(self, *, event_id: int) -> Optional[EventRef]:
        pass
