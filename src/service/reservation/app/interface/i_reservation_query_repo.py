from abc import ABC, abstractmethod
from typing import List, Optional

from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.enum.reservation_status import ReservationStatus
from src.service.reservation.domain.value_object.reservation_ref import ReservationRef


class IReservationQueryRepo(ABC):
    """Repository interface for reservation read operations"""

    @abstractmethod
    async def get_ref_by_id(self, *, reservation_id: int) -> Optional[ReservationRef]:
        pass

    @abstractmethod
    async def get_ref_by_token(self, *, token: str) -> Optional[ReservationRef]:
        pass

    @abstractmethod
    async def get_by_id(self, *, reservation_id: int) -> Optional[Reservation]:
        pass

    @abstractmethod
    async def list_by_owner(
        self, *, principal_id: int, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        pass

    @abstractmethod
    async def list_by_event(
        self, *, event_id: int, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        pass

    @abstractmethod
    async def list_by_category(self, *, category_id: int) -> List[Reservation]:
        pass
