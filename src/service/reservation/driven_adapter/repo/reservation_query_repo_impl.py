from typing import AsyncContextManager, Callable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.store_guard import bounded_store_call
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_reservation_query_repo import IReservationQueryRepo
from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.enum.reservation_status import ReservationStatus
from src.service.reservation.domain.value_object.reservation_ref import ReservationRef
from src.service.reservation.driven_adapter.model.reservation_model import ReservationModel
from src.service.reservation.driven_adapter.repo.row_mapper import (
    reservation_ref_from_row,
    reservation_ref_statement,
    reservation_to_entity,
)


class ReservationQueryRepoImpl(IReservationQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    async def _get_ref(self, *condition) -> Optional[ReservationRef]:
        async with bounded_store_call('get_reservation_ref'):
            async with self.session_factory() as session:
                row = (
                    await session.execute(reservation_ref_statement().where(*condition))
                ).one_or_none()
        if row is None:
            return None
        model, club_id = row
        return reservation_ref_from_row(model, club_id)

    async def _list(self, *condition) -> List[Reservation]:
        async with bounded_store_call('list_reservations'):
            async with self.session_factory() as session:
                models = await session.scalars(
                    select(ReservationModel).where(*condition).order_by(ReservationModel.id)
                )
                return [reservation_to_entity(model) for model in models]

    @Logger.io
    async def get_ref_by_id(self, *, reservation_id: int) -> Optional[ReservationRef]:
        return await self._get_ref(ReservationModel.id == reservation_id)

    @Logger.io
    async def get_ref_by_token(self, *, token: str) -> Optional[ReservationRef]:
        return await self._get_ref(ReservationModel.token == token)

    @Logger.io
    async def get_by_id(self, *, reservation_id: int) -> Optional[Reservation]:
        async with bounded_store_call('get_reservation'):
            async with self.session_factory() as session:
                model = await session.get(ReservationModel, reservation_id)
                return reservation_to_entity(model) if model else None

    @Logger.io
    async def list_by_owner(
        self, *, principal_id: int, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        conditions = [ReservationModel.principal_id == principal_id]
        if status is not None:
            conditions.append(ReservationModel.status == status.value)
        return await self._list(*conditions)

    @Logger.io
    async def list_by_event(
        self, *, event_id: int, status: Optional[ReservationStatus] = None
    ) -> List[Reservation]:
        conditions = [ReservationModel.event_id == event_id]
        if status is not None:
            conditions.append(ReservationModel.status == status.value)
        return await self._list(*conditions)

    @Logger.io
    async def list_by_category(self, *, category_id: int) -> List[Reservation]:
        return await self._list(ReservationModel.category_id == category_id)
