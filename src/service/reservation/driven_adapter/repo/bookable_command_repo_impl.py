from datetime import datetime
from typing import AsyncContextManager, Callable

import attrs
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.store_guard import bounded_store_call
from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_bookable_command_repo import IBookableCommandRepo
from src.service.reservation.domain.admission_rules import check_capacity_change, check_removable
from src.service.reservation.domain.value_object.bookable_ref import CategoryRef
from src.service.reservation.driven_adapter.model.event_model import CategoryModel, EventModel
from src.service.reservation.driven_adapter.model.reservation_model import ReservationModel
from src.service.reservation.driven_adapter.repo.row_mapper import (
    CONFIRMED,
    confirmed_count_in_category,
    load_category_ref,
)


class BookableCommandRepoImpl(IBookableCommandRepo):
    """
    Capacity-affecting writes.

    Each method takes `SELECT ... FOR UPDATE` on the category rows it touches
    before counting, the same lock admissions take. Counts are read in a
    separate statement after the lock is held so they see every commit that
    happened while waiting.
    """

    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    async def _lock_category(session: AsyncSession, category_id: int) -> None:
        locked = await session.scalar(
            select(CategoryModel.id).where(CategoryModel.id == category_id).with_for_update()
        )
        if locked is None:
            raise NotFoundError('Category not found')

    @Logger.io
    async def set_category_capacity(self, *, category_id: int, new_capacity: int) -> CategoryRef:
        async with bounded_store_call('set_category_capacity'):
            async with self.session_factory() as session, session.begin():
                await self._lock_category(session, category_id)
                category = await load_category_ref(session, category_id)
                if category is None:
                    raise NotFoundError('Category not found')

                check_capacity_change(category=category, new_capacity=new_capacity)

                await session.execute(
                    update(CategoryModel)
                    .where(CategoryModel.id == category_id)
                    .values(capacity=new_capacity)
                )
        return attrs.evolve(category, capacity=new_capacity)

    @Logger.io
    async def delete_category(self, *, category_id: int) -> None:
        async with bounded_store_call('delete_category'):
            async with self.session_factory() as session, session.begin():
                await self._lock_category(session, category_id)
                confirmed = await session.scalar(confirmed_count_in_category(category_id))
                check_removable(confirmed_count=confirmed or 0, resource='category')

                await session.execute(delete(CategoryModel).where(CategoryModel.id == category_id))

    @Logger.io
    async def delete_event(self, *, event_id: int) -> None:
        async with bounded_store_call('delete_event'):
            async with self.session_factory() as session, session.begin():
                event_id_locked = await session.scalar(
                    select(EventModel.id).where(EventModel.id == event_id).with_for_update()
                )
                if event_id_locked is None:
                    raise NotFoundError('Event not found')

                # Fixed id order keeps concurrent multi-category locks deadlock free
                category_ids = list(
                    await session.scalars(
                        select(CategoryModel.id)
                        .where(CategoryModel.event_id == event_id)
                        .order_by(CategoryModel.id)
                        .with_for_update()
                    )
                )

                confirmed = 0
                if category_ids:
                    confirmed = await session.scalar(
                        select(func.count(ReservationModel.id)).where(
                            ReservationModel.category_id.in_(category_ids),
                            ReservationModel.status == CONFIRMED,
                        )
                    )
                check_removable(confirmed_count=confirmed or 0, resource='event')

                await session.execute(
                    delete(CategoryModel).where(CategoryModel.event_id == event_id)
                )
                await session.execute(delete(EventModel).where(EventModel.id == event_id))

    @Logger.io
    async def deactivate_event(self, *, event_id: int, deactivated_at: datetime) -> None:
        async with bounded_store_call('deactivate_event'):
            async with self.session_factory() as session, session.begin():
                result = await session.execute(
                    update(EventModel)
                    .where(EventModel.id == event_id, EventModel.is_active.is_(True))
                    .values(is_active=False, deactivated_at=deactivated_at)
                )
                if result.rowcount:  # type: ignore[attr-defined]
                    return

                exists = await session.scalar(
                    select(EventModel.id).where(EventModel.id == event_id)
                )
                if exists is None:
                    raise NotFoundError('Event not found')
