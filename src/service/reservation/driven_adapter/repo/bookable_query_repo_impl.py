from typing import AsyncContextManager, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.store_guard import bounded_store_call
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_bookable_query_repo import IBookableQueryRepo
from src.service.reservation.domain.value_object.bookable_ref import CategoryRef, EventRef
from src.service.reservation.driven_adapter.repo.row_mapper import (
    load_category_ref,
    load_event_ref,
)


class BookableQueryRepoImpl(IBookableQueryRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @Logger.io
    async def get_category_ref(self, *, category_id: int) -> Optional[CategoryRef]:
        async with bounded_store_call('get_category_ref'):
            async with self.session_factory() as session:
                return await load_category_ref(session, category_id)

    @Logger.io
    async def get_event_ref(self, *, event_id: int) -> Optional[EventRef]:
        async with bounded_store_call('get_event_ref'):
            async with self.session_factory() as session:
                return await load_event_ref(session, event_id)
