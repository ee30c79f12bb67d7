from datetime import datetime, timezone
from typing import AsyncContextManager, Callable

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.database.store_guard import bounded_store_call
from src.platform.exception.exceptions import DuplicateReservationError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.reservation.app.interface.i_reservation_command_repo import (
    IReservationCommandRepo,
)
from src.service.reservation.domain.admission_rules import OwnerOccupancy, check_admission
from src.service.reservation.domain.entity.reservation_entity import (
    Reservation,
    raise_for_terminal,
)
from src.service.reservation.domain.enum.reservation_status import ReservationStatus
from src.service.reservation.domain.value_object.reservation_policy import ReservationPolicy
from src.service.reservation.driven_adapter.model.event_model import CategoryModel
from src.service.reservation.driven_adapter.model.reservation_model import ReservationModel
from src.service.reservation.driven_adapter.repo.row_mapper import (
    CONFIRMED,
    load_category_ref,
    reservation_to_entity,
)


class ReservationCommandRepoImpl(IReservationCommandRepo):
    def __init__(self, session_factory: Callable[..., AsyncContextManager[AsyncSession]]):
        self.session_factory = session_factory

    @staticmethod
    async def _owner_occupancy(
        session: AsyncSession, *, reservation: Reservation
    ) -> OwnerOccupancy:
        rows = await session.execute(
            select(ReservationModel.category_id, func.count(ReservationModel.id))
            .where(
                ReservationModel.principal_id == reservation.principal_id,
                ReservationModel.event_id == reservation.event_id,
                ReservationModel.status == CONFIRMED,
            )
            .group_by(ReservationModel.category_id)
        )
        per_category = {category_id: count for category_id, count in rows.all()}
        return OwnerOccupancy(
            in_category=per_category.get(reservation.category_id, 0),
            in_event=sum(per_category.values()),
        )

    @Logger.io
    async def admit(
        self, *, reservation: Reservation, policy: ReservationPolicy, now: datetime
    ) -> Reservation:
        async with bounded_store_call('admit'):
            async with self.session_factory() as session, session.begin():
                # Serializes every admission, capacity change and deletion of this category
                locked = await session.scalar(
                    select(CategoryModel.id)
                    .where(CategoryModel.id == reservation.category_id)
                    .with_for_update()
                )
                if locked is None:
                    raise NotFoundError('Category not found')

                # Fresh statement after the lock: the count includes commits we waited on
                category = await load_category_ref(session, reservation.category_id)
                if category is None or category.event_id != reservation.event_id:
                    raise NotFoundError('Category not found for this event')

                owner = (
                    await self._owner_occupancy(session, reservation=reservation)
                    if policy.needs_owner_counts
                    else OwnerOccupancy()
                )
                check_admission(category=category, owner=owner, policy=policy, now=now)

                model = ReservationModel(
                    principal_id=reservation.principal_id,
                    event_id=reservation.event_id,
                    category_id=reservation.category_id,
                    status=ReservationStatus.CONFIRMED.value,
                    token=reservation.token,
                    created_at=reservation.created_at or now,
                    updated_at=reservation.updated_at or now,
                )
                session.add(model)
                try:
                    await session.flush()
                except IntegrityError as e:
                    raise DuplicateReservationError('Reservation already exists') from e

                return reservation_to_entity(model)

    @Logger.io
    async def transition(
        self, *, reservation_id: int, target: ReservationStatus
    ) -> Reservation:
        async with bounded_store_call(f'transition_to_{target}'):
            async with self.session_factory() as session, session.begin():
                result = await session.execute(
                    update(ReservationModel)
                    .where(
                        ReservationModel.id == reservation_id,
                        ReservationModel.status == CONFIRMED,
                    )
                    .values(status=target.value, updated_at=datetime.now(timezone.utc))
                    .execution_options(synchronize_session=False)
                )

                if not result.rowcount:  # type: ignore[attr-defined]
                    # Someone else moved it first; report what it became
                    current = await session.scalar(
                        select(ReservationModel.status).where(
                            ReservationModel.id == reservation_id
                        )
                    )
                    if current is None:
                        raise NotFoundError('Reservation not found')
                    raise_for_terminal(ReservationStatus(current))

                model = await session.scalar(
                    select(ReservationModel).where(ReservationModel.id == reservation_id)
                )
                return reservation_to_entity(model)  # type: ignore[arg-type]
