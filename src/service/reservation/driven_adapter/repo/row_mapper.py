"""
Shared statements and row -> domain conversions for the SQL repositories
"""

from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.enum.reservation_status import ReservationStatus
from src.service.reservation.domain.value_object.bookable_ref import CategoryRef, EventRef
from src.service.reservation.domain.value_object.reservation_ref import ReservationRef
from src.service.reservation.driven_adapter.model.club_model import ClubModel
from src.service.reservation.driven_adapter.model.event_model import CategoryModel, EventModel
from src.service.reservation.driven_adapter.model.reservation_model import ReservationModel


CONFIRMED = ReservationStatus.CONFIRMED.value


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; everything in the domain is UTC-aware."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def reservation_to_entity(model: ReservationModel) -> Reservation:
    return Reservation(
        id=model.id,
        principal_id=model.principal_id,
        event_id=model.event_id,
        category_id=model.category_id,
        status=ReservationStatus(model.status),
        token=model.token,
        created_at=as_utc(model.created_at),
        updated_at=as_utc(model.updated_at),
    )


def reservation_ref_from_row(model: ReservationModel, club_id: Optional[int]) -> ReservationRef:
    return ReservationRef(
        id=model.id,
        owner_id=model.principal_id,
        event_id=model.event_id,
        category_id=model.category_id,
        organizer_club_id=club_id,
        status=ReservationStatus(model.status),
        token=model.token,
    )


def reservation_ref_statement() -> Select[Any]:
    # Outer join: a reservation outlives its deleted event, but then only its owner can see it
    return select(ReservationModel, EventModel.club_id).join(
        EventModel, EventModel.id == ReservationModel.event_id, isouter=True
    )


def confirmed_count_in_category(category_id: Any) -> Select[Any]:
    return select(func.count(ReservationModel.id)).where(
        ReservationModel.category_id == category_id,
        ReservationModel.status == CONFIRMED,
    )


def category_ref_statement(category_id: int) -> Select[Any]:
    confirmed = (
        confirmed_count_in_category(CategoryModel.id).correlate(CategoryModel).scalar_subquery()
    )
    return (
        select(CategoryModel, EventModel, ClubModel.is_active, confirmed)
        .join(EventModel, EventModel.id == CategoryModel.event_id)
        .join(ClubModel, ClubModel.id == EventModel.club_id)
        .where(CategoryModel.id == category_id)
    )


async def load_category_ref(session: AsyncSession, category_id: int) -> Optional[CategoryRef]:
    row = (await session.execute(category_ref_statement(category_id))).one_or_none()
    if row is None:
        return None
    category, event, organizer_active, confirmed_count = row
    return CategoryRef(
        id=category.id,
        event_id=category.event_id,
        name=category.name,
        capacity=category.capacity,
        confirmed_count=confirmed_count or 0,
        organizer_club_id=event.club_id,
        event_active=event.is_active,
        organizer_active=organizer_active,
        event_start_at=as_utc(event.start_at),  # type: ignore[arg-type]
        event_end_at=as_utc(event.end_at),  # type: ignore[arg-type]
    )


async def load_event_ref(session: AsyncSession, event_id: int) -> Optional[EventRef]:
    row = (
        await session.execute(
            select(EventModel, ClubModel.is_active)
            .join(ClubModel, ClubModel.id == EventModel.club_id)
            .where(EventModel.id == event_id)
        )
    ).one_or_none()
    if row is None:
        return None
    event, organizer_active = row
    return EventRef(
        id=event.id,
        organizer_club_id=event.club_id,
        name=event.name,
        start_at=as_utc(event.start_at),  # type: ignore[arg-type]
        end_at=as_utc(event.end_at),  # type: ignore[arg-type]
        is_active=event.is_active,
        organizer_active=organizer_active,
        deactivated_at=as_utc(event.deactivated_at),
    )
