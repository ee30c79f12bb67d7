"""
Read-side use cases over the in-memory store
"""

import pytest

from src.platform.exception.exceptions import AccessDeniedError, NotFoundError
from src.service.reservation.domain.enum import ReservationStatus


@pytest.fixture
async def bookings(world, use_cases):
    """member holds one confirmed and one cancelled reservation; x holds one used."""
    roomy = world.add_category(capacity=10)

    async def book(member_id):
        return await use_cases.create.execute(
            principal_id=member_id, event_id=world.event_id, category_id=roomy
        )

    kept = await book(world.member_id)
    dropped = await book(world.member_id)
    used = await book(world.member_x_id)
    await use_cases.cancel.execute(principal_id=world.member_id, reservation_id=dropped.id)
    await use_cases.check_in.execute(principal_id=world.manager_id, token=used.token)
    return {'category_id': roomy, 'kept': kept, 'dropped': dropped, 'used': used}


class TestGetReservation:
    @pytest.mark.asyncio
    async def test_owner_and_manager_can_read(self, world, use_cases, bookings):
        for viewer in (world.member_id, world.manager_id):
            reservation = await use_cases.get_reservation.execute(
                principal_id=viewer, reservation_id=bookings['kept'].id
            )
            assert reservation.id == bookings['kept'].id

    @pytest.mark.asyncio
    async def test_missing_and_foreign_look_the_same(self, world, use_cases, bookings):
        with pytest.raises(AccessDeniedError) as missing:
            await use_cases.get_reservation.execute(
                principal_id=world.member_y_id, reservation_id=9999
            )
        with pytest.raises(AccessDeniedError) as foreign:
            await use_cases.get_reservation.execute(
                principal_id=world.member_y_id, reservation_id=bookings['kept'].id
            )
        assert missing.value.message == foreign.value.message


class TestListMyReservations:
    @pytest.mark.asyncio
    @pytest.mark.parametrize('status_filter', [None, '', 'all'])
    async def test_all_statuses(self, world, use_cases, bookings, status_filter):
        mine = await use_cases.list_mine.execute(
            principal_id=world.member_id, status_filter=status_filter
        )
        assert [r.id for r in mine] == [bookings['kept'].id, bookings['dropped'].id]

    @pytest.mark.asyncio
    async def test_filter_by_status(self, world, use_cases, bookings):
        cancelled = await use_cases.list_mine.execute(
            principal_id=world.member_id, status_filter='cancelled'
        )
        assert [r.status for r in cancelled] == [ReservationStatus.CANCELLED]

    @pytest.mark.asyncio
    async def test_unknown_status_is_empty(self, world, use_cases, bookings):
        assert await use_cases.list_mine.execute(
            principal_id=world.member_id, status_filter='pending'
        ) == []


class TestManagerListings:
    @pytest.mark.asyncio
    async def test_event_listing(self, world, use_cases, bookings):
        everything = await use_cases.list_event.execute(
            principal_id=world.manager_id, event_id=world.event_id
        )
        used = await use_cases.list_event.execute(
            principal_id=world.manager_id, event_id=world.event_id, status_filter='used'
        )

        assert len(everything) == 3
        assert [r.id for r in used] == [bookings['used'].id]

    @pytest.mark.asyncio
    async def test_category_listing(self, world, use_cases, bookings):
        listed = await use_cases.list_category.execute(
            principal_id=world.admin_id, category_id=bookings['category_id']
        )
        assert [r.id for r in listed] == sorted(r.id for r in listed)
        assert len(listed) == 3

    @pytest.mark.asyncio
    async def test_members_cannot_list(self, world, use_cases, bookings):
        with pytest.raises(AccessDeniedError):
            await use_cases.list_event.execute(
                principal_id=world.member_id, event_id=world.event_id
            )
        with pytest.raises(AccessDeniedError):
            await use_cases.list_category.execute(
                principal_id=world.other_manager_id, category_id=bookings['category_id']
            )

    @pytest.mark.asyncio
    async def test_unknown_event(self, world, use_cases):
        with pytest.raises(NotFoundError):
            await use_cases.list_event.execute(principal_id=world.manager_id, event_id=404)


class TestAvailability:
    @pytest.mark.asyncio
    async def test_counts_confirmed_only(self, world, use_cases, bookings):
        availability = await use_cases.availability.execute(
            principal_id=world.member_y_id, category_id=bookings['category_id']
        )

        assert availability.capacity == 10
        assert availability.confirmed_count == 1
        assert availability.available == 9

    @pytest.mark.asyncio
    async def test_outsider_is_denied(self, world, use_cases):
        with pytest.raises(AccessDeniedError):
            await use_cases.availability.execute(
                principal_id=world.outsider_id, category_id=world.category_id
            )
