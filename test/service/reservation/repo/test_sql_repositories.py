"""
Integration tests for the SQLAlchemy repositories

Test Focus:
1. Principal snapshot picks the first affiliation; role lookup needs an affiliation
2. Category refs carry a live confirmed count
3. Admission guards and token uniqueness
4. Conditional transitions report the terminal state they lost to
5. Capacity and deletion guards, deactivation idempotence
"""

from datetime import datetime, timezone

import attrs
import pytest

from src.platform.exception.exceptions import (
    AlreadyCancelledError,
    AlreadyUsedError,
    CapacityBelowOccupancyError,
    CategoryFullError,
    DuplicateReservationError,
    HasActiveReservationsError,
    NotFoundError,
)
from src.service.reservation.domain.entity.reservation_entity import Reservation
from src.service.reservation.domain.enum import ReservationStatus
from src.service.reservation.domain.value_object.reservation_policy import ReservationPolicy


NOW = datetime.now(timezone.utc)


async def _admit(repos, seed, principal_id=None, *, category_id=None, policy=None):
    reservation = Reservation.create(
        principal_id=principal_id or seed.member_id,
        event_id=seed.event_id,
        category_id=category_id or seed.category_id,
    )
    return await repos.reservation_command.admit(
        reservation=reservation, policy=policy or ReservationPolicy(), now=NOW
    )


class TestPrincipalQueryRepo:
    @pytest.mark.asyncio
    async def test_snapshot_uses_first_affiliation(self, repos, seed):
        snapshot = await repos.principal_query.get_principal_snapshot(principal_id=seed.manager_id)

        assert snapshot.role == 'manager'
        assert snapshot.is_enabled
        assert snapshot.first_affiliation_club_id == seed.club_id

    @pytest.mark.asyncio
    async def test_unknown_principal(self, repos, seed):
        assert await repos.principal_query.get_principal_snapshot(principal_id=999) is None

    @pytest.mark.asyncio
    async def test_role_in_club_requires_affiliation(self, repos, seed):
        assert (
            await repos.principal_query.get_role_in_club(
                principal_id=seed.member_id, club_id=seed.club_id
            )
            == 'member'
        )
        assert (
            await repos.principal_query.get_role_in_club(
                principal_id=seed.member_id, club_id=seed.other_club_id
            )
            is None
        )


class TestBookableQueryRepo:
    @pytest.mark.asyncio
    async def test_category_ref(self, repos, seed):
        await _admit(repos, seed)

        category = await repos.bookable_query.get_category_ref(category_id=seed.category_id)

        assert category.event_id == seed.event_id
        assert category.organizer_club_id == seed.club_id
        assert (category.capacity, category.confirmed_count) == (2, 1)
        assert category.event_end_at.tzinfo is not None
        assert category.is_bookable_at(NOW)

    @pytest.mark.asyncio
    async def test_event_ref(self, repos, seed):
        event = await repos.bookable_query.get_event_ref(event_id=seed.event_id)

        assert event.organizer_club_id == seed.club_id
        assert event.is_active and event.organizer_active
        assert await repos.bookable_query.get_event_ref(event_id=999) is None


class TestReservationCommandRepo:
    @pytest.mark.asyncio
    async def test_admit_until_full(self, repos, seed):
        first = await _admit(repos, seed)
        second = await _admit(repos, seed, seed.manager_id)

        assert first.id != second.id
        assert first.status is ReservationStatus.CONFIRMED
        with pytest.raises(CategoryFullError):
            await _admit(repos, seed, seed.other_member_id)

    @pytest.mark.asyncio
    async def test_zero_capacity(self, repos, seed):
        with pytest.raises(CategoryFullError):
            await _admit(repos, seed, category_id=seed.empty_category_id)

    @pytest.mark.asyncio
    async def test_duplicate_policy(self, repos, seed):
        strict = ReservationPolicy(allow_duplicate_active=False)
        await _admit(repos, seed, policy=strict)

        with pytest.raises(DuplicateReservationError):
            await _admit(repos, seed, policy=strict)

    @pytest.mark.asyncio
    async def test_token_collision_is_duplicate(self, repos, seed):
        first = await _admit(repos, seed)
        clash = attrs.evolve(
            Reservation.create(
                principal_id=seed.manager_id,
                event_id=seed.event_id,
                category_id=seed.category_id,
            ),
            token=first.token,
        )

        with pytest.raises(DuplicateReservationError):
            await repos.reservation_command.admit(
                reservation=clash, policy=ReservationPolicy(), now=NOW
            )

    @pytest.mark.asyncio
    async def test_admit_into_unknown_category(self, repos, seed):
        with pytest.raises(NotFoundError):
            await _admit(repos, seed, category_id=999)

    @pytest.mark.asyncio
    async def test_transition_once(self, repos, seed):
        booked = await _admit(repos, seed)

        used = await repos.reservation_command.transition(
            reservation_id=booked.id, target=ReservationStatus.USED
        )
        assert used.status is ReservationStatus.USED

        with pytest.raises(AlreadyUsedError):
            await repos.reservation_command.transition(
                reservation_id=booked.id, target=ReservationStatus.USED
            )
        with pytest.raises(AlreadyUsedError):
            await repos.reservation_command.transition(
                reservation_id=booked.id, target=ReservationStatus.CANCELLED
            )

    @pytest.mark.asyncio
    async def test_cancel_releases_capacity(self, repos, seed):
        first = await _admit(repos, seed)
        await _admit(repos, seed, seed.manager_id)

        await repos.reservation_command.transition(
            reservation_id=first.id, target=ReservationStatus.CANCELLED
        )
        with pytest.raises(AlreadyCancelledError):
            await repos.reservation_command.transition(
                reservation_id=first.id, target=ReservationStatus.CANCELLED
            )

        third = await _admit(repos, seed, seed.other_member_id)
        assert third.status is ReservationStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_transition_unknown(self, repos, seed):
        with pytest.raises(NotFoundError):
            await repos.reservation_command.transition(
                reservation_id=999, target=ReservationStatus.CANCELLED
            )


class TestReservationQueryRepo:
    @pytest.mark.asyncio
    async def test_refs_by_id_and_token(self, repos, seed):
        booked = await _admit(repos, seed)

        by_id = await repos.reservation_query.get_ref_by_id(reservation_id=booked.id)
        by_token = await repos.reservation_query.get_ref_by_token(token=booked.token)

        assert by_id == by_token
        assert by_id.owner_id == seed.member_id
        assert by_id.organizer_club_id == seed.club_id
        assert await repos.reservation_query.get_ref_by_token(token='missing') is None

    @pytest.mark.asyncio
    async def test_listings(self, repos, seed):
        first = await _admit(repos, seed)
        second = await _admit(repos, seed, seed.manager_id)
        await repos.reservation_command.transition(
            reservation_id=second.id, target=ReservationStatus.CANCELLED
        )

        mine = await repos.reservation_query.list_by_owner(principal_id=seed.member_id)
        cancelled = await repos.reservation_query.list_by_event(
            event_id=seed.event_id, status=ReservationStatus.CANCELLED
        )
        in_category = await repos.reservation_query.list_by_category(
            category_id=seed.category_id
        )

        assert [r.id for r in mine] == [first.id]
        assert [r.id for r in cancelled] == [second.id]
        assert [r.id for r in in_category] == [first.id, second.id]


class TestBookableCommandRepo:
    @pytest.mark.asyncio
    async def test_capacity_floor(self, repos, seed):
        await _admit(repos, seed)
        await _admit(repos, seed, seed.manager_id)

        with pytest.raises(CapacityBelowOccupancyError):
            await repos.bookable_command.set_category_capacity(
                category_id=seed.category_id, new_capacity=1
            )

        updated = await repos.bookable_command.set_category_capacity(
            category_id=seed.category_id, new_capacity=5
        )
        assert updated.capacity == 5
        stored = await repos.bookable_query.get_category_ref(category_id=seed.category_id)
        assert stored.capacity == 5

    @pytest.mark.asyncio
    async def test_delete_category_guard(self, repos, seed):
        await _admit(repos, seed)

        with pytest.raises(HasActiveReservationsError):
            await repos.bookable_command.delete_category(category_id=seed.category_id)

        await repos.bookable_command.delete_category(category_id=seed.empty_category_id)
        assert await repos.bookable_query.get_category_ref(
            category_id=seed.empty_category_id
        ) is None

    @pytest.mark.asyncio
    async def test_delete_event_keeps_history(self, repos, seed):
        booked = await _admit(repos, seed)
        with pytest.raises(HasActiveReservationsError):
            await repos.bookable_command.delete_event(event_id=seed.event_id)

        await repos.reservation_command.transition(
            reservation_id=booked.id, target=ReservationStatus.CANCELLED
        )
        await repos.bookable_command.delete_event(event_id=seed.event_id)

        assert await repos.bookable_query.get_event_ref(event_id=seed.event_id) is None
        orphan = await repos.reservation_query.get_ref_by_id(reservation_id=booked.id)
        assert orphan.organizer_club_id is None

    @pytest.mark.asyncio
    async def test_deactivate_is_idempotent(self, repos, seed):
        first_at = datetime(2025, 1, 1, tzinfo=timezone.utc)
        await repos.bookable_command.deactivate_event(
            event_id=seed.event_id, deactivated_at=first_at
        )
        await repos.bookable_command.deactivate_event(
            event_id=seed.event_id, deactivated_at=datetime.now(timezone.utc)
        )

        event = await repos.bookable_query.get_event_ref(event_id=seed.event_id)
        assert not event.is_active
        assert event.deactivated_at == first_at

        with pytest.raises(NotFoundError):
            await repos.bookable_command.deactivate_event(event_id=999, deactivated_at=first_at)
