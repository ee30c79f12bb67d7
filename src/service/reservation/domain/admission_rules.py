"""
Admission and capacity rules

Pure checks shared by every store. Callers must evaluate them on counts read
inside the same critical section (category row lock or in-memory category
lock) that the subsequent write runs in; evaluated on stale counts they
prove nothing.
"""

from datetime import datetime

import attrs

from src.platform.exception.exceptions import (
    CapacityBelowOccupancyError,
    CategoryFullError,
    DomainError,
    DuplicateReservationError,
    EventClosedError,
    HasActiveReservationsError,
    ReservationLimitReachedError,
)
from src.service.reservation.domain.value_object.bookable_ref import CategoryRef
from src.service.reservation.domain.value_object.reservation_policy import ReservationPolicy


@attrs.define(frozen=True)
class OwnerOccupancy:
    """CONFIRMED reservations the requesting principal already holds."""

    in_category: int = 0
    in_event: int = 0


def check_admission(
    *,
    category: CategoryRef,
    owner: OwnerOccupancy,
    policy: ReservationPolicy,
    now: datetime,
) -> None:
    if not category.is_bookable_at(now):
        raise EventClosedError('Event is not open for reservations')

    if not policy.allow_duplicate_active and owner.in_category > 0:
        raise DuplicateReservationError('You already hold a reservation in this category')

    limit = policy.max_confirmed_per_event
    if limit is not None and owner.in_event >= limit:
        raise ReservationLimitReachedError(
            f'At most {limit} active reservations per event are allowed'
        )

    if category.confirmed_count >= category.capacity:
        raise CategoryFullError('No seats left in this category')


def check_capacity_change(*, category: CategoryRef, new_capacity: int) -> None:
    if new_capacity < 0:
        raise DomainError('Capacity must be zero or greater')
    if new_capacity < category.confirmed_count:
        raise CapacityBelowOccupancyError(
            f'Capacity {new_capacity} is below the {category.confirmed_count} confirmed reservations'
        )


def check_removable(*, confirmed_count: int, resource: str) -> None:
    if confirmed_count > 0:
        raise HasActiveReservationsError(
            f'Cannot delete {resource}: {confirmed_count} confirmed reservations remain'
        )
