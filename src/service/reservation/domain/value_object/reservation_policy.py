from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Optional

import attrs

from src.platform.exception.exceptions import CheckInWindowClosedError, EventClosedError
from src.service.reservation.domain.value_object.bookable_ref import EventRef


if TYPE_CHECKING:
    from src.platform.config.core_setting import Settings


@attrs.define(frozen=True)
class ReservationPolicy:
    allow_duplicate_active: bool = True
    max_confirmed_per_event: Optional[int] = None
    check_in_window_enforced: bool = False
    check_in_opens_before: timedelta = timedelta(minutes=60)
    cancel_after_start_allowed: bool = True

    @classmethod
    def from_settings(cls, settings: 'Settings') -> 'ReservationPolicy':
        return cls(
            allow_duplicate_active=settings.RESERVATION_ALLOW_DUPLICATE_ACTIVE,
            max_confirmed_per_event=settings.RESERVATION_MAX_CONFIRMED_PER_EVENT,
            check_in_window_enforced=settings.CHECK_IN_WINDOW_ENFORCED,
            check_in_opens_before=timedelta(minutes=settings.CHECK_IN_OPENS_MINUTES_BEFORE_START),
            cancel_after_start_allowed=settings.RESERVATION_CANCEL_AFTER_START_ALLOWED,
        )

    @property
    def needs_owner_counts(self) -> bool:
        return not self.allow_duplicate_active or self.max_confirmed_per_event is not None

    def ensure_check_in_open(self, *, event: EventRef, now: datetime) -> None:
        if not self.check_in_window_enforced:
            return
        opens_at = event.start_at - self.check_in_opens_before
        if not event.is_active or not opens_at <= now <= event.end_at:
            raise CheckInWindowClosedError(
                f'Check-in is open from {opens_at.isoformat()} to {event.end_at.isoformat()}'
            )

    def ensure_cancel_open(self, *, event: EventRef, now: datetime) -> None:
        if self.cancel_after_start_allowed:
            return
        if now >= event.start_at:
            raise EventClosedError('Event has already started; reservation cannot be cancelled')
