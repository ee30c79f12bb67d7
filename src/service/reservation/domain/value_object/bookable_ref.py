"""
Minimal identifying views of events and categories

Authorization and admission only need these fields; the full club/event
records belong to other parts of the system.
"""

from datetime import datetime
from typing import Optional

import attrs


@attrs.define(frozen=True)
class EventRef:
    id: int
    organizer_club_id: int
    name: str
    start_at: datetime
    end_at: datetime
    is_active: bool = True
    organizer_active: bool = True
    deactivated_at: Optional[datetime] = None

    def is_open_at(self, now: datetime) -> bool:
        return self.is_active and self.organizer_active and now < self.end_at


@attrs.define(frozen=True)
class CategoryRef:
    id: int
    event_id: int
    name: str
    capacity: int
    confirmed_count: int
    organizer_club_id: int
    event_active: bool
    organizer_active: bool
    event_start_at: datetime
    event_end_at: datetime

    @property
    def available(self) -> int:
        return max(self.capacity - self.confirmed_count, 0)

    def is_bookable_at(self, now: datetime) -> bool:
        return self.event_active and self.organizer_active and now < self.event_end_at
