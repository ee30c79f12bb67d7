from typing import Optional

import attrs

from src.service.reservation.domain.enum.reservation_status import ReservationStatus


@attrs.define(frozen=True)
class ReservationRef:
    id: int
    owner_id: int
    event_id: int
    category_id: int
    organizer_club_id: Optional[int]
    status: ReservationStatus
    token: Optional[str] = attrs.field(default=None, repr=False)
