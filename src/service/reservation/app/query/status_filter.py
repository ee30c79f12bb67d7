from typing import Optional

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.reservation.domain.enum.reservation_status import ReservationStatus


MATCH_ALL = frozenset({'', 'all'})


@attrs.define(frozen=True)
class StatusFilter:
    """
    Listing filter parsed from a user-supplied status name.

    Empty or 'all' lists every status. An unknown name matches nothing
    instead of failing the request.
    """

    status: Optional[ReservationStatus] = None
    matches_nothing: bool = False

    @classmethod
    def parse(cls, raw: Optional[str]) -> 'StatusFilter':
        if raw is None or raw.strip().lower() in MATCH_ALL:
            return cls()
        status = ReservationStatus.parse(raw)
        if status is None:
            Logger.base.warning(f'⚠️ [QUERY] unknown reservation status filter {raw!r}')
            return cls(matches_nothing=True)
        return cls(status=status)
