from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import attrs
import uuid_utils

from src.platform.exception.exceptions import (
    AlreadyCancelledError,
    AlreadyTerminalError,
    AlreadyUsedError,
    DomainError,
    TokenNotFoundError,
)
from src.platform.logging.loguru_io import Logger
from src.service.reservation.domain.enum.reservation_status import ReservationStatus


CHECK_IN_PREFIX = 'uuid:'
CHECK_IN_MISSING = 'error:uuid-missing'


def raise_for_terminal(status: ReservationStatus) -> None:
    """Raise the AlreadyTerminal variant matching a non-CONFIRMED status."""
    if status is ReservationStatus.USED:
        raise AlreadyUsedError('Reservation has already been used')
    if status is ReservationStatus.CANCELLED:
        raise AlreadyCancelledError('Reservation has already been cancelled')
    if status.is_terminal:
        raise AlreadyTerminalError(f'Reservation is {status}')


@attrs.define
class Reservation:
    principal_id: int
    event_id: int
    category_id: int
    token: Optional[str] = attrs.field(default=None, repr=False)
    status: ReservationStatus = ReservationStatus.CONFIRMED
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    @Logger.io
    def create(cls, *, principal_id: int, event_id: int, category_id: int) -> 'Reservation':
        now = datetime.now(timezone.utc)
        return cls(
            principal_id=principal_id,
            event_id=event_id,
            category_id=category_id,
            # Random, never derived from the row id
            token=str(uuid_utils.uuid4()),
            status=ReservationStatus.CONFIRMED,
            created_at=now,
            updated_at=now,
        )

    @property
    def is_confirmed(self) -> bool:
        return self.status is ReservationStatus.CONFIRMED

    @property
    def check_in_payload(self) -> str:
        if not self.token:
            return CHECK_IN_MISSING
        return f'{CHECK_IN_PREFIX}{self.token}'

    def _transition(self, target: ReservationStatus) -> 'Reservation':
        raise_for_terminal(self.status)
        return attrs.evolve(self, status=target, updated_at=datetime.now(timezone.utc))

    @Logger.io
    def cancel(self) -> 'Reservation':
        return self._transition(ReservationStatus.CANCELLED)

    @Logger.io
    def mark_used(self) -> 'Reservation':
        return self._transition(ReservationStatus.USED)

    @staticmethod
    def parse_check_in_token(raw: Optional[str]) -> str:
        """
        Accept either the bare token or the rendered `uuid:<token>` payload.

        A value that is not a UUID can never match a stored token, so it is
        reported the same way as an unknown one.
        """
        if raw is None or not raw.strip():
            raise DomainError('Check-in token is required')
        candidate = raw.strip()
        if candidate.lower().startswith(CHECK_IN_PREFIX):
            candidate = candidate[len(CHECK_IN_PREFIX) :]
        try:
            return str(UUID(candidate))
        except ValueError:
            raise TokenNotFoundError('Reservation token not found')
