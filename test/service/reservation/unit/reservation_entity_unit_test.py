"""
Unit tests for the Reservation entity

Test Focus:
1. create() mints a random UUID token and starts CONFIRMED
2. check_in_payload rendering, including the degraded missing-token form
3. Terminal states never transition again
4. Check-in token parsing accepts bare and prefixed tokens
"""

from uuid import UUID

import pytest

from src.platform.exception.exceptions import (
    AlreadyCancelledError,
    AlreadyTerminalError,
    AlreadyUsedError,
    DomainError,
    TokenNotFoundError,
)
from src.service.reservation.domain.entity.reservation_entity import (
    CHECK_IN_MISSING,
    Reservation,
)
from src.service.reservation.domain.enum import ReservationStatus


TOKEN = '0b6f9a52-3c1e-4f0e-9f7a-2f4f1d8c6a10'


@pytest.mark.unit
class TestReservationEntity:
    @pytest.fixture
    def reservation(self):
        return Reservation.create(principal_id=1, event_id=2, category_id=3)

    def test_create_starts_confirmed_with_uuid_token(self, reservation):
        assert reservation.status is ReservationStatus.CONFIRMED
        assert reservation.id is None
        assert str(UUID(reservation.token)) == reservation.token
        assert reservation.created_at is not None

    def test_tokens_are_unique(self):
        tokens = {
            Reservation.create(principal_id=1, event_id=2, category_id=3).token for _ in range(50)
        }
        assert len(tokens) == 50

    def test_token_is_hidden_from_repr(self, reservation):
        assert reservation.token not in repr(reservation)

    def test_check_in_payload(self, reservation):
        assert reservation.check_in_payload == f'uuid:{reservation.token}'
        assert len(reservation.check_in_payload) == len('uuid:') + 36

    def test_check_in_payload_without_token_is_degraded(self):
        reservation = Reservation(principal_id=1, event_id=2, category_id=3, token=None)

        assert reservation.check_in_payload == CHECK_IN_MISSING

    def test_cancel_and_mark_used(self, reservation):
        assert reservation.cancel().status is ReservationStatus.CANCELLED
        assert reservation.mark_used().status is ReservationStatus.USED
        # Transitions return a new object
        assert reservation.status is ReservationStatus.CONFIRMED

    @pytest.mark.parametrize(
        'status, error',
        [
            (ReservationStatus.CANCELLED, AlreadyCancelledError),
            (ReservationStatus.USED, AlreadyUsedError),
        ],
    )
    def test_terminal_states_are_final(self, reservation, status, error):
        terminal = Reservation(
            principal_id=1, event_id=2, category_id=3, token=TOKEN, status=status
        )

        with pytest.raises(error) as exc_info:
            terminal.cancel()
        assert isinstance(exc_info.value, AlreadyTerminalError)
        with pytest.raises(error):
            terminal.mark_used()
        assert terminal.status is status

    @pytest.mark.parametrize(
        'raw',
        [TOKEN, f'uuid:{TOKEN}', f'UUID:{TOKEN}', f'  uuid:{TOKEN}  ', TOKEN.upper()],
    )
    def test_parse_check_in_token(self, raw):
        assert Reservation.parse_check_in_token(raw) == TOKEN

    @pytest.mark.parametrize('raw', [None, '', '   '])
    def test_parse_missing_token(self, raw):
        with pytest.raises(DomainError):
            Reservation.parse_check_in_token(raw)

    @pytest.mark.parametrize('raw', ['uuid:', 'not-a-token', 'uuid:1234', CHECK_IN_MISSING])
    def test_parse_malformed_token_is_not_found(self, raw):
        with pytest.raises(TokenNotFoundError):
            Reservation.parse_check_in_token(raw)
