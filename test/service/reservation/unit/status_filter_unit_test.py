import pytest

from src.service.reservation.app.query.status_filter import StatusFilter
from src.service.reservation.domain.enum import ReservationStatus


@pytest.mark.unit
class TestStatusFilter:
    @pytest.mark.parametrize('raw', [None, '', '  ', 'all', 'ALL'])
    def test_match_all(self, raw):
        status_filter = StatusFilter.parse(raw)

        assert status_filter.status is None
        assert not status_filter.matches_nothing

    @pytest.mark.parametrize(
        'raw, expected',
        [
            ('confirmed', ReservationStatus.CONFIRMED),
            ('Cancelled', ReservationStatus.CANCELLED),
            (' used ', ReservationStatus.USED),
        ],
    )
    def test_known_status(self, raw, expected):
        assert StatusFilter.parse(raw).status is expected

    def test_unknown_status_matches_nothing(self):
        status_filter = StatusFilter.parse('pending')

        assert status_filter.matches_nothing
        assert status_filter.status is None
