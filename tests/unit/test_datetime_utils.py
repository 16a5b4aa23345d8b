from datetime import timedelta

import pytest

from src.ll_common.datetime_utils import days_until, later_of, utc_now
from tests.conftest import T0


class TestDaysUntil:
    @pytest.mark.parametrize(
        "offset,expected",
        [
            (timedelta(days=3), 3),
            (timedelta(days=2, hours=1), 3),
            (timedelta(hours=1), 1),
            (timedelta(0), 0),
            (-timedelta(hours=1), 0),
            (-timedelta(days=2), -2),
        ],
    )
    def test_rounds_up(self, offset: timedelta, expected: int) -> None:
        assert days_until(T0 + offset, T0) == expected


class TestLaterOf:
    def test_expiry_wins(self) -> None:
        assert later_of(T0 + timedelta(days=30), T0, 7) == T0 + timedelta(days=30)

    def test_duration_wins(self) -> None:
        assert later_of(T0 + timedelta(days=3), T0, 7) == T0 + timedelta(days=7)


def test_utc_now_is_aware() -> None:
    assert utc_now().tzinfo is not None
