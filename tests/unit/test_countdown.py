# -*- coding: utf-8 -*-
"""
Unit тесты обратного отсчета
"""

import pytest

from edutest.core.countdown import (NO_TIME_LIMIT_LABEL, Countdown,
                                    format_time_left)


class TestCountdown:
    def test_from_minutes(self):
        countdown = Countdown.from_minutes(2)

        assert countdown.remaining == 120
        assert not countdown.expired

    def test_tick_until_expired(self):
        countdown = Countdown(2)

        assert countdown.tick() == 1
        assert countdown.tick() == 0
        assert countdown.expired
        # После нуля отсчет не уходит в минус
        assert countdown.tick() == 0

    @pytest.mark.parametrize("seconds", [0, -5])
    def test_non_positive_length_rejected(self, seconds):
        with pytest.raises(ValueError):
            Countdown(seconds)


class TestFormatTimeLeft:
    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "0:00"), (5, "0:05"), (65, "1:05"), (600, "10:00"), (-3, "0:00")],
    )
    def test_format(self, seconds, expected):
        assert format_time_left(seconds) == expected

    def test_no_limit(self):
        assert format_time_left(None) == NO_TIME_LIMIT_LABEL
