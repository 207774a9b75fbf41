# -*- coding: utf-8 -*-
"""
Обратный отсчет времени попытки.
"""

from typing import Optional

NO_TIME_LIMIT_LABEL = "Без ограничения времени"


class Countdown:
    """Счетчик оставшихся секунд, уменьшается на единицу за тик."""

    def __init__(self, total_seconds: int) -> None:
        if total_seconds <= 0:
            raise ValueError("Длительность отсчета должна быть положительной")
        self.total_seconds = total_seconds
        self.remaining = total_seconds

    @classmethod
    def from_minutes(cls, minutes: int) -> "Countdown":
        return cls(minutes * 60)

    @property
    def expired(self) -> bool:
        return self.remaining <= 0

    def tick(self) -> int:
        """Отсчитать одну секунду и вернуть остаток."""
        if self.remaining > 0:
            self.remaining -= 1
        return self.remaining


def format_time_left(seconds: Optional[int]) -> str:
    """Форматирует остаток времени как m:ss."""
    if seconds is None:
        return NO_TIME_LIMIT_LABEL
    seconds = max(0, seconds)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"
