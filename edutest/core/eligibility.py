# -*- coding: utf-8 -*-
"""
Проверка допуска студента к попытке прохождения теста.

Отказ возвращается значением с причиной, а не исключением.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional, Set

from edutest.config.logger import configure_logger
from edutest.domain.entities import TestBase, TestResult, User, utcnow
from edutest.domain.enums import EligibilityReason

logger = configure_logger(__name__)

Clock = Callable[[], datetime]


@dataclass(frozen=True, slots=True)
class Eligibility:
    allowed: bool
    reason: Optional[EligibilityReason] = None
    attempts_used: int = 0
    attempts_left: Optional[int] = None

    def __bool__(self) -> bool:
        return self.allowed

    @property
    def message(self) -> Optional[str]:
        return self.reason.message if self.reason else None


class EligibilityGate:
    """Проверяет окно доступности, лимит попыток и назначение теста группе."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or utcnow

    def now(self) -> datetime:
        return self._clock()

    def window_status(self, test: TestBase) -> Optional[EligibilityReason]:
        now = self.now()
        if now < test.start_date:
            return EligibilityReason.NOT_YET_OPEN
        if now > test.end_date:
            return EligibilityReason.WINDOW_CLOSED
        return None

    def can_start(
        self,
        test: TestBase,
        student: User,
        prior_results: Iterable[TestResult],
        student_group_ids: Optional[Set[int]] = None,
    ) -> Eligibility:
        """
        Проверить, может ли студент начать попытку.

        Args:
            test: Тест
            student: Студент
            prior_results: Результаты прошлых попыток (фильтруются по тесту и студенту)
            student_group_ids: ID групп студента; None - членство проверено выше

        Returns:
            Eligibility с причиной отказа, если начать нельзя
        """
        test_id = getattr(test, "id", None)
        used = sum(
            1
            for result in prior_results
            if result.student_id == student.id
            and (test_id is None or result.test_id == test_id)
        )
        left = None if test.max_attempts is None else max(0, test.max_attempts - used)

        def deny(reason: EligibilityReason) -> Eligibility:
            logger.info(
                f"⛔ Студент {student.id} не допущен к тесту {test_id}: {reason.value}"
            )
            return Eligibility(False, reason, attempts_used=used, attempts_left=left)

        if student_group_ids is not None and not set(test.group_ids) & student_group_ids:
            return deny(EligibilityReason.NOT_ASSIGNED)

        window = self.window_status(test)
        if window is not None:
            return deny(window)

        if test.max_attempts is not None and used >= test.max_attempts:
            return deny(EligibilityReason.ATTEMPTS_EXHAUSTED)

        return Eligibility(True, attempts_used=used, attempts_left=left)

    def check_submit(self, test: TestBase, started_at: datetime) -> Eligibility:
        """
        Повторная проверка при отправке.

        Отправка после end_date принимается, если попытка началась до закрытия окна.
        """
        if self.window_status(test) != EligibilityReason.WINDOW_CLOSED:
            return Eligibility(True)
        if started_at <= test.end_date:
            logger.warning(
                f"⚠️ Тест {getattr(test, 'id', None)}: отправка после закрытия окна, "
                f"попытка начата {started_at.isoformat()} - принимаем"
            )
            return Eligibility(True)
        return Eligibility(False, EligibilityReason.WINDOW_CLOSED)
