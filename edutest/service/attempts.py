# -*- coding: utf-8 -*-
"""
Сервис попыток прохождения тестов.

Хранит активные попытки по паре (студент, тест): повторный старт при
незавершенной попытке возвращает ее же. Завершенные и отмененные попытки
удаляются из реестра.
"""

import asyncio
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from loguru import logger

from edutest.core.attempt import AttemptSession
from edutest.core.eligibility import Clock, Eligibility, EligibilityGate
from edutest.core.randomizer import Randomizer
from edutest.domain.entities import AnswerValue, TestResult, User, utcnow
from edutest.domain.enums import AttemptState
from edutest.repository.store import DataStore
from edutest.service.tests import get_student_test_service
from edutest.utils.exceptions import NotFoundError

AttemptKey = Tuple[int, int]


@dataclass(frozen=True)
class StartOutcome:
    """Итог запроса на старт: попытка или отказ с причиной."""

    eligibility: Eligibility
    session: Optional[AttemptSession] = None
    resumed: bool = False


class AttemptService:
    """Реестр активных попыток и операции над ними."""

    def __init__(
        self,
        store: DataStore,
        randomizer: Optional[Randomizer] = None,
        clock: Optional[Clock] = None,
        timer_enabled: bool = True,
        tick_interval: float = 1.0,
    ) -> None:
        self.store = store
        self._randomizer = randomizer or Randomizer()
        self._clock = clock or utcnow
        self._gate = EligibilityGate(clock=self._clock)
        self._timer_enabled = timer_enabled
        self._tick_interval = tick_interval
        self._sessions: Dict[AttemptKey, AttemptSession] = {}
        self._start_locks: Dict[AttemptKey, asyncio.Lock] = {}

    def _active(self, student_id: int, test_id: int) -> Optional[AttemptSession]:
        session = self._sessions.get((student_id, test_id))
        if session is not None and not session.is_active:
            # Таймер мог отправить попытку сам
            del self._sessions[(student_id, test_id)]
            return None
        return session

    async def start(self, student: User, test_id: int) -> StartOutcome:
        """
        Начать или продолжить попытку.

        Raises:
            NotFoundError: Тест не существует или не виден студенту
        """
        key = (student.id, test_id)
        # Одновременные старты одной пары ждут друг друга
        async with self._start_locks.setdefault(key, asyncio.Lock()):
            session = self._active(student.id, test_id)
            if session is not None:
                logger.info(f"🔁 Студент {student.id} продолжает тест {test_id}")
                return StartOutcome(Eligibility(True), session, resumed=True)

            test = await get_student_test_service(self.store, test_id, student)
            prior = await self.store.list_results(test_id=test_id, student_id=student.id)
            eligibility = self._gate.can_start(test, student, prior)
            if not eligibility:
                return StartOutcome(eligibility)

            session = AttemptSession(
                test,
                student.id,
                self.store,
                randomizer=self._randomizer,
                clock=self._clock,
                gate=self._gate,
                tick_interval=self._tick_interval,
            )
            session.start(autotick=self._timer_enabled)
            self._sessions[key] = session
        return StartOutcome(eligibility, session)

    def get(self, student_id: int, test_id: int) -> AttemptSession:
        session = self._active(student_id, test_id)
        if session is None:
            raise NotFoundError(
                resource_type="Attempt",
                details=f"нет активной попытки теста {test_id}",
            )
        return session

    def record_answer(
        self, student_id: int, test_id: int, question_id: str, value: AnswerValue
    ) -> AttemptSession:
        session = self.get(student_id, test_id)
        session.record_answer(question_id, value)
        return session

    async def next(self, student_id: int, test_id: int) -> AttemptSession:
        session = self.get(student_id, test_id)
        await session.next()
        self._forget_finished(student_id, test_id)
        return session

    def previous(self, student_id: int, test_id: int) -> AttemptSession:
        session = self.get(student_id, test_id)
        session.previous()
        return session

    async def submit(self, student_id: int, test_id: int) -> TestResult:
        session = self.get(student_id, test_id)
        result = await session.submit()
        self._forget_finished(student_id, test_id)
        return result

    def discard(self, student_id: int, test_id: int) -> None:
        session = self.get(student_id, test_id)
        session.discard()
        self._forget_finished(student_id, test_id)

    def _forget_finished(self, student_id: int, test_id: int) -> None:
        session = self._sessions.get((student_id, test_id))
        if session is not None and session.state in (
            AttemptState.SUBMITTED,
            AttemptState.DISCARDED,
        ):
            del self._sessions[(student_id, test_id)]

    def drop_tests(self, test_ids: Iterable[int]) -> None:
        """Отменить активные попытки удаленных тестов."""
        test_ids = set(test_ids)
        for key in [key for key in self._sessions if key[1] in test_ids]:
            session = self._sessions.pop(key)
            if session.is_active:
                session.discard()
                logger.info(f"🚫 Попытка теста {key[1]} отменена: тест удален")

    async def shutdown(self) -> None:
        """Остановить таймеры всех попыток."""
        sessions = list(self._sessions.values())
        self._sessions.clear()
        for session in sessions:
            await session.close()
        if sessions:
            logger.info(f"🛑 Остановлено таймеров попыток: {len(sessions)}")
