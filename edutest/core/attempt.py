# -*- coding: utf-8 -*-
"""
Конечный автомат одной попытки прохождения теста.

NOT_STARTED -> IN_PROGRESS -> SUBMITTED, из IN_PROGRESS также возможен
DISCARDED (студент покинул тест без отправки). SUBMITTED и DISCARDED
терминальны. Таймер попытки - одна asyncio задача, которая вызывает tick()
раз в tick_interval секунд и останавливается в терминальном состоянии.
"""

import asyncio
from datetime import datetime
from typing import Dict, List, Optional

from edutest.config.logger import configure_logger
from edutest.core.countdown import Countdown
from edutest.core.eligibility import Clock, EligibilityGate
from edutest.core.randomizer import Randomizer
from edutest.core.scorer import score_attempt
from edutest.domain.entities import (AnswerValue, Question, Test, TestResult,
                                     TestResultDraft, utcnow)
from edutest.domain.enums import AttemptState
from edutest.repository.store import DataStore
from edutest.utils.exceptions import AttemptStateError, ValidationError

logger = configure_logger(__name__)


class AttemptSession:
    """Одна попытка студента: навигация, ответы, обратный отсчет и отправка."""

    def __init__(
        self,
        test: Test,
        student_id: int,
        store: DataStore,
        randomizer: Optional[Randomizer] = None,
        clock: Optional[Clock] = None,
        gate: Optional[EligibilityGate] = None,
        tick_interval: float = 1.0,
    ) -> None:
        self.test = test
        self.student_id = student_id
        self._store = store
        self._randomizer = randomizer or Randomizer()
        self._clock = clock or utcnow
        self._gate = gate or EligibilityGate(clock=self._clock)
        self._tick_interval = tick_interval

        self._state = AttemptState.NOT_STARTED
        self._questions: List[Question] = []
        self._answers: Dict[str, AnswerValue] = {}
        self._index = 0
        self._countdown: Optional[Countdown] = None
        self._started_at: Optional[datetime] = None
        self._result: Optional[TestResult] = None
        self._submit_lock = asyncio.Lock()
        self._timer: Optional[asyncio.Task] = None

    # ----------------------------- STATE ---------------------------------

    @property
    def state(self) -> AttemptState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == AttemptState.IN_PROGRESS

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_question(self) -> Optional[Question]:
        if not self._questions:
            return None
        return self._questions[self._index]

    @property
    def answers(self) -> Dict[str, AnswerValue]:
        return dict(self._answers)

    @property
    def remaining_seconds(self) -> Optional[int]:
        return self._countdown.remaining if self._countdown else None

    @property
    def time_up(self) -> bool:
        return self._countdown is not None and self._countdown.expired

    @property
    def started_at(self) -> Optional[datetime]:
        return self._started_at

    @property
    def result(self) -> Optional[TestResult]:
        return self._result

    def _require_active(self, action: str) -> None:
        if self._state != AttemptState.IN_PROGRESS:
            raise AttemptStateError(
                f"Нельзя выполнить '{action}': попытка в состоянии {self._state.value}"
            )

    def _require_answering(self, action: str) -> None:
        # После нуля отсчета допустима только повторная отправка
        self._require_active(action)
        if self.time_up:
            raise AttemptStateError(f"Нельзя выполнить '{action}': время попытки истекло")

    # ----------------------------- LIFECYCLE -----------------------------

    def start(self, autotick: bool = False) -> None:
        """
        Начать попытку: зафиксировать порядок вопросов и запустить отсчет.

        Args:
            autotick: Запустить фоновый таймер (нужен работающий event loop)

        Raises:
            AttemptStateError: Попытка уже начиналась
        """
        if self._state != AttemptState.NOT_STARTED:
            raise AttemptStateError("Попытка уже начата")

        self._questions = self._randomizer.presentation_order(self.test)
        self._index = 0
        self._started_at = self._clock()
        if self.test.time_limit:
            self._countdown = Countdown.from_minutes(self.test.time_limit)
        self._state = AttemptState.IN_PROGRESS

        logger.info(
            f"▶️ Студент {self.student_id} начал тест {self.test.id} "
            f"({len(self._questions)} вопросов, лимит {self.test.time_limit or '-'} мин)"
        )
        if autotick and self._countdown is not None:
            self._timer = asyncio.create_task(self._run_timer())

    def record_answer(self, question_id: str, value: AnswerValue) -> None:
        """Сохранить ответ на вопрос. Повторный ответ заменяет предыдущий."""
        self._require_answering("ответ")
        if self.test.question_by_id(question_id) is None:
            raise ValidationError(f"Вопрос {question_id} не входит в тест")
        self._answers[question_id] = value

    def previous(self) -> int:
        self._require_answering("назад")
        self._index = max(0, self._index - 1)
        return self._index

    async def next(self) -> int:
        """Перейти к следующему вопросу; на последнем вопросе - отправить попытку."""
        self._require_answering("далее")
        if self._index >= len(self._questions) - 1:
            await self.submit()
        else:
            self._index += 1
        return self._index

    async def tick(self) -> Optional[int]:
        """Одна секунда отсчета. При достижении нуля попытка отправляется."""
        if self._state != AttemptState.IN_PROGRESS or self._countdown is None:
            return self.remaining_seconds
        remaining = self._countdown.tick()
        if self._countdown.expired:
            logger.info(
                f"⏰ Время вышло: автоматическая отправка теста {self.test.id} "
                f"студента {self.student_id}"
            )
            await self.submit()
        return remaining

    async def submit(self) -> TestResult:
        """
        Отправить попытку. Повторные вызовы возвращают тот же результат.

        Raises:
            AttemptStateError: Попытка не начата или отменена
            Exception: Ошибки хранилища, попытка остается IN_PROGRESS
        """
        async with self._submit_lock:
            if self._state == AttemptState.SUBMITTED and self._result is not None:
                return self._result
            self._require_active("отправка")

            if not self._gate.check_submit(self.test, self._started_at):
                logger.warning(
                    f"⚠️ Попытка теста {self.test.id} начата после закрытия окна, "
                    f"результат все равно сохраняется"
                )

            scored = score_attempt(self.test, self._answers)
            draft = TestResultDraft(
                test_id=self.test.id,
                student_id=self.student_id,
                answers=dict(self._answers),
                score=scored.score,
                max_score=scored.max_score,
                completed_at=self._clock(),
            )
            self._result = await self._store.append_result(draft)
            self._state = AttemptState.SUBMITTED
            self._stop_timer()

        logger.info(
            f"✅ Студент {self.student_id} отправил тест {self.test.id}: "
            f"{scored.score}/{scored.max_score}"
        )
        return self._result

    def discard(self) -> None:
        """Покинуть попытку без сохранения результата."""
        if self._state in (AttemptState.DISCARDED, AttemptState.NOT_STARTED):
            self._state = AttemptState.DISCARDED
            return
        self._require_active("отмена")
        self._state = AttemptState.DISCARDED
        self._stop_timer()
        logger.info(f"🚪 Студент {self.student_id} покинул тест {self.test.id}")

    # ----------------------------- TIMER ---------------------------------

    async def _run_timer(self) -> None:
        while self._state == AttemptState.IN_PROGRESS:
            await asyncio.sleep(self._tick_interval)
            try:
                await self.tick()
            except Exception as e:
                # Ошибка сохранения при автоотправке: попытка остается активной
                logger.error(f"❌ Ошибка автоотправки теста {self.test.id}: {e}")
                return

    def _stop_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is None or timer.done():
            return
        if timer is asyncio.current_task():
            return
        timer.cancel()

    async def close(self) -> None:
        """Остановить таймер и дождаться его завершения."""
        timer, self._timer = self._timer, None
        if timer is None or timer.done():
            return
        timer.cancel()
        try:
            await timer
        except asyncio.CancelledError:
            pass
