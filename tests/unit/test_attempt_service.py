# -*- coding: utf-8 -*-
"""
Unit тесты реестра попыток
"""

import asyncio
import random

import pytest

from edutest.core.randomizer import Randomizer
from edutest.domain.enums import AttemptState, EligibilityReason
from edutest.service.attempts import AttemptService
from edutest.utils.exceptions import NotFoundError
from tests.fixtures import (classroom, create_group, create_student,
                            create_test)


class TestAttemptStart:
    """Старт и продолжение попытки"""

    @pytest.mark.asyncio
    async def test_start_creates_session(self, store, attempt_service):
        _, _, student, test = await classroom(store, time_limit=10)

        outcome = await attempt_service.start(student, test.id)

        assert outcome.eligibility.allowed
        assert not outcome.resumed
        assert outcome.session.state == AttemptState.IN_PROGRESS
        assert outcome.session.remaining_seconds == 600
        assert attempt_service.get(student.id, test.id) is outcome.session

    @pytest.mark.asyncio
    async def test_second_start_resumes(self, store, attempt_service):
        # Arrange
        _, _, student, test = await classroom(store)
        first = await attempt_service.start(student, test.id)
        attempt_service.record_answer(student.id, test.id, "q1", "A")
        await attempt_service.next(student.id, test.id)

        # Act
        second = await attempt_service.start(student, test.id)

        # Assert
        assert second.resumed
        assert second.session is first.session
        assert second.session.current_index == 1
        assert second.session.answers == {"q1": "A"}

    @pytest.mark.asyncio
    async def test_max_attempts(self, store, attempt_service):
        _, _, student, test = await classroom(store, max_attempts=2)

        for _ in range(2):
            outcome = await attempt_service.start(student, test.id)
            assert outcome.eligibility.allowed
            await attempt_service.submit(student.id, test.id)

        denied = await attempt_service.start(student, test.id)

        assert not denied.eligibility.allowed
        assert denied.eligibility.reason == EligibilityReason.ATTEMPTS_EXHAUSTED
        assert denied.eligibility.attempts_used == 2
        assert denied.session is None
        assert len(await store.list_results(test_id=test.id)) == 2

    @pytest.mark.asyncio
    async def test_concurrent_starts_share_one_session(self, sql_store, clock):
        # Arrange
        service = AttemptService(
            sql_store, randomizer=Randomizer(random.Random(1)), clock=clock, timer_enabled=False
        )
        _, _, student, test = await classroom(sql_store, max_attempts=1)

        # Act
        first, second = await asyncio.gather(
            service.start(student, test.id), service.start(student, test.id)
        )
        await service.submit(student.id, test.id)
        again = await service.start(student, test.id)

        # Assert
        assert first.session is second.session
        assert [first.resumed, second.resumed] == [False, True]
        assert len(await sql_store.list_results(test_id=test.id)) == 1
        assert again.eligibility.reason == EligibilityReason.ATTEMPTS_EXHAUSTED
        await service.shutdown()

    @pytest.mark.asyncio
    async def test_discarded_attempt_not_counted(self, store, attempt_service):
        _, _, student, test = await classroom(store, max_attempts=1)
        await attempt_service.start(student, test.id)

        attempt_service.discard(student.id, test.id)
        outcome = await attempt_service.start(student, test.id)

        assert outcome.eligibility.allowed
        assert not outcome.resumed

    @pytest.mark.asyncio
    async def test_window_reasons(self, store, attempt_service, clock):
        _, _, student, test = await classroom(store, now=clock.now)

        clock.advance(hours=-2)
        early = await attempt_service.start(student, test.id)
        clock.advance(days=2)
        late = await attempt_service.start(student, test.id)

        assert early.eligibility.reason == EligibilityReason.NOT_YET_OPEN
        assert late.eligibility.reason == EligibilityReason.WINDOW_CLOSED

    @pytest.mark.asyncio
    async def test_test_of_foreign_group_not_found(self, store, attempt_service):
        teacher, _, student, _ = await classroom(store)
        other_group = await create_group(
            store, teacher.id, ["Сидоров Сидор Сидорович"], group_number="102"
        )
        hidden = await create_test(store, teacher.id, [other_group.id])

        with pytest.raises(NotFoundError):
            await attempt_service.start(student, hidden.id)
        with pytest.raises(NotFoundError):
            await attempt_service.start(student, 404)


class TestAttemptRegistry:
    """Операции над активными попытками"""

    @pytest.mark.asyncio
    async def test_no_active_attempt(self, store, attempt_service):
        _, _, student, test = await classroom(store)

        with pytest.raises(NotFoundError):
            attempt_service.get(student.id, test.id)
        with pytest.raises(NotFoundError):
            await attempt_service.submit(student.id, test.id)

    @pytest.mark.asyncio
    async def test_attempts_are_per_student(self, store, attempt_service):
        _, _, student, test = await classroom(store)
        # То же ФИО и группа: запись списка еще не связана с пользователем
        classmate = await create_student(
            store, full_name="Петров Петр Петрович", email="twin@example.com"
        )

        mine = await attempt_service.start(student, test.id)
        theirs = await attempt_service.start(classmate, test.id)

        assert mine.session is not theirs.session
        assert not theirs.resumed

    @pytest.mark.asyncio
    async def test_submit_removes_session(self, store, attempt_service):
        _, _, student, test = await classroom(store)
        await attempt_service.start(student, test.id)
        attempt_service.record_answer(student.id, test.id, "q2", "B")

        result = await attempt_service.submit(student.id, test.id)

        assert result.score == 1
        with pytest.raises(NotFoundError):
            attempt_service.get(student.id, test.id)

    @pytest.mark.asyncio
    async def test_next_past_last_question_submits(self, store, attempt_service):
        _, _, student, test = await classroom(store)
        await attempt_service.start(student, test.id)

        await attempt_service.next(student.id, test.id)
        session = await attempt_service.next(student.id, test.id)

        assert session.state == AttemptState.SUBMITTED
        assert len(await store.list_results()) == 1
        with pytest.raises(NotFoundError):
            attempt_service.get(student.id, test.id)

    @pytest.mark.asyncio
    async def test_expired_attempt_removed_from_registry(self, store, attempt_service):
        _, _, student, test = await classroom(store, time_limit=1)
        outcome = await attempt_service.start(student, test.id)

        for _ in range(60):
            await outcome.session.tick()

        assert outcome.session.state == AttemptState.SUBMITTED
        with pytest.raises(NotFoundError):
            attempt_service.get(student.id, test.id)

    @pytest.mark.asyncio
    async def test_drop_tests_discards_attempts(self, store, attempt_service):
        _, _, student, test = await classroom(store)
        outcome = await attempt_service.start(student, test.id)

        attempt_service.drop_tests([test.id])

        assert outcome.session.state == AttemptState.DISCARDED
        with pytest.raises(NotFoundError):
            attempt_service.get(student.id, test.id)
        assert await store.list_results() == []

    @pytest.mark.asyncio
    async def test_shutdown_clears_registry(self, store, attempt_service):
        _, _, student, test = await classroom(store)
        await attempt_service.start(student, test.id)

        await attempt_service.shutdown()

        with pytest.raises(NotFoundError):
            attempt_service.get(student.id, test.id)
