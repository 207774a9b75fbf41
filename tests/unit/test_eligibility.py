# -*- coding: utf-8 -*-
"""
Unit тесты допуска к попытке
"""

from datetime import timedelta

from edutest.core.eligibility import EligibilityGate
from edutest.domain.entities import Test, TestResult, User
from edutest.domain.enums import EligibilityReason, Role
from tests.fixtures import FixedClock, build_test_data, single_choice

STUDENT = User(id=7, full_name="Петров Петр Петрович", email="p@example.com", role=Role.STUDENT)


def _test(clock: FixedClock, **kw) -> Test:
    data = build_test_data([single_choice("q1")], group_ids=[1], now=clock.now, **kw)
    return Test(id=10, teacher_id=1, **data.model_dump())


def _result(result_id: int, test_id: int = 10, student_id: int = 7) -> TestResult:
    return TestResult(
        id=result_id, test_id=test_id, student_id=student_id, score=1, max_score=1
    )


class TestCanStart:
    """EligibilityGate.can_start"""

    def test_allowed_inside_window(self):
        clock = FixedClock()
        gate = EligibilityGate(clock)

        eligibility = gate.can_start(_test(clock), STUDENT, [], {1})

        assert eligibility
        assert eligibility.reason is None
        assert eligibility.attempts_left is None

    def test_not_yet_open(self):
        clock = FixedClock()
        test = _test(clock, start_date=clock.now + timedelta(minutes=1))

        eligibility = EligibilityGate(clock).can_start(test, STUDENT, [])

        assert not eligibility
        assert eligibility.reason == EligibilityReason.NOT_YET_OPEN
        assert eligibility.reason.value == "not yet open"

    def test_window_closed(self):
        clock = FixedClock()
        test = _test(clock)
        clock.advance(days=2)

        eligibility = EligibilityGate(clock).can_start(test, STUDENT, [])

        assert eligibility.reason == EligibilityReason.WINDOW_CLOSED

    def test_window_bounds_inclusive(self):
        clock = FixedClock()
        test = _test(clock)
        gate = EligibilityGate(clock)

        clock.now = test.start_date
        assert gate.can_start(test, STUDENT, [])
        clock.now = test.end_date
        assert gate.can_start(test, STUDENT, [])

    def test_max_attempts_two_allows_exactly_two(self):
        clock = FixedClock()
        test = _test(clock, max_attempts=2)
        gate = EligibilityGate(clock)
        results = []

        for attempt in range(2):
            eligibility = gate.can_start(test, STUDENT, results)
            assert eligibility
            assert eligibility.attempts_left == 2 - attempt
            results.append(_result(attempt + 1))

        third = gate.can_start(test, STUDENT, results)
        assert not third
        assert third.reason == EligibilityReason.ATTEMPTS_EXHAUSTED
        assert third.attempts_left == 0
        assert third.message == "Превышено максимальное количество попыток"

    def test_foreign_results_not_counted(self):
        clock = FixedClock()
        test = _test(clock, max_attempts=1)
        others = [_result(1, test_id=99), _result(2, student_id=8)]

        assert EligibilityGate(clock).can_start(test, STUDENT, others)

    def test_not_assigned(self):
        clock = FixedClock()

        eligibility = EligibilityGate(clock).can_start(_test(clock), STUDENT, [], {2, 3})

        assert eligibility.reason == EligibilityReason.NOT_ASSIGNED


class TestCheckSubmit:
    """Повторная проверка при отправке"""

    def test_submit_after_end_accepted_when_started_before(self):
        clock = FixedClock()
        test = _test(clock)
        started_at = clock.now
        clock.now = test.end_date + timedelta(minutes=5)
        gate = EligibilityGate(clock)

        assert gate.check_submit(test, started_at)

    def test_submit_rejected_when_started_after_end(self):
        clock = FixedClock()
        test = _test(clock)
        clock.now = test.end_date + timedelta(minutes=5)

        eligibility = EligibilityGate(clock).check_submit(test, clock.now)

        assert eligibility.reason == EligibilityReason.WINDOW_CLOSED
