# -*- coding: utf-8 -*-
"""
Сервис результатов тестирования и статистики по тесту.
"""

from dataclasses import dataclass
from typing import List, Optional

from edutest.domain.entities import TestResult, User
from edutest.domain.enums import Role
from edutest.repository.store import DataStore
from edutest.service.tests import get_teacher_test_service


@dataclass(frozen=True)
class TestStatistics:
    """Сводка по результатам теста."""

    __test__ = False

    test_id: int
    completed_count: int
    average_percentage: float
    perfect_count: int


def compute_statistics(test_id: int, results: List[TestResult]) -> TestStatistics:
    """
    Посчитать статистику: число прохождений, средний процент и число результатов на 100%.

    Для теста без результатов средний процент равен 0.
    """
    if not results:
        return TestStatistics(test_id, 0, 0.0, 0)
    average = sum(result.percentage for result in results) / len(results)
    perfect = sum(
        1 for result in results if result.max_score and result.score == result.max_score
    )
    return TestStatistics(
        test_id=test_id,
        completed_count=len(results),
        average_percentage=round(average, 2),
        perfect_count=perfect,
    )


async def list_results_service(
    store: DataStore, user: User, test_id: Optional[int] = None
) -> List[TestResult]:
    """
    Результаты, доступные пользователю.

    Преподаватель видит результаты своих тестов, студент - только свои.
    """
    if user.role == Role.STUDENT:
        return await store.list_results(test_id=test_id, student_id=user.id)

    if test_id is not None:
        await get_teacher_test_service(store, test_id, user.id)
        return await store.list_results(test_id=test_id)

    own_tests = {test.id for test in await store.list_tests(teacher_id=user.id)}
    return [r for r in await store.list_results() if r.test_id in own_tests]


async def get_test_statistics_service(
    store: DataStore, test_id: int, teacher_id: int
) -> TestStatistics:
    await get_teacher_test_service(store, test_id, teacher_id)
    return compute_statistics(test_id, await store.list_results(test_id=test_id))
