# -*- coding: utf-8 -*-
"""
EduTest/edutest/api/v1/tests/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Тесты: CRUD преподавателя, статистика и список тестов студента.
"""

from dataclasses import asdict
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from loguru import logger

from edutest.api.deps import (current_student, current_teacher,
                              get_attempt_service)
from edutest.clients.database_client import get_store
from edutest.domain.entities import Test, TestBase, User
from edutest.repository.store import DataStore
from edutest.service.attempts import AttemptService
from edutest.service.results import get_test_statistics_service
from edutest.service.tests import (create_test_service, delete_test_service,
                                   get_teacher_test_service,
                                   list_teacher_tests_service,
                                   split_student_tests_service,
                                   update_test_service)

from .schemas import StudentTestsView, StudentTestView, TestStatisticsView

router = APIRouter(tags=["🧪 Тесты"])


# ----------------------------- STUDENT --------------------------------------


@router.get("/available", response_model=StudentTestsView)
async def get_available_tests_endpoint(
    store: DataStore = Depends(get_store),
    student: User = Depends(current_student),
) -> StudentTestsView:
    """
    Тесты, назначенные группам студента.

    Тесты без результатов попадают в available, с результатами - в completed.
    Для каждого теста указано, можно ли начать новую попытку.
    """
    split = await split_student_tests_service(store, student)
    logger.info(
        f"🎓 Студент {student.id}: доступно {len(split.available)}, "
        f"завершено {len(split.completed)}"
    )
    return StudentTestsView(
        available=[
            StudentTestView.build(test, False, split.eligibility[test.id])
            for test in split.available
        ],
        completed=[
            StudentTestView.build(test, True, split.eligibility[test.id])
            for test in split.completed
        ],
    )


# ----------------------------- TEACHER --------------------------------------


@router.get("", response_model=List[Test])
async def list_tests_endpoint(
    group_id: Optional[int] = Query(None, description="Фильтр по группе"),
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
) -> List[Test]:
    return await list_teacher_tests_service(store, teacher.id, group_id=group_id)


@router.post("", response_model=Test, status_code=status.HTTP_201_CREATED)
async def create_test_endpoint(
    test_data: TestBase,
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
) -> Test:
    logger.info(f"Создание теста: {test_data.title}")
    return await create_test_service(store, teacher.id, test_data)


@router.get("/{test_id}", response_model=Test)
async def get_test_endpoint(
    test_id: int,
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
) -> Test:
    return await get_teacher_test_service(store, test_id, teacher.id)


@router.put("/{test_id}", response_model=Test)
async def update_test_endpoint(
    test_id: int,
    test_data: TestBase,
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
) -> Test:
    """Заменить тест целиком. Уже сохраненные результаты не пересчитываются."""
    return await update_test_service(store, test_id, teacher.id, test_data)


@router.delete("/{test_id}")
async def delete_test_endpoint(
    test_id: int,
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
    attempts: AttemptService = Depends(get_attempt_service),
) -> dict:
    """Удалить тест вместе с результатами."""
    await delete_test_service(store, test_id, teacher.id)
    attempts.drop_tests([test_id])
    return {"message": "Тест удален"}


@router.get("/{test_id}/statistics", response_model=TestStatisticsView)
async def get_test_statistics_endpoint(
    test_id: int,
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
) -> TestStatisticsView:
    """Число прохождений, средний процент и число результатов на 100%."""
    stats = await get_test_statistics_service(store, test_id, teacher.id)
    return TestStatisticsView(**asdict(stats))
