# -*- coding: utf-8 -*-
"""
Сервис для работы с тестами.

Создание, обновление и удаление тестов преподавателем, а также список
тестов, видимых студенту, с разбиением на доступные и завершенные.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from edutest.core.eligibility import Eligibility, EligibilityGate
from edutest.core.membership import (group_ids_for_student, is_test_visible,
                                      visible_tests)
from edutest.domain.entities import Test, TestBase, User
from edutest.repository.store import DataStore
from edutest.utils.exceptions import (NotFoundError, PermissionDeniedError,
                                      ValidationError)


@dataclass
class StudentTests:
    """Тесты студента: еще не пройденные и завершенные."""

    available: List[Test] = field(default_factory=list)
    completed: List[Test] = field(default_factory=list)
    eligibility: Dict[int, Eligibility] = field(default_factory=dict)


def validate_test_data(data: TestBase) -> None:
    """
    Проверить данные теста сверх ограничений модели.

    Raises:
        ValidationError: Нет названия или вопросов
    """
    if not data.title.strip():
        raise ValidationError("Пожалуйста, введите название теста")
    if not data.questions:
        raise ValidationError("Пожалуйста, заполните все вопросы и варианты ответов")


async def _check_groups_owned(
    store: DataStore, teacher_id: int, group_ids: List[int]
) -> None:
    for group_id in dict.fromkeys(group_ids):
        group = await store.get_group(group_id)
        if group.teacher_id != teacher_id:
            raise PermissionDeniedError(
                f"Группа {group_id} принадлежит другому преподавателю"
            )


def _ensure_owner(test: Test, teacher_id: int) -> None:
    if test.teacher_id != teacher_id:
        logger.warning(f"Преподаватель {teacher_id} пытался изменить чужой тест {test.id}")
        raise PermissionDeniedError("Тест принадлежит другому преподавателю")


async def create_test_service(store: DataStore, teacher_id: int, data: TestBase) -> Test:
    """
    Создать тест.

    Args:
        store: Хранилище данных
        teacher_id: ID преподавателя
        data: Данные теста

    Returns:
        Созданный тест

    Raises:
        ValidationError: Если данные невалидны
        NotFoundError: Если группа не найдена
        PermissionDeniedError: Если группа принадлежит другому преподавателю
    """
    validate_test_data(data)
    await _check_groups_owned(store, teacher_id, data.group_ids)
    test = await store.create_test(teacher_id, data)
    logger.info(
        f"🧪 Тест '{test.title}' создан с ID {test.id}: "
        f"{len(test.questions)} вопросов, группы {test.group_ids}"
    )
    return test


async def list_teacher_tests_service(
    store: DataStore, teacher_id: int, group_id: Optional[int] = None
) -> List[Test]:
    return await store.list_tests(teacher_id=teacher_id, group_id=group_id)


async def get_teacher_test_service(store: DataStore, test_id: int, teacher_id: int) -> Test:
    test = await store.get_test(test_id)
    _ensure_owner(test, teacher_id)
    return test


async def update_test_service(
    store: DataStore, test_id: int, teacher_id: int, data: TestBase
) -> Test:
    current = await get_teacher_test_service(store, test_id, teacher_id)
    validate_test_data(data)
    await _check_groups_owned(store, teacher_id, data.group_ids)
    updated = Test(
        id=current.id,
        teacher_id=current.teacher_id,
        created_at=current.created_at,
        **data.model_dump(include=set(TestBase.model_fields)),
    )
    test = await store.update_test(updated)
    logger.info(f"✏️ Тест {test_id} обновлен")
    return test


async def delete_test_service(store: DataStore, test_id: int, teacher_id: int) -> None:
    await get_teacher_test_service(store, test_id, teacher_id)
    await store.delete_test(test_id)
    logger.info(f"🗑️ Тест {test_id} удален вместе с результатами")


async def list_student_tests_service(store: DataStore, student: User) -> List[Test]:
    """Тесты, назначенные хотя бы одной группе студента."""
    return visible_tests(await store.list_tests(), await store.list_groups(), student)


async def get_student_test_service(store: DataStore, test_id: int, student: User) -> Test:
    """
    Получить тест, видимый студенту.

    Raises:
        NotFoundError: Тест не существует или не назначен группам студента
    """
    test = await store.get_test(test_id)
    student_group_ids = group_ids_for_student(await store.list_groups(), student)
    if not is_test_visible(test, student_group_ids):
        raise NotFoundError(resource_type="Test", resource_id=test_id)
    return test


async def split_student_tests_service(
    store: DataStore, student: User, gate: Optional[EligibilityGate] = None
) -> StudentTests:
    """
    Разбить видимые тесты студента на доступные и завершенные.

    Завершенный тест - тест, по которому у студента есть хотя бы один результат.
    Для каждого теста вычисляется допуск к новой попытке.
    """
    gate = gate or EligibilityGate()
    tests = await list_student_tests_service(store, student)
    results = await store.list_results(student_id=student.id)
    completed_ids = {result.test_id for result in results}

    split = StudentTests()
    for test in tests:
        prior = [result for result in results if result.test_id == test.id]
        split.eligibility[test.id] = gate.can_start(test, student, prior)
        if test.id in completed_ids:
            split.completed.append(test)
        else:
            split.available.append(test)
    return split
