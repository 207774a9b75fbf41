# -*- coding: utf-8 -*-
"""
Сервис для работы с группами.

Этот модуль содержит бизнес-логику для работы с группами: валидацию,
проверку владельца, каскадное удаление и поиск студентов группы.
"""

from typing import List

from loguru import logger

from edutest.core.membership import groups_for_student, students_in_group
from edutest.domain.entities import Group, GroupBase, GroupStudent, User
from edutest.repository.store import DataStore
from edutest.service.users import validate_full_name
from edutest.utils.exceptions import PermissionDeniedError, ValidationError


def validate_group_data(data: GroupBase) -> GroupBase:
    """
    Проверить и нормализовать данные группы.

    Raises:
        ValidationError: Если поля пустые, нет студентов или ФИО неполное
    """
    group_number = data.group_number.strip()
    specialty = data.specialty.strip()
    institution = data.institution.strip()
    if not group_number:
        raise ValidationError("Пожалуйста, введите номер группы")
    if not specialty:
        raise ValidationError("Пожалуйста, введите специальность")
    if not institution:
        raise ValidationError("Пожалуйста, введите название учебного заведения")

    students = [s for s in data.students if s.full_name.strip()]
    if not students:
        raise ValidationError("Добавьте хотя бы одного студента")

    normalized: List[GroupStudent] = []
    for student in students:
        try:
            full_name = validate_full_name(student.full_name)
        except ValidationError:
            raise ValidationError(
                f"Пожалуйста, введите полное ФИО студента: '{student.full_name}'"
            ) from None
        normalized.append(student.model_copy(update={"full_name": full_name}))

    return GroupBase(
        group_number=group_number,
        specialty=specialty,
        institution=institution,
        students=normalized,
    )


def _ensure_owner(group: Group, teacher_id: int) -> None:
    if group.teacher_id != teacher_id:
        logger.warning(
            f"Преподаватель {teacher_id} пытался изменить чужую группу {group.id}"
        )
        raise PermissionDeniedError("Группа принадлежит другому преподавателю")


async def create_group_service(
    store: DataStore, teacher_id: int, data: GroupBase
) -> Group:
    """
    Создать новую группу.

    Args:
        store: Хранилище данных
        teacher_id: ID преподавателя-владельца
        data: Данные группы

    Returns:
        Созданная группа

    Raises:
        ValidationError: Если данные невалидны
    """
    group = await store.create_group(teacher_id, validate_group_data(data))
    logger.info(
        f"👥 Группа {group.group_number} создана с ID {group.id} "
        f"({len(group.students)} студентов)"
    )
    return group


async def list_groups_service(store: DataStore, teacher_id: int) -> List[Group]:
    return await store.list_groups(teacher_id=teacher_id)


async def get_group_service(store: DataStore, group_id: int, teacher_id: int) -> Group:
    group = await store.get_group(group_id)
    _ensure_owner(group, teacher_id)
    return group


async def update_group_service(
    store: DataStore, group_id: int, teacher_id: int, data: GroupBase
) -> Group:
    """Заменить данные группы целиком. ID записей списка и связи user_id сохраняются."""
    group = await get_group_service(store, group_id, teacher_id)
    data = validate_group_data(data)

    # Переносим связь с пользователем для записей, пришедших без user_id
    linked = {s.id: s.user_id for s in group.students if s.user_id is not None}
    students = [
        s if s.user_id is not None or s.id not in linked
        else s.model_copy(update={"user_id": linked[s.id]})
        for s in data.students
    ]
    updated = group.model_copy(
        update={
            "group_number": data.group_number,
            "specialty": data.specialty,
            "institution": data.institution,
            "students": students,
        }
    )
    group = await store.update_group(updated)
    logger.info(f"✏️ Группа {group_id} обновлена")
    return group


async def delete_group_service(store: DataStore, group_id: int, teacher_id: int) -> List[int]:
    """
    Удалить группу вместе с назначенными ей тестами и их результатами.

    Returns:
        ID удаленных тестов
    """
    await get_group_service(store, group_id, teacher_id)
    test_ids = await store.delete_group(group_id)
    logger.info(f"🗑️ Группа {group_id} удалена, удалено тестов: {len(test_ids)}")
    return test_ids


async def get_group_students_service(
    store: DataStore, group_id: int, teacher_id: int
) -> List[User]:
    """Зарегистрированные студенты, найденные в списке группы."""
    group = await get_group_service(store, group_id, teacher_id)
    return students_in_group(group, await store.list_users())


async def get_student_groups_service(store: DataStore, user: User) -> List[Group]:
    return groups_for_student(await store.list_groups(), user)
