# -*- coding: utf-8 -*-
"""
EduTest/edutest/api/v1/groups/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
CRUD операции преподавателя над группами и список студентов группы.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from loguru import logger

from edutest.api.deps import current_teacher, get_attempt_service
from edutest.clients.database_client import get_store
from edutest.domain.entities import Group, GroupBase, User
from edutest.repository.store import DataStore
from edutest.service.attempts import AttemptService
from edutest.service.groups import (create_group_service, delete_group_service,
                                    get_group_service,
                                    get_group_students_service,
                                    list_groups_service, update_group_service)

router = APIRouter(tags=["👥 Группы"])


@router.get("", response_model=List[Group])
async def list_groups_endpoint(
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
) -> List[Group]:
    """Группы текущего преподавателя."""
    return await list_groups_service(store, teacher.id)


@router.post("", response_model=Group, status_code=status.HTTP_201_CREATED)
async def create_group_endpoint(
    group_data: GroupBase,
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
) -> Group:
    """Создать новую группу."""
    logger.info(f"Создание группы: {group_data.group_number}")
    return await create_group_service(store, teacher.id, group_data)


@router.get("/{group_id}", response_model=Group)
async def get_group_endpoint(
    group_id: int,
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
) -> Group:
    return await get_group_service(store, group_id, teacher.id)


@router.put("/{group_id}", response_model=Group)
async def update_group_endpoint(
    group_id: int,
    group_data: GroupBase,
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
) -> Group:
    """Заменить данные группы и список студентов."""
    return await update_group_service(store, group_id, teacher.id, group_data)


@router.delete("/{group_id}")
async def delete_group_endpoint(
    group_id: int,
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
    attempts: AttemptService = Depends(get_attempt_service),
) -> dict:
    """Удалить группу, назначенные ей тесты и результаты этих тестов."""
    deleted_test_ids = await delete_group_service(store, group_id, teacher.id)
    attempts.drop_tests(deleted_test_ids)
    return {"message": "Группа удалена", "deletedTestIds": deleted_test_ids}


@router.get("/{group_id}/students", response_model=List[User])
async def get_group_students_endpoint(
    group_id: int,
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
) -> List[User]:
    """Зарегистрированные студенты, найденные в списке группы."""
    return await get_group_students_service(store, group_id, teacher.id)
