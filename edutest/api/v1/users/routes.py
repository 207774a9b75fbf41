# -*- coding: utf-8 -*-
"""
EduTest/edutest/api/v1/users/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Регистрация и просмотр пользователей.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from loguru import logger

from edutest.api.deps import current_teacher, current_user
from edutest.clients.database_client import get_store
from edutest.domain.entities import User
from edutest.repository.store import DataStore
from edutest.service.users import list_users_service, register_user_service

from .schemas import UserCreateSchema

router = APIRouter(tags=["👤 Пользователи"])


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
async def register_user_endpoint(
    user_data: UserCreateSchema,
    store: DataStore = Depends(get_store),
) -> User:
    """Зарегистрировать пользователя. Email должен быть уникальным."""
    logger.info(f"Регистрация пользователя: {user_data.email} ({user_data.role.value})")
    return await register_user_service(store, user_data)


@router.get("", response_model=List[User])
async def list_users_endpoint(
    store: DataStore = Depends(get_store),
    teacher: User = Depends(current_teacher),
) -> List[User]:
    """Список всех пользователей (только для преподавателя)."""
    return await list_users_service(store)


@router.get("/me", response_model=User)
async def read_me_endpoint(user: User = Depends(current_user)) -> User:
    return user
