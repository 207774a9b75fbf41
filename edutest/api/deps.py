# -*- coding: utf-8 -*-
"""
Общие зависимости FastAPI: хранилище, сервис попыток и текущий пользователь.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status

from edutest.clients.database_client import get_store
from edutest.config.settings import settings
from edutest.domain.entities import User
from edutest.repository.store import DataStore
from edutest.security.security import authenticated, student_only, teacher_only
from edutest.service.attempts import AttemptService
from edutest.utils.exceptions import NotFoundError

_attempt_service: Optional[AttemptService] = None


def get_attempt_service(store: DataStore = Depends(get_store)) -> AttemptService:
    """Единственный на процесс реестр попыток."""
    global _attempt_service
    if _attempt_service is None:
        _attempt_service = AttemptService(
            store,
            timer_enabled=settings.attempt_timer_enabled,
            tick_interval=settings.attempt_tick_seconds,
        )
    return _attempt_service


async def shutdown_attempt_service() -> None:
    global _attempt_service
    if _attempt_service is not None:
        await _attempt_service.shutdown()
        _attempt_service = None


async def _load_user(store: DataStore, payload: dict) -> User:
    try:
        user = await store.get_user(int(payload["sub"]))
    except (NotFoundError, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Пользователь из токена не найден",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    if user.role.value != payload["role"]:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Роль в токене не совпадает с ролью пользователя",
        )
    return user


async def current_user(
    payload: dict = Depends(authenticated), store: DataStore = Depends(get_store)
) -> User:
    return await _load_user(store, payload)


async def current_teacher(
    payload: dict = Depends(teacher_only), store: DataStore = Depends(get_store)
) -> User:
    return await _load_user(store, payload)


async def current_student(
    payload: dict = Depends(student_only), store: DataStore = Depends(get_store)
) -> User:
    return await _load_user(store, payload)
