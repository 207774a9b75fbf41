# -*- coding: utf-8 -*-
"""security.security
~~~~~~~~~~~~~~~~~~~~
JWT помощники и проверки доступа на основе ролей.

Ключевые моменты
================
* Использует *python‑jose* для компактной обработки JWS.
* Токен несет `sub` (ID пользователя) и `role`. Выдача токенов вне API:
  их печатает скрипт инициализации базы данных.
* Экспортирует **create_access_token**, **verify_token**, **require_roles**
  (фабрика зависимостей FastAPI) и **get_current_user**.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable

from fastapi import HTTPException, Request, status
from jose import JWTError, jwt

from edutest.config.logger import configure_logger
from edutest.config.settings import settings
from edutest.domain.enums import Role

logger = configure_logger(__name__)

# ---------------------------------------------------------------------------
# JWT помощники
# ---------------------------------------------------------------------------


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta
        if expires_delta is not None
        else timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "token_type": "access"})
    if "sub" in to_encode and not isinstance(to_encode["sub"], str):
        to_encode["sub"] = str(to_encode["sub"])
    if isinstance(to_encode.get("role"), Role):
        to_encode["role"] = to_encode["role"].value
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_token_for_user(user) -> str:
    """Токен доступа для пользователя с полями id и role."""
    return create_access_token({"sub": user.id, "role": user.role})


def verify_token(token: str) -> dict:
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except JWTError as exc:
        logger.error(f"Ошибка проверки JWT: {str(exc)}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Недействительный или истекший токен",
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc

    if payload.get("token_type") != "access" or payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Недействительный токен",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


# ---------------------------------------------------------------------------
# Проверка на основе ролей
# ---------------------------------------------------------------------------


def _extract_token(request: Request) -> str:
    auth: str | None = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Отсутствует bearer токен",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth.split(" ", 1)[1]


def get_current_user(request: Request) -> dict:
    """
    Получить текущего пользователя из токена.

    Returns:
        Payload токена: `sub` (строка с ID) и `role`

    Raises:
        HTTPException: Если токен недействителен или отсутствует
    """
    payload = verify_token(_extract_token(request))
    try:
        Role(payload["role"])
    except (KeyError, ValueError) as exc:
        logger.error(f"Неверная роль в payload: {payload}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Неверный payload токена",
        ) from exc
    return payload


def require_roles(*allowed_roles: Role) -> Callable[[Request], dict]:
    allowed: set[Role] = set(allowed_roles)

    async def checker(request: Request) -> dict:
        payload = get_current_user(request)
        role = Role(payload["role"])
        if role not in allowed:
            logger.warning(
                f"Доступ запрещен: Пользователь {payload.get('sub')} с ролью {role.value} "
                f"пытался получить доступ к {request.url.path}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="Недостаточно прав"
            )
        return payload

    return checker


# Удобные предустановки --------------------------------------------------------

authenticated = require_roles(Role.TEACHER, Role.STUDENT)

teacher_only = require_roles(Role.TEACHER)

student_only = require_roles(Role.STUDENT)
