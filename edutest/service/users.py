# -*- coding: utf-8 -*-
"""
Сервис для работы с пользователями.

Регистрация студента разрешена только если преподаватель уже добавил его
в список какой-либо группы. Найденные записи списка сразу связываются
с новым пользователем через user_id.
"""

from typing import List

from loguru import logger

from edutest.core.membership import roster_entry_matches
from edutest.domain.entities import User, UserBase
from edutest.domain.enums import Role
from edutest.repository.store import DataStore
from edutest.utils.exceptions import PermissionDeniedError, ValidationError

MIN_FULL_NAME_WORDS = 3


def validate_full_name(full_name: str) -> str:
    """Проверить, что ФИО состоит минимум из трех слов."""
    full_name = " ".join(full_name.split())
    if len(full_name.split(" ")) < MIN_FULL_NAME_WORDS:
        raise ValidationError(
            "Пожалуйста, введите полное ФИО (Фамилия Имя Отчество)"
        )
    return full_name


async def register_user_service(store: DataStore, data: UserBase) -> User:
    """
    Зарегистрировать пользователя.

    Args:
        store: Хранилище данных
        data: Данные пользователя

    Returns:
        Созданный пользователь

    Raises:
        ValidationError: Если данные невалидны
        ConflictError: Если email уже занят
        PermissionDeniedError: Если студента нет ни в одной группе
    """
    full_name = validate_full_name(data.full_name)
    if not data.institution.strip():
        raise ValidationError("Пожалуйста, введите название учебного заведения")

    if data.role == Role.STUDENT:
        if not (data.group_number or "").strip():
            raise ValidationError("Пожалуйста, введите номер группы")
    else:
        data = data.model_copy(update={"group_number": None})

    data = data.model_copy(
        update={"full_name": full_name, "institution": data.institution.strip()}
    )

    groups = await store.list_groups() if data.role == Role.STUDENT else []
    if data.role == Role.STUDENT:
        # Временный пользователь для сопоставления со списками групп до создания
        probe = User(id=0, **data.model_dump(include=set(UserBase.model_fields)))
        if not any(
            roster_entry_matches(group, entry, probe)
            for group in groups
            for entry in group.students
            if entry.user_id is None
        ):
            logger.warning(
                f"⛔ Регистрация отклонена: {data.email} не найден в списках групп"
            )
            raise PermissionDeniedError(
                "Вы не можете зарегистрироваться, так как преподаватель еще не "
                "добавил вас в группу. Пожалуйста, обратитесь к преподавателю."
            )

    user = await store.create_user(data)
    logger.info(f"👤 Зарегистрирован пользователь {user.id} ({user.role.value})")

    if user.role == Role.STUDENT:
        await _link_roster_entries(store, groups, user)
    return user


async def _link_roster_entries(store: DataStore, groups, user: User) -> None:
    for group in groups:
        changed = False
        for entry in group.students:
            if entry.user_id is None and roster_entry_matches(group, entry, user):
                entry.user_id = user.id
                changed = True
        if changed:
            await store.update_group(group)
            logger.debug(f"Студент {user.id} связан со списком группы {group.id}")


async def list_users_service(store: DataStore) -> List[User]:
    return await store.list_users()


async def get_user_service(store: DataStore, user_id: int) -> User:
    return await store.get_user(user_id)
