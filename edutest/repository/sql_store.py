# -*- coding: utf-8 -*-
"""
EduTest/edutest/repository/sql_store.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Хранилище на SQLAlchemy async.

Каждая операция открывает свою сессию из фабрики. Каскадное удаление группы
или теста выполняется в одной транзакции.
"""

from typing import Iterable, List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from edutest.config.logger import configure_logger
from edutest.domain import models
from edutest.domain.entities import (Group, GroupBase, Test, TestBase,
                                     TestResult, TestResultDraft, User,
                                     UserBase, utcnow)
from edutest.repository.base import (create_item, delete_item, get_item,
                                     list_items)
from edutest.repository.store import DataStore
from edutest.utils.exceptions import ConflictError, NotFoundError

logger = configure_logger(__name__)


def _to_user(row: models.User) -> User:
    return User.model_validate(row)


def _to_group(row: models.Group) -> Group:
    return Group.model_validate(row)


def _to_test(row: models.Test) -> Test:
    return Test.model_validate(row)


def _to_result(row: models.TestResult) -> TestResult:
    return TestResult.model_validate(row)


def _test_columns(data: TestBase) -> dict:
    dumped = data.model_dump(mode="json", include={"questions"})
    return {
        "title": data.title,
        "subject": data.subject,
        "description": data.description,
        "questions": dumped["questions"],
        "time_limit": data.time_limit,
        "max_attempts": data.max_attempts,
        "start_date": data.start_date,
        "end_date": data.end_date,
        "randomize_questions": data.randomize_questions,
    }


def _group_columns(data: GroupBase) -> dict:
    return {
        "group_number": data.group_number,
        "specialty": data.specialty,
        "institution": data.institution,
        "students": data.model_dump(mode="json", include={"students"})["students"],
    }


class SqlDataStore(DataStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # ----------------------------- USERS ---------------------------------

    async def list_users(self) -> List[User]:
        async with self._session_factory() as session:
            return [_to_user(row) for row in await list_items(session, models.User)]

    async def get_user(self, user_id: int) -> User:
        async with self._session_factory() as session:
            return _to_user(await get_item(session, models.User, user_id))

    async def get_user_by_email(self, email: str) -> Optional[User]:
        async with self._session_factory() as session:
            rows = await list_items(session, models.User, email=email.strip().lower())
            return _to_user(rows[0]) if rows else None

    async def create_user(self, data: UserBase) -> User:
        if await self.get_user_by_email(data.email):
            raise ConflictError("Пользователь с таким email уже существует")
        async with self._session_factory() as session:
            try:
                row = await create_item(
                    session,
                    models.User,
                    created_at=utcnow(),
                    **data.model_dump(include=set(UserBase.model_fields)),
                )
            except IntegrityError as e:
                await session.rollback()
                raise ConflictError("Пользователь с таким email уже существует") from e
            return _to_user(row)

    # ----------------------------- GROUPS --------------------------------

    async def list_groups(self, teacher_id: Optional[int] = None) -> List[Group]:
        async with self._session_factory() as session:
            rows = await list_items(session, models.Group, teacher_id=teacher_id)
            return [_to_group(row) for row in rows]

    async def get_group(self, group_id: int) -> Group:
        async with self._session_factory() as session:
            return _to_group(await get_item(session, models.Group, group_id))

    async def create_group(self, teacher_id: int, data: GroupBase) -> Group:
        async with self._session_factory() as session:
            row = await create_item(
                session,
                models.Group,
                teacher_id=teacher_id,
                created_at=utcnow(),
                **_group_columns(data),
            )
            return _to_group(row)

    async def update_group(self, group: Group) -> Group:
        async with self._session_factory() as session:
            row = await get_item(session, models.Group, group.id)
            for key, value in _group_columns(group).items():
                setattr(row, key, value)
            await session.commit()
            await session.refresh(row)
            return _to_group(row)

    async def delete_group(self, group_id: int) -> List[int]:
        async with self._session_factory() as session:
            async with session.begin():
                await get_item(session, models.Group, group_id)
                test_ids = list(
                    (
                        await session.execute(
                            select(models.TestGroup.test_id).where(
                                models.TestGroup.group_id == group_id
                            )
                        )
                    ).scalars()
                )
                for test_id in test_ids:
                    await self._drop_test(session, test_id)
                await delete_item(session, models.Group, group_id, commit=False)

        logger.debug(f"Группа {group_id} удалена вместе с тестами {test_ids}")
        return test_ids

    # ----------------------------- TESTS ---------------------------------

    async def list_tests(
        self, teacher_id: Optional[int] = None, group_id: Optional[int] = None
    ) -> List[Test]:
        async with self._session_factory() as session:
            stmt = select(models.Test).order_by(models.Test.id)
            if teacher_id is not None:
                stmt = stmt.where(models.Test.teacher_id == teacher_id)
            if group_id is not None:
                stmt = stmt.where(
                    models.Test.id.in_(
                        select(models.TestGroup.test_id).where(
                            models.TestGroup.group_id == group_id
                        )
                    )
                )
            rows = (await session.execute(stmt)).scalars().all()
            return [_to_test(row) for row in rows]

    async def get_test(self, test_id: int) -> Test:
        async with self._session_factory() as session:
            return _to_test(await get_item(session, models.Test, test_id))

    async def _check_groups(self, session: AsyncSession, group_ids: Iterable[int]) -> None:
        wanted = set(group_ids)
        if not wanted:
            return
        found = set(
            (
                await session.execute(
                    select(models.Group.id).where(models.Group.id.in_(wanted))
                )
            ).scalars()
        )
        for group_id in sorted(wanted - found):
            raise NotFoundError(resource_type="Group", resource_id=group_id)

    async def create_test(self, teacher_id: int, data: TestBase) -> Test:
        async with self._session_factory() as session:
            await self._check_groups(session, data.group_ids)
            row = await create_item(
                session,
                models.Test,
                teacher_id=teacher_id,
                created_at=utcnow(),
                group_links=[
                    models.TestGroup(group_id=group_id)
                    for group_id in dict.fromkeys(data.group_ids)
                ],
                **_test_columns(data),
            )
            return _to_test(row)

    async def update_test(self, test: Test) -> Test:
        async with self._session_factory() as session:
            row = await get_item(session, models.Test, test.id)
            await self._check_groups(session, test.group_ids)
            for key, value in _test_columns(test).items():
                setattr(row, key, value)

            wanted = list(dict.fromkeys(test.group_ids))
            kept = [link for link in row.group_links if link.group_id in wanted]
            present = {link.group_id for link in kept}
            row.group_links = kept + [
                models.TestGroup(group_id=group_id)
                for group_id in wanted
                if group_id not in present
            ]

            await session.commit()
            await session.refresh(row)
            return _to_test(row)

    async def _drop_test(self, session: AsyncSession, test_id: int) -> None:
        await session.execute(
            delete(models.TestResult).where(models.TestResult.test_id == test_id)
        )
        await delete_item(session, models.Test, test_id, commit=False)

    async def delete_test(self, test_id: int) -> None:
        async with self._session_factory() as session:
            async with session.begin():
                await self._drop_test(session, test_id)

    # ----------------------------- RESULTS -------------------------------

    async def list_results(
        self, test_id: Optional[int] = None, student_id: Optional[int] = None
    ) -> List[TestResult]:
        async with self._session_factory() as session:
            rows = await list_items(
                session, models.TestResult, test_id=test_id, student_id=student_id
            )
            return [_to_result(row) for row in rows]

    async def append_result(self, draft: TestResultDraft) -> TestResult:
        async with self._session_factory() as session:
            exists = await session.scalar(
                select(func.count()).select_from(models.Test).where(
                    models.Test.id == draft.test_id
                )
            )
            if not exists:
                raise NotFoundError(resource_type="Test", resource_id=draft.test_id)
            row = await create_item(
                session,
                models.TestResult,
                test_id=draft.test_id,
                student_id=draft.student_id,
                answers=draft.model_dump(mode="json", include={"answers"})["answers"],
                score=draft.score,
                max_score=draft.max_score,
                completed_at=draft.completed_at,
            )
            return _to_result(row)
