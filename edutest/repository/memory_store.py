# -*- coding: utf-8 -*-
"""
Хранилище в памяти процесса.

Используется в тестах и для локального запуска без базы данных. Все операции
синхронны внутри корутин, поэтому каскадное удаление не прерывается другими
задачами event loop. Наружу отдаются копии, чтобы вызывающий код не мог
изменить сохраненные записи.
"""

from itertools import count
from typing import Dict, List, Optional

from edutest.config.logger import configure_logger
from edutest.domain.entities import (Group, GroupBase, Test, TestBase,
                                     TestResult, TestResultDraft, User,
                                     UserBase, utcnow)
from edutest.repository.store import DataStore
from edutest.utils.exceptions import ConflictError, NotFoundError

logger = configure_logger(__name__)


class InMemoryDataStore(DataStore):
    def __init__(self) -> None:
        self._users: Dict[int, User] = {}
        self._groups: Dict[int, Group] = {}
        self._tests: Dict[int, Test] = {}
        self._results: Dict[int, TestResult] = {}
        self._ids = {name: count(1) for name in ("user", "group", "test", "result")}

    def _next_id(self, kind: str) -> int:
        return next(self._ids[kind])

    # ----------------------------- USERS ---------------------------------

    async def list_users(self) -> List[User]:
        return [user.model_copy(deep=True) for user in self._users.values()]

    async def get_user(self, user_id: int) -> User:
        user = self._users.get(user_id)
        if user is None:
            raise NotFoundError(resource_type="User", resource_id=user_id)
        return user.model_copy(deep=True)

    async def get_user_by_email(self, email: str) -> Optional[User]:
        email = email.strip().lower()
        user = next((u for u in self._users.values() if u.email == email), None)
        return user.model_copy(deep=True) if user else None

    async def create_user(self, data: UserBase) -> User:
        if await self.get_user_by_email(data.email):
            raise ConflictError("Пользователь с таким email уже существует")
        user = User(
            id=self._next_id("user"),
            created_at=utcnow(),
            **data.model_dump(include=set(UserBase.model_fields)),
        )
        self._users[user.id] = user
        return user.model_copy(deep=True)

    # ----------------------------- GROUPS --------------------------------

    async def list_groups(self, teacher_id: Optional[int] = None) -> List[Group]:
        return [
            group.model_copy(deep=True)
            for group in self._groups.values()
            if teacher_id is None or group.teacher_id == teacher_id
        ]

    async def get_group(self, group_id: int) -> Group:
        group = self._groups.get(group_id)
        if group is None:
            raise NotFoundError(resource_type="Group", resource_id=group_id)
        return group.model_copy(deep=True)

    async def create_group(self, teacher_id: int, data: GroupBase) -> Group:
        group = Group(
            id=self._next_id("group"),
            teacher_id=teacher_id,
            created_at=utcnow(),
            **data.model_dump(include=set(GroupBase.model_fields)),
        )
        self._groups[group.id] = group
        return group.model_copy(deep=True)

    async def update_group(self, group: Group) -> Group:
        if group.id not in self._groups:
            raise NotFoundError(resource_type="Group", resource_id=group.id)
        self._groups[group.id] = group.model_copy(deep=True)
        return group.model_copy(deep=True)

    async def delete_group(self, group_id: int) -> List[int]:
        if group_id not in self._groups:
            raise NotFoundError(resource_type="Group", resource_id=group_id)

        test_ids = [t.id for t in self._tests.values() if group_id in t.group_ids]
        for test_id in test_ids:
            self._drop_test(test_id)
        del self._groups[group_id]
        logger.debug(f"Группа {group_id} удалена вместе с тестами {test_ids}")
        return test_ids

    # ----------------------------- TESTS ---------------------------------

    async def list_tests(
        self, teacher_id: Optional[int] = None, group_id: Optional[int] = None
    ) -> List[Test]:
        return [
            test.model_copy(deep=True)
            for test in self._tests.values()
            if (teacher_id is None or test.teacher_id == teacher_id)
            and (group_id is None or group_id in test.group_ids)
        ]

    async def get_test(self, test_id: int) -> Test:
        test = self._tests.get(test_id)
        if test is None:
            raise NotFoundError(resource_type="Test", resource_id=test_id)
        return test.model_copy(deep=True)

    def _check_groups(self, group_ids: List[int]) -> None:
        for group_id in group_ids:
            if group_id not in self._groups:
                raise NotFoundError(resource_type="Group", resource_id=group_id)

    async def create_test(self, teacher_id: int, data: TestBase) -> Test:
        self._check_groups(data.group_ids)
        test = Test(
            id=self._next_id("test"),
            teacher_id=teacher_id,
            created_at=utcnow(),
            **data.model_dump(include=set(TestBase.model_fields)),
        )
        self._tests[test.id] = test
        return test.model_copy(deep=True)

    async def update_test(self, test: Test) -> Test:
        if test.id not in self._tests:
            raise NotFoundError(resource_type="Test", resource_id=test.id)
        self._check_groups(test.group_ids)
        self._tests[test.id] = test.model_copy(deep=True)
        return test.model_copy(deep=True)

    def _drop_test(self, test_id: int) -> None:
        del self._tests[test_id]
        for result_id in [r.id for r in self._results.values() if r.test_id == test_id]:
            del self._results[result_id]

    async def delete_test(self, test_id: int) -> None:
        if test_id not in self._tests:
            raise NotFoundError(resource_type="Test", resource_id=test_id)
        self._drop_test(test_id)

    # ----------------------------- RESULTS -------------------------------

    async def list_results(
        self, test_id: Optional[int] = None, student_id: Optional[int] = None
    ) -> List[TestResult]:
        return [
            result.model_copy(deep=True)
            for result in self._results.values()
            if (test_id is None or result.test_id == test_id)
            and (student_id is None or result.student_id == student_id)
        ]

    async def append_result(self, draft: TestResultDraft) -> TestResult:
        if draft.test_id not in self._tests:
            raise NotFoundError(resource_type="Test", resource_id=draft.test_id)
        result = TestResult(id=self._next_id("result"), **draft.model_dump())
        self._results[result.id] = result
        return result.model_copy(deep=True)
