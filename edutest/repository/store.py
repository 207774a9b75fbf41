# -*- coding: utf-8 -*-
"""
EduTest/edutest/repository/store.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Порт хранилища данных.

Ядро и сервисы работают только с этим интерфейсом. Запись - это замена
записи целиком или добавление; каскадное удаление группы или теста выглядит
для читателей атомарным.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from edutest.domain.entities import (Group, GroupBase, Test, TestBase,
                                     TestResult, TestResultDraft, User,
                                     UserBase)


class DataStore(ABC):
    """Абстрактное асинхронное хранилище пользователей, групп, тестов и результатов."""

    # ----------------------------- USERS ---------------------------------

    @abstractmethod
    async def list_users(self) -> List[User]: ...

    @abstractmethod
    async def get_user(self, user_id: int) -> User:
        """Raises: NotFoundError"""

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    async def create_user(self, data: UserBase) -> User: ...

    # ----------------------------- GROUPS --------------------------------

    @abstractmethod
    async def list_groups(self, teacher_id: Optional[int] = None) -> List[Group]: ...

    @abstractmethod
    async def get_group(self, group_id: int) -> Group:
        """Raises: NotFoundError"""

    @abstractmethod
    async def create_group(self, teacher_id: int, data: GroupBase) -> Group: ...

    @abstractmethod
    async def update_group(self, group: Group) -> Group: ...

    @abstractmethod
    async def delete_group(self, group_id: int) -> List[int]:
        """Удалить группу, назначенные ей тесты и их результаты.

        Returns:
            ID удаленных тестов
        """

    # ----------------------------- TESTS ---------------------------------

    @abstractmethod
    async def list_tests(
        self, teacher_id: Optional[int] = None, group_id: Optional[int] = None
    ) -> List[Test]: ...

    @abstractmethod
    async def get_test(self, test_id: int) -> Test:
        """Raises: NotFoundError"""

    @abstractmethod
    async def create_test(self, teacher_id: int, data: TestBase) -> Test: ...

    @abstractmethod
    async def update_test(self, test: Test) -> Test: ...

    @abstractmethod
    async def delete_test(self, test_id: int) -> None:
        """Удалить тест вместе с его результатами."""

    # ----------------------------- RESULTS -------------------------------

    @abstractmethod
    async def list_results(
        self, test_id: Optional[int] = None, student_id: Optional[int] = None
    ) -> List[TestResult]: ...

    @abstractmethod
    async def append_result(self, draft: TestResultDraft) -> TestResult: ...
