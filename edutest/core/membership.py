# -*- coding: utf-8 -*-
"""
Определение членства студента в группах.

Если запись в списке группы связана с пользователем через user_id, членство
определяется по нему. Иначе студент ищется по ФИО, учебному заведению и
номеру группы без учета регистра и пробелов по краям.
"""

from typing import Iterable, List, Set

from edutest.domain.entities import Group, GroupStudent, TestBase, User
from edutest.domain.enums import Role
from edutest.utils.text_comparison import normalize_text


def _same(left: str | None, right: str | None) -> bool:
    return normalize_text(left or "") == normalize_text(right or "")


def roster_entry_matches(group: Group, entry: GroupStudent, user: User) -> bool:
    if entry.user_id is not None:
        return entry.user_id == user.id
    return (
        _same(entry.full_name, user.full_name)
        and _same(group.institution, user.institution)
        and _same(group.group_number, user.group_number)
    )


def is_group_member(group: Group, user: User) -> bool:
    """Проверить, состоит ли пользователь-студент в группе."""
    if user.role != Role.STUDENT:
        return False
    return any(roster_entry_matches(group, entry, user) for entry in group.students)


def groups_for_student(groups: Iterable[Group], user: User) -> List[Group]:
    return [group for group in groups if is_group_member(group, user)]


def group_ids_for_student(groups: Iterable[Group], user: User) -> Set[int]:
    return {group.id for group in groups_for_student(groups, user)}


def is_test_visible(test: TestBase, student_group_ids: Set[int]) -> bool:
    return bool(set(test.group_ids) & student_group_ids)


def visible_tests(tests: Iterable[TestBase], groups: Iterable[Group], user: User) -> list:
    """Тесты, назначенные хотя бы одной группе студента."""
    student_group_ids = group_ids_for_student(groups, user)
    if not student_group_ids:
        return []
    return [test for test in tests if is_test_visible(test, student_group_ids)]


def students_in_group(group: Group, users: Iterable[User]) -> List[User]:
    """Зарегистрированные студенты, найденные в списке группы."""
    return [user for user in users if is_group_member(group, user)]
