# -*- coding: utf-8 -*-
"""
Фикстуры и фабрики тестовых данных
"""

from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from edutest.domain.entities import (Group, GroupBase, GroupStudent, Question,
                                     Test, TestBase, User, UserBase, utcnow)
from edutest.domain.enums import QuestionType, Role
from edutest.repository.store import DataStore
from edutest.security.security import create_token_for_user

INSTITUTION = "Колледж связи"
GROUP_NUMBER = "101"


class FixedClock:
    """Управляемые часы для тестов."""

    def __init__(self, now: Optional[datetime] = None) -> None:
        self.now = now or utcnow()

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_token_for_user(user)}"}


def single_choice(qid: str, correct: str = "A", options=("A", "B", "C"), **kw) -> Question:
    return Question(
        id=qid,
        text=f"Вопрос {qid}",
        type=QuestionType.SINGLE_CHOICE,
        options=list(options),
        correct_answer=correct,
        **kw,
    )


def multiple_choice(
    qid: str, correct: Sequence[str] = ("A", "B"), options=("A", "B", "C", "D"), **kw
) -> Question:
    return Question(
        id=qid,
        text=f"Вопрос {qid}",
        type=QuestionType.MULTIPLE_CHOICE,
        options=list(options),
        correct_answer=list(correct),
        **kw,
    )


def text_question(qid: str, correct: str = "Москва", alternatives=None) -> Question:
    return Question(
        id=qid,
        text=f"Вопрос {qid}",
        type=QuestionType.TEXT,
        correct_answer=correct,
        alternative_answers=alternatives,
    )


def build_test_data(
    questions: List[Question],
    group_ids: Sequence[int] = (),
    now: Optional[datetime] = None,
    **kw,
) -> TestBase:
    now = now or utcnow()
    values = {
        "title": "Контрольная работа",
        "subject": "Информатика",
        "group_ids": list(group_ids),
        "questions": questions,
        "start_date": now - timedelta(hours=1),
        "end_date": now + timedelta(days=1),
    }
    values.update(kw)
    return TestBase(**values)


async def create_teacher(
    store: DataStore,
    email: str = "teacher@example.com",
    full_name: str = "Иванова Мария Сергеевна",
) -> User:
    return await store.create_user(
        UserBase(
            full_name=full_name,
            email=email,
            role=Role.TEACHER,
            institution=INSTITUTION,
        )
    )


async def create_student(
    store: DataStore,
    full_name: str = "Петров Петр Петрович",
    email: str = "student@example.com",
    institution: str = INSTITUTION,
    group_number: str = GROUP_NUMBER,
) -> User:
    return await store.create_user(
        UserBase(
            full_name=full_name,
            email=email,
            role=Role.STUDENT,
            institution=institution,
            group_number=group_number,
        )
    )


async def create_group(
    store: DataStore,
    teacher_id: int,
    students: Sequence[str] = ("Петров Петр Петрович",),
    group_number: str = GROUP_NUMBER,
    institution: str = INSTITUTION,
) -> Group:
    return await store.create_group(
        teacher_id,
        GroupBase(
            group_number=group_number,
            specialty="Программирование",
            institution=institution,
            students=[GroupStudent(full_name=name) for name in students],
        ),
    )


async def create_test(
    store: DataStore,
    teacher_id: int,
    group_ids: Sequence[int],
    questions: Optional[List[Question]] = None,
    **kw,
) -> Test:
    questions = questions or [single_choice("q1", "A"), single_choice("q2", "B")]
    return await store.create_test(teacher_id, build_test_data(questions, group_ids, **kw))


async def classroom(store: DataStore, **test_kw):
    """Преподаватель, группа со студентом, сам студент и тест для группы."""
    teacher = await create_teacher(store)
    group = await create_group(store, teacher.id)
    student = await create_student(store)
    test = await create_test(store, teacher.id, [group.id], **test_kw)
    return teacher, group, student, test
