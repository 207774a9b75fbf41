# -*- coding: utf-8 -*-
"""
EduTest/edutest/domain/entities.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Доменные сущности EduTest на Pydantic.

Сущности используются ядром (оценка, рандомизация, попытки) и портом хранилища
независимо от того, где данные хранятся. Атрибуты в snake_case, в JSON ключи
передаются в camelCase (`fullName`, `correctAnswer`, `timeLimit`, ...).
"""

from datetime import datetime, timezone
from typing import Annotated, Dict, List, Optional, Union
from uuid import uuid4

from pydantic import (AfterValidator, BaseModel, ConfigDict, Field,
                      field_validator, model_validator)
from pydantic.alias_generators import to_camel

from edutest.domain.enums import QuestionType, Role

AnswerValue = Union[str, List[str]]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    # SQLite возвращает naive datetime, считаем такие значения UTC
    if value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class EntityModel(BaseModel):
    """Базовая модель: camelCase в JSON, чтение из ORM-объектов."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ----------------------------- USERS ----------------------------------------


class UserBase(EntityModel):
    full_name: str = Field(min_length=1)
    email: str
    role: Role
    institution: str = ""
    group_number: Optional[str] = None
    photo_url: Optional[str] = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("Некорректный email")
        return value


class User(UserBase):
    id: int
    created_at: UtcDatetime = Field(default_factory=utcnow)


# ----------------------------- GROUPS ---------------------------------------


class GroupStudent(EntityModel):
    """Запись в списке студентов группы.

    `user_id` связывает запись с зарегистрированным пользователем; без него
    студент определяется по ФИО, учебному заведению и номеру группы.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    full_name: str
    user_id: Optional[int] = None


class GroupBase(EntityModel):
    group_number: str
    specialty: str
    institution: str
    students: List[GroupStudent] = Field(default_factory=list)


class Group(GroupBase):
    id: int
    teacher_id: int
    created_at: UtcDatetime = Field(default_factory=utcnow)


# ----------------------------- QUESTIONS ------------------------------------


class Question(EntityModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    text: str
    type: QuestionType
    options: Optional[List[str]] = None
    correct_answer: AnswerValue
    alternative_answers: Optional[List[str]] = None
    randomize_options: bool = False

    @model_validator(mode="after")
    def check_shape(self) -> "Question":
        if not self.text.strip():
            raise ValueError("Текст вопроса не может быть пустым")

        if self.type == QuestionType.TEXT:
            if self.options:
                raise ValueError("Текстовый вопрос не может содержать варианты ответа")
            if not isinstance(self.correct_answer, str) or not self.correct_answer.strip():
                raise ValueError("Для текстового вопроса нужен правильный ответ")
            return self

        if self.alternative_answers:
            raise ValueError("Альтернативные ответы допустимы только для текстовых вопросов")
        if not self.options or len(self.options) < 2:
            raise ValueError("Вопрос с выбором должен содержать минимум 2 варианта")
        if any(not option.strip() for option in self.options):
            raise ValueError("Варианты ответа не могут быть пустыми")

        if self.type == QuestionType.SINGLE_CHOICE:
            if not isinstance(self.correct_answer, str):
                raise ValueError("Для одиночного выбора правильный ответ - строка")
            if self.correct_answer not in self.options:
                raise ValueError("Правильный ответ должен быть одним из вариантов")
        else:
            if not isinstance(self.correct_answer, list) or not self.correct_answer:
                raise ValueError("Для множественного выбора нужен список правильных ответов")
            if any(answer not in self.options for answer in self.correct_answer):
                raise ValueError("Правильные ответы должны быть из списка вариантов")
        return self


# ----------------------------- TESTS ----------------------------------------


class TestBase(EntityModel):
    __test__ = False

    title: str = Field(min_length=1)
    subject: str = ""
    description: str = ""
    group_ids: List[int] = Field(default_factory=list)
    questions: List[Question] = Field(default_factory=list)
    time_limit: Optional[int] = Field(default=None, gt=0, description="Минуты")
    max_attempts: Optional[int] = Field(default=None, gt=0)
    start_date: UtcDatetime
    end_date: UtcDatetime
    randomize_questions: bool = False

    @model_validator(mode="after")
    def check_window(self) -> "TestBase":
        if self.start_date >= self.end_date:
            raise ValueError("Дата окончания теста должна быть позже даты начала")
        ids = [question.id for question in self.questions]
        if len(ids) != len(set(ids)):
            raise ValueError("ID вопросов в тесте должны быть уникальными")
        return self

    def question_by_id(self, question_id: str) -> Optional[Question]:
        return next((q for q in self.questions if q.id == question_id), None)


class Test(TestBase):
    __test__ = False

    id: int
    teacher_id: int
    created_at: UtcDatetime = Field(default_factory=utcnow)


# ----------------------------- RESULTS --------------------------------------


class TestResultDraft(EntityModel):
    __test__ = False

    test_id: int
    student_id: int
    answers: Dict[str, AnswerValue] = Field(default_factory=dict)
    score: int = Field(ge=0)
    max_score: int = Field(ge=0)
    completed_at: UtcDatetime = Field(default_factory=utcnow)


class TestResult(TestResultDraft):
    __test__ = False

    id: int

    @property
    def percentage(self) -> float:
        if not self.max_score:
            return 0.0
        return self.score / self.max_score * 100
