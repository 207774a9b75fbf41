# -*- coding: utf-8 -*-
"""
EduTest/edutest/domain/enums.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Определение классов перечислений для домена EduTest.

Роли пользователей, типы вопросов, состояния попытки и причины отказа
в доступе к тесту.
"""

import enum


class Role(str, enum.Enum):
    """Роли, доступные в системе."""

    TEACHER = "teacher"
    STUDENT = "student"


class QuestionType(str, enum.Enum):
    """Поддерживаемые типы вопросов."""

    SINGLE_CHOICE = "single-choice"
    MULTIPLE_CHOICE = "multiple-choice"
    TEXT = "text"


class AttemptState(str, enum.Enum):
    """Состояния жизненного цикла попытки прохождения теста."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    SUBMITTED = "submitted"
    DISCARDED = "discarded"  # Попытка покинута без отправки


class EligibilityReason(str, enum.Enum):
    """Причины, по которым студент не может начать попытку."""

    NOT_ASSIGNED = "not assigned"
    NOT_YET_OPEN = "not yet open"
    WINDOW_CLOSED = "window closed"
    ATTEMPTS_EXHAUSTED = "attempts exhausted"

    @property
    def message(self) -> str:
        return _REASON_MESSAGES[self]


_REASON_MESSAGES = {
    EligibilityReason.NOT_ASSIGNED: "Тест не назначен группам студента",
    EligibilityReason.NOT_YET_OPEN: "Тест еще не открыт",
    EligibilityReason.WINDOW_CLOSED: "Время прохождения теста истекло",
    EligibilityReason.ATTEMPTS_EXHAUSTED: "Превышено максимальное количество попыток",
}


class Grade(str, enum.Enum):
    """Оценочные диапазоны результата в процентах."""

    EXCELLENT = "excellent"  # >= 90%
    GOOD = "good"  # >= 70%
    SATISFACTORY = "satisfactory"  # >= 60%
    FAILED = "failed"
