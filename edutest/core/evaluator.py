# -*- coding: utf-8 -*-
"""
Проверка ответа студента на один вопрос.

Неверная форма ответа (список для одиночного выбора, None, числа и т.п.)
считается неправильным ответом и никогда не приводит к исключению.
"""

from typing import Any, List, Optional

from edutest.domain.entities import Question
from edutest.domain.enums import QuestionType
from edutest.utils.text_comparison import matches_any


def _as_string_list(value: Any) -> Optional[List[str]]:
    if not isinstance(value, (list, tuple)):
        return None
    if not all(isinstance(item, str) for item in value):
        return None
    return list(value)


def _check_text(question: Question, submitted: Any) -> bool:
    if not isinstance(submitted, str):
        return False

    # Список в correct_answer сам является набором допустимых ответов
    if isinstance(question.correct_answer, list):
        candidates = list(question.correct_answer)
    else:
        candidates = [question.correct_answer, *(question.alternative_answers or [])]
    return matches_any(submitted, candidates)


def _check_single_choice(question: Question, submitted: Any) -> bool:
    if not isinstance(submitted, str) or not isinstance(question.correct_answer, str):
        return False
    return submitted == question.correct_answer


def _check_multiple_choice(question: Question, submitted: Any) -> bool:
    answer = _as_string_list(submitted)
    correct = _as_string_list(question.correct_answer)
    if answer is None or correct is None:
        return False
    return len(answer) == len(correct) and sorted(answer) == sorted(correct)


_CHECKERS = {
    QuestionType.TEXT: _check_text,
    QuestionType.SINGLE_CHOICE: _check_single_choice,
    QuestionType.MULTIPLE_CHOICE: _check_multiple_choice,
}


def is_correct(question: Question, submitted: Any) -> bool:
    """
    Проверить ответ на вопрос.

    Args:
        question: Вопрос в каноническом виде
        submitted: Ответ студента (строка или список строк)

    Returns:
        True если ответ правильный
    """
    checker = _CHECKERS.get(question.type)
    if checker is None:
        return False
    return checker(question, submitted)
