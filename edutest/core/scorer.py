# -*- coding: utf-8 -*-
"""
Подсчет баллов за попытку.

Оценка всегда идет по каноническому списку вопросов теста, поэтому результат
не зависит от порядка, в котором вопросы показывались студенту.
"""

from dataclasses import dataclass
from typing import Any, Mapping

from edutest.core.evaluator import is_correct
from edutest.domain.entities import TestBase
from edutest.domain.enums import Grade


@dataclass(frozen=True, slots=True)
class ScoreResult:
    """Результат подсчета: набранные баллы и максимум."""

    score: int
    max_score: int

    @property
    def percentage(self) -> float:
        if not self.max_score:
            return 0.0
        return self.score / self.max_score * 100

    @property
    def grade(self) -> Grade:
        return grade_for(self.percentage)


def grade_for(percentage: float) -> Grade:
    """Оценочный диапазон по проценту правильных ответов."""
    if percentage >= 90:
        return Grade.EXCELLENT
    if percentage >= 70:
        return Grade.GOOD
    if percentage >= 60:
        return Grade.SATISFACTORY
    return Grade.FAILED


def score_attempt(test: TestBase, answers: Mapping[str, Any]) -> ScoreResult:
    """
    Посчитать баллы за ответы на тест.

    Args:
        test: Тест с каноническим списком вопросов
        answers: Ответы студента по ID вопроса

    Returns:
        ScoreResult, где 0 <= score <= max_score == len(test.questions)
    """
    score = sum(
        1 for question in test.questions if is_correct(question, answers.get(question.id))
    )
    return ScoreResult(score=score, max_score=len(test.questions))
