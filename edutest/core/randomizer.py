# -*- coding: utf-8 -*-
"""
Перемешивание вопросов и вариантов ответа для одной попытки.

Канонический тест не изменяется: перемешиваются только копии списков.
Источник случайности передается снаружи, чтобы тесты могли зафиксировать
последовательность.
"""

import random
from typing import List, Optional, Sequence, TypeVar

from edutest.config.logger import configure_logger
from edutest.domain.entities import Question, TestBase
from edutest.domain.enums import QuestionType

T = TypeVar("T")

logger = configure_logger(__name__)


class Randomizer:
    """Формирует порядок показа вопросов для попытки."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Равномерная перестановка Фишера-Йетса над копией последовательности."""
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self._rng.randrange(i + 1)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    def present_question(self, question: Question) -> Question:
        if (
            question.type == QuestionType.TEXT
            or not question.randomize_options
            or not question.options
        ):
            return question.model_copy(deep=True)
        return question.model_copy(
            update={"options": self.shuffle(question.options)}, deep=True
        )

    def presentation_order(self, test: TestBase) -> List[Question]:
        """
        Получить порядок показа вопросов.

        Args:
            test: Тест с каноническим порядком вопросов

        Returns:
            Копии вопросов в порядке показа, варианты ответа перемешаны
            для вопросов с randomize_options
        """
        questions = list(test.questions)
        if test.randomize_questions:
            questions = self.shuffle(questions)
            logger.debug(f"🔀 Перемешано {len(questions)} вопросов")
        return [self.present_question(question) for question in questions]
