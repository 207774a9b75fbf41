"""
Модуль для сравнения текстовых ответов и идентификационных строк
"""

from typing import Any, Iterable


def normalize_text(text: Any) -> str:
    """
    Нормализует текст для сравнения:
    - Убирает пробелы по краям
    - Приводит к нижнему регистру

    Нестроковые значения дают пустую строку.
    """
    if not isinstance(text, str):
        return ""

    return text.strip().lower()


def matches_any(candidate: Any, expected: Iterable[Any]) -> bool:
    """
    Проверяет, совпадает ли нормализованный ответ хотя бы с одним из вариантов

    Пустой ответ не совпадает ни с чем, даже с пустым вариантом.
    """
    normalized = normalize_text(candidate)
    if not normalized:
        return False

    return any(normalized == normalize_text(option) for option in expected)
