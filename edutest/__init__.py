"""EduTest: группы, тесты и результаты тестирования студентов."""

__version__ = "0.1.0"
