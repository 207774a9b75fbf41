#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Скрипт инициализации базы данных.

Выполняет:
1. Создание таблиц
2. Создание демо-данных: преподаватель, группа, студент и тест
3. Вывод bearer токенов для преподавателя и студента
"""

import asyncio
import sys
from datetime import timedelta
from pathlib import Path

# Добавляем корень репозитория в sys.path
sys.path.append(str(Path(__file__).parent.parent))

from edutest.clients.database_client import get_store, init_db
from edutest.config.logger import configure_logger
from edutest.domain.entities import (GroupBase, GroupStudent, Question,
                                     TestBase, UserBase, utcnow)
from edutest.domain.enums import QuestionType, Role
from edutest.repository.store import DataStore
from edutest.security.security import create_token_for_user
from edutest.service.groups import create_group_service
from edutest.service.tests import create_test_service
from edutest.service.users import register_user_service

logger = configure_logger("scripts.init_database")

TEACHER_EMAIL = "teacher@edutest.local"
STUDENT_EMAIL = "student@edutest.local"
STUDENT_NAME = "Петров Петр Петрович"
INSTITUTION = "Колледж информатики"
GROUP_NUMBER = "101"


async def seed_demo_data(store: DataStore) -> None:
    teacher = await store.get_user_by_email(TEACHER_EMAIL)
    if teacher is None:
        teacher = await register_user_service(
            store,
            UserBase(
                full_name="Иванова Мария Сергеевна",
                email=TEACHER_EMAIL,
                role=Role.TEACHER,
                institution=INSTITUTION,
            ),
        )
        print(f"👤 Преподаватель создан: {teacher.email}")

    student = await store.get_user_by_email(STUDENT_EMAIL)
    if student is None:
        group = await create_group_service(
            store,
            teacher.id,
            GroupBase(
                group_number=GROUP_NUMBER,
                specialty="Программирование",
                institution=INSTITUTION,
                students=[GroupStudent(full_name=STUDENT_NAME)],
            ),
        )
        print(f"👥 Группа создана: {group.group_number}")

        student = await register_user_service(
            store,
            UserBase(
                full_name=STUDENT_NAME,
                email=STUDENT_EMAIL,
                role=Role.STUDENT,
                institution=INSTITUTION,
                group_number=GROUP_NUMBER,
            ),
        )
        print(f"🎓 Студент создан: {student.email}")

        now = utcnow()
        test = await create_test_service(
            store,
            teacher.id,
            TestBase(
                title="Основы Python",
                subject="Программирование",
                description="Демонстрационный тест",
                group_ids=[group.id],
                time_limit=10,
                max_attempts=2,
                start_date=now - timedelta(days=1),
                end_date=now + timedelta(days=30),
                randomize_questions=True,
                questions=[
                    Question(
                        text="Какой тип у значения 3.14?",
                        type=QuestionType.SINGLE_CHOICE,
                        options=["int", "float", "str"],
                        correct_answer="float",
                        randomize_options=True,
                    ),
                    Question(
                        text="Какие типы изменяемые?",
                        type=QuestionType.MULTIPLE_CHOICE,
                        options=["list", "tuple", "dict", "str"],
                        correct_answer=["list", "dict"],
                    ),
                    Question(
                        text="Ключевое слово для определения функции",
                        type=QuestionType.TEXT,
                        correct_answer="def",
                        alternative_answers=["async def"],
                    ),
                ],
            ),
        )
        print(f"🧪 Тест создан: {test.title}")

    print(f"\n🔑 Токен преподавателя:\nBearer {create_token_for_user(teacher)}")
    print(f"\n🔑 Токен студента:\nBearer {create_token_for_user(student)}")


async def init_database():
    """Создание таблиц и демо-данных."""
    try:
        print("🚀 Начинаем инициализацию базы данных...")
        await init_db()
        print("✅ Таблицы созданы")
        await seed_demo_data(get_store())
        print("🎉 Инициализация базы данных завершена успешно!")
    except Exception as e:
        logger.error(f"Ошибка при инициализации базы данных: {e}")
        print(f"❌ Ошибка: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(init_database())
