# -*- coding: utf-8 -*-
"""
Общие фикстуры для тестирования
"""

import random

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (AsyncSession, async_sessionmaker,
                                    create_async_engine)
from sqlalchemy.pool import StaticPool

from edutest.api.deps import get_attempt_service
from edutest.clients.database_client import get_store
from edutest.core.randomizer import Randomizer
from edutest.domain.models import Base
from edutest.main import app
from edutest.repository.memory_store import InMemoryDataStore
from edutest.repository.sql_store import SqlDataStore
from edutest.service.attempts import AttemptService
from tests.fixtures import FixedClock

# Тестовая база данных в памяти
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Создать тестовый движок БД."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Создаем таблицы
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Удаляем таблицы
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def sql_store(session_factory):
    return SqlDataStore(session_factory)


@pytest.fixture(params=["memory", "sql"])
def any_store(request, session_factory):
    """Обе реализации хранилища для проверки общего контракта."""
    if request.param == "memory":
        return InMemoryDataStore()
    return SqlDataStore(session_factory)


@pytest.fixture
def store():
    return InMemoryDataStore()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
async def attempt_service(store, clock, rng):
    """Сервис попыток без фонового таймера: тики вызываются из тестов."""
    service = AttemptService(
        store, randomizer=Randomizer(rng), clock=clock, timer_enabled=False
    )
    yield service
    await service.shutdown()


@pytest.fixture
async def client(store, attempt_service):
    """Создать асинхронный тестовый клиент для API."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_attempt_service] = lambda: attempt_service
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        yield client
    app.dependency_overrides.clear()
