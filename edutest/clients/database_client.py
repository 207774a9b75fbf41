# -*- coding: utf-8 -*-
"""
Клиент для работы с базой данных (PostgreSQL через asyncpg или SQLite через aiosqlite).
"""
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)

from edutest.config.settings import settings
from edutest.domain.models import Base
from edutest.repository.sql_store import SqlDataStore
from edutest.repository.store import DataStore


def _engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True, "pool_recycle": 3600}


# Асинхронный движок для подключения к базе данных
async_engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    **_engine_options(settings.database_url),
)

# Фабрика асинхронных сессий; объекты остаются доступными после коммита
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine, class_=AsyncSession, expire_on_commit=False
)

_store = SqlDataStore(AsyncSessionLocal)


def get_store() -> DataStore:
    """
    Предоставляет хранилище данных для внедрения зависимостей в FastAPI.

    Returns:
        DataStore: Хранилище на основе базы данных
    """
    return _store


async def init_db(engine: AsyncEngine = async_engine) -> None:
    """
    Инициализирует базу данных, создавая все определенные таблицы.

    Raises:
        SQLAlchemyError: Ошибки при создании таблиц
        OperationalError: Ошибки подключения к базе данных
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
