# -*- coding: utf-8 -*-
"""
EduTest/edutest/repository/base.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Base repository operations for generic CRUD functionality.

Reusable asynchronous helpers over SQLAlchemy 2.0 async ORM. The helpers do
not commit when `commit=False`, so a caller can group several of them into one
transaction (cascading deletes).
"""

from __future__ import annotations

from typing import Any, List, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edutest.config.logger import configure_logger
from edutest.domain.models import Base
from edutest.utils.exceptions import NotFoundError

T = TypeVar("T", bound=Base)

logger = configure_logger(__name__)

# ---------------------------------------------------------------------------
# Generic helpers
# ---------------------------------------------------------------------------


async def get_item(session: AsyncSession, model: Type[T], item_id: int) -> T:
    """Retrieve a single item by ID."""
    stmt = select(model).where(getattr(model, "id") == item_id)
    result = await session.execute(stmt)
    item = result.scalars().first()
    if item is None:
        raise NotFoundError(resource_type=model.__name__, resource_id=item_id)
    return item


async def create_item(
    session: AsyncSession, model: Type[T], commit: bool = True, **kwargs: Any
) -> T:
    """Create a new item in the database."""
    instance = model(**kwargs)
    session.add(instance)
    if commit:
        await session.commit()
        await session.refresh(instance)
    else:
        await session.flush()
    return instance


async def delete_item(
    session: AsyncSession, model: Type[T], item_id: int, commit: bool = True
) -> None:
    """Delete an item from the database."""
    instance = await get_item(session, model, item_id)
    await session.delete(instance)
    if commit:
        await session.commit()
    else:
        await session.flush()


async def list_items(
    session: AsyncSession,
    model: Type[T],
    skip: int = 0,
    limit: int = 0,
    **filters,
) -> List[T]:
    """Retrieve a list of items filtered by the given criteria.

    `None` values are ignored, so optional filters can be passed as is.
    """
    stmt = select(model).filter_by(
        **{key: value for key, value in filters.items() if value is not None}
    )
    stmt = stmt.order_by(getattr(model, "id"))

    if skip > 0:
        stmt = stmt.offset(skip)
    if limit > 0:
        stmt = stmt.limit(limit)

    result = await session.execute(stmt)
    items = result.scalars().all()
    logger.debug(f"Retrieved {len(items)} {model.__name__} items")
    return list(items)
