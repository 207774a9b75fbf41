# -*- coding: utf-8 -*-
"""
EduTest/edutest/api/v1/results/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Просмотр результатов тестирования.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import computed_field

from edutest.api.deps import current_user
from edutest.clients.database_client import get_store
from edutest.core.scorer import grade_for
from edutest.domain.entities import TestResult, User
from edutest.domain.enums import Grade
from edutest.repository.store import DataStore
from edutest.service.results import list_results_service

router = APIRouter(tags=["📊 Результаты"])


class TestResultRead(TestResult):
    """Результат с процентом и оценочным диапазоном."""

    __test__ = False

    @computed_field
    @property
    def percentage(self) -> float:
        if not self.max_score:
            return 0.0
        return round(self.score / self.max_score * 100, 2)

    @computed_field
    @property
    def grade(self) -> Grade:
        return grade_for(self.percentage)


@router.get("", response_model=List[TestResultRead])
async def list_results_endpoint(
    test_id: Optional[int] = Query(None, description="Фильтр по тесту"),
    store: DataStore = Depends(get_store),
    user: User = Depends(current_user),
) -> List[TestResultRead]:
    """Преподаватель видит результаты своих тестов, студент - свои результаты."""
    results = await list_results_service(store, user, test_id=test_id)
    return [TestResultRead.model_validate(result, from_attributes=True) for result in results]
