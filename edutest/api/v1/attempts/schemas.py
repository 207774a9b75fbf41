# -*- coding: utf-8 -*-
"""
Схемы попыток прохождения теста.
"""

from typing import Dict, List, Optional

from edutest.api.v1.tests.schemas import QuestionView
from edutest.core.attempt import AttemptSession
from edutest.core.countdown import format_time_left
from edutest.domain.entities import AnswerValue, EntityModel, TestResult
from edutest.domain.enums import AttemptState


class AnswerSchema(EntityModel):
    value: AnswerValue


class AttemptView(EntityModel):
    test_id: int
    title: str
    state: AttemptState
    current_index: int
    total_questions: int
    current_question: Optional[QuestionView] = None
    questions: List[QuestionView]
    answers: Dict[str, AnswerValue]
    remaining_seconds: Optional[int] = None
    time_left: str
    resumed: bool = False
    result: Optional[TestResult] = None

    @classmethod
    def from_session(cls, session: AttemptSession, resumed: bool = False) -> "AttemptView":
        current = session.current_question
        return cls(
            test_id=session.test.id,
            title=session.test.title,
            state=session.state,
            current_index=session.current_index,
            total_questions=len(session.questions),
            current_question=QuestionView.from_question(current) if current else None,
            questions=[QuestionView.from_question(q) for q in session.questions],
            answers=session.answers,
            remaining_seconds=session.remaining_seconds,
            time_left=format_time_left(session.remaining_seconds),
            resumed=resumed,
            result=session.result,
        )
