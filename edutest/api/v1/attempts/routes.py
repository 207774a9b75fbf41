# -*- coding: utf-8 -*-
"""
EduTest/edutest/api/v1/attempts/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Прохождение теста студентом: старт, ответы, навигация, отправка и отмена.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from loguru import logger

from edutest.api.deps import current_student, get_attempt_service
from edutest.domain.entities import User
from edutest.service.attempts import AttemptService

from .schemas import AnswerSchema, AttemptView

router = APIRouter(tags=["📝 Попытки"])


@router.post(
    "/{test_id}/start",
    response_model=AttemptView,
    status_code=status.HTTP_201_CREATED,
    responses={403: {"description": "Студент не допущен к тесту"}},
)
async def start_attempt_endpoint(
    test_id: int,
    student: User = Depends(current_student),
    attempts: AttemptService = Depends(get_attempt_service),
):
    """
    Начать попытку или продолжить незавершенную.

    При отказе возвращается 403 с причиной: not assigned, not yet open,
    window closed или attempts exhausted.
    """
    outcome = await attempts.start(student, test_id)
    if outcome.session is None:
        logger.info(
            f"Студент {student.id} не допущен к тесту {test_id}: "
            f"{outcome.eligibility.reason.value}"
        )
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={
                "message": outcome.eligibility.message,
                "reason": outcome.eligibility.reason.value,
            },
        )

    view = AttemptView.from_session(outcome.session, resumed=outcome.resumed)
    if outcome.resumed:
        return JSONResponse(
            status_code=status.HTTP_200_OK,
            content=view.model_dump(mode="json", by_alias=True),
        )
    return view


@router.get("/{test_id}", response_model=AttemptView)
async def get_attempt_endpoint(
    test_id: int,
    student: User = Depends(current_student),
    attempts: AttemptService = Depends(get_attempt_service),
) -> AttemptView:
    return AttemptView.from_session(attempts.get(student.id, test_id))


@router.put("/{test_id}/answers/{question_id}", response_model=AttemptView)
async def record_answer_endpoint(
    test_id: int,
    question_id: str,
    answer: AnswerSchema,
    student: User = Depends(current_student),
    attempts: AttemptService = Depends(get_attempt_service),
) -> AttemptView:
    """Сохранить ответ на вопрос. Повторный ответ заменяет предыдущий."""
    session = attempts.record_answer(student.id, test_id, question_id, answer.value)
    return AttemptView.from_session(session)


@router.post("/{test_id}/next", response_model=AttemptView)
async def next_question_endpoint(
    test_id: int,
    student: User = Depends(current_student),
    attempts: AttemptService = Depends(get_attempt_service),
) -> AttemptView:
    """Следующий вопрос; на последнем вопросе попытка отправляется."""
    return AttemptView.from_session(await attempts.next(student.id, test_id))


@router.post("/{test_id}/previous", response_model=AttemptView)
async def previous_question_endpoint(
    test_id: int,
    student: User = Depends(current_student),
    attempts: AttemptService = Depends(get_attempt_service),
) -> AttemptView:
    return AttemptView.from_session(attempts.previous(student.id, test_id))


@router.post("/{test_id}/submit", response_model=AttemptView)
async def submit_attempt_endpoint(
    test_id: int,
    student: User = Depends(current_student),
    attempts: AttemptService = Depends(get_attempt_service),
) -> AttemptView:
    session = attempts.get(student.id, test_id)
    await attempts.submit(student.id, test_id)
    return AttemptView.from_session(session)


@router.delete("/{test_id}")
async def discard_attempt_endpoint(
    test_id: int,
    student: User = Depends(current_student),
    attempts: AttemptService = Depends(get_attempt_service),
) -> dict:
    """Покинуть тест без сохранения результата."""
    attempts.discard(student.id, test_id)
    return {"message": "Попытка отменена"}
