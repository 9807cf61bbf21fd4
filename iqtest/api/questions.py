from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from iqtest.core.config import settings
from iqtest.engine.question_bank import QuestionBank, get_question_bank
from iqtest.engine.selector import select_questions
from iqtest.schemas.question import QuestionBatch, QuestionOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/questions", tags=["Questions"])


@router.get("", response_model=QuestionBatch)
def get_questions(
    count: int = Query(settings.DEFAULT_QUESTION_COUNT, description="Number of questions to draw"),
    seed: Optional[str] = Query(None, description="Shuffle seed; generated when omitted"),
    bank: QuestionBank = Depends(get_question_bank),
):
    """
    Seeded draw from the question bank.

    Correct answers are stripped; the seed used is echoed back so the
    same draw can be requested again.
    """
    questions, used_seed = select_questions(bank.all(), count, seed)

    return QuestionBatch(
        questions=[QuestionOut.model_validate(q) for q in questions],
        seed=used_seed,
        total=len(questions),
    )


@router.get("/{question_id}", response_model=QuestionOut)
def get_question(
    question_id: str,
    bank: QuestionBank = Depends(get_question_bank),
):
    question = bank.get(question_id)
    if not question:
        raise HTTPException(status_code=404, detail="Question not found")

    return QuestionOut.model_validate(question.sanitize())
