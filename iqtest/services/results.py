from typing import Any, Dict, List, Optional
import json
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from iqtest.core.config import settings
from iqtest.engine.question_bank import QuestionBank
from iqtest.engine.scorer import Answer, ScoreResult, calculate_score
from iqtest.models.test_result import TestResult
from iqtest.schemas.result import ResultSubmission

logger = logging.getLogger(__name__)


class ResultNotFoundError(LookupError):
    pass


class ResultStorageError(RuntimeError):
    pass


def decode_category_scores(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    return json.loads(raw)


def serialize_result(result: TestResult) -> Dict[str, Any]:
    """Flatten a stored row into the API shape, decoding the breakdown."""
    return {
        "id": result.id,
        "user_id": result.user_id,
        "raw_score": result.raw_score,
        "total_questions": result.total_questions,
        "correct_answers": result.correct_answers,
        "iq_estimate": result.score,
        "percentile": result.percentile,
        "category_breakdown": decode_category_scores(result.category_scores),
        "time_spent": result.time_spent,
        "created_at": result.created_at,
    }


class ResultService:
    @staticmethod
    def score_submission(
        bank: QuestionBank,
        payload: ResultSubmission,
    ) -> ScoreResult:
        """
        Resolve submitted question ids against the bank and score them.

        Raises ValueError when no submitted id is a known question.
        """
        questions = bank.resolve(payload.question_ids)
        if not questions:
            raise ValueError("No valid questions found")

        answers = [
            Answer(
                question_id=a.question_id,
                choice=a.choice,
                time_taken=a.time_taken,
            )
            for a in payload.answers
        ]
        return calculate_score(questions, answers, payload.total_time)

    @staticmethod
    def create_result(
        db: Session,
        score: ScoreResult,
        user_id: Optional[str] = None,
    ) -> TestResult:
        result = TestResult(
            user_id=user_id,
            score=score.iq_estimate,
            percentile=score.percentile,
            raw_score=score.raw_score,
            total_questions=score.total_questions,
            correct_answers=score.correct_answers,
            time_spent=score.time_spent,
            category_scores=json.dumps(score.breakdown_dict()),
        )

        try:
            db.add(result)
            db.commit()
            db.refresh(result)
        except SQLAlchemyError as exc:
            db.rollback()
            logger.error(f"Failed to save result: {exc}")
            raise ResultStorageError("Failed to save result") from exc

        logger.info(
            f"Saved result {result.id}: {score.correct_answers}/{score.total_questions} "
            f"correct, IQ {score.iq_estimate}"
        )
        return result

    @staticmethod
    def get_result(db: Session, result_id: str) -> TestResult:
        try:
            result = db.query(TestResult).filter(TestResult.id == result_id).first()
        except SQLAlchemyError as exc:
            logger.error(f"Failed to fetch result {result_id}: {exc}")
            raise ResultStorageError("Failed to fetch result") from exc

        if not result:
            raise ResultNotFoundError(result_id)
        return result

    @staticmethod
    def list_results(
        db: Session,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[TestResult]:
        query = db.query(TestResult)
        if user_id:
            query = query.filter(TestResult.user_id == user_id)

        try:
            return (
                query.order_by(TestResult.created_at.desc())
                .limit(limit or settings.RESULTS_LIST_LIMIT)
                .all()
            )
        except SQLAlchemyError as exc:
            logger.error(f"Failed to list results: {exc}")
            raise ResultStorageError("Failed to fetch results") from exc
