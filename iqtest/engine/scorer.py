# iqtest/engine/scorer.py

"""
RULE-BASED IQ SCORER.

Scoring flow:
1. Tally questions per category
2. Count each answered question once, correct iff choice == correct index
3. Raw score = correct / total * 100, rounded half up
4. Raw score -> IQ estimate and percentile via floor lookup tables

The scorer is pure: identical inputs always give identical output.
Time values are carried through for display and never affect the score.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import logging
import math

from iqtest.engine.question_bank import QuestionBank, QuestionRecord

logger = logging.getLogger(__name__)


# Raw-score percentage -> IQ estimate, keys in descending order
IQ_TABLE: Tuple[Tuple[int, int], ...] = (
    tuple((key, 160 - (100 - key) * 2) for key in range(100, 54, -1))
    + ((50, 65), (45, 60), (40, 55), (30, 45), (20, 35), (10, 25), (0, 15))
)

# Raw-score percentage -> percentile, keys in descending order
PERCENTILE_TABLE: Tuple[Tuple[int, float], ...] = (
    ((100, 99.9), (99, 99.5))
    + tuple((key, float(key)) for key in range(98, 54, -1))
    + ((50, 50.0), (45, 45.0), (40, 40.0), (30, 30.0), (20, 20.0), (10, 10.0), (0, 1.0))
)

DEFAULT_IQ = 100
DEFAULT_PERCENTILE = 50.0


@dataclass(frozen=True)
class Answer:
    question_id: str
    choice: int
    time_taken: int = 0


@dataclass
class CategoryScore:
    correct: int = 0
    total: int = 0
    percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "correct": self.correct,
            "total": self.total,
            "percentage": self.percentage,
        }


@dataclass
class ScoreResult:
    """Scored test, before persistence assigns an id."""
    raw_score: int
    total_questions: int
    correct_answers: int
    iq_estimate: int
    percentile: float
    category_breakdown: Dict[str, CategoryScore] = field(default_factory=dict)
    time_spent: int = 0

    def breakdown_dict(self) -> Dict[str, Dict[str, Any]]:
        return {name: cat.to_dict() for name, cat in self.category_breakdown.items()}


def lookup_floor(score: int, table: Sequence[Tuple[int, Any]], default: Any) -> Any:
    """
    Value of the greatest key <= score. ``table`` must be sorted by key,
    descending.
    """
    for key, value in table:
        if score >= key:
            return value
    return default


def iq_for_raw_score(raw_score: int) -> int:
    return lookup_floor(raw_score, IQ_TABLE, DEFAULT_IQ)


def percentile_for_raw_score(raw_score: int) -> float:
    return lookup_floor(raw_score, PERCENTILE_TABLE, DEFAULT_PERCENTILE)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_score(
    questions: Sequence[QuestionRecord],
    answers: Iterable[Answer],
    total_time: int = 0,
) -> ScoreResult:
    """
    Score ``answers`` against ``questions``.

    Answers for unknown question ids are ignored. When a question is
    answered more than once only the first answer counts.

    Raises:
        ValueError: if ``questions`` is empty
    """
    if not questions:
        raise ValueError("Cannot score an empty question set")

    breakdown: Dict[str, CategoryScore] = {}
    by_id: Dict[str, QuestionRecord] = {}

    for q in questions:
        breakdown.setdefault(q.category, CategoryScore()).total += 1
        by_id[q.id] = q

    correct_answers = 0
    answered = set()
    ignored = 0

    for answer in answers:
        question = by_id.get(answer.question_id)
        if question is None or answer.question_id in answered:
            ignored += 1
            continue
        answered.add(answer.question_id)

        if answer.choice == question.correct_option_index:
            correct_answers += 1
            breakdown[question.category].correct += 1

    if ignored:
        logger.debug(f"Ignored {ignored} answers for unknown or repeated questions")

    for cat in breakdown.values():
        cat.percentage = (cat.correct / cat.total) * 100 if cat.total > 0 else 0.0

    total_questions = len(questions)
    raw_score = round_half_up((correct_answers / total_questions) * 100)

    return ScoreResult(
        raw_score=raw_score,
        total_questions=total_questions,
        correct_answers=correct_answers,
        iq_estimate=iq_for_raw_score(raw_score),
        percentile=percentile_for_raw_score(raw_score),
        category_breakdown=breakdown,
        time_spent=total_time,
    )


# -------------------------------------------------------------------
# Local fallback
# -------------------------------------------------------------------

def calculate_result_from_local(
    data: Dict[str, Any],
    bank: QuestionBank,
) -> Optional[ScoreResult]:
    """
    Recompute a result from a client-retained submission
    ``{"answers": [...], "totalTime": int, "questionIds": [...]}``
    when it never reached the server.

    Returns None if none of the question ids are known.
    """
    question_ids = data.get("questionIds")
    if not isinstance(question_ids, list):
        question_ids = []

    questions = bank.resolve(qid for qid in question_ids if isinstance(qid, str))
    if not questions:
        return None

    raw_answers = data.get("answers")
    if not isinstance(raw_answers, list):
        raw_answers = []

    answers: List[Answer] = []
    for a in raw_answers:
        if not isinstance(a, dict):
            continue
        choice = _as_int(a.get("choice"))
        if choice is None:
            continue
        answers.append(
            Answer(
                question_id=str(a.get("questionId")),
                choice=choice,
                time_taken=_as_int(a.get("timeTaken")) or 0,
            )
        )

    return calculate_score(questions, answers, _as_int(data.get("totalTime")) or 0)


def _as_int(value: Any) -> Optional[int]:
    """Integer value of a client field, or None if it is not a whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None
