# iqtest/schemas/result.py

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =========================
# Submission
# =========================
class SubmittedAnswer(CamelModel):
    question_id: str
    choice: int  # not checked against option bounds
    time_taken: int = 0


class ResultSubmission(CamelModel):
    answers: List[SubmittedAnswer] = Field(default_factory=list)
    total_time: int = 0
    seed: Optional[str] = None
    question_ids: List[str]
    user_id: Optional[str] = None


# =========================
# Result
# =========================
class CategoryScoreOut(BaseModel):
    correct: int
    total: int
    percentage: float


class ScoredResultOut(CamelModel):
    id: str
    user_id: Optional[str] = None
    raw_score: int
    total_questions: int
    correct_answers: int
    iq_estimate: int
    percentile: float
    category_breakdown: Dict[str, CategoryScoreOut]
    time_spent: int
    created_at: datetime


class ResultList(BaseModel):
    results: List[ScoredResultOut]
