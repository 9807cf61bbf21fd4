# iqtest/schemas/question.py

from typing import List

from pydantic import BaseModel, ConfigDict


class QuestionOut(BaseModel):
    """Question as served to the browser. No correct answer, no explanation."""
    id: str
    category: str
    prompt: str
    options: List[str]
    difficulty: str

    model_config = ConfigDict(from_attributes=True)


class QuestionBatch(BaseModel):
    questions: List[QuestionOut]
    seed: str
    total: int
