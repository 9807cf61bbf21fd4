# iqtest/engine/question_bank.py

"""
Static question bank.

Questions are loaded once from a JSON file and never change at runtime.
The correct option index stays inside the bank; anything handed to a
client goes through ``QuestionRecord.sanitize()`` first.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple
import json
import logging

from iqtest.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SanitizedQuestion:
    """Client-facing question. Carries no answer information."""
    id: str
    category: str
    prompt: str
    options: Tuple[str, ...]
    difficulty: str


@dataclass(frozen=True)
class QuestionRecord:
    id: str
    category: str
    prompt: str
    options: Tuple[str, ...]
    correct_option_index: int
    difficulty: str
    explanation: Optional[str] = None

    def sanitize(self) -> SanitizedQuestion:
        return SanitizedQuestion(
            id=self.id,
            category=self.category,
            prompt=self.prompt,
            options=self.options,
            difficulty=self.difficulty,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuestionRecord":
        options = data.get("options")
        if not isinstance(options, list) or not options:
            raise ValueError(f"Question {data.get('id')!r} has no options")

        correct = int(data["correct_option_index"])
        if not 0 <= correct < len(options):
            raise ValueError(
                f"Question {data['id']!r}: correct_option_index {correct} "
                f"out of range for {len(options)} options"
            )

        return cls(
            id=str(data["id"]),
            category=str(data["category"]),
            prompt=str(data["prompt"]),
            options=tuple(str(o) for o in options),
            correct_option_index=correct,
            difficulty=str(data.get("difficulty", "medium")),
            explanation=data.get("explanation"),
        )


class QuestionBank:
    """Read-only, ordered collection of questions indexed by id."""

    def __init__(self, questions: Iterable[QuestionRecord]):
        self._questions: Tuple[QuestionRecord, ...] = tuple(questions)
        self._by_id: Dict[str, QuestionRecord] = {}

        for q in self._questions:
            if q.id in self._by_id:
                raise ValueError(f"Duplicate question id: {q.id}")
            self._by_id[q.id] = q

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self):
        return iter(self._questions)

    def all(self) -> Tuple[QuestionRecord, ...]:
        return self._questions

    def get(self, question_id: str) -> Optional[QuestionRecord]:
        return self._by_id.get(question_id)

    def resolve(self, question_ids: Iterable[str]) -> List[QuestionRecord]:
        """
        Map ids to records in the given order.

        Unknown ids are dropped, repeated ids are kept once.
        """
        resolved: List[QuestionRecord] = []
        seen = set()
        for qid in question_ids:
            if qid in seen:
                continue
            question = self._by_id.get(qid)
            if question is None:
                continue
            seen.add(qid)
            resolved.append(question)
        return resolved

    def categories(self) -> List[str]:
        return sorted({q.category for q in self._questions})


def load_question_bank(path: str) -> QuestionBank:
    """
    Load the question bank from a JSON file containing a list of
    question objects.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Question bank {path} must contain a JSON list")

    bank = QuestionBank(QuestionRecord.from_dict(item) for item in data)
    logger.info(f"Loaded {len(bank)} questions from {Path(path).name}")
    return bank


@lru_cache(maxsize=1)
def get_question_bank() -> QuestionBank:
    """FastAPI dependency: process-wide question bank, loaded on first use."""
    return load_question_bank(settings.QUESTION_BANK_PATH)
