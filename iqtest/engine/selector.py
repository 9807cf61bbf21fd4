# iqtest/engine/selector.py

"""
Seeded question selection.

A string seed is reduced to an integer, which drives a linear congruential
generator feeding a Fisher-Yates shuffle over the full bank. The same seed
and the same bank always give the same draw.
"""

from typing import List, Optional, Sequence, Tuple
import logging
import random

from iqtest.engine.question_bank import QuestionRecord, SanitizedQuestion

logger = logging.getLogger(__name__)

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def generate_seed() -> str:
    return str(random.random())


def seed_to_int(seed: str) -> int:
    """Sum of the seed's UTF-16 code units."""
    encoded = seed.encode("utf-16-le")
    return sum(
        int.from_bytes(encoded[i:i + 2], "little")
        for i in range(0, len(encoded), 2)
    )


def seeded_shuffle(items: Sequence[QuestionRecord], seed: str) -> List[QuestionRecord]:
    shuffled = list(items)
    state = seed_to_int(seed)

    for i in range(len(shuffled) - 1, 0, -1):
        state = (state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        j = int((state / LCG_MODULUS) * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]

    return shuffled


def select_questions(
    all_questions: Sequence[QuestionRecord],
    count: int,
    seed: Optional[str] = None,
) -> Tuple[List[SanitizedQuestion], str]:
    """
    Draw ``count`` questions in seeded order.

    Returns the sanitized questions and the seed actually used, which is
    freshly generated when none (or an empty one) was given.
    """
    if not seed:
        seed = generate_seed()

    if count <= 0:
        return [], seed

    shuffled = seeded_shuffle(all_questions, seed)
    selected = shuffled[:min(count, len(shuffled))]

    logger.debug(f"Selected {len(selected)}/{len(all_questions)} questions (seed={seed!r})")
    return [q.sanitize() for q in selected], seed
