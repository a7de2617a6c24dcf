"""Random question selection for a single attempt."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from quizdesk.core.exceptions import InsufficientQuestions
from quizdesk.core.models import QuestionSpec

logger = logging.getLogger(__name__)


def select(
    questions: Sequence[QuestionSpec],
    count: int,
    rng: random.Random | None = None,
) -> list[QuestionSpec]:
    """Draw ``count`` distinct questions in random order.

    The result is a uniformly random permutation of a uniformly random
    ``count``-subset of *questions*.  Pass *rng* (e.g. ``random.Random(42)``)
    for reproducible draws; otherwise each call gets its own freshly seeded
    generator so attempts never share random state.

    Raises:
        InsufficientQuestions: the pool holds fewer than ``count`` questions.
        ValueError: ``count`` is not positive.
    """
    if count < 1:
        raise ValueError(f"Question count must be positive, got {count}")
    if len(questions) < count:
        raise InsufficientQuestions(
            f"Quiz needs {count} questions but only {len(questions)} are available",
            required=count,
            available=len(questions),
        )

    if rng is None:
        rng = random.Random()
    picked = rng.sample(list(questions), count)
    logger.debug("Selected question ids %s", [q.id for q in picked])
    return picked
