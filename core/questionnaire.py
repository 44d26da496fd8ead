"""
core/questionnaire.py
────────────────────────────────────────────────────────────────────────
Walks a user through the fixed question list.

The tracker is a short-lived working object: the reducer builds one from
the current snapshot, applies a single operation and reads back
`index`, `progress` and `profile`.
"""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from core.models.profile import UserProfile
from core.profile_store import set_field
from core.questions import FIELD_BY_INDEX, QUESTIONS, Question

_LOG = logging.getLogger(__name__)


class QuestionnaireTracker:
    def __init__(
        self,
        questions: Sequence[Question] = QUESTIONS,
        index: int = 0,
        profile: UserProfile | None = None,
        field_by_index: Mapping[int, str] = FIELD_BY_INDEX,
    ) -> None:
        if not questions:
            raise ValueError("questionnaire needs at least one question")
        self._questions = tuple(questions)
        self._fields = dict(field_by_index)
        self.index = min(max(index, 0), len(self._questions))
        self.profile = profile or UserProfile()
        self.progress = self._fraction()

    # ─────────────────────────────── reads ─────────────────────────── #
    @property
    def total(self) -> int:
        return len(self._questions)

    @property
    def current_question(self) -> Question | None:
        if 0 <= self.index < self.total:
            return self._questions[self.index]
        return None

    def is_complete(self) -> bool:
        return self.index >= self.total

    # ─────────────────────────────── moves ─────────────────────────── #
    def answer(self, index: int, value: str) -> None:
        """Store `value` for question `index` (when it maps to a field), then advance."""
        field = self._fields.get(index)
        if field is not None:
            self.profile = set_field(self.profile, field, value)
        else:
            _LOG.debug("question %d has no profile field – nothing written", index)
        self.advance()

    def skip(self) -> None:
        self.advance()

    def advance(self) -> None:
        if self.is_complete():
            _LOG.debug("advance past last question ignored (index=%d)", self.index)
            return
        self.index += 1
        self.progress = self._fraction()

    def back(self) -> bool:
        """
        Step back one question.

        Returns False at the first question: the caller leaves the
        questionnaire instead and the index stays at 0.
        """
        if self.index <= 0:
            return False
        self.index -= 1
        self.progress = self._fraction()
        return True

    def _fraction(self) -> float:
        return min(1.0, max(0.0, self.index / self.total))
