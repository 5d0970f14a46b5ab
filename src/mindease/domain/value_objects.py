"""Immutable value objects for the MindEase domain.

Value objects are immutable (frozen) dataclasses without identity. They are
equal if all their attributes are equal.

All value objects use:
- frozen=True: Makes instances immutable
- slots=True: Optimizes memory usage
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mindease.domain.enums import AnxietySeverity, DepressionSeverity, TriageLevel
from mindease.domain.exceptions import InvalidInputError
from mindease.domain.instruments import GAD7, PHQ9

if TYPE_CHECKING:
    from mindease.domain.enums import Technique


@dataclass(frozen=True, slots=True)
class TriageResult:
    """Outcome of crisis triage.

    ``level`` is the most urgent level reached by any fired rule;
    ``reasons`` holds the explanation of every fired rule in evaluation
    order.
    """

    level: TriageLevel
    """Most urgent level reached."""

    reasons: tuple[str, ...] = ()
    """Human-readable reasons, one per fired rule, no duplicates."""

    def __post_init__(self) -> None:
        """Validate that reasons are distinct and match the level.

        Raises:
            ValueError: If reasons repeat, or if they are empty for an
                escalated level (or present for ``NONE``).
        """
        if len(set(self.reasons)) != len(self.reasons):
            raise ValueError("Triage reasons must be distinct")
        if (self.level is TriageLevel.NONE) != (not self.reasons):
            raise ValueError(f"Triage level {self.level.label} inconsistent with reasons")

    @classmethod
    def clear(cls) -> TriageResult:
        """Result for responses that triggered no rule."""
        return cls(level=TriageLevel.NONE)

    @property
    def requires_action(self) -> bool:
        """True when the user should be pointed to professional help."""
        return self.level > TriageLevel.NONE


@dataclass(frozen=True, slots=True)
class Recommendation:
    """Ordered, duplicate-free list of suggested coping techniques."""

    techniques: tuple[Technique, ...]

    def __post_init__(self) -> None:
        if len(set(self.techniques)) != len(self.techniques):
            raise ValueError("Recommended techniques must be distinct")

    def __len__(self) -> int:
        return len(self.techniques)

    def __contains__(self, technique: object) -> bool:
        return technique in self.techniques


@dataclass(frozen=True, slots=True)
class AssessmentSnapshot:
    """Immutable record of one completed assessment.

    Snapshots are keyed by ``timestamp`` when persisted. A new assessment
    produces a new snapshot; existing snapshots are never mutated.

    Response vectors share the live input's value set, so ``UNANSWERED``
    passes validation. The assessment service only builds snapshots from
    complete vectors; ``is_complete`` flags a stored record that is not.
    """

    timestamp: float
    """Creation time in epoch milliseconds."""

    depression_responses: tuple[int, ...]
    """PHQ-9 responses (``-1`` for unanswered)."""

    anxiety_responses: tuple[int, ...]
    """GAD-7 responses (``-1`` for unanswered)."""

    depression_total: int
    """PHQ-9 total score."""

    anxiety_total: int
    """GAD-7 total score."""

    depression_band: DepressionSeverity
    """Depression severity band."""

    anxiety_band: AnxietySeverity
    """Anxiety severity band."""

    def __post_init__(self) -> None:
        """Validate every field against the instrument tables.

        Raises:
            InvalidInputError: If any field is malformed or out of range.
        """
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, (int, float)):
            raise InvalidInputError("Must be a number", field="timestamp")
        if not math.isfinite(self.timestamp):
            raise InvalidInputError(f"Must be finite, got {self.timestamp}", field="timestamp")

        object.__setattr__(
            self,
            "depression_responses",
            PHQ9.validate_responses(self.depression_responses, field="depression_responses"),
        )
        object.__setattr__(
            self,
            "anxiety_responses",
            GAD7.validate_responses(self.anxiety_responses, field="anxiety_responses"),
        )

        for name, total, maximum in (
            ("depression_total", self.depression_total, PHQ9.max_total),
            ("anxiety_total", self.anxiety_total, GAD7.max_total),
        ):
            if isinstance(total, bool) or not isinstance(total, int):
                raise InvalidInputError("Must be an integer", field=name)
            if not 0 <= total <= maximum:
                raise InvalidInputError(f"Must be within 0-{maximum}, got {total}", field=name)

        if not isinstance(self.depression_band, DepressionSeverity):
            raise InvalidInputError("Must be a DepressionSeverity", field="depression_band")
        if not isinstance(self.anxiety_band, AnxietySeverity):
            raise InvalidInputError("Must be an AnxietySeverity", field="anxiety_band")

    @property
    def is_complete(self) -> bool:
        """True when every item of both instruments was answered."""
        return all(v >= 0 for v in self.depression_responses) and all(
            v >= 0 for v in self.anxiety_responses
        )
