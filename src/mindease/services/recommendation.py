"""Coping technique recommendations from a pair of severity bands.

``RECOMMENDATION_RULES`` is ordered by priority. Every rule is checked
independently; techniques are collected in first-insertion order without
duplicates and the list is cut to the configured maximum, so the
lowest-priority additions are the first to go.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mindease.domain.enums import AnxietySeverity, DepressionSeverity, Technique, TherapyModality
from mindease.domain.exceptions import InvalidInputError
from mindease.domain.value_objects import Recommendation
from mindease.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

MAX_RECOMMENDATIONS = 6
"""Default upper bound on the number of suggested techniques."""

BASELINE_TECHNIQUES: tuple[Technique, ...] = (
    Technique.THOUGHT_RECORD,
    Technique.MINDFUL_BREATHING,
)
"""Suggested for everyone: one cognitive and one mindfulness technique."""


@dataclass(frozen=True, slots=True)
class RecommendationRule:
    """Techniques to add when both bands satisfy ``condition``."""

    name: str
    condition: Callable[[DepressionSeverity, AnxietySeverity], bool]
    techniques: tuple[Technique, ...]


RECOMMENDATION_RULES: tuple[RecommendationRule, ...] = (
    RecommendationRule(
        name="baseline",
        condition=lambda dep, anx: True,
        techniques=BASELINE_TECHNIQUES,
    ),
    RecommendationRule(
        name="emotion_dysregulation",
        condition=lambda dep, anx: (
            dep is DepressionSeverity.SEVERE or anx is AnxietySeverity.SEVERE
        ),
        techniques=(Technique.DISTRESS_TOLERANCE, Technique.EMOTION_REGULATION),
    ),
    RecommendationRule(
        name="depression_moderate",
        condition=lambda dep, anx: dep >= DepressionSeverity.MODERATE,
        techniques=(Technique.BEHAVIORAL_ACTIVATION, Technique.VALUES_CLARIFICATION),
    ),
    RecommendationRule(
        name="anxiety_moderate",
        condition=lambda dep, anx: anx >= AnxietySeverity.MODERATE,
        techniques=(Technique.SENSORY_GROUNDING, Technique.COGNITIVE_DEFUSION),
    ),
    RecommendationRule(
        name="depression_moderately_severe",
        condition=lambda dep, anx: dep >= DepressionSeverity.MODERATELY_SEVERE,
        techniques=(Technique.COGNITIVE_DEFUSION, Technique.INTERPERSONAL_CONNECTION),
    ),
    RecommendationRule(
        name="anxiety_severe",
        condition=lambda dep, anx: anx is AnxietySeverity.SEVERE,
        techniques=(Technique.WORRY_REAPPRAISAL, Technique.RADICAL_ACCEPTANCE),
    ),
    RecommendationRule(
        name="mild_symptoms",
        condition=lambda dep, anx: (
            dep >= DepressionSeverity.MILD or anx >= AnxietySeverity.MILD
        ),
        techniques=(Technique.BEHAVIORAL_ACTIVATION,),
    ),
)

TECHNIQUE_MODALITY: dict[Technique, TherapyModality] = {
    Technique.THOUGHT_RECORD: TherapyModality.CBT,
    Technique.MINDFUL_BREATHING: TherapyModality.MINDFULNESS,
    Technique.BEHAVIORAL_ACTIVATION: TherapyModality.CBT,
    Technique.VALUES_CLARIFICATION: TherapyModality.ACT,
    Technique.INTERPERSONAL_CONNECTION: TherapyModality.IPT,
    Technique.COGNITIVE_DEFUSION: TherapyModality.ACT,
    Technique.SENSORY_GROUNDING: TherapyModality.MINDFULNESS,
    Technique.WORRY_REAPPRAISAL: TherapyModality.CBT,
    Technique.RADICAL_ACCEPTANCE: TherapyModality.DBT,
    Technique.DISTRESS_TOLERANCE: TherapyModality.DBT,
    Technique.EMOTION_REGULATION: TherapyModality.DBT,
}

GROUNDING_TIPS: tuple[str, ...] = (
    "Breathe in for 4 seconds, hold for 4, breathe out for 6.",
    "5-4-3-2-1: notice five things you can see around you.",
    "Splash cold water on your face for 30 seconds.",
    "Feel your feet pressing into the floor.",
    'Name the feeling: "I notice that I am feeling..."',
)
"""Short self-regulation tips that fit any result."""


def recommend(
    depression_band: DepressionSeverity,
    anxiety_band: AnxietySeverity,
    *,
    limit: int = MAX_RECOMMENDATIONS,
    rules: Sequence[RecommendationRule] = RECOMMENDATION_RULES,
) -> Recommendation:
    """Suggest coping techniques for a pair of severity bands.

    Args:
        depression_band: PHQ-9 severity band.
        anxiety_band: GAD-7 severity band.
        limit: Maximum number of techniques returned.
        rules: Priority-ordered rule table.

    Returns:
        Recommendation with at most ``limit`` distinct techniques.

    Raises:
        InvalidInputError: If a band has the wrong type or ``limit`` cannot
            hold the baseline techniques.
    """
    if not isinstance(depression_band, DepressionSeverity):
        raise InvalidInputError("Must be a DepressionSeverity", field="depression_band")
    if not isinstance(anxiety_band, AnxietySeverity):
        raise InvalidInputError("Must be an AnxietySeverity", field="anxiety_band")
    if limit < len(BASELINE_TECHNIQUES):
        raise InvalidInputError(
            f"Must be at least {len(BASELINE_TECHNIQUES)}, got {limit}", field="limit"
        )

    collected: dict[Technique, None] = {}
    for rule in rules:
        if rule.condition(depression_band, anxiety_band):
            for technique in rule.techniques:
                collected.setdefault(technique, None)

    techniques = tuple(collected)
    if len(techniques) > limit:
        logger.debug(
            "Truncated recommendations",
            dropped=[t.value for t in techniques[limit:]],
            limit=limit,
        )
    return Recommendation(techniques=techniques[:limit])


def modalities(recommendation: Recommendation) -> tuple[TherapyModality, ...]:
    """Therapy families behind a recommendation, in order of first appearance."""
    return tuple(dict.fromkeys(TECHNIQUE_MODALITY[t] for t in recommendation.techniques))
