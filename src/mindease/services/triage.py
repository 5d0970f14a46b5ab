"""Crisis triage over completed PHQ-9 / GAD-7 responses.

Rules are declared in ``TRIAGE_RULES`` and all of them are evaluated for
every call; the result level is the most urgent level among the rules that
fired and the reasons list carries every fired rule's explanation, in
table order.

Rules:
1. Self-harm item: PHQ-9 item 9 scored >= 2 -> crisis
2. Combined severity: severe depression, severe anxiety, or moderately
   severe depression with at least moderate anxiety -> high
3. Single domain: moderately severe depression (or severe anxiety) when
   rule 2's compound condition does not hold -> high
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mindease.domain.enums import AnxietySeverity, DepressionSeverity, TriageLevel
from mindease.domain.instruments import GAD7, PHQ9
from mindease.domain.value_objects import TriageResult
from mindease.infrastructure.logging import get_logger
from mindease.services.scoring import compute_total, require_complete
from mindease.services.severity import classify

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)

SELF_HARM_ITEM_INDEX = 8
"""0-based index of the PHQ-9 self-harm / suicidal ideation item."""

SELF_HARM_THRESHOLD = 2
"""Item score ("more than half the days") at which the crisis rule fires."""


@dataclass(frozen=True, slots=True)
class TriageInputs:
    """Validated responses with their derived totals and bands."""

    depression_responses: tuple[int, ...]
    anxiety_responses: tuple[int, ...]
    depression_total: int
    anxiety_total: int
    depression_band: DepressionSeverity
    anxiety_band: AnxietySeverity

    @property
    def self_harm_score(self) -> int:
        return self.depression_responses[SELF_HARM_ITEM_INDEX]


@dataclass(frozen=True, slots=True)
class TriageRule:
    """One condition -> effect row of the triage table."""

    name: str
    level: TriageLevel
    condition: Callable[[TriageInputs], bool]
    reason: Callable[[TriageInputs], str]


def _self_harm_ideation(inputs: TriageInputs) -> bool:
    return inputs.self_harm_score >= SELF_HARM_THRESHOLD


def _combined_severity(inputs: TriageInputs) -> bool:
    return (
        inputs.depression_band is DepressionSeverity.SEVERE
        or inputs.anxiety_band is AnxietySeverity.SEVERE
        or (
            inputs.depression_band is DepressionSeverity.MODERATELY_SEVERE
            and inputs.anxiety_band >= AnxietySeverity.MODERATE
        )
    )


def _single_domain_elevated(inputs: TriageInputs) -> bool:
    elevated = (
        inputs.depression_band is DepressionSeverity.MODERATELY_SEVERE
        or inputs.anxiety_band is AnxietySeverity.SEVERE
    )
    return elevated and not _combined_severity(inputs)


def _single_domain_reason(inputs: TriageInputs) -> str:
    if inputs.depression_band is DepressionSeverity.MODERATELY_SEVERE:
        return (
            "Depression symptoms are moderately severe "
            f"(PHQ-9 total {inputs.depression_total}); a professional evaluation is advised."
        )
    return (
        f"Anxiety symptoms are severe (GAD-7 total {inputs.anxiety_total}); "
        "a professional evaluation is advised."
    )


TRIAGE_RULES: tuple[TriageRule, ...] = (
    TriageRule(
        name="self_harm_ideation",
        level=TriageLevel.CRISIS,
        condition=_self_harm_ideation,
        reason=lambda inputs: (
            "Thoughts of self-harm or of being better off dead were reported on "
            f"more than half the days (PHQ-9 item 9 scored {inputs.self_harm_score}); "
            "immediate support is recommended."
        ),
    ),
    TriageRule(
        name="combined_severity",
        level=TriageLevel.HIGH,
        condition=_combined_severity,
        reason=lambda inputs: (
            f"Overall symptom burden is high: depression {inputs.depression_band.label} "
            f"(PHQ-9 total {inputs.depression_total}), anxiety {inputs.anxiety_band.label} "
            f"(GAD-7 total {inputs.anxiety_total})."
        ),
    ),
    TriageRule(
        name="single_domain_elevated",
        level=TriageLevel.HIGH,
        condition=_single_domain_elevated,
        reason=_single_domain_reason,
    ),
)


def prepare_inputs(
    depression_responses: Sequence[int], anxiety_responses: Sequence[int]
) -> TriageInputs:
    """Validate both vectors and derive their totals and bands.

    Raises:
        InvalidInputError: If a vector is malformed.
        IncompleteInputError: If any item is unanswered.
    """
    depression = require_complete(depression_responses, PHQ9)
    anxiety = require_complete(anxiety_responses, GAD7)
    depression_total = compute_total(depression, PHQ9)
    anxiety_total = compute_total(anxiety, GAD7)
    return TriageInputs(
        depression_responses=depression,
        anxiety_responses=anxiety,
        depression_total=depression_total,
        anxiety_total=anxiety_total,
        depression_band=classify(depression_total, PHQ9),
        anxiety_band=classify(anxiety_total, GAD7),
    )


def evaluate_rules(
    inputs: TriageInputs, rules: Sequence[TriageRule] = TRIAGE_RULES
) -> TriageResult:
    """Evaluate every rule against prepared inputs.

    Args:
        inputs: Validated responses, totals and bands.
        rules: Rule table, in reason order.

    Returns:
        TriageResult with the most urgent level and all fired reasons.
    """
    level = TriageLevel.NONE
    reasons: dict[str, None] = {}
    fired: list[str] = []

    for rule in rules:
        if not rule.condition(inputs):
            continue
        fired.append(rule.name)
        level = max(level, rule.level)
        reasons.setdefault(rule.reason(inputs), None)

    if fired:
        logger.info(
            "Triage escalated",
            triage_level=level.label,
            rules=fired,
            depression_band=inputs.depression_band.label,
            anxiety_band=inputs.anxiety_band.label,
        )
    else:
        logger.debug("Triage clear")

    return TriageResult(level=level, reasons=tuple(reasons))


def triage(depression_responses: Sequence[int], anxiety_responses: Sequence[int]) -> TriageResult:
    """Decide the overall risk level for a completed assessment.

    Args:
        depression_responses: Complete PHQ-9 responses (9 items, 0-3).
        anxiety_responses: Complete GAD-7 responses (7 items, 0-3).

    Returns:
        TriageResult.

    Raises:
        InvalidInputError: If a vector is malformed.
        IncompleteInputError: If any item is unanswered.
    """
    return evaluate_rules(prepare_inputs(depression_responses, anxiety_responses))


SUPPORT_ACTIONS: dict[TriageLevel, tuple[str, ...]] = {
    TriageLevel.CRISIS: (
        "Contact your local emergency services or go to the nearest emergency "
        "department now to make sure you are safe.",
        "If someone you trust is nearby, ask them to stay with you; try not to be alone.",
        "While waiting for professional help, call a crisis hotline or use an "
        "online emergency support service.",
    ),
    TriageLevel.HIGH: (
        "Book an appointment with a counsellor or psychiatrist soon to discuss "
        "assessment and treatment options.",
        "Tell a trusted friend or family member how you are doing and agree on a safety plan.",
        "If symptoms get worse or crisis signs appear, contact local emergency services.",
    ),
    TriageLevel.NONE: (),
}


def support_actions(level: TriageLevel) -> tuple[str, ...]:
    """Next steps to show the user for a triage level."""
    return SUPPORT_ACTIONS[level]
