"""Domain enumerations for the MindEase screening engine.

This module defines the closed sets used throughout the domain layer:
- InstrumentId: The two supported screening questionnaires
- PHQ9Item / GAD7Item: Item identifiers, in questionnaire order
- DepressionSeverity / AnxietySeverity: Severity bands ordered by intensity
- TriageLevel: Urgency of follow-up (none < high < crisis)
- Technique / TherapyModality: Coping technique catalogue
- Trend: Direction of change across repeated assessments
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Self


class InstrumentId(StrEnum):
    """Supported screening instruments."""

    PHQ9 = "PHQ9"
    """Patient Health Questionnaire, 9 items (depression)."""

    GAD7 = "GAD7"
    """Generalized Anxiety Disorder scale, 7 items (anxiety)."""


class PHQ9Item(StrEnum):
    """PHQ-9 items over the past two weeks, in questionnaire order."""

    NO_INTEREST = "NoInterest"
    """Little interest or pleasure in doing things."""

    DEPRESSED = "Depressed"
    """Feeling down, depressed, or hopeless."""

    SLEEP = "Sleep"
    """Trouble falling/staying asleep, or sleeping too much."""

    TIRED = "Tired"
    """Feeling tired or having little energy."""

    APPETITE = "Appetite"
    """Poor appetite or overeating."""

    FAILURE = "Failure"
    """Feeling bad about yourself, or that you are a failure."""

    CONCENTRATING = "Concentrating"
    """Trouble concentrating on things."""

    MOVING = "Moving"
    """Moving/speaking slowly, or being fidgety/restless."""

    SELF_HARM = "SelfHarm"
    """Thoughts that you would be better off dead, or of hurting yourself."""


class GAD7Item(StrEnum):
    """GAD-7 items over the past two weeks, in questionnaire order."""

    NERVOUS = "Nervous"
    CANNOT_STOP_WORRYING = "CannotStopWorrying"
    WORRYING_TOO_MUCH = "WorryingTooMuch"
    TROUBLE_RELAXING = "TroubleRelaxing"
    RESTLESS = "Restless"
    IRRITABLE = "Irritable"
    AFRAID = "Afraid"


class _LabeledSeverity(IntEnum):
    """Ordered band whose wire form is its lowercase member name."""

    @property
    def label(self) -> str:
        """Wire label, e.g. ``"moderately_severe"``."""
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> Self:
        """Look up a band by its wire label.

        Args:
            label: Lowercase band label.

        Returns:
            The matching band.

        Raises:
            ValueError: If no band carries this label.
        """
        for member in cls:
            if member.label == label:
                return member
        raise ValueError(f"Unknown {cls.__name__} label: {label!r}")


class DepressionSeverity(_LabeledSeverity):
    """Depression severity from the PHQ-9 total.

    Cut points:
    - Minimal (0-4)
    - Mild (5-9)
    - Moderate (10-14)
    - Moderately Severe (15-19)
    - Severe (20-27)
    """

    MINIMAL = 0
    MILD = 1
    MODERATE = 2
    MODERATELY_SEVERE = 3
    SEVERE = 4


class AnxietySeverity(_LabeledSeverity):
    """Anxiety severity from the GAD-7 total.

    Cut points:
    - Minimal (0-4)
    - Mild (5-9)
    - Moderate (10-14)
    - Severe (15-21)
    """

    MINIMAL = 0
    MILD = 1
    MODERATE = 2
    SEVERE = 3


class TriageLevel(IntEnum):
    """Urgency of follow-up, ordered so that ``max()`` picks the most urgent."""

    NONE = 0
    """No rule fired; routine feedback only."""

    HIGH = 1
    """Elevated symptoms; prompt professional follow-up advised."""

    CRISIS = 2
    """Self-harm ideation reported; immediate safety actions."""

    @property
    def label(self) -> str:
        return self.name.lower()


class TherapyModality(StrEnum):
    """Evidence-based therapy families the techniques come from."""

    CBT = "cbt"
    DBT = "dbt"
    ACT = "act"
    IPT = "ipt"
    MINDFULNESS = "mindfulness"


class Technique(StrEnum):
    """Coping technique identifiers suggested by the recommendation rules."""

    THOUGHT_RECORD = "thought_record"
    """Write down evidence for and against a recurring negative thought."""

    MINDFUL_BREATHING = "mindful_breathing"
    """Three to five minutes of breath awareness."""

    BEHAVIORAL_ACTIVATION = "behavioral_activation"
    """Schedule small, achievable, rewarding activities."""

    VALUES_CLARIFICATION = "values_clarification"
    """Identify what matters and set small value-based goals."""

    INTERPERSONAL_CONNECTION = "interpersonal_connection"
    """Meaningful contact with at least one trusted person each week."""

    COGNITIVE_DEFUSION = "cognitive_defusion"
    """Prefix thoughts with "I notice I am thinking..." to gain distance."""

    SENSORY_GROUNDING = "sensory_grounding"
    """5-4-3-2-1 senses exercise."""

    WORRY_REAPPRAISAL = "worry_reappraisal"
    """Estimate the real probability of a feared event and plan a response."""

    RADICAL_ACCEPTANCE = "radical_acceptance"
    """Accept facts that cannot be changed instead of fighting them."""

    DISTRESS_TOLERANCE = "distress_tolerance"
    """TIPP skills (cold water, intense exercise) to get through a crisis moment."""

    EMOTION_REGULATION = "emotion_regulation"
    """Opposite action when an urge does not fit the situation."""


class Trend(StrEnum):
    """Direction of change in a score history (lower scores are better)."""

    IMPROVING = "improving"
    STABLE = "stable"
    WORSENING = "worsening"
