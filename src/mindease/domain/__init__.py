"""Domain models for PHQ-9 / GAD-7 screening.

This module provides the core domain layer of the MindEase engine,
containing pure Python objects with no external dependencies.

Modules:
    enums: Domain enumerations (DepressionSeverity, TriageLevel, Technique, etc.)
    instruments: Instrument definitions (PHQ9, GAD7) and response validation
    value_objects: Immutable value types (TriageResult, AssessmentSnapshot, etc.)
    exceptions: Domain-specific exceptions

Example:
    >>> from mindease.domain import PHQ9, DepressionSeverity
    >>> PHQ9.max_total
    27
    >>> DepressionSeverity.MODERATELY_SEVERE.label
    'moderately_severe'
"""

from mindease.domain.enums import (
    AnxietySeverity,
    DepressionSeverity,
    GAD7Item,
    InstrumentId,
    PHQ9Item,
    Technique,
    TherapyModality,
    Trend,
    TriageLevel,
)
from mindease.domain.exceptions import (
    DomainError,
    IncompleteInputError,
    InstrumentDefinitionError,
    InvalidInputError,
    PersistenceError,
)
from mindease.domain.instruments import GAD7, PHQ9, UNANSWERED, Instrument
from mindease.domain.value_objects import AssessmentSnapshot, Recommendation, TriageResult

__all__ = [
    "GAD7",
    "PHQ9",
    "UNANSWERED",
    "AnxietySeverity",
    "AssessmentSnapshot",
    "DepressionSeverity",
    "DomainError",
    "GAD7Item",
    "IncompleteInputError",
    "Instrument",
    "InstrumentDefinitionError",
    "InstrumentId",
    "InvalidInputError",
    "PHQ9Item",
    "PersistenceError",
    "Recommendation",
    "Technique",
    "TherapyModality",
    "Trend",
    "TriageLevel",
    "TriageResult",
]
