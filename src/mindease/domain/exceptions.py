"""Domain-specific exceptions for the MindEase screening engine.

    DomainError (base)
    ├── InvalidInputError
    │   └── InstrumentDefinitionError
    ├── IncompleteInputError
    └── PersistenceError

Engine errors are local and recoverable: callers catch them to block
progression (incomplete questionnaire) or to discard a corrupt snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mindease.domain.enums import InstrumentId


class DomainError(Exception):
    """Base class for domain errors.

    All engine exceptions inherit from this class so a caller can catch
    every domain failure with a single except clause.
    """


class InvalidInputError(DomainError, ValueError):
    """Raised when malformed or out-of-range data reaches the engine.

    Used by the score calculator, the severity classifier and the snapshot
    codec.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        """Initialize with a description and the offending field.

        Args:
            message: Description of what is wrong.
            field: Name of the input field, if one can be singled out.
        """
        self.field = field
        super().__init__(f"{field}: {message}" if field else message)


class InstrumentDefinitionError(InvalidInputError):
    """Raised when an instrument's cut-point table is inconsistent."""


class IncompleteInputError(DomainError):
    """Raised when triage is requested before every item is answered."""

    def __init__(self, instrument: InstrumentId, missing: Sequence[int]) -> None:
        """Initialize with the instrument and its unanswered item indices.

        Args:
            instrument: Instrument whose response vector is incomplete.
            missing: 0-based indices of the unanswered items.
        """
        self.instrument = instrument
        self.missing = tuple(missing)
        super().__init__(
            f"{instrument.value}: {len(self.missing)} unanswered item(s) at {list(self.missing)}"
        )


class PersistenceError(DomainError):
    """Raised by key-value store adapters when a storage operation fails."""

    def __init__(self, operation: str, key: str | None, reason: str) -> None:
        """Initialize with the failed operation.

        Args:
            operation: Store operation name (get, set, remove, clear).
            key: Key involved, if any.
            reason: Underlying failure description.
        """
        self.operation = operation
        self.key = key
        target = f" {key!r}" if key is not None else ""
        super().__init__(f"Storage {operation}{target} failed: {reason}")
