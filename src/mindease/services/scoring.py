"""Total score computation for a response vector."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mindease.domain.exceptions import IncompleteInputError
from mindease.domain.instruments import UNANSWERED

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mindease.domain.instruments import Instrument


def compute_total(responses: Sequence[int], instrument: Instrument) -> int:
    """Sum a response vector, counting unanswered items as 0.

    The result is usable as a live preview while the questionnaire is being
    filled in. Whether the total is final is a separate question; see
    ``is_complete`` / ``require_complete``.

    Args:
        responses: One value per item, ``-1`` or ``0..max_per_item``.
        instrument: Instrument the responses belong to.

    Returns:
        Total score in ``[0, instrument.max_total]``.

    Raises:
        InvalidInputError: On a length mismatch or a value outside the
            allowed set.
    """
    values = instrument.validate_responses(responses)
    return sum(v for v in values if v != UNANSWERED)


def unanswered_items(responses: Sequence[int]) -> list[int]:
    """0-based indices of unanswered items."""
    return [index for index, value in enumerate(responses) if value == UNANSWERED]


def is_complete(responses: Sequence[int]) -> bool:
    """True when no item is unanswered."""
    return UNANSWERED not in responses


def require_complete(responses: Sequence[int], instrument: Instrument) -> tuple[int, ...]:
    """Validate a response vector and insist that every item is answered.

    Returns:
        The validated responses.

    Raises:
        InvalidInputError: If the vector is malformed.
        IncompleteInputError: If any item is still unanswered.
    """
    values = instrument.validate_responses(responses)
    missing = unanswered_items(values)
    if missing:
        raise IncompleteInputError(instrument.id, missing)
    return values
