"""Severity classification against an instrument's cut points."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mindease.domain.exceptions import InvalidInputError

if TYPE_CHECKING:
    from mindease.domain.instruments import BandT, Instrument


def classify(total: int, instrument: Instrument[BandT]) -> BandT:
    """Map a total score to its severity band.

    Selects the highest band whose lower bound is ``<= total``. Totals
    outside ``[0, max_total]`` are rejected rather than clamped, since a
    clamped value would hide an upstream scoring defect.

    Args:
        total: Total score.
        instrument: Instrument whose cut points apply.

    Returns:
        Severity band of the instrument's band type.

    Raises:
        InvalidInputError: If ``total`` is not an integer in range.
    """
    if isinstance(total, bool) or not isinstance(total, int):
        raise InvalidInputError(
            f"Total must be an integer, got {type(total).__name__}", field="total"
        )
    if not 0 <= total <= instrument.max_total:
        raise InvalidInputError(
            f"{instrument.id.value} total must be within 0-{instrument.max_total}, got {total}",
            field="total",
        )

    selected = instrument.cut_points[0][0]
    for band, lower_bound in instrument.cut_points:
        if lower_bound > total:
            break
        selected = band
    return selected
