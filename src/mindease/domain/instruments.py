"""Screening instrument definitions.

An instrument is pure data: its items, the per-item scale and the
severity cut points. Scoring, classification and snapshot validation are
all driven by these tables, so another questionnaire can be added by
declaring one more ``Instrument``.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from numbers import Integral
from typing import TYPE_CHECKING, Generic, TypeVar

from mindease.domain.enums import (
    AnxietySeverity,
    DepressionSeverity,
    GAD7Item,
    InstrumentId,
    PHQ9Item,
)
from mindease.domain.exceptions import InstrumentDefinitionError, InvalidInputError

if TYPE_CHECKING:
    from enum import IntEnum

BandT = TypeVar("BandT", DepressionSeverity, AnxietySeverity)

UNANSWERED = -1
"""Response value for an item the user has not answered yet."""


@dataclass(frozen=True, slots=True)
class Instrument(Generic[BandT]):
    """A standardized questionnaire definition."""

    id: InstrumentId
    """Instrument identifier."""

    items: tuple[str, ...]
    """Item identifiers in questionnaire order."""

    max_per_item: int
    """Highest score a single item can take (items start at 0)."""

    cut_points: tuple[tuple[BandT, int], ...]
    """``(band, lower_bound)`` pairs, ascending."""

    band_type: type[IntEnum] = field(init=False)
    """Enum type of the bands (derived from ``cut_points``)."""

    def __post_init__(self) -> None:
        """Validate the cut-point table.

        Raises:
            InstrumentDefinitionError: If the table does not cover
                ``[0, max_total]`` with strictly increasing bounds.
        """
        if not self.items:
            raise InstrumentDefinitionError("Instrument needs at least one item", field="items")
        if self.max_per_item < 1:
            raise InstrumentDefinitionError("Must be >= 1", field="max_per_item")
        if not self.cut_points:
            raise InstrumentDefinitionError("Cut points cannot be empty", field="cut_points")

        bands = [band for band, _ in self.cut_points]
        bounds = [bound for _, bound in self.cut_points]
        band_type = type(bands[0])

        if any(type(band) is not band_type for band in bands):
            raise InstrumentDefinitionError("Bands must share one enum type", field="cut_points")
        if bounds[0] != 0:
            raise InstrumentDefinitionError(
                f"First lower bound must be 0, got {bounds[0]}", field="cut_points"
            )
        if any(later <= earlier for earlier, later in zip(bounds, bounds[1:])):
            raise InstrumentDefinitionError(
                f"Lower bounds must strictly increase, got {bounds}", field="cut_points"
            )
        if bounds[-1] > self.max_total:
            raise InstrumentDefinitionError(
                f"Lower bound {bounds[-1]} exceeds max total {self.max_total}",
                field="cut_points",
            )
        if bands != sorted(bands):
            raise InstrumentDefinitionError(
                "Bands must follow their severity order", field="cut_points"
            )

        object.__setattr__(self, "band_type", band_type)

    @property
    def item_count(self) -> int:
        """Number of items in the questionnaire."""
        return len(self.items)

    @property
    def max_total(self) -> int:
        """Highest achievable total score."""
        return self.item_count * self.max_per_item

    @property
    def bands(self) -> tuple[BandT, ...]:
        """Bands in ascending severity order."""
        return tuple(band for band, _ in self.cut_points)

    def validate_responses(
        self, responses: Sequence[int], *, field: str = "responses"
    ) -> tuple[int, ...]:
        """Check a response vector against this instrument.

        Args:
            responses: One value per item, ``UNANSWERED`` or ``0..max_per_item``.
            field: Field name used in error messages.

        Returns:
            The responses as a tuple of plain ints.

        Raises:
            InvalidInputError: On a wrong length, a non-integer value or a
                value outside the allowed set.
        """
        if isinstance(responses, (str, bytes)) or not isinstance(responses, Sequence):
            raise InvalidInputError(
                f"Expected a sequence of item scores, got {type(responses).__name__}",
                field=field,
            )
        if len(responses) != self.item_count:
            raise InvalidInputError(
                f"{self.id.value} expects {self.item_count} responses, got {len(responses)}",
                field=field,
            )

        values: list[int] = []
        for index, value in enumerate(responses):
            if isinstance(value, bool) or not isinstance(value, Integral):
                raise InvalidInputError(
                    f"Item {index} must be an integer, got {type(value).__name__}", field=field
                )
            score = int(value)
            if score != UNANSWERED and not 0 <= score <= self.max_per_item:
                raise InvalidInputError(
                    f"Item {index} must be {UNANSWERED} or 0-{self.max_per_item}, got {score}",
                    field=field,
                )
            values.append(score)
        return tuple(values)


PHQ9: Instrument[DepressionSeverity] = Instrument(
    id=InstrumentId.PHQ9,
    items=tuple(item.value for item in PHQ9Item),
    max_per_item=3,
    cut_points=(
        (DepressionSeverity.MINIMAL, 0),
        (DepressionSeverity.MILD, 5),
        (DepressionSeverity.MODERATE, 10),
        (DepressionSeverity.MODERATELY_SEVERE, 15),
        (DepressionSeverity.SEVERE, 20),
    ),
)

GAD7: Instrument[AnxietySeverity] = Instrument(
    id=InstrumentId.GAD7,
    items=tuple(item.value for item in GAD7Item),
    max_per_item=3,
    cut_points=(
        (AnxietySeverity.MINIMAL, 0),
        (AnxietySeverity.MILD, 5),
        (AnxietySeverity.MODERATE, 10),
        (AnxietySeverity.SEVERE, 15),
    ),
)
