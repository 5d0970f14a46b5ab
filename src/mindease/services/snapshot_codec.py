"""Assessment snapshot encoding and validated decoding.

The wire format is a JSON-compatible object:

    {
        "timestamp": 1718000000000,
        "depressionResponses": [0, 1, 2, 3, 0, 1, 2, 0, 0],
        "anxietyResponses": [1, 1, 0, 2, 0, 1, 0],
        "depressionTotal": 9,
        "anxietyTotal": 5,
        "depressionBand": "mild",
        "anxietyBand": "mild"
    }

Snapshots read back from storage are external data: ``decode`` never
raises on malformed input, it logs the problem and returns None so the
caller can carry on without a prior snapshot.
"""

from __future__ import annotations

import json
import math
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError
from pydantic import field_validator

from mindease.domain.enums import AnxietySeverity, DepressionSeverity
from mindease.domain.exceptions import InvalidInputError
from mindease.domain.instruments import GAD7, PHQ9
from mindease.domain.value_objects import AssessmentSnapshot
from mindease.infrastructure.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = get_logger(__name__)


def _as_int(value: object) -> int:
    """Accept JSON integers (and integral floats), rejecting booleans."""
    if isinstance(value, bool):
        raise ValueError("must be a number, not a boolean")
    if isinstance(value, float) and math.isfinite(value) and value == int(value):
        return int(value)
    if isinstance(value, int):
        return value
    raise ValueError(f"must be an integer, got {type(value).__name__}")


class SnapshotPayload(BaseModel):
    """Wire-format model of an assessment snapshot."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    timestamp: StrictInt | StrictFloat
    depression_responses: list[int] = Field(
        alias="depressionResponses", min_length=PHQ9.item_count, max_length=PHQ9.item_count
    )
    anxiety_responses: list[int] = Field(
        alias="anxietyResponses", min_length=GAD7.item_count, max_length=GAD7.item_count
    )
    depression_total: int = Field(alias="depressionTotal")
    anxiety_total: int = Field(alias="anxietyTotal")
    depression_band: StrictStr = Field(alias="depressionBand")
    anxiety_band: StrictStr = Field(alias="anxietyBand")

    @field_validator("timestamp", mode="after")
    @classmethod
    def validate_timestamp(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("timestamp must be finite")
        return value

    @field_validator("depression_responses", "anxiety_responses", mode="before")
    @classmethod
    def validate_responses(cls, value: object) -> list[int]:
        if not isinstance(value, list | tuple):
            raise ValueError(f"must be an array, got {type(value).__name__}")
        return [_as_int(item) for item in value]

    @field_validator("depression_total", "anxiety_total", mode="before")
    @classmethod
    def validate_total(cls, value: object) -> int:
        return _as_int(value)


def encode(
    depression_responses: Sequence[int],
    anxiety_responses: Sequence[int],
    depression_total: int,
    anxiety_total: int,
    depression_band: DepressionSeverity,
    anxiety_band: AnxietySeverity,
    timestamp: float,
) -> AssessmentSnapshot:
    """Build an immutable snapshot from assessment results.

    Raises:
        InvalidInputError: If any field is malformed or out of range.
    """
    return AssessmentSnapshot(
        timestamp=timestamp,
        depression_responses=tuple(depression_responses),
        anxiety_responses=tuple(anxiety_responses),
        depression_total=depression_total,
        anxiety_total=anxiety_total,
        depression_band=depression_band,
        anxiety_band=anxiety_band,
    )


def to_wire(snapshot: AssessmentSnapshot) -> dict[str, Any]:
    """Serialize a snapshot to its JSON-compatible wire object."""
    payload = SnapshotPayload(
        timestamp=snapshot.timestamp,
        depression_responses=list(snapshot.depression_responses),
        anxiety_responses=list(snapshot.anxiety_responses),
        depression_total=snapshot.depression_total,
        anxiety_total=snapshot.anxiety_total,
        depression_band=snapshot.depression_band.label,
        anxiety_band=snapshot.anxiety_band.label,
    )
    return payload.model_dump(by_alias=True)


def _summarize(error: PydanticValidationError) -> str:
    problems = [
        f"{'.'.join(str(part) for part in err['loc']) or 'snapshot'}: {err['msg']}"
        for err in error.errors()[:3]
    ]
    extra = error.error_count() - len(problems)
    if extra > 0:
        problems.append(f"{extra} more")
    return "; ".join(problems)


def parse(raw: object) -> AssessmentSnapshot:
    """Strictly validate a wire object (or its JSON text) into a snapshot.

    Args:
        raw: Mapping, JSON ``str``/``bytes``, or an existing snapshot.

    Returns:
        The decoded snapshot.

    Raises:
        InvalidInputError: If the data does not describe a valid snapshot.
    """
    if isinstance(raw, AssessmentSnapshot):
        return raw
    if isinstance(raw, str | bytes | bytearray):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidInputError(f"Not valid JSON: {e.msg}", field="snapshot") from e
    if not isinstance(raw, Mapping):
        raise InvalidInputError(
            f"Expected an object, got {type(raw).__name__}", field="snapshot"
        )

    try:
        payload = SnapshotPayload.model_validate(dict(raw))
    except PydanticValidationError as e:
        raise InvalidInputError(_summarize(e), field="snapshot") from e

    try:
        depression_band = DepressionSeverity.from_label(payload.depression_band)
        anxiety_band = AnxietySeverity.from_label(payload.anxiety_band)
    except ValueError as e:
        raise InvalidInputError(str(e), field="snapshot") from e

    return encode(
        depression_responses=payload.depression_responses,
        anxiety_responses=payload.anxiety_responses,
        depression_total=payload.depression_total,
        anxiety_total=payload.anxiety_total,
        depression_band=depression_band,
        anxiety_band=anxiety_band,
        timestamp=payload.timestamp,
    )


def decode(raw: object) -> AssessmentSnapshot | None:
    """Decode a persisted snapshot, returning None when it is unusable.

    Args:
        raw: Mapping, JSON ``str``/``bytes``, or an existing snapshot.

    Returns:
        The snapshot, or None if ``raw`` is missing or invalid.
    """
    if raw is None:
        return None
    try:
        return parse(raw)
    except InvalidInputError as e:
        logger.warning("Discarding invalid snapshot", error=str(e))
        return None
