"""Unit tests for snapshot encoding and decoding."""

from __future__ import annotations

import json
from typing import Any

import pytest

from mindease.domain.enums import AnxietySeverity, DepressionSeverity
from mindease.domain.exceptions import InvalidInputError
from mindease.domain.value_objects import AssessmentSnapshot
from mindease.services.snapshot_codec import SnapshotPayload, decode, encode, parse, to_wire

pytestmark = pytest.mark.unit


@pytest.fixture
def snapshot() -> AssessmentSnapshot:
    return encode(
        depression_responses=[0, 1, 2, 3, 0, 1, 2, 0, 0],
        anxiety_responses=[1, 1, 0, 2, 0, 1, 0],
        depression_total=9,
        anxiety_total=5,
        depression_band=DepressionSeverity.MILD,
        anxiety_band=AnxietySeverity.MILD,
        timestamp=1_718_000_000_000,
    )


@pytest.fixture
def wire() -> dict[str, Any]:
    return {
        "timestamp": 1_718_000_000_000,
        "depressionResponses": [0, 1, 2, 3, 0, 1, 2, 0, 0],
        "anxietyResponses": [1, 1, 0, 2, 0, 1, 0],
        "depressionTotal": 9,
        "anxietyTotal": 5,
        "depressionBand": "mild",
        "anxietyBand": "mild",
    }


class TestEncode:
    """Tests for encode and to_wire."""

    def test_encode_normalizes_sequences(self, snapshot: AssessmentSnapshot) -> None:
        assert snapshot.depression_responses == (0, 1, 2, 3, 0, 1, 2, 0, 0)
        assert snapshot.anxiety_band is AnxietySeverity.MILD

    @pytest.mark.parametrize(
        ("depression_total", "timestamp", "field"),
        [
            (30, 0, "depression_total"),
            (0, float("nan"), "timestamp"),
            (0, float("inf"), "timestamp"),
            (0, float("-inf"), "timestamp"),
        ],
    )
    def test_encode_rejects_invalid(
        self, depression_total: int, timestamp: float, field: str
    ) -> None:
        with pytest.raises(InvalidInputError) as exc_info:
            encode(
                depression_responses=[0] * 9,
                anxiety_responses=[0] * 7,
                depression_total=depression_total,
                anxiety_total=0,
                depression_band=DepressionSeverity.MINIMAL,
                anxiety_band=AnxietySeverity.MINIMAL,
                timestamp=timestamp,
            )
        assert exc_info.value.field == field

    def test_every_encoded_snapshot_serializes(self, snapshot: AssessmentSnapshot) -> None:
        """Anything encode accepts, to_wire and decode accept too."""
        assert decode(to_wire(snapshot)) == snapshot

    def test_to_wire(self, snapshot: AssessmentSnapshot, wire: dict[str, Any]) -> None:
        assert to_wire(snapshot) == wire

    def test_to_wire_is_json_serializable(self, snapshot: AssessmentSnapshot) -> None:
        assert json.loads(json.dumps(to_wire(snapshot))) == to_wire(snapshot)

    def test_moderately_severe_label(self) -> None:
        snap = encode(
            depression_responses=[2] * 8 + [0],
            anxiety_responses=[0] * 7,
            depression_total=16,
            anxiety_total=0,
            depression_band=DepressionSeverity.MODERATELY_SEVERE,
            anxiety_band=AnxietySeverity.MINIMAL,
            timestamp=1,
        )
        assert to_wire(snap)["depressionBand"] == "moderately_severe"


class TestDecode:
    """Tests for decode (lenient) and parse (strict)."""

    def test_decode_wire(self, snapshot: AssessmentSnapshot, wire: dict[str, Any]) -> None:
        assert decode(wire) == snapshot

    def test_decode_json_text(self, snapshot: AssessmentSnapshot, wire: dict[str, Any]) -> None:
        assert decode(json.dumps(wire)) == snapshot
        assert decode(json.dumps(wire).encode()) == snapshot

    def test_decode_snapshot_passthrough(self, snapshot: AssessmentSnapshot) -> None:
        assert decode(snapshot) is snapshot

    def test_decode_to_wire_round_trip(self, snapshot: AssessmentSnapshot) -> None:
        assert decode(to_wire(snapshot)) == snapshot

    def test_decode_none(self) -> None:
        assert decode(None) is None

    def test_integral_floats_accepted(self, wire: dict[str, Any]) -> None:
        wire["depressionTotal"] = 9.0
        wire["anxietyResponses"] = [1.0, 1, 0, 2, 0, 1, 0]
        decoded = decode(wire)
        assert decoded is not None
        assert decoded.depression_total == 9
        assert decoded.anxiety_responses[0] == 1

    def test_extra_fields_ignored(self, snapshot: AssessmentSnapshot, wire: dict[str, Any]) -> None:
        wire["appVersion"] = "1.2.3"
        assert decode(wire) == snapshot

    def test_snake_case_keys_accepted(
        self, snapshot: AssessmentSnapshot, wire: dict[str, Any]
    ) -> None:
        snake = SnapshotPayload.model_validate(wire).model_dump()
        assert decode(snake) == snapshot

    def test_unanswered_items_preserved(self, wire: dict[str, Any]) -> None:
        wire["anxietyResponses"] = [1, 1, 0, 2, 0, 1, -1]
        decoded = decode(wire)
        assert decoded is not None
        assert not decoded.is_complete


class TestDecodeRejects:
    """Malformed stored data decodes to None instead of raising."""

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("timestamp", "yesterday"),
            ("timestamp", True),
            ("timestamp", None),
            ("depressionResponses", [0] * 8),
            ("depressionResponses", "000000000"),
            ("anxietyResponses", [0, 0, 0, 0, 0, 0, 4]),
            ("anxietyResponses", [0, 0, 0, 0, 0, 0, True]),
            ("depressionTotal", 28),
            ("depressionTotal", 9.5),
            ("anxietyTotal", "5"),
            ("depressionBand", "catastrophic"),
            ("anxietyBand", "moderately_severe"),
            ("anxietyBand", 1),
        ],
    )
    def test_bad_field(self, wire: dict[str, Any], key: str, value: object) -> None:
        wire[key] = value
        assert decode(wire) is None

    @pytest.mark.parametrize(
        "key",
        [
            "timestamp",
            "depressionResponses",
            "anxietyResponses",
            "depressionTotal",
            "anxietyTotal",
            "depressionBand",
            "anxietyBand",
        ],
    )
    def test_missing_field(self, wire: dict[str, Any], key: str) -> None:
        del wire[key]
        assert decode(wire) is None

    @pytest.mark.parametrize("raw", ["not json", "[1, 2]", 42, [], "null"])
    def test_not_an_object(self, raw: object) -> None:
        assert decode(raw) is None

    def test_infinite_timestamp(self, wire: dict[str, Any]) -> None:
        wire["timestamp"] = float("inf")
        assert decode(wire) is None


class TestParse:
    """parse raises where decode returns None."""

    def test_parse_valid(self, snapshot: AssessmentSnapshot, wire: dict[str, Any]) -> None:
        assert parse(wire) == snapshot

    def test_parse_invalid_json(self) -> None:
        with pytest.raises(InvalidInputError, match="Not valid JSON"):
            parse("{")

    def test_parse_non_object(self) -> None:
        with pytest.raises(InvalidInputError, match="Expected an object, got list"):
            parse([1, 2, 3])

    def test_parse_reports_field(self, wire: dict[str, Any]) -> None:
        wire["depressionResponses"] = [0] * 3
        with pytest.raises(InvalidInputError, match="depressionResponses") as exc_info:
            parse(wire)
        assert exc_info.value.field == "snapshot"

    def test_parse_unknown_band(self, wire: dict[str, Any]) -> None:
        wire["depressionBand"] = "extreme"
        with pytest.raises(InvalidInputError, match="Unknown DepressionSeverity label"):
            parse(wire)

    def test_parse_out_of_range_total(self, wire: dict[str, Any]) -> None:
        wire["anxietyTotal"] = 22
        with pytest.raises(InvalidInputError, match="anxiety_total"):
            parse(wire)
