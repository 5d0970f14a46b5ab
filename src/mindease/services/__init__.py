"""Screening engine services.

Public API:
- compute_total: Reduce a response vector to a total score
- classify: Map a total score to its severity band
- triage: Decide the risk level and collect its reasons
- recommend: Suggest coping techniques for a pair of bands
- encode / decode / to_wire: Snapshot codec
- SnapshotRepository: Snapshot persistence over a key-value store
- compute_statistics: Score statistics and trend over a history
- AssessmentService: Pipeline orchestration with optional persistence
"""

from mindease.services.assessment import AssessmentOutcome, AssessmentPreview, AssessmentService
from mindease.services.history import ScoreStatistics, compute_statistics, compute_trend
from mindease.services.recommendation import modalities, recommend
from mindease.services.repository import SnapshotRepository
from mindease.services.scoring import compute_total, is_complete, require_complete
from mindease.services.severity import classify
from mindease.services.snapshot_codec import decode, encode, parse, to_wire
from mindease.services.triage import support_actions, triage

__all__ = [
    "AssessmentOutcome",
    "AssessmentPreview",
    "AssessmentService",
    "ScoreStatistics",
    "SnapshotRepository",
    "classify",
    "compute_statistics",
    "compute_total",
    "compute_trend",
    "decode",
    "encode",
    "is_complete",
    "modalities",
    "parse",
    "recommend",
    "require_complete",
    "support_actions",
    "to_wire",
    "triage",
]
