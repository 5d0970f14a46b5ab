"""Assessment orchestration: scoring pipeline plus optional persistence.

``preview`` and ``evaluate`` are synchronous and never touch storage.
Persistence lives in separate coroutines whose failures are logged and
reported as a falsy result, so a broken store never costs the user the
result they have already seen.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from mindease.domain.exceptions import PersistenceError
from mindease.domain.instruments import GAD7, PHQ9
from mindease.infrastructure.logging import get_logger, setup_logging, with_context
from mindease.infrastructure.storage import JsonFileKeyValueStore
from mindease.services.history import compute_statistics
from mindease.services.recommendation import modalities, recommend
from mindease.services.repository import SnapshotRepository
from mindease.services.scoring import compute_total, is_complete
from mindease.services.severity import classify
from mindease.services.snapshot_codec import encode
from mindease.services.triage import evaluate_rules, prepare_inputs, support_actions

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from mindease.config import EngineSettings, HistorySettings, Settings
    from mindease.domain.enums import AnxietySeverity, DepressionSeverity, TherapyModality
    from mindease.domain.instruments import Instrument
    from mindease.domain.value_objects import AssessmentSnapshot, Recommendation, TriageResult
    from mindease.services.history import ScoreStatistics

logger = get_logger(__name__)


def current_time_ms() -> float:
    """Wall-clock time in epoch milliseconds."""
    return time.time() * 1000


@dataclass(frozen=True, slots=True)
class AssessmentPreview:
    """Running totals while the questionnaires are being filled in."""

    depression_total: int
    anxiety_total: int
    depression_band: DepressionSeverity
    anxiety_band: AnxietySeverity
    depression_complete: bool
    anxiety_complete: bool

    @property
    def is_complete(self) -> bool:
        """True when both questionnaires are fully answered."""
        return self.depression_complete and self.anxiety_complete


@dataclass(frozen=True, slots=True)
class AssessmentOutcome:
    """Everything derived from one completed assessment."""

    snapshot: AssessmentSnapshot
    triage: TriageResult
    recommendation: Recommendation
    modalities: tuple[TherapyModality, ...]
    support_actions: tuple[str, ...]


class AssessmentService:
    """Runs the screening pipeline and, when allowed, saves the result.

    Holds no assessment state between calls; the repository (if any) is the
    only collaborator with side effects.
    """

    def __init__(
        self,
        engine_settings: EngineSettings,
        history_settings: HistorySettings,
        repository: SnapshotRepository | None = None,
        clock: Callable[[], float] = current_time_ms,
    ) -> None:
        """Initialize the service.

        Args:
            engine_settings: Recommendation limit.
            history_settings: Statistics window and trend parameters.
            repository: Snapshot persistence; None disables saving.
            clock: Returns the current time in epoch milliseconds.
        """
        self._max_recommendations = engine_settings.max_recommendations
        self._history_settings = history_settings
        self._repository = repository
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> AssessmentService:
        """Configure logging and build a service persisting to the configured JSON file.

        This is the application entry point; services built directly through
        the constructor leave logging configuration to the caller.
        """
        setup_logging(settings.logging)
        store = JsonFileKeyValueStore(
            settings.storage.file_path, prefix=settings.storage.key_prefix
        )
        return cls(
            engine_settings=settings.engine,
            history_settings=settings.history,
            repository=SnapshotRepository(store, settings.storage),
        )

    def preview(
        self, depression_responses: Sequence[int], anxiety_responses: Sequence[int]
    ) -> AssessmentPreview:
        """Live totals and bands; unanswered items count as 0.

        Raises:
            InvalidInputError: If a vector is malformed.
        """
        depression_total = compute_total(depression_responses, PHQ9)
        anxiety_total = compute_total(anxiety_responses, GAD7)
        return AssessmentPreview(
            depression_total=depression_total,
            anxiety_total=anxiety_total,
            depression_band=classify(depression_total, PHQ9),
            anxiety_band=classify(anxiety_total, GAD7),
            depression_complete=is_complete(depression_responses),
            anxiety_complete=is_complete(anxiety_responses),
        )

    def evaluate(
        self, depression_responses: Sequence[int], anxiety_responses: Sequence[int]
    ) -> AssessmentOutcome:
        """Score, classify, triage and recommend for a completed assessment.

        Raises:
            InvalidInputError: If a vector is malformed.
            IncompleteInputError: If any item is unanswered.
        """
        inputs = prepare_inputs(depression_responses, anxiety_responses)
        triage_result = evaluate_rules(inputs)
        recommendation = recommend(
            inputs.depression_band, inputs.anxiety_band, limit=self._max_recommendations
        )
        snapshot = encode(
            depression_responses=inputs.depression_responses,
            anxiety_responses=inputs.anxiety_responses,
            depression_total=inputs.depression_total,
            anxiety_total=inputs.anxiety_total,
            depression_band=inputs.depression_band,
            anxiety_band=inputs.anxiety_band,
            timestamp=self._clock(),
        )

        logger.info(
            "Assessment evaluated",
            depression_total=inputs.depression_total,
            depression_band=inputs.depression_band.label,
            anxiety_total=inputs.anxiety_total,
            anxiety_band=inputs.anxiety_band.label,
            triage_level=triage_result.level.label,
            techniques=len(recommendation),
        )

        return AssessmentOutcome(
            snapshot=snapshot,
            triage=triage_result,
            recommendation=recommendation,
            modalities=modalities(recommendation),
            support_actions=support_actions(triage_result.level),
        )

    @with_context(operation="record_snapshot")
    async def record(self, outcome: AssessmentOutcome) -> bool:
        """Persist the outcome's snapshot if saving is configured and allowed.

        Returns:
            True if the snapshot was written.
        """
        if self._repository is None:
            return False
        try:
            if not await self._repository.load_consent():
                logger.debug("Snapshot not saved, no consent")
                return False
            await self._repository.save(outcome.snapshot)
        except (PersistenceError, OSError) as e:
            logger.warning("Snapshot save failed", error=str(e))
            return False
        return True

    async def latest(self) -> AssessmentSnapshot | None:
        """Most recent saved snapshot; None when unavailable."""
        if self._repository is None:
            return None
        try:
            return await self._repository.load_latest()
        except (PersistenceError, OSError) as e:
            logger.warning("Snapshot load failed", error=str(e))
            return None

    async def history(self) -> list[AssessmentSnapshot]:
        """Saved snapshots, newest first; empty when unavailable."""
        if self._repository is None:
            return []
        try:
            return await self._repository.load_history()
        except (PersistenceError, OSError) as e:
            logger.warning("History load failed", error=str(e))
            return []

    @with_context(operation="score_statistics")
    async def statistics(self, instrument: Instrument) -> ScoreStatistics | None:
        """Score statistics over the configured window for one instrument."""
        settings = self._history_settings
        return compute_statistics(
            await self.history(),
            instrument,
            now_ms=self._clock(),
            period_days=settings.period_days,
            trend_threshold=settings.trend_threshold,
            min_records=settings.min_records_for_trend,
        )

    async def set_save_consent(self, allowed: bool) -> bool:
        """Record whether local saving is allowed.

        Returns:
            True if the preference was stored.
        """
        if self._repository is None:
            return False
        try:
            await self._repository.save_consent(allowed)
        except (PersistenceError, OSError) as e:
            logger.warning("Consent save failed", error=str(e))
            return False
        return True

    async def save_consent(self) -> bool:
        """Whether local saving is currently allowed."""
        if self._repository is None:
            return False
        try:
            return await self._repository.load_consent()
        except (PersistenceError, OSError) as e:
            logger.warning("Consent load failed", error=str(e))
            return False
