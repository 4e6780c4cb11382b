"""
Temporal proximity strategy for context recovery.

Last-resort guess: the conversation the sender touched most recently.
"""
from datetime import datetime
from typing import Callable, Optional

from ..config import RecoveryConfig
from ..models import InterpretationResult
from ..schemas import ContextRecoveryResult, RecoveryMethod
from ..stores import ContextStore, utc_now
from .context_resolver import ContextResolver

SECONDS_PER_HOUR = 3600.0


class TemporalProximityResolver(ContextResolver):
    """
    Recency strategy.

    Confidence is a step function of the hours since the most recent
    context was last updated. Lowest trust in the chain.
    """

    method = RecoveryMethod.TEMPORAL_PROXIMITY

    def __init__(
        self,
        store: ContextStore,
        config: Optional[RecoveryConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self._config = config or RecoveryConfig()
        self._clock = clock or utc_now

    def resolve(
        self,
        interpretation: InterpretationResult,
        user_id: str,
    ) -> ContextRecoveryResult:
        contexts = self._store.find_recent_by_user(user_id, self._config.temporal_lookback_days)
        if not contexts:
            return self._no_match()

        most_recent = max(contexts, key=lambda c: c.updated_at)
        elapsed = (self._clock() - most_recent.updated_at).total_seconds() / SECONDS_PER_HOUR

        return ContextRecoveryResult(
            method=self.method,
            confidence=self.confidence_for(elapsed),
            matched_context_id=most_recent.id,
        )

    def confidence_for(self, hours_elapsed: float) -> float:
        for upper_bound, confidence in self._config.temporal_bands:
            if hours_elapsed < upper_bound:
                return confidence
        return self._config.temporal_floor_confidence
