"""
Ambiguity detection when no strategy is confident.
"""
from datetime import datetime
from typing import Callable, Optional

from ..config import RecoveryConfig
from ..schemas import ContextRecoveryResult, RecoveryMethod
from ..stores import ContextStore, utc_now


class AmbiguityDetector:
    """
    Tells "nothing to match" apart from "several plausible matches".

    Two or more live contexts produce a sentinel confidence with their ids so
    the caller can start a disambiguation round; otherwise the result is a
    clean zero.
    """

    def __init__(
        self,
        store: ContextStore,
        config: Optional[RecoveryConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self._store = store
        self._config = config or RecoveryConfig()
        self._clock = clock or utc_now

    def detect(self, user_id: str) -> ContextRecoveryResult:
        now = self._clock()
        live = [
            context
            for context in self._store.find_recent_by_user(user_id, self._config.recent_window_days)
            if context.is_live(now)
        ]

        if len(live) <= 1:
            return ContextRecoveryResult.no_match()

        return ContextRecoveryResult(
            method=RecoveryMethod.NONE,
            confidence=self._config.ambiguous_sentinel_confidence,
            ambiguous_matches=[context.id for context in live],
        )
