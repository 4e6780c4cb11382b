"""
Template pattern strategy for context recovery.

Matches circled option letters against reply forms the system sent earlier.
"""
import logging
import re
from datetime import datetime
from typing import Callable, List, Optional

from ..config import RecoveryConfig
from ..models import AnnotationType, ContextStatus, ConversationContext, InterpretationResult
from ..schemas import ContextRecoveryResult, RecoveryMethod
from ..stores import ContextStore, utc_now
from .context_resolver import ContextResolver

logger = logging.getLogger(__name__)

_OPTION_LETTER = re.compile(r"^[A-Z]$")


class TemplatePatternResolver(ContextResolver):
    """
    Reply-form strategy.

    The sender was asked to circle one capital letter. Each context waiting
    for a reply is scored by how well the circled letters fit its expected
    selections:

        score = match_weight * (valid / circled) + coverage_weight * (valid / expected)
    """

    method = RecoveryMethod.TEMPLATE_PATTERN

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
        circled = self.circled_options(interpretation)
        if not circled:
            return self._no_match()

        now = self._clock()
        waiting = [
            context
            for context in self._store.find_recent_by_user(user_id, self._config.recent_window_days)
            if context.status == ContextStatus.WAITING_REPLY.value and not context.is_expired(now)
        ]
        if not waiting:
            return self._no_match()

        threshold = self._config.template_match_threshold
        scored = [(context, self.score(context, circled)) for context in waiting]
        for context, score in scored:
            logger.debug(f"Template score for context {context.id}: {score:.2f} (circled={circled})")

        confident = [(context, score) for context, score in scored if score > threshold]
        if len(confident) == 1:
            context, score = confident[0]
            return ContextRecoveryResult(
                method=self.method,
                confidence=score,
                matched_context_id=context.id,
            )

        if len(waiting) > 1:
            # Several forms are open and the marks don't single one out
            candidates = confident or scored
            return ContextRecoveryResult(
                method=self.method,
                confidence=self._config.template_ambiguous_confidence,
                ambiguous_matches=[context.id for context, _ in candidates],
            )

        return self._no_match()

    def circled_options(self, interpretation: InterpretationResult) -> List[str]:
        """Confidently circled single capital letters, in annotation order."""
        options = []
        for annotation in interpretation.visual_annotations:
            if annotation.type != AnnotationType.CIRCLE:
                continue
            if annotation.confidence <= self._config.template_annotation_confidence:
                continue
            text = (annotation.associated_text or "").strip()
            if _OPTION_LETTER.match(text):
                options.append(text)
        return options

    def score(self, context: ConversationContext, circled: List[str]) -> float:
        expected = context.expected_selections
        if not expected:
            return self._config.template_no_expectation_score

        valid = [option for option in circled if option in expected]
        if not valid:
            return 0.0

        match_ratio = len(valid) / len(circled)
        coverage_ratio = min(1.0, len(valid) / len(expected))
        return (
            self._config.template_match_weight * match_ratio
            + self._config.template_coverage_weight * coverage_ratio
        )
