"""
Content similarity strategy for context recovery.

Lexical overlap between the fax text and each recent context.
"""
import json
import logging
from typing import Optional

from ..config import RecoveryConfig
from ..models import ConversationContext, InterpretationResult
from ..schemas import ContextRecoveryResult, RecoveryMethod
from ..stores import ContextStore
from .context_resolver import ContextResolver
from .keyword_extractor import extract_keywords
from .similarity import jaccard_similarity

logger = logging.getLogger(__name__)


class ContentSimilarityResolver(ContextResolver):
    """
    Keyword overlap strategy.

    Always proposes the best scoring recent context, however weak; the
    arbiter decides whether the score is good enough.
    """

    method = RecoveryMethod.CONTENT_SIMILARITY

    def __init__(self, store: ContextStore, config: Optional[RecoveryConfig] = None):
        self._store = store
        self._config = config or RecoveryConfig()

    def resolve(
        self,
        interpretation: InterpretationResult,
        user_id: str,
    ) -> ContextRecoveryResult:
        text = interpretation.extracted_text or ""
        if len(text) < self._config.content_min_text_length:
            return self._no_match()

        input_keywords = extract_keywords(text, self._config.max_keywords)
        if not input_keywords:
            return self._no_match()

        contexts = self._store.find_recent_by_user(user_id, self._config.recent_window_days)

        best_id: Optional[str] = None
        best_score = 0.0
        for context in contexts:
            context_keywords = extract_keywords(self.context_text(context), self._config.max_keywords)
            if not context_keywords:
                continue

            score = jaccard_similarity(input_keywords, context_keywords)
            logger.debug(f"Content similarity for context {context.id}: {score:.2f}")
            if best_id is None or score > best_score:
                best_id, best_score = context.id, score

        if best_id is None:
            return self._no_match()

        return ContextRecoveryResult(
            method=self.method,
            confidence=best_score,
            matched_context_id=best_id,
        )

    @staticmethod
    def context_text(context: ConversationContext) -> str:
        """Topic followed by the serialized context payload."""
        topic = context.topic or ""
        if context.context_data is None:
            payload = {}
        else:
            payload = context.context_data.model_dump(mode="json", exclude_none=True)
        return f"{topic} {json.dumps(payload, ensure_ascii=False)}"
