"""
Reference code strategy for context recovery.

Exact-key lookup on the FX-YYYY-NNNNNN code printed on outgoing faxes.
"""
import logging
from typing import Optional

from ..models import InterpretationResult
from ..reference_codes import extract_reference_id, is_valid_reference_id, normalize_reference_id
from ..schemas import ContextRecoveryResult, RecoveryMethod
from ..stores import ContextStore
from .context_resolver import ContextResolver

logger = logging.getLogger(__name__)


class ReferenceCodeResolver(ContextResolver):
    """
    Exact match on the reference code.

    Binary: either the code names a context owned by the sender, or the
    result is zero. Used as first strategy in the chain.
    """

    method = RecoveryMethod.REFERENCE_ID

    def __init__(self, store: ContextStore, match_confidence: float = 0.95):
        self._store = store
        self.match_confidence = match_confidence

    def resolve(
        self,
        interpretation: InterpretationResult,
        user_id: str,
    ) -> ContextRecoveryResult:
        code = self._find_code(interpretation)
        if code is None:
            return self._no_match()

        context = self._store.find_by_reference_id(code)
        if context is None:
            logger.debug(f"Reference code {code} has no stored context")
            return self._no_match()

        if context.user_id != user_id:
            # Never leak another user's conversation
            logger.warning(f"Reference code {code} belongs to a different user")
            return self._no_match()

        return ContextRecoveryResult(
            method=self.method,
            confidence=self.match_confidence,
            matched_context_id=context.id,
        )

    def _find_code(self, interpretation: InterpretationResult) -> Optional[str]:
        """Prefer the code the vision pipeline read, then scan the text."""
        if is_valid_reference_id(interpretation.reference_id):
            return normalize_reference_id(interpretation.reference_id)

        if interpretation.reference_id:
            logger.debug(f"Ignoring malformed reference code '{interpretation.reference_id}'")

        return extract_reference_id(interpretation.extracted_text)
