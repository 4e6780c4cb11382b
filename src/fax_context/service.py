import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from .config import RecoveryConfig
from .disambiguation import DisambiguationRequestBuilder
from .models import ActiveContextData, InterpretationResult, LastInterpretation
from .resolution import AmbiguityDetector, ContextResolver, create_arbiter
from .schemas import ContextRecoveryResult, DisambiguationRequest
from .stores import AuditSink, ContextStore, utc_now

logger = logging.getLogger(__name__)

AUDIT_ENTITY_TYPE = "context_recovery"


class ContextRecoveryService:
    """
    Facade over the context recovery subsystem.
    The ONLY entry point for the fax processing pipeline.
    """

    def __init__(
        self,
        store: ContextStore,
        audit_sink: AuditSink,
        config: Optional[RecoveryConfig] = None,
        resolvers: Optional[List[ContextResolver]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Composition root.
        All collaborators (resolvers, arbiter, detector) are created and wired here.

        :param store: Context store
        :param audit_sink: Receives one event per recovery outcome
        :param config: Thresholds (defaults if None)
        :param resolvers: Custom resolver chain in reliability order
        :param clock: Source of "now", injectable for tests
        """
        self.config = (config or RecoveryConfig()).validate()
        self._store = store
        self._audit_sink = audit_sink
        self._clock = clock or utc_now

        self._arbiter = create_arbiter(store, config=self.config, clock=self._clock, resolvers=resolvers)
        self._detector = AmbiguityDetector(store, config=self.config, clock=self._clock)
        self._disambiguation = DisambiguationRequestBuilder(store, clock=self._clock)

    # ----------------------------
    # Recovery
    # ----------------------------
    def recover_context(
        self,
        interpretation: InterpretationResult,
        user_id: str,
        fax_job_id: Optional[str] = None,
    ) -> ContextRecoveryResult:
        """
        Find the stored conversation an incoming fax continues.
        Never raises: failures degrade to a zero-confidence "none" result.
        """
        try:
            result = self._arbiter.arbitrate(interpretation, user_id)
            if result is not None:
                logger.info(
                    f"Recovered context {result.matched_context_id} for user {user_id} "
                    f"via {result.method.value} ({result.confidence:.2f})"
                )
                self._record(user_id, "context_recovered", {
                    "method": result.method.value,
                    "confidence": result.confidence,
                    "matched_context_id": result.matched_context_id,
                    "fax_job_id": fax_job_id,
                })
                return result

            result = self._detector.detect(user_id)
            if result.is_ambiguous:
                logger.info(f"Ambiguous reply from user {user_id}: {len(result.ambiguous_matches)} live contexts")
            else:
                logger.info(f"No context recovered for user {user_id}")

            self._record(user_id, "context_recovery_attempted", {
                "final_method": result.method.value,
                "confidence": result.confidence,
                "ambiguous_matches": list(result.ambiguous_matches or []),
                "fax_job_id": fax_job_id,
            })
            return result

        except Exception as e:
            logger.error(f"Context recovery failed for user {user_id}: {e}", exc_info=True)
            self._record(user_id, "context_recovery_error", {
                "error": str(e) or type(e).__name__,
                "fax_job_id": fax_job_id,
            })
            return ContextRecoveryResult.no_match()

    # ----------------------------
    # Disambiguation
    # ----------------------------
    def generate_disambiguation_request(
        self,
        ambiguous_matches: List[str],
        user_id: str,
    ) -> DisambiguationRequest:
        """Letter the candidate contexts A, B, C... and build the clarification question."""
        return self._disambiguation.build(ambiguous_matches, user_id)

    # ----------------------------
    # Post-recovery update
    # ----------------------------
    def update_context_after_recovery(
        self,
        context_id: str,
        interpretation: InterpretationResult,
    ) -> None:
        """
        Mark a recovered context active and remember the reply's interpretation.
        No-op if the context no longer exists. Store errors propagate.
        """
        context = self._store.find_by_id(context_id)
        if context is None:
            logger.debug(f"Context {context_id} vanished before update, nothing to do")
            return

        previous: Dict[str, Any] = {}
        if context.context_data is not None:
            previous = context.context_data.model_dump(exclude={"status", "last_interpretation"})

        context_data = ActiveContextData(
            **previous,
            last_interpretation=LastInterpretation(
                intent=interpretation.intent,
                confidence=interpretation.confidence,
                timestamp=self._clock().isoformat(),
            ),
        )

        self._store.update(context_id, {
            "context_data": context_data.model_dump(mode="json", exclude_none=True),
        })

    def _record(self, user_id: str, operation: str, details: Dict[str, Any]) -> None:
        """Audit failures are logged and never affect the recovery result."""
        try:
            self._audit_sink.record(AUDIT_ENTITY_TYPE, user_id, operation, details)
        except Exception as e:
            logger.warning(f"Audit sink failed to record {operation} for user {user_id}: {e}")
