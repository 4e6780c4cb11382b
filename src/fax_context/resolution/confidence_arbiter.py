"""
Arbitration across context recovery strategies.

Implements the escalation: reference code → template pattern →
content similarity → temporal proximity.
"""
import logging
from typing import List, Optional

from ..models import InterpretationResult
from ..schemas import ContextRecoveryResult
from .context_resolver import ContextResolver

logger = logging.getLogger(__name__)


class ConfidenceArbiter:
    """
    Policy for escalating through recovery strategies.

    Tries resolvers in reliability order and accepts the first result whose
    confidence is strictly above the threshold. A later, less reliable
    strategy never overrides an earlier accepted one, even with a higher
    score.
    """

    def __init__(
        self,
        resolvers: List[ContextResolver],
        acceptance_threshold: float = 0.6,
    ):
        """
        Initialize the arbiter.

        :param resolvers: Resolvers in reliability order, most trusted first
        :param acceptance_threshold: Confidence a result must exceed to be accepted
        """
        if not resolvers:
            raise ValueError("At least one resolver must be provided")

        self._resolvers = list(resolvers)
        self.acceptance_threshold = acceptance_threshold

    @property
    def resolvers(self) -> List[ContextResolver]:
        return list(self._resolvers)

    def arbitrate(
        self,
        interpretation: InterpretationResult,
        user_id: str,
    ) -> Optional[ContextRecoveryResult]:
        """
        Run resolvers in order until one is confident.

        Resolver exceptions are not caught here; the caller owns failure
        handling.

        :param interpretation: Extracted signals of the incoming fax
        :param user_id: Sender
        :return: First accepted result, or None if no resolver cleared the threshold
        """
        for resolver in self._resolvers:
            result = resolver.resolve(interpretation, user_id)
            logger.debug(
                f"Resolver {result.method.value}: confidence={result.confidence:.2f}, "
                f"matched={result.matched_context_id}"
            )

            if result.is_confident(self.acceptance_threshold) and result.matched_context_id:
                return result

        return None
