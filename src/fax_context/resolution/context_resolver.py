"""
Core abstraction for context recovery strategies.

Each strategy inspects one kind of signal in an incoming fax and proposes a
stored context with a confidence score.
"""
from abc import ABC, abstractmethod

from ..models import InterpretationResult
from ..schemas import ContextRecoveryResult, RecoveryMethod


class ContextResolver(ABC):
    """
    Protocol for context recovery strategies.

    Resolvers read their own snapshot from the context store and share no
    mutable state, so the arbiter can run them in any order it likes and
    still apply their results in its declared order.
    """

    method: RecoveryMethod = RecoveryMethod.NONE

    @abstractmethod
    def resolve(
        self,
        interpretation: InterpretationResult,
        user_id: str,
    ) -> ContextRecoveryResult:
        """
        Propose a context for an incoming fax.

        :param interpretation: Extracted signals of the incoming fax
        :param user_id: Sender whose contexts may be matched
        :return: ContextRecoveryResult tagged with this resolver's method
        """
        pass

    def _no_match(self) -> ContextRecoveryResult:
        return ContextRecoveryResult.no_match(self.method)
