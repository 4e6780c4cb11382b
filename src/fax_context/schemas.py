from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .models import WaitingReplyContextData


class RecoveryMethod(str, Enum):
    """Strategy that produced a recovery outcome."""
    REFERENCE_ID = "reference_id"
    TEMPLATE_PATTERN = "template_pattern"
    CONTENT_SIMILARITY = "content_similarity"
    TEMPORAL_PROXIMITY = "temporal_proximity"
    NONE = "none"


@dataclass(frozen=True)
class ContextRecoveryResult:
    """
    Immutable outcome of a recovery attempt.

    Attributes:
        method: Strategy that produced this result
        confidence: Confidence score between 0.0 and 1.0
        matched_context_id: Set only when a single context is claimed
        ambiguous_matches: Set only when several live contexts are plausible
    """
    method: RecoveryMethod
    confidence: float
    matched_context_id: Optional[str] = None
    ambiguous_matches: Optional[List[str]] = None

    def __post_init__(self):
        """Validate confidence score."""
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be between 0.0 and 1.0, got {self.confidence}")

    @classmethod
    def no_match(cls, method: RecoveryMethod = RecoveryMethod.NONE) -> "ContextRecoveryResult":
        return cls(method=method, confidence=0.0)

    def is_confident(self, threshold: float) -> bool:
        """Strictly above threshold."""
        return self.confidence > threshold

    @property
    def is_ambiguous(self) -> bool:
        return bool(self.ambiguous_matches)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        result = {
            "method": self.method.value,
            "confidence": self.confidence,
        }

        if self.matched_context_id is not None:
            result["matched_context_id"] = self.matched_context_id

        if self.ambiguous_matches is not None:
            result["ambiguous_matches"] = list(self.ambiguous_matches)

        return result


@dataclass(frozen=True)
class ContextSummary:
    id: str
    letter: str
    summary: str
    reference_id: Optional[str] = None


@dataclass
class DisambiguationRequest:
    clarification_question: str
    context_summaries: List[ContextSummary] = field(default_factory=list)

    @property
    def expected_selections(self) -> List[str]:
        """Letters offered to the user, in order."""
        return [summary.letter for summary in self.context_summaries]

    def context_id_for(self, letter: str) -> Optional[str]:
        """Map a letter written on the reply back to its context id."""
        wanted = letter.strip().upper()
        for summary in self.context_summaries:
            if summary.letter == wanted:
                return summary.id
        return None

    def to_context_data(self, topic: Optional[str] = None) -> WaitingReplyContextData:
        """
        Context payload for the clarification fax itself.

        Stored with the outgoing fax so the next reply can be matched by the
        template pattern resolver against the offered letters.
        """
        return WaitingReplyContextData(
            topic=topic or "Clarification request",
            expected_selections=self.expected_selections,
            candidate_context_ids=[summary.id for summary in self.context_summaries],
        )

    def to_dict(self) -> dict:
        return {
            "clarification_question": self.clarification_question,
            "context_summaries": [
                {
                    "id": s.id,
                    "letter": s.letter,
                    "summary": s.summary,
                    **({"reference_id": s.reference_id} if s.reference_id else {}),
                }
                for s in self.context_summaries
            ],
        }
