"""
Disambiguation requests for faxes that match several conversations.

The request letters the candidates A, B, C... in the order given, so the
reply can be read back by the template pattern resolver.
"""
import logging
import string
from datetime import datetime
from typing import Callable, List, Optional

from .models import ConversationContext
from .schemas import ContextSummary, DisambiguationRequest
from .stores import ContextStore, utc_now

logger = logging.getLogger(__name__)

OPTION_LETTERS = string.ascii_uppercase
UNKNOWN_TOPIC = "Unknown topic"
SECONDS_PER_DAY = 86400


class DisambiguationRequestBuilder:
    """Builds letter-indexed clarification questions from candidate contexts."""

    def __init__(self, store: ContextStore, clock: Optional[Callable[[], datetime]] = None):
        self._store = store
        self._clock = clock or utc_now

    def build(self, ambiguous_matches: List[str], user_id: str) -> DisambiguationRequest:
        """
        Build a clarification request.

        Missing contexts and contexts owned by someone else are skipped;
        letters are assigned after skipping so they stay contiguous.

        :param ambiguous_matches: Candidate context ids, in display order
        :param user_id: Sender the question goes back to
        :return: DisambiguationRequest
        """
        contexts: List[ConversationContext] = []
        for context_id in ambiguous_matches:
            context = self._store.find_by_id(context_id)
            if context is None:
                logger.debug(f"Skipping missing context {context_id}")
                continue
            if context.user_id != user_id:
                logger.warning(f"Skipping context {context_id} owned by a different user")
                continue
            contexts.append(context)

        if len(contexts) > len(OPTION_LETTERS):
            logger.warning(f"Too many candidates ({len(contexts)}), offering the first {len(OPTION_LETTERS)}")
            contexts = contexts[:len(OPTION_LETTERS)]

        if not contexts:
            logger.warning(f"No usable candidates for user {user_id}, asking for a reference code instead")

        summaries = [
            ContextSummary(
                id=context.id,
                letter=OPTION_LETTERS[index],
                summary=self.summarize(context),
                reference_id=context.reference_id,
            )
            for index, context in enumerate(contexts)
        ]

        return DisambiguationRequest(
            clarification_question=self.build_question(summaries),
            context_summaries=summaries,
        )

    def summarize(self, context: ConversationContext) -> str:
        """Topic plus how long ago the conversation was last touched."""
        topic = context.topic or UNKNOWN_TOPIC
        return f"{topic} ({self._relative_day(context.updated_at)})"

    def _relative_day(self, updated_at: datetime) -> str:
        days = max(0, int((self._clock() - updated_at).total_seconds() // SECONDS_PER_DAY))
        if days == 0:
            return "today"
        if days == 1:
            return "yesterday"
        return f"{days} days ago"

    @staticmethod
    def build_question(summaries: List[ContextSummary]) -> str:
        if not summaries:
            return (
                "I received your fax but couldn't determine which request it's for. "
                "Please write the reference code from our earlier fax on your page "
                "and fax it back with your original message."
            )

        lines = [
            "I received your fax but couldn't determine which request it's for. "
            "Recent conversations:",
            "",
        ]
        for summary in summaries:
            line = f"{summary.letter}. {summary.summary}"
            if summary.reference_id:
                line += f" (Ref: {summary.reference_id})"
            lines.append(line)

        letters = " or ".join(summary.letter for summary in summaries)
        lines.append("")
        lines.append(
            f"Please circle or write only one letter ({letters}) "
            f"and fax it back with your original message."
        )
        return "\n".join(lines)
