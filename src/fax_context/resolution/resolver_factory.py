"""
Factory for the default recovery strategy chain.
"""
from datetime import datetime
from typing import Callable, List, Optional

from ..config import RecoveryConfig
from ..stores import ContextStore
from .confidence_arbiter import ConfidenceArbiter
from .content_similarity_resolver import ContentSimilarityResolver
from .context_resolver import ContextResolver
from .reference_code_resolver import ReferenceCodeResolver
from .template_pattern_resolver import TemplatePatternResolver
from .temporal_proximity_resolver import TemporalProximityResolver


def create_default_resolvers(
    store: ContextStore,
    config: Optional[RecoveryConfig] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> List[ContextResolver]:
    """
    Build the resolver chain in reliability order.

    :param store: Context store every resolver reads from
    :param config: Thresholds (defaults if None)
    :param clock: Source of "now" for time-based resolvers
    :return: [reference code, template pattern, content similarity, temporal proximity]
    """
    config = config or RecoveryConfig()
    return [
        ReferenceCodeResolver(store, match_confidence=config.reference_match_confidence),
        TemplatePatternResolver(store, config=config, clock=clock),
        ContentSimilarityResolver(store, config=config),
        TemporalProximityResolver(store, config=config, clock=clock),
    ]


def create_arbiter(
    store: ContextStore,
    config: Optional[RecoveryConfig] = None,
    clock: Optional[Callable[[], datetime]] = None,
    resolvers: Optional[List[ContextResolver]] = None,
) -> ConfidenceArbiter:
    """
    Factory function to create a ConfidenceArbiter.

    :param resolvers: Custom chain; the default chain is built if None
    :return: Configured ConfidenceArbiter
    """
    config = config or RecoveryConfig()
    if resolvers is None:
        resolvers = create_default_resolvers(store, config=config, clock=clock)

    return ConfidenceArbiter(
        resolvers=resolvers,
        acceptance_threshold=config.acceptance_threshold,
    )
