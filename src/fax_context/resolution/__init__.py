"""
Context recovery strategies.

Turns the loose signals of an incoming fax into a stored conversation.

Key components:
- ContextResolver: Protocol for recovery strategies
- Resolvers: Reference code, Template pattern, Content similarity, Temporal proximity
- ConfidenceArbiter: Reliability-ordered escalation across resolvers
- AmbiguityDetector: Fallback when no resolver is confident
"""
from .context_resolver import ContextResolver
from .keyword_extractor import extract_keywords, STOP_WORDS
from .similarity import jaccard_similarity
from .reference_code_resolver import ReferenceCodeResolver
from .template_pattern_resolver import TemplatePatternResolver
from .content_similarity_resolver import ContentSimilarityResolver
from .temporal_proximity_resolver import TemporalProximityResolver
from .confidence_arbiter import ConfidenceArbiter
from .ambiguity_detector import AmbiguityDetector
from .resolver_factory import create_default_resolvers, create_arbiter

__all__ = [
    "ContextResolver",
    "extract_keywords",
    "STOP_WORDS",
    "jaccard_similarity",
    "ReferenceCodeResolver",
    "TemplatePatternResolver",
    "ContentSimilarityResolver",
    "TemporalProximityResolver",
    "ConfidenceArbiter",
    "AmbiguityDetector",
    "create_default_resolvers",
    "create_arbiter",
]
