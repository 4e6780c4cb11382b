"""
Conversation context recovery for fax replies.

Given an incoming fax with no session identifier, find the stored
conversation it continues, or ask the sender to pick among lettered
candidates.
"""
from .config import RecoveryConfig
from .config_loader import load_config_from_env
from .exceptions import ConfigurationError, ContextStoreError, ContextValidationError, FaxContextError
from .models import (
    ActiveContextData,
    AnnotationType,
    ClosedContextData,
    ContextStatus,
    ConversationContext,
    InterpretationResult,
    VisualAnnotation,
    WaitingReplyContextData,
)
from .schemas import ContextRecoveryResult, ContextSummary, DisambiguationRequest, RecoveryMethod
from .service import ContextRecoveryService
from .stores import AuditSink, ContextStore, InMemoryAuditSink, InMemoryContextStore

__all__ = [
    "RecoveryConfig",
    "load_config_from_env",
    "FaxContextError",
    "ConfigurationError",
    "ContextStoreError",
    "ContextValidationError",
    "ActiveContextData",
    "AnnotationType",
    "ClosedContextData",
    "ContextStatus",
    "ConversationContext",
    "InterpretationResult",
    "VisualAnnotation",
    "WaitingReplyContextData",
    "ContextRecoveryResult",
    "ContextSummary",
    "DisambiguationRequest",
    "RecoveryMethod",
    "ContextRecoveryService",
    "AuditSink",
    "ContextStore",
    "InMemoryAuditSink",
    "InMemoryContextStore",
]
