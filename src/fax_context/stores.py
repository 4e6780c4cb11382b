"""
Context store and audit sink boundaries.

The recovery engine only talks to these abstractions. The in-memory
implementations back tests and local runs; production wires a database
backed store behind the same interface.
"""
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from .exceptions import ContextStoreError
from .models import ConversationContext, parse_context_data
from .reference_codes import normalize_reference_id

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ContextStore(ABC):
    """Read and targeted-update access to stored conversation contexts."""

    @abstractmethod
    def find_by_reference_id(self, reference_id: str) -> Optional[ConversationContext]:
        """Look up the context printed with this reference code."""

    @abstractmethod
    def find_recent_by_user(self, user_id: str, days: int) -> List[ConversationContext]:
        """
        Contexts of a user updated within the last `days` days.

        :return: Contexts ordered by most recent update first
        """

    @abstractmethod
    def find_by_id(self, context_id: str) -> Optional[ConversationContext]:
        """Look up a context by id."""

    @abstractmethod
    def update(self, context_id: str, patch: Dict[str, Any]) -> None:
        """
        Apply a partial update.

        :param patch: Column values to replace ("context_data", "expires_at")
        """


class AuditSink(ABC):
    """Destination for recovery audit events."""

    @abstractmethod
    def record(self, entity_type: str, entity_id: str, operation: str, details: Dict[str, Any]) -> None:
        pass


class InMemoryContextStore(ContextStore):
    """
    Dict-backed context store.

    Purpose:
    - Fast, isolated store for tests and local runs
    - Same ordering and window semantics as the database store
    """

    _UPDATABLE_FIELDS = ("context_data", "expires_at")

    def __init__(self, clock: Optional[Clock] = None):
        """
        Initialize the store.

        :param clock: Source of "now" for window and expiry checks
        """
        self._clock = clock or utc_now
        self._contexts: Dict[str, ConversationContext] = {}
        self._lock = threading.Lock()

    def add(self, context: ConversationContext) -> ConversationContext:
        """Insert or replace a context."""
        with self._lock:
            self._contexts[context.id] = context
        return context

    def create(
        self,
        context_id: str,
        user_id: str,
        reference_id: Optional[str] = None,
        context_type: Optional[str] = None,
        context_data: Any = None,
        ttl: timedelta = timedelta(days=7),
    ) -> ConversationContext:
        """
        Create a context stamped with the current time.

        :param ttl: Lifetime before the context expires
        :return: The stored context
        """
        now = self._clock()
        context = ConversationContext.from_record({
            "id": context_id,
            "user_id": user_id,
            "reference_id": reference_id,
            "context_type": context_type,
            "context_data": context_data,
            "created_at": now,
            "updated_at": now,
            "expires_at": now + ttl,
        })
        return self.add(context)

    def find_by_reference_id(self, reference_id: str) -> Optional[ConversationContext]:
        wanted = normalize_reference_id(reference_id)
        with self._lock:
            for context in self._contexts.values():
                if context.reference_id and normalize_reference_id(context.reference_id) == wanted:
                    return context
        return None

    def find_recent_by_user(self, user_id: str, days: int) -> List[ConversationContext]:
        cutoff = self._clock() - timedelta(days=days)
        with self._lock:
            recent = [
                c for c in self._contexts.values()
                if c.user_id == user_id and c.updated_at > cutoff
            ]
        return sorted(recent, key=lambda c: c.updated_at, reverse=True)

    def find_active_by_user(self, user_id: str) -> List[ConversationContext]:
        """Unexpired contexts of a user, newest first."""
        now = self._clock()
        with self._lock:
            active = [
                c for c in self._contexts.values()
                if c.user_id == user_id and not c.is_expired(now)
            ]
        return sorted(active, key=lambda c: c.created_at, reverse=True)

    def find_by_id(self, context_id: str) -> Optional[ConversationContext]:
        with self._lock:
            return self._contexts.get(context_id)

    def update(self, context_id: str, patch: Dict[str, Any]) -> None:
        unknown = set(patch) - set(self._UPDATABLE_FIELDS)
        if unknown:
            raise ContextStoreError(f"Cannot update fields {sorted(unknown)} of context {context_id}")
        if not patch:
            raise ContextStoreError("No fields to update")

        with self._lock:
            context = self._contexts.get(context_id)
            if context is None:
                raise ContextStoreError(f"Context {context_id} does not exist")

            changes: Dict[str, Any] = {"updated_at": self._clock()}
            if "context_data" in patch:
                changes["context_data"] = parse_context_data(patch["context_data"])
            if "expires_at" in patch:
                changes["expires_at"] = patch["expires_at"]

            self._contexts[context_id] = context.model_copy(update=changes)

    def expire(self, context_id: str) -> None:
        """Expire a context immediately."""
        self.update(context_id, {"expires_at": self._clock()})

    def delete_expired(self) -> int:
        """
        Drop expired contexts.

        :return: Number of contexts removed
        """
        now = self._clock()
        with self._lock:
            expired = [cid for cid, c in self._contexts.items() if c.is_expired(now)]
            for cid in expired:
                del self._contexts[cid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._contexts)


@dataclass(frozen=True)
class AuditRecord:
    entity_type: str
    entity_id: str
    operation: str
    details: Dict[str, Any] = field(default_factory=dict)
    recorded_at: datetime = field(default_factory=utc_now)


class InMemoryAuditSink(AuditSink):
    """Keeps audit records in memory and mirrors them to the log."""

    def __init__(self):
        self.records: List[AuditRecord] = []

    def record(self, entity_type: str, entity_id: str, operation: str, details: Dict[str, Any]) -> None:
        entry = AuditRecord(
            entity_type=entity_type,
            entity_id=entity_id,
            operation=operation,
            details=dict(details),
        )
        self.records.append(entry)
        logger.info(f"Audit - {entity_type}/{entity_id}: {operation} {entry.details}")

    def operations(self) -> List[str]:
        return [r.operation for r in self.records]

    def clear(self) -> None:
        self.records.clear()
