"""
Shared fixtures: a frozen clock, an in-memory store and a context factory.
"""
from datetime import datetime, timedelta, timezone

import pytest

from fax_context.models import ConversationContext
from fax_context.service import ContextRecoveryService
from fax_context.stores import InMemoryAuditSink, InMemoryContextStore

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    """Frozen clock so time bands and day summaries are deterministic."""
    return lambda: NOW


@pytest.fixture
def store(clock):
    return InMemoryContextStore(clock=clock)


@pytest.fixture
def audit_sink():
    return InMemoryAuditSink()


@pytest.fixture
def service(store, audit_sink, clock):
    return ContextRecoveryService(store, audit_sink, clock=clock)


@pytest.fixture
def make_context(store):
    """
    Create and store a context.

    Defaults describe a live context last touched two days ago, so the
    temporal resolver alone (0.2) never clears the acceptance threshold.
    """
    def _make(
        context_id,
        user_id="user-1",
        status="active",
        topic=None,
        expected_selections=None,
        reference_id=None,
        updated_hours_ago=48.0,
        expires_in_hours=24.0 * 7,
        **extra,
    ):
        context_data = {"status": status, **extra}
        if topic is not None:
            context_data["topic"] = topic
        if expected_selections is not None:
            context_data["expected_selections"] = expected_selections

        updated_at = NOW - timedelta(hours=updated_hours_ago)
        context = ConversationContext.from_record({
            "id": context_id,
            "user_id": user_id,
            "reference_id": reference_id,
            "context_data": context_data,
            "created_at": updated_at,
            "updated_at": updated_at,
            "expires_at": NOW + timedelta(hours=expires_in_hours),
        })
        return store.add(context)

    return _make
