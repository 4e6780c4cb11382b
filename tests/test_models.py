"""
Tests for domain models and result schemas.
"""
from datetime import timedelta

import pytest
from pydantic import ValidationError

from fax_context.exceptions import ContextValidationError
from fax_context.models import (
    ActiveContextData,
    AnnotationType,
    ConversationContext,
    InterpretationResult,
    WaitingReplyContextData,
    parse_context_data,
)
from fax_context.schemas import ContextRecoveryResult, RecoveryMethod

from conftest import NOW


def _record(**overrides):
    record = {
        "id": "ctx-1",
        "user_id": "user-1",
        "reference_id": "FX-2024-000123",
        "context_data": {"status": "waiting_reply", "topic": "Email to Tanaka"},
        "created_at": NOW - timedelta(hours=2),
        "updated_at": NOW - timedelta(hours=1),
        "expires_at": NOW + timedelta(days=7),
    }
    record.update(overrides)
    return record


class TestContextData:
    """Tests for the status-tagged context payload."""

    def test_status_selects_variant(self):
        """Test that the status field picks the payload type."""
        assert isinstance(parse_context_data({"status": "active"}), ActiveContextData)
        assert isinstance(parse_context_data({"status": "waiting_reply"}), WaitingReplyContextData)

    def test_extra_fields_preserved(self):
        """Test that domain specific keys survive validation."""
        data = parse_context_data({"status": "active", "product": "matcha"})
        assert data.model_dump()["product"] == "matcha"

    @pytest.mark.parametrize(
        "raw",
        [{"status": "bogus"}, {"topic": "no status"}, {"status": "active", "expected_selections": "A"}, "junk"],
    )
    def test_malformed_payload_becomes_none(self, raw):
        """Test that corrupt payloads carry no signal instead of raising."""
        assert parse_context_data(raw) is None

    def test_none_payload(self):
        assert parse_context_data(None) is None


class TestConversationContext:
    """Tests for ConversationContext."""

    def test_from_record(self):
        """Test that a well-formed record is fully typed."""
        context = ConversationContext.from_record(_record())

        assert context.status == "waiting_reply"
        assert context.topic == "Email to Tanaka"
        assert context.expected_selections == []

    def test_corrupt_payload_keeps_envelope(self):
        """Test that a corrupt payload does not reject the whole record."""
        context = ConversationContext.from_record(_record(context_data={"status": 42}))

        assert context.id == "ctx-1"
        assert context.context_data is None
        assert context.status is None
        assert context.topic is None

    def test_missing_envelope_field_raises(self):
        """Test that records without an owner are rejected."""
        record = _record()
        del record["user_id"]

        with pytest.raises(ContextValidationError):
            ConversationContext.from_record(record)

    def test_naive_timestamps_read_as_utc(self):
        """Test that offset-less timestamps compare against an aware clock."""
        naive_now = NOW.replace(tzinfo=None)
        context = ConversationContext.from_record(_record(
            created_at=naive_now - timedelta(hours=2),
            updated_at=naive_now - timedelta(hours=1),
            expires_at=naive_now + timedelta(days=7),
        ))

        assert context.updated_at == NOW - timedelta(hours=1)
        assert context.updated_at.tzinfo is not None
        assert context.is_live(NOW)

    def test_liveness(self):
        """Test the live definition: unexpired and active or waiting."""
        live = ConversationContext.from_record(_record())
        closed = ConversationContext.from_record(_record(context_data={"status": "closed"}))
        expired = ConversationContext.from_record(_record(expires_at=NOW - timedelta(seconds=1)))
        expiring_now = ConversationContext.from_record(_record(expires_at=NOW))
        corrupt = ConversationContext.from_record(_record(context_data=None))

        assert live.is_live(NOW)
        assert not closed.is_live(NOW)
        assert not expired.is_live(NOW)
        assert not expiring_now.is_live(NOW)
        assert not corrupt.is_live(NOW)


class TestInterpretationResult:
    """Tests for InterpretationResult."""

    def test_defaults(self):
        interpretation = InterpretationResult()

        assert interpretation.extracted_text == ""
        assert interpretation.reference_id is None
        assert interpretation.visual_annotations == []

    def test_annotations_parsed(self):
        interpretation = InterpretationResult(
            visual_annotations=[{"type": "circle", "confidence": 0.9, "associated_text": "A"}]
        )
        assert interpretation.visual_annotations[0].type == AnnotationType.CIRCLE

    def test_rejects_out_of_range_confidence(self):
        with pytest.raises(ValidationError):
            InterpretationResult(confidence=1.5)

    def test_rejects_unknown_annotation_type(self):
        with pytest.raises(ValidationError):
            InterpretationResult(visual_annotations=[{"type": "scribble", "confidence": 0.5}])


class TestContextRecoveryResult:
    """Tests for ContextRecoveryResult."""

    @pytest.mark.parametrize("confidence", [-0.1, 1.01])
    def test_confidence_bounds(self, confidence):
        with pytest.raises(ValueError):
            ContextRecoveryResult(method=RecoveryMethod.NONE, confidence=confidence)

    def test_to_dict_omits_unset_fields(self):
        assert ContextRecoveryResult.no_match().to_dict() == {"method": "none", "confidence": 0.0}

    def test_to_dict_with_ambiguous_matches(self):
        result = ContextRecoveryResult(
            method=RecoveryMethod.NONE, confidence=0.3, ambiguous_matches=["a", "b"]
        )
        assert result.to_dict() == {"method": "none", "confidence": 0.3, "ambiguous_matches": ["a", "b"]}
        assert result.is_ambiguous

    def test_is_confident_is_strict(self):
        result = ContextRecoveryResult(method=RecoveryMethod.TEMPORAL_PROXIMITY, confidence=0.6)
        assert not result.is_confident(0.6)
        assert result.is_confident(0.59)
