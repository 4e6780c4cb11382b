"""
Tests for reference code parsing and generation.
"""
import random
from datetime import datetime, timezone

import pytest

from fax_context.reference_codes import (
    extract_reference_id,
    generate_reference_id,
    is_valid_reference_id,
    normalize_reference_id,
)


class TestExtractReferenceId:
    """Tests for extract_reference_id."""

    @pytest.mark.parametrize(
        "text",
        [
            "Ref: FX-2024-000123",
            "reference FX-2024-000123 please",
            "ref#FX-2024-000123",
            "Order # FX-2024-000123",
            "ticket: FX-2024-000123",
            "case FX-2024-000123",
            "see FX-2024-000123 thanks",
        ],
    )
    def test_finds_labelled_and_bare_codes(self, text):
        """Test that every supported form is recognised."""
        assert extract_reference_id(text) == "FX-2024-000123"

    def test_normalises_case(self):
        """Test that lowercase codes are returned in canonical form."""
        assert extract_reference_id("ref fx-2024-000123") == "FX-2024-000123"

    def test_reference_label_wins_over_earlier_order_label(self):
        """Test that patterns are tried in order, not by position in the text."""
        text = "order #FX-2023-000001 and ref: FX-2024-000999"
        assert extract_reference_id(text) == "FX-2024-000999"

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "no code here",
            "FX-24-000123",
            "FX-2024-0001234",
            "FX-2024-00012",
            "Ref: FX-2024-0001234",
            "order #FX-2024-0001234",
        ],
    )
    def test_rejects_missing_or_malformed(self, text):
        """Test that incomplete codes are not extracted."""
        assert extract_reference_id(text) is None


class TestReferenceIdValidation:
    """Tests for is_valid_reference_id and normalize_reference_id."""

    def test_valid_code(self):
        assert is_valid_reference_id("FX-2024-000123")
        assert is_valid_reference_id(" fx-2024-000123 ")

    def test_invalid_codes(self):
        assert not is_valid_reference_id(None)
        assert not is_valid_reference_id("")
        assert not is_valid_reference_id("FX-2024-00012")
        assert not is_valid_reference_id("Ref: FX-2024-000123")

    def test_normalize(self):
        assert normalize_reference_id(" fx-2024-000123\n") == "FX-2024-000123"


class TestGenerateReferenceId:
    """Tests for generate_reference_id."""

    def test_format_and_year(self):
        """Test that generated codes are well formed and carry the year."""
        now = datetime(2025, 3, 1, tzinfo=timezone.utc)
        rng = random.Random(42)

        for _ in range(50):
            code = generate_reference_id(now=now, rng=rng)
            assert is_valid_reference_id(code)
            assert code.startswith("FX-2025-")
            assert len(code.split("-")[2]) == 6

    def test_deterministic_with_seeded_rng(self):
        """Test that a seeded random source reproduces codes."""
        now = datetime(2025, 3, 1, tzinfo=timezone.utc)
        first = generate_reference_id(now=now, rng=random.Random(7))
        second = generate_reference_id(now=now, rng=random.Random(7))
        assert first == second
