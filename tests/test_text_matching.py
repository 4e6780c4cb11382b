"""
Tests for keyword extraction and Jaccard similarity.
"""
import pytest

from fax_context.resolution import extract_keywords, jaccard_similarity


class TestExtractKeywords:
    """Tests for extract_keywords."""

    def test_drops_stop_words_and_short_tokens(self):
        """Test that stop words and tokens of two characters or fewer are removed."""
        assert extract_keywords("Please order the Green Tea!") == ["please", "order", "green", "tea"]

    def test_strips_punctuation_per_token(self):
        """Test that non-word characters are stripped from each token."""
        assert extract_keywords("hello, world!!") == ["hello", "world"]

    def test_empty_input(self):
        """Test that empty text yields no keywords."""
        assert extract_keywords("") == []
        assert extract_keywords("   ") == []

    def test_only_noise(self):
        """Test that text made only of short and stop words yields nothing."""
        assert extract_keywords("I am ok, it would have been") == []

    def test_keeps_first_twenty_in_order(self):
        """Test that truncation keeps the first survivors, not the most frequent."""
        text = " ".join(f"word{i}" for i in range(30))

        keywords = extract_keywords(text)

        assert keywords == [f"word{i}" for i in range(20)]

    def test_custom_limit(self):
        """Test that the limit is configurable."""
        assert extract_keywords("alpha beta gamma delta", max_keywords=2) == ["alpha", "beta"]

    def test_keeps_duplicates(self):
        """Test that repeated words are kept; set semantics belong to the scorer."""
        assert extract_keywords("tea tea green") == ["tea", "tea", "green"]

    def test_unicode_words(self):
        """Test that accented letters count as word characters."""
        assert extract_keywords("Café crème") == ["café", "crème"]


class TestJaccardSimilarity:
    """Tests for jaccard_similarity."""

    def test_identical_lists_score_one(self):
        """Test that a nonempty token list is fully similar to itself."""
        tokens = ["apple", "banana", "cherry"]
        assert jaccard_similarity(tokens, tokens) == 1.0

    def test_disjoint_lists_score_zero(self):
        """Test that disjoint token lists have no similarity."""
        assert jaccard_similarity(["apple", "banana"], ["car", "train"]) == 0.0

    def test_partial_overlap(self):
        """Test intersection over union on a partial overlap."""
        assert jaccard_similarity(["aaa", "bbb"], ["bbb", "ccc"]) == pytest.approx(1 / 3)

    @pytest.mark.parametrize(
        "first, second",
        [
            (["aaa", "bbb"], ["bbb", "ccc", "ddd"]),
            (["tea"], ["tea", "green"]),
            (["one", "two", "three"], ["four"]),
        ],
    )
    def test_symmetric(self, first, second):
        """Test that argument order does not matter."""
        assert jaccard_similarity(first, second) == jaccard_similarity(second, first)

    def test_empty_side_scores_zero(self):
        """Test that an empty side never divides by zero."""
        assert jaccard_similarity([], ["tea"]) == 0.0
        assert jaccard_similarity(["tea"], []) == 0.0
        assert jaccard_similarity([], []) == 0.0

    def test_ignores_order_and_duplicates(self):
        """Test that only token content matters."""
        assert jaccard_similarity(["tea", "tea", "green"], ["green", "tea"]) == 1.0
