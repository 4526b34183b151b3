"""Tests for token-based variesBy matching."""

import pytest

from ldgraph.tokens import TokenMatcher, is_varying, normalize_tokens


class TestNormalizeTokens:
    """Tests for splitting property names into word tokens."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("FrameSize", ["frame", "size"]),
            ("frameSize", ["frame", "size"]),
            ("frame_size", ["frame", "size"]),
            ("frame-size", ["frame", "size"]),
            ("colorway", ["colorway"]),
            ("https://schema.org/FrameSize", ["frame", "size"]),
            ("HTMLParser", ["html", "parser"]),
            ("sizeXL", ["size", "xl"]),
            ("size2", ["size", "2"]),
            ("", []),
        ],
    )
    def test_normalize(self, name: str, expected: list[str]) -> None:
        """Test case, separator, digit and IRI handling."""
        assert normalize_tokens(name) == expected


class TestIsVarying:
    """Tests for matching property names against variesBy entries."""

    def test_partial_word_does_not_match(self) -> None:
        """Test that a dimension must match whole tokens."""
        assert not is_varying("colorway", ["color"])

    def test_same_tokens_in_other_case_match(self) -> None:
        """Test that differently cased spellings match."""
        assert is_varying("frameSize", ["FrameSize"])

    def test_dimension_inside_longer_name(self) -> None:
        """Test that a dimension's tokens may appear within a longer property name."""
        assert is_varying("FrameSize", ["https://schema.org/size"])
        assert is_varying("https://schema.org/color", ["color"])

    def test_longer_dimension_does_not_match_shorter_name(self) -> None:
        """Test that every token of the dimension must be present."""
        assert not is_varying("size", ["frameSize"])

    def test_no_dimensions(self) -> None:
        """Test that nothing varies without variesBy."""
        assert not is_varying("color", [])

    def test_matcher_keeps_dimensions(self) -> None:
        """Test that a TokenMatcher can be reused across properties."""
        matcher = TokenMatcher(["https://schema.org/color", "size"])
        assert matcher.varies_by == ("https://schema.org/color", "size")
        assert [matcher.is_varying(p) for p in ("color", "size", "material", "")] == [True, True, False, False]
