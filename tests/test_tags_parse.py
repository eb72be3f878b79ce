"""
Tag parsing tests

Tests that raw Tags/Filter header strings split into tag lists without
trimming, and that anything other than a non-empty string parses to [].
"""

import pytest

from pagetags.lib.tags import tags_parse


class TestEmptyInput:
    """Test absent and empty header values"""

    def test_none(self):
        """Missing header parses to empty list"""
        assert tags_parse(None) == []

    def test_empty_string(self):
        """Empty header parses to empty list"""
        assert tags_parse("") == []

    @pytest.mark.parametrize("value", [42, 3.5, True, ["a", "b"], {"a": 1}])
    def test_non_string(self, value):
        """Non-string meta values are treated as no tags"""
        assert tags_parse(value) == []


class TestSplitting:
    """Test comma splitting"""

    def test_single_tag(self):
        """Single tag without separator"""
        assert tags_parse("a") == ["a"]

    def test_multiple_tags(self):
        """Comma-separated tags in order of appearance"""
        assert tags_parse("a,b,c") == ["a", "b", "c"]

    def test_whitespace_preserved(self):
        """Whitespace around tags is kept as written"""
        assert tags_parse("a, b ,c") == ["a", " b ", "c"]

    def test_whitespace_only(self):
        """Whitespace-only header is a single whitespace tag"""
        assert tags_parse("  ") == ["  "]

    def test_duplicates_kept(self):
        """Repeated tags are not deduplicated"""
        assert tags_parse("news,news") == ["news", "news"]

    def test_empty_segments_kept(self):
        """Trailing and doubled commas produce empty tags"""
        assert tags_parse("a,,b,") == ["a", "", "b", ""]

    def test_case_preserved(self):
        """Tags keep their case"""
        assert tags_parse("News,NEWS") == ["News", "NEWS"]

    def test_unicode_tags(self):
        """Non-ASCII tags split like any other text"""
        assert tags_parse("café,日本") == ["café", "日本"]


class TestSeparator:
    """Test custom separators"""

    def test_explicit_separator(self):
        """Separator argument overrides the configured one"""
        assert tags_parse("a;b,c", separator=";") == ["a", "b,c"]

    def test_configured_separator(self, monkeypatch):
        """Configured separator is used by default"""
        from pagetags.config import appsettings

        monkeypatch.setattr(appsettings, "tag_separator", "|")
        assert tags_parse("a|b,c") == ["a", "b,c"]
