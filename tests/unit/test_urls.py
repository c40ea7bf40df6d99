"""Tests for URL normalization and resource classification."""

import pytest

from talk_migration.normalizers.urls import (
    classify_resource,
    host_matches,
    is_http_url,
    normalize_url,
    same_source,
)


class TestNormalizeUrl:
    """Tests for URL canonicalization."""

    def test_scheme_and_trailing_slash_are_ignored(self):
        assert normalize_url("https://a.com/x/") == normalize_url("http://a.com/x")

    def test_whitespace_is_trimmed(self):
        assert normalize_url("  https://a.com/x  ") == "http://a.com/x"

    def test_only_one_trailing_slash_removed(self):
        assert normalize_url("http://a.com/x//") == "http://a.com/x/"

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_input_unchanged(self, value):
        assert normalize_url(value) == value

    def test_same_source(self):
        assert same_source(
            "https://speaking.jbaru.ch/PjlHKD/robocoders-judgment-day/",
            "http://speaking.jbaru.ch/PjlHKD/robocoders-judgment-day",
        )
        assert not same_source("https://a.com/x", "https://a.com/y")
        assert not same_source(None, "https://a.com/x")


class TestClassifyResource:
    """Tests for resource type classification."""

    @pytest.mark.parametrize("url,expected", [
        ("https://github.com/x/y", "code"),
        ("https://docs.google.com/presentation/d/ID/edit", "slides"),
        ("https://drive.google.com/file/d/ID/deck.pdf", "slides"),
        ("https://youtu.be/dQw4w9WgXcQ", "video"),
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "video"),
        ("https://example.com/blog/post", "link"),
        ("https://drive.google.com/file/d/ID/view", "link"),
    ])
    def test_classification(self, url: str, expected: str):
        assert classify_resource(url) == expected


class TestHostMatching:
    """Tests for host allow-list checks."""

    def test_subdomain_matches(self):
        assert host_matches("https://www.youtube.com/watch?v=x", ["youtube.com"])
        assert host_matches("https://on.notist.cloud/pdf/x.pdf", ["notist.cloud"])

    def test_lookalike_host_does_not_match(self):
        assert not host_matches("https://notyoutube.com/watch", ["youtube.com"])
        assert not host_matches("https://youtube.com.evil.io/x", ["youtube.com"])

    def test_no_host(self):
        assert not host_matches("not a url", ["youtube.com"])

    @pytest.mark.parametrize("url,expected", [
        ("https://a.com", True),
        ("http://a.com", True),
        ("ftp://a.com", False),
        ("javascript:void(0)", False),
        ("", False),
        (None, False),
    ])
    def test_is_http_url(self, url, expected: bool):
        assert is_http_url(url) is expected
