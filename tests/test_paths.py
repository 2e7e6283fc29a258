"""Tests for remote path normalization."""

import pytest

from cdnsync.utils.paths import normalize_remote_path


@pytest.mark.parametrize("key, expected", [
    ("a.txt", "/a.txt"),
    ("css/site.css", "/css/site.css"),
    ("docs/read me.html", "/docs/read%20me.html"),
    ("img/logo%20v2.png", "/img/logo%20v2.png"),
    ("notes#1.txt", "/notes%231.txt"),
    ("search?q=1", "/search?q=1"),
    ("café.html", "/caf%C3%A9.html"),
])
def test_normalize_remote_path(key, expected):
    assert normalize_remote_path(key) == expected


def test_leading_separator_enforced_once():
    assert normalize_remote_path("/already/rooted") == "/already/rooted"


def test_undecodable_filename_bytes_are_escaped():
    key = b"dir/bad\xff name.txt".decode("utf-8", "surrogateescape")
    assert normalize_remote_path(key) == "/dir/bad%FF%20name.txt"


def test_undecodable_bytes_next_to_utf8():
    key = b"caf\xc3\xa9\xfe.html".decode("utf-8", "surrogateescape")
    assert normalize_remote_path(key) == "/caf%C3%A9%FE.html"
