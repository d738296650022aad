# tests/unit/core/test_cookies.py
"""Tests for core.cookies.get_cookie."""

import pytest

from insightwire.core.cookies import get_cookie


@pytest.mark.parametrize(
    ("name", "cookie", "expected"),
    [
        ("ai_user", "theme=dark; ai_user=abc|2026-01-01", "abc|2026-01-01"),
        ("ai_session", "ai_session=s1;ai_user=u1", "s1"),
        ("ai_user", "ai_user=first; ai_user=second", "first"),
        ("ai_user", "xai_user=nope", ""),
        ("ai_user", "theme=dark", ""),
        ("ai_user", "", ""),
        ("ai_user", None, ""),
        ("", "ai_user=abc", ""),
        ("ai_user", "ai_user=", ""),
    ],
)
def test_get_cookie(name: str, cookie: str | None, expected: str) -> None:
    assert get_cookie(name, cookie) == expected


def test_non_string_header() -> None:
    assert get_cookie("ai_user", 42) == ""  # type: ignore[arg-type]
