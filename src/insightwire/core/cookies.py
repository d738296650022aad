# src/insightwire/core/cookies.py
"""Cookie lookup for the user and session tag cookies."""


def get_cookie(name: str, cookie: str | None) -> str:
    """Return the value of cookie ``name`` from a ``Cookie`` header.

    Returns an empty string when the name is empty, the header is not a
    string, or no cookie of that name is present. The first match wins.

    Example:
        >>> get_cookie("ai_user", "theme=dark; ai_user=abc|2026-01-01")
        'abc|2026-01-01'
    """
    if not name or not isinstance(cookie, str):
        return ""
    prefix = f"{name}="
    for part in cookie.split(";"):
        part = part.strip()
        if part.startswith(prefix):
            return part[len(prefix) :]
    return ""
