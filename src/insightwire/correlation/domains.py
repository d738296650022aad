# src/insightwire/correlation/domains.py
"""Excluded-domain matching for correlation headers.

Services can opt hosts out of receiving the ``request-context`` header
(third-party APIs, storage endpoints that reject unknown headers). Patterns
are glob-like: ``*`` matches any substring and every other character
matches itself.

The dot is the exception. Deployed patterns were historically evaluated
with ``.`` left as a single-character wildcard, so ``api.example.com`` also
matches ``apiXexampleYcom``. That stays the default for compatibility;
``TelemetryConfig.excluded_domain_literal_dots`` switches to literal dots.

Matching is an unanchored search over the hostname, so ``*.excluded.com``
also matches ``api.excluded.com.other.org``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

if TYPE_CHECKING:
    from insightwire.core.config import TelemetryConfig


@lru_cache(maxsize=256)
def compile_domain_pattern(pattern: str, *, literal_dots: bool = False) -> re.Pattern[str]:
    """Compile a glob-like host pattern into a regex.

    Example:
        >>> bool(compile_domain_pattern("*.excluded.com").search("api.excluded.com"))
        True
    """
    parts: list[str] = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "." and not literal_dots:
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts))


def target_hostname(target_url: str) -> str | None:
    """Return the hostname of ``target_url``, or None if it has none."""
    try:
        return urlsplit(target_url).hostname
    except ValueError:
        return None


def is_domain_excluded(config: TelemetryConfig | None, target_url: str | None) -> bool:
    """Decide whether correlation headers must be withheld from a target.

    Returns False (headers allowed) when there are no exclusion patterns or
    the URL is empty. With patterns configured, a URL without a resolvable
    hostname is treated as excluded so correlation data never leaks to a
    host we cannot identify.
    """
    excluded_domains = config.correlation_header_excluded_domains if config is not None else ()
    if not excluded_domains or not target_url:
        return False

    hostname = target_hostname(target_url)
    if not hostname:
        return True

    literal_dots = config.excluded_domain_literal_dots  # type: ignore[union-attr]
    return any(
        compile_domain_pattern(pattern, literal_dots=literal_dots).search(hostname) for pattern in excluded_domains
    )


def can_include_correlation_header(config: TelemetryConfig | None, target_url: str | None) -> bool:
    return not is_domain_excluded(config, target_url)
