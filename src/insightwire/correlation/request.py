# src/insightwire/correlation/request.py
"""Outbound request construction (proxy-aware, TLS-hardened).

``build_outbound_request()`` turns a target URL into an ``OutboundRequest``
describing the physical connection: which host and port to dial, what
request target to send, which headers to add and which connection pool to
use. Construction is pure computation; nothing is sent until the caller
dispatches the request.

Proxying:
    Plain HTTP forward proxies only. The request is re-pointed at the proxy
    with the absolute target URL as the request target and a ``Host`` header
    naming the original host. A proxy that itself requires HTTPS is not
    supported; the call falls back to a direct connection (logged).

Pools:
    A pool configured for the scheme always wins. Otherwise direct HTTPS
    calls use the shared TLS-restricted pool (TLS 1.2 minimum) passed in by
    the caller, and plain HTTP uses no override.
"""

from __future__ import annotations

import ssl
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import SplitResult, urlsplit

import httpx
import structlog

from insightwire.contracts.errors import InvalidRequestUrlError

if TYPE_CHECKING:
    from insightwire.core.config import TelemetryConfig

logger = structlog.get_logger(__name__)

ALLOWED_SCHEMES = {"http", "https"}
_DEFAULT_PORTS = {"http": 80, "https": 443}


def create_tls_context() -> ssl.SSLContext:
    """Certificate-verifying context that refuses anything below TLS 1.2."""
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    return context


def create_tls_restricted_pool() -> httpx.HTTPTransport:
    """Build the connection pool shared by direct HTTPS calls.

    Create it once at startup and pass it to every
    ``build_outbound_request()`` call. The pool is never reconfigured after
    creation and httpx transports are safe to share between threads.
    """
    return httpx.HTTPTransport(verify=create_tls_context())


def normalize_target_url(target_url: str) -> str:
    """Resolve protocol-relative URLs (``//host/path``) to HTTPS."""
    if target_url.startswith("//"):
        return f"https:{target_url}"
    return target_url


def _netloc(host: str, port: int) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _parse_target(target_url: str) -> tuple[SplitResult, int | None]:
    try:
        parsed = urlsplit(target_url)
        port = parsed.port
    except ValueError as e:
        raise InvalidRequestUrlError(f"Malformed URL {target_url!r}: {e}") from e

    if parsed.scheme.lower() not in ALLOWED_SCHEMES:
        raise InvalidRequestUrlError(f"Forbidden scheme {parsed.scheme!r} in {target_url!r}")
    if not parsed.hostname:
        raise InvalidRequestUrlError(f"URL has no host: {target_url!r}")
    return parsed, port


def _select_proxy(config: TelemetryConfig, scheme: str) -> tuple[str, int] | None:
    """Return the proxy (host, port) for a scheme, or None to connect directly."""
    proxy_url = config.proxy_https_url if scheme == "https" else config.proxy_http_url
    if not proxy_url:
        return None

    if proxy_url.startswith("//"):
        proxy_url = f"http:{proxy_url}"
    try:
        proxy = urlsplit(proxy_url)
        proxy_port = proxy.port
    except ValueError as e:
        logger.info("Proxy URL is malformed; connecting directly", error=str(e))
        return None

    if proxy.scheme.lower() == "https":
        logger.info("Proxies that use HTTPS are not supported; connecting directly", proxy_host=proxy.hostname)
        return None
    if not proxy.hostname:
        logger.info("Proxy URL has no host; connecting directly", proxy_url=proxy_url)
        return None
    return proxy.hostname, proxy_port or 80


@dataclass(slots=True)
class OutboundRequest:
    """A fully resolved outbound HTTP request, ready to dispatch.

    Attributes:
        method: HTTP method
        url: The original target URL (protocol-relative form resolved)
        scheme: Scheme of the physical connection (``http`` when proxied)
        host: Host to connect to (the proxy when proxied)
        port: Port to connect to
        path: Request target. Path and query for direct calls, the absolute
            target URL when proxied.
        headers: Mutable request headers
        content: Request body
        proxied: True if the request goes through a forward proxy
        pool: Connection pool to send through, or None for a fresh default
    """

    method: str
    url: str
    scheme: str
    host: str
    port: int
    path: str
    headers: httpx.Headers
    content: bytes | None = None
    proxied: bool = False
    pool: httpx.BaseTransport | None = None

    @property
    def secure(self) -> bool:
        return self.scheme == "https"

    def to_httpx(self, *, timeout: float = 30.0) -> httpx.Request:
        """Build the httpx request for this connection.

        Proxied requests dial the proxy and carry the absolute target URL
        as the HTTP request target.
        """
        extensions: dict[str, object] = {"timeout": httpx.Timeout(timeout).as_dict()}
        if self.proxied:
            url = f"{self.scheme}://{_netloc(self.host, self.port)}/"
            extensions["target"] = str(httpx.URL(self.path)).encode("ascii")
        else:
            url = self.url
        return httpx.Request(
            self.method,
            url,
            headers=self.headers,
            content=self.content,
            extensions=extensions,
        )

    def dispatch(self, *, timeout: float = 30.0) -> httpx.Response:
        """Send the request through the selected pool and read the response."""
        request = self.to_httpx(timeout=timeout)
        if self.pool is not None:
            return _send(self.pool, request)
        with httpx.HTTPTransport() as transport:
            return _send(transport, request)


def _send(transport: httpx.BaseTransport, request: httpx.Request) -> httpx.Response:
    response = transport.handle_request(request)
    response.request = request
    try:
        response.read()
    finally:
        response.close()
    return response


def build_outbound_request(
    config: TelemetryConfig,
    target_url: str,
    *,
    method: str = "GET",
    headers: Mapping[str, str] | None = None,
    content: bytes | None = None,
    tls_pool: httpx.BaseTransport | None = None,
) -> OutboundRequest:
    """Resolve the physical request for a call to ``target_url``.

    Args:
        config: Supplies proxy URLs and optional per-scheme pools
        target_url: Destination. ``//host/path`` is treated as HTTPS.
        method: HTTP method
        headers: Base headers, copied into the request
        content: Request body
        tls_pool: Shared TLS-restricted pool for direct HTTPS calls (see
            ``create_tls_restricted_pool()``)

    Returns:
        OutboundRequest describing host, port, path, headers and pool

    Raises:
        InvalidRequestUrlError: If the target is not an http(s) URL with a host
    """
    url = normalize_target_url(target_url)
    target, target_port = _parse_target(url)
    scheme = target.scheme.lower()
    hostname = target.hostname
    assert hostname is not None  # guaranteed by _parse_target

    request_headers = httpx.Headers(headers)
    host = hostname
    port = target_port or _DEFAULT_PORTS[scheme]
    path = target.path or "/"
    if target.query:
        path = f"{path}?{target.query}"

    proxy = _select_proxy(config, scheme)
    if proxy is not None:
        host, port = proxy
        path = url
        request_headers["Host"] = hostname

    is_https = scheme == "https" and proxy is None

    pool: httpx.BaseTransport | None
    if is_https and config.https_pool is not None:
        pool = config.https_pool
    elif not is_https and config.http_pool is not None:
        pool = config.http_pool
    elif is_https:
        pool = tls_pool
    else:
        pool = None

    return OutboundRequest(
        method=method.upper(),
        url=url,
        scheme="https" if is_https else "http",
        host=host,
        port=port,
        path=path,
        headers=request_headers,
        content=content,
        proxied=proxy is not None,
        pool=pool,
    )
