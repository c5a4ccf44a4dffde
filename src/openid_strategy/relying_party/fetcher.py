"""``httpx``-backed HTTP fetcher for the OpenID library.

``python3-openid`` performs discovery (Yadis/XRDS and HTML link parsing) and
direct verification through a process-wide fetcher object. This module
provides :class:`HttpxFetcher`, an :class:`openid.fetchers.HTTPFetcher`
implementation on top of ``httpx`` so timeouts and TLS verification follow
the strategy configuration, and :func:`install_fetcher` to make it the
library default.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import urlsplit

import httpx
from openid import fetchers

logger = logging.getLogger(__name__)

USER_AGENT = "openid-strategy (python3-openid; httpx)"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
MAX_RESPONSE_BYTES = fetchers.MAX_RESPONSE_KB * 1024


class HttpxFetcher(fetchers.HTTPFetcher):
    """Fetch URLs for the OpenID library with ``httpx``.

    Args:
        timeout: Request timeout in seconds.
        verify_ssl: Whether to verify TLS certificates.
    """

    def __init__(self, timeout: float = 30.0, verify_ssl: bool = True) -> None:
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    def fetch(
        self,
        url: str,
        body: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> fetchers.HTTPResponse:
        """Perform a GET (no *body*) or POST (with *body*) and wrap the result.

        POST bodies are form-encoded by the library, which sends no headers of
        its own, so ``Content-Type`` defaults to
        ``application/x-www-form-urlencoded``. At most
        ``fetchers.MAX_RESPONSE_KB`` KiB of the response body are read.

        Raises:
            ValueError: If *url* is not an http(s) URL.
            openid.fetchers.HTTPFetchingError: On any transport failure.
        """
        if urlsplit(url).scheme not in ("http", "https"):
            raise ValueError(f"Bad URL scheme: {url!r}")

        request_headers = {"User-Agent": USER_AGENT}
        request_headers.update(headers or {})
        if body is not None:
            request_headers.setdefault("Content-Type", FORM_CONTENT_TYPE)
            method = "POST"
        else:
            method = "GET"

        logger.debug("%s %s", method, url)
        try:
            with httpx.stream(
                method,
                url,
                content=body,
                headers=request_headers,
                timeout=self.timeout,
                verify=self.verify_ssl,
                follow_redirects=True,
            ) as response:
                raw = _read_capped(response, MAX_RESPONSE_BYTES)
        except httpx.HTTPError as exc:
            raise fetchers.HTTPFetchingError(f"Error fetching {url}: {exc}") from exc

        return fetchers.HTTPResponse(
            final_url=str(response.url),
            status=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            body=_decode(raw, response.charset_encoding),
        )


def _read_capped(response: httpx.Response, limit: int) -> bytes:
    chunks: list[bytes] = []
    size = 0
    for chunk in response.iter_bytes():
        chunks.append(chunk)
        size += len(chunk)
        if size >= limit:
            break
    return b"".join(chunks)[:limit]


def _decode(raw: bytes, charset: Optional[str]) -> str:
    try:
        return raw.decode(charset or "latin-1")
    except (LookupError, UnicodeDecodeError):
        return raw.decode("latin-1")


def install_fetcher(timeout: float = 30.0, verify_ssl: bool = True) -> HttpxFetcher:
    """Install an :class:`HttpxFetcher` as the OpenID library's default fetcher.

    Exceptions from the fetcher are wrapped into
    :class:`openid.fetchers.HTTPFetchingError` by the library.

    Returns:
        The installed fetcher.
    """
    fetcher = HttpxFetcher(timeout=timeout, verify_ssl=verify_ssl)
    fetchers.setDefaultFetcher(fetcher, wrap_exceptions=True)
    return fetcher
