"""
fetcher.py — Retrieves the page under analysis.

One GET per analysis, no retries. Every transport failure collapses into
FetchFailed; callers never see the underlying reason.
"""

import logging
from urllib.parse import urlparse

import requests

import config as cfg

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """Base class for everything that stops a page from being fetched."""


class InvalidUrl(FetchError, ValueError):
    """The URL is malformed or does not use http/https."""


class FetchFailed(FetchError):
    """The page could not be retrieved (timeout, DNS, non-2xx, ...)."""


def new_session(max_redirects: int = cfg.PAGE_MAX_REDIRECTS) -> requests.Session:
    """Session with the WebCheck headers and the given redirect cap."""
    session = requests.Session()
    session.headers.update(cfg.REQUEST_HEADERS)
    session.max_redirects = max_redirects
    return session


def decode_body(resp: requests.Response) -> str:
    """
    Decode the response body as text.

    An explicit charset in Content-Type wins; otherwise the bytes are UTF-8.
    requests would fall back to ISO-8859-1 for text/* here.
    """
    content_type = resp.headers.get("content-type", "")
    encoding = resp.encoding if "charset=" in content_type.lower() else None
    try:
        return resp.content.decode(encoding or "utf-8", errors="replace")
    except LookupError:
        return resp.content.decode("utf-8", errors="replace")


def validate_url(url) -> str:
    """Return the stripped URL, or raise InvalidUrl. Never touches the network."""
    if not isinstance(url, str):
        raise InvalidUrl(f"not a string: {url!r}")
    url = url.strip()
    try:
        parsed = urlparse(url)
        host = parsed.hostname
    except ValueError as e:
        raise InvalidUrl(url) from e
    if parsed.scheme not in ("http", "https") or not host:
        raise InvalidUrl(url)
    return url


def fetch(url: str, session: requests.Session | None = None) -> tuple[str, str]:
    """
    GET the page and return (final_url, html).

    Raises:
        InvalidUrl:  before any network call, if the URL is unusable.
        FetchFailed: on any transport error or non-2xx response.
    """
    url = validate_url(url)
    session = session or new_session()
    try:
        resp = session.get(url, timeout=cfg.REQUEST_TIMEOUT, allow_redirects=True)
        resp.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.warning("Fetch failed for %s: %s", url, e)
        raise FetchFailed(url) from e

    logger.info("Fetched %s (%d, %d bytes)", resp.url or url, resp.status_code,
                len(resp.content or b""))
    return resp.url or url, decode_body(resp)
