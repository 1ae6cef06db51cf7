import threading

import pytest
import requests
from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers

import analyzer
import app as webcheck_app


class FakeResponse:
    """
    Mirrors how requests decodes bodies: the charset comes from the
    Content-Type header, and text/* without one is read as ISO-8859-1.
    """

    def __init__(self, url, status_code=200, body="", content_type="text/html"):
        self.url = url
        self.status_code = status_code
        self.content = body.encode("utf-8") if isinstance(body, str) else body
        self.headers = CaseInsensitiveDict({"Content-Type": content_type})
        self.encoding = get_encoding_from_headers(self.headers)

    @property
    def text(self):
        return self.content.decode(self.encoding or "utf-8", errors="replace")

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} for {self.url}")


class FakeSession:
    """
    Stands in for requests.Session.

    pages:    url -> (status, body[, content_type]) served by GET; unknown urls
              raise ConnectionError.
    statuses: url -> status code or exception instance for HEAD; default 200.
    """

    def __init__(self, pages=None, statuses=None):
        self.pages = pages or {}
        self.statuses = statuses or {}
        self.get_calls = []
        self.head_calls = []
        self._lock = threading.Lock()

    def get(self, url, timeout=None, allow_redirects=True):
        self.get_calls.append(url)
        if url not in self.pages:
            raise requests.exceptions.ConnectionError(f"cannot resolve {url}")
        status, body, *content_type = self.pages[url]
        return FakeResponse(url, status, body, *content_type)

    def head(self, url, timeout=None, allow_redirects=False):
        with self._lock:
            self.head_calls.append(url)
        outcome = self.statuses.get(url, 200)
        if isinstance(outcome, Exception):
            raise outcome
        return FakeResponse(url, outcome)


def make_page(head="", body="", lang="en"):
    lang_attr = f' lang="{lang}"' if lang else ""
    return f"<!DOCTYPE html><html{lang_attr}><head>{head}</head><body>{body}</body></html>"


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def use_session(monkeypatch):
    """Route every analysis through the given FakeSession."""
    def _use(session):
        monkeypatch.setattr(analyzer, "new_session", lambda *args, **kwargs: session)
        return session
    return _use


@pytest.fixture
def client():
    webcheck_app.app.config["TESTING"] = True
    with webcheck_app.app.test_client() as c:
        yield c
