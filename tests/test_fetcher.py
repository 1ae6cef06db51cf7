import pytest

import config as cfg
from conftest import FakeSession
from fetcher import FetchFailed, InvalidUrl, fetch, new_session, validate_url


@pytest.mark.parametrize("url", [
    "https://example.com",
    "http://example.com/path?q=1",
    "  https://example.com/  ",
])
def test_validate_url_accepts_http_and_https(url):
    assert validate_url(url) == url.strip()


@pytest.mark.parametrize("url", [
    "ftp://x",
    "example.com",
    "not a url",
    "http://",
    "javascript:alert(1)",
    "https://[::1",
    123,
    None,
])
def test_validate_url_rejects(url):
    with pytest.raises(InvalidUrl):
        validate_url(url)


def test_invalid_url_makes_no_network_call():
    session = FakeSession()
    with pytest.raises(InvalidUrl):
        fetch("ftp://example.com/file", session=session)
    assert session.get_calls == []


def test_fetch_returns_final_url_and_html():
    session = FakeSession(pages={"https://example.com": (200, "<html></html>")})
    assert fetch("https://example.com", session=session) == ("https://example.com", "<html></html>")


def test_fetch_non_2xx_fails():
    session = FakeSession(pages={"https://example.com/gone": (404, "not here")})
    with pytest.raises(FetchFailed):
        fetch("https://example.com/gone", session=session)


def test_fetch_unreachable_host_fails():
    with pytest.raises(FetchFailed) as excinfo:
        fetch("https://unreachable.invalid", session=FakeSession())
    assert excinfo.value.__cause__ is not None


def test_new_session_carries_user_agent_and_redirect_cap():
    session = new_session()
    assert session.headers["User-Agent"] == "WebCheck Bot/1.0"
    assert session.max_redirects == cfg.PAGE_MAX_REDIRECTS == 21
    assert new_session(cfg.LINK_MAX_REDIRECTS).max_redirects == 5


FRENCH_TITLE = "Café crème brûlée à Paris, la meilleure pâtisserie 2024"


def test_fetch_reads_utf8_when_charset_is_missing():
    html = f"<html><head><title>{FRENCH_TITLE}</title></head></html>"
    session = FakeSession(pages={"https://example.fr/": (200, html.encode("utf-8"), "text/html")})
    _, text = fetch("https://example.fr/", session=session)
    assert text == html


def test_fetch_honours_declared_charset():
    html = f"<html><head><title>{FRENCH_TITLE}</title></head></html>"
    session = FakeSession(pages={
        "https://example.fr/": (200, html.encode("iso-8859-1"), "text/html; charset=ISO-8859-1"),
    })
    _, text = fetch("https://example.fr/", session=session)
    assert text == html


def test_fetch_unknown_charset_falls_back_to_utf8():
    session = FakeSession(pages={
        "https://example.fr/": (200, "crème".encode("utf-8"), "text/html; charset=x-made-up"),
    })
    assert fetch("https://example.fr/", session=session)[1] == "crème"
