import asyncio

import aiohttp

from propinfo.fetcher import FetchResult, fetch_text


class FakeResponse:
    def __init__(self, status, body):
        self.status = status
        self.body = body

    async def text(self, errors="strict"):
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, resp=None, exc=None):
        self.resp = resp
        self.exc = exc
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.exc:
            raise self.exc
        return self.resp


def test_ok_response():
    session = FakeSession(FakeResponse(200, "<html>ok</html>"))
    result = asyncio.run(fetch_text(session, "https://www.zillow.com/laveen-az/"))
    assert result == FetchResult(True, 200, "<html>ok</html>")

    url, kwargs = session.calls[0]
    assert url == "https://www.zillow.com/laveen-az/"
    assert kwargs["allow_redirects"] is False
    assert "Mobile Safari" in kwargs["headers"]["User-Agent"]
    assert kwargs["headers"]["Referer"] == "https://www.google.com/"
    assert kwargs["headers"]["Cache-Control"] == "no-cache"


def test_error_status_keeps_body():
    session = FakeSession(FakeResponse(404, "not here"))
    assert asyncio.run(fetch_text(session, "https://x")) == FetchResult(False, 404, "not here")


def test_redirect_not_ok():
    session = FakeSession(FakeResponse(301, ""))
    result = asyncio.run(fetch_text(session, "https://x"))
    assert not result.ok
    assert result.status == 301


def test_transport_errors_become_status_zero():
    for exc in (
        aiohttp.ClientConnectionError("connection reset"),
        asyncio.TimeoutError(),
        OSError("dns"),
    ):
        session = FakeSession(exc=exc)
        assert asyncio.run(fetch_text(session, "https://x")) == FetchResult(False, 0, None)
