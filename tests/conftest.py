"""
Pytest configuration and fakes for site_clone tests.

No test touches the network or launches a browser: asset requests go through
``FakeSession`` and pages come from ``FakeRenderer``.
"""

from typing import Dict, List, Optional, Union

import pytest
import requests
from requests.structures import CaseInsensitiveDict

import site_clone

PAGE_URL = "https://example.com/landing"


class FakeResponse:
    def __init__(
        self,
        url: str = "",
        status_code: int = 200,
        body: bytes = b"",
        content_type: Optional[str] = None,
    ):
        self.url = url
        self.status_code = status_code
        self.body = body
        self.headers = CaseInsensitiveDict()
        if content_type:
            self.headers["Content-Type"] = content_type
        self.encoding = "utf-8"
        self.apparent_encoding = "utf-8"
        self.closed = False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(
                f"{self.status_code} Error for url: {self.url}", response=self
            )

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i : i + chunk_size]

    @property
    def text(self) -> str:
        return self.body.decode(self.encoding or "utf-8")

    def close(self) -> None:
        self.closed = True


Route = Union[FakeResponse, Exception]


class FakeSession:
    """Serves canned responses by absolute URL; anything unknown is a 404."""

    def __init__(self, routes: Optional[Dict[str, Route]] = None):
        self.routes: Dict[str, Route] = dict(routes or {})
        self.calls: List[dict] = []
        self.headers = CaseInsensitiveDict(site_clone.DEFAULT_HEADERS)
        self.closed = False

    def get(self, url, headers=None, timeout=None, stream=False):
        self.calls.append(
            {"url": url, "headers": dict(headers or {}), "timeout": timeout}
        )
        route = self.routes.get(url)
        if route is None:
            return FakeResponse(url, 404)
        if isinstance(route, Exception):
            raise route
        route.url = url
        return route

    @property
    def urls(self) -> List[str]:
        return [c["url"] for c in self.calls]

    def close(self) -> None:
        self.closed = True


class FakeRenderer(site_clone.PageRenderer):
    def __init__(self, html: str = "", error: Optional[Exception] = None):
        self.html = html
        self.error = error
        self.rendered: List[str] = []

    def render(self, url: str) -> str:
        self.rendered.append(url)
        if self.error is not None:
            raise self.error
        return self.html


def ok(body: bytes = b"payload", content_type: Optional[str] = None) -> FakeResponse:
    return FakeResponse(body=body, content_type=content_type)


@pytest.fixture
def settings():
    return site_clone.Settings()


@pytest.fixture
def layout(tmp_path):
    return site_clone.prepare_output(tmp_path / "site")
