"""Shared fixtures: sample lezec.cz pages and a fake site behind httpx.MockTransport."""

from collections import Counter
from typing import Optional, Union

import httpx
import pytest
from bs4 import BeautifulSoup

from lezec_diary.core.http_client import HttpClient


DIARY_HTML = """
<html>
<head><title>Deník</title></head>
<body>
<table class="denik">
  <tr><th>Datum</th><th>Cesta</th><th>Oblast</th><th>Obtížnost</th><th>Body</th><th>Styl</th></tr>
  <tr>
    <td>01.01.2024</td>
    <td><a href='cesta.php?key=42' title='Alice - nice climb'>My Route</a></td>
    <td>MyArea</td>
    <td>6a [6a+]</td>
    <td>10</td>
    <td>lead</td>
    <td>2</td>
    <td>x</td>
  </tr>
  <tr>
    <td>15.03.2024</td>
    <td><a href="cesta.php?key=7"> Žlutá hrana </a></td>
    <td>Labské údolí</td>
    <td>VIIb</td>
    <td>5</td>
    <td>TR</td>
  </tr>
  <tr><td>Celkem</td><td></td><td></td><td></td><td>15</td><td></td></tr>
  <tr>
    <td>20.04.2024</td>
    <td>Bez odkazu</td>
    <td>Tendon</td>
    <td>7a</td>
    <td>-</td>
    <td>OS</td>
    <td>?</td>
    <td>X</td>
  </tr>
</table>
</body>
</html>
"""

ROUTE_HTML = """
<html>
<body>
<table>
  <tr><td>Oblast:</td><td> Labské pískovce </td></tr>
  <tr><td>Sektor:</td><td>Žlutý kámen</td></tr>
  <tr><td>Obtížnost:</td><td>VIIb</td></tr>
</table>
</body>
</html>
"""

LOGIN_FORM_HTML = "<html><body><form action='login.php'></form></body></html>"

SESSION_COOKIE = "PHPSESSID=abc123"


class FakeLezec:
    """
    In-memory lezec.cz.

    - /login.php sets the configured cookies (none = bad credentials)
    - /denik.php returns the diary to requests carrying the session cookie
      (str pages are encoded to windows-1250, bytes are served as-is);
      with diary_redirect it first answers 302 to /denik2.php
    - /cesta.php?key=N returns the route page, failing the first
      route_failures[N] requests with 503
    """

    def __init__(
        self,
        diary_html: Union[str, bytes] = DIARY_HTML,
        route_pages: Optional[dict[str, bytes]] = None,
        route_failures: Optional[dict[str, int]] = None,
        login_cookies: tuple = (SESSION_COOKIE,),
        diary_status: int = 200,
        diary_redirect: bool = False,
    ):
        self.diary_html = diary_html
        self.route_pages = route_pages or {}
        self.route_failures = route_failures or {}
        self.login_cookies = login_cookies
        self.diary_status = diary_status
        self.diary_redirect = diary_redirect

        self.requests: list[httpx.Request] = []
        self.route_calls: Counter = Counter()

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/login.php":
            headers = [("set-cookie", f"{c}; path=/") for c in self.login_cookies]
            return httpx.Response(200, headers=headers, text=LOGIN_FORM_HTML)

        if path == "/denik.php" and self.diary_redirect:
            return httpx.Response(302, headers={"location": "/denik2.php"})

        if path in ("/denik.php", "/denik2.php"):
            if self.diary_status != 200:
                return httpx.Response(self.diary_status)
            if request.headers.get("cookie") != "; ".join(self.login_cookies):
                return httpx.Response(200, content=LOGIN_FORM_HTML.encode("cp1250"))
            return httpx.Response(200, content=self.diary_body())

        if path == "/cesta.php":
            key = request.url.params["key"]
            self.route_calls[key] += 1
            if self.route_calls[key] <= self.route_failures.get(key, 0):
                return httpx.Response(503)
            content = self.route_pages.get(key, ROUTE_HTML.encode("cp1250"))
            return httpx.Response(200, content=content)

        return httpx.Response(404)

    def diary_body(self) -> bytes:
        if isinstance(self.diary_html, bytes):
            return self.diary_html
        return self.diary_html.encode("cp1250")

    def client_factory(self):
        """Factory for fresh HttpClients talking to this fake."""
        return lambda: HttpClient(transport=httpx.MockTransport(self.handler))

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]


@pytest.fixture
def fake_site():
    """Fake lezec.cz with default pages."""
    return FakeLezec()


@pytest.fixture
def make_site():
    """Build a FakeLezec with custom behaviour."""
    return FakeLezec


@pytest.fixture
def sleeps():
    """Async sleep that records delays instead of waiting."""
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    fake_sleep.delays = delays
    return fake_sleep


@pytest.fixture
def diary_soup():
    """Parsed sample diary page."""
    return BeautifulSoup(DIARY_HTML, "lxml")


@pytest.fixture
def example_cells():
    """Cells of the documented example diary row."""
    html = (
        "<table><tr>"
        "<td>01.01.2024</td>"
        "<td><a href='cesta.php?key=42' title='Alice - nice climb'>My Route</a></td>"
        "<td>MyArea</td>"
        "<td>6a [6a+]</td>"
        "<td>10</td>"
        "<td>lead</td>"
        "<td>2</td>"
        "<td>x</td>"
        "</tr></table>"
    )
    return BeautifulSoup(html, "lxml").find_all("td")


@pytest.fixture
def diary_bytes():
    """Sample diary page as served (windows-1250)."""
    return DIARY_HTML.encode("cp1250")
