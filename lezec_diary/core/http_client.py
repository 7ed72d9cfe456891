"""
Async HTTP client for lezec.cz.

Built on httpx with:
- Form login returning an explicit Session value
- Cookie header attached per request from that Session, redirects included
- Raw byte bodies (pages are decoded by the caller)
"""

from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from .exceptions import AuthenticationError

logger = structlog.get_logger(__name__)


BASE_URL = "https://lezec.cz"
LOGIN_PATH = "/login.php"

MAX_REDIRECTS = 20

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/139.0.0.0 Safari/537.36"
)


@dataclass(frozen=True)
class Session:
    """Authenticated session: the cookie header sent with every request."""
    token: str

    def headers(self) -> dict[str, str]:
        return {"Cookie": self.token}


def session_cookies(response: httpx.Response) -> list[str]:
    """
    Collect "name=value" pairs from every Set-Cookie header.

    Redirect responses are included, since the login page usually sets
    the cookie on a 302.
    """
    cookies = []
    for resp in [*response.history, response]:
        for header in resp.headers.get_list("set-cookie"):
            pair = header.split(";", 1)[0].strip()
            if pair:
                cookies.append(pair)
    return cookies


class HttpClient:
    """
    Async HTTP client for lezec.cz pages.

    Usage:
        async with HttpClient() as client:
            session = await client.authenticate("user", "secret")
            html = decode_page(await client.request("GET", "/denik.php", session=session))
    """

    def __init__(
        self,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Site root all request paths are relative to
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport

        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context."""
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            transport=self.transport,
            headers={
                "User-Agent": USER_AGENT,
                "Accept-Language": "cs,en;q=0.9",
            },
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("Client not initialized. Use 'async with' context.")
        return self._client

    async def authenticate(self, username: str, password: str) -> Session:
        """
        Log in with the site's login form.

        The site answers 200 for bad credentials too, so success is
        decided only by the presence of session cookies.

        Args:
            username: lezec.cz user name
            password: lezec.cz password

        Returns:
            Session carrying the cookie token

        Raises:
            AuthenticationError: If no cookies were returned
            httpx.HTTPError: On transport failure
        """
        client = self._require_client()

        logger.debug("http_login", url=LOGIN_PATH, username=username)

        response = await client.post(
            LOGIN_PATH,
            data={
                "login": "2",
                "uid": username,
                "hes": password,
                "x": "10",
                "y": "10",
            },
        )

        # Keep the session explicit; nothing rides along in the cookie jar
        client.cookies.clear()

        cookies = session_cookies(response)
        if not cookies:
            raise AuthenticationError(
                "Login failed - no session cookies received",
                context={"username": username, "status_code": response.status_code},
            )

        logger.info("logged_in", username=username, cookies=len(cookies))
        return Session(token="; ".join(cookies))

    async def request(
        self,
        method: str,
        path: str,
        session: Optional[Session] = None,
        data: Optional[dict] = None,
        params: Optional[dict] = None,
    ) -> bytes:
        """
        Issue a request and return the raw body.

        Redirects are followed here rather than by httpx, which would
        rebuild the Cookie header from the (empty) cookie jar and drop
        the session on the next hop.

        Args:
            method: HTTP method
            path: Path relative to base_url (query string allowed)
            session: Session to authenticate with, if any
            data: Optional form body
            params: Optional query parameters

        Returns:
            Response body bytes

        Raises:
            httpx.HTTPStatusError: On non-2xx status
            httpx.HTTPError: On transport failure
        """
        client = self._require_client()

        headers = session.headers() if session else {}

        logger.debug("http_request", method=method, path=path, authenticated=session is not None)

        response = await client.request(
            method, path, data=data, params=params, headers=headers, follow_redirects=False
        )

        redirects = 0
        while response.is_redirect:
            redirects += 1
            if redirects > MAX_REDIRECTS:
                raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=response.request)

            url = response.url.join(response.headers["location"])
            if response.status_code not in (307, 308):
                method, data = "GET", None

            logger.debug("http_redirect", status=response.status_code, url=str(url))
            response = await client.request(method, url, data=data, headers=headers, follow_redirects=False)

        response.raise_for_status()

        return response.content

    async def get_bytes(self, path: str, **kwargs) -> bytes:
        """GET request returning bytes content."""
        return await self.request("GET", path, **kwargs)
