"""
Route detail page parser.

Reads the sector and location (crag area) of a route from its
lezec.cz page (cesta.php). The page is public, so no session is used.
"""

from typing import Callable, Optional

from bs4 import BeautifulSoup

from lezec_diary.core.http_client import HttpClient
from lezec_diary.core.models import RouteDetail
from lezec_diary.core.normalizer import clean_text
from lezec_diary.core.retry import RETRYABLE_ERRORS, RetryPolicy

from .base import ParserStrategy


ROUTE_PATH = "/cesta.php?key={route_key}"

# Labels in the first cell of the route info table
SECTOR_LABEL = "Sektor"
LOCATION_LABEL = "Oblast"


def route_path(route_key: str) -> str:
    """Build the route detail path for a route key."""
    return ROUTE_PATH.format(route_key=route_key)


class RouteDetailParser(ParserStrategy):
    """
    Parser for route detail pages.

    Every enrich() call opens its own short-lived client, so a failing
    request never leaves state behind for the next route.
    """

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        client_factory: Callable[[], HttpClient] = HttpClient,
    ):
        """
        Initialize parser.

        Args:
            policy: Retry policy for page fetches (defaults: 3 attempts, 2 s apart)
            client_factory: Returns a fresh, unentered HttpClient
        """
        super().__init__(http_client=None)
        self.policy = policy or RetryPolicy()
        self.client_factory = client_factory

    async def _fetch_fresh(self, path: str) -> str:
        """Fetch a page through a brand-new client."""
        async with self.client_factory() as client:
            return await self.fetch_html(path, client=client)

    async def enrich(self, route_key: str) -> RouteDetail:
        """
        Look up sector and location for a route.

        Failed requests are retried according to the policy. When every
        attempt fails the result is an empty RouteDetail, not an error.

        Args:
            route_key: Numeric route key from the diary link

        Returns:
            RouteDetail (possibly empty)
        """
        path = route_path(route_key)

        try:
            html = await self.policy.call(self._fetch_fresh, path)
        except RETRYABLE_ERRORS as e:
            self.logger.warning(
                "route_detail_failed",
                route_key=route_key,
                attempts=self.policy.attempts,
                error=str(e),
            )
            return RouteDetail()

        detail = self.parse(html)

        self.logger.debug(
            "route_detail_parsed",
            route_key=route_key,
            sector=detail.sector,
            location=detail.location,
        )
        return detail

    def parse(self, html: str) -> RouteDetail:
        """
        Extract sector and location from a route page.

        Looks at every two-cell table row; the first row whose label
        starts with the marker wins.

        Args:
            html: Decoded route page

        Returns:
            RouteDetail with whatever was found
        """
        soup = BeautifulSoup(html, "lxml")

        sector = None
        location = None

        for row in soup.find_all("tr"):
            cells = row.find_all("td", recursive=False)
            if len(cells) != 2:
                continue

            label = clean_text(cells[0].get_text())
            value = clean_text(cells[1].get_text())

            if sector is None and label.startswith(SECTOR_LABEL):
                sector = value
            elif location is None and label.startswith(LOCATION_LABEL):
                location = value

        return RouteDetail(sector=sector, location=location)


async def fetch_route_detail(route_key: str, **kwargs) -> RouteDetail:
    """
    Fetch one route's detail (convenience function).

    Args:
        route_key: Numeric route key
        **kwargs: Arguments for RouteDetailParser

    Returns:
        RouteDetail (possibly empty)
    """
    return await RouteDetailParser(**kwargs).enrich(route_key)
