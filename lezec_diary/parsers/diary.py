"""
Diary listing parser.

Turns the rows of the lezec.cz ascent diary (deník) into Climb records.
Column layout of a diary row:

    0 date | 1 route (link) | 2 area | 3 grade | 4 points | 5 style
    6 attempts (optional) | 7 visibility (optional)
"""

import re
from typing import Optional, Sequence

import httpx
from bs4 import BeautifulSoup, Tag

from lezec_diary.core.exceptions import FetchError
from lezec_diary.core.http_client import Session
from lezec_diary.core.models import Climb
from lezec_diary.core.normalizer import (
    clean_text,
    is_diary_date,
    parse_attempts,
    parse_grade,
    parse_title,
)

from .base import ParserStrategy


# crok=9997 asks for every year, ckat=1 for rock climbing; the page has no paging
DIARY_PATH = "/denik.php?crok=9997&par=1&ckat=1"

ROUTE_KEY_PATTERN = re.compile(r"key=(\d+)")

# Visibility column shows this for ascents visible to others
PUBLIC_MARKER = "x"

MIN_CELLS = 6


def extract_route_key(href: Optional[str]) -> str:
    """Pull the numeric route key out of a cesta.php link."""
    if not href:
        return ""
    match = ROUTE_KEY_PATTERN.search(href)
    return match.group(1) if match else ""


def parse_row(cells: Sequence[Tag]) -> Optional[Climb]:
    """
    Parse the cells of one diary table row.

    Rows with fewer than six cells or without a DD.MM.YYYY date in the
    first cell are not ascents (headers, totals, layout rows) and give
    None.

    Args:
        cells: The row's <td> elements in document order

    Returns:
        Climb or None
    """
    if len(cells) < MIN_CELLS:
        return None

    date = clean_text(cells[0].get_text())
    if not is_diary_date(date):
        return None

    route_cell = cells[1]
    link = route_cell.find("a")
    href = link.get("href") if link else None
    title = link.get("title") if link else None

    origin_grade, suggested_grade = parse_grade(clean_text(cells[3].get_text()))
    partners, note = parse_title(title)

    attempts = None
    if len(cells) > 6:
        attempts = parse_attempts(cells[6].get_text())

    public = False
    if len(cells) > 7:
        public = clean_text(cells[7].get_text()).lower() == PUBLIC_MARKER

    return Climb(
        date=date,
        route=clean_text(route_cell.get_text()),
        area=clean_text(cells[2].get_text()),
        origin_grade=origin_grade,
        suggested_grade=suggested_grade,
        points=clean_text(cells[4].get_text()),
        style=clean_text(cells[5].get_text()),
        route_key=extract_route_key(href),
        partners=partners,
        note=note,
        attempts=attempts,
        public=public,
    )


class DiaryParser(ParserStrategy):
    """
    Parser for the diary listing page.

    Fetches the whole diary in one authenticated request and keeps
    every row that parses as an ascent, in page order.
    """

    async def fetch_diary(self, session: Session) -> list[Climb]:
        """
        Fetch and parse the logged-in user's diary.

        Args:
            session: Session from HttpClient.authenticate

        Returns:
            List of climbs in listing order

        Raises:
            FetchError: If the page cannot be fetched
        """
        self.logger.info("fetching_diary", path=DIARY_PATH)

        try:
            html = await self.fetch_html(DIARY_PATH, session=session)
        except httpx.HTTPError as e:
            raise FetchError(
                f"Diary fetch failed: {e}",
                context={"path": DIARY_PATH},
            ) from e

        climbs = self.parse(html)

        self.logger.info("diary_fetched", climbs=len(climbs))
        return climbs

    def parse(self, html: str) -> list[Climb]:
        """
        Parse diary markup into climbs.

        Args:
            html: Decoded diary page

        Returns:
            List of climbs in document order
        """
        soup = BeautifulSoup(html, "lxml")

        climbs = []
        skipped = 0
        for row in soup.select("table tr"):
            climb = parse_row(row.find_all("td"))
            if climb:
                climbs.append(climb)
            else:
                skipped += 1

        self.logger.debug("diary_rows_parsed", climbs=len(climbs), skipped=skipped)
        return climbs
