"""
Data models for the diary scraper.

Records are immutable; optional attributes are None when absent and
are left out of the JSON output.
"""

from dataclasses import dataclass, fields, replace
from typing import Optional


@dataclass(frozen=True)
class RouteDetail:
    """Crag metadata scraped from a route detail page."""
    sector: Optional[str] = None
    location: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.sector is None and self.location is None

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass(frozen=True)
class Climb:
    """
    One ascent from the climbing diary.

    Built by the row parser once every field is decided. The only later
    change allowed is a single enrichment with sector/location, which
    returns a new record.
    """

    date: str  # DD.MM.YYYY, as shown on the listing
    route: str
    area: str
    origin_grade: str
    points: str
    style: str

    suggested_grade: Optional[str] = None
    route_key: str = ""

    # From the route link title: "partners - note"
    partners: Optional[str] = None
    note: Optional[str] = None

    attempts: Optional[int] = None
    public: bool = False

    # Enrichment
    sector: Optional[str] = None
    location: Optional[str] = None

    @property
    def is_enriched(self) -> bool:
        return self.sector is not None or self.location is not None

    def with_route_detail(self, detail: RouteDetail) -> "Climb":
        """
        Return a copy carrying sector/location from the route page.

        Raises:
            ValueError: If the climb has already been enriched
        """
        if self.is_enriched:
            raise ValueError(f"Climb {self.route_key or self.route!r} is already enriched")

        return replace(self, sector=detail.sector, location=detail.location)

    def to_dict(self) -> dict:
        """Convert to the camelCase JSON object written to the output file."""
        data = {
            "date": self.date,
            "route": self.route,
            "area": self.area,
            "originGrade": self.origin_grade,
            "suggestedGrade": self.suggested_grade,
            "points": self.points,
            "style": self.style,
            "routeKey": self.route_key,
            "partners": self.partners,
            "note": self.note,
            "attempts": self.attempts,
            "public": self.public,
            "sector": self.sector,
            "location": self.location,
        }
        return {k: v for k, v in data.items() if v is not None}
