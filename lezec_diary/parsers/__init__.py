"""
Page parsers for lezec.cz.

Parsers handle fetching and extraction - converting decoded HTML
pages into Climb and RouteDetail objects.

Strategies:
- DiaryParser: the logged-in user's ascent listing
- RouteDetailParser: sector/location of a single route
"""

from .base import ParserStrategy
from .diary import DiaryParser, parse_row
from .route_detail import RouteDetailParser

__all__ = [
    "ParserStrategy",
    "DiaryParser",
    "parse_row",
    "RouteDetailParser",
]
