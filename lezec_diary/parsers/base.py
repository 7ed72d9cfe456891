"""
Base class for page parsers.

Parsers fetch a lezec.cz page, decode it and turn the markup into
models.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import structlog

from lezec_diary.core.http_client import HttpClient, Session
from lezec_diary.core.normalizer import decode_page

logger = structlog.get_logger(__name__)


class ParserStrategy(ABC):
    """
    Abstract base class for page parsers.

    Subclasses implement parse() for one page type:
    - DiaryParser: the ascent listing (deník)
    - RouteDetailParser: a single route page (cesta)
    """

    def __init__(self, http_client: Optional[HttpClient] = None):
        """
        Initialize parser.

        Args:
            http_client: Entered HTTP client to fetch pages with, if any
        """
        self.http_client = http_client
        self.logger = logger.bind(parser=self.__class__.__name__)

    async def fetch_html(
        self,
        path: str,
        session: Optional[Session] = None,
        client: Optional[HttpClient] = None,
    ) -> str:
        """
        GET a page and decode it.

        Args:
            path: Page path relative to the site root
            session: Optional authenticated session
            client: Client to use instead of the parser's own

        Returns:
            Decoded HTML

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status
        """
        client = client or self.http_client
        if not client:
            raise RuntimeError("Parser has no HTTP client.")

        content = await client.get_bytes(path, session=session)
        return decode_page(content)

    @abstractmethod
    def parse(self, html: str) -> Any:
        """
        Parse decoded HTML into models.

        Args:
            html: Decoded page markup
        """
        pass
