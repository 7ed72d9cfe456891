"""
Orchestrator for the diary scraping pipeline.

Coordinates:
- Login
- Diary fetch and parsing
- Window selection (offset/limit)
- Optional route detail enrichment
- Output generation
"""

import json
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

import structlog

from .config.loader import Settings
from .core.http_client import HttpClient
from .core.models import Climb
from .core.retry import RetryPolicy
from .parsers.diary import DiaryParser
from .parsers.route_detail import RouteDetailParser

logger = structlog.get_logger(__name__)


PLAIN_OUTPUT = "climbs.json"
ENRICHED_OUTPUT = "climbs_enriched.json"

# run() default for limit; None there means "no limit"
LIMIT_FROM_SETTINGS = object()


def select_window(climbs: Sequence[Climb], offset: int = 0, limit: Optional[int] = None) -> list[Climb]:
    """
    Select climbs[offset:offset + limit].

    Out-of-range offsets give an empty list; limit None means up to the end.
    """
    end = None if limit is None else offset + limit
    return list(climbs[offset:end])


class DiaryScraper:
    """
    Orchestrator for the diary pipeline.

    Runs login, fetch, windowing and enrichment strictly one request
    at a time, keeping listing order.
    """

    def __init__(
        self,
        settings: Settings,
        policy: Optional[RetryPolicy] = None,
        client_factory: Optional[Callable[[], HttpClient]] = None,
    ):
        """
        Initialize diary scraper.

        Args:
            settings: Run settings (credentials, window, output dir)
            policy: Retry/pacing policy (defaults to the one from settings)
            client_factory: Returns a fresh HttpClient; used for the
                            session client and for every route request
        """
        self.settings = settings
        self.output_dir = Path(settings.output_dir)
        self.policy = policy or settings.retry_policy()
        self.client_factory = client_factory or (
            lambda: HttpClient(base_url=settings.base_url, timeout=settings.timeout)
        )

        # Statistics
        self.stats = {
            "climbs_fetched": 0,
            "climbs_selected": 0,
            "climbs_enriched": 0,
            "enrich_skipped": 0,
            "enrich_failed": 0,
        }

    async def run(
        self,
        offset: Optional[int] = None,
        limit: Union[Optional[int], object] = LIMIT_FROM_SETTINGS,
        enrich: Optional[bool] = None,
    ) -> list[Climb]:
        """
        Run the pipeline.

        Arguments left out fall back to the settings. For limit an
        explicit None lifts a configured limit.

        Args:
            offset: Index of the first climb to keep
            limit: Maximum number of climbs to keep (None = no limit)
            enrich: Whether to fetch route details

        Returns:
            Selected (and possibly enriched) climbs in listing order

        Raises:
            AuthenticationError: If login fails
            FetchError: If the diary cannot be fetched
        """
        offset = self.settings.offset if offset is None else offset
        if limit is LIMIT_FROM_SETTINGS:
            limit = self.settings.limit
        enrich = self.settings.enrich if enrich is None else enrich

        logger.info("starting_scrape", offset=offset, limit=limit, enrich=enrich)

        async with self.client_factory() as client:
            session = await client.authenticate(self.settings.username, self.settings.password)

            parser = DiaryParser(http_client=client)
            climbs = await parser.fetch_diary(session)

        self.stats["climbs_fetched"] = len(climbs)

        selected = select_window(climbs, offset, limit)
        self.stats["climbs_selected"] = len(selected)

        logger.info("window_selected", fetched=len(climbs), selected=len(selected))

        if enrich:
            selected = await self.enrich(selected)

        logger.info("scrape_complete", **self.stats)

        return selected

    async def enrich(self, climbs: Sequence[Climb]) -> list[Climb]:
        """
        Add sector/location to climbs that have a route key.

        Requests are issued one by one with the pacing delay in between.
        A route whose page cannot be fetched keeps its climb unenriched.

        Args:
            climbs: Climbs in output order

        Returns:
            New list of climbs in the same order
        """
        parser = RouteDetailParser(policy=self.policy, client_factory=self.client_factory)

        enriched = []
        requests_made = 0
        for i, climb in enumerate(climbs):
            if not climb.route_key:
                self.stats["enrich_skipped"] += 1
                enriched.append(climb)
                continue

            if requests_made:
                await self.policy.pause()

            logger.info(
                "enriching",
                index=i + 1,
                total=len(climbs),
                route=climb.route,
                route_key=climb.route_key,
            )

            detail = await parser.enrich(climb.route_key)
            requests_made += 1

            if detail.is_empty:
                self.stats["enrich_failed"] += 1
                logger.warning("route_detail_missing", route=climb.route, route_key=climb.route_key)
                enriched.append(climb)
            else:
                self.stats["climbs_enriched"] += 1
                enriched.append(climb.with_route_detail(detail))

        return enriched

    def save_json(
        self,
        climbs: Sequence[Climb],
        enriched: bool = False,
        filename: Optional[str] = None,
    ) -> str:
        """
        Save climbs to a pretty-printed JSON file.

        Args:
            climbs: Climbs to save
            enriched: Selects the enriched file name
            filename: Optional filename overriding the default

        Returns:
            Path to saved file
        """
        if not filename:
            filename = ENRICHED_OUTPUT if enriched else PLAIN_OUTPUT

        self.output_dir.mkdir(parents=True, exist_ok=True)
        filepath = self.output_dir / filename

        data = [c.to_dict() for c in climbs]

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        logger.info("saved_json", path=str(filepath), climbs=len(climbs))
        return str(filepath)
