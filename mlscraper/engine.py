"""Traversal engine: walks leagues, rounds and submissions in order.

The engine owns the page accessor and the record callback for the duration
of a run. It performs one navigation at a time and hands each record to
``on_record`` before moving on, so a crash leaves the output holding
everything up to the round that was in flight.

States::

    Start -> Authenticating -> DiscoverLeagues
          -> for each league: DiscoverRounds
               -> for each round: LoadRound -> ExtractAndPersist
          -> Done | Aborted

The only manual-intervention points are the login check after the entry
page and the single retry when no leagues are found. Both await
``accessor.wait_for_operator`` without a timeout.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from urllib.parse import urlparse

from mlscraper.common.exceptions import NavigationFailure
from mlscraper.common.page_accessor import PageAccessor
from mlscraper.common.page_element import PageElement
from mlscraper.config import RunConfig
from mlscraper.data_types import (
    LeagueRef,
    RoundRef,
    RunMode,
    RunSummary,
    SubmissionRecord,
)
from mlscraper.dedupe import dedupe_submissions
from mlscraper.locators import (
    discover_leagues,
    discover_rounds,
    extract_all_submissions,
    extract_target_submission,
    resolve_round_name,
)

logger = logging.getLogger(__name__)

AUTH_PATH_MARKERS = ("/login", "/signin", "/sign-in", "/auth", "/oauth")

LOGIN_PROMPT = (
    "Please log in to Music League in the browser window. "
    "After logging in, navigate back to the profile page if needed, "
    "then press Enter here to continue..."
)
LEAGUES_PROMPT = (
    "No leagues found on this page. Navigate the browser to a page "
    "listing your leagues, then press Enter here to continue..."
)


class TraversalEngine:
    """Sequential leagues -> rounds -> submissions walker.

    Args:
        config: Immutable run configuration; fixes the run mode.
        accessor: Browser surface used for every navigation and snapshot.
        on_record: Called once per record, in order. Must return only after
            the record is durably stored.

    Example::

        async with PlaywrightPageAccessor.open(config) as accessor:
            with CsvRecordSink.create(config.output_path) as sink:
                engine = TraversalEngine(config, accessor, on_record=sink)
                summary = await engine.run()
    """

    def __init__(
        self,
        config: RunConfig,
        accessor: PageAccessor,
        on_record: Callable[[SubmissionRecord], None] | None = None,
    ) -> None:
        self.config = config
        self.accessor = accessor
        self.on_record = on_record
        self.mode = config.mode
        self.summary = RunSummary(output_path=config.output_path)

    async def run(self) -> RunSummary:
        """Traverse everything reachable from the entry page.

        Returns:
            RunSummary; ``aborted`` is set when a navigation failed.
        """
        logger.info(
            f"Starting traversal in {self.mode.value} mode "
            f"from {self.config.entry_url}"
        )
        try:
            await self._authenticate()
            leagues = await self._discover_leagues()
            for index, league in enumerate(leagues, start=1):
                await self._process_league(index, len(leagues), league)
        except NavigationFailure as e:
            logger.error(f"Aborting traversal: {e}")
            self.summary.aborted = True
            self.summary.error = str(e)

        logger.info(
            f"Traversal {'aborted' if self.summary.aborted else 'finished'}: "
            f"{self.summary.records_written} records from "
            f"{self.summary.rounds_visited} rounds in "
            f"{self.summary.leagues_visited} leagues"
        )
        return self.summary

    def needs_operator(self, url: str) -> bool:
        """Whether the entry page landed somewhere other than intended.

        True for a login/auth redirect, or in single-user mode for any page
        that doesn't mention the configured identity.
        """
        path = urlparse(url).path.lower()
        if any(marker in path for marker in AUTH_PATH_MARKERS):
            return True
        if self.mode is RunMode.SINGLE_USER:
            return self.config.identity not in url
        return False

    async def _authenticate(self) -> None:
        await self.accessor.goto(
            self.config.entry_url, settle_ms=self.config.entry_settle_ms
        )
        current = self.accessor.current_url()
        if self.needs_operator(current):
            logger.warning(f"Not on the expected page ({current})")
            await self.accessor.wait_for_operator(LOGIN_PROMPT)

    async def _discover_leagues(self) -> list[LeagueRef]:
        logger.info("Finding leagues...")
        page = await self.accessor.snapshot()
        leagues = discover_leagues(page, self.config.base_url)

        if not leagues:
            logger.warning("No leagues found, waiting for operator")
            await self.accessor.wait_for_operator(LEAGUES_PROMPT)
            page = await self.accessor.snapshot()
            leagues = discover_leagues(page, self.config.base_url)

        logger.info(f"Found {len(leagues)} leagues")
        return leagues

    async def _process_league(
        self, index: int, total: int, league: LeagueRef
    ) -> None:
        logger.info(f"[{index}/{total}] Processing league: {league.name}")
        await self.accessor.goto(
            league.url, settle_ms=self.config.league_settle_ms
        )
        self.summary.leagues_visited += 1

        page = await self.accessor.snapshot()
        rounds = discover_rounds(page)
        logger.info(f"  Found {len(rounds)} rounds")

        for round_index, round_ref in enumerate(rounds, start=1):
            logger.info(f"    Checking round {round_index}/{len(rounds)}...")
            await self._process_round(league, round_ref)

    async def _process_round(
        self, league: LeagueRef, round_ref: RoundRef
    ) -> None:
        await self.accessor.goto(
            round_ref.url, settle_ms=self.config.round_settle_ms
        )
        self.summary.rounds_visited += 1

        try:
            page = await self.accessor.snapshot()
            records = self._extract(page, league)
        except NavigationFailure:
            raise
        except Exception:
            logger.warning(
                f"Extraction failed on {round_ref.url}; "
                "treating round as empty",
                exc_info=True,
            )
            return

        for record in records:
            self._persist(record)

    def _extract(
        self, page: PageElement, league: LeagueRef
    ) -> list[SubmissionRecord]:
        round_name = resolve_round_name(page)

        if self.mode is RunMode.ALL_SUBMITTERS:
            extracted = extract_all_submissions(page, league.name, round_name)
            records = dedupe_submissions(extracted)
            if len(records) < len(extracted):
                logger.debug(
                    f"Dropped {len(extracted) - len(records)} duplicate "
                    f"cards in {round_name}"
                )
            return records

        identity = self.config.identity
        record = extract_target_submission(
            page,
            identity,
            league.name,
            round_name,
            fallback_name=identity,
        )
        return [record] if record is not None else []

    def _persist(self, record: SubmissionRecord) -> None:
        if self.on_record is not None:
            self.on_record(record)
        self.summary.records_written += 1
        logger.info(f"      Found: {record.song} by {record.artist}")
