"""Entity locators for Music League pages.

Pure functions over a DOM snapshot (a PageElement). They never navigate and
never hold a browser reference; the traversal engine feeds them snapshots
taken after each navigation.

Music League markup is inconsistent: the same submission is rendered twice
(a sticky preview card and a list card), sub-elements come and go between
layouts, and any link under ``/l/`` might be a round. The locators therefore
query with ``min_count=0`` and turn every missing piece into an empty string
rather than an error.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from mlscraper.common.page_element import PageElement
from mlscraper.data_types import LeagueRef, RoundRef, SubmissionRecord

logger = logging.getLogger(__name__)

LEAGUE_URL_RE = re.compile(r"/l/([a-f0-9]+)/")
ROUND_URL_RE = re.compile(r"/l/[a-f0-9]+/([a-f0-9]+)/")
POINTS_RE = re.compile(r"-?\d+")

UNKNOWN_ROUND = "Unknown Round"

ROUND_TITLE_SELECTOR = "h5.card-title"
STICKY_CARD_SELECTOR = ".card-body.sticky-top"
CARD_SELECTOR = ".card-body"
SONG_TITLE_SELECTOR = "h6.card-title"


@dataclass(frozen=True)
class FieldResolver:
    """One best-effort way of reading a field out of a submission card.

    Attributes:
        selector: CSS selector evaluated relative to the card.
        description: What the selector is expected to find.
        index: Which match to read when the selector matches several.
    """

    selector: str
    description: str
    index: int = 0

    def resolve(self, card: PageElement) -> str:
        matches = card.query_css(self.selector, self.description, min_count=0)
        if len(matches) <= self.index:
            return ""
        return matches[self.index].text_content().strip()


# Resolver chains, most specific first. A chain stops at the first
# resolver that yields non-empty text.
SUBMITTER_RESOLVERS: tuple[FieldResolver, ...] = (
    FieldResolver("h6.text-truncate.text-body.fw-semibold", "submitter name"),
    FieldResolver('a[href*="/user/"] h6', "profile link heading"),
    FieldResolver('a[href*="/user/"]', "profile link text"),
)
SONG_RESOLVERS: tuple[FieldResolver, ...] = (
    FieldResolver("h6.card-title a", "song title link"),
    FieldResolver(SONG_TITLE_SELECTOR, "song title"),
)
ARTIST_RESOLVERS: tuple[FieldResolver, ...] = (
    FieldResolver(".card-text", "artist line", index=0),
)
ALBUM_RESOLVERS: tuple[FieldResolver, ...] = (
    FieldResolver(".card-text", "album line", index=1),
)
RANK_RESOLVERS: tuple[FieldResolver, ...] = (
    FieldResolver(
        ".font-monospace.m-0, .font-monospace.text-body-secondary", "rank"
    ),
)
POINTS_RESOLVERS: tuple[FieldResolver, ...] = (
    FieldResolver(".col-auto.text-end h3", "points"),
)
VOTERS_RESOLVERS: tuple[FieldResolver, ...] = (
    FieldResolver(".text-body-tertiary.fw-semibold", "voters"),
)


def resolve_field(
    card: PageElement, resolvers: tuple[FieldResolver, ...]
) -> str:
    """Run a resolver chain against a card.

    Returns:
        The first non-empty text produced, or "" when every resolver fails.
    """
    for resolver in resolvers:
        value = resolver.resolve(card)
        if value:
            return value
    return ""


def normalize_points(raw: str) -> str:
    """Reduce a points display string to a bare integer token.

    The first integer-looking token wins, so ``"+3 points"`` becomes ``"3"``
    and ``"-2"`` stays ``"-2"``. Text without digits is returned trimmed.

    Note:
        For texts holding several numbers (``"#2 · +3 pts"``) this returns
        the first one, which may be the rank rather than the points.
    """
    text = (raw or "").strip()
    match = POINTS_RE.search(text)
    if match:
        return match.group(0)
    return text


def discover_leagues(page: PageElement, base_url: str) -> list[LeagueRef]:
    """Collect leagues linked from a page.

    Every link whose URL contains ``/l/{hex id}/`` names a league. The
    first link seen for an id supplies its name.

    Args:
        page: Snapshot of a profile or landing page.
        base_url: Scheme and host used to build canonical league URLs.

    Returns:
        Leagues in document order, unique by id. May be empty.
    """
    base = base_url.rstrip("/")
    leagues: dict[str, LeagueRef] = {}

    for link in page.links():
        match = LEAGUE_URL_RE.search(link.url)
        if not match:
            continue
        league_id = match.group(1)
        if league_id in leagues:
            continue
        leagues[league_id] = LeagueRef(
            id=league_id,
            name=link.text,
            url=f"{base}/l/{league_id}/",
        )

    return list(leagues.values())


def discover_rounds(page: PageElement) -> list[RoundRef]:
    """Collect round links from a league page.

    A link is kept when its URL has a round segment after the league id and
    its text mentions "Results" or "Round", or its URL contains ``/l/``.
    The last condition admits every link under ``/l/{league}/{id}/``; pages
    that turn out not to be rounds simply yield no submissions.

    Returns:
        Rounds in document order, unique by exact URL.
    """
    rounds: dict[str, RoundRef] = {}

    for link in page.links():
        if not ROUND_URL_RE.search(link.url):
            continue
        if not (
            "Results" in link.text
            or "Round" in link.text
            or "/l/" in link.url
        ):
            continue
        if link.url in rounds:
            continue
        rounds[link.url] = RoundRef(url=link.url, name=link.text)

    return list(rounds.values())


def resolve_round_name(page: PageElement) -> str:
    titles = page.query_css(
        ROUND_TITLE_SELECTOR, "round title", min_count=0
    )
    if titles:
        name = titles[0].text_content().strip()
        if name:
            return name
    return UNKNOWN_ROUND


def _references_user(card: PageElement, identity: str) -> bool:
    profile = re.compile(rf"/user/{re.escape(identity)}(?:[/?#]|$)")
    return any(profile.search(link.url) for link in card.links())


def _build_record(
    card: PageElement,
    league: str,
    round_name: str,
    fallback_name: str = "",
) -> SubmissionRecord:
    return SubmissionRecord(
        league=league,
        round=round_name,
        submitter=resolve_field(card, SUBMITTER_RESOLVERS) or fallback_name,
        song=resolve_field(card, SONG_RESOLVERS),
        artist=resolve_field(card, ARTIST_RESOLVERS),
        album=resolve_field(card, ALBUM_RESOLVERS),
        rank=resolve_field(card, RANK_RESOLVERS),
        points=normalize_points(resolve_field(card, POINTS_RESOLVERS)),
        voters=resolve_field(card, VOTERS_RESOLVERS),
    )


def extract_target_submission(
    page: PageElement,
    identity: str,
    league: str,
    round_name: str,
    fallback_name: str = "",
) -> SubmissionRecord | None:
    """Extract one submitter's record from a round page.

    Only sticky cards are considered; the page highlights the target
    user's own card that way. The first sticky card holding a profile link
    to ``identity`` is authoritative and later ones are ignored.

    Args:
        page: Snapshot of a round page.
        identity: Submitter id as it appears in ``/user/{id}/`` links.
        league: League name for the record.
        round_name: Round title for the record.
        fallback_name: Submitter name used when the card shows none.

    Returns:
        The record, or None when no card belongs to the submitter.
    """
    cards = page.query_css(
        STICKY_CARD_SELECTOR, "sticky submission cards", min_count=0
    )
    for card in cards:
        if _references_user(card, identity):
            return _build_record(card, league, round_name, fallback_name)

    logger.debug(f"No sticky card for user {identity} on {page.url}")
    return None


def extract_all_submissions(
    page: PageElement,
    league: str,
    round_name: str,
) -> list[SubmissionRecord]:
    """Extract every submission card on a round page.

    A card-body counts as a submission card when it contains a song title.
    Cards whose song, artist and album all come out empty are layout
    artifacts and are dropped. Duplicates are kept; see dedupe_submissions.

    Returns:
        Records in document order.
    """
    records: list[SubmissionRecord] = []

    cards = page.query_css(CARD_SELECTOR, "card bodies", min_count=0)
    for card in cards:
        if not card.query_css(SONG_TITLE_SELECTOR, "song title", min_count=0):
            continue
        record = _build_record(card, league, round_name)
        if not (record.song or record.artist or record.album):
            continue
        records.append(record)

    return records
