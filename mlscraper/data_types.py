"""Core data types for the Music League harvester.

Entities are discovered top-down (leagues, then rounds, then submissions) and
are immutable once created. LeagueRef and RoundRef are plain value objects;
SubmissionRecord is a pydantic model because it is the one shape handed to
record sinks and must always carry exactly nine string fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Column order of the output file. SubmissionRecord.as_row() follows it.
CSV_COLUMNS: tuple[str, ...] = (
    "League",
    "Round",
    "Submitter",
    "Song",
    "Artist",
    "Album",
    "Rank",
    "Points",
    "Voters",
)


class RunMode(Enum):
    """Which submissions a run extracts from each round page.

    Selected once before traversal from the configured user identity.
    """

    SINGLE_USER = "single_user"
    ALL_SUBMITTERS = "all_submitters"


@dataclass(frozen=True)
class LeagueRef:
    """A league discovered from a link to ``/l/{id}/``.

    Attributes:
        id: Lowercase hex league id taken from the URL path.
        name: Visible link text of the first link seen for this id.
        url: Canonical league URL, ``{base}/l/{id}/``.
    """

    id: str
    name: str
    url: str


@dataclass(frozen=True)
class RoundRef:
    """A round link found on a league page.

    The name is the link text, which is often just "Results"; the round
    page's own title replaces it when records are built.
    """

    url: str
    name: str


class SubmissionRecord(BaseModel):
    """One submitter's entry in one round.

    All fields are display strings, trimmed. Missing values are empty
    strings, never None, so every record maps onto the fixed CSV columns.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    league: str = Field("", description="League name")
    round: str = Field("", description="Round title")
    submitter: str = Field("", description="Submitter display name")
    song: str = Field("", description="Song title")
    artist: str = Field("", description="Artist line")
    album: str = Field("", description="Album line")
    rank: str = Field("", description="Rank display text")
    points: str = Field("", description="Points, normalized to an integer token")
    voters: str = Field("", description="Voters display text")

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    def as_row(self) -> list[str]:
        """Return the field values in CSV_COLUMNS order."""
        return [
            self.league,
            self.round,
            self.submitter,
            self.song,
            self.artist,
            self.album,
            self.rank,
            self.points,
            self.voters,
        ]


@dataclass
class RunSummary:
    """Outcome of one traversal run.

    Attributes:
        records_written: Records handed to the sink and acknowledged.
        leagues_visited: Leagues whose page was navigated.
        rounds_visited: Round pages navigated.
        aborted: True when traversal stopped on a navigation failure.
        error: Message of the failure that aborted the run, if any.
        output_path: Where the records were written.
    """

    records_written: int = 0
    leagues_visited: int = 0
    rounds_visited: int = 0
    aborted: bool = False
    error: str | None = None
    output_path: Path | None = None
