"""Run configuration.

A RunConfig is built once at process start (by the CLI) and passed into the
traversal engine and page accessor. Nothing reads configuration from global
state during traversal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mlscraper.data_types import RunMode

DEFAULT_HOST = "app.musicleague.com"
DEFAULT_OUTPUT = "musicleague-submissions.csv"
DEFAULT_USER_DATA_DIR = "user-data"


@dataclass(frozen=True)
class RunConfig:
    """Immutable settings for one harvesting run.

    Attributes:
        user_id: Submitter identity (the id in ``/user/{id}/``). Empty or
            None selects all-submitters mode.
        host: Music League host name.
        output_path: CSV file to create and append to.
        headless: Run the browser without a window. Logging in requires a
            visible window, so this defaults to False.
        user_data_dir: Browser profile directory, kept between runs so the
            login session persists.
        entry_settle_ms: Delay after the entry page reaches network idle.
        league_settle_ms: Delay after a league page reaches network idle.
        round_settle_ms: Delay after a round page reaches network idle.
        navigation_timeout_ms: Playwright timeout for a single navigation.
        navigations_per_minute: Optional cap on navigation pace.
        hold_browser: Wait for the operator before closing the browser.
    """

    user_id: str | None = None
    host: str = DEFAULT_HOST
    output_path: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT))
    headless: bool = False
    user_data_dir: Path = field(
        default_factory=lambda: Path(DEFAULT_USER_DATA_DIR)
    )
    entry_settle_ms: int = 2000
    league_settle_ms: int = 1500
    round_settle_ms: int = 1000
    navigation_timeout_ms: int = 30000
    navigations_per_minute: int | None = None
    hold_browser: bool = False

    @property
    def identity(self) -> str:
        return (self.user_id or "").strip()

    @property
    def mode(self) -> RunMode:
        if self.identity:
            return RunMode.SINGLE_USER
        return RunMode.ALL_SUBMITTERS

    @property
    def base_url(self) -> str:
        return f"https://{self.host}"

    @property
    def entry_url(self) -> str:
        """Profile page in single-user mode, landing page otherwise."""
        if self.mode is RunMode.SINGLE_USER:
            return f"{self.base_url}/user/{self.identity}/"
        return f"{self.base_url}/"
