"""Record sinks for the traversal engine's on_record parameter.

The engine calls ``on_record(record)`` once per SubmissionRecord and only
continues when the call returns, so sinks must make each record durable
before returning.

Example::

    from mlscraper.driver.callbacks import CsvRecordSink

    with CsvRecordSink.create("musicleague-submissions.csv") as sink:
        engine = TraversalEngine(config, accessor, on_record=sink)
        summary = await engine.run()
"""

from __future__ import annotations

import csv
import logging
import os
from pathlib import Path
from typing import TextIO

from mlscraper.data_types import CSV_COLUMNS, SubmissionRecord

logger = logging.getLogger(__name__)


class CsvRecordSink:
    """Append-only CSV writer with one durable row per record.

    Every field is quoted and embedded quotes are doubled. The file is
    created fresh with the header row; each appended row is flushed and
    fsynced before the call returns.

    Args:
        file_handle: Open text handle (``newline=""``) to write to.
        path: Path of the file, kept for reporting.
    """

    def __init__(self, file_handle: TextIO, path: Path | None = None) -> None:
        self._file = file_handle
        self.path = path
        self.rows_written = 0
        self._writer = csv.writer(
            file_handle, quoting=csv.QUOTE_ALL, lineterminator="\n"
        )

    @classmethod
    def create(cls, path: Path | str) -> CsvRecordSink:
        """Create (or truncate) ``path`` and write the header row."""
        path = Path(path)
        if path.parent != Path("."):
            path.parent.mkdir(parents=True, exist_ok=True)
        file_handle = path.open("w", newline="", encoding="utf-8")
        sink = cls(file_handle, path)
        sink._writer.writerow(CSV_COLUMNS)
        sink._sync()
        logger.info(f"Writing to: {path}")
        return sink

    def append(self, record: SubmissionRecord) -> None:
        self._writer.writerow(record.as_row())
        self._sync()
        self.rows_written += 1

    def __call__(self, record: SubmissionRecord) -> None:
        self.append(record)

    def _sync(self) -> None:
        self._file.flush()
        os.fsync(self._file.fileno())

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    def __enter__(self) -> CsvRecordSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
