"""In-round deduplication of submission records.

A round page renders the viewer's submission twice, once in the sticky
preview card and once in the full list, so extracting every card yields
exact duplicates. Deduplication is scoped to one round's extracted list.
"""

from __future__ import annotations

from collections.abc import Iterable

from mlscraper.data_types import SubmissionRecord

SubmissionKey = tuple[str, str, str, str, str, str, str]


def submission_key(record: SubmissionRecord) -> SubmissionKey:
    """Composite identity of a rendered submission within a round.

    The submitter is part of the key because one round holds many
    submitters; league and round are constant within the scope.
    """
    return (
        record.submitter,
        record.song,
        record.artist,
        record.album,
        record.rank,
        record.points,
        record.voters,
    )


def dedupe_submissions(
    records: Iterable[SubmissionRecord],
) -> list[SubmissionRecord]:
    """Keep the first record for each key, preserving order."""
    seen: set[SubmissionKey] = set()
    unique: list[SubmissionRecord] = []
    for record in records:
        key = submission_key(record)
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique
