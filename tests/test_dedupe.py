"""Tests for in-round submission deduplication."""

from mlscraper.data_types import SubmissionRecord
from mlscraper.dedupe import dedupe_submissions, submission_key


def make_record(**fields) -> SubmissionRecord:
    defaults = {
        "league": "League One",
        "round": "Round 1",
        "submitter": "Alice",
        "song": "Song A",
        "artist": "Artist A",
        "points": "3",
    }
    defaults.update(fields)
    return SubmissionRecord(**defaults)


def test_exact_duplicates_collapse_to_first():
    """Identical cards should produce one record."""
    first = make_record()
    records = [first, make_record(), make_record()]

    result = dedupe_submissions(records)

    assert result == [first]
    assert result[0] is first


def test_order_preserved():
    a = make_record(submitter="Alice")
    b = make_record(submitter="Bob", song="Song B")
    c = make_record(submitter="Carol", song="Song C")

    assert dedupe_submissions([a, b, a, c, b]) == [a, b, c]


def test_different_submitters_same_song_kept():
    """Two people submitting the same song are distinct submissions."""
    records = [make_record(submitter="Alice"), make_record(submitter="Bob")]

    assert len(dedupe_submissions(records)) == 2


def test_any_differing_field_keeps_both():
    records = [make_record(points="3"), make_record(points="4")]

    assert len(dedupe_submissions(records)) == 2


def test_key_ignores_league_and_round():
    """League and round are constant within one round's list."""
    assert submission_key(make_record(round="Round 1")) == submission_key(
        make_record(round="Round 2")
    )


def test_empty_input():
    assert dedupe_submissions([]) == []


def test_accepts_generator():
    records = (make_record() for _ in range(3))

    assert len(dedupe_submissions(records)) == 1
