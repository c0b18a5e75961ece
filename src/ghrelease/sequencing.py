"""Per-repository release ordering and interval computation."""

from collections import defaultdict
from collections.abc import Iterable
from datetime import datetime, timedelta

from ghrelease.models import RawRelease, SequenceInfo

MILLIS_PER_DAY = 86_400_000


def days_between(first: datetime, second: datetime) -> int:
    """Whole days between two timestamps, rounding any partial day up."""
    millis = abs(second - first) // timedelta(milliseconds=1)
    return -(-millis // MILLIS_PER_DAY)


def analyze_repository(releases: Iterable[RawRelease]) -> list[tuple[RawRelease, SequenceInfo]]:
    """Sequence the complete release history of a single repository.

    Releases are ordered by publish time (ties keep their input order) and
    numbered from 1. Intervals are measured against neighbours in that
    order, so this must run on the unfiltered history.

    Args:
        releases: Every release of one repository, in any order.

    Returns:
        (release, sequence info) pairs in ascending publish order.
    """
    ordered = sorted(releases, key=lambda r: r.published_at)
    total = len(ordered)
    if not ordered:
        return []

    first = ordered[0].published_at
    sequenced = []
    for index, release in enumerate(ordered):
        previous = ordered[index - 1] if index > 0 else None
        following = ordered[index + 1] if index < total - 1 else None
        sequenced.append(
            (
                release,
                SequenceInfo(
                    release_sequence_number=index + 1,
                    days_since_last_release=(
                        days_between(previous.published_at, release.published_at)
                        if previous
                        else None
                    ),
                    days_since_first_release=days_between(first, release.published_at),
                    days_until_next_release=(
                        days_between(release.published_at, following.published_at)
                        if following
                        else None
                    ),
                    total_releases_in_repo=total,
                ),
            )
        )
    return sequenced


def analyze_sequences(releases: list[RawRelease]) -> list[SequenceInfo]:
    """Sequence every repository in a mixed batch.

    Args:
        releases: Releases across any number of repositories.

    Returns:
        Sequence info aligned index-for-index with ``releases``.
    """
    by_repo: dict[str, list[int]] = defaultdict(list)
    for index, release in enumerate(releases):
        by_repo[release.repo_name].append(index)

    sequences: dict[int, SequenceInfo] = {}
    for indices in by_repo.values():
        # Pre-sorted so positions line up with analyze_repository's stable sort
        ordered = sorted(indices, key=lambda i: releases[i].published_at)
        analyzed = analyze_repository([releases[i] for i in ordered])
        for index, (_, info) in zip(ordered, analyzed, strict=True):
            sequences[index] = info
    return [sequences[index] for index in range(len(releases))]
