"""Relevance scoring and ranking of catalog entries against a query."""

from __future__ import annotations

from collections.abc import Sequence

from muxsesh.models import Entry, RankedEntry

EXACT_TITLE_BONUS = 1000
TITLE_PREFIX_BONUS = 500
TITLE_SUBSTRING_BONUS = 100
DESCRIPTION_MATCH_BONUS = 50
# "org/project" style nesting, e.g. ~/dev/widgets
PREFERRED_DEPTH = 2
PREFERRED_DEPTH_BONUS = 200
# 0 is reserved for "no match"
MIN_MATCH_SCORE = 1


def score(entry: Entry, query: str) -> int:
    """Score *entry* against a lower-cased *query*; non-matches score 0.

    The path-depth term penalises deeply nested project paths. A match
    never drops below :data:`MIN_MATCH_SCORE`, so it sinks to the end of
    the ranking instead of being mistaken for a non-match.
    """
    title = entry.title.lower()
    desc = entry.description.lower()

    in_title = query in title
    in_desc = query in desc
    if not in_title and not in_desc:
        return 0

    total = 0
    if title == query:
        total += EXACT_TITLE_BONUS
    if title.startswith(query):
        total += TITLE_PREFIX_BONUS
    if in_title:
        total += TITLE_SUBSTRING_BONUS

    depth = entry.description.count("/")
    total += (10 - depth) * 10
    if depth == PREFERRED_DEPTH:
        total += PREFERRED_DEPTH_BONUS

    if in_desc:
        total += DESCRIPTION_MATCH_BONUS
    return max(total, MIN_MATCH_SCORE)


def rank(entries: Sequence[Entry], query: str, *, ascending: bool = False) -> list[RankedEntry]:
    """Score and order *entries* for a non-empty *query*.

    Zero-score entries are dropped. Equal scores keep their catalog
    order in both directions.
    """
    needle = query.lower()
    results = []
    for entry in entries:
        value = score(entry, needle)
        if value:
            results.append(RankedEntry(entry, value))
    return sorted(results, key=lambda r: r.score, reverse=not ascending)


def filter_entries(entries: Sequence[Entry], query: str, *, ascending: bool = False) -> list[Entry]:
    """Return the entries to display for *query*.

    An empty query is the unfiltered browse presentation: the catalog in
    its original order.
    """
    if not query:
        return list(entries)
    return [r.entry for r in rank(entries, query, ascending=ascending)]
