"""
Two-strategy search merge.

1) Term search: the query is split into words, a row matches when any word
   occurs in one of its text fields; rows are ranked by how many words hit.
2) Substring search: case-insensitive `icontains` on a single field.

Results are unioned term-results-first, deduplicated by id (first seen wins),
then paginated in memory. This is a pragmatic merge, not a ranked hybrid.
"""
import re
from functools import reduce
from operator import or_
from typing import Callable, Iterable, Sequence, TypeVar

from tortoise.expressions import Q

T = TypeVar("T")

_WORD_RE = re.compile(r"[\w'-]+", re.UNICODE)


def query_terms(query: str) -> list[str]:
    seen: list[str] = []
    for word in _WORD_RE.findall(query.lower()):
        if word not in seen:
            seen.append(word)
    return seen


def terms_filter(fields: Sequence[str], terms: Sequence[str]) -> Q:
    """OR of `<field>__icontains=<term>` over every field/term pair."""
    return reduce(or_, (Q(**{f"{field}__icontains": term}) for field in fields for term in terms))


def rank_by_terms(rows: Iterable[T], terms: Sequence[str], text_of: Callable[[T], str]) -> list[T]:
    """Stable sort by number of distinct matching terms, most first."""
    scored = []
    for row in rows:
        text = text_of(row).lower()
        scored.append((sum(1 for t in terms if t in text), row))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [row for score, row in scored if score > 0]


def merge_unique(*groups: Iterable[T], key: Callable[[T], object] = lambda r: r.id) -> list[T]:
    merged: dict = {}
    for group in groups:
        for row in group:
            k = str(key(row))
            if k not in merged:
                merged[k] = row
    return list(merged.values())
