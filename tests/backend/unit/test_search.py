"""
Unit tests for the two-strategy search helpers.
"""
from types import SimpleNamespace

from tortoise.expressions import Q

from app.services.search import merge_unique, query_terms, rank_by_terms, terms_filter


def _row(id, text):
    return SimpleNamespace(id=id, text=text)


class TestQueryTerms:

    def test_lowercases_and_deduplicates(self):
        assert query_terms("Spring spring SHOW") == ["spring", "show"]

    def test_punctuation_is_dropped(self):
        assert query_terms("rock-n-roll, ghent!") == ["rock-n-roll", "ghent"]

    def test_no_words(self):
        assert query_terms("?!") == []


class TestRankByTerms:

    def test_more_matching_terms_rank_first(self):
        rows = [_row(1, "spring in paris"), _row(2, "spring show in ghent"), _row(3, "winter")]
        ranked = rank_by_terms(rows, ["spring", "ghent"], lambda r: r.text)
        assert [r.id for r in ranked] == [2, 1]

    def test_ties_keep_original_order(self):
        rows = [_row(1, "a show"), _row(2, "another show")]
        ranked = rank_by_terms(rows, ["show"], lambda r: r.text)
        assert [r.id for r in ranked] == [1, 2]


class TestMergeUnique:

    def test_first_group_wins_and_order_is_kept(self):
        text = [_row(2, "t"), _row(1, "t")]
        substring = [_row(1, "s"), _row(3, "s")]
        merged = merge_unique(text, substring)
        assert [r.id for r in merged] == [2, 1, 3]
        assert merged[1].text == "t"


def test_terms_filter_builds_q():
    assert isinstance(terms_filter(["title", "city"], ["spring"]), Q)
