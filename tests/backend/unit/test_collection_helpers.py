"""
Unit tests for services.collections read-time aggregates and list helpers.
"""
import uuid
from types import SimpleNamespace

from app.services.collections import append_unique, average_rating, collection_stats


def _collection(likes=(), views=(), ratings=()):
    return SimpleNamespace(likes=list(likes), views=list(views), ratings=list(ratings))


def _user():
    return SimpleNamespace(id=uuid.uuid4())


class TestAverageRating:

    def test_empty_is_zero(self):
        assert average_rating([]) == 0

    def test_mean_of_values(self):
        assert average_rating([5, 4, 0]) == 3


class TestAppendUnique:

    def test_keeps_current_order_and_appends_new(self):
        assert append_unique(["a", "b"], ["c", "a", "d"]) == ["a", "b", "c", "d"]

    def test_duplicates_in_request_are_collapsed(self):
        assert append_unique([], ["x", "x", "y"]) == ["x", "y"]

    def test_uuid_and_string_forms_match(self):
        oid = uuid.uuid4()
        assert append_unique([oid], [str(oid)]) == [oid]

    def test_nothing_new_leaves_list_unchanged(self):
        assert append_unique(["a"], ["a"]) == ["a"]


class TestCollectionStats:

    def test_counts_and_average(self):
        u1, u2 = _user(), _user()
        c = _collection(
            likes=[u1],
            views=[u1, u2],
            ratings=[SimpleNamespace(user_id=u1.id, rating=4), SimpleNamespace(user_id=u2.id, rating=2)],
        )
        stats = collection_stats(c)
        assert stats == {"likesCount": 1, "viewsCount": 2, "ratingsCount": 2, "averageRating": 3}

    def test_viewer_flags(self):
        viewer, other = _user(), _user()
        c = _collection(likes=[viewer], ratings=[SimpleNamespace(user_id=viewer.id, rating=5)])
        stats = collection_stats(c, viewer)
        assert stats["liked"] is True
        assert stats["rated"] == 5

        stats = collection_stats(c, other)
        assert stats["liked"] is False
        assert stats["rated"] is None

    def test_no_ratings_average_is_zero(self):
        assert collection_stats(_collection())["averageRating"] == 0
