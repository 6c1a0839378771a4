"""
test_feed.py
------------
Unit tests for anonverse.state.feed: count normalization and FeedAggregator.
"""
import uuid

import pytest

from anonverse.errors import FetchError
from anonverse.models import Identity
from anonverse.state.feed import FeedAggregator, build_item, normalize_count


class TestNormalizeCount:
    """Test the tolerant count-descriptor parser."""

    @pytest.mark.parametrize(
        "descriptor, expected",
        [
            (None, 0),
            ([], 0),
            (3, 3),
            ({"count": 2}, 2),
            ([{"count": 2}], 2),
            ([5], 5),
            ((4,), 4),
            (0, 0),
        ],
    )
    def test_accepted_shapes(self, descriptor, expected):
        assert normalize_count(descriptor) == expected

    @pytest.mark.parametrize(
        "descriptor",
        ["7", -1, True, 2.5, {"total": 3}, [{"count": 1}, {"count": 2}], [{"count": "x"}]],
    )
    def test_malformed_counts_as_zero(self, descriptor, caplog):
        assert normalize_count(descriptor, "likes_count") == 0
        assert "likes_count" in caplog.text


class TestBuildItem:
    def test_joined_row(self):
        author_id = uuid.uuid4()
        row = {
            "id": uuid.uuid4(),
            "title": "Dusk",
            "content": "...",
            "author_id": author_id,
            "profiles": {"id": author_id, "pen_name": "Ink"},
            "likes_count": [{"count": 2}],
            "comments_count": [],
        }
        item = build_item(row)
        assert item.author.pen_name == "Ink"
        assert item.engagement.like_count == 2
        assert item.engagement.comment_count == 0
        assert item.engagement.viewer_has_liked is False

    def test_missing_author(self):
        row = {"id": uuid.uuid4(), "title": "T", "content": "C", "author_id": uuid.uuid4(), "profiles": None}
        assert build_item(row).author is None


class TestFeedAggregator:
    def test_guest_never_sees_liked(self, data, seed, run):
        author = seed.profile("Ink")
        reader = seed.profile("Reader")
        poems = [seed.poem(author, f"Poem {n}") for n in range(3)]
        for poem_id in poems:
            seed.like(poem_id, reader)

        feed = FeedAggregator(data, viewer_source=lambda: None)
        items = run(feed.refresh())

        assert len(items) == 3
        assert all(not item.engagement.viewer_has_liked for item in items)
        assert ("select", "likes") not in data.calls

    def test_counts_and_order(self, data, seed, run):
        author = seed.profile("Ink")
        fans = [seed.profile("A"), seed.profile("B")]
        older = seed.poem(author, "Older")
        newer = seed.poem(author, "Newer")
        for fan in fans:
            seed.like(older, fan)

        feed = FeedAggregator(data, viewer_source=lambda: None)
        items = run(feed.refresh())

        assert [item.poem.id for item in items] == [newer, older]
        assert feed.engagement(older).like_count == 2
        assert feed.engagement(older).comment_count == 0
        assert feed.item(newer).author.pen_name == "Ink"

    def test_viewer_membership(self, data, seed, run):
        author = seed.profile("Ink")
        viewer = seed.profile("Reader")
        liked = seed.poem(author, "Liked")
        other = seed.poem(author, "Other")
        seed.like(liked, viewer)
        seed.like(other, author)

        feed = FeedAggregator(data, viewer_source=lambda: viewer)
        run(feed.refresh())

        assert feed.engagement(liked).viewer_has_liked is True
        assert feed.engagement(other).viewer_has_liked is False
        assert feed.engagement(other).like_count == 1

    def test_membership_discarded_when_viewer_changes(self, data, seed, run):
        author = seed.profile("Ink")
        first = seed.profile("First")
        poem_id = seed.poem(author)
        seed.like(poem_id, first)
        current = {"viewer": first}

        async def switch_viewer():
            current["viewer"] = Identity(id=uuid.uuid4())

        data.on_select["likes"] = switch_viewer
        feed = FeedAggregator(data, viewer_source=lambda: current["viewer"])
        run(feed.refresh())

        assert feed.engagement(poem_id).viewer_has_liked is False
        assert feed.engagement(poem_id).like_count == 1

    def test_failure_keeps_previous_items(self, data, seed, run):
        seed.poem(seed.profile("Ink"))
        feed = FeedAggregator(data, viewer_source=lambda: None)
        first = run(feed.refresh())

        data.failures[("select", "poems")] = FetchError("offline")
        with pytest.raises(FetchError):
            run(feed.refresh())
        assert feed.items == first

    def test_superseded_refresh_is_discarded(self, data, seed, run):
        author = seed.profile("Ink")
        seed.poem(author, "First")
        feed = FeedAggregator(data, viewer_source=lambda: None)

        async def newer_refresh():
            del data.on_select["poems"]
            seed.poem(author, "Second")
            await feed.refresh()

        data.on_select["poems"] = newer_refresh
        result = run(feed.refresh())

        assert [item.poem.title for item in feed.items] == ["Second", "First"]
        assert result == feed.items

    def test_failed_newer_refresh_keeps_older_result(self, data, seed, run):
        seed.poem(seed.profile("Ink"), "Only")
        feed = FeedAggregator(data, viewer_source=lambda: None)

        async def failing_refresh():
            del data.on_select["poems"]
            data.failures[("select", "poems")] = FetchError("offline")
            with pytest.raises(FetchError):
                await feed.refresh()
            del data.failures[("select", "poems")]

        data.on_select["poems"] = failing_refresh
        result = run(feed.refresh())

        assert [item.poem.title for item in feed.items] == ["Only"]
        assert result == feed.items

    def test_empty_feed(self, data, run):
        feed = FeedAggregator(data, viewer_source=lambda: Identity(id=uuid.uuid4()))
        assert run(feed.refresh()) == []
        assert ("select", "likes") not in data.calls
