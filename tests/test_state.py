"""Tests for the collection cache and the notification slot."""

from zoo_console.models import Person, ResourceKind, Severity
from zoo_console.state import CollectionCache, NotificationSlot


def _people():
    return [
        Person(id="p2", name="Luis", email="luis@zoo.test"),
        Person(id="p1", name="Ana", email="ana@zoo.test"),
    ]


class TestCollectionCache:
    def test_starts_empty_for_every_kind(self):
        cache = CollectionCache()

        for kind in ResourceKind:
            assert cache.read(kind) == []

    def test_replace_keeps_server_order(self):
        cache = CollectionCache()

        cache.replace(ResourceKind.PERSON, _people())

        assert [r.id for r in cache.read(ResourceKind.PERSON)] == ["p2", "p1"]
        assert cache.read(ResourceKind.ENCLOSURE) == []

    def test_replace_overwrites_rather_than_merges(self):
        cache = CollectionCache()
        cache.replace(ResourceKind.PERSON, _people())

        cache.replace(ResourceKind.PERSON, [])

        assert cache.read(ResourceKind.PERSON) == []

    def test_read_returns_a_copy(self):
        cache = CollectionCache()
        cache.replace(ResourceKind.PERSON, _people())

        cache.read(ResourceKind.PERSON).clear()

        assert len(cache.read(ResourceKind.PERSON)) == 2

    def test_find(self):
        cache = CollectionCache()
        cache.replace(ResourceKind.PERSON, _people())

        assert cache.find(ResourceKind.PERSON, "p1").name == "Ana"
        assert cache.find(ResourceKind.PERSON, "nope") is None

    def test_accepts_kind_values(self):
        cache = CollectionCache()
        cache.replace("Person", _people())

        assert len(cache.read(ResourceKind.PERSON)) == 2


class TestNotificationSlot:
    def test_empty_slot(self, clock):
        slot = NotificationSlot(window_s=3, clock=clock)

        assert slot.current is None

    def test_post_and_expire(self, clock):
        slot = NotificationSlot(window_s=3, clock=clock)
        slot.success("Saved")

        assert slot.current.severity == Severity.SUCCESS
        clock.advance(3)
        assert slot.current is None

    def test_replacement_restarts_window(self, clock):
        slot = NotificationSlot(window_s=3, clock=clock)
        slot.success("first")
        clock.advance(2)
        slot.error("second")
        clock.advance(2)

        n = slot.current
        assert (n.severity, n.text) == (Severity.ERROR, "second")

    def test_clear(self, clock):
        slot = NotificationSlot(window_s=3, clock=clock)
        slot.error("boom")

        slot.clear()

        assert slot.current is None
