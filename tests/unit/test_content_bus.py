from corpsite.client.events import ContentBus, ContentUpdate
from corpsite.domain.entities import ContentKey

KEY = ContentKey("about", "hero")


def _update(page: str = "about", section: str = "hero", **data) -> ContentUpdate:
    return ContentUpdate(page=page, section=section, data=data, updated_at="2026-01-01")


def test_publish_reaches_matching_subscribers_only():
    bus = ContentBus()
    hero: list[ContentUpdate] = []
    vision: list[ContentUpdate] = []
    bus.subscribe(KEY, hero.append)
    bus.subscribe(ContentKey("about", "vision"), vision.append)

    delivered = bus.publish(_update(title="New"))

    assert delivered == 1
    assert [u.data for u in hero] == [{"title": "New"}]
    assert vision == []


def test_publish_without_subscribers():
    assert ContentBus().publish(_update()) == 0


def test_cancel_is_idempotent():
    bus = ContentBus()
    received: list[ContentUpdate] = []
    sub = bus.subscribe(KEY, received.append)

    sub.cancel()
    sub.cancel()

    assert sub.active is False
    assert bus.subscriber_count() == 0
    bus.publish(_update())
    assert received == []


def test_failing_subscriber_does_not_stop_delivery(caplog):
    bus = ContentBus()
    received: list[ContentUpdate] = []

    def boom(update: ContentUpdate) -> None:
        raise RuntimeError("subscriber bug")

    bus.subscribe(KEY, boom)
    bus.subscribe(KEY, received.append)

    assert bus.publish(_update(title="x")) == 1
    assert len(received) == 1
    assert "subscriber failed" in caplog.text


def test_subscriber_may_cancel_during_delivery():
    bus = ContentBus()
    calls: list[str] = []
    holder = {}

    def once(update: ContentUpdate) -> None:
        calls.append("once")
        holder["sub"].cancel()

    holder["sub"] = bus.subscribe(KEY, once)
    bus.subscribe(KEY, lambda u: calls.append("always"))

    bus.publish(_update())
    bus.publish(_update())

    assert calls == ["once", "always", "always"]


def test_origin_not_part_of_equality():
    a = ContentUpdate("p", "s", {"x": 1}, "t", origin=object())
    b = ContentUpdate("p", "s", {"x": 1}, "t", origin=object())
    assert a == b
    assert a.key == ContentKey("p", "s")
