from __future__ import annotations

import json

from portaldb.apps.events import revalidation
from portaldb.apps.events.broker import EventBroker, PortalEvent


def _event(n: int, event_type: str = "cache.revalidate") -> PortalEvent:
    return PortalEvent(
        id=f"evt-{n}",
        type=event_type,
        subject="/x",
        occurred_at="2026-01-01T00:00:00",
        payload={"paths": [f"/p{n}"]},
    )


def test_recent_filters_by_type_and_limit():
    local = EventBroker(history_size=3)
    for n in range(4):
        local.publish(_event(n, "cache.revalidate" if n % 2 else "other"))

    assert [e.id for e in local.recent()] == ["evt-1", "evt-2", "evt-3"]
    assert [e.id for e in local.recent(event_type="cache.revalidate")] == ["evt-1", "evt-3"]
    assert [e.id for e in local.recent(limit=1)] == ["evt-3"]
    assert local.recent(limit=0) == []


def test_slow_subscriber_keeps_newest_events(monkeypatch):
    monkeypatch.setattr("portaldb.apps.events.broker.SUBSCRIBER_QUEUE_SIZE", 2)
    local = EventBroker()
    q = local.subscribe()
    for n in range(3):
        local.publish(_event(n))

    assert [q.get_nowait().id, q.get_nowait().id] == ["evt-1", "evt-2"]


def test_unsubscribed_queue_receives_nothing():
    local = EventBroker()
    q = local.subscribe()
    local.unsubscribe(q)
    local.publish(_event(1))

    assert q.empty()


def test_event_serialises_to_json():
    payload = json.loads(_event(7).to_json())

    assert payload["id"] == "evt-7"
    assert payload["payload"] == {"paths": ["/p7"]}
    assert payload["actor_user_id"] is None


def test_revalidate_paths_publishes_and_records(monkeypatch):
    local = EventBroker()
    monkeypatch.setattr(revalidation, "broker", local)
    monkeypatch.setattr(revalidation, "publish_event", local.publish)

    revalidation.revalidate_paths(["/a", "/b"], actor_user_id="USR-1", reason="test")
    revalidation.revalidate_paths(["/b", "/c"])

    [first, second] = local.recent()
    assert first.type == revalidation.REVALIDATE_EVENT_TYPE
    assert first.subject == "/a,/b"
    assert first.actor_user_id == "USR-1"
    assert first.payload == {"paths": ["/a", "/b"], "reason": "test"}
    assert second.actor_user_id is None
    assert revalidation.recently_revalidated_paths() == ["/b", "/c", "/a"]


def test_empty_path_list_publishes_nothing(monkeypatch):
    local = EventBroker()
    monkeypatch.setattr(revalidation, "publish_event", local.publish)

    revalidation.revalidate_paths([])

    assert local.recent() == []
