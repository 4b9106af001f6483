from dinkhook.store import InMemoryNotificationStore


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_add_and_get(make_notification):
    store = InMemoryNotificationStore()
    n = make_notification("LOOT")
    rec = store.add(n, "fp-1")
    assert store.get(n.id) is rec
    assert rec.player_name == "Zezima"
    assert rec.status == "received"
    assert rec.envelope["type"] == "LOOT"


def test_duplicate_within_window_is_reported(make_notification):
    clock = FakeClock()
    store = InMemoryNotificationStore(dedup_window_seconds=30, clock=clock)
    n = make_notification("LOOT")
    store.add(n, "fp")
    store.set_status(n.id, "handled")
    clock.now += 10
    assert store.find_duplicate("fp").id == n.id
    assert store.duplicates == 1
    clock.now += 25
    assert store.find_duplicate("fp") is None


def test_failed_delivery_does_not_suppress_retry(make_notification):
    store = InMemoryNotificationStore(dedup_window_seconds=30, clock=FakeClock())
    n = make_notification("DEATH")
    store.add(n, "fp")
    store.set_status(n.id, "failed", error="boom")
    assert store.find_duplicate("fp") is None
    assert store.get(n.id).error == "boom"


def test_in_flight_delivery_suppresses_repeat(make_notification):
    store = InMemoryNotificationStore(dedup_window_seconds=30, clock=FakeClock())
    n = make_notification("LOOT")
    store.add(n, "fp")
    # still "received": handlers have not finished yet
    assert store.find_duplicate("fp").id == n.id


def test_zero_window_disables_dedup(make_notification):
    store = InMemoryNotificationStore(dedup_window_seconds=0, clock=FakeClock())
    n = make_notification("PET")
    store.add(n, "fp")
    store.set_status(n.id, "handled")
    assert store.find_duplicate("fp") is None


def test_history_is_bounded(make_notification):
    store = InMemoryNotificationStore(history_size=2)
    ns = [make_notification("QUEST") for _ in range(3)]
    for i, n in enumerate(ns):
        store.add(n, f"fp-{i}")
    assert len(store) == 2
    assert store.get(ns[0].id) is None
    assert store.total_received == 3


def test_list_filters_newest_first(make_notification):
    store = InMemoryNotificationStore()
    a = make_notification("LOOT")
    b = make_notification("DEATH")
    c = make_notification("LOOT", playerName="Lynx Titan")
    for i, n in enumerate((a, b, c)):
        store.add(n, f"fp-{i}")
    assert [r.id for r in store.list()] == [c.id, b.id, a.id]
    assert [r.id for r in store.list(event_type="LOOT")] == [c.id, a.id]
    assert [r.id for r in store.list(player="zezima")] == [b.id, a.id]
    assert len(store.list(limit=1)) == 1


def test_stats(make_notification):
    store = InMemoryNotificationStore()
    a = make_notification("LOOT")
    b = make_notification("TRADE")
    store.add(a, "a")
    store.add(b, "b")
    store.set_status(a.id, "handled")
    stats = store.stats()
    assert stats["by_type"] == {"LOOT": 1, "TRADE": 1}
    assert stats["by_status"] == {"handled": 1, "received": 1}
    assert stats["by_player"] == {"Zezima": 2}
    assert stats["retained"] == 2


def test_record_to_dict_describes_attachment(make_notification):
    from dinkhook.intake import Attachment

    store = InMemoryNotificationStore()
    n = make_notification("COLLECTION")
    n.attachment = Attachment(filename="image.png", content_type="image/png", data=b"1234")
    rec = store.add(n, "fp")
    out = rec.to_dict(include_envelope=False)
    assert out["attachment"] == {"filename": "image.png", "content_type": "image/png", "size": 4}
    assert "envelope" not in out
