from prefsync.services.event_bus import EventBus, PrefEvent


def test_engine_bus_is_wired_to_stores(engine):
    assert isinstance(engine.bus, EventBus)
    seen = []
    engine.bus.subscribe(PrefEvent.MODE_CHANGED, lambda evt: seen.append(evt.payload))
    engine.theme.set_dark_mode(True)
    assert seen == [{"is_dark_mode": True}]


def test_engines_do_not_share_a_bus(make_engine, tmp_path):
    a = make_engine(data_dir=tmp_path / "a")
    b = make_engine(data_dir=tmp_path / "b")
    assert a.bus is not b.bus


def test_subscribe_publish_basic():
    bus = EventBus()
    received = []

    def handler(evt):
        received.append((evt.name, evt.payload))

    bus.subscribe(PrefEvent.THEME_CHANGED, handler)
    bus.publish(PrefEvent.THEME_CHANGED, {"dark": True})
    assert received == [(PrefEvent.THEME_CHANGED.value, {"dark": True})]


def test_once_subscription():
    bus = EventBus()
    count = 0

    def incr(_):
        nonlocal count
        count += 1

    bus.subscribe(PrefEvent.SESSION_STARTED, incr, once=True)
    bus.publish(PrefEvent.SESSION_STARTED)
    bus.publish(PrefEvent.SESSION_STARTED)
    assert count == 1  # second publish ignored


def test_unsubscribe_during_dispatch():
    bus = EventBus()
    order = []
    subs = {}

    def first(_):
        order.append("first")
        bus.unsubscribe(subs["second"])

    def second(_):
        order.append("second")

    subs["first"] = bus.subscribe("custom", first)
    subs["second"] = bus.subscribe("custom", second)
    bus.publish("custom")
    assert order == ["first"]
    assert bus.subscriber_count("custom") == 1


def test_error_isolation():
    bus = EventBus()
    order = []

    def bad(_):
        order.append("bad")
        raise RuntimeError("boom")

    def good(_):
        order.append("good")

    bus.subscribe("custom", bad)
    bus.subscribe("custom", good)
    bus.publish("custom", 123)
    # Both handlers executed despite error
    assert order == ["bad", "good"]
    assert len(bus.errors) == 1


def test_reentrant_publish():
    bus = EventBus()
    seen = []
    bus.subscribe("outer", lambda _: bus.publish("inner", 1))
    bus.subscribe("inner", lambda evt: seen.append(evt.payload))
    bus.publish("outer")
    assert seen == [1]


def test_tracing_ring_buffer():
    bus = EventBus()
    bus.enable_tracing(capacity=3)
    for i in range(5):
        bus.publish("tick", {"i": i, "pad": "x" * 50})
    traces = bus.recent_traces()
    assert len(traces) == 3
    assert all(t[0] == "tick" for t in traces)
    assert all(len(t[2]) <= 40 for t in traces)


def test_clear_drops_subscriptions_and_errors():
    bus = EventBus()
    bus.subscribe("x", lambda _: 1 / 0)
    bus.publish("x")
    bus.clear()
    assert bus.subscriber_count("x") == 0
    assert bus.errors == []
