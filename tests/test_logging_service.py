import logging

import pytest

from prefsync.services.event_bus import EventBus, PrefEvent
from prefsync.services.logging_service import LoggingService


@pytest.fixture()
def setup_logging():
    bus = EventBus()
    svc = LoggingService(bus, capacity=5)
    svc.attach()
    yield svc, bus
    svc.detach()


def test_logging_capture_and_retrieve(setup_logging):
    svc, _ = setup_logging
    logging.getLogger("prefsync.alpha").info("Hello World")
    assert any(e.message == "Hello World" for e in svc.recent())


def test_records_outside_package_ignored(setup_logging):
    svc, _ = setup_logging
    logging.getLogger("elsewhere").warning("not ours")
    assert all(e.message != "not ours" for e in svc.recent())


def test_logging_capacity_eviction(setup_logging):
    svc, _ = setup_logging
    for i in range(10):
        logging.getLogger("prefsync.cap").info("M%d", i)
    recents = svc.recent()
    assert len(recents) == 5  # capacity
    assert recents[0].message.endswith("5")  # first retained after evictions


def test_logging_filtering(setup_logging):
    svc, _ = setup_logging
    logging.getLogger("prefsync.one").info("info msg")
    logging.getLogger("prefsync.two").warning("warn msg")
    assert [e.message for e in svc.filter(level="WARNING")] == ["warn msg"]
    assert [e.message for e in svc.filter(name_contains="one")] == ["info msg"]


def test_log_record_event_published(setup_logging):
    svc, bus = setup_logging
    received = []
    bus.subscribe(PrefEvent.LOG_RECORD_ADDED, lambda evt: received.append(evt.payload))
    logging.getLogger("prefsync.evt").info("x" * 200)
    assert received and received[-1]["name"] == "prefsync.evt"
    assert len(received[-1]["message"]) == 120


def test_export_jsonl(setup_logging, tmp_path):
    svc, _ = setup_logging
    logging.getLogger("prefsync.export").error("bad thing")
    out = tmp_path / "logs.jsonl"
    assert svc.export_jsonl(out, level="ERROR") == 1
    assert '"bad thing"' in out.read_text(encoding="utf-8")


def test_detach_stops_capture(setup_logging):
    svc, _ = setup_logging
    svc.detach()
    svc.clear()
    logging.getLogger("prefsync.after").info("late")
    assert svc.recent() == []
    assert svc.attached is False


def test_detach_restores_logger_level():
    target = logging.getLogger("prefsync")
    previous = target.level
    target.setLevel(logging.WARNING)
    try:
        svc = LoggingService()
        svc.attach()
        assert target.level == logging.DEBUG
        svc.detach()
        assert target.level == logging.WARNING
    finally:
        target.setLevel(previous)


def test_engine_capture_logs(make_engine):
    ctx = make_engine(capture_logs=True)
    try:
        assert ctx.logging is not None and ctx.logging.attached
        ctx.theme.set_dark_mode(True)
        assert any("mode switched" in e.message for e in ctx.logging.recent())
    finally:
        ctx.logging.detach()
