from __future__ import annotations

import threading

from pearai_providers.telemetry import LocalUsageRecorder, TokenCounter
from pearai_providers.telemetry.token_counter import CHARS_PER_TOKEN


def test_disabled_by_default_and_toggleable():
    rec = LocalUsageRecorder()
    assert rec.is_enabled() is False  # nosec B101
    rec.set_enabled(True)
    assert rec.is_enabled() is True  # nosec B101


def test_capture_keeps_order_and_filters_by_name():
    rec = LocalUsageRecorder(enabled=True)
    rec.capture("a", {"tokens": 1, "model": "m"})
    rec.capture("b", {"tokens": 2, "model": "m"})
    rec.capture("a", {"tokens": 3, "model": "m"})
    assert [e.name for e in rec.events] == ["a", "b", "a"]  # nosec B101
    assert [e.properties["tokens"] for e in rec.events_named("a")] == [1, 3]  # nosec B101
    rec.clear()
    assert rec.events == []  # nosec B101


def test_max_events_drops_oldest():
    rec = LocalUsageRecorder(enabled=True, max_events=2)
    for i in range(4):
        rec.capture("e", {"tokens": i})
    assert [e.properties["tokens"] for e in rec.events] == [2, 3]  # nosec B101


def test_capture_is_thread_safe():
    rec = LocalUsageRecorder(enabled=True)

    def worker():
        for _ in range(50):
            rec.capture("e", {"tokens": 1})

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(rec.events) == 200  # nosec B101


def test_token_counter_estimate_mode():
    counter = TokenCounter(use_tiktoken=False)
    assert counter.encoding is None  # nosec B101
    assert counter.count("") == 0  # nosec B101
    assert counter.count("x" * (CHARS_PER_TOKEN * 2 + 1)) == 3  # nosec B101
