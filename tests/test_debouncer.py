import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quicknotes.services.debouncer import Debouncer

INTERVAL_MS = 40


def _collect(debouncer):
    fired = []
    debouncer.settled.connect(lambda key, value: fired.append((key, value)))
    return fired


def test_burst_fires_once_with_last_value(qtbot):
    deb = Debouncer(interval_ms=INTERVAL_MS)
    fired = _collect(deb)

    with qtbot.waitSignal(deb.settled, timeout=2000) as blocker:
        for text in ("H", "He", "Hel", "Hell", "Hello"):
            deb.push("n1", text)

    assert blocker.args == ["n1", "Hello"]
    qtbot.wait(INTERVAL_MS * 4)
    assert fired == [("n1", "Hello")]
    assert not deb.is_pending


def test_each_push_restarts_the_quiet_period(qtbot):
    deb = Debouncer(interval_ms=250)
    fired = _collect(deb)

    deb.push("n1", "a")
    qtbot.wait(175)
    deb.push("n1", "ab")
    qtbot.wait(175)
    # longer than the interval since the first push, shorter since the last
    assert fired == []

    qtbot.waitUntil(lambda: fired == [("n1", "ab")], timeout=2000)


def test_separate_quiet_periods_fire_separately(qtbot):
    deb = Debouncer(interval_ms=INTERVAL_MS)
    fired = _collect(deb)

    deb.push("n1", "first")
    qtbot.waitUntil(lambda: len(fired) == 1, timeout=2000)
    deb.push("n1", "second")
    qtbot.waitUntil(lambda: len(fired) == 2, timeout=2000)

    assert fired == [("n1", "first"), ("n1", "second")]


def test_cancel_never_fires(qtbot):
    deb = Debouncer(interval_ms=INTERVAL_MS)
    fired = _collect(deb)

    deb.push("n1", "draft")
    assert deb.pending_key == "n1"
    deb.cancel()

    qtbot.wait(INTERVAL_MS * 4)
    assert fired == []
    assert deb.pending_key is None
