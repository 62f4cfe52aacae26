import logging

from emojigallery.services.observable import ObservableValue, set_all


def test_set_notifies_only_on_change():
    obs = ObservableValue(False, name="flag")
    seen = []
    obs.subscribe(seen.append)
    assert obs.set(True) is True
    assert obs.set(True) is False
    assert seen == [True]
    assert obs.value is True


def test_emit_current_on_subscribe():
    obs = ObservableValue(3)
    seen = []
    obs.subscribe(seen.append, emit_current=True)
    obs.set(4)
    assert seen == [3, 4]


def test_cancelled_subscription_stops_delivery():
    obs = ObservableValue("a")
    seen = []
    sub = obs.subscribe(seen.append)
    sub.cancel()
    sub.cancel()  # idempotent
    obs.set("b")
    assert seen == []
    assert obs.subscriber_count() == 0


def test_failing_subscriber_is_isolated(caplog):
    obs = ObservableValue(0, name="counter")
    seen = []

    def bad(_):
        raise RuntimeError("boom")

    obs.subscribe(bad)
    obs.subscribe(seen.append)
    with caplog.at_level(logging.ERROR):
        obs.set(1)
    assert seen == [1]
    assert "counter" in caplog.text


def test_subscriber_may_unsubscribe_during_dispatch():
    obs = ObservableValue(0)
    seen = []
    holder = {}

    def once(value):
        seen.append(value)
        holder["sub"].cancel()

    holder["sub"] = obs.subscribe(once)
    obs.set(1)
    obs.set(2)
    assert seen == [1]


def test_set_all_commits_before_notifying():
    left = ObservableValue(0, name="left")
    right = ObservableValue(0, name="right")
    seen = []
    left.subscribe(lambda v: seen.append(("left", v, right.value)))
    right.subscribe(lambda v: seen.append(("right", left.value, v)))
    set_all((left, 1), (right, 2))
    assert seen == [("left", 1, 2), ("right", 1, 2)]


def test_set_all_skips_unchanged_values():
    left = ObservableValue(0)
    right = ObservableValue(5)
    seen = []
    left.subscribe(seen.append)
    right.subscribe(seen.append)
    set_all((left, 1), (right, 5))
    assert seen == [1]
