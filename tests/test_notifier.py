"""Tests for the notifier fan-out."""
from freeki.shared.core.notifier import Notifier, Subscription


def _sub(sub_id, path, log):
    def callback(changed_path, new_value, old_value):
        log.append((sub_id, changed_path, new_value, old_value))
    return Subscription(sub_id, path, callback)


def test_notify_skips_unaffected_and_counts_invoked():
    log = []
    subs = [
        _sub(1, "adminSettings", log),
        _sub(2, "userSettings", log),
        _sub(3, "", log),
    ]

    invoked = Notifier().notify(subs, "adminSettings.wikiTitle", "New", "Old")

    assert invoked == 2
    assert log == [
        (1, "adminSettings.wikiTitle", "New", "Old"),
        (3, "adminSettings.wikiTitle", "New", "Old"),
    ]


def test_notify_isolates_failures():
    log = []

    def broken(changed_path, new_value, old_value):
        raise ValueError("subscriber bug")

    subs = [Subscription(1, "", broken), _sub(2, "", log)]

    invoked = Notifier().notify(subs, "searchQuery", "x", "")

    assert invoked == 2
    assert log == [(2, "searchQuery", "x", "")]


def test_each_subscriber_gets_its_own_copy():
    seen = []

    def mutate(changed_path, new_value, old_value):
        new_value.append("mutated")

    def record(changed_path, new_value, old_value):
        seen.append(new_value)

    value = ["a"]
    Notifier().notify(
        [Subscription(1, "", mutate), Subscription(2, "", record)],
        "userSettings.searchHistory",
        value,
        [],
    )

    assert seen == [["a"]]
    assert value == ["a"]
