"""Lenient snapshot parsing."""

from __future__ import annotations

from quotaview.models import Metric, Snapshot, Status, TimePoint, to_float


def test_to_float_rejects_unusable_values() -> None:
    assert to_float("2.5") == 2.5
    assert to_float(3) == 3.0
    for bad in (None, True, "abc", [], float("nan"), float("inf")):
        assert to_float(bad) is None


def test_metric_percentages() -> None:
    assert Metric(used=25, limit=100).used_percent() == 25
    assert Metric(remaining=10, limit=40).remaining_percent() == 25
    assert Metric(used=5).remaining_percent() == -1
    assert Metric(used=5, limit=0).used_percent() == -1


def test_snapshot_from_dict() -> None:
    snap = Snapshot.from_dict({
        "provider_id": "openai",
        "account_id": "work",
        "status": "near_limit",
        "metrics": {"spend_limit": {"used": "12", "limit": 50}, "junk": 3},
        "series": {"cost": [{"date": "2025-01-02", "value": 2}, {"date": "2025-01-01", "value": "x"}, "bad"]},
        "models": {"gpt": 3, "broken": "n/a"},
    })
    assert snap.title == "openai:work"
    assert snap.status == Status.NEAR_LIMIT
    assert snap.metrics == {"spend_limit": Metric(used=12.0, limit=50.0)}
    assert snap.series["cost"] == (TimePoint("2025-01-01", 0.0), TimePoint("2025-01-02", 2.0))
    assert snap.models == {"gpt": 3.0}


def test_snapshot_from_dict_tolerates_garbage() -> None:
    snap = Snapshot.from_dict({"provider": "x", "status": "weird", "metrics": [], "series": {"a": "nope"}})
    assert snap.title == "x"
    assert snap.status == Status.UNKNOWN
    assert snap.metrics == {}
    assert snap.series == {"a": ()}
