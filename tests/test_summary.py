"""Snapshot summary rules."""

from __future__ import annotations

import pytest

from quotaview.charts import Orientation
from quotaview.models import Metric, Snapshot, Status
from quotaview.summary import NO_USAGE, DisplayInfo, SummaryRule, compute_display_info

pytestmark = pytest.mark.unit


def snap(status=Status.OK, message="", **metrics) -> Snapshot:
    return Snapshot("acme", "acme", status=status, message=message, metrics=metrics)


def test_error_status_wins_over_metrics() -> None:
    info = compute_display_info(snap(Status.ERROR, "x" * 80, spend_limit=Metric(used=10, limit=100)))
    assert info.tag == "Error"
    assert info.summary == "x" * 47 + "..."
    assert info.gauge_percent == -1


def test_auth_and_unsupported_statuses() -> None:
    assert compute_display_info(snap(Status.AUTH_REQUIRED)).tag == "Auth"
    assert compute_display_info(snap(Status.UNSUPPORTED)).summary == "Not supported"


def test_spend_limit_is_used_orientation() -> None:
    info = compute_display_info(snap(spend_limit=Metric(used=25, limit=100)))
    assert info.tag == "Credits"
    assert info.summary == "$25 / $100 spent"
    assert info.detail == "$75 remaining"
    assert info.gauge_percent == 25
    assert info.orientation == Orientation.USED


def test_credits_gauge_shows_what_is_left() -> None:
    info = compute_display_info(snap(credits=Metric(remaining=30, limit=120)))
    assert info.summary == "$30.00 / $120.00 credits"
    assert info.gauge_percent == 25
    assert info.orientation == Orientation.REMAINING


def test_credit_balance_without_limit() -> None:
    info = compute_display_info(snap(credit_balance=Metric(remaining=4.5)))
    assert info.summary == "$4.50 balance"
    assert info.gauge_percent == -1


def test_quota_outranks_rate_limits() -> None:
    info = compute_display_info(snap(quota=Metric(remaining=20, limit=100), rpm=Metric(remaining=1, limit=100)))
    assert info.summary == "80% usage used"
    assert info.detail == "20% usage left"
    assert info.gauge_percent == 80


def test_rate_limits_report_worst_window() -> None:
    info = compute_display_info(snap(rpm=Metric(remaining=40, limit=100), tpm=Metric(remaining=90, limit=100)))
    assert info.summary == "60% used"
    assert info.detail == "RPM 60% · TPM 10%"
    assert info.gauge_percent == 60


def test_five_hour_window_with_weekly() -> None:
    info = compute_display_info(snap(
        usage_five_hour=Metric(used=30),
        usage_seven_day=Metric(used=55),
        today_api_cost=Metric(used=1.5),
    ))
    assert info.summary == "5h 30% · 7d 55%"
    assert info.detail == "~$1.50 today"
    assert info.gauge_percent == 55


def test_today_cost_alone() -> None:
    info = compute_display_info(snap(today_api_cost=Metric(used=2), burn_rate=Metric(used=0.25)))
    assert info.summary == "~$2.00 today · $0.25/h"


def test_fallback_picks_most_used_metric() -> None:
    info = compute_display_info(snap(a=Metric(used=10, limit=100), b=Metric(used=70, limit=100)))
    assert info.summary == "b 70% used"
    assert info.gauge_percent == 70


def test_no_metrics_means_no_usage() -> None:
    assert compute_display_info(snap()) == NO_USAGE
    assert compute_display_info(snap(a=Metric(used=3))) == NO_USAGE


def test_custom_rules_take_first_match() -> None:
    rules = (
        SummaryRule("never", lambda s: False, lambda s: DisplayInfo("x", "x", "never")),
        SummaryRule("always", lambda s: True, lambda s: DisplayInfo("y", "y", "always")),
        SummaryRule("later", lambda s: True, lambda s: DisplayInfo("z", "z", "later")),
    )
    assert compute_display_info(snap(), rules).summary == "always"
