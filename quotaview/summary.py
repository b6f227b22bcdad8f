"""One-line summaries of a snapshot for tiles and navigators.

Snapshots from different providers carry different metric names. The summary
is chosen by walking ``SUMMARY_RULES`` in order and taking the first rule
that matches; adding a metric family means adding a rule, not a branch.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from .charts import Orientation
from .formatting import format_tokens
from .models import Snapshot, Status

logger = logging.getLogger(__name__)

CREDITS = ("Credits", "$")
USAGE = ("Usage", "⚡")

RATE_LIMIT_KEYS = ("rpm", "tpm", "rpd", "tpd")
QUOTA_KEYS = ("quota_pro", "quota", "quota_flash")


@dataclass(frozen=True)
class DisplayInfo:
    tag: str
    icon: str
    summary: str
    detail: str = ""
    gauge_percent: float = -1
    orientation: Orientation = Orientation.USED


@dataclass(frozen=True)
class SummaryRule:
    name: str
    matches: Callable[[Snapshot], bool]
    build: Callable[[Snapshot], DisplayInfo]


def _has(key: str, *fields: str) -> Callable[[Snapshot], bool]:
    def check(snap: Snapshot) -> bool:
        metric = snap.metrics.get(key)
        return metric is not None and all(getattr(metric, f) is not None for f in fields)
    return check


def _usage(summary: str, detail: str = "", gauge: float = -1,
           orientation: Orientation = Orientation.USED) -> DisplayInfo:
    return DisplayInfo(USAGE[0], USAGE[1], summary, detail, gauge, orientation)


def _credits(summary: str, detail: str = "", gauge: float = -1,
             orientation: Orientation = Orientation.USED) -> DisplayInfo:
    return DisplayInfo(CREDITS[0], CREDITS[1], summary, detail, gauge, orientation)


def _is_rate_key(key: str) -> bool:
    return key.startswith("rate_limit_") or key in RATE_LIMIT_KEYS


# ─────────────────────────────────────────────────────────────────────────────
# Rule builders
# ─────────────────────────────────────────────────────────────────────────────

def _error(snap: Snapshot) -> DisplayInfo:
    msg = snap.message or "Error"
    if len(msg) > 50:
        msg = msg[:47] + "..."
    return DisplayInfo("Error", "⚠", msg)


def _spend_limit(snap: Snapshot) -> DisplayInfo:
    m = snap.metrics["spend_limit"]
    remaining = m.remaining if m.remaining is not None else m.limit - m.used
    return _credits(f"${m.used:.0f} / ${m.limit:.0f} spent", f"${remaining:.0f} remaining",
                    m.used_percent())


def _plan_spend(snap: Snapshot) -> DisplayInfo:
    m = snap.metrics["plan_spend"]
    detail = ""
    pu = snap.metrics.get("plan_percent_used")
    if pu is not None and pu.used is not None:
        detail = f"{pu.used:.0f}% plan used"
    return _credits(f"${m.used:.0f} / ${m.limit:.0f} plan", detail, m.used_percent())


def _plan_total(snap: Snapshot) -> DisplayInfo:
    m = snap.metrics["plan_total_spend_usd"]
    lm = snap.metrics.get("plan_limit_usd")
    if lm is not None and lm.limit is not None:
        return _credits(f"${m.used:.2f} / ${lm.limit:.0f} plan")
    return _credits(f"${m.used:.2f} spent")


def _credits_metric(snap: Snapshot) -> DisplayInfo:
    m = snap.metrics["credits"]
    if m.remaining is not None and m.limit is not None:
        return _credits(f"${m.remaining:.2f} / ${m.limit:.2f} credits",
                        gauge=m.remaining_percent(), orientation=Orientation.REMAINING)
    if m.used is not None:
        return _credits(f"${m.used:.4f} used")
    return _credits("Credits available")


def _credit_balance(snap: Snapshot) -> DisplayInfo:
    m = snap.metrics["credit_balance"]
    if m.limit is not None:
        return _credits(f"${m.remaining:.2f} / ${m.limit:.2f}",
                        gauge=m.remaining_percent(), orientation=Orientation.REMAINING)
    return _credits(f"${m.remaining:.2f} balance")


def _total_balance(snap: Snapshot) -> DisplayInfo:
    m = snap.metrics["total_balance"]
    return _credits(f"{m.remaining:.2f} {m.unit} available".rstrip())


def _quota(snap: Snapshot) -> DisplayInfo:
    key = next(k for k in QUOTA_KEYS if k in snap.metrics)
    m = snap.metrics[key]
    pct = m.used_percent()
    summary = f"{pct:.0f}% usage used" if pct >= 0 else "Quota"
    detail = f"{m.remaining_percent():.0f}% usage left" if pct >= 0 else ""
    return _usage(summary, detail, pct)


def _context_window(snap: Snapshot) -> DisplayInfo:
    m = snap.metrics["context_window"]
    pct = m.used_percent()
    return _usage(f"{pct:.0f}% usage used" if pct >= 0 else "Context window",
                  f"{format_tokens(m.used)} / {format_tokens(m.limit)} tokens", pct)


def _rate_limits(snap: Snapshot) -> DisplayInfo:
    worst = 100.0
    parts = []
    for key in sorted(snap.metrics):
        if not _is_rate_key(key):
            continue
        pct = snap.metrics[key].remaining_percent()
        if pct < 0:
            continue
        worst = min(worst, pct)
        parts.append(f"{key.removeprefix('rate_limit_').upper()} {100 - pct:.0f}%")
    return _usage(f"{100 - worst:.0f}% used", " · ".join(parts), 100 - worst)


def _five_hour(snap: Snapshot) -> DisplayInfo:
    five = snap.metrics["usage_five_hour"].used
    gauge = five
    parts = [f"5h {five:.0f}%"]
    week = snap.metrics.get("usage_seven_day")
    if week is not None and week.used is not None:
        parts.append(f"7d {week.used:.0f}%")
        gauge = max(gauge, week.used)
    detail = []
    today = snap.metrics.get("today_api_cost")
    if today is not None and today.used is not None:
        detail.append(f"~${today.used:.2f} today")
    burn = snap.metrics.get("burn_rate")
    if burn is not None and burn.used is not None:
        detail.append(f"${burn.used:.2f}/h")
    return _usage(" · ".join(parts), " · ".join(detail), gauge)


def _today_cost(snap: Snapshot) -> DisplayInfo:
    parts = [f"~${snap.metrics['today_api_cost'].used:.2f} today"]
    burn = snap.metrics.get("burn_rate")
    if burn is not None and burn.used is not None:
        parts.append(f"${burn.used:.2f}/h")
    return _credits(" · ".join(parts))


def _worst_metric(snap: Snapshot) -> DisplayInfo:
    key = max(
        (k for k, m in snap.metrics.items() if m.used_percent() >= 0),
        key=lambda k: (snap.metrics[k].used_percent(), k),
    )
    pct = snap.metrics[key].used_percent()
    return _usage(f"{key} {pct:.0f}% used", gauge=pct)


SUMMARY_RULES = (
    SummaryRule("error", lambda s: s.status == Status.ERROR, _error),
    SummaryRule("auth", lambda s: s.status == Status.AUTH_REQUIRED,
                lambda s: DisplayInfo("Auth", "⚿", "Authentication required")),
    SummaryRule("unsupported", lambda s: s.status == Status.UNSUPPORTED,
                lambda s: DisplayInfo("N/A", "◇", "Not supported")),
    SummaryRule("spend_limit", _has("spend_limit", "used", "limit"), _spend_limit),
    SummaryRule("plan_spend", _has("plan_spend", "used", "limit"), _plan_spend),
    SummaryRule("plan_total_spend", _has("plan_total_spend_usd", "used"), _plan_total),
    SummaryRule("credits", lambda s: "credits" in s.metrics, _credits_metric),
    SummaryRule("credit_balance", _has("credit_balance", "remaining"), _credit_balance),
    SummaryRule("total_balance", _has("total_balance", "remaining"), _total_balance),
    SummaryRule("quota", lambda s: any(k in s.metrics for k in QUOTA_KEYS), _quota),
    SummaryRule("context_window", _has("context_window", "used", "limit"), _context_window),
    SummaryRule("rate_limits",
                lambda s: any(_is_rate_key(k) and m.remaining_percent() >= 0 for k, m in s.metrics.items()),
                _rate_limits),
    SummaryRule("five_hour", _has("usage_five_hour", "used"), _five_hour),
    SummaryRule("today_cost", _has("today_api_cost", "used"), _today_cost),
    SummaryRule("worst_metric", lambda s: any(m.used_percent() >= 0 for m in s.metrics.values()), _worst_metric),
)

NO_USAGE = DisplayInfo(USAGE[0], USAGE[1], "No usage data")


def compute_display_info(snap: Snapshot, rules=SUMMARY_RULES) -> DisplayInfo:
    for rule in rules:
        if rule.matches(snap):
            logger.debug("%s: summary from %s rule", snap.title, rule.name)
            return rule.build(snap)
    return NO_USAGE
