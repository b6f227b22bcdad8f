"""Formatting callbacks handed to the chart renderers."""

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_tokens(t: float) -> str:
    if t >= 1_000_000:
        return f"{t/1_000_000:.1f}M"
    if t >= 1_000:
        return f"{t/1_000:.1f}K"
    return str(int(t))


def format_usd(v: float) -> str:
    if v >= 1000:
        return f"${v:,.0f}"
    return f"${v:.2f}"


def format_chart_value(v: float) -> str:
    if v >= 1_000_000:
        return f"{v/1_000_000:.1f}M"
    if v >= 1_000:
        return f"{v/1_000:.1f}K"
    if v == int(v):
        return str(int(v))
    return f"{v:.1f}"


def format_cost_axis(v: float) -> str:
    if v == 0:
        return "$0"
    if v >= 10_000:
        return f"${v/1000:.0f}K"
    if v >= 1_000:
        return f"${v/1000:.1f}K"
    if v >= 100:
        return f"${v:.0f}"
    if v >= 1:
        return f"${v:.1f}"
    return f"${v:.2f}"


def format_date_label(d: str) -> str:
    """'2025-03-07' -> 'Mar 7'. Anything shorter than a full date is returned as is."""
    if len(d) < 10:
        return d
    month_num = d[5:7]
    month = MONTHS[int(month_num) - 1] if month_num.isdigit() and 1 <= int(month_num) <= 12 else month_num
    day = d[8:10].lstrip("0") or "0"
    return f"{month} {day}"


def truncate_label(label: str, width: int) -> str:
    if width <= 0:
        return ""
    if len(label) > width:
        return label[:width - 1] + "…"
    return label
