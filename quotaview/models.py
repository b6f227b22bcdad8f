"""Snapshot data handed to the renderers by the collectors."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, NamedTuple


class Status(str, Enum):
    OK = "OK"
    NEAR_LIMIT = "NEAR_LIMIT"
    LIMITED = "LIMITED"
    AUTH_REQUIRED = "AUTH_REQUIRED"
    UNSUPPORTED = "UNSUPPORTED"
    ERROR = "ERROR"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, raw: Any) -> "Status":
        try:
            return cls(str(raw or "").strip().upper())
        except ValueError:
            return cls.UNKNOWN


class TimePoint(NamedTuple):
    date: str
    value: float


@dataclass(frozen=True)
class Series:
    label: str
    color: str
    points: tuple[TimePoint, ...] = ()

    def has_positive(self) -> bool:
        return any(p.value > 0 for p in self.points)


def to_float(raw: Any) -> float | None:
    """Lenient number parsing: anything unusable becomes None."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if value != value or value in (float("inf"), float("-inf")):
        return None
    return value


def _mapping(raw: Any) -> Mapping[str, Any]:
    return raw if isinstance(raw, Mapping) else {}


@dataclass(frozen=True)
class Metric:
    used: float | None = None
    limit: float | None = None
    remaining: float | None = None
    unit: str = ""
    window: str = ""

    def remaining_percent(self) -> float:
        """Remaining share of the limit (0-100), or -1 when not computable."""
        if self.limit is not None and self.limit > 0:
            if self.remaining is not None:
                return self.remaining / self.limit * 100
            if self.used is not None:
                return (self.limit - self.used) / self.limit * 100
        return -1

    def used_percent(self) -> float:
        pct = self.remaining_percent()
        if pct < 0:
            return -1
        return 100 - pct

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Metric":
        return cls(
            used=to_float(data.get("used")),
            limit=to_float(data.get("limit")),
            remaining=to_float(data.get("remaining")),
            unit=str(data.get("unit") or ""),
            window=str(data.get("window") or ""),
        )


@dataclass(frozen=True)
class Snapshot:
    provider_id: str
    account_id: str
    status: Status = Status.UNKNOWN
    message: str = ""
    metrics: Mapping[str, Metric] = field(default_factory=dict)
    series: Mapping[str, tuple[TimePoint, ...]] = field(default_factory=dict)
    models: Mapping[str, float] = field(default_factory=dict)

    @property
    def title(self) -> str:
        if self.account_id and self.account_id != self.provider_id:
            return f"{self.provider_id}:{self.account_id}"
        return self.provider_id

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Snapshot":
        metrics = {
            str(key): Metric.from_dict(value)
            for key, value in _mapping(data.get("metrics")).items()
            if isinstance(value, Mapping)
        }
        series = {}
        for key, points in _mapping(data.get("series")).items():
            parsed = []
            for p in points if isinstance(points, list) else []:
                if not isinstance(p, Mapping) or not p.get("date"):
                    continue
                parsed.append(TimePoint(str(p["date"]), to_float(p.get("value")) or 0.0))
            series[str(key)] = tuple(sorted(parsed))
        models = {}
        for name, value in _mapping(data.get("models")).items():
            v = to_float(value)
            if v is not None:
                models[str(name)] = v
        provider = str(data.get("provider_id") or data.get("provider") or "unknown")
        return cls(
            provider_id=provider,
            account_id=str(data.get("account_id") or provider),
            status=Status.parse(data.get("status")),
            message=str(data.get("message") or ""),
            metrics=metrics,
            series=series,
            models=models,
        )
