"""Google Places API usage accounting.

Counts calls per day, per month and in total, persists the counters as
JSON and compares the current month against the free monthly credit.
The file layout is shared with the web backend, hence the camelCase keys.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from recipefinder.configuration.settings import UsageSettings
from recipefinder.errors import UsageTrackingError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProviderUsage(BaseModel):
    """Call counters for one billed API."""

    daily: Dict[str, int] = Field(default_factory=dict)
    monthly: Dict[str, int] = Field(default_factory=dict)
    total: int = 0


class UsageStats(BaseModel):
    """Persisted usage counters."""

    model_config = ConfigDict(populate_by_name=True)

    google_places: ProviderUsage = Field(default_factory=ProviderUsage, alias="googlePlaces")
    last_updated: str = Field(default_factory=lambda: _utcnow().isoformat(), alias="lastUpdated")


class MonthAnalysis(BaseModel):
    """Current month usage against the free tier."""

    usage: int
    limit: int
    remaining_calls: int
    percentage_used: float
    estimated_cost: float
    within_free_limit: bool


def _month_key(moment: datetime) -> str:
    return moment.strftime("%Y-%m")


def _months_back(moment: datetime, months: int) -> str:
    index = moment.year * 12 + (moment.month - 1) - months
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


class ApiUsageTracker:
    """Tracks Google Places calls against the monthly free credit.

    Example:
        tracker = ApiUsageTracker(settings=UsageSettings())
        tracker.initialize()
        tracker.track_google_places_usage()
        print(tracker.get_current_month_analysis().remaining_calls)
    """

    def __init__(
        self,
        stats_path: Optional[Path] = None,
        settings: Optional[UsageSettings] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.settings = settings or UsageSettings()
        self.stats_path = Path(stats_path or self.settings.stats_path)
        self._clock = clock
        self.stats = UsageStats(last_updated=clock().isoformat())

    def initialize(self) -> None:
        """Load counters from disk; start fresh if missing or unreadable."""
        try:
            payload = json.loads(self.stats_path.read_text())
            self.stats = UsageStats.model_validate(payload)
            logger.debug(f"Loaded API usage stats from {self.stats_path}")
            return
        except FileNotFoundError:
            logger.info(f"No API usage stats at {self.stats_path}, starting fresh")
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable API usage stats at {self.stats_path}: {e}")
        self.stats = UsageStats(last_updated=self._clock().isoformat())
        self.save()

    def save(self, strict: bool = False) -> bool:
        """Write counters to disk.

        Args:
            strict: Raise instead of logging when the write fails

        Raises:
            UsageTrackingError: If ``strict`` and the file cannot be written
        """
        try:
            self.stats_path.parent.mkdir(parents=True, exist_ok=True)
            self.stats_path.write_text(
                json.dumps(self.stats.model_dump(by_alias=True), indent=2)
            )
            return True
        except OSError as e:
            if strict:
                raise UsageTrackingError(
                    f"Failed to save API usage stats: {e}",
                    details={"path": str(self.stats_path)},
                ) from e
            logger.error(f"Failed to save API usage stats to {self.stats_path}: {e}")
            return False

    def track_google_places_usage(self, strict: bool = False) -> MonthAnalysis:
        """Count one Google Places call and persist the counters.

        With ``strict`` a failed write raises :class:`UsageTrackingError`
        instead of leaving the call counted only in memory.
        """
        now = self._clock()
        today = now.strftime("%Y-%m-%d")
        month = _month_key(now)
        usage = self.stats.google_places

        usage.daily[today] = usage.daily.get(today, 0) + 1
        usage.monthly[month] = usage.monthly.get(month, 0) + 1
        usage.total += 1
        self.stats.last_updated = now.isoformat()

        self._cleanup_old_data(now)
        self.save(strict=strict)

        analysis = self.get_current_month_analysis()
        self._log_usage(today, month, analysis)
        return analysis

    def _cleanup_old_data(self, now: datetime) -> None:
        usage = self.stats.google_places
        cutoff_day = (now - timedelta(days=self.settings.daily_retention_days)).strftime("%Y-%m-%d")
        cutoff_month = _months_back(now, self.settings.monthly_retention_months)

        usage.daily = {day: n for day, n in usage.daily.items() if day >= cutoff_day}
        usage.monthly = {m: n for m, n in usage.monthly.items() if m >= cutoff_month}

    def _log_usage(self, today: str, month: str, analysis: MonthAnalysis) -> None:
        usage = self.stats.google_places
        cost = f"${analysis.estimated_cost:.2f}"
        logger.info(
            f"Google Places usage: today={usage.daily.get(today, 0)} "
            f"month={usage.monthly.get(month, 0)} remaining={analysis.remaining_calls} "
            f"used={analysis.percentage_used}% cost={cost}"
        )
        if analysis.percentage_used > self.settings.warning_threshold_percent:
            logger.warning(
                f"Used {analysis.percentage_used}% of the free Google Places limit this month"
            )
        if not analysis.within_free_limit:
            logger.warning(f"Free Google Places limit exceeded, estimated extra cost {cost}")

    def get_usage_stats(self) -> UsageStats:
        """Copy of the current counters."""
        return self.stats.model_copy(deep=True)

    def get_current_month_analysis(self) -> MonthAnalysis:
        month = _month_key(self._clock())
        usage = self.stats.google_places.monthly.get(month, 0)
        limit = self.settings.free_monthly_limit

        percentage = (usage / limit * 100) if limit else (100.0 if usage else 0.0)
        cost = max(0, usage - limit) * self.settings.cost_per_request
        return MonthAnalysis(
            usage=usage,
            limit=limit,
            remaining_calls=max(0, limit - usage),
            percentage_used=round(percentage, 2),
            estimated_cost=round(cost, 2),
            within_free_limit=usage <= limit,
        )
