"""Billed third-party API usage accounting."""

from recipefinder.usage.tracker import ApiUsageTracker, MonthAnalysis, ProviderUsage, UsageStats

__all__ = ["ApiUsageTracker", "MonthAnalysis", "ProviderUsage", "UsageStats"]
