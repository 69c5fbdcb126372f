"""Descriptive statistics for column sources."""

from pirload.stats.core import SourceStats, compute_stats, source_stats
from pirload.stats.reporter import StatsReporter

__all__ = ["SourceStats", "StatsReporter", "compute_stats", "source_stats"]
