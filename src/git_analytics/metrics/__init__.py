"""Metric computers: stateless reductions over a ChangeIndex."""

from .contributors import aggregate_contributors, contributor_sort_key
from .coupling import count_cochanges, coupling_sort_key, detect_coupling
from .dashboard import compute_dashboard_stats
from .heatmap import build_day_heatmap, build_hour_histogram
from .hotspots import (
    decay,
    hotspot_sort_key,
    rank_hotspots,
    score_temporal_hotspots,
    temporal_sort_key,
)
from .models import (
    CoChangePair,
    Contributor,
    DashboardStats,
    FileHotspot,
    FileOwnership,
    HeatmapDay,
    HourBucket,
    RepoInfo,
    TemporalHotspot,
)
from .ownership import analyze_ownership, ownership_sort_key

__all__ = [
    "CoChangePair",
    "Contributor",
    "DashboardStats",
    "FileHotspot",
    "FileOwnership",
    "HeatmapDay",
    "HourBucket",
    "RepoInfo",
    "TemporalHotspot",
    "aggregate_contributors",
    "analyze_ownership",
    "build_day_heatmap",
    "build_hour_histogram",
    "compute_dashboard_stats",
    "count_cochanges",
    "decay",
    "detect_coupling",
    "rank_hotspots",
    "score_temporal_hotspots",
    "contributor_sort_key",
    "coupling_sort_key",
    "hotspot_sort_key",
    "ownership_sort_key",
    "temporal_sort_key",
]
