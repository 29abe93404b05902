"""Tests for churn and recency-weighted hotspots."""

from datetime import datetime, timedelta, timezone

import pytest

from git_analytics.index.builder import build_index
from git_analytics.metrics.hotspots import (
    decay,
    hotspot_sort_key,
    rank_hotspots,
    score_temporal_hotspots,
    temporal_sort_key,
)

T0 = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


class TestRankHotspots:
    """Test rank_hotspots function."""

    def test_scenario_order(self, scenario_index):
        result = rank_hotspots(scenario_index)

        assert [(h.path, h.lines_changed, h.commits) for h in result] == [
            ("a.txt", 17, 2),
            ("b.txt", 13, 2),
        ]
        assert (result[0].additions, result[0].deletions) == (15, 2)

    def test_lines_changed_is_sum(self, scenario_index):
        for h in rank_hotspots(scenario_index):
            assert h.lines_changed == h.additions + h.deletions

    def test_sorted_and_idempotent(self, make_commit):
        index = build_index(
            [
                make_commit("x3", 3, [("z.py", 5, 5), ("m.py", 5, 5)]),
                make_commit("x2", 2, [("a.py", 4, 6), ("m.py", 1, 0)]),
                make_commit("x1", 1, [("b.py", 10, 0)]),
            ]
        )
        result = rank_hotspots(index)
        assert result == sorted(result, key=hotspot_sort_key)
        # Ties on lines break by commits, then by path.
        assert [h.path for h in result] == ["m.py", "a.py", "b.py", "z.py"]

    def test_limit(self, scenario_index):
        assert [h.path for h in rank_hotspots(scenario_index, limit=1)] == ["a.txt"]

    def test_empty_index(self):
        assert rank_hotspots(build_index([])) == []


class TestDecay:
    """Test the hyperbolic decay weight."""

    def test_fresh_change_full_weight(self):
        assert decay(0) == 1.0

    def test_half_life(self):
        assert decay(30, 30) == pytest.approx(0.5)
        assert decay(7, 7) == pytest.approx(0.5)

    def test_monotonic_and_positive(self):
        weights = [decay(d) for d in range(0, 3650, 30)]
        assert all(a > b for a, b in zip(weights, weights[1:]))
        assert weights[-1] > 0

    def test_negative_age_clamped(self):
        assert decay(-5) == 1.0


class TestTemporalHotspots:
    """Test score_temporal_hotspots function."""

    def test_scores_use_reference_time(self, scenario_index):
        now = T0 + timedelta(days=10)
        result = score_temporal_hotspots(scenario_index, now=now, half_life_days=30)

        by_path = {h.path: h for h in result}
        assert by_path["a.txt"].days_since == 9
        assert by_path["b.txt"].days_since == 8
        assert by_path["a.txt"].score == pytest.approx(17 / (1 + 9 / 30))
        assert by_path["b.txt"].score == pytest.approx(13 / (1 + 8 / 30))
        assert by_path["b.txt"].last_changed == "2025-01-12"
        assert result == sorted(result, key=temporal_sort_key)

    def test_recent_small_change_beats_old_large_one(self, make_commit):
        index = build_index(
            [
                make_commit("new", 99, [("fresh.py", 20, 0)]),
                make_commit("old", 0, [("stale.py", 100, 0)]),
            ]
        )
        result = score_temporal_hotspots(index, now=T0 + timedelta(days=100), half_life_days=7)
        assert [h.path for h in result] == ["fresh.py", "stale.py"]

    def test_defaults_to_window_end(self, scenario_commits):
        end = T0 + timedelta(days=32)
        index = build_index(scenario_commits, end=end)
        by_path = {h.path: h for h in score_temporal_hotspots(index)}
        assert by_path["a.txt"].days_since == 31

    def test_change_after_reference_counts_as_fresh(self, scenario_index):
        result = score_temporal_hotspots(scenario_index, now=T0)
        assert all(h.days_since == 0 for h in result)
        assert {h.path: h.score for h in result} == {"a.txt": 17.0, "b.txt": 13.0}
