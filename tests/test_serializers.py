"""Tests for JSON conversion of results."""

from datetime import date, datetime, timezone

from git_analytics.history.models import ChangeType
from git_analytics.metrics.models import CoChangePair, HeatmapDay
from git_analytics.serializers import to_jsonable


class TestToJsonable:
    def test_dataclass_list(self):
        result = to_jsonable([HeatmapDay(date="2025-01-01", count=2)])
        assert result == [{"date": "2025-01-01", "count": 2}]

    def test_floats_rounded(self):
        pair = CoChangePair("a.py", "b.py", 1, 3, 3, 1 / 3)
        assert to_jsonable(pair)["coupling_ratio"] == 0.333333

    def test_dates_enums_and_sets(self):
        value = {
            "when": datetime(2025, 1, 1, tzinfo=timezone.utc),
            "day": date(2025, 1, 2),
            "kind": ChangeType.RENAME,
            "files": frozenset({"b", "a"}),
        }
        assert to_jsonable(value) == {
            "when": "2025-01-01T00:00:00+00:00",
            "day": "2025-01-02",
            "kind": "rename",
            "files": ["a", "b"],
        }
