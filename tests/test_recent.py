"""Tests for the recent repositories list."""

import json
from datetime import datetime, timedelta, timezone

from git_analytics.recent import MAX_RECENT, RecentRepos, default_config_dir


class TestRecentRepos:
    """Test RecentRepos persistence."""

    def test_missing_file_is_empty(self, tmp_path):
        assert RecentRepos.load(tmp_path).repos == []

    def test_round_trip(self, tmp_path):
        store = RecentRepos(tmp_path)
        store.add("/work/api", "api", now=datetime(2025, 1, 1, tzinfo=timezone.utc))
        store.save()

        loaded = RecentRepos.load(tmp_path)
        assert [(r.path, r.name) for r in loaded.repos] == [("/work/api", "api")]
        assert loaded.repos[0].opened_at.startswith("2025-01-01T00:00:00")

    def test_readding_moves_to_front(self, tmp_path):
        store = RecentRepos(tmp_path)
        store.add("/a", "a")
        store.add("/b", "b")
        store.add("/a", "a")
        assert [r.path for r in store.repos] == ["/a", "/b"]

    def test_capped(self, tmp_path):
        store = RecentRepos(tmp_path)
        start = datetime(2025, 1, 1, tzinfo=timezone.utc)
        for i in range(MAX_RECENT + 5):
            store.add(f"/repo{i}", f"repo{i}", now=start + timedelta(minutes=i))
        assert len(store.repos) == MAX_RECENT
        assert store.repos[0].path == f"/repo{MAX_RECENT + 4}"

    def test_remove(self, tmp_path):
        store = RecentRepos(tmp_path)
        store.add("/a", "a")
        store.remove("/a")
        assert store.repos == []

    def test_corrupt_file_ignored(self, tmp_path):
        (tmp_path / "recent.json").write_text("{not json")
        assert RecentRepos.load(tmp_path).repos == []

    def test_malformed_entries_skipped(self, tmp_path):
        payload = {
            "recent_repos": [
                {"path": "/ok", "name": "ok", "opened_at": "2025-01-01T00:00:00+00:00"},
                {"path": "/missing-fields"},
            ]
        }
        (tmp_path / "recent.json").write_text(json.dumps(payload))
        assert [r.path for r in RecentRepos.load(tmp_path).repos] == ["/ok"]

    def test_existing_filters_deleted_paths(self, tmp_path):
        store = RecentRepos(tmp_path)
        store.add(str(tmp_path), "here")
        store.add(str(tmp_path / "gone"), "gone")
        assert [r.name for r in store.existing()] == ["here"]


def test_default_config_dir_honours_xdg(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert default_config_dir() == tmp_path / "git-analytics"
