"""Tests for the git-analytics command line."""

import json
from datetime import date

import pytest
import typer
from typer.testing import CliRunner

from git_analytics import __version__
from git_analytics.cli import app
from git_analytics.cli._common import resolve_window

runner = CliRunner()
WINDOW = ["--from", "2025-01-01", "--to", "2025-02-01"]


def invoke(repo, *args):
    return runner.invoke(app, ["--repo", str(repo), "--no-record", *args])


class TestResolveWindow:
    """Test resolve_window function."""

    TODAY = date(2025, 6, 15)

    def test_default_preset(self):
        assert resolve_window(None, None, None, today=self.TODAY) == ("2024-12-15", "2025-06-16")

    def test_named_presets(self):
        assert resolve_window(None, None, "30d", today=self.TODAY)[0] == "2025-05-16"
        assert resolve_window(None, None, "1YR", today=self.TODAY)[0] == "2024-06-15"
        assert resolve_window(None, None, "all", today=self.TODAY)[0] == "1970-01-01"

    def test_explicit_dates_win(self):
        assert resolve_window("2025-01-01", None, "30d", today=self.TODAY) == (
            "2025-01-01",
            "2025-06-16",
        )
        assert resolve_window(None, "2025-03-01", None, today=self.TODAY) == (
            "1970-01-01",
            "2025-03-01",
        )

    def test_unknown_preset(self):
        with pytest.raises(typer.BadParameter):
            resolve_window(None, None, "2w", today=self.TODAY)


class TestCommands:
    """Run each command against the three-commit repository."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_hotspots_json(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "hotspots", *WINDOW, "--json")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [(h["path"], h["lines_changed"]) for h in data] == [("a.txt", 17), ("b.txt", 13)]

    def test_hotspots_table(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "hotspots", *WINDOW)
        assert result.exit_code == 0, result.output
        assert "a.txt" in result.stdout

    def test_exclude_and_top(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "hotspots", *WINDOW, "-x", "a.txt", "--top", "5", "--json")
        assert [h["path"] for h in json.loads(result.stdout)] == ["b.txt"]

    def test_temporal(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "temporal", *WINDOW, "--half-life", "7", "--json")
        assert result.exit_code == 0, result.output
        assert {h["path"] for h in json.loads(result.stdout)} == {"a.txt", "b.txt"}

    def test_ownership(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "ownership", *WINDOW, "--json")
        data = json.loads(result.stdout)
        assert data[0]["path"] == "b.txt"
        assert data[0]["top_author_pct"] == 1.0

    def test_contributors_table(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "contributors", *WINDOW)
        assert result.exit_code == 0, result.output
        assert "Alice" in result.stdout
        assert "Bob" in result.stdout

    def test_coupling(self, scenario_repo, isolated_home):
        default = invoke(scenario_repo.path, "coupling", *WINDOW, "--json")
        assert json.loads(default.stdout) == []
        relaxed = invoke(scenario_repo.path, "coupling", *WINDOW, "--min-count", "1", "--json")
        (pair,) = json.loads(relaxed.stdout)
        assert pair["coupling_ratio"] == 0.5

    def test_stats(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "stats", *WINDOW, "--json")
        assert json.loads(result.stdout) == {
            "commits": 3,
            "contributors": 2,
            "additions": 25,
            "deletions": 5,
            "files_changed": 2,
        }

    def test_heatmap(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "heatmap", *WINDOW, "--json")
        data = json.loads(result.stdout)
        assert len(data) == 31
        assert sum(d["count"] for d in data) == 3

        table = invoke(scenario_repo.path, "heatmap", *WINDOW, "--author", "bob@example.com")
        assert "2025-01-11" in table.stdout
        assert "1 active of 31 days" in table.stdout

    def test_hours(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "hours", *WINDOW, "--json")
        data = json.loads(result.stdout)
        assert len(data) == 24
        assert data[14] == {"hour": 14, "count": 1}

    def test_info(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "info", "--json")
        data = json.loads(result.stdout)
        assert data["branch"] == "main"
        assert data["last_message"] == "C3"


class TestErrors:
    """Failures exit non-zero with a readable message."""

    def test_missing_repository(self, tmp_path, isolated_home):
        result = invoke(tmp_path / "missing", "hotspots", *WINDOW)
        assert result.exit_code == 1
        assert "Repository unavailable" in result.stdout

    def test_bad_date_json(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "hotspots", "--from", "01/02/2025", "--json")
        assert result.exit_code == 1
        assert json.loads(result.stdout)["error_code"] == "GA100"

    def test_bad_pattern(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "ownership", *WINDOW, "-x", "src/[")
        assert result.exit_code == 1
        assert "Invalid exclude pattern" in result.stdout

    def test_unknown_preset(self, scenario_repo, isolated_home):
        result = invoke(scenario_repo.path, "hotspots", "--last", "2w")
        assert result.exit_code == 2


class TestRecent:
    """Analysed repositories are remembered unless --no-record is given."""

    def test_recorded_and_listed(self, scenario_repo, isolated_home):
        runner.invoke(app, ["--repo", str(scenario_repo.path), "stats", *WINDOW])

        result = runner.invoke(app, ["recent", "--json"])
        assert result.exit_code == 0, result.output
        (entry,) = json.loads(result.stdout)
        assert entry["path"] == str(scenario_repo.path.resolve())
        assert entry["name"] == "repo"

    def test_no_record(self, scenario_repo, isolated_home):
        invoke(scenario_repo.path, "stats", *WINDOW)
        result = runner.invoke(app, ["recent", "--json"])
        assert json.loads(result.stdout) == []

    def test_remove(self, scenario_repo, isolated_home):
        runner.invoke(app, ["--repo", str(scenario_repo.path), "info"])
        path = str(scenario_repo.path.resolve())

        result = runner.invoke(app, ["recent", "--remove", path])
        assert result.exit_code == 0
        assert json.loads(runner.invoke(app, ["recent", "--json"]).stdout) == []
