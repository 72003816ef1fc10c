"""Tests for CLI commands."""

import json
from pathlib import Path

from typer.testing import CliRunner

from finflow.cli.main import app

runner = CliRunner()


class TestStatusCommand:
    """Tests for 'finflow status'."""

    def test_shows_snapshot(self, snapshot_file: Path) -> None:
        result = runner.invoke(app, ["status", "--snapshot", str(snapshot_file), "--date", "2025-01-15"])
        assert result.exit_code == 0, result.output
        assert "Status for Jan 2025" in result.output
        assert "Groceries" in result.output
        assert "1 records skipped as invalid" in result.output

    def test_invalid_date(self, snapshot_file: Path) -> None:
        result = runner.invoke(app, ["status", "--snapshot", str(snapshot_file), "--date", "someday"])
        assert result.exit_code == 1
        assert "Invalid date" in result.output

    def test_missing_snapshot(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["status", "--snapshot", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "Snapshot file not found" in result.output

    def test_missing_config(self, tmp_path: Path, snapshot_file: Path) -> None:
        result = runner.invoke(
            app,
            ["status", "--snapshot", str(snapshot_file), "--config", str(tmp_path / "none.yaml")],
        )
        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestBudgetsCommand:
    """Tests for 'finflow budgets'."""

    def test_table(self, snapshot_file: Path) -> None:
        result = runner.invoke(app, ["budgets", "--snapshot", str(snapshot_file), "--date", "2025-01-15"])
        assert result.exit_code == 0, result.output
        assert "Food" in result.output
        assert "125.0%" in result.output

    def test_no_budgets(self, tmp_path: Path) -> None:
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps({"transactions": [], "budgets": []}), encoding="utf-8")
        result = runner.invoke(app, ["budgets", "--snapshot", str(path)])
        assert result.exit_code == 0
        assert "No budgets defined" in result.output


class TestTrendCommand:
    """Tests for 'finflow trend'."""

    def test_months_in_order(self, snapshot_file: Path) -> None:
        result = runner.invoke(app, ["trend", "--snapshot", str(snapshot_file)])
        assert result.exit_code == 0, result.output
        assert result.output.index("Dec 2024") < result.output.index("Jan 2025")

    def test_inflow_only_month_listed(self, tmp_path: Path) -> None:
        path = tmp_path / "snapshot.json"
        record = {"_id": "s1", "description": "Salary", "amount": 500, "type": "credit", "date": "2025-03-01"}
        path.write_text(json.dumps({"transactions": [record]}), encoding="utf-8")
        result = runner.invoke(app, ["trend", "--snapshot", str(path)])
        assert result.exit_code == 0, result.output
        assert "Mar 2025" in result.output

    def test_empty_snapshot(self, tmp_path: Path) -> None:
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps({"transactions": []}), encoding="utf-8")
        result = runner.invoke(app, ["trend", "--snapshot", str(path)])
        assert result.exit_code == 0
        assert "No transactions found" in result.output


class TestReportCommand:
    """Tests for 'finflow report'."""

    def test_writes_json(self, snapshot_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "out" / "report.json"
        result = runner.invoke(
            app,
            ["report", "--snapshot", str(snapshot_file), "--date", "2025-01-15", "--output", str(output)],
        )
        assert result.exit_code == 0, result.output
        document = json.loads(output.read_text(encoding="utf-8"))
        assert document["snapshot"]["total_inflow"] == 50.0
        assert document["currency"] == "INR"
