"""Integration tests for the cutplan CLI.

These tests run the typer app end-to-end on the JSON job fixtures:
- pack prints text and JSON cutting plans
- suggest ranks inventory sheets and lists the remnants the best plan leaves
- check validates cut dimensions and sets the exit code
- load errors exit with code 1
"""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cutplan.cli.main import app


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


class TestPackCommand:
    """Tests for the pack command."""

    def test_text_report(self, runner: CliRunner, fixtures_path: Path) -> None:
        result = runner.invoke(app, ["pack", str(fixtures_path / "manual_sheet.json")])

        assert result.exit_code == 0
        assert "CUTTING PLAN" in result.output
        assert "Utilization: 72.0%" in result.output
        assert "CUT SEQUENCE" in result.output

    def test_json_report(self, runner: CliRunner, fixtures_path: Path) -> None:
        result = runner.invoke(
            app, ["pack", str(fixtures_path / "machine_sheet.json"), "--format", "json"]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["placed_count"] == 8
        assert data["is_complete"] is True
        assert data["utilization"] == pytest.approx(20.0)

    def test_job_without_sheet(self, runner: CliRunner, fixtures_path: Path) -> None:
        result = runner.invoke(app, ["pack", str(fixtures_path / "inventory_order.json")])

        assert result.exit_code == 1
        assert "no 'sheet'" in result.output

    def test_missing_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["pack", str(tmp_path / "nope.json")])

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_invalid_json(self, runner: CliRunner, fixtures_path: Path) -> None:
        result = runner.invoke(app, ["pack", str(fixtures_path / "invalid_json.json")])

        assert result.exit_code == 1
        assert "Invalid JSON syntax" in result.output
        assert "Line 3" in result.output

    def test_validation_error(self, runner: CliRunner, tmp_path: Path) -> None:
        job = tmp_path / "job.json"
        job.write_text(
            json.dumps(
                {
                    "schema_version": "1.0",
                    "sheet": {"width": 100, "height": 100},
                    "cuts": [{"id": "a", "width": 0, "height": 10}],
                }
            )
        )

        result = runner.invoke(app, ["pack", str(job)])

        assert result.exit_code == 1
        assert "cuts[0].width" in result.output


class TestSuggestCommand:
    """Tests for the suggest command."""

    def test_text_report(self, runner: CliRunner, fixtures_path: Path) -> None:
        result = runner.invoke(app, ["suggest", str(fixtures_path / "inventory_order.json")])

        assert result.exit_code == 0
        assert "#1 remnants_only (recommended)" in result.output
        assert "G-1" not in result.output

    def test_json_with_limit(self, runner: CliRunner, fixtures_path: Path) -> None:
        result = runner.invoke(
            app,
            ["suggest", str(fixtures_path / "inventory_order.json"), "--format", "json", "--max", "1"],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data["suggestions"]) == 1
        assert data["suggestions"][0]["sheets_used"] == ["R-17"]

    def test_reports_new_inventory_remnants(self, runner: CliRunner, tmp_path: Path) -> None:
        job = tmp_path / "order.json"
        job.write_text(
            json.dumps(
                {
                    "schema_version": "1.0",
                    "cuts": [{"id": "pane", "width": 300, "height": 300}],
                    "inventory": [
                        {"id": "S-1", "material_type": "glass", "thickness": 4, "width": 1000, "height": 800}
                    ],
                    "order": {"id": "ORD-77", "material_type": "glass", "thickness": 4},
                }
            )
        )

        text = runner.invoke(app, ["suggest", str(job)])
        as_json = runner.invoke(app, ["suggest", str(job), "--format", "json"])

        assert text.exit_code == 0
        assert "NEW INVENTORY REMNANTS (1)" in text.output
        assert "S-1-R1" in text.output
        assert "order ORD-77" in text.output
        records = json.loads(as_json.stdout)["new_inventory_remnants"]
        assert [(r["id"], r["parent_sheet_id"], r["source_order_id"]) for r in records] == [
            ("S-1-R1", "S-1", "ORD-77")
        ]

    def test_job_without_order(self, runner: CliRunner, fixtures_path: Path) -> None:
        result = runner.invoke(app, ["suggest", str(fixtures_path / "manual_sheet.json")])

        assert result.exit_code == 1
        assert "no 'order'" in result.output


class TestCheckCommand:
    """Tests for the check command."""

    def test_danger_exits_with_two(self, runner: CliRunner, fixtures_path: Path) -> None:
        result = runner.invoke(app, ["check", str(fixtures_path / "narrow_strips.json")])

        assert result.exit_code == 2
        assert "[FAIL] strip" in result.output
        assert "[WARN] border" in result.output
        assert "[OK  ] panel" in result.output
        assert "Recommendation:" in result.output

    def test_safe_job(self, runner: CliRunner, fixtures_path: Path) -> None:
        result = runner.invoke(app, ["check", str(fixtures_path / "manual_sheet.json")])

        assert result.exit_code == 0
        assert "FAIL" not in result.output
