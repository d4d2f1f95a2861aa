"""CLI tests for the prioritize and generate commands."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path

from typer.testing import CliRunner

from insightflow.cli import cli


runner = CliRunner()


def _json_output(output: str) -> dict:
    lines = [line for line in output.splitlines() if line.startswith("{")]
    return json.loads(lines[-1])


def _write_insights(tmp_path: Path, wrap: bool = False) -> Path:
    end = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    records = [
        {
            "id": "plan",
            "title": "Unplanned weeks",
            "description": "You need to implement a clear plan",
            "category": "trends",
            "type": "pattern",
            "confidence": 0.8,
            "importance": 0.8,
            "actionability": 0.7,
            "novelty": 0.6,
            "timeframe": {"end": end},
        },
        {
            "id": "sleep",
            "title": "Late nights",
            "description": "Bedtime drifts later on weekends",
            "category": "wellbeing",
            "type": "observation",
            "confidence": 0.7,
            "importance": 0.6,
            "actionability": 0.5,
            "novelty": 0.4,
            "suggestedActions": ["Set an alarm for bedtime"],
            "timeframe": {"end": end},
        },
    ]
    path = tmp_path / "insights.json"
    path.write_text(json.dumps({"insights": records} if wrap else records))
    return path


def test_prioritize_json(tmp_path: Path) -> None:
    path = _write_insights(tmp_path)

    result = runner.invoke(cli, ["recommend", "prioritize", str(path), "--json"])

    assert result.exit_code == 0
    payload = _json_output(result.output)
    assert payload["total_insights_analyzed"] == 2
    assert {s["insight_id"] for s in payload["all_scores"]} == {"plan", "sleep"}


def test_prioritize_table(tmp_path: Path) -> None:
    path = _write_insights(tmp_path, wrap=True)

    result = runner.invoke(cli, ["recommend", "prioritize", str(path), "--purpose", "daily-review"])

    assert result.exit_code == 0
    assert "Selected insights" in result.output


def test_generate_json(tmp_path: Path) -> None:
    path = _write_insights(tmp_path)

    result = runner.invoke(cli, ["recommend", "generate", str(path), "--no-prioritize", "--json"])

    assert result.exit_code == 0
    payload = _json_output(result.output)
    assert payload["templates_used"] == ["basic-action"]
    titles = [rec["title"] for rec in payload["recommendations"]]
    assert "Take action on You need to" in titles


def test_generate_respects_max(tmp_path: Path) -> None:
    path = _write_insights(tmp_path)

    result = runner.invoke(
        cli, ["recommend", "generate", str(path), "--no-prioritize", "-n", "1", "--json"]
    )

    assert result.exit_code == 0
    assert len(_json_output(result.output)["recommendations"]) <= 1


def test_generate_table_with_domain(tmp_path: Path) -> None:
    path = _write_insights(tmp_path)

    result = runner.invoke(cli, ["recommend", "generate", str(path), "--domain", "wellness"])

    assert result.exit_code == 0
    assert "Recommendations" in result.output


def test_unknown_domain_rejected(tmp_path: Path) -> None:
    path = _write_insights(tmp_path)

    result = runner.invoke(cli, ["recommend", "generate", str(path), "--domain", "finance"])

    assert result.exit_code != 0


def test_invalid_json_file(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json")

    result = runner.invoke(cli, ["recommend", "generate", str(path), "--json"])

    assert result.exit_code == 1
    assert _json_output(result.output)["code"] == "INVALID_CONFIG"


def test_invalid_record(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{"id": "x", "category": "nonsense", "type": "pattern"}]))

    result = runner.invoke(cli, ["recommend", "prioritize", str(path)])

    assert result.exit_code == 1


def test_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(cli, ["recommend", "prioritize", str(tmp_path / "missing.json")])

    assert result.exit_code != 0
