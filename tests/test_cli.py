from __future__ import annotations

import json
from pathlib import Path

import pytest

from parley.cli import main


def test_cli_plays_a_full_run(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--seed", "3", "--difficulty", "hard"]) == 0
    out = capsys.readouterr().out
    assert "The negotiation begins!" in out
    assert "Rating:" in out


def test_cli_writes_telemetry(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    log_path = tmp_path / "run.jsonl"
    assert main(["--seed", "8", "--quiet", "--telemetry", str(log_path)]) == 0
    out = capsys.readouterr().out.strip().splitlines()
    assert len(out) == 1 and out[0].startswith("Rating:")

    records = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert records[0]["type"] == "GAME_STARTED"
    assert records[-1]["type"] == "RUN_SETTLED"
    assert all(r["payload"]["category"] in ("info", "success", "fail") for r in records)
