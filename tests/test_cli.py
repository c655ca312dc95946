import json
import sys
from pathlib import Path

import pytest
from adhook_analyzer import cli

FIXTURE = Path(__file__).parent / "fixtures" / "sample_ads.json"


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["adhook-analyzer", *args])
    cli.main()


def test_cli_hook(monkeypatch, capsys):
    run_cli(monkeypatch, "hook", "--text", "Buy now! Limited stock.")
    out = json.loads(capsys.readouterr().out)
    assert out == {"hookText": "Buy now!", "normalizedKey": "buy now"}


def test_cli_hooks_writes_output(monkeypatch, tmp_path):
    output = tmp_path / "groups.json"
    run_cli(monkeypatch, "hooks", "--file", str(FIXTURE), "--output", str(output))

    groups = json.loads(output.read_text(encoding="utf-8"))
    assert groups[0]["normalizedKey"] == "stop wasting money on coffee"
    assert groups[0]["frequency"] == 3


def test_cli_analyze_bad_file_exits(monkeypatch, tmp_path, capsys):
    missing = tmp_path / "missing.json"
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, "analyze", "--file", str(missing))
    assert exc.value.code == 1
    assert "Analysis failed" in capsys.readouterr().err
