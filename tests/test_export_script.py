from __future__ import annotations

import argparse
import asyncio
import importlib.util
import logging
import os
import subprocess
import sys
from pathlib import Path

from src.attendance_dashboard.attendance_dashboard.container import build_container

REPO_ROOT = Path(__file__).resolve().parents[1]
SCRIPT = REPO_ROOT / "scripts" / "export_report.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("export_report", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_script_runs_as_documented_from_repo_root():
    env = {k: v for k, v in os.environ.items() if k != "PYTHONPATH"}

    proc = subprocess.run(
        [sys.executable, "scripts/export_report.py", "--help"],
        cwd=REPO_ROOT,
        env=env,
        capture_output=True,
        text=True,
    )

    assert proc.returncode == 0, proc.stderr
    assert "last-week" in proc.stdout


def test_empty_export_writes_nothing_and_warns_once(monkeypatch, tmp_path, fake_source_cls, caplog, capsys):
    script = _load_script()
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr(script, "build_container", lambda **kwargs: build_container(source=fake_source_cls()))
    monkeypatch.setattr(script, "configure_logging", lambda level: None)
    args = argparse.Namespace(kind="day", format="csv", date="2024-06-07", class_id=None, out=str(tmp_path))

    with caplog.at_level(logging.WARNING):
        code = asyncio.run(script.run(args))

    assert code == 1
    assert list(tmp_path.iterdir()) == []
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1
    assert "No attendance data to export" in capsys.readouterr().err


def test_export_is_saved_to_output_directory(monkeypatch, tmp_path, fake_source_cls, raw):
    script = _load_script()
    source = fake_source_cls({script.parse_iso_date("2024-06-07"): [raw(1, "PRESENT")]})
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr(script, "build_container", lambda **kwargs: build_container(source=source))
    monkeypatch.setattr(script, "configure_logging", lambda level: None)
    args = argparse.Namespace(kind="day", format="xlsx", date="2024-06-07", class_id=None, out=str(tmp_path))

    code = asyncio.run(script.run(args))

    assert code == 0
    assert [p.name for p in tmp_path.iterdir()] == ["attendance-2024-06-07-all.xlsx"]
