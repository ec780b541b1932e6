"""Export an attendance report to EXPORT_DIR without going through Flask.

Usage:
    python scripts/export_report.py last-week xlsx --class-id 3
    python scripts/export_report.py day pdf --date 2024-06-07
"""

from __future__ import annotations

import argparse
import asyncio
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_dashboard.attendance_dashboard.common.datetime_utils import parse_iso_date, today_local
from src.attendance_dashboard.attendance_dashboard.container import build_container
from src.attendance_dashboard.attendance_dashboard.core.enums import ExportFormat
from src.attendance_dashboard.attendance_dashboard.main import configure_logging


async def run(args: argparse.Namespace) -> int:
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(api_config=settings.API_CONFIG, window_days=settings.WINDOW_DAYS)
    service = container.dashboard_service
    fmt = ExportFormat(args.format)

    if args.kind == "day":
        day = parse_iso_date(args.date) if args.date else today_local()
        result = await service.export_day(day, fmt, class_id=args.class_id)
    else:
        result = await service.export_last_week(fmt, class_id=args.class_id, today=today_local())

    path = container.exporter.save(result, Path(args.out or settings.EXPORT_DIR))
    if path is None:
        print(f"Nothing written: {result.warning}", file=sys.stderr)
        return 1
    print(f"OK: {path}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Export attendance reports")
    parser.add_argument("kind", choices=["day", "last-week"])
    parser.add_argument("format", choices=[f.value for f in ExportFormat])
    parser.add_argument("--date", help="YYYY-MM-DD, defaults to today (day reports only)")
    parser.add_argument("--class-id", type=int, default=None)
    parser.add_argument("--out", help="Output directory, defaults to EXPORT_DIR")
    args = parser.parse_args()
    if args.kind == "last-week" and args.format == ExportFormat.CSV.value:
        parser.error("last-week reports are available as xlsx or pdf")
    raise SystemExit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
