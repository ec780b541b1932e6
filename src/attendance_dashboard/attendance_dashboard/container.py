from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .api.connection import ApiConfig, ApiConnection
from .attendance.fetcher import DateWindowFetcher
from .attendance.http_repository import HttpAttendanceRepository
from .attendance.repository import AttendanceSource
from .core.constants import DEFAULT_WINDOW_DAYS
from .dashboard.service import DashboardService
from .reports.service import ReportExporter
from .stats.aggregator import StatsAggregator


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceSource

    fetcher: DateWindowFetcher
    stats: StatsAggregator
    exporter: ReportExporter
    dashboard_service: DashboardService


def build_container(
    *,
    api_config: Optional[dict] = None,
    window_days: int = DEFAULT_WINDOW_DAYS,
    source: Optional[AttendanceSource] = None,
) -> Container:
    """Wire repositories and services.

    ``source`` replaces the HTTP repository (tests pass an in-memory fake).
    """
    if source is None:
        if not api_config:
            raise ValueError("api_config is required when no source is given")
        config = ApiConfig(
            base_url=str(api_config["base_url"]),
            token=api_config.get("token") or None,
            timeout=float(api_config.get("timeout", 10.0)),
        )
        source = HttpAttendanceRepository(ApiConnection.get_instance(config))

    fetcher = DateWindowFetcher(source, window_days=window_days)
    stats = StatsAggregator()
    exporter = ReportExporter(stats=stats)
    dashboard_service = DashboardService(source, fetcher=fetcher, stats=stats, exporter=exporter, stats_days=window_days)

    return Container(
        attendance_repo=source,
        fetcher=fetcher,
        stats=stats,
        exporter=exporter,
        dashboard_service=dashboard_service,
    )
