"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; fetching, paging and aggregation live in services.
"""

import asyncio
import importlib

from config import get_settings_module

from src.attendance_dashboard.attendance_dashboard.common.datetime_utils import today_local
from src.attendance_dashboard.attendance_dashboard.container import build_container


async def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(api_config=settings.API_CONFIG)
    week = await container.dashboard_service.load_week(today=today_local())
    for point in container.stats.weekly_trend(week):
        print(point.to_dict())


if __name__ == "__main__":
    asyncio.run(main())
