from __future__ import annotations

import asyncio
from datetime import date

import pytest

from src.attendance_dashboard.attendance_dashboard.core.exceptions import StaleResultError
from src.attendance_dashboard.attendance_dashboard.dashboard.screen import DashboardScreen, FetchGeneration
from src.attendance_dashboard.attendance_dashboard.dashboard.service import DashboardService


class GatedSource:
    """Attendance queries for a held class block until the test releases them."""

    def __init__(self):
        self.gates: dict = {}
        self.calls: list[dict] = []

    def hold(self, class_id) -> asyncio.Event:
        self.gates[class_id] = asyncio.Event()
        return self.gates[class_id]

    async def get_attendance_for_date(self, day, *, class_id=None, page=None, page_size=None):
        self.calls.append({"day": day, "class_id": class_id, "page": page, "page_size": page_size})
        gate = self.gates.get(class_id)
        if gate is not None:
            await gate.wait()
        sid = class_id or 0
        return [{"studentId": sid, "studentName": f"Student {sid}", "rollNumber": "R", "status": "PRESENT"}]


def test_generation_tokens():
    gen = FetchGeneration()
    first = gen.issue()
    second = gen.issue()

    assert not gen.is_current(first)
    assert gen.is_current(second)


def test_slow_earlier_fetch_does_not_overwrite_newer_selection():
    async def scenario():
        source = GatedSource()
        screen = DashboardScreen(DashboardService(source), today=date(2024, 6, 7))
        gate = source.hold(1)

        slow = asyncio.create_task(screen.select(class_id=1))
        await asyncio.sleep(0)
        fast = await screen.select(class_id=2)
        gate.set()
        with pytest.raises(StaleResultError):
            await slow
        return screen, fast

    screen, fast = asyncio.run(scenario())

    assert screen.page is fast
    assert [r.student_id for r in screen.page.records] == [2]
    assert screen.selection.class_id == 2


def test_class_change_invalidates_week_in_flight():
    async def scenario():
        source = GatedSource()
        screen = DashboardScreen(DashboardService(source), today=date(2024, 6, 10))
        gate = source.hold(None)

        week = asyncio.create_task(screen.refresh_week(today=date(2024, 6, 10)))
        await asyncio.sleep(0)
        await screen.select(class_id=3)
        gate.set()
        with pytest.raises(StaleResultError):
            await week
        assert screen.week == []

        return await screen.refresh_week(today=date(2024, 6, 10))

    buckets = asyncio.run(scenario())

    assert len(buckets) == 7
    assert all(b.records[0].student_id == 3 for b in buckets)


def test_filter_or_size_change_resets_to_first_page():
    async def scenario():
        source = GatedSource()
        screen = DashboardScreen(DashboardService(source), today=date(2024, 6, 7), page_size=5)

        await screen.select(page=3)
        assert screen.selection.page == 3

        await screen.select(class_id=4)
        assert screen.selection.page == 1

        await screen.select(page=2)
        assert screen.selection.class_id == 4

        await screen.select(page_size=20)
        assert (screen.selection.page, screen.selection.page_size) == (1, 20)

        await screen.select(day=date(2024, 6, 6), class_id=None)
        return screen, source

    screen, source = asyncio.run(scenario())

    assert screen.selection.day == date(2024, 6, 6)
    assert screen.selection.class_id is None
    assert screen.selection.page == 1
    assert source.calls[-1] == {"day": date(2024, 6, 6), "class_id": None, "page": 1, "page_size": 20}
