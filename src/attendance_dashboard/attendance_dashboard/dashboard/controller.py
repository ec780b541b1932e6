from __future__ import annotations

import io
import logging
from typing import Optional

from flask import Flask, jsonify, request, send_file, session

from ..common.datetime_utils import parse_iso_date, today_local
from ..common.validators import optional_int, require_positive_int
from ..container import Container
from ..core.enums import ExportFormat, Role
from ..core.exceptions import ValidationError
from ..reports.model import ExportResult
from ..reports.service import WINDOW_FORMATS

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.dashboard_service

    def _error(message: str, status: int):
        return jsonify({"success": False, "message": message}), status

    def _viewer_role() -> Optional[Role]:
        try:
            return Role(session.get("role"))
        except ValueError:
            return None

    def _class_filter() -> Optional[int]:
        return optional_int(request.args.get("classId"), "classId")

    def _parse_format(value: str, allowed) -> ExportFormat:
        try:
            fmt = ExportFormat(value.lower())
        except ValueError:
            raise ValidationError(f"Unsupported export format: {value}") from None
        if fmt not in allowed:
            raise ValidationError(f"Unsupported export format: {value}")
        return fmt

    def _send_export(result: ExportResult):
        if not result.ok:
            return _error(result.warning or "Nothing to export", 404)
        return send_file(
            io.BytesIO(result.content),
            mimetype=result.mimetype,
            as_attachment=True,
            download_name=result.filename,
        )

    @app.route("/api/attendance/<day>", methods=["GET"], endpoint="api_attendance_for_date")
    async def api_attendance_for_date(day: str):
        """One page of a day's attendance plus that page's present/absent figures."""
        try:
            target = parse_iso_date(day)
            class_id = _class_filter()
            page = require_positive_int(request.args.get("page", 1), "page")
            page_size = require_positive_int(
                request.args.get("pageSize", app.config["DEFAULT_PAGE_SIZE"]), "pageSize"
            )
        except ValidationError as e:
            return _error(str(e), 400)

        try:
            result = await service.load_attendance_page(target, class_id=class_id, page=page, page_size=page_size)
        except Exception:
            logger.exception("Loading attendance for %s failed", day)
            return _error("System error while loading attendance", 500)

        stats = container.stats.summarize(result.records)
        return jsonify(
            {
                "success": True,
                "rows": [r.to_dict() for r in result.records],
                "pagination": result.pagination.to_dict(),
                "fromRoster": result.from_fallback,
                "stats": {
                    "present": stats.present_count,
                    "absent": stats.absent_count,
                    "attendanceRate": stats.rate,
                },
            }
        )

    @app.route("/api/analytics", methods=["GET"], endpoint="api_analytics")
    async def api_analytics():
        try:
            class_id = _class_filter()
            department_id = optional_int(request.args.get("departmentId"), "departmentId")
        except ValidationError as e:
            return _error(str(e), 400)

        try:
            view = await service.load_analytics(class_id=class_id, department_id=department_id, today=today_local())
        except Exception:
            logger.exception("Loading analytics failed")
            return _error("System error while loading analytics", 500)
        return jsonify({"success": True, **view.to_dict()})

    @app.route("/reports/attendance/<day>/<fmt>", methods=["GET"], endpoint="report_day")
    async def report_day(day: str, fmt: str):
        try:
            target = parse_iso_date(day)
            export_format = _parse_format(fmt, tuple(ExportFormat))
            class_id = _class_filter()
        except ValidationError as e:
            return _error(str(e), 400)

        try:
            result = await service.export_day(target, export_format, class_id=class_id, viewer_role=_viewer_role())
        except Exception:
            logger.exception("Exporting attendance for %s failed", day)
            return _error("Failed to export attendance data. Please try again.", 500)
        return _send_export(result)

    @app.route("/reports/last-week/<fmt>", methods=["GET"], endpoint="report_last_week")
    async def report_last_week(fmt: str):
        try:
            export_format = _parse_format(fmt, WINDOW_FORMATS)
            class_id = _class_filter()
        except ValidationError as e:
            return _error(str(e), 400)

        try:
            result = await service.export_last_week(
                export_format, class_id=class_id, viewer_role=_viewer_role(), today=today_local()
            )
        except Exception:
            logger.exception("Exporting last week's attendance failed")
            return _error("Failed to export last week attendance data. Please try again.", 500)
        return _send_export(result)
