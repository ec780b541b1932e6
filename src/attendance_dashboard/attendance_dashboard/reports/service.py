from __future__ import annotations

import csv
import io
import logging
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from ..attendance.model import DayBucket
from ..core.enums import ExportFormat
from ..core.exceptions import ValidationError
from ..stats.aggregator import StatsAggregator
from .model import ExportResult, ReportMeta
from .pdf_document import DETAIL_TABLE_STYLE, SUMMARY_TABLE_STYLE, Cursor, PdfDocument, TableStyle
from .tables import (
    CONSOLIDATED_COLUMNS,
    DAY_TABLE_COLUMNS,
    SUMMARY_COLUMNS,
    consolidated_rows,
    day_filename,
    day_sheet_name,
    day_table_rows,
    summary_rows,
    window_filename,
)
from .workbook import SheetSpec, build_workbook

logger = logging.getLogger(__name__)

NO_DAY_DATA_WARNING = "No attendance data to export"
NO_WINDOW_DATA_WARNING = "No attendance data found for last week"
NO_DATA_FOR_DAY_LINE = "No attendance data for this day"

WINDOW_FORMATS = (ExportFormat.XLSX, ExportFormat.PDF)


class ReportExporter:
    """Render day buckets into CSV, XLSX or PDF artifacts.

    An empty dataset is not an error: the result carries a single warning
    and no content, and ``save`` writes nothing for it.
    """

    def __init__(self, *, stats: Optional[StatsAggregator] = None):
        self._stats = stats or StatsAggregator()

    def export_day(self, bucket: DayBucket, meta: ReportMeta, fmt: ExportFormat) -> ExportResult:
        filename = day_filename(bucket.date, meta, fmt)
        if bucket.is_empty:
            return self._nothing_to_export(filename, fmt, NO_DAY_DATA_WARNING)

        render = {
            ExportFormat.CSV: self._day_csv,
            ExportFormat.XLSX: self._day_xlsx,
            ExportFormat.PDF: self._day_pdf,
        }[fmt]
        return ExportResult(filename=filename, mimetype=fmt.mimetype, content=render(bucket, meta))

    def export_window(self, buckets: Sequence[DayBucket], meta: ReportMeta, fmt: ExportFormat) -> ExportResult:
        if fmt not in WINDOW_FORMATS:
            raise ValidationError(f"Window reports are not available as {fmt.value}")

        if not buckets:
            return self._nothing_to_export(f"last-week-attendance-{meta.file_suffix}.{fmt.value}", fmt, NO_WINDOW_DATA_WARNING)

        filename = window_filename(buckets[0].date, buckets[-1].date, meta, fmt)
        if all(b.is_empty for b in buckets):
            return self._nothing_to_export(filename, fmt, NO_WINDOW_DATA_WARNING)

        if fmt is ExportFormat.XLSX:
            content = self._window_xlsx(buckets)
        else:
            content = self._window_pdf(buckets, meta)
        return ExportResult(filename=filename, mimetype=fmt.mimetype, content=content)

    def save(self, result: ExportResult, directory: Path) -> Optional[Path]:
        if not result.ok:
            return None
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / result.filename
        path.write_bytes(result.content)
        logger.info("Report written to %s", path)
        return path

    def _nothing_to_export(self, filename: str, fmt: ExportFormat, warning: str) -> ExportResult:
        logger.warning("%s (%s)", warning, filename)
        return ExportResult(filename=filename, mimetype=fmt.mimetype, warning=warning)

    def _day_csv(self, bucket: DayBucket, meta: ReportMeta) -> bytes:
        out = io.StringIO()
        writer = csv.writer(out, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(DAY_TABLE_COLUMNS)
        writer.writerows(day_table_rows(bucket.records))
        return out.getvalue().encode("utf-8-sig")

    def _day_xlsx(self, bucket: DayBucket, meta: ReportMeta) -> bytes:
        return build_workbook([SheetSpec("Attendance", DAY_TABLE_COLUMNS, day_table_rows(bucket.records))])

    def _day_pdf(self, bucket: DayBucket, meta: ReportMeta) -> bytes:
        title = f"Attendance Report - {bucket.iso_date} - {meta.display_label}{meta.title_suffix}"
        doc = PdfDocument(title=title)
        stats = self._stats.summarize(bucket.records)
        not_marked = sum(1 for r in bucket.records if not r.is_marked)

        cursor = doc.start()
        cursor = doc.text(cursor, title, size=16, bold=True)
        cursor = doc.text(cursor, f"Generated on: {meta.generated_at:%Y-%m-%d %H:%M}", size=10, color="#646464")
        cursor = doc.space(cursor, 6)
        for line in (
            f"Total Students: {len(bucket.records)}",
            f"Present: {stats.present_count}",
            f"Absent: {stats.absent_count}",
            f"Not Marked: {not_marked}",
        ):
            cursor = doc.text(cursor, line, size=11)
        cursor = doc.space(cursor, 8)
        cursor = doc.table(cursor, DAY_TABLE_COLUMNS, day_table_rows(bucket.records))
        return doc.finish(cursor)

    def _window_sheets(self, buckets: Sequence[DayBucket]) -> list[SheetSpec]:
        sheets = [SheetSpec("Weekly Summary", SUMMARY_COLUMNS, summary_rows(self._stats.weekly_trend(buckets)))]
        for index, bucket in enumerate(buckets, start=1):
            if bucket.is_empty:
                continue
            sheets.append(SheetSpec(day_sheet_name(index, bucket.date), DAY_TABLE_COLUMNS, day_table_rows(bucket.records)))
        sheets.append(SheetSpec("All Records", CONSOLIDATED_COLUMNS, consolidated_rows(buckets)))
        return sheets

    def _window_xlsx(self, buckets: Sequence[DayBucket]) -> bytes:
        return build_workbook(self._window_sheets(buckets))

    def _window_pdf(self, buckets: Sequence[DayBucket], meta: ReportMeta) -> bytes:
        start, end = buckets[0].date, buckets[-1].date
        title = f"Last {len(buckets)} Days Attendance - {meta.display_label}{meta.title_suffix}"
        doc = PdfDocument(title=title)

        cursor = doc.start()
        cursor = doc.text(cursor, title, size=16, bold=True)
        cursor = doc.text(cursor, f"Date Range: {start.isoformat()} to {end.isoformat()}", size=10, color="#646464")
        cursor = doc.text(cursor, f"Generated on: {meta.generated_at:%Y-%m-%d %H:%M}", size=10, color="#646464")
        cursor = doc.space(cursor, 10)
        cursor = doc.text(cursor, "Weekly Summary", size=12, bold=True)
        trend = self._stats.weekly_trend(buckets)
        cursor = doc.table(cursor, SUMMARY_COLUMNS, summary_rows(trend), style=SUMMARY_TABLE_STYLE)
        cursor = doc.space(cursor, 15)

        for bucket in buckets:
            cursor = self._day_section(doc, cursor, bucket.date, day_table_rows(bucket.records), DETAIL_TABLE_STYLE)
        return doc.finish(cursor)

    def _day_section(self, doc: PdfDocument, cursor: Cursor, day: date, rows: list[list[str]], style: TableStyle) -> Cursor:
        heading_size = 11
        heading_height = heading_size + 4
        if rows:
            cursor = doc.ensure_room(cursor, heading_height + doc.table_lead_height(rows, style))
            cursor = doc.text(cursor, f"Date: {day.isoformat()}", size=heading_size, bold=True)
            cursor = doc.table(cursor, DAY_TABLE_COLUMNS, rows, style=style)
        else:
            cursor = doc.ensure_room(cursor, heading_height + 14)
            cursor = doc.text(cursor, f"Date: {day.isoformat()}", size=heading_size, bold=True)
            cursor = doc.text(cursor, NO_DATA_FOR_DAY_LINE, size=10, color="#646464")
        return doc.space(cursor, 10)
