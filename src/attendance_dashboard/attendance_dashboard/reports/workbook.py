from __future__ import annotations

import io
from dataclasses import dataclass
from typing import Sequence

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter


@dataclass(frozen=True)
class SheetSpec:
    name: str
    columns: Sequence[str]
    rows: Sequence[Sequence]


HEADER_FILL = PatternFill("solid", start_color="22C55E")
HEADER_FONT = Font(bold=True, color="FFFFFF")
THIN = Side(style="thin", color="C8C8C8")
BORDER = Border(left=THIN, right=THIN, top=THIN, bottom=THIN)


def _style_sheet(ws, columns: Sequence[str], rows: Sequence[Sequence]) -> None:
    for col_idx, header in enumerate(columns, start=1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = BORDER

    for row in ws.iter_rows(min_row=2, max_row=ws.max_row, min_col=1, max_col=len(columns)):
        for cell in row:
            cell.border = BORDER

    for col_idx, header in enumerate(columns, start=1):
        longest = max([len(str(header))] + [len(str(r[col_idx - 1])) for r in rows])
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max(longest + 2, 8), 50)

    ws.freeze_panes = "A2"


def build_workbook(sheets: Sequence[SheetSpec]) -> bytes:
    """Write each sheet through pandas (openpyxl engine) and return the .xlsx bytes."""
    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        for sheet in sheets:
            df = pd.DataFrame(list(sheet.rows), columns=list(sheet.columns))
            df.to_excel(writer, sheet_name=sheet.name, index=False)
            _style_sheet(writer.sheets[sheet.name], sheet.columns, sheet.rows)
    return out.getvalue()
