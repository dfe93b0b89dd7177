from __future__ import annotations


# =============================================================================
# excel_io.py (Excel template + read/write)
#
#   - build_template_workbook(): the blank workbook with dropdowns
#   - read_week_excel(): uploaded workbook -> raw settings dict + tasks DataFrame
#   - write_week_excel_bytes(): current data -> .xlsx bytes
#
# Validation into models happens in task_table.py so callers can show every
# issue at once instead of stopping at the first.
# =============================================================================

import logging
from dataclasses import dataclass
from datetime import date, datetime
from io import BytesIO
from typing import Any, Dict, Optional

import pandas as pd
from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.worksheet.datavalidation import DataValidation

logger = logging.getLogger(__name__)

SETTINGS_KEYS = [
    "calendar_title",
    "week_start_date",
    "week_start_day",
    "header_locale",
]

TASK_COLUMNS = [
    "id",
    "project_id",
    "start_date",
    "end_date",
]

_DATE_FORMAT = "yyyy-mm-dd"


@dataclass(frozen=True)
class ExcelPayload:
    settings: Dict[str, Any]
    tasks_df: pd.DataFrame


def is_blank(value: Any) -> bool:
    """True if value is None/NaN/NaT/pd.NA or an empty/whitespace string."""
    if value is None:
        return True
    try:
        if pd.isna(value):
            return True
    except (TypeError, ValueError):
        pass
    if isinstance(value, str):
        return value.strip() == ""
    return False


def coerce_date(value: Any) -> Optional[date]:
    """Convert a cell value into a Python date (or None). Handles Excel dates, datetimes, strings, and pandas timestamps."""
    if is_blank(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # pandas sometimes gives Timestamp
    if hasattr(value, "to_pydatetime"):
        dt = value.to_pydatetime()
        if isinstance(dt, datetime):
            return dt.date()
    if isinstance(value, str):
        v = value.strip()
        for fmt in ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y", "%d-%b-%Y", "%b %d %Y"):
            try:
                return datetime.strptime(v, fmt).date()
            except ValueError:
                continue
    return None


def _style_header(row) -> None:
    header_fill = PatternFill(start_color="F0F0F0", end_color="F0F0F0", fill_type="solid")
    for c in row:
        c.font = Font(bold=True)
        c.fill = header_fill
        c.alignment = Alignment(horizontal="left")


def build_template_workbook() -> Workbook:
    """Create the blank workbook with the Settings and Tasks sheets and dropdown validations."""
    wb = Workbook()
    wb.remove(wb.active)

    # Settings sheet
    ws = wb.create_sheet("Settings")
    ws.append(["key", "value"])
    _style_header(ws[1])

    defaults: Dict[str, Any] = {
        "calendar_title": "Week",
        "week_start_date": date.today(),
        "week_start_day": "Mon",
        "header_locale": "en",
    }
    for key in SETTINGS_KEYS:
        ws.append([key, defaults.get(key, "")])

    ws.column_dimensions["A"].width = 22
    ws.column_dimensions["B"].width = 30
    ws.freeze_panes = "A2"

    key_to_row = {ws.cell(row=r, column=1).value: r for r in range(2, ws.max_row + 1)}

    dv_week_start = DataValidation(type="list", formula1='"Mon,Sun"', allow_blank=False)
    dv_locale = DataValidation(type="list", formula1='"en,ko"', allow_blank=False)
    ws.add_data_validation(dv_week_start)
    ws.add_data_validation(dv_locale)
    dv_week_start.add(ws.cell(row=key_to_row["week_start_day"], column=2))
    dv_locale.add(ws.cell(row=key_to_row["header_locale"], column=2))

    ws.cell(row=key_to_row["week_start_date"], column=2).number_format = _DATE_FORMAT

    # Tasks sheet
    ws_t = wb.create_sheet("Tasks")
    ws_t.append(TASK_COLUMNS)
    _style_header(ws_t[1])
    ws_t.freeze_panes = "A2"
    for col, w in {"A": 10, "B": 16, "C": 14, "D": 14}.items():
        ws_t.column_dimensions[col].width = w

    for cell_range in ("C2:C1000", "D2:D1000"):
        for row in ws_t[cell_range]:
            for cell in row:
                cell.number_format = _DATE_FORMAT

    return wb


def template_bytes() -> bytes:
    """Return the template workbook as raw .xlsx bytes."""
    wb = build_template_workbook()
    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()


def write_week_excel_bytes(settings: Dict[str, Any], tasks_df: pd.DataFrame) -> bytes:
    """Serialize settings and the tasks table into an .xlsx workbook.

    Blank strings, NaNs and mixed types are tolerated; blank cells stay blank.
    """
    wb = build_template_workbook()

    ws = wb["Settings"]
    key_to_row = {ws.cell(row=r, column=1).value: r for r in range(2, ws.max_row + 1)}
    for k in SETTINGS_KEYS:
        r = key_to_row[k]
        v = settings.get(k)
        if is_blank(v):
            ws.cell(row=r, column=2, value=None)
            continue
        if k == "week_start_date":
            ws.cell(row=r, column=2, value=coerce_date(v))
            ws.cell(row=r, column=2).number_format = _DATE_FORMAT
            continue
        ws.cell(row=r, column=2, value=v)

    ws_t = wb["Tasks"]
    if ws_t.max_row > 1:
        ws_t.delete_rows(2, ws_t.max_row - 1)

    df_t = tasks_df.copy() if tasks_df is not None else pd.DataFrame(columns=TASK_COLUMNS)
    for c in TASK_COLUMNS:
        if c not in df_t.columns:
            df_t[c] = pd.NA
    df_t = df_t[TASK_COLUMNS]

    for _, row in df_t.iterrows():
        if all(is_blank(row.get(c)) for c in TASK_COLUMNS):
            continue
        out_row = []
        for c in TASK_COLUMNS:
            v = row.get(c)
            if is_blank(v):
                out_row.append(None)
            elif c in {"start_date", "end_date"}:
                out_row.append(coerce_date(v))
            else:
                out_row.append(str(v).strip() if isinstance(v, str) else v)
        ws_t.append(out_row)

    for r in range(2, ws_t.max_row + 1):
        ws_t.cell(row=r, column=3).number_format = _DATE_FORMAT
        ws_t.cell(row=r, column=4).number_format = _DATE_FORMAT

    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()


def read_week_excel(excel_bytes: bytes) -> ExcelPayload:
    """
    Reads the two-sheet workbook.

    Returns the raw settings dict plus the Tasks sheet as a DataFrame with
    TASK_COLUMNS (date columns coerced to python dates where possible).
    """
    try:
        wb = load_workbook(BytesIO(excel_bytes), data_only=True)
    except Exception as e:
        raise ValueError(f"Unable to read .xlsx file. Make sure it's an Excel workbook (.xlsx). Details: {e}") from e

    required_sheets = {"Settings", "Tasks"}
    missing = required_sheets - set(wb.sheetnames)
    if missing:
        raise ValueError(f"Missing required sheet(s): {', '.join(sorted(missing))}. Expected: Settings, Tasks.")

    ws = wb["Settings"]
    settings: Dict[str, Any] = {}
    for row in ws.iter_rows(min_row=2, values_only=True):
        if not row or row[0] is None:
            continue
        key_s = str(row[0]).strip()
        if not key_s:
            continue
        if key_s not in SETTINGS_KEYS:
            logger.warning("Ignoring unknown settings key %r", key_s)
            continue
        settings[key_s] = row[1] if len(row) > 1 else None

    try:
        tasks_df = pd.read_excel(BytesIO(excel_bytes), sheet_name="Tasks", engine="openpyxl")
    except Exception as e:
        raise ValueError(f"Unable to parse Tasks sheet. Details: {e}") from e

    for col in TASK_COLUMNS:
        if col not in tasks_df.columns:
            tasks_df[col] = pd.NA
    tasks_df = tasks_df[TASK_COLUMNS].copy()

    for dc in ("start_date", "end_date"):
        tasks_df[dc] = tasks_df[dc].apply(coerce_date).astype(object)

    if "week_start_date" in settings:
        settings["week_start_date"] = coerce_date(settings.get("week_start_date"))

    for k in ("calendar_title", "week_start_day", "header_locale"):
        if settings.get(k) is not None:
            settings[k] = str(settings[k]).strip()

    return ExcelPayload(settings=settings, tasks_df=tasks_df)
