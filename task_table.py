from __future__ import annotations


# =============================================================================
# task_table.py (tables <-> models)
#
#   - build_settings() / build_tasks(): raw sheet data -> validated models,
#     with one friendly message per bad row
#   - placed_tasks_frame(): a week layout flattened into a DataFrame
# =============================================================================

import logging
import numbers
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from pydantic import ValidationError

from calendar_models import PlacedTask, Settings, Task
from excel_io import TASK_COLUMNS, coerce_date, is_blank

logger = logging.getLogger(__name__)

PLACED_COLUMNS = [
    "id",
    "project_id",
    "start_date",
    "end_date",
    "row",
    "column_start",
    "column_span",
    "grid_row",
    "grid_column",
]


def _df_clean(df: pd.DataFrame) -> pd.DataFrame:
    """Missing values become plain None; fully blank rows are kept so row numbers stay aligned."""
    df2 = df.copy().astype(object)
    return df2.where(pd.notna(df2), None)


def _ensure_columns(df: Optional[pd.DataFrame], cols: List[str]) -> pd.DataFrame:
    df2 = df.copy() if df is not None else pd.DataFrame(columns=cols)
    for c in cols:
        if c not in df2.columns:
            df2[c] = pd.NA
    return df2[cols]


def _coerce_int(value: Any) -> int:
    """Integers typed as 3, 3.0 or "3" all become 3."""
    if isinstance(value, bool):
        raise ValueError("must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("must be an integer")
        return int(value)
    s = str(value).strip()
    try:
        return int(s)
    except ValueError:
        f = float(s)
        if not f.is_integer():
            raise ValueError("must be an integer")
        return int(f)


def _coerce_project_id(value: Any) -> Any:
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _format_validation_errors(prefix: str, ve: ValidationError) -> List[str]:
    out: List[str] = []
    for err in ve.errors():
        loc = ".".join(str(x) for x in err.get("loc", [])) or "value"
        msg = err.get("msg", "Invalid value")
        out.append(f"{prefix}: {loc} — {msg}")
    return out


def build_settings(settings_raw: Dict[str, Any]) -> Tuple[Optional[Settings], List[str]]:
    """Returns (settings, errors). settings is None when validation failed."""
    s_dict = {k: v for k, v in (settings_raw or {}).items() if not is_blank(v)}

    day = s_dict.get("week_start_day")
    if isinstance(day, str):
        d = day.strip().lower()
        if d in {"mon", "monday"}:
            s_dict["week_start_day"] = "Mon"
        elif d in {"sun", "sunday"}:
            s_dict["week_start_day"] = "Sun"

    locale = s_dict.get("header_locale")
    if isinstance(locale, str):
        s_dict["header_locale"] = locale.strip().lower()

    try:
        return Settings(**s_dict), []
    except ValidationError as ve:
        return None, _format_validation_errors("Settings", ve)


def build_tasks(tasks_df: Optional[pd.DataFrame]) -> Tuple[List[Task], List[str], List[str]]:
    """
    Turn a Tasks table into Task models.

    Returns (tasks, errors, warnings). Row numbers in messages match the
    spreadsheet (header is row 1). Rows with problems are reported and left
    out; the rest are still returned.
    """
    errors: List[str] = []
    warnings: List[str] = []
    tasks: List[Task] = []
    seen_ids: Dict[int, int] = {}

    t_df = _df_clean(_ensure_columns(tasks_df, TASK_COLUMNS))

    for pos, (_, row) in enumerate(t_df.iterrows()):
        sheet_row = pos + 2
        rec = {c: row.get(c) for c in TASK_COLUMNS}
        if all(is_blank(rec.get(c)) for c in TASK_COLUMNS):
            continue

        if is_blank(rec.get("id")):
            errors.append(f"Tasks row {sheet_row}: id is required.")
            continue
        try:
            task_id = _coerce_int(rec["id"])
        except ValueError:
            errors.append(f"Tasks row {sheet_row}: id must be an integer, got {rec['id']!r}.")
            continue
        if task_id in seen_ids:
            errors.append(f"Tasks row {sheet_row}: duplicate id {task_id} (first used on row {seen_ids[task_id]}).")
            continue

        if is_blank(rec.get("project_id")):
            errors.append(f"Tasks row {sheet_row}: project_id is required.")
            continue

        sd = coerce_date(rec.get("start_date"))
        ed = coerce_date(rec.get("end_date"))
        if sd is None:
            errors.append(f"Tasks row {sheet_row}: start_date is required. Enter a date like 2026-01-15.")
            continue
        if ed is None:
            errors.append(f"Tasks row {sheet_row}: end_date is required. Enter a date like 2026-01-15.")
            continue
        if ed < sd:
            errors.append(f"Tasks row {sheet_row}: end_date must be on/after start_date.")
            continue

        try:
            t = Task.from_dates(task_id, _coerce_project_id(rec["project_id"]), sd, ed)
        except ValidationError as ve:
            errors.extend(_format_validation_errors(f"Tasks row {sheet_row}", ve))
            continue

        seen_ids[task_id] = sheet_row
        tasks.append(t)

    if errors:
        logger.warning("Tasks table: %d row(s) rejected", len(errors))
    if not tasks and not errors:
        warnings.append("No tasks found. Add rows to the Tasks sheet.")

    return tasks, errors, warnings


def placed_tasks_frame(placed: List[PlacedTask]) -> pd.DataFrame:
    """Flatten a week layout into a table, one line per placed task, in layout order."""
    records = [
        {
            "id": p.id,
            "project_id": p.project_id,
            "start_date": p.start_date,
            "end_date": p.end_date,
            "row": p.row,
            "column_start": p.column_start,
            "column_span": p.column_span,
            "grid_row": p.grid_row,
            "grid_column": p.grid_column,
        }
        for p in placed
    ]
    return pd.DataFrame(records, columns=PLACED_COLUMNS)
