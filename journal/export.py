from __future__ import annotations
from io import BytesIO
from typing import Dict, List, Sequence, Tuple

import pandas as pd

from .errors import EmptyJournalError
from .schema import FIELD_ORDER, StudentRecord
from .utils import load_rules

SHEET_NAME = "Журнал оценок"
CSV_BOM = "\ufeff"

# формат -> (имя файла, MIME)
EXPORT_FORMATS: Dict[str, Tuple[str, str]] = {
    "csv": ("journal.csv", "text/csv;charset=utf-8"),
    "txt": ("journal.txt", "text/plain;charset=utf-8"),
    "excel": ("journal.xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
}


def _csv_cell(value: str) -> str:
    if "," in value or '"' in value:
        return '"' + value.replace('"', '""') + '"'
    return value


def _table(records: Sequence[StudentRecord]) -> List[List[str]]:
    return [list(FIELD_ORDER)] + [r.to_row(FIELD_ORDER) for r in records]


def to_csv_bytes(records: Sequence[StudentRecord]) -> bytes:
    lines = [",".join(_csv_cell(v) for v in row) for row in _table(records)]
    return (CSV_BOM + "\n".join(lines)).encode("utf-8")


def to_txt_bytes(records: Sequence[StudentRecord]) -> bytes:
    # без кавычек и без BOM
    lines = [",".join(row) for row in _table(records)]
    return "\n".join(lines).encode("utf-8")


def to_xlsx_bytes(records: Sequence[StudentRecord]) -> bytes:
    width = load_rules().get("export_column_width", 20)
    df = pd.DataFrame([r.to_row(FIELD_ORDER) for r in records], columns=list(FIELD_ORDER))

    bio = BytesIO()
    with pd.ExcelWriter(bio, engine="xlsxwriter") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)

        wb = writer.book
        ws = writer.sheets[SHEET_NAME]
        fmt_header = wb.add_format({"bold": True, "bg_color": "#F2F2F2", "border": 1, "valign": "vcenter"})

        ws.freeze_panes(1, 0)
        for col, name in enumerate(df.columns):
            ws.write(0, col, name, fmt_header)
        ws.set_column(0, len(df.columns) - 1, width)

    return bio.getvalue()


def export_bytes(fmt: str, records: Sequence[StudentRecord]) -> Tuple[bytes, str, str]:
    """Возвращает (данные, имя файла, MIME) для выбранного формата."""
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Неизвестный формат файла: {fmt}")
    if not records:
        raise EmptyJournalError("Нет данных для сохранения")

    writer = {"csv": to_csv_bytes, "txt": to_txt_bytes, "excel": to_xlsx_bytes}[fmt]
    file_name, mime = EXPORT_FORMATS[fmt]
    return writer(records), file_name, mime
