from __future__ import annotations
import csv
import logging
from io import BytesIO, StringIO
from typing import Any, List, Optional

import pandas as pd
from openpyxl import load_workbook

from .errors import FileDecodeError
from .schema import StudentRecord, rows_to_records
from .utils import cell_text

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = (".csv", ".txt")
EXCEL_EXTENSIONS = (".xlsx",)
UPLOAD_TYPES = ["csv", "txt", "xlsx"]

# =========================
# Excel: первый лист как матрица, объединённые ячейки разворачиваются
# =========================
def _sheet_to_matrix(wb_bytes: bytes, sheet_name: Optional[str] = None) -> List[List[Any]]:
    wb = load_workbook(BytesIO(wb_bytes), read_only=False, data_only=True)
    ws = wb[sheet_name] if sheet_name else wb.worksheets[0]

    merged_map = {}
    for r in ws.merged_cells.ranges:
        min_col, min_row, max_col, max_row = r.bounds
        top_val = ws.cell(min_row, min_col).value
        for rr in range(min_row, max_row + 1):
            for cc in range(min_col, max_col + 1):
                merged_map[(rr, cc)] = top_val

    rows = []
    for r in range(1, ws.max_row + 1):
        row_vals = []
        for c in range(1, ws.max_column + 1):
            v = ws.cell(r, c).value
            if (r, c) in merged_map and (v is None or str(v).strip() == ""):
                v = merged_map[(r, c)]
            row_vals.append(v)
        rows.append(row_vals)
    return rows

# =========================
# CSV/TXT: устойчивое чтение из bytes
# =========================
def _decode_text(data: bytes) -> str:
    # utf-8-sig снимает BOM, который ставит наш же экспорт CSV
    for enc in ("utf-8-sig", "utf-8", "cp1251"):
        try:
            return data.decode(enc)
        except UnicodeDecodeError:
            continue
    return data.decode("utf-8", errors="replace")


def _guess_delimiter(sample_text: str) -> str:
    try:
        dialect = csv.Sniffer().sniff(sample_text, delimiters=",;\t|")
        if dialect.delimiter:
            return dialect.delimiter
    except csv.Error:
        pass

    # fallback по количеству разделителей в первых строках
    candidates = [",", ";", "\t", "|"]
    lines = [ln for ln in sample_text.splitlines() if ln.strip()][:20]
    if not lines:
        return ","

    scores = {}
    for d in candidates:
        cnts = [ln.count(d) for ln in lines]
        scores[d] = sum(cnts) / max(1, len(cnts))

    best = max(scores.items(), key=lambda x: x[1])[0]
    return best if scores.get(best, 0) > 0 else ","


def _text_to_matrix(text: str) -> List[List[Any]]:
    if not text.strip():
        return []

    delim = _guess_delimiter(text[:65536])
    df = pd.read_csv(
        StringIO(text),
        header=None,
        sep=delim,
        engine="python",
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        on_bad_lines="skip",
    )
    return df.where(pd.notna(df), "").values.tolist()

# =========================
# Main: upload -> grid -> records
# =========================
def read_grid(name: str, data: bytes) -> List[List[Any]]:
    lower = (name or "").lower()

    if lower.endswith(TEXT_EXTENSIONS):
        return _text_to_matrix(_decode_text(data))

    if lower.endswith(EXCEL_EXTENSIONS):
        return _sheet_to_matrix(data)

    raise FileDecodeError("Неподдерживаемый формат файла. Используйте CSV, TXT или XLSX.")


def load_upload(name: str, data: bytes) -> List[StudentRecord]:
    """
    Полностью разбирает загруженный файл в записи журнала.
    Любая ошибка разбора превращается в FileDecodeError: вызывающий код
    заменяет данные журнала только при успешном результате.
    """
    try:
        grid = read_grid(name, data)
    except FileDecodeError:
        raise
    except Exception as e:
        logger.warning("Файл %s не прочитан: %s: %s", name, type(e).__name__, e)
        raise FileDecodeError(f"Ошибка при чтении файла: {e}") from e

    # пустой лист openpyxl отдаёт как [[None]]
    grid = [row for row in grid if any(cell_text(v) for v in row)]
    if not grid:
        raise FileDecodeError("Файл пустой")

    records = rows_to_records(grid)
    logger.info("Файл %s: прочитано %d записей", name, len(records))
    return records
