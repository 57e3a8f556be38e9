from __future__ import annotations
import os
import re
import json
import logging
import math
from pathlib import Path
from typing import Any

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DATA_DIR = BASE_DIR / "data"

LOG_LEVEL_ENV = "GRADE_JOURNAL_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

logger = logging.getLogger(__name__)


def load_json(path: Path, default: Any):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        logger.debug("Конфигурация %s не прочитана, используются значения по умолчанию", path)
        return default


def rules_path() -> Path:
    return DEFAULT_DATA_DIR / "rules.json"


def load_rules() -> dict:
    rules = load_json(rules_path(), {})
    if not isinstance(rules, dict):
        logger.warning("%s: ожидался JSON-объект, файл проигнорирован", rules_path())
        return {}
    return rules


def setup_logging(level: str | None = None) -> None:
    # Настраивает корневой логгер один раз (повторные вызовы при rerun Streamlit ничего не делают)
    root = logging.getLogger()
    if root.handlers:
        return

    name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)
    root.setLevel(getattr(logging, name, logging.INFO))


_NBSP_RE = re.compile(r"[\u00A0\u2007\u202F]")  # NBSP варианты


def cell_text(v: Any) -> str:
    """
    Приводит значение ячейки к строке журнала:
    - None / NaN -> ""
    - 5.0 -> "5" (Excel и pandas отдают целые оценки как float)
    - BOM и неразрывные пробелы убираются, края обрезаются
    """
    if v is None:
        return ""
    if isinstance(v, bool):
        return str(v)
    if isinstance(v, float):
        if math.isnan(v):
            return ""
        if v.is_integer():
            return str(int(v))
    s = str(v).replace("\ufeff", "")
    s = _NBSP_RE.sub(" ", s)
    return s.strip()


def label_text(v: Any) -> str:
    # \u0414\u043b\u044f \u0437\u0430\u0433\u043e\u043b\u043e\u0432\u043a\u043e\u0432: \u0447\u0438\u0441\u0442\u044f\u0442\u0441\u044f \u0442\u043e\u043b\u044c\u043a\u043e \u043a\u0440\u0430\u044f, \u0432\u043d\u0443\u0442\u0440\u0435\u043d\u043d\u0438\u0435 \u0441\u0438\u043c\u0432\u043e\u043b\u044b \u043f\u043e\u0434\u043f\u0438\u0441\u0438 \u043d\u0435 \u0442\u0440\u043e\u0433\u0430\u0435\u043c
    if v is None or isinstance(v, (bool, float)):
        return cell_text(v)
    return str(v).replace("\ufeff", "").strip()
