from __future__ import annotations
import re
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .errors import ParseError
from .schema import StudentRecord

logger = logging.getLogger(__name__)

GRADES = (1, 2, 3, 4, 5)

# ведущее целое число (только ASCII-цифры): "5", " 4 ", "4.5" -> 4, "3-" -> 3
_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")


def grade_value(value: Any) -> int:
    """Читает оценку как целое число, иначе ParseError."""
    if value is None or isinstance(value, bool):
        raise ParseError(f"Не оценка: {value!r}")
    if isinstance(value, (int, np.integer)):
        return int(value)
    m = _LEADING_INT_RE.match(str(value))
    if not m:
        raise ParseError(f"Не оценка: {value!r}")
    return int(m.group(1))


def parse_grade(value: Any) -> Optional[int]:
    # Единая точка разбора оценок для всей статистики: нечитаемое -> None, а не 0
    try:
        return grade_value(value)
    except ParseError:
        if value not in (None, ""):
            logger.debug("Значение %r исключено из статистики", value)
        return None


def subject_grades(records: Sequence[StudentRecord], subject: str) -> List[int]:
    out = []
    for r in records:
        g = parse_grade(r.get(subject))
        if g is not None:
            out.append(g)
    return out


@dataclass(frozen=True)
class SubjectStatistics:
    average: float = 0.0
    median: float = 0.0
    grade_count: Dict[int, int] = field(default_factory=dict)
    grade_percent: Dict[int, float] = field(default_factory=dict)
    count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.count == 0


def compute_subject_stats(records: Sequence[StudentRecord], subject: str) -> SubjectStatistics:
    """
    Средняя, медиана и распределение оценок 1..5 по одному предмету.

    Пустые и нечитаемые значения не участвуют в расчёте.
    Значения вне 1..5 учитываются в средней и медиане, но не попадают в распределение.
    Без оценок возвращается нулевой результат с пустыми распределениями.
    """
    grades = subject_grades(records, subject)
    if not grades:
        return SubjectStatistics()

    arr = np.asarray(grades, dtype=float)
    n = len(grades)

    grade_count: Dict[int, int] = {}
    grade_percent: Dict[int, float] = {}
    for g in GRADES:
        c = grades.count(g)
        grade_count[g] = c
        grade_percent[g] = round(c / n * 100, 2)

    return SubjectStatistics(
        average=float(arr.mean()),
        # при чётном количестве - среднее двух центральных
        median=float(np.median(arr)),
        grade_count=grade_count,
        grade_percent=grade_percent,
        count=n,
    )


def format_number(x: float) -> str:
    return f"{x:.2f}"


def format_percent(x: float) -> str:
    return f"{x:.2f}%"
