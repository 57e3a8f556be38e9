from __future__ import annotations
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd

from .schema import CLASS, FIELD_LABELS, SUBJECTS, StudentRecord
from .stats import GRADES, SubjectStatistics, compute_subject_stats, format_number, format_percent
from .store import enumerate_classes

# Всё считается заново при каждом вызове: кэша нет, инвалидация не нужна.


def records_of_class(records: Sequence[StudentRecord], class_name: str) -> List[StudentRecord]:
    return [r for r in records if (r.class_name or "").strip() == class_name]


def class_subject_stats(records: Sequence[StudentRecord]) -> List[Tuple[str, str, SubjectStatistics]]:
    out = []
    for cls in enumerate_classes(records):
        members = records_of_class(records, cls)
        for subject in SUBJECTS:
            out.append((cls, subject, compute_subject_stats(members, subject)))
    return out


def overall_subject_stats(records: Sequence[StudentRecord]) -> List[Tuple[str, SubjectStatistics]]:
    return [(subject, compute_subject_stats(records, subject)) for subject in SUBJECTS]


# =========================
# Ряды для графиков
# =========================
def class_average_series(records: Sequence[StudentRecord]) -> Tuple[List[str], Dict[str, List[float]]]:
    """
    Средняя оценка по классам для каждого предмета.
    Класс без оценок по предмету даёт 0, чтобы линия графика не рвалась.
    """
    classes = enumerate_classes(records)
    series: Dict[str, List[float]] = {}
    for subject in SUBJECTS:
        series[subject] = [
            compute_subject_stats(records_of_class(records, cls), subject).average
            for cls in classes
        ]
    return classes, series


def grade_distribution_series(records: Sequence[StudentRecord]) -> Dict[int, List[int]]:
    # оценка -> количество по каждому предмету (в порядке SUBJECTS)
    per_subject = [compute_subject_stats(records, s) for s in SUBJECTS]
    return {g: [stats.grade_count.get(g, 0) for stats in per_subject] for g in GRADES}


def overall_performance_series(records: Sequence[StudentRecord]) -> List[float]:
    return [stats.average for _, stats in overall_subject_stats(records)]


# =========================
# Таблицы статистики для интерфейса
# =========================
def _stats_columns(stats: SubjectStatistics) -> Dict[str, Any]:
    row = {
        "Средняя": format_number(stats.average),
        "Медиана": format_number(stats.median),
    }
    for g in GRADES:
        row[f"{g} (кол-во)"] = stats.grade_count.get(g, 0)
        row[f"{g} (%)"] = format_percent(stats.grade_percent.get(g, 0.0))
    return row


def class_stats_table(records: Sequence[StudentRecord]) -> pd.DataFrame:
    rows = []
    for cls, subject, stats in class_subject_stats(records):
        row = {FIELD_LABELS[CLASS]: cls, "Предмет": FIELD_LABELS[subject]}
        row.update(_stats_columns(stats))
        rows.append(row)
    return pd.DataFrame(rows)


def overall_stats_table(records: Sequence[StudentRecord]) -> pd.DataFrame:
    if not records:
        return pd.DataFrame()

    rows = []
    for subject, stats in overall_subject_stats(records):
        row = {"Предмет": FIELD_LABELS[subject]}
        row.update(_stats_columns(stats))
        rows.append(row)
    return pd.DataFrame(rows)


def journal_summary(records: Sequence[StudentRecord]) -> Dict[str, Any]:
    return {
        "records": len(records),
        "classes": enumerate_classes(records),
        "subjects": [FIELD_LABELS[s] for s in SUBJECTS],
    }
