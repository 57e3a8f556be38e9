"""
Этот пакет содержит:
- нормализацию заголовков и записи журнала (schema)
- хранилище записей с выбранной строкой (store)
- статистику по предметам (stats) и сводные таблицы/ряды графиков (aggregate)
- загрузку CSV/TXT/XLSX и экспорт журнала
"""
from .errors import (JournalError, ParseError, ValidationError, NoSelectionError, RecordIndexError, FileDecodeError, EmptyJournalError)
from .schema import FIELD_ORDER, SUBJECTS, FIELD_LABELS, StudentRecord, normalize_field_name, rows_to_records
from .store import RecordStore, enumerate_classes
from .stats import SubjectStatistics, compute_subject_stats, parse_grade
from .aggregate import (class_subject_stats, overall_subject_stats, class_average_series, grade_distribution_series, overall_performance_series, class_stats_table, overall_stats_table)
from .ingest import load_upload
from .export import export_bytes

__all__ = [
    "JournalError",
    "ParseError",
    "ValidationError",
    "NoSelectionError",
    "RecordIndexError",
    "FileDecodeError",
    "EmptyJournalError",
    "FIELD_ORDER",
    "SUBJECTS",
    "FIELD_LABELS",
    "StudentRecord",
    "normalize_field_name",
    "rows_to_records",
    "RecordStore",
    "enumerate_classes",
    "SubjectStatistics",
    "compute_subject_stats",
    "parse_grade",
    "class_subject_stats",
    "overall_subject_stats",
    "class_average_series",
    "grade_distribution_series",
    "overall_performance_series",
    "class_stats_table",
    "overall_stats_table",
    "load_upload",
    "export_bytes",
]
