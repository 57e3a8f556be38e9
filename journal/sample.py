from __future__ import annotations
from typing import List

from .schema import FIELD_ORDER, StudentRecord, rows_to_records

# Демонстрационный журнал: Класс, ФИО, Математика, Русский язык, Физика, Литература
SAMPLE_ROWS = [
    ["10A", "Иванов А.И.", 5, 4, 5, 4],
    ["10A", "Петрова С.К.", 4, 5, 4, 5],
    ["10B", "Сидоров Д.М.", 3, 4, 4, 3],
    ["10B", "Козлова М.П.", 5, 3, 5, 4],
    ["11A", "Николаев В.С.", 4, 4, 3, 5],
    ["11A", "Орлова Е.Д.", 5, 5, 5, 4],
]


def sample_records() -> List[StudentRecord]:
    return rows_to_records([list(FIELD_ORDER)] + SAMPLE_ROWS)
