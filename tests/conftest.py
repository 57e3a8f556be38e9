from __future__ import annotations
import pytest

from journal.schema import StudentRecord
from journal.store import RecordStore


def make_record(class_name="10A", full_name="Иванов А.И.", math="", russian="", physics="", literature="", **extra):
    return StudentRecord(
        class_name=class_name,
        full_name=full_name,
        math=math,
        russian=russian,
        physics=physics,
        literature=literature,
        extra=dict(extra),
    )


@pytest.fixture
def records():
    return [
        make_record("10A", "Иванов А.И.", "5", "4", "5", "4"),
        make_record("10A", "Петрова С.К.", "4", "5", "4", "5"),
        make_record("10B", "Сидоров Д.М.", "3", "4", "4", "3"),
        make_record("10B", "Козлова М.П.", "5", "3", "5", "4"),
        make_record("11A", "Николаев В.С.", "4", "4", "3", "5"),
    ]


@pytest.fixture
def store(records):
    s = RecordStore()
    s.bulk_load(records)
    return s
