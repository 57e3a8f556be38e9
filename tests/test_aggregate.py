from __future__ import annotations
import pytest

from journal.aggregate import (
    class_average_series,
    class_stats_table,
    class_subject_stats,
    grade_distribution_series,
    journal_summary,
    overall_performance_series,
    overall_stats_table,
    overall_subject_stats,
    records_of_class,
)
from journal.schema import SUBJECTS

from conftest import make_record


def test_class_subject_stats_cross_product(records):
    rows = class_subject_stats(records)
    assert len(rows) == 3 * len(SUBJECTS)
    assert [r[0] for r in rows[:4]] == ["10A"] * 4
    assert [r[1] for r in rows[:4]] == list(SUBJECTS)

    by_key = {(cls, subject): stats for cls, subject, stats in rows}
    assert by_key[("10A", "Math")].average == 4.5
    assert by_key[("10B", "Math")].median == 4.0
    assert by_key[("11A", "Physics")].grade_count[3] == 1


def test_overall_subject_stats(records):
    overall = dict(overall_subject_stats(records))
    assert list(overall) == list(SUBJECTS)
    assert overall["Math"].average == pytest.approx(21 / 5)
    assert overall["Math"].count == 5


def test_class_average_series_zero_fills(records):
    recs = list(records) + [make_record("9A", "Новиков П.П.", math="3")]
    classes, series = class_average_series(recs)

    assert classes == ["10A", "10B", "11A", "9A"]
    assert series["Math"] == [4.5, 4.0, 4.0, 3.0]
    # у 9A нет оценок по литературе
    assert series["Literature"][-1] == 0


def test_grade_distribution_series(records):
    dist = grade_distribution_series(records)
    assert sorted(dist) == [1, 2, 3, 4, 5]
    # Математика: 5, 4, 3, 5, 4
    assert dist[5][0] == 2
    assert dist[4][0] == 2
    assert dist[3][0] == 1
    assert dist[1] == [0, 0, 0, 0]


def test_overall_performance_series(records):
    assert overall_performance_series(records) == pytest.approx([21 / 5, 20 / 5, 21 / 5, 21 / 5])


def test_empty_dataset_is_soft():
    assert class_subject_stats([]) == []
    assert class_average_series([]) == ([], {s: [] for s in SUBJECTS})
    assert grade_distribution_series([]) == {g: [0, 0, 0, 0] for g in range(1, 6)}
    assert overall_performance_series([]) == [0, 0, 0, 0]
    assert class_stats_table([]).empty
    assert overall_stats_table([]).empty


def test_results_follow_store_changes(store):
    before = overall_performance_series(store.records)
    store.select(0)
    store.delete_selected()
    after = overall_performance_series(store.records)
    assert before != after


def test_records_of_class_uses_trimmed_name():
    recs = [make_record(" 10A "), make_record("10B")]
    assert records_of_class(recs, "10A") == [recs[0]]


def test_stats_tables_are_formatted(records):
    table = class_stats_table(records)
    assert list(table.columns[:4]) == ["Класс", "Предмет", "Средняя", "Медиана"]
    assert len(table) == 12
    first = table.iloc[0]
    assert first["Класс"] == "10A"
    assert first["Предмет"] == "Математика"
    assert first["Средняя"] == "4.50"
    assert first["5 (кол-во)"] == 1
    assert first["5 (%)"] == "50.00%"
    assert first["1 (%)"] == "0.00%"

    overall = overall_stats_table(records)
    assert list(overall["Предмет"]) == ["Математика", "Русский язык", "Физика", "Литература"]
    assert overall.iloc[0]["Средняя"] == "4.20"


def test_journal_summary(records):
    summary = journal_summary(records)
    assert summary["records"] == 5
    assert summary["classes"] == ["10A", "10B", "11A"]
    assert summary["subjects"][0] == "Математика"
