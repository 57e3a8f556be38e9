from __future__ import annotations
from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook

from journal.errors import EmptyJournalError, FileDecodeError
from journal.export import SHEET_NAME, export_bytes, to_csv_bytes, to_txt_bytes, to_xlsx_bytes
from journal.ingest import load_upload, read_grid
from journal.sample import sample_records

from conftest import make_record


@pytest.fixture
def tricky_records():
    return [
        make_record("10A", 'Smith, "Jr" John', "5", "4", "", "3"),
        make_record("10B", "Петрова С.К.", "", "", "", ""),
        make_record("11A", "Орлова Е.Д.", "5", "5", "5", "4"),
    ]


def test_csv_export_layout(tricky_records):
    data = to_csv_bytes(tricky_records)
    assert data.startswith(b"\xef\xbb\xbf")

    lines = data.decode("utf-8-sig").split("\n")
    assert lines[0] == "Class,FullName,Math,Russian,Physics,Literature"
    assert lines[1] == '10A,"Smith, ""Jr"" John",5,4,,3'
    assert lines[2] == "10B,Петрова С.К.,,,,"
    assert len(lines) == 4


def test_txt_export_has_no_bom_and_no_quoting(tricky_records):
    data = to_txt_bytes(tricky_records[1:])
    assert data.startswith(b"Class,FullName,")
    assert data.decode("utf-8").split("\n")[2] == "11A,Орлова Е.Д.,5,5,5,4"


def test_csv_round_trip(tricky_records):
    assert load_upload("journal.csv", to_csv_bytes(tricky_records)) == tricky_records


def test_txt_round_trip():
    records = sample_records()
    assert load_upload("journal.txt", to_txt_bytes(records)) == records


def test_xlsx_round_trip(tricky_records):
    data = to_xlsx_bytes(tricky_records)

    wb = load_workbook(BytesIO(data))
    assert wb.sheetnames == [SHEET_NAME]
    ws = wb[SHEET_NAME]
    assert [c.value for c in ws[1]] == ["Class", "FullName", "Math", "Russian", "Physics", "Literature"]

    assert load_upload("journal.xlsx", data) == tricky_records


def test_xlsx_with_numbers_and_merged_cells():
    wb = Workbook()
    ws = wb.active
    ws.append(["Класс", "ФИО", "Математика", "Физика", "Примечание"])
    ws.append(["10A", "Иванов А.И.", 5, 4.0, "староста"])
    ws.append([None, "Петрова С.К.", 4, None, None])
    ws.merge_cells("A2:A3")
    bio = BytesIO()
    wb.save(bio)

    records = load_upload("Журнал.XLSX", bio.getvalue())

    assert [r.class_name for r in records] == ["10A", "10A"]
    assert records[0].math == "5"
    assert records[0].physics == "4"
    assert records[0].extra == {"Примечание": "староста"}
    assert records[1].physics == ""


def test_semicolon_csv_in_cp1251():
    text = "Класс;ФИО;Математика;Литература\n10A;Иванов А.И.;5;4\n\n10B;Сидоров Д.М.;3;\n"
    records = load_upload("old.csv", text.encode("cp1251"))

    assert len(records) == 2
    assert records[0].to_row() == ["10A", "Иванов А.И.", "5", "", "", "4"]
    assert records[1].literature == ""


def test_read_grid_keeps_header_row():
    grid = read_grid("a.csv", "Класс,ФИО\n10A,Иванов\n".encode("utf-8"))
    assert grid == [["Класс", "ФИО"], ["10A", "Иванов"]]


def _xlsx_bytes(wb) -> bytes:
    bio = BytesIO()
    wb.save(bio)
    return bio.getvalue()


def test_xlsx_table_below_first_row():
    wb = Workbook()
    ws = wb.active
    ws.cell(row=2, column=1, value="Класс")
    ws.cell(row=2, column=2, value="ФИО")
    ws.cell(row=2, column=3, value="Математика")
    ws.cell(row=3, column=1, value="10A")
    ws.cell(row=3, column=2, value="Иванов")
    ws.cell(row=3, column=3, value=5)

    records = load_upload("journal.xlsx", _xlsx_bytes(wb))

    assert [r.full_name for r in records] == ["Иванов"]
    assert records[0].class_name == "10A"
    assert records[0].math == "5"


def test_xlsx_table_with_row_and_column_offset():
    wb = Workbook()
    ws = wb.active
    ws["B3"] = "Класс"
    ws["C3"] = "ФИО"
    ws["D3"] = "Физика"
    ws["B4"] = "11A"
    ws["C4"] = "Николаев П.Р."
    ws["D4"] = 3

    records = load_upload("journal.xlsx", _xlsx_bytes(wb))

    assert len(records) == 1
    assert records[0].to_row() == ["11A", "Николаев П.Р.", "", "", "3", ""]
    assert records[0].extra == {}


@pytest.mark.parametrize(
    "name, data",
    [
        ("journal.pdf", b"%PDF"),
        ("journal.csv", b""),
        ("journal.txt", b"  \n \n"),
        ("journal.xlsx", b"definitely not a zip archive"),
        ("journal.xlsx", _xlsx_bytes(Workbook())),
    ],
)
def test_decode_failures_leave_store_untouched(store, name, data):
    with pytest.raises(FileDecodeError):
        store.bulk_load(load_upload(name, data))
    assert len(store) == 5


def test_export_bytes_dispatch(records):
    payload, file_name, mime = export_bytes("csv", records)
    assert file_name == "journal.csv"
    assert mime.startswith("text/csv")
    assert payload == to_csv_bytes(records)

    _, file_name, _ = export_bytes("excel", records)
    assert file_name == "journal.xlsx"


def test_export_bytes_errors(records):
    with pytest.raises(ValueError):
        export_bytes("pdf", records)
    with pytest.raises(EmptyJournalError):
        export_bytes("txt", [])
