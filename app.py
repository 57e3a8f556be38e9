from __future__ import annotations
import hashlib
import streamlit as st
import pandas as pd
from journal.aggregate import class_stats_table, overall_stats_table, journal_summary
from journal.charts import class_average_chart, grade_distribution_chart, overall_performance_chart
from journal.errors import JournalError, FileDecodeError
from journal.export import EXPORT_FORMATS, export_bytes
from journal.ingest import UPLOAD_TYPES, load_upload
from journal.sample import sample_records
from journal.schema import FIELD_ORDER, FIELD_LABELS, SUBJECTS, StudentRecord
from journal.store import RecordStore
from journal.utils import setup_logging

setup_logging()
st.set_page_config(page_title="Журнал оценок", layout="wide")
st.title("Электронный журнал оценок")

GRADE_OPTIONS = ["", "1", "2", "3", "4", "5"]
NO_DATA = "Нет данных для отображения"
NO_CHART = "Нет данных для построения графика"

# Хранилище журнала живёт в сессии и передаётся дальше явно
st.session_state.setdefault("store", RecordStore())
st.session_state.setdefault("loaded_upload", None)
st.session_state.setdefault("form_nonce", 0)
store: RecordStore = st.session_state["store"]
# =========================

# Helpers
# =========================
def _records_df(records) -> pd.DataFrame:
    rows = [r.to_row(FIELD_ORDER) for r in records]
    return pd.DataFrame(rows, columns=[FIELD_LABELS[f] for f in FIELD_ORDER])


def _upload_key(name: str, data: bytes) -> str:
    return f"{name}::{hashlib.md5(data).hexdigest()}"


def _reset_form() -> None:
    # новый ключ виджетов -> форма и выбор строки очищаются
    st.session_state["form_nonce"] += 1


def _grade_index(value: str) -> int:
    return GRADE_OPTIONS.index(value) if value in GRADE_OPTIONS else 0


def _flash(kind: str, msg: str) -> None:
    st.session_state["flash"] = (kind, msg)


def _show_flash() -> None:
    item = st.session_state.pop("flash", None)
    if not item:
        return
    kind, msg = item
    {"success": st.success, "error": st.error, "warning": st.warning}.get(kind, st.info)(msg)


_show_flash()
tab_upload, tab_journal, tab_stats, tab_charts, tab_save = st.tabs(
    ["Загрузка", "Журнал", "Статистика (таблицы)", "Статистика (графики)", "Сохранение"]
)
# =========================

# Загрузка
# =========================
with tab_upload:
    upload = st.file_uploader("Загрузите журнал (CSV, TXT или XLSX)", type=UPLOAD_TYPES, accept_multiple_files=False)

    if upload is not None:
        data = upload.getvalue()
        key = _upload_key(upload.name, data)
        # Streamlit отдаёт тот же файл при каждом rerun: загружаем только новый
        if st.session_state["loaded_upload"] != key:
            # ошибка разбора тоже сообщается один раз
            st.session_state["loaded_upload"] = key
            try:
                records = load_upload(upload.name, data)
            except FileDecodeError as e:
                st.error(str(e))
            else:
                store.bulk_load(records)
                _reset_form()
                st.success(f"Успешно загружено {len(records)} записей")

    if st.button("Загрузить пример данных"):
        store.bulk_load(sample_records())
        _reset_form()
        st.success("Пример данных загружен!")

    summary = journal_summary(store.records)
    if summary["records"]:
        st.write(f"**Загружено записей:** {summary['records']}")
        st.write(f"**Классы:** {', '.join(summary['classes'])}")
        st.write(f"**Предметы:** {', '.join(summary['subjects'])}")
        st.dataframe(_records_df(store.records), width="stretch", hide_index=True)
    else:
        st.info("Файл не загружен")
# =========================

# Журнал: выбор, добавление, правка, удаление
# =========================
with tab_journal:
    nonce = st.session_state["form_nonce"]
    records = store.records

    if records:
        st.dataframe(_records_df(records), width="stretch")
    else:
        st.info("Данные не загружены")

    options = [None] + list(range(len(records)))
    picked = st.selectbox(
        "Ученик для редактирования",
        options,
        format_func=lambda i: "(не выбран)" if i is None else f"{i}: {records[i].full_name} ({records[i].class_name})",
        key=f"pick_{nonce}",
    )
    if picked is None:
        store.clear_selection()
    else:
        store.select(picked)

    current = store.selected_record or StudentRecord()
    kp = f"{nonce}_{picked}"

    with st.form(f"student_form_{kp}"):
        c1, c2 = st.columns(2)
        with c1:
            class_name = st.text_input("Класс", value=current.class_name, key=f"{kp}__class")
        with c2:
            full_name = st.text_input("ФИО", value=current.full_name, key=f"{kp}__name")

        grade_cols = st.columns(len(SUBJECTS))
        grades = {}
        for col, subject in zip(grade_cols, SUBJECTS):
            with col:
                grades[subject] = st.selectbox(
                    FIELD_LABELS[subject],
                    GRADE_OPTIONS,
                    index=_grade_index(current.get(subject)),
                    key=f"{kp}__{subject}",
                )

        confirm_delete = st.checkbox("Удалить этого ученика? Подтверждаю удаление", key=f"{kp}__confirm")

        b1, b2, b3 = st.columns(3)
        with b1:
            add_btn = st.form_submit_button("Добавить")
        with b2:
            update_btn = st.form_submit_button("Сохранить изменения")
        with b3:
            delete_btn = st.form_submit_button("Удалить")

    if delete_btn and store.selected_record is not None and not confirm_delete:
        # без подтверждения журнал не меняется
        st.warning("Удалить этого ученика? Отметьте подтверждение и нажмите «Удалить» ещё раз.")
    elif add_btn or update_btn or delete_btn:
        record = StudentRecord(class_name=class_name, full_name=full_name).with_values(**grades)
        try:
            if add_btn:
                store.add(record)
                _flash("success", "Ученик добавлен.")
            elif update_btn:
                store.update_selected(record)
                _flash("success", "Изменения сохранены.")
            else:
                removed = store.delete_selected()
                _flash("success", f"Удалено: {removed.full_name}")
        except JournalError as e:
            st.error(str(e))
        else:
            _reset_form()
            st.rerun()
# =========================

# Статистика: таблицы
# =========================
with tab_stats:
    st.subheader("Статистика по классам")
    class_df = class_stats_table(store.records)
    if class_df.empty:
        st.info(NO_DATA)
    else:
        st.dataframe(class_df, width="stretch", hide_index=True)

    st.subheader("Общая статистика")
    overall_df = overall_stats_table(store.records)
    if overall_df.empty:
        st.info(NO_DATA)
    else:
        st.dataframe(overall_df, width="stretch", hide_index=True)
# =========================

# Статистика: графики
# =========================
with tab_charts:
    charts = [
        ("Средняя оценка по классам", class_average_chart),
        ("Распределение оценок", grade_distribution_chart),
        ("Средняя оценка по предметам", overall_performance_chart),
    ]
    for title, build in charts:
        st.subheader(title)
        fig = build(store.records)
        if fig is None:
            st.info(NO_CHART)
        else:
            st.plotly_chart(fig, use_container_width=True)
# =========================

# Сохранение
# =========================
with tab_save:
    if not len(store):
        st.warning("Нет данных для сохранения")
    else:
        labels = {"csv": "Скачать CSV", "excel": "Скачать Excel", "txt": "Скачать TXT"}
        cols = st.columns(len(labels))
        for col, (fmt, label) in zip(cols, labels.items()):
            with col:
                try:
                    payload, file_name, mime = export_bytes(fmt, store.records)
                except Exception as e:
                    st.error(f"Ошибка при создании файла {EXPORT_FORMATS[fmt][0]}: {type(e).__name__}: {e}")
                    continue
                st.download_button(label, data=payload, file_name=file_name, mime=mime, key=f"dl_{fmt}")
