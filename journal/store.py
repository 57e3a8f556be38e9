from __future__ import annotations
import logging
from dataclasses import replace
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from .errors import NoSelectionError, RecordIndexError, ValidationError
from .schema import StudentRecord

logger = logging.getLogger(__name__)


def enumerate_classes(records: Iterable[StudentRecord]) -> List[str]:
    # обычная строковая сортировка: "10A" < "10B" < "9A"
    classes = set()
    for r in records:
        name = (r.class_name or "").strip()
        if name:
            classes.add(name)
    return sorted(classes)


def validate_record(record: StudentRecord) -> StudentRecord:
    """Проверка обязательных полей. Возвращает запись с обрезанными Класс/ФИО."""
    class_name = (record.class_name or "").strip()
    full_name = (record.full_name or "").strip()
    if not class_name:
        raise ValidationError("Введите название класса")
    if not full_name:
        raise ValidationError("Введите ФИО ученика")
    return replace(record, class_name=class_name, full_name=full_name)


class RecordStore:
    """
    Записи журнала в порядке загрузки/добавления плюс выбранная строка.

    Выбранный индекс либо None, либо всегда указывает на существующую запись:
    удаление, обновление и полная замена данных сбрасывают выбор.
    """

    def __init__(self, records: Optional[Iterable[StudentRecord]] = None) -> None:
        self._records: List[StudentRecord] = list(records or [])
        self._selected: Optional[int] = None

    # ------------------------------------------------------------------
    # Чтение
    # ------------------------------------------------------------------
    @property
    def records(self) -> Tuple[StudentRecord, ...]:
        return tuple(self._records)

    @property
    def selected_index(self) -> Optional[int]:
        return self._selected

    @property
    def selected_record(self) -> Optional[StudentRecord]:
        if self._selected is None:
            return None
        return self._records[self._selected]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[StudentRecord]:
        return iter(tuple(self._records))

    def __getitem__(self, index: int) -> StudentRecord:
        self._check_index(index)
        return self._records[index]

    def enumerate_classes(self) -> List[str]:
        return enumerate_classes(self._records)

    # ------------------------------------------------------------------
    # Изменение
    # ------------------------------------------------------------------
    def bulk_load(self, records: Sequence[StudentRecord]) -> None:
        # новый список собирается целиком до замены
        new_records = list(records)
        self._records = new_records
        self._selected = None
        logger.info("Журнал загружен: %d записей", len(new_records))

    def select(self, index: int) -> StudentRecord:
        self._check_index(index)
        self._selected = index
        return self._records[index]

    def clear_selection(self) -> None:
        self._selected = None

    def add(self, record: StudentRecord) -> None:
        record = validate_record(record)
        self._records.append(record)
        logger.info("Добавлен ученик %s (%s)", record.full_name, record.class_name)

    def update_selected(self, record: StudentRecord) -> None:
        index = self._require_selection("Выберите ученика для редактирования")
        record = validate_record(record)
        self._records[index] = record
        self._selected = None
        logger.info("Запись #%d обновлена", index)

    def delete_selected(self) -> StudentRecord:
        index = self._require_selection("Выберите ученика для удаления")
        removed = self._records.pop(index)
        self._selected = None
        logger.info("Запись #%d удалена (%s)", index, removed.full_name)
        return removed

    # ------------------------------------------------------------------
    def _check_index(self, index: int) -> None:
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(self._records):
            raise RecordIndexError(f"Нет записи с номером {index} (всего записей: {len(self._records)})")

    def _require_selection(self, message: str) -> int:
        if self._selected is None:
            raise NoSelectionError(message)
        return self._selected
