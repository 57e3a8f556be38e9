from __future__ import annotations
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .utils import cell_text, label_text, load_rules

logger = logging.getLogger(__name__)

# =========================
# Канонические поля журнала
# =========================
CLASS = "Class"
FULL_NAME = "FullName"
MATH = "Math"
RUSSIAN = "Russian"
PHYSICS = "Physics"
LITERATURE = "Literature"

FIELD_ORDER: Tuple[str, ...] = (CLASS, FULL_NAME, MATH, RUSSIAN, PHYSICS, LITERATURE)
SUBJECTS: Tuple[str, ...] = (MATH, RUSSIAN, PHYSICS, LITERATURE)

# Подписи для интерфейса
FIELD_LABELS: Dict[str, str] = {
    CLASS: "Класс",
    FULL_NAME: "ФИО",
    MATH: "Математика",
    RUSSIAN: "Русский язык",
    PHYSICS: "Физика",
    LITERATURE: "Литература",
}

# канонические имя -> атрибут StudentRecord
_ATTRS: Dict[str, str] = {
    CLASS: "class_name",
    FULL_NAME: "full_name",
    MATH: "math",
    RUSSIAN: "russian",
    PHYSICS: "physics",
    LITERATURE: "literature",
}

_BUILTIN_ALIASES: Dict[str, str] = {
    "Класс": CLASS,
    "ФИО": FULL_NAME,
    "Математика": MATH,
    "Math": MATH,
    "Русский_язык": RUSSIAN,
    "Русский язык": RUSSIAN,
    "Russian": RUSSIAN,
    "Физика": PHYSICS,
    "Physics": PHYSICS,
    "Литература": LITERATURE,
    "Literature": LITERATURE,
}


def _build_aliases(rules: Mapping[str, Any]) -> Dict[str, str]:
    aliases = dict(_BUILTIN_ALIASES)

    extra = rules.get("header_aliases", {})
    if not isinstance(extra, dict):
        logger.warning("header_aliases: ожидался объект, получено %s", type(extra).__name__)
        extra = {}
    for label, target in extra.items():
        if target not in FIELD_ORDER:
            logger.warning("Синоним %r ссылается на неизвестное поле %r, пропущен", label, target)
            continue
        aliases[str(label).strip()] = target

    # канонические имена всегда переходят сами в себя
    for name in FIELD_ORDER:
        aliases[name] = name
    return aliases


HEADER_ALIASES: Dict[str, str] = _build_aliases(load_rules())


def normalize_field_name(label: Any) -> str:
    """
    Приводит заголовок колонки к каноническому имени поля.
    Сравнение точное (с учётом регистра) после обрезки пробелов;
    неизвестные заголовки возвращаются как есть (обрезанными).
    """
    key = label_text(label)
    return HEADER_ALIASES.get(key, key)


# =========================
# Запись ученика
# =========================
@dataclass(frozen=True)
class StudentRecord:
    """Строка журнала. Оценки хранятся текстом: "" значит "не выставлена"."""

    class_name: str = ""
    full_name: str = ""
    math: str = ""
    russian: str = ""
    physics: str = ""
    literature: str = ""
    # колонки, которых нет среди канонических, под исходными заголовками
    extra: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, row: Mapping[Any, Any]) -> "StudentRecord":
        values: Dict[str, str] = {}
        extra: Dict[str, str] = {}
        for raw_key, raw_value in row.items():
            key = normalize_field_name(raw_key)
            value = cell_text(raw_value)
            if key in _ATTRS:
                values[_ATTRS[key]] = value
            elif key:
                extra[key] = value
        return cls(extra=extra, **values)

    def get(self, field_name: str, default: str = "") -> str:
        attr = _ATTRS.get(field_name)
        if attr is not None:
            return getattr(self, attr)
        return self.extra.get(field_name, default)

    def with_values(self, **changes: str) -> "StudentRecord":
        # changes по каноническим именам: with_values(Math="5")
        kwargs = {_ATTRS[k]: v for k, v in changes.items()}
        return replace(self, **kwargs)

    def to_row(self, fields: Sequence[str] = FIELD_ORDER) -> List[str]:
        return [self.get(f) for f in fields]

    def to_dict(self) -> Dict[str, str]:
        out = {name: self.get(name) for name in FIELD_ORDER}
        out.update(self.extra)
        return out


# =========================
# Сырые строки -> записи
# =========================
def _is_blank_row(row: Iterable[Any]) -> bool:
    return all(cell_text(v) == "" for v in row)


def _records_from_grid(rows: Sequence[Sequence[Any]]) -> List[StudentRecord]:
    # таблица может начинаться не с первой строки листа
    start = 0
    while start < len(rows) and _is_blank_row(rows[start] or []):
        start += 1
    if start == len(rows):
        return []
    rows = rows[start:]

    raw_headers = list(rows[0])
    headers = [normalize_field_name(h) for h in raw_headers]

    records: List[StudentRecord] = []
    for row in rows[1:]:
        row = list(row or [])
        if not row or _is_blank_row(row):
            continue
        # недостающие ячейки в конце строки считаются пустыми
        padded = row + [""] * (len(headers) - len(row))
        mapping = {}
        for h, v in zip(headers, padded):
            if not h:
                continue
            mapping[h] = v
        records.append(StudentRecord.from_mapping(mapping))
    return records


def rows_to_records(rows: Optional[Sequence[Any]]) -> List[StudentRecord]:
    """
    Принимает строки из файла в одном из двух видов:
      - позиционные списки, первая строка - заголовки;
      - словари "заголовок -> значение".
    Возвращает нормализованные записи, полностью пустые строки пропускаются.
    """
    if not rows:
        return []

    if isinstance(rows[0], Mapping):
        out = []
        for row in rows:
            if not row or _is_blank_row(row.values()):
                continue
            out.append(StudentRecord.from_mapping(row))
        return out

    return _records_from_grid(rows)


def field_label(name: str) -> str:
    return FIELD_LABELS.get(name, name)
