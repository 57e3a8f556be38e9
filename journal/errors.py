from __future__ import annotations


class JournalError(Exception):
    """Базовая ошибка журнала оценок."""


class ParseError(JournalError, ValueError):
    # значение нельзя прочитать как целую оценку
    pass


class ValidationError(JournalError, ValueError):
    # не заполнены обязательные поля (Класс / ФИО)
    pass


class NoSelectionError(JournalError):
    pass


class RecordIndexError(JournalError, IndexError):
    pass


class FileDecodeError(JournalError):
    """Файл не удалось прочитать. Журнал при этом не меняется."""


class EmptyJournalError(JournalError):
    pass
