"""Ошибки сравнения баз данных. Каждая ошибка знает свой код завершения процесса."""


class DbCompareError(Exception):
    exit_code = 1


class DatabaseConnectionError(DbCompareError):
    """Не удалось подключиться к базе данных (неверный хост или учётные данные)."""
    exit_code = 2


class QueryError(DbCompareError):
    """Ошибка выполнения запроса: неверный SQL, нет таблицы или столбца."""
    exit_code = 2


class OutputFileError(DbCompareError):
    """Не удалось открыть файл для записи результатов."""
    exit_code = 1


class InvalidChoiceError(DbCompareError):
    exit_code = 1
