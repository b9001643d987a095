#!/usr/bin/env python3
import logging
from datetime import datetime

from dbcompare_errors import OutputFileError

logger = logging.getLogger(__name__)

DEFAULT_MISMATCH_FILE = "dbcompare_mismatches_{:%Y%m%d_%H%M%S}.txt"


def default_mismatch_path(now=None):
    """Имя файла для расхождений по умолчанию, с отметкой времени запуска."""
    return DEFAULT_MISMATCH_FILE.format(now or datetime.now())


class ReportFile:
    """Текстовый файл отчёта (UTF-8).

    mode="w" перезаписывает файл (сравнение данных), mode="a" дописывает в конец
    (сравнение схем, по таблице за раз).
    """

    def __init__(self, path, mode="w"):
        self.path = path
        self.mode = mode
        self._handle = None

    def open(self):
        try:
            self._handle = open(self.path, self.mode, encoding="utf-8", newline="")
        except OSError as e:
            raise OutputFileError(f"Failed to open output file: {self.path} ({e.strerror})") from e
        logger.debug("Opened report file %s (mode=%s)", self.path, self.mode)
        return self

    def write(self, message):
        self._handle.write(message)

    def close(self):
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def append_to_report(path, message):
    """Дописывает текст в файл отчёта, если путь указан."""
    if not path:
        return
    with ReportFile(path, mode="a") as report:
        report.write(message)
