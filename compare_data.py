#!/usr/bin/env python3
import logging
from dataclasses import dataclass

from report_file import ReportFile, default_mismatch_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Mismatch:
    key_column: str
    key_value: object
    source_value: object = None
    target_value: object = None
    missing: bool = False

    def describe(self):
        where = f"{self.key_column} = {normalize_value(self.key_value)}"
        if self.missing:
            return f"Missing in DB2 at {where}\n"
        return (f"Mismatch at {where}: DB1='{normalize_value(self.source_value)}' "
                f"vs DB2='{normalize_value(self.target_value)}'\n")


def normalize_value(value):
    """Приводит значение к строке для нестрогого сравнения: None -> '', bytes -> текст UTF-8."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def values_equal(source_value, target_value):
    """Нестрогое равенство: значения равны, если равны их строковые представления."""
    return normalize_value(source_value) == normalize_value(target_value)


def iter_mismatches(source, target, table, column, key_column):
    """Проходит по строкам источника в порядке возрастания ключа и ищет каждую строку в целевой базе.

    Отдаёт Mismatch для отсутствующих и различающихся строк. Строки, которые есть
    только в целевой базе, не проверяются.
    """
    source_sql = (f"SELECT {source.quote(key_column)}, {source.quote(column)} "
                  f"FROM {source.quote(table)} ORDER BY {source.quote(key_column)} ASC")
    target_sql = (f"SELECT {target.quote(key_column)}, {target.quote(column)} "
                  f"FROM {target.quote(table)} WHERE {target.quote(key_column)} = :key")

    for source_row in source.stream(source_sql):
        key_value = source_row[key_column]
        target_row = target.query_one(target_sql, {"key": key_value})
        if target_row is None:
            yield Mismatch(key_column, key_value, missing=True)
        elif not values_equal(source_row[column], target_row[column]):
            yield Mismatch(key_column, key_value, source_row[column], target_row[column])


def compare_data(source, target, table, column, key_column, output_file=None):
    """Сравнивает значения столбца между базами и записывает расхождения в файл.

    Файл создаётся всегда, даже если расхождений нет; без указанного пути имя
    формируется из текущего времени. Возвращает (число расхождений, путь к файлу).
    """
    print("\nStarting comparison...")
    if not output_file:
        output_file = default_mismatch_path()
        print(f"No output file specified. Using default: {output_file}")

    count_mismatch = 0
    with ReportFile(output_file, mode="w") as report:
        for mismatch in iter_mismatches(source, target, table, column, key_column):
            report.write(mismatch.describe())
            count_mismatch += 1
    logger.debug("Compared %s.%s by %s: %d mismatches", table, column, key_column, count_mismatch)

    print(f"\nComparison completed. Total mismatches: {count_mismatch}")
    print(f"Results saved to: {output_file}")
    return count_mismatch, output_file
