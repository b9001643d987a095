#!/usr/bin/env python3
import enum
import logging
from dataclasses import dataclass

from tabulate import tabulate

from dbcompare_errors import QueryError
from report_file import append_to_report

logger = logging.getLogger(__name__)


class DiffKind(enum.Enum):
    MISSING_IN_SOURCE = "missing-in-source"
    MISSING_IN_TARGET = "missing-in-target"
    TYPE_MISMATCH = "type-mismatch"


@dataclass(frozen=True)
class SchemaDiff:
    column_name: str
    kind: DiffKind
    source_type: str = None
    target_type: str = None

    def describe(self):
        if self.kind is DiffKind.MISSING_IN_SOURCE:
            return f"Column '{self.column_name}' missing in DB1"
        if self.kind is DiffKind.MISSING_IN_TARGET:
            return f"Column '{self.column_name}' missing in DB2"
        return (f"Column '{self.column_name}' type mismatch: "
                f"DB1='{self.source_type}' vs DB2='{self.target_type}'")


def merge_names(source_names, target_names):
    """Объединение имён без повторов: сначала в порядке источника, затем только целевые."""
    merged = list(dict.fromkeys(source_names))
    seen = set(merged)
    merged.extend(name for name in dict.fromkeys(target_names) if name not in seen)
    return merged


def diff_columns(source_columns, target_columns):
    """Сравнивает списки ColumnDescriptor двух баз и возвращает список SchemaDiff.
    Типы сравниваются как строки, без нормализации."""
    source = {col.name: col for col in source_columns}
    target = {col.name: col for col in target_columns}
    diffs = []
    for name in merge_names(source, target):
        if name not in source:
            diffs.append(SchemaDiff(name, DiffKind.MISSING_IN_SOURCE,
                                    target_type=target[name].declared_type))
        elif name not in target:
            diffs.append(SchemaDiff(name, DiffKind.MISSING_IN_TARGET,
                                    source_type=source[name].declared_type))
        elif source[name].declared_type != target[name].declared_type:
            diffs.append(SchemaDiff(name, DiffKind.TYPE_MISMATCH,
                                    source[name].declared_type, target[name].declared_type))
    return diffs


def compare_table_schema(source, target, table):
    """Получает описания столбцов таблицы из обеих баз и сравнивает их.
    Если таблицы нет в одной из баз, все её столбцы считаются отсутствующими там."""
    source_columns = source.get_columns(table)
    target_columns = target.get_columns(table)
    if source_columns is None and target_columns is None:
        raise QueryError(f"Table '{table}' does not exist in DB1 or DB2")
    logger.debug("Table %s: %s columns in %s, %s in %s", table,
                 len(source_columns or []), source.label,
                 len(target_columns or []), target.label)
    return diff_columns(source_columns or [], target_columns or [])


def format_schema_report(diffs):
    if not diffs:
        return "Schemas match.\n"
    lines = ["Schema differences found:\n"]
    lines.extend(f"  - {diff.describe()}\n" for diff in diffs)
    return "".join(lines)


def compare_schema_single_table(source, target, table, output_file=None):
    """Сравнивает схему одной таблицы, печатает результат и при необходимости дописывает его в файл."""
    output = f"\nComparing schema for table '{table}'...\n"
    diffs = compare_table_schema(source, target, table)
    output += format_schema_report(diffs)
    print(output, end="")
    append_to_report(output_file, output)
    if output_file:
        print(f"\nSchema comparison results saved to: {output_file}")
    return diffs


def compare_schema_all_tables(source, target, output_file=None):
    """Сравнивает схемы всех таблиц из обеих баз.
    Возвращает словарь {таблица: список SchemaDiff}."""
    print("\nComparing schema for all tables...")
    source_tables = source.list_tables()
    target_tables = target.list_tables()
    tables = merge_names(source_tables, target_tables)
    logger.info("Comparing %d tables", len(tables))

    results = {}
    for table in tables:
        diffs = compare_table_schema(source, target, table)
        output = f"\nTable: {table}\n" + format_schema_report(diffs)
        print(output, end="")
        # Пишем по таблице, чтобы при сбое в файле остался уже полученный результат
        append_to_report(output_file, output)
        results[table] = diffs

    summary = [
        [table,
         "yes" if table in source_tables else "N/A",
         "yes" if table in target_tables else "N/A",
         len(diffs)]
        for table, diffs in results.items()
    ]
    print()
    print(tabulate(summary, headers=["Table", "DB1", "DB2", "Differences"], tablefmt="psql"))
    if output_file:
        print(f"\nSchema comparison results saved to: {output_file}")
    return results
