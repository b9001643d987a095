#!/usr/bin/env python3
# Запуск: python db_compare.py [--verbose]
# Все параметры подключения и сравнения запрашиваются интерактивно.

import argparse
import getpass
import logging
import sys

from compare_data import compare_data
from compare_schema import compare_schema_all_tables, compare_schema_single_table
from db_connection import DEFAULT_DIALECT, open_connection
from dbcompare_errors import DbCompareError, InvalidChoiceError
from prompts import prompt, prompt_secret

logger = logging.getLogger(__name__)

MENU = "1. Compare Schema (all tables)\n2. Compare Schema (single table)\n3. Compare Data"


def connect_database(title, label, reader, secret_reader, connect):
    """Запрашивает параметры подключения к одной базе и подключается к ней."""
    print(f"\n==== {title} ====")
    dialect = prompt(f"Database type (mysql/postgresql, leave blank for {DEFAULT_DIALECT})",
                     required=False, reader=reader)
    host = prompt("Host (e.g., localhost)", reader=reader)
    port = prompt("Port (leave blank for default)", required=False, reader=reader)
    name = prompt("Database Name", reader=reader)
    user = prompt("Username", reader=reader)
    password = prompt_secret("Password", reader=secret_reader)
    return connect(host, name, user, password,
                   dialect=dialect.strip().lower() or DEFAULT_DIALECT,
                   port=port.strip() or None,
                   label=label)


def run_schema_all(source, target, reader):
    output_file = prompt("Output file path to save schema comparison (leave blank to skip)",
                         required=False, reader=reader)
    compare_schema_all_tables(source, target, output_file or None)


def run_schema_single(source, target, reader):
    table = prompt("Table Name", reader=reader)
    output_file = prompt("Output file path to save schema comparison (leave blank to skip)",
                         required=False, reader=reader)
    compare_schema_single_table(source, target, table, output_file or None)


def run_data_compare(source, target, reader):
    print("\n==== Table & Column Settings ====")
    table = prompt("Table Name", reader=reader)
    column = prompt("Column Name to Compare", reader=reader)
    key_column = prompt("Key Column Name (Primary Key / Unique Key)", reader=reader)
    output_file = prompt("Output file path to save mismatches (leave blank to skip)",
                         required=False, reader=reader)
    compare_data(source, target, table, column, key_column, output_file or None)


OPERATIONS = {
    "1": run_schema_all,
    "2": run_schema_single,
    "3": run_data_compare,
}


def run_session(reader=input, secret_reader=getpass.getpass, connect=open_connection):
    """Интерактивный сеанс: подключение к двум базам, выбор и выполнение операции.
    Ошибки не перехватываются, их обрабатывает main()."""
    source = connect_database("Database 1 (Source)", "DB1", reader, secret_reader, connect)
    try:
        target = connect_database("Database 2 (Target)", "DB2", reader, secret_reader, connect)
        try:
            print("\n==== Operation ====")
            print(MENU)
            choice = prompt("Choose operation (1/2/3)", reader=reader).strip()
            operation = OPERATIONS.get(choice)
            if operation is None:
                raise InvalidChoiceError(f"Invalid choice '{choice}'. Exiting.")
            logger.debug("Running operation %s", operation.__name__)
            operation(source, target, reader)
        finally:
            target.close()
    finally:
        source.close()
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Interactively compares schema or column data between two relational databases."
    )
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Print debug messages (SQL queries, connection details)")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        return run_session()
    except DbCompareError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except (KeyboardInterrupt, EOFError):
        print("\nAborted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
