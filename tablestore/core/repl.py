"""
REPL - Interactive shell for tablestore

Provides a command-line interface for defining tables, inserting rows
and running aggregate queries against an in-memory Database.
"""

import shlex
import sys
from typing import Callable, Dict, List, Optional

from ..config import StoreConfig
from ..logging_config import configure_logging
from .builder import TableBuilder
from .database import Database
from .types import DataType


class REPL:
    """
    Interactive REPL (Read-Eval-Print Loop) for tablestore.

    Every line is a dot command; see HELP for the list.
    """

    BANNER = """
tablestore - typed in-memory tables

Type .help for commands, .demo for a guided example.
"""

    HELP = """
Commands:
  .help                          Show this help message
  .tables                        List all tables
  .schema <table>                Show schema for a table
  .create <table> <col>:<type>[:pk][:notnull][:fk=<table>.<col>] ...
                                 Create a table (types: integer, string, boolean, date)
  .insert <table> <col>=<value> ...
                                 Insert a row (quote values containing spaces)
  .rows <table>                  Show all rows of a table
  .count <table> <column>        Number of non-empty values in a column
  .sum <table> <column>          Sum of an integer column
  .avg <table> <column>          Average of an integer column
  .demo                          Build and query the 'users' example table
  .quit / .exit                  Exit the REPL

Example:
  .create users id:integer:pk name:string:notnull age:integer
  .insert users id=1 name=Alex age=25
  .avg users age
"""

    def __init__(self, database: Optional[Database] = None):
        """Initialize REPL with a database (a fresh one by default)."""
        self.db = database if database is not None else Database()
        self.running = False

    def run(self) -> None:
        """Start the REPL loop."""
        self.running = True
        print(self.BANNER)

        while self.running:
            try:
                line = input("tablestore> ")
            except KeyboardInterrupt:
                print("\n(Use .quit to exit)")
                continue
            except EOFError:
                print()
                self._quit()
                continue
            self.execute(line)

    def execute(self, line: str) -> bool:
        """
        Run one command line.

        Returns:
            False if the command failed, True otherwise
        """
        line = line.strip()
        if not line:
            return True

        try:
            parts = shlex.split(line)
        except ValueError as e:
            print(f"Error: {e}")
            return False

        command, args = parts[0].lower(), parts[1:]
        handler = self._commands().get(command)
        if handler is None:
            print(f"Unknown command: {command}")
            print("Type .help for available commands.")
            return False

        try:
            handler(args)
        except ValueError as e:
            print(f"Error: {e}")
            return False
        return True

    def _commands(self) -> Dict[str, Callable[[List[str]], None]]:
        return {
            '.help': lambda args: print(self.HELP),
            '.tables': self._show_tables,
            '.schema': self._show_schema,
            '.create': self._create_table,
            '.insert': self._insert,
            '.rows': self._show_rows,
            '.count': lambda args: self._run_aggregate('count', args),
            '.sum': lambda args: self._run_aggregate('sum', args),
            '.avg': lambda args: self._run_aggregate('avg', args),
            '.demo': lambda args: run_demo(self.db),
            '.quit': lambda args: self._quit(),
            '.exit': lambda args: self._quit(),
            '.q': lambda args: self._quit(),
        }

    def _quit(self) -> None:
        """Exit the REPL."""
        print("Goodbye!")
        self.running = False

    @staticmethod
    def _require(args: List[str], count: int, usage: str) -> None:
        if len(args) < count:
            raise ValueError(f"Usage: {usage}")

    def _show_tables(self, args: List[str]) -> None:
        """List all tables."""
        tables = self.db.list_tables()
        if tables:
            print("\nTables:")
            for name in tables:
                print(f"  {name} ({len(self.db.get_table(name))} rows)")
            print()
        else:
            print("No tables found.")

    def _show_schema(self, args: List[str]) -> None:
        """Show schema for a table."""
        self._require(args, 1, ".schema <table>")
        schema = self.db.describe(args[0])
        print(f"\nTable: {schema['name']}")
        print("-" * 60)

        for col in schema['columns']:
            flags = []
            if col['primary_key']:
                flags.append('PRIMARY KEY')
            if not col['nullable']:
                flags.append('NOT NULL')
            if col['foreign_key']:
                flags.append(f"REFERENCES {col['foreign_key']}")

            print(f"  {col['name']:20} {col['type']:10} {' '.join(flags)}")
        print()

    def _create_table(self, args: List[str]) -> None:
        self._require(args, 2, ".create <table> <col>:<type>[:pk][:notnull][:fk=<table>.<col>] ...")
        builder = TableBuilder(args[0], self.db)

        for definition in args[1:]:
            name, _, rest = definition.partition(':')
            if not name or not rest:
                raise ValueError(f"Column definition must look like name:type, got '{definition}'")
            type_name, *flags = rest.split(':')

            nullable, primary_key, foreign_key = True, False, None
            for flag in flags:
                flag_lower = flag.lower()
                if flag_lower == 'pk':
                    primary_key = True
                    nullable = False
                elif flag_lower == 'notnull':
                    nullable = False
                elif flag_lower.startswith('fk='):
                    foreign_key = flag[3:]
                else:
                    raise ValueError(f"Unknown column flag '{flag}' for column '{name}'")

            builder.add_column(name, DataType.parse(type_name), nullable=nullable,
                               primary_key=primary_key, foreign_key=foreign_key)

        table = builder.build()
        print(f"Table '{table.name}' created")

    def _insert(self, args: List[str]) -> None:
        self._require(args, 1, ".insert <table> <col>=<value> ...")
        table = self.db.get_table(args[0])

        values = {}
        for pair in args[1:]:
            column, sep, value = pair.partition('=')
            if not sep:
                raise ValueError(f"Values must look like column=value, got '{pair}'")
            values[column] = value

        table.insert(values)
        print("(1 row(s) affected)")

    def _show_rows(self, args: List[str]) -> None:
        """Pretty-print all rows of a table."""
        self._require(args, 1, ".rows <table>")
        table = self.db.get_table(args[0])
        print_rows(table.column_names, [row.to_dict() for row in table.rows])

    def _run_aggregate(self, func: str, args: List[str]) -> None:
        self._require(args, 2, f".{func} <table> <column>")
        table = self.db.get_table(args[0])
        result = getattr(table, func)(args[1])
        print(f"{func.upper()} {args[1]}: {format_number(result)}")


def format_number(value) -> str:
    """Render aggregate results without a trailing '.0' for whole numbers"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def print_rows(columns: List[str], rows: List[Dict[str, str]]) -> None:
    """Pretty-print rows as a table."""
    if not rows:
        print("(0 rows)")
        return

    widths = {col: len(col) for col in columns}
    for row in rows:
        for col in columns:
            widths[col] = max(widths[col], len(row.get(col) or 'NULL'))

    # Limit column width for readability
    max_width = 40
    widths = {col: min(w, max_width) for col, w in widths.items()}

    print()
    print(" | ".join(col.ljust(widths[col])[:widths[col]] for col in columns))
    print("-+-".join("-" * widths[col] for col in columns))

    for row in rows:
        values = [(row.get(col) or 'NULL').ljust(widths[col])[:widths[col]] for col in columns]
        print(" | ".join(values))

    print(f"\n({len(rows)} row(s))")


def run_demo(db: Database) -> None:
    """Create the 'users' table, exercise its constraints and print statistics."""
    users = (TableBuilder("users", db)
             .add_column("id", DataType.INTEGER, nullable=False, primary_key=True)
             .add_column("name", DataType.STRING, nullable=False)
             .add_column("age", DataType.INTEGER, nullable=True)
             .build())

    users.insert({"id": "1", "name": "Alex", "age": "25"})
    users.insert({"id": "2", "name": "Mira", "age": "30"})
    users.insert({"id": "3", "name": "Sam"})
    print("Successfully inserted 3 users.")

    failing = [
        ("NOT NULL", {"id": "4"}),
        ("data type", {"id": "four", "name": "Test"}),
        ("PRIMARY KEY", {"name": "Test"}),
    ]
    for label, values in failing:
        print(f"\nTesting {label} constraint (should fail)...")
        result = users.try_insert(values)
        if result.ok:
            print("Unexpectedly inserted a row.")
        else:
            print(f"Caught expected error: {result.error}")

    print("\n--- Final Statistics ---")
    print(f"COUNT age: {users.count('age')}")
    print(f"SUM age: {format_number(users.sum('age'))}")
    print(f"AVG age: {format_number(users.avg('age'))}")


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the REPL."""
    import argparse

    parser = argparse.ArgumentParser(
        description="tablestore - typed in-memory tables with constraint checks"
    )
    parser.add_argument(
        '--demo', action='store_true',
        help='Run the users table demonstration and exit'
    )
    parser.add_argument(
        '-c', '--command',
        help='Execute a single REPL command and exit'
    )
    parser.add_argument(
        '--strict', action='store_true', default=None,
        help='Reject unknown column names on insert'
    )
    parser.add_argument(
        '--enforce-foreign-keys', action='store_true', default=None,
        help='Check foreign key references on insert'
    )
    parser.add_argument(
        '--log-level',
        help='Log level (default: $TABLESTORE_LOG_LEVEL or WARNING)'
    )

    args = parser.parse_args(argv)

    config = StoreConfig.from_env(
        log_level=args.log_level.upper() if args.log_level else None,
        strict_columns=args.strict,
        enforce_foreign_keys=args.enforce_foreign_keys,
    )
    configure_logging(config.log_level)
    db = Database(config)

    if args.demo:
        run_demo(db)
        return

    if args.command:
        if not REPL(db).execute(args.command):
            sys.exit(1)
        return

    # Start interactive REPL
    REPL(db).run()


if __name__ == '__main__':
    main()
