#!/usr/bin/env python3
"""
Tests for table inserts, constraints and aggregates

Tests:
- NOT NULL / PRIMARY KEY / type constraints on insert
- All-or-nothing inserts
- COUNT, SUM, AVG over nullable columns
- Strict column names and foreign key enforcement
- Log events for non-fatal aggregate problems

Run: python -m pytest tablestore/tests/test_table.py -v
"""

import unittest

from structlog.testing import capture_logs

from tablestore import Database, DataType, TableBuilder
from tablestore.config import StoreConfig
from tablestore.core.exceptions import (
    ErrorKind, TableStoreError, MissingPrimaryKeyValue, MissingRequiredValue,
    InvalidColumnValue, UnknownColumn, ForeignKeyViolation,
)
from tablestore.core.schema import Column, TableSchema
from tablestore.storage.table import Row, Table


def make_users(db):
    return (TableBuilder("users", db)
            .add_column("id", DataType.INTEGER, nullable=False, primary_key=True)
            .add_column("name", DataType.STRING, nullable=False)
            .add_column("age", DataType.INTEGER, nullable=True)
            .build())


class TestUsersScenario(unittest.TestCase):
    """The users table walk-through"""

    def setUp(self):
        self.db = Database()
        self.users = make_users(self.db)
        self.users.insert({"id": "1", "name": "Alex", "age": "25"})
        self.users.insert({"id": "2", "name": "Mira", "age": "30"})
        self.users.insert({"id": "3", "name": "Sam"})

    def test_inserts_succeed(self):
        self.assertEqual(len(self.users), 3)

    def test_omitted_nullable_is_empty(self):
        self.assertEqual(self.users.rows[2]["age"], "")

    def test_aggregates(self):
        self.assertEqual(self.users.count("age"), 2)
        self.assertEqual(self.users.sum("age"), 55.0)
        self.assertEqual(self.users.avg("age"), 27.5)

    def test_aggregates_are_idempotent(self):
        first = (self.users.count("age"), self.users.sum("age"), self.users.avg("age"))
        for _ in range(3):
            self.assertEqual(
                (self.users.count("age"), self.users.sum("age"), self.users.avg("age")), first)

    def test_missing_required_value(self):
        with self.assertRaises(MissingRequiredValue) as ctx:
            self.users.insert({"id": "4"})
        self.assertEqual(ctx.exception.kind, ErrorKind.MISSING_REQUIRED_VALUE)
        self.assertEqual(ctx.exception.column, "name")
        self.assertEqual(len(self.users), 3)

    def test_invalid_column_value(self):
        with self.assertRaises(InvalidColumnValue) as ctx:
            self.users.insert({"id": "four", "name": "Test"})
        self.assertEqual(ctx.exception.column, "id")
        self.assertEqual(ctx.exception.value, "four")
        self.assertIn("four", str(ctx.exception))
        self.assertEqual(len(self.users), 3)

    def test_missing_primary_key(self):
        with self.assertRaises(MissingPrimaryKeyValue) as ctx:
            self.users.insert({"name": "Test"})
        self.assertEqual(ctx.exception.column, "id")
        self.assertEqual(len(self.users), 3)

    def test_errors_are_value_errors(self):
        with self.assertRaises(ValueError):
            self.users.insert({"name": "Test"})

    def test_failed_insert_leaves_aggregates_unchanged(self):
        with self.assertRaises(TableStoreError):
            # age is valid but name is missing: nothing may be stored
            self.users.insert({"id": "9", "age": "100"})
        self.assertEqual(self.users.sum("age"), 55.0)
        self.assertEqual(self.users.count("age"), 2)


class TestInsert(unittest.TestCase):

    def setUp(self):
        self.db = Database()
        self.users = make_users(self.db)

    def test_row_has_every_column(self):
        row = self.users.insert({"id": "1", "name": "Alex"})
        self.assertIsInstance(row, Row)
        self.assertEqual(set(row), {"id", "name", "age"})
        self.assertEqual(row, {"id": "1", "name": "Alex", "age": ""})

    def test_row_is_read_only(self):
        row = self.users.insert({"id": "1", "name": "Alex"})
        with self.assertRaises(TypeError):
            row["name"] = "Other"

    def test_rows_snapshot_is_not_live(self):
        snapshot = self.users.rows
        self.users.insert({"id": "1", "name": "Alex"})
        self.assertEqual(len(snapshot), 0)
        self.assertEqual(len(self.users.rows), 1)

    def test_empty_value_for_not_null_column(self):
        with self.assertRaises(InvalidColumnValue) as ctx:
            self.users.insert({"id": "1", "name": ""})
        self.assertEqual(ctx.exception.column, "name")

    def test_empty_value_for_nullable_column(self):
        row = self.users.insert({"id": "1", "name": "Alex", "age": ""})
        self.assertEqual(row["age"], "")
        self.assertEqual(self.users.count("age"), 0)

    def test_empty_primary_key_counts_as_missing(self):
        table = Database().create_table("t", [Column("id", DataType.INTEGER, primary_key=True)])
        with self.assertRaises(MissingPrimaryKeyValue):
            table.insert({"id": ""})
        with self.assertRaises(MissingPrimaryKeyValue):
            table.insert({})

    def test_empty_not_null_primary_key_is_invalid_value(self):
        """A NOT NULL primary key given "" fails column validation"""
        with self.assertRaises(InvalidColumnValue) as ctx:
            self.users.insert({"id": "", "name": "x"})
        self.assertEqual(ctx.exception.kind, ErrorKind.INVALID_COLUMN_VALUE)
        self.assertEqual(ctx.exception.column, "id")
        self.assertEqual(ctx.exception.value, "")
        self.assertEqual(len(self.users), 0)

    def test_primary_key_is_required_even_if_declared_nullable(self):
        table = Database().create_table("t", [
            Column("id", DataType.INTEGER, nullable=True, primary_key=True),
            Column("note", DataType.STRING),
        ])
        with self.assertRaises(MissingPrimaryKeyValue):
            table.insert({"note": "x"})

    def test_primary_key_uniqueness_not_enforced(self):
        self.users.insert({"id": "1", "name": "Alex"})
        self.users.insert({"id": "1", "name": "Alex again"})
        self.assertEqual(len(self.users), 2)

    def test_errors_follow_schema_order(self):
        """The first failing column in declaration order is reported"""
        with self.assertRaises(InvalidColumnValue) as ctx:
            self.users.insert({"id": "x", "age": "y"})
        self.assertEqual(ctx.exception.column, "id")

    def test_non_text_value_is_invalid(self):
        with self.assertRaises(InvalidColumnValue):
            self.users.insert({"id": 1, "name": "Alex"})

    def test_unknown_columns_ignored_by_default(self):
        row = self.users.insert({"id": "1", "name": "Alex", "email": "a@example.com"})
        self.assertNotIn("email", row)

    def test_unknown_columns_rejected_when_strict(self):
        with self.assertRaises(UnknownColumn) as ctx:
            self.users.insert({"id": "1", "name": "Alex", "email": "a@example.com"}, strict=True)
        self.assertEqual(ctx.exception.column, "email")
        self.assertEqual(len(self.users), 0)

    def test_strict_from_config(self):
        db = Database(StoreConfig(strict_columns=True))
        users = make_users(db)
        with self.assertRaises(UnknownColumn):
            users.insert({"id": "1", "name": "Alex", "email": "x"})
        # an explicit argument wins over the table setting
        users.insert({"id": "1", "name": "Alex", "email": "x"}, strict=False)
        self.assertEqual(len(users), 1)

    def test_all_types(self):
        table = (TableBuilder("events", self.db)
                 .add_column("id", DataType.INTEGER, nullable=False, primary_key=True)
                 .add_column("title", DataType.STRING)
                 .add_column("public", DataType.BOOLEAN)
                 .add_column("day", DataType.DATE)
                 .build())
        table.insert({"id": "1", "title": "Launch", "public": "true", "day": "2024-01-15"})
        with self.assertRaises(InvalidColumnValue):
            table.insert({"id": "2", "public": "yes"})
        with self.assertRaises(InvalidColumnValue):
            table.insert({"id": "3", "day": "2024/01/15"})
        self.assertEqual(len(table), 1)


class TestTryInsert(unittest.TestCase):

    def setUp(self):
        self.users = make_users(Database())

    def test_success(self):
        result = self.users.try_insert({"id": "1", "name": "Alex"})
        self.assertTrue(result.ok)
        self.assertEqual(result.row["name"], "Alex")
        self.assertIsNone(result.error)

    def test_failure(self):
        result = self.users.try_insert({"id": "1"})
        self.assertFalse(result.ok)
        self.assertIsNone(result.row)
        self.assertEqual(result.error.kind, ErrorKind.MISSING_REQUIRED_VALUE)
        self.assertEqual(len(self.users), 0)


class TestAggregates(unittest.TestCase):

    def setUp(self):
        self.users = make_users(Database())

    def test_empty_table(self):
        self.assertEqual(self.users.count("age"), 0)
        self.assertEqual(self.users.sum("age"), 0.0)
        self.assertEqual(self.users.avg("age"), 0.0)

    def test_unknown_column(self):
        self.users.insert({"id": "1", "name": "Alex", "age": "20"})
        self.assertEqual(self.users.count("email"), 0)
        self.assertEqual(self.users.avg("email"), 0.0)

    def test_count_string_column(self):
        self.users.insert({"id": "1", "name": "Alex"})
        self.users.insert({"id": "2", "name": "Mira"})
        self.assertEqual(self.users.count("name"), 2)

    def test_sum_negative_and_signed(self):
        self.users.insert({"id": "1", "name": "A", "age": "-5"})
        self.users.insert({"id": "2", "name": "B", "age": "+15"})
        self.assertEqual(self.users.sum("age"), 10.0)
        self.assertEqual(self.users.avg("age"), 5.0)

    def test_sum_returns_float(self):
        self.users.insert({"id": "1", "name": "A", "age": "3"})
        self.assertIsInstance(self.users.sum("age"), float)
        self.assertIsInstance(self.users.avg("age"), float)

    def test_sum_non_numeric_column_warns(self):
        self.users.insert({"id": "1", "name": "Alex"})
        with capture_logs() as logs:
            result = self.users.sum("name")
        self.assertEqual(result, 0.0)
        self.assertEqual(logs[0]["event"], "sum_non_numeric_column")
        self.assertEqual(logs[0]["log_level"], "warning")
        self.assertEqual(logs[0]["column"], "name")

    def test_sum_unknown_column_warns(self):
        with capture_logs() as logs:
            self.assertEqual(self.users.sum("email"), 0.0)
        self.assertEqual(logs[0]["event"], "sum_non_numeric_column")

    def test_sum_skips_unparsable_values(self):
        """Rows that bypassed validation are skipped with a warning"""
        self.users.insert({"id": "1", "name": "A", "age": "10"})
        self.users._rows.append(Row({"id": "2", "name": "B", "age": "ten"}))
        with capture_logs() as logs:
            self.assertEqual(self.users.sum("age"), 10.0)
        self.assertEqual([e["event"] for e in logs], ["sum_skipped_value"])
        # the denominator still counts the unparsable value
        self.assertEqual(self.users.avg("age"), 5.0)


class TestForeignKeys(unittest.TestCase):

    def _build(self, enforce):
        db = Database(StoreConfig(enforce_foreign_keys=enforce))
        users = make_users(db)
        users.insert({"id": "1", "name": "Alex"})
        orders = (TableBuilder("orders", db)
                  .add_column("id", DataType.INTEGER, nullable=False, primary_key=True)
                  .add_column("user_id", DataType.INTEGER, foreign_key="users.id")
                  .build())
        return db, orders

    def test_not_checked_by_default(self):
        _, orders = self._build(enforce=False)
        orders.insert({"id": "1", "user_id": "99"})
        self.assertEqual(len(orders), 1)

    def test_matching_reference(self):
        _, orders = self._build(enforce=True)
        orders.insert({"id": "1", "user_id": "1"})
        self.assertEqual(len(orders), 1)

    def test_dangling_reference(self):
        _, orders = self._build(enforce=True)
        with self.assertRaises(ForeignKeyViolation) as ctx:
            orders.insert({"id": "1", "user_id": "99"})
        self.assertEqual(ctx.exception.kind, ErrorKind.FOREIGN_KEY_VIOLATION)
        self.assertEqual(ctx.exception.value, "99")
        self.assertEqual(len(orders), 0)

    def test_null_reference_not_checked(self):
        _, orders = self._build(enforce=True)
        orders.insert({"id": "1"})
        self.assertEqual(len(orders), 1)

    def test_missing_target_table(self):
        db = Database(StoreConfig(enforce_foreign_keys=True))
        table = (TableBuilder("orders", db)
                 .add_column("user_id", DataType.INTEGER, foreign_key=("people", "id"))
                 .build())
        with self.assertRaises(ForeignKeyViolation) as ctx:
            table.insert({"user_id": "1"})
        self.assertIn("people", str(ctx.exception))

    def test_missing_target_column(self):
        db = Database(StoreConfig(enforce_foreign_keys=True))
        make_users(db).insert({"id": "1", "name": "Alex"})
        table = (TableBuilder("orders", db)
                 .add_column("user_id", DataType.INTEGER, foreign_key=("users", "uid"))
                 .build())
        with self.assertRaises(ForeignKeyViolation):
            table.insert({"user_id": "1"})

    def test_detached_table(self):
        schema = TableSchema("orders", [Column("user_id", DataType.INTEGER, foreign_key=("users", "id"))])
        table = Table(schema, enforce_foreign_keys=True)
        with self.assertRaises(ForeignKeyViolation):
            table.insert({"user_id": "1"})


class TestLogging(unittest.TestCase):

    def test_rejected_insert_is_logged(self):
        users = make_users(Database())
        with capture_logs() as logs:
            users.try_insert({"name": "Test"})
        rejected = [e for e in logs if e["event"] == "insert_rejected"]
        self.assertEqual(len(rejected), 1)
        self.assertEqual(rejected[0]["kind"], "MISSING_PRIMARY_KEY_VALUE")
        self.assertEqual(rejected[0]["column"], "id")

    def test_table_creation_is_logged(self):
        with capture_logs() as logs:
            make_users(Database())
        self.assertEqual(logs[0]["event"], "table_created")
        self.assertEqual(logs[0]["columns"], ["id", "name", "age"])


if __name__ == '__main__':
    unittest.main()
