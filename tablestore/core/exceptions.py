"""
Exceptions raised by tablestore.

Every error carries an ErrorKind so callers can branch on the kind of
violation without parsing messages.
"""

from enum import Enum, auto
from typing import Optional


class ErrorKind(Enum):
    DUPLICATE_TABLE_NAME = auto()
    TABLE_NOT_FOUND = auto()
    MISSING_PRIMARY_KEY_VALUE = auto()
    MISSING_REQUIRED_VALUE = auto()
    INVALID_COLUMN_VALUE = auto()
    DUPLICATE_COLUMN_NAME = auto()
    UNKNOWN_COLUMN = auto()
    FOREIGN_KEY_VIOLATION = auto()


class TableStoreError(ValueError):
    """Base class for all tablestore errors"""
    kind: ErrorKind

    def __init__(self, message: str, table: Optional[str] = None,
                 column: Optional[str] = None, value: Optional[str] = None):
        super().__init__(message)
        self.table = table
        self.column = column
        self.value = value


class DuplicateTableName(TableStoreError):
    kind = ErrorKind.DUPLICATE_TABLE_NAME

    def __init__(self, table: str):
        super().__init__(f"Table '{table}' already exists", table=table)


class TableNotFound(TableStoreError):
    kind = ErrorKind.TABLE_NOT_FOUND

    def __init__(self, table: str):
        super().__init__(f"Table '{table}' not found", table=table)


class MissingPrimaryKeyValue(TableStoreError):
    kind = ErrorKind.MISSING_PRIMARY_KEY_VALUE

    def __init__(self, table: str, column: str):
        super().__init__(
            f"Invalid INSERT into '{table}': missing value for PRIMARY KEY column '{column}'",
            table=table, column=column,
        )


class MissingRequiredValue(TableStoreError):
    kind = ErrorKind.MISSING_REQUIRED_VALUE

    def __init__(self, table: str, column: str):
        super().__init__(
            f"Invalid INSERT into '{table}': missing value for NOT NULL column '{column}'",
            table=table, column=column,
        )


class InvalidColumnValue(TableStoreError):
    kind = ErrorKind.INVALID_COLUMN_VALUE

    def __init__(self, table: str, column: str, value: str, type_name: str):
        super().__init__(
            f"Invalid value '{value}' for column '{column}' ({type_name}) in table '{table}'",
            table=table, column=column, value=value,
        )


class DuplicateColumnName(TableStoreError):
    kind = ErrorKind.DUPLICATE_COLUMN_NAME

    def __init__(self, table: str, column: str):
        super().__init__(f"Column '{column}' already exists in table '{table}'",
                         table=table, column=column)


class UnknownColumn(TableStoreError):
    kind = ErrorKind.UNKNOWN_COLUMN

    def __init__(self, table: str, column: str):
        super().__init__(f"Column '{column}' does not exist in table '{table}'",
                         table=table, column=column)


class ForeignKeyViolation(TableStoreError):
    kind = ErrorKind.FOREIGN_KEY_VIOLATION

    def __init__(self, table: str, column: str, value: str, reason: str):
        super().__init__(
            f"Foreign key violation on '{table}.{column}' for value '{value}': {reason}",
            table=table, column=column, value=value,
        )
