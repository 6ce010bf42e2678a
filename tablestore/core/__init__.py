"""Core module - Database, Schema, Types, Builder, REPL"""

from .database import Database, get_default_database, reset_default_database
from .builder import TableBuilder
from .repl import REPL
from .schema import Column, ForeignKey, TableSchema
from .types import DataType
from .exceptions import (
    ErrorKind, TableStoreError, DuplicateTableName, TableNotFound,
    MissingPrimaryKeyValue, MissingRequiredValue, InvalidColumnValue,
    DuplicateColumnName, UnknownColumn, ForeignKeyViolation,
)

__all__ = [
    'Database', 'get_default_database', 'reset_default_database',
    'TableBuilder', 'REPL',
    'Column', 'ForeignKey', 'TableSchema', 'DataType',
    'ErrorKind', 'TableStoreError', 'DuplicateTableName', 'TableNotFound',
    'MissingPrimaryKeyValue', 'MissingRequiredValue', 'InvalidColumnValue',
    'DuplicateColumnName', 'UnknownColumn', 'ForeignKeyViolation',
]
