"""
tablestore - typed in-memory tables

Named tables with a fixed column schema, validated inserts and
COUNT / SUM / AVG aggregates.
"""

__version__ = "1.0.0"

from .core.database import Database, get_default_database
from .core.builder import TableBuilder
from .core.schema import Column, ForeignKey
from .core.types import DataType
from .core.exceptions import ErrorKind, TableStoreError
from .core.repl import REPL
from .storage.table import Table, Row, InsertResult

__all__ = [
    "Database", "get_default_database", "TableBuilder",
    "Column", "ForeignKey", "DataType",
    "ErrorKind", "TableStoreError",
    "Table", "Row", "InsertResult", "REPL",
]
