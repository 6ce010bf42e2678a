"""
Database - Main entry point for tablestore

A Database is a named collection of tables. It is an ordinary object:
create one and pass it to whoever needs it. For scripts that want a
single shared instance, get_default_database() creates one lazily and
keeps it for the rest of the process.
"""

from typing import Any, Dict, Iterable, List, Optional

from ..config import StoreConfig
from ..logging_config import get_logger
from ..storage.table import Table
from .exceptions import DuplicateTableName, TableNotFound
from .schema import Column, TableSchema

logger = get_logger(__name__)


class Database:
    """
    tablestore Database instance.

    Usage:
        db = Database()
        users = db.create_table("users", [
            Column("id", DataType.INTEGER, nullable=False, primary_key=True),
            Column("name", DataType.STRING, nullable=False),
        ])
        users.insert({"id": "1", "name": "Alex"})
        db.get_table("users").count("name")
    """

    def __init__(self, config: Optional[StoreConfig] = None):
        """
        Initialize an empty database.

        Args:
            config: Insert behaviour settings (strict column names,
                foreign key enforcement). Defaults to StoreConfig().
        """
        self.config = config or StoreConfig()
        self._tables: Dict[str, Table] = {}

    def create_table(self, name: str, columns: Iterable[Column]) -> Table:
        """
        Create and register a new table.

        Raises:
            DuplicateTableName: If a table called `name` already exists
            DuplicateColumnName: If two columns share a name
        """
        if name in self._tables:
            raise DuplicateTableName(name)

        table = Table(
            TableSchema(name, tuple(columns)),
            resolver=self.get_table,
            strict_columns=self.config.strict_columns,
            enforce_foreign_keys=self.config.enforce_foreign_keys,
        )
        self._tables[name] = table
        logger.info("table_created", table=name, columns=table.column_names)
        return table

    def get_table(self, name: str) -> Table:
        """
        Look up a table by name.

        Raises:
            TableNotFound: If no table called `name` exists
        """
        try:
            return self._tables[name]
        except KeyError:
            raise TableNotFound(name) from None

    def has_table(self, name: str) -> bool:
        return name in self._tables

    def list_tables(self) -> List[str]:
        """List all table names in creation order"""
        return list(self._tables)

    def describe(self, name: str) -> Dict[str, Any]:
        """Get table schema information as a dictionary"""
        return self.get_table(name).describe()

    def __contains__(self, name: str) -> bool:
        return name in self._tables

    def __len__(self) -> int:
        return len(self._tables)

    def __repr__(self) -> str:
        return f"Database(tables={self.list_tables()!r})"


_default_database: Optional[Database] = None


def get_default_database() -> Database:
    """Return the process-wide Database, creating it on first use"""
    global _default_database
    if _default_database is None:
        _default_database = Database(StoreConfig.from_env())
    return _default_database


def reset_default_database() -> None:
    """Forget the process-wide Database (for tests)"""
    global _default_database
    _default_database = None
