"""
Table storage - rows, constraint checks and aggregate queries

Features:
- Fixed schema per table, append-only row list
- All-or-nothing inserts: every column is checked before a row is stored
- Optional strict column names and foreign key checks
- COUNT / SUM / AVG over a column's non-empty values
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from ..core.schema import Column, TableSchema
from ..core.exceptions import (
    TableStoreError, TableNotFound, MissingPrimaryKeyValue, MissingRequiredValue,
    InvalidColumnValue, UnknownColumn, ForeignKeyViolation,
)
from ..logging_config import get_logger

logger = get_logger(__name__)

TableResolver = Callable[[str], 'Table']


class Row(Mapping):
    """Read-only mapping of column name to stored text"""

    __slots__ = ('_data',)

    def __init__(self, data: Mapping[str, str]):
        self._data = dict(data)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Row):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    def __hash__(self):
        return hash(frozenset(self._data.items()))

    def __repr__(self) -> str:
        return f"Row({self._data!r})"

    def to_dict(self) -> Dict[str, str]:
        return dict(self._data)


@dataclass(frozen=True)
class InsertResult:
    """Outcome of Table.try_insert: exactly one of row / error is set"""
    row: Optional[Row] = None
    error: Optional[TableStoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Table:
    """
    A named table: fixed columns plus the rows inserted so far.

    Tables are normally created through Database.create_table (or a
    TableBuilder) so that foreign keys can be resolved against the
    other tables of the same database.
    """

    def __init__(self, schema: TableSchema, resolver: Optional[TableResolver] = None,
                 strict_columns: bool = False, enforce_foreign_keys: bool = False):
        self.schema = schema
        self._resolver = resolver
        self.strict_columns = strict_columns
        self.enforce_foreign_keys = enforce_foreign_keys
        self._rows: List[Row] = []

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def columns(self) -> Tuple[Column, ...]:
        return self.schema.columns

    @property
    def column_names(self) -> List[str]:
        return self.schema.get_column_names()

    @property
    def rows(self) -> Tuple[Row, ...]:
        """Snapshot of the stored rows in insertion order"""
        return tuple(self._rows)

    def get_column(self, name: str) -> Optional[Column]:
        return self.schema.get_column(name)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(tuple(self._rows))

    def __repr__(self) -> str:
        return f"Table({self.name!r}, columns={self.column_names!r}, rows={len(self._rows)})"

    # ------------------------------------------------------------------
    # Inserts
    # ------------------------------------------------------------------

    def insert(self, values: Mapping[str, str], strict: Optional[bool] = None) -> Row:
        """
        Validate `values` against the schema and append a new row.

        Args:
            values: Column name to text value. Omitted nullable columns
                are stored as the empty string.
            strict: Reject column names that are not in the schema.
                Defaults to the table's `strict_columns` setting.

        Returns:
            The stored Row

        Raises:
            TableStoreError: One of MissingPrimaryKeyValue,
                MissingRequiredValue, InvalidColumnValue, UnknownColumn or
                ForeignKeyViolation. The table is left unchanged.
        """
        try:
            row_data = self._build_row(values, self.strict_columns if strict is None else strict)
        except TableStoreError as e:
            logger.info("insert_rejected", table=self.name, kind=e.kind.name,
                        column=e.column, value=e.value)
            raise

        row = Row(row_data)
        self._rows.append(row)
        logger.debug("row_inserted", table=self.name, row_count=len(self._rows))
        return row

    def try_insert(self, values: Mapping[str, str], strict: Optional[bool] = None) -> InsertResult:
        """Like insert(), but report a constraint violation instead of raising"""
        try:
            return InsertResult(row=self.insert(values, strict=strict))
        except TableStoreError as e:
            return InsertResult(error=e)

    def _build_row(self, values: Mapping[str, str], strict: bool) -> Dict[str, str]:
        unknown = [key for key in values if not self.schema.has_column(key)]
        if unknown:
            if strict:
                raise UnknownColumn(self.name, unknown[0])
            logger.debug("unknown_columns_ignored", table=self.name, columns=unknown)

        row_data: Dict[str, str] = {}
        for col in self.schema.columns:
            if col.name not in values:
                if col.primary_key:
                    raise MissingPrimaryKeyValue(self.name, col.name)
                if not col.nullable:
                    raise MissingRequiredValue(self.name, col.name)
                row_data[col.name] = ''
                continue

            value = values[col.name]
            # a nullable primary key would accept "", but the key is still required
            if col.primary_key and col.nullable and value == '':
                raise MissingPrimaryKeyValue(self.name, col.name)
            if not isinstance(value, str) or not col.validate(value):
                raise InvalidColumnValue(self.name, col.name, str(value), col.data_type.type_name)

            if value and col.foreign_key is not None and self.enforce_foreign_keys:
                self._check_foreign_key(col, value)

            row_data[col.name] = value

        return row_data

    def _check_foreign_key(self, col: Column, value: str) -> None:
        fk = col.foreign_key
        if self._resolver is None:
            raise ForeignKeyViolation(self.name, col.name, value,
                                      "table is not attached to a database")
        try:
            target = self._resolver(fk.table)
        except TableNotFound:
            raise ForeignKeyViolation(self.name, col.name, value,
                                      f"referenced table '{fk.table}' does not exist") from None

        if target.get_column(fk.column) is None:
            raise ForeignKeyViolation(self.name, col.name, value,
                                      f"referenced column '{fk}' does not exist")

        if not any(row[fk.column] == value for row in target._rows):
            raise ForeignKeyViolation(self.name, col.name, value,
                                      f"no row in '{fk.table}' has {fk.column} = '{value}'")

    # ------------------------------------------------------------------
    # Aggregates
    # ------------------------------------------------------------------

    def count(self, column: str) -> int:
        """Number of rows with a non-empty value in `column` (0 for unknown columns)"""
        return sum(1 for row in self._rows if row.get(column))

    def sum(self, column: str) -> float:
        """
        Sum of the non-empty values of an Integer column.

        Summing a column that is not numeric (or does not exist) is not an
        error: a warning is logged and 0.0 is returned.
        """
        col = self.schema.get_column(column)
        if col is None or not col.data_type.is_numeric:
            logger.warning("sum_non_numeric_column", table=self.name, column=column,
                           data_type=col.data_type.type_name if col else None)
            return 0.0

        total = 0
        for row in self._rows:
            value = row[column]
            if not value:
                continue
            try:
                total += int(value)
            except ValueError:
                logger.warning("sum_skipped_value", table=self.name, column=column, value=value)
        return float(total)

    def avg(self, column: str) -> float:
        """sum(column) / count(column), or 0.0 when the column has no values"""
        num = self.count(column)
        if num == 0:
            return 0.0
        return self.sum(column) / num

    def describe(self) -> Dict[str, Any]:
        """Schema of the table plus its current row count"""
        info = self.schema.to_dict()
        info['row_count'] = len(self._rows)
        return info
