"""
Schema Module - Defines table structure, columns, and constraints

Supports:
- Column definitions with types
- PRIMARY KEY flag (value required on every insert)
- NOT NULL constraint
- Foreign key references to another table's column
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
from .types import DataType
from .exceptions import DuplicateColumnName


@dataclass(frozen=True)
class ForeignKey:
    """Reference from a column to `table.column`"""
    table: str
    column: str

    @classmethod
    def parse(cls, ref: str) -> 'ForeignKey':
        """Parse 'table.column' into a ForeignKey"""
        table, sep, column = ref.partition('.')
        if not sep or not table or not column:
            raise ValueError(f"Foreign key reference must look like 'table.column', got '{ref}'")
        return cls(table, column)

    def __str__(self) -> str:
        return f"{self.table}.{self.column}"


@dataclass(frozen=True)
class Column:
    """Represents a column in a table"""
    name: str
    data_type: DataType
    nullable: bool = True
    primary_key: bool = False
    foreign_key: Optional[ForeignKey] = None

    def __post_init__(self):
        if isinstance(self.foreign_key, tuple):
            # accept a plain (table, column) pair
            object.__setattr__(self, 'foreign_key', ForeignKey(*self.foreign_key))

    def validate(self, value: str) -> bool:
        """Empty text is 'no value' and is only accepted for nullable columns"""
        if value == '':
            return self.nullable
        return self.data_type.validate(value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'type': str(self.data_type),
            'nullable': self.nullable,
            'primary_key': self.primary_key,
            'foreign_key': str(self.foreign_key) if self.foreign_key else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Column':
        """
        Build a column from the to_dict() shape (also used for JSON input).

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError("Column definition must be an object")

        name, type_name = data.get('name'), data.get('type')
        if not isinstance(name, str) or not name:
            raise ValueError("Column definition needs a non-empty string 'name'")
        if not isinstance(type_name, str):
            raise ValueError(f"Column '{name}' needs a string 'type'")

        nullable = data.get('nullable', True)
        primary_key = data.get('primary_key', False)
        for flag, value in (('nullable', nullable), ('primary_key', primary_key)):
            if not isinstance(value, bool):
                raise ValueError(f"'{flag}' of column '{name}' must be true or false")

        fk = data.get('foreign_key')
        if fk is not None and not isinstance(fk, str):
            raise ValueError(f"'foreign_key' of column '{name}' must be a 'table.column' string")

        return cls(
            name=name,
            data_type=DataType.parse(type_name),
            nullable=nullable,
            primary_key=primary_key,
            foreign_key=ForeignKey.parse(fk) if fk else None,
        )


@dataclass
class TableSchema:
    """Ordered, fixed list of columns for one table"""
    name: str
    columns: Sequence[Column] = field(default_factory=tuple)

    def __post_init__(self):
        self.columns = tuple(self.columns)
        self._column_map: Dict[str, Column] = {}

        for col in self.columns:
            if col.name in self._column_map:
                raise DuplicateColumnName(self.name, col.name)
            self._column_map[col.name] = col

    def get_column(self, name: str) -> Optional[Column]:
        """Get column by name"""
        return self._column_map.get(name)

    def has_column(self, name: str) -> bool:
        return name in self._column_map

    def get_column_names(self) -> List[str]:
        """Get list of column names in declaration order"""
        return [col.name for col in self.columns]

    @property
    def primary_keys(self) -> List[str]:
        return [col.name for col in self.columns if col.primary_key]

    def to_dict(self) -> dict:
        """Serialize schema to dictionary"""
        return {
            'name': self.name,
            'columns': [col.to_dict() for col in self.columns],
            'primary_keys': self.primary_keys,
        }
