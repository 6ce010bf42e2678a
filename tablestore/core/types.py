"""
Data Types Module - Defines supported column data types for tablestore

Supports: INTEGER, STRING, BOOLEAN, DATE

Values are stored as text; each type only answers whether a piece of
text is acceptable for it.
"""

from enum import Enum
import re


_INTEGER_RE = re.compile(r'[+-]?[0-9]+')
_ASCII_DIGITS = frozenset('0123456789')
_BOOLEAN_LITERALS = frozenset({'true', 'false', '1', '0'})


class DataType(Enum):
    """Supported data types in tablestore"""
    INTEGER = 'Integer'
    STRING = 'String'
    BOOLEAN = 'Boolean'
    DATE = 'Date'

    @property
    def type_name(self) -> str:
        """Human readable type name used in diagnostics"""
        return self.value

    @property
    def is_numeric(self) -> bool:
        return self is DataType.INTEGER

    def validate(self, text: str) -> bool:
        """Check whether `text` is a valid literal of this type"""
        if self is DataType.INTEGER:
            return _INTEGER_RE.fullmatch(text) is not None

        elif self is DataType.STRING:
            return True

        elif self is DataType.BOOLEAN:
            return text in _BOOLEAN_LITERALS

        elif self is DataType.DATE:
            # YYYY-MM-DD shape only, month and day ranges are not checked
            if len(text) != 10:
                return False
            if text[4] != '-' or text[7] != '-':
                return False
            return all(text[i] in _ASCII_DIGITS for i in (0, 1, 2, 3, 5, 6, 8, 9))

        return False

    @classmethod
    def parse(cls, type_str: str) -> 'DataType':
        """Parse a type name such as 'int' or 'Date' into a DataType"""
        key = type_str.strip().upper()
        if key in _TYPE_ALIASES:
            return _TYPE_ALIASES[key]
        raise ValueError(f"Unknown data type: {type_str}")

    def __str__(self) -> str:
        return self.value


_TYPE_ALIASES = {
    'INTEGER': DataType.INTEGER,
    'INT': DataType.INTEGER,
    'STRING': DataType.STRING,
    'STR': DataType.STRING,
    'TEXT': DataType.STRING,
    'VARCHAR': DataType.STRING,
    'BOOLEAN': DataType.BOOLEAN,
    'BOOL': DataType.BOOLEAN,
    'DATE': DataType.DATE,
}
