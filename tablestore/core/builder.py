"""Fluent helper for declaring a table's columns before creating it."""

from typing import List, Optional, Tuple, Union

from .database import Database, get_default_database
from .schema import Column, ForeignKey
from .types import DataType
from ..storage.table import Table


class TableBuilder:
    """
    Collect columns, then create the table in one step.

        users = (TableBuilder("users", db)
                 .add_column("id", DataType.INTEGER, nullable=False, primary_key=True)
                 .add_column("name", DataType.STRING, nullable=False)
                 .build())
    """

    def __init__(self, name: str, database: Optional[Database] = None):
        self.name = name
        self.database = database
        self.columns: List[Column] = []

    def add_column(self, name: str, data_type: Union[DataType, str], nullable: bool = True,
                   primary_key: bool = False,
                   foreign_key: Union[ForeignKey, Tuple[str, str], str, None] = None) -> 'TableBuilder':
        """Append a column; `data_type` may be a type name and `foreign_key` a 'table.column' string"""
        if isinstance(data_type, str):
            data_type = DataType.parse(data_type)
        if isinstance(foreign_key, str):
            foreign_key = ForeignKey.parse(foreign_key)
        elif isinstance(foreign_key, (list, tuple)):
            foreign_key = ForeignKey(*foreign_key)
        self.columns.append(Column(name, data_type, nullable, primary_key, foreign_key))
        return self

    def build(self) -> Table:
        """Create the table in the builder's database (the default one if none was given)"""
        database = self.database if self.database is not None else get_default_database()
        return database.create_table(self.name, self.columns)
