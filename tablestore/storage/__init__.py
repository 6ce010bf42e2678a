"""Storage module - in-memory tables and rows"""

from .table import Table, Row, InsertResult

__all__ = ['Table', 'Row', 'InsertResult']
