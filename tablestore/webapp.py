"""
Web demo - JSON API over a tablestore Database

Routes:
    GET  /tables                           list tables
    POST /tables                           create a table
    GET  /tables/<name>                    describe a table
    GET  /tables/<name>/rows               list rows
    POST /tables/<name>/rows               insert a row
    GET  /tables/<name>/aggregate/<column> count, sum and avg of a column

Requires the `web` extra (flask).
"""

from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from .core.schema import Column
from .core.database import Database
from .core.exceptions import ErrorKind, TableStoreError
from .logging_config import get_logger

logger = get_logger(__name__)

_STATUS_BY_KIND = {
    ErrorKind.TABLE_NOT_FOUND: 404,
    ErrorKind.DUPLICATE_TABLE_NAME: 409,
}


def _to_text(value: Any) -> str:
    """JSON scalars arrive typed; the store works on text."""
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def create_app(database: Optional[Database] = None) -> Flask:
    """Build the Flask app around `database` (a fresh one by default)."""
    app = Flask(__name__)
    db = database if database is not None else Database()
    app.config['TABLESTORE_DB'] = db

    @app.errorhandler(TableStoreError)
    def handle_store_error(e: TableStoreError):
        status = _STATUS_BY_KIND.get(e.kind, 400)
        return jsonify({'error': str(e), 'kind': e.kind.name}), status

    @app.errorhandler(ValueError)
    def handle_value_error(e: ValueError):
        return jsonify({'error': str(e), 'kind': None}), 400

    @app.route('/tables', methods=['GET'])
    def list_tables():
        """List all tables with their row counts."""
        return jsonify({
            'tables': [{'name': name, 'row_count': len(db.get_table(name))}
                       for name in db.list_tables()]
        })

    @app.route('/tables', methods=['POST'])
    def create_table():
        """Create a table from {"name": ..., "columns": [{"name", "type", ...}]}."""
        payload: Dict[str, Any] = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValueError("Request body must be a JSON object")
        name = payload.get('name')
        columns = payload.get('columns')
        if not isinstance(name, str) or not name or not isinstance(columns, list) or not columns:
            raise ValueError("Request must include 'name' and a non-empty 'columns' list")

        table = db.create_table(name, [Column.from_dict(col) for col in columns])
        return jsonify(table.describe()), 201

    @app.route('/tables/<name>', methods=['GET'])
    def describe_table(name):
        return jsonify(db.describe(name))

    @app.route('/tables/<name>/rows', methods=['GET'])
    def list_rows(name):
        table = db.get_table(name)
        return jsonify({'columns': table.column_names,
                        'rows': [row.to_dict() for row in table.rows]})

    @app.route('/tables/<name>/rows', methods=['POST'])
    def insert_row(name):
        """Insert a row from a JSON object of column values."""
        table = db.get_table(name)
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValueError("Request body must be a JSON object of column values")

        row = table.insert({key: _to_text(value) for key, value in payload.items()})
        return jsonify(row.to_dict()), 201

    @app.route('/tables/<name>/aggregate/<column>', methods=['GET'])
    def aggregate(name, column):
        """COUNT, SUM and AVG for one column."""
        table = db.get_table(name)
        return jsonify({
            'table': name,
            'column': column,
            'count': table.count(column),
            'sum': table.sum(column),
            'avg': table.avg(column),
        })

    logger.debug("webapp_created", tables=db.list_tables())
    return app
