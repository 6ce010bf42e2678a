#!/usr/bin/env python3
"""
Demo Web Application - Users table

Serves the tablestore JSON API with a pre-filled 'users' table so the
constraint checks and aggregates can be tried with curl:

    curl localhost:5000/tables/users/aggregate/age
    curl -X POST -H 'Content-Type: application/json' \\
         -d '{"id": 4, "name": "Ira"}' localhost:5000/tables/users/rows

Run:
    pip install -e '.[web]'
    python demo_app/app.py

Then visit: http://localhost:5000/tables
"""

from tablestore import Database, DataType, TableBuilder
from tablestore.config import StoreConfig
from tablestore.logging_config import configure_logging
from tablestore.webapp import create_app


def init_database(db: Database) -> None:
    """Create and fill the demo tables."""
    users = (TableBuilder("users", db)
             .add_column("id", DataType.INTEGER, nullable=False, primary_key=True)
             .add_column("name", DataType.STRING, nullable=False)
             .add_column("age", DataType.INTEGER)
             .add_column("active", DataType.BOOLEAN)
             .add_column("joined", DataType.DATE)
             .build())

    users.insert({"id": "1", "name": "Alex", "age": "25", "active": "true", "joined": "2024-01-15"})
    users.insert({"id": "2", "name": "Mira", "age": "30", "active": "1"})
    users.insert({"id": "3", "name": "Sam"})

    orders = (TableBuilder("orders", db)
              .add_column("id", DataType.INTEGER, nullable=False, primary_key=True)
              .add_column("user_id", DataType.INTEGER, nullable=False, foreign_key=("users", "id"))
              .add_column("amount", DataType.INTEGER)
              .build())

    orders.insert({"id": "1", "user_id": "1", "amount": "120"})
    orders.insert({"id": "2", "user_id": "2", "amount": "80"})


config = StoreConfig.from_env()
configure_logging(config.log_level)
db = Database(config)
init_database(db)
app = create_app(db)


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("tablestore Demo - Users API")
    print("=" * 60)
    print("Starting server at http://localhost:5000")
    print("\nPress Ctrl+C to stop the server.\n")

    app.run(debug=True, host='0.0.0.0', port=5000)
