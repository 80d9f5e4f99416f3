import logging
import sqlite3

from cli import create_session, repl
from config import Settings
from context import Context
from structure import Structure

table_data = {"employee": [
    (1, 'Alice', 30, 'NY', 60000),
    (2, 'Bob', 22, 'SF', 45000),
    (3, 'Charlie', 25, 'NY', 55000),
    (4, 'Dave', 40, 'LA', 70000),
    (5, 'Eve', 19, 'BOS', 30000),
    (6, 'Fay', 22, 'SF', 45000),
    (7, 'Grace', 30, 'NY', 80000)],
    "contract": [(1, 1, '2025-01-01', '2027-12-31'),
                 (2, 1, '2023-01-01', '2024-12-31'),
                 (3, 2, '2024-01-01', '2027-07-01'),
                 (4, 2, '2023-01-01', '2023-12-31'),
                 (5, 3, '2026-01-01', '2026-03-31')],
}

demo_columns = {
    'employee': ['id', 'name', 'age', 'city', 'salary'],
    'contract': ['id', 'employee_id', 'start_date', 'end_date'],
}

demo_schema = {
    'employee': "CREATE TABLE employee (id INTEGER PRIMARY KEY, name TEXT, age INTEGER, city TEXT, salary INTEGER)",
    'contract': "CREATE TABLE contract (id INTEGER PRIMARY KEY, employee_id INTEGER REFERENCES employee(id), start_date TEXT, end_date TEXT)",
}

def seed_demo_data(context: Context):
    """Creates and fills the demo tables unless the database already has tables."""
    existing = context.query("SELECT name FROM sqlite_master WHERE type = 'table'")
    if existing.count():
        return
    for table, ddl in demo_schema.items():
        context.query(ddl)
        for values in table_data[table]:
            context.insert(table, dict(zip(demo_columns[table], values)))


def main():
    settings = Settings.from_env()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    connection = sqlite3.connect(settings.database, isolation_level=None)
    context = Context(connection, settings=settings)
    seed_demo_data(context)
    context.structure = Structure.reflect(
        connection,
        primary_key=settings.primary_key,
        foreign_key_suffix=settings.foreign_key_suffix,
    )
    try:
        repl(context, create_session())
    finally:
        connection.close()


if __name__ == "__main__":
    main()
