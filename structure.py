from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

from errors import NamingError

@dataclass(frozen=True)
class ScalarKey:
    column: str

@dataclass(frozen=True)
class CompositeKey:
    columns: Tuple[str, ...]

PrimaryKey = ScalarKey | CompositeKey


def to_primary_key(definition: str | Sequence[str]) -> PrimaryKey:
    if isinstance(definition, str):
        return ScalarKey(definition)
    columns = tuple(definition)
    if not columns:
        raise NamingError("Primary key definition has no columns.")
    if len(columns) == 1:
        return ScalarKey(columns[0])
    return CompositeKey(columns)


class Structure:
    """Naming conventions for primary keys and references between tables.

    Defaults: every table has a scalar primary key `id`, and a table referencing
    `name` does so through the column `name_id`. Tables that deviate are listed
    in `primary`, e.g. {"enrollment": ["student_id", "course_id"]}.
    """
    def __init__(self, primary: Dict[str, str | Sequence[str]] | None = None, primary_key: str = "id", foreign_key_suffix: str = "_id"):
        self.primary = {table.lower(): to_primary_key(definition) for table, definition in (primary or {}).items()}
        self.primary_key = primary_key
        self.foreign_key_suffix = foreign_key_suffix

    @staticmethod
    def _check(name: str) -> str:
        if not name:
            raise NamingError("Table name must not be empty.")
        return name

    def get_primary(self, table: str) -> PrimaryKey:
        self._check(table)
        return self.primary.get(table.lower(), ScalarKey(self.primary_key))

    def get_reference(self, table: str, name: str) -> str:
        """Column on `table` holding the key of the referenced `name` row."""
        self._check(table)
        return f"{self._check(name)}{self.foreign_key_suffix}"

    def get_back_reference(self, table: str, name: str) -> str:
        """Column on `name` rows pointing back at `table`."""
        self._check(name)
        return f"{self._check(table)}{self.foreign_key_suffix}"

    @classmethod
    def reflect(cls, connection, **options) -> 'Structure':
        """Reads the declared primary keys of every table in a sqlite database."""
        primary = {}
        tables = connection.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"
        ).fetchall()
        for (table,) in tables:
            # PRAGMA table_info: (cid, name, type, notnull, dflt_value, pk)
            columns = connection.execute(f"PRAGMA table_info(\"{table}\")").fetchall()
            keyed = sorted((info[5], info[1]) for info in columns if info[5] > 0)
            if keyed:
                primary[table] = [name for _, name in keyed]
        return cls(primary, **options)
