import json
import logging
from typing import Any, Iterable, Iterator, List, Mapping, Sequence

from predicates import Predicate, and_all, or_any
from structure import CompositeKey, ScalarKey

logger = logging.getLogger(__name__)


class Result:
    """The outcome of one executed SQL statement.

    Holds the returned rows (each materialized through context.create_row and
    marked clean), the number of affected rows and the generated insert id, if
    any. A Result never changes after construction; update() and delete() issue
    new statements through the context instead.

    Build it with one of the two factories:
      Result.from_cursor(table, cursor, context)   drains an executed DB-API cursor
      Result.from_rows(table, records, context)    wraps mappings already in memory
    """

    def __init__(self, table: str | None, records: Iterable[Mapping[str, Any]], context, affected: int = 0, insert_id: Any = None):
        self._table = table
        self._context = context
        self._rows = tuple(context.create_row(table, record).mark_clean() for record in records)
        self._count = len(self._rows)
        self._affected = affected
        self._insert_id = insert_id

    @classmethod
    def from_cursor(cls, table: str | None, cursor, context, insert_id: Any = None) -> 'Result':
        # cursor.description is None for statements that return no rows
        records = []
        if cursor.description is not None:
            columns = [description[0] for description in cursor.description]
            records = [dict(zip(columns, values)) for values in cursor.fetchall()]
        # DB-API reports -1 when the count cannot be determined (e.g. SELECT in sqlite3)
        affected = max(cursor.rowcount, 0)
        result = cls(table, records, context, affected=affected, insert_id=insert_id)
        logger.debug("Materialized %d rows from cursor (table=%s, affected=%d)", result.count(), table, affected)
        return result

    @classmethod
    def from_rows(cls, table: str | None, records: Sequence[Mapping[str, Any]], context, insert_id: Any = None) -> 'Result':
        return cls(table, records, context, insert_id=insert_id)

    # accessors

    @property
    def table(self) -> str | None:
        return self._table

    @property
    def context(self):
        return self._context

    @property
    def rows(self) -> tuple:
        return self._rows

    @property
    def affected(self) -> int:
        return self._affected

    @property
    def insert_id(self) -> Any:
        return self._insert_id

    def first(self):
        """Return first row in result, if any"""
        return self._rows[0] if self._count > 0 else None

    def count(self) -> int:
        return self._count

    def __len__(self):
        return self._count

    def __iter__(self) -> Iterator:
        return iter(self._rows)

    def __getitem__(self, index):
        return self._rows[index]

    def __repr__(self):
        return f"Result(table={self._table!r}, count={self._count}, affected={self._affected}, insert_id={self._insert_id!r})"

    # keys & relations

    def get_keys(self, column: str) -> List[Any]:
        """Distinct values of `column` in first-seen order. Rows without the column are skipped."""
        keys, seen = [], set()
        for row in self._rows:
            if not row.is_set(column):
                continue
            value = row.get(column)
            try:
                if value in seen:
                    continue
                seen.add(value)
            except TypeError:
                # unhashable values (lists, dicts from JSON columns)
                if value in keys:
                    continue
            keys.append(value)
        return keys

    def query(self, name: str, where=None, *params):
        """Query the table referenced by `name`. The list suffix ("contract_list") gets the referencing rows."""
        return self._context.query_ref(self, name, where, params)

    # bulk mutation

    def where_primary(self) -> Predicate:
        """Condition matching exactly the rows of this result by primary key."""
        context = self._context
        key = context.structure.get_primary(self._table)

        if isinstance(key, CompositeKey):
            return or_any(
                and_all(context.is_(column, row.get(column)) for column in key.columns)
                for row in self._rows
            )
        if isinstance(key, ScalarKey):
            return context.where(key.column, self.get_keys(key.column))
        raise TypeError(f"Unsupported primary key definition: {key!r}")

    def update(self, data: Mapping[str, Any]):
        return self._context.update(self._table, data, self.where_primary())

    def delete(self):
        return self._context.delete(self._table, self.where_primary())

    # serialization

    def serialize(self) -> List[Any]:
        return [row.serialize() for row in self._rows]

    def to_json(self, **kwargs) -> str:
        kwargs.setdefault("default", str)
        return json.dumps(self.serialize(), **kwargs)
