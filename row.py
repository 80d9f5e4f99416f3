from typing import Any, Dict, Iterator, Mapping

from predicates import and_all
from result import Result
from structure import CompositeKey, ScalarKey

class Row:
    """One record of a table, keyed by column name, with dirty tracking.

    A row is dirty until mark_clean() is called. Rows materialized by a Result
    are clean right away; rows created by hand (context.create_row) are dirty
    and get inserted by save().
    """
    def __init__(self, context, table: str | None, data: Mapping[str, Any] | None = None):
        object.__setattr__(self, '_context', context)
        object.__setattr__(self, '_table', table)
        object.__setattr__(self, '_data', dict(data or {}))
        object.__setattr__(self, '_modified', set(self._data))
        object.__setattr__(self, '_persisted', False)
        object.__setattr__(self, '_stored', {})

    @property
    def table(self) -> str | None:
        return self._table

    @property
    def context(self):
        return self._context

    # field access

    def __getitem__(self, column: str):
        return self._data[column]

    def __setitem__(self, column: str, value: Any):
        if column not in self._data or self._data[column] != value:
            self._modified.add(column)
        self._data[column] = value

    def __getattr__(self, column: str):
        # only reached when normal attribute lookup fails
        if column.startswith('_'):
            raise AttributeError(column)
        try:
            return self._data[column]
        except KeyError:
            raise AttributeError(f"Row of '{self._table}' has no column '{column}'") from None

    def __setattr__(self, column: str, value: Any):
        self[column] = value

    def __contains__(self, column: str) -> bool:
        return self.is_set(column)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __eq__(self, other):
        if not isinstance(other, Row):
            return NotImplemented
        return self._table == other._table and self._data == other._data

    __hash__ = None

    def __repr__(self):
        return f"Row({self._table!r}, {self._data!r})"

    def get(self, column: str, default: Any = None):
        return self._data.get(column, default)

    def is_set(self, column: str) -> bool:
        """True if the column is present and not NULL."""
        return self._data.get(column) is not None

    # state

    def modified(self) -> Dict[str, Any]:
        return {column: self._data[column] for column in self._modified}

    def is_clean(self) -> bool:
        return not self._modified

    def mark_clean(self) -> 'Row':
        """Declares the current values equal to the stored record."""
        self._modified.clear()
        object.__setattr__(self, '_stored', dict(self._data))
        object.__setattr__(self, '_persisted', True)
        return self

    def serialize(self) -> Dict[str, Any]:
        return dict(self._data)

    # persistence

    def _where_self(self):
        # match the stored record, not pending edits of its key
        context = self._context
        stored = self._stored if self._persisted else self._data
        key = context.structure.get_primary(self._table)
        columns = key.columns if isinstance(key, CompositeKey) else (key.column,)
        return and_all(context.is_(column, stored.get(column)) for column in columns)

    def save(self) -> 'Row':
        """Inserts a new row or updates the modified columns of a stored one."""
        context = self._context
        if not self._persisted:
            result = context.insert(self._table, self._data)
            key = context.structure.get_primary(self._table)
            if isinstance(key, ScalarKey) and self._data.get(key.column) is None and result.insert_id is not None:
                self._data[key.column] = result.insert_id
            return self.mark_clean()
        changes = self.modified()
        if changes:
            context.update(self._table, changes, self._where_self())
        return self.mark_clean()

    def delete(self):
        return self._context.delete(self._table, self._where_self())

    def query(self, name: str, where=None, *params):
        """Related rows of this single row, see Result.query."""
        single = Result.from_rows(self._table, [self._data], self._context)
        return single.query(name, where, *params)
