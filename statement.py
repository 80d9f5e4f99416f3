from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional, Tuple

from errors import ValidationError
from keywords import qseparators, qtrans, qtype
from predicates import Predicate, and_all
from request import QueryRequest


@dataclass(frozen=True)
class SortItem:
    column: str
    descending: bool = False


@dataclass(frozen=True)
class Statement:
    """A SELECT on one table, built up step by step.

    Every builder method returns a new Statement, the original is left as is:

        adults = context.table("employee").where("age >= ?", 18)
        ny_adults = adults.where({"city": "NY"}).order_by("name")
    """
    context: Any
    table: str
    columns: Tuple[str, ...] = ()
    predicates: Tuple[Predicate, ...] = ()
    sort_items: Tuple[SortItem, ...] = ()
    limit_count: Optional[int] = None
    offset: Optional[int] = None

    def select(self, *columns: str) -> 'Statement':
        return replace(self, columns=self.columns + columns)

    def where(self, condition, *params) -> 'Statement':
        return replace(self, predicates=self.predicates + tuple(self._to_predicates(condition, params)))

    def _to_predicates(self, condition, params):
        if isinstance(condition, Predicate):
            return [condition]
        if isinstance(condition, str):
            return [self.context.raw(condition, *params)]
        if isinstance(condition, Mapping):
            return [self.context.is_(column, value) for column, value in condition.items()]
        raise ValidationError(f"Unsupported where condition: {condition!r}")

    def order_by(self, column: str, descending: bool = False) -> 'Statement':
        return replace(self, sort_items=self.sort_items + (SortItem(column, descending),))

    def limit(self, count: int, offset: Optional[int] = None) -> 'Statement':
        if count < 0 or (offset is not None and offset < 0):
            raise ValidationError("LIMIT and OFFSET must not be negative.")
        return replace(self, limit_count=count, offset=offset)

    def where_predicate(self) -> Predicate | None:
        return and_all(self.predicates)

    def to_sql(self) -> Tuple[str, Tuple[Any, ...]]:
        quote = self.context.quote_identifier
        columns = ", ".join(quote(c) for c in self.columns) if self.columns else "*"
        parts = [f"{qtype.SELECT} {columns} {qtrans.FROM} {quote(self.table)}"]
        params = []

        predicate = self.where_predicate()
        if predicate is not None:
            sql, params = predicate.to_sql(quote)
            parts.append(f"{qtrans.WHERE} {sql}")

        if self.sort_items:
            order = ", ".join(
                f"{quote(item.column)} {qtrans.DESC if item.descending else qtrans.ASC}" for item in self.sort_items
            )
            parts.append(f"{qtrans.ORDER} {qtrans.BY} {order}")

        if self.limit_count is not None:
            parts.append(f"{qtrans.LIMIT} {int(self.limit_count)}")
            if self.offset is not None:
                parts.append(f"{qtrans.OFFSET} {int(self.offset)}")

        return " ".join(parts) + qseparators.SEMICOLON, tuple(params)

    def execute(self):
        sql, params = self.to_sql()
        return self.context.execute(QueryRequest(sql, params), table=self.table)

    def __iter__(self):
        return iter(self.execute())

    def first(self):
        return self.limit(1, self.offset).execute().first()

    def update(self, data: Mapping[str, Any]):
        return self.context.update(self.table, data, self.where_predicate())

    def delete(self):
        return self.context.delete(self.table, self.where_predicate())
