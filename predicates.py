import abc
from typing import Any, Callable, Iterable, List, Sequence, Tuple

from keywords import qtrans

Quote = Callable[[str], str]
Fragment = Tuple[str, List[Any]]

comparison_operators = {
    '=': lambda x, y: x == y,
    '!=': lambda x, y: x != y,
    '>': lambda x, y: x > y,
    '<': lambda x, y: x < y,
    '>=': lambda x, y: x >= y,
    '<=': lambda x, y: x <= y
}

logical_operators = {
    qtrans.AND: all,
    qtrans.OR: any,
}

def _plain(name: str) -> str:
    return name

class Predicate(abc.ABC):
    """A boolean condition usable in the WHERE clause of a SELECT, UPDATE or DELETE."""

    @abc.abstractmethod
    def to_sql(self, quote: Quote = _plain) -> Fragment:
        """Renders the condition as parameterized SQL ('?' placeholders) and its parameters."""
        raise NotImplementedError

    @abc.abstractmethod
    def evaluate(self, record) -> bool:
        """Checks the condition against a single record (any mapping with .get, or a Row)."""
        raise NotImplementedError

    def __and__(self, other: 'Predicate') -> 'Predicate':
        return LogicalPredicate(qtrans.AND, [self, other])

    def __or__(self, other: 'Predicate') -> 'Predicate':
        return LogicalPredicate(qtrans.OR, [self, other])

    def __str__(self):
        sql, params = self.to_sql()
        return f"{sql} {params!r}" if params else sql


class ComparisonPredicate(Predicate):
    def __init__(self, comparison: str, column: str, value: Any):
        if comparison not in comparison_operators:
            raise ValueError(f"Invalid comparison operator: {comparison}")
        self.comparison = comparison
        self.comparison_function = comparison_operators[comparison]
        self.column = column
        self.value = value

    def to_sql(self, quote=_plain):
        return f"{quote(self.column)} {self.comparison} ?", [self.value]

    def evaluate(self, record):
        x = record.get(self.column)
        # NULL never compares true in SQL
        if x is None or self.value is None:
            return False
        return self.comparison_function(x, self.value)


class IsNullPredicate(Predicate):
    def __init__(self, column: str):
        self.column = column

    def to_sql(self, quote=_plain):
        return f"{quote(self.column)} {qtrans.IS} {qtrans.NULL}", []

    def evaluate(self, record):
        return record.get(self.column) is None


class InPredicate(Predicate):
    """column IN (values). NULL values become an extra IS NULL branch."""

    def __init__(self, column: str, values: Iterable[Any]):
        self.column = column
        self.values = list(values)

    def to_sql(self, quote=_plain):
        values = [v for v in self.values if v is not None]
        has_null = len(values) != len(self.values)
        if not values:
            if has_null:
                return IsNullPredicate(self.column).to_sql(quote)
            return NeverPredicate().to_sql(quote)
        placeholders = ", ".join("?" for _ in values)
        sql = f"{quote(self.column)} {qtrans.IN} ({placeholders})"
        if has_null:
            sql = f"( {sql} {qtrans.OR} {quote(self.column)} {qtrans.IS} {qtrans.NULL} )"
        return sql, values

    def evaluate(self, record):
        return record.get(self.column) in self.values


class LogicalPredicate(Predicate):
    def __init__(self, op: str, operands: Sequence[Predicate]):
        if op not in logical_operators:
            raise ValueError(f"Invalid logical operator: {op}")
        self.op = qtrans(op)
        self.func = logical_operators[self.op]
        self.operands = list(operands)

    def to_sql(self, quote=_plain):
        parts, params = [], []
        for operand in self.operands:
            sql, operand_params = operand.to_sql(quote)
            if isinstance(operand, (LogicalPredicate, RawPredicate)):
                sql = f"( {sql} )"
            parts.append(sql)
            params.extend(operand_params)
        return f" {self.op} ".join(parts), params

    def evaluate(self, record):
        return self.func(operand.evaluate(record) for operand in self.operands)


class RawPredicate(Predicate):
    """Literal SQL condition, e.g. context.raw("age > ?", 30)."""

    def __init__(self, sql: str, params: Sequence[Any] = ()):
        self.sql = sql
        self.params = list(params)

    def to_sql(self, quote=_plain):
        return self.sql, list(self.params)

    def evaluate(self, record):
        raise NotImplementedError("Raw SQL conditions can only be evaluated by the database")


class NeverPredicate(Predicate):
    """Matches no row at all."""

    def to_sql(self, quote=_plain):
        return "1 = 0", []

    def evaluate(self, record):
        return False


def and_all(predicates: Iterable[Predicate]) -> Predicate | None:
    """AND-combines the predicates. Returns None when there is nothing to combine (no constraint)."""
    predicates = list(predicates)
    if not predicates:
        return None
    if len(predicates) == 1:
        return predicates[0]
    return LogicalPredicate(qtrans.AND, predicates)

def or_any(predicates: Iterable[Predicate]) -> Predicate:
    """OR-combines the predicates. An empty disjunction matches nothing."""
    predicates = list(predicates)
    if not predicates:
        return NeverPredicate()
    if len(predicates) == 1:
        return predicates[0]
    return LogicalPredicate(qtrans.OR, predicates)
