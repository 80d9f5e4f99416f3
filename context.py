import logging
import re
from typing import Any, Iterable, Mapping, Sequence

from config import Settings
from errors import NamingError, RelationError, ValidationError
from keywords import qseparators, qtrans, qtype
from predicates import (
    ComparisonPredicate, InPredicate, IsNullPredicate, NeverPredicate, Predicate, RawPredicate
)
from request import QueryRequest
from result import Result
from row import Row
from statement import Statement
from structure import CompositeKey, Structure

logger = logging.getLogger(__name__)

# quoted strings and identifiers are matched whole so their contents are skipped
_VERB_TOKENS = re.compile(r"""'(?:[^']|'')*'|"(?:[^"]|"")*"|[()]|[A-Za-z_]+""")

def statement_verb(sql: str) -> qtype | None:
    """The main keyword of a statement, looking past a leading WITH clause.

    "WITH new AS (SELECT ...) INSERT INTO t SELECT * FROM new" gives INSERT.
    """
    depth = 0
    for token in _VERB_TOKENS.findall(sql):
        if token == "(":
            depth += 1
        elif token == ")":
            depth -= 1
        elif depth == 0 and token.upper() in qtype.__members__:
            return qtype(token.upper())
    return None


class Context:
    """Entry point of the library: owns the DB-API connection and the structure.

    Executes SQL and wraps every outcome in a Result, creates rows, builds
    predicates and resolves references between tables:

        context = Context(sqlite3.connect("app.db", isolation_level=None))
        employees = context.table("employee").where({"city": "NY"}).execute()
        contracts = employees.query("contract_list").execute()
        employees.update({"salary": 65000})
    """
    def __init__(self, connection, structure: Structure | None = None, settings: Settings | None = None):
        self.connection = connection
        self.settings = settings or Settings()
        self.structure = structure or Structure(
            primary_key=self.settings.primary_key,
            foreign_key_suffix=self.settings.foreign_key_suffix,
        )

    # execution

    def execute(self, request: QueryRequest, table: str | None = None) -> Result:
        logger.debug("Executing %s with params %r", request.sql, request.params)
        cursor = self.connection.cursor()
        try:
            cursor.execute(request.sql, tuple(request.params))
            insert_id = None
            if statement_verb(request.sql) in (qtype.INSERT, qtype.REPLACE):
                insert_id = cursor.lastrowid
            return Result.from_cursor(table, cursor, self, insert_id=insert_id)
        finally:
            cursor.close()

    def query(self, sql: str, *params) -> Result:
        return self.execute(QueryRequest(sql, params))

    def table(self, name: str) -> Statement:
        self.quote_identifier(name)
        return Statement(self, name)

    def create_row(self, table: str | None, data: Mapping[str, Any] | None = None) -> Row:
        return Row(self, table, data)

    # predicates

    def quote_identifier(self, name: str) -> str:
        """Quotes a table or column name; "table.column" is quoted part by part."""
        if not name:
            raise NamingError("Identifier must not be empty.")
        delimiter = self.settings.identifier_delimiter
        return ".".join(f"{delimiter}{part.replace(delimiter, delimiter * 2)}{delimiter}" for part in name.split("."))

    def is_(self, column: str, value: Any) -> Predicate:
        """column = value, with NULL and collections translated to IS NULL and IN."""
        if value is None:
            return IsNullPredicate(column)
        if isinstance(value, (list, tuple, set, frozenset)):
            return self.where(column, value)
        return ComparisonPredicate('=', column, value)

    def where(self, column: str, values: Iterable[Any]) -> Predicate:
        """column IN (values). No values match no row."""
        values = list(values)
        if not values:
            return NeverPredicate()
        return InPredicate(column, values)

    def raw(self, sql: str, *params) -> Predicate:
        return RawPredicate(sql, params)

    __call__ = raw

    # references

    def query_ref(self, result: Result, name: str, where=None, params: Sequence[Any] = ()) -> Statement:
        """Statement over the rows of `name` related to the rows of `result`.

        "contract" resolves the parents referenced through result's contract_id
        column; "contract_list" resolves the contract rows pointing back at result.
        """
        if not result.table:
            raise RelationError("Cannot resolve references of a result without a table.")
        suffix = self.settings.list_suffix
        if name.endswith(suffix) and len(name) > len(suffix):
            target = name[:-len(suffix)]
            column = self.structure.get_back_reference(result.table, target)
            key = self._scalar_primary(result.table)
            statement = self.table(target).where(self.where(column, result.get_keys(key)))
        else:
            column = self.structure.get_reference(result.table, name)
            key = self._scalar_primary(name)
            statement = self.table(name).where(self.where(key, result.get_keys(column)))
        if where is not None:
            statement = statement.where(where, *params)
        return statement

    def _scalar_primary(self, table: str) -> str:
        key = self.structure.get_primary(table)
        if isinstance(key, CompositeKey):
            raise RelationError(f"Table '{table}' has a composite primary key and cannot be referenced by a single column.")
        return key.column

    # mutation

    def _where_sql(self, predicate: Predicate | None):
        if predicate is None:
            return "", []
        sql, params = predicate.to_sql(self.quote_identifier)
        return f" {qtrans.WHERE} {sql}", params

    def insert(self, table: str, data: Mapping[str, Any]) -> Result:
        quote = self.quote_identifier
        if data:
            columns = ", ".join(quote(column) for column in data)
            placeholders = ", ".join("?" for _ in data)
            sql = f"{qtype.INSERT} {qtrans.INTO} {quote(table)} ({columns}) {qtrans.VALUES} ({placeholders})"
        else:
            sql = f"{qtype.INSERT} {qtrans.INTO} {quote(table)} DEFAULT {qtrans.VALUES}"
        return self.execute(QueryRequest(sql + qseparators.SEMICOLON, tuple(data.values())), table=table)

    def update(self, table: str, data: Mapping[str, Any], predicate: Predicate | None = None) -> Result:
        if not data:
            raise ValidationError(f"Nothing to update in table '{table}'.")
        quote = self.quote_identifier
        assignments = ", ".join(f"{quote(column)} = ?" for column in data)
        where_sql, where_params = self._where_sql(predicate)
        sql = f"{qtype.UPDATE} {quote(table)} {qtrans.SET} {assignments}{where_sql}{qseparators.SEMICOLON}"
        return self.execute(QueryRequest(sql, tuple(data.values()) + tuple(where_params)), table=table)

    def delete(self, table: str, predicate: Predicate | None = None) -> Result:
        where_sql, where_params = self._where_sql(predicate)
        sql = f"{qtype.DELETE} {qtrans.FROM} {self.quote_identifier(table)}{where_sql}{qseparators.SEMICOLON}"
        return self.execute(QueryRequest(sql, tuple(where_params)), table=table)
