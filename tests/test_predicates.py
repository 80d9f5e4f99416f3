import pytest

from predicates import (
    ComparisonPredicate, InPredicate, IsNullPredicate, LogicalPredicate,
    NeverPredicate, RawPredicate, and_all, or_any
)

TEST_DATA = [
    {"id": 1, "name": "Alice", "age": 30, "city": "NY"},
    {"id": 2, "name": "Bob", "age": 22, "city": "SF"},
    {"id": 3, "name": "Charlie", "age": 25, "city": None},
]

def quote(name):
    return f'"{name}"'

def matching_ids(predicate):
    return [record["id"] for record in TEST_DATA if predicate.evaluate(record)]


def test_comparison_sql_and_evaluation():
    predicate = ComparisonPredicate('>', 'age', 24)

    assert predicate.to_sql(quote) == ('"age" > ?', [24])
    assert matching_ids(predicate) == [1, 3]

def test_comparison_with_null_never_matches():
    assert matching_ids(ComparisonPredicate('!=', 'city', 'NY')) == [2]

def test_invalid_comparison_operator():
    with pytest.raises(ValueError):
        ComparisonPredicate('<>', 'age', 1)

def test_is_null():
    predicate = IsNullPredicate('city')
    assert predicate.to_sql(quote) == ('"city" IS NULL', [])
    assert matching_ids(predicate) == [3]

def test_in_predicate():
    predicate = InPredicate('city', ['NY', 'SF'])
    assert predicate.to_sql(quote) == ('"city" IN (?, ?)', ['NY', 'SF'])
    assert matching_ids(predicate) == [1, 2]

def test_in_predicate_with_null_value():
    predicate = InPredicate('city', ['SF', None])
    assert predicate.to_sql(quote) == ('( "city" IN (?) OR "city" IS NULL )', ['SF'])
    assert matching_ids(predicate) == [2, 3]

def test_empty_in_predicate_matches_nothing():
    predicate = InPredicate('id', [])
    assert predicate.to_sql(quote) == ("1 = 0", [])
    assert matching_ids(predicate) == []

def test_logical_predicate_parenthesizes_nested_groups():
    inner = ComparisonPredicate('=', 'city', 'NY') & ComparisonPredicate('=', 'age', 30)
    predicate = inner | ComparisonPredicate('=', 'id', 2)

    sql, params = predicate.to_sql(quote)
    assert sql == '( "city" = ? AND "age" = ? ) OR "id" = ?'
    assert params == ['NY', 30, 2]
    assert matching_ids(predicate) == [1, 2]

def test_invalid_logical_operator():
    with pytest.raises(ValueError):
        LogicalPredicate('XOR', [])

def test_raw_predicate():
    predicate = RawPredicate("age BETWEEN ? AND ?", (20, 25))
    assert predicate.to_sql(quote) == ("age BETWEEN ? AND ?", [20, 25])
    with pytest.raises(NotImplementedError):
        predicate.evaluate(TEST_DATA[0])

def test_raw_predicate_is_parenthesized_inside_logical():
    predicate = RawPredicate("a = 1 OR b = 2") & ComparisonPredicate('=', 'c', 3)
    assert predicate.to_sql() == ("( a = 1 OR b = 2 ) AND c = ?", [3])

def test_never_predicate():
    assert NeverPredicate().to_sql() == ("1 = 0", [])
    assert matching_ids(NeverPredicate()) == []

def test_and_all():
    assert and_all([]) is None
    single = IsNullPredicate('city')
    assert and_all([single]) is single
    assert matching_ids(and_all([ComparisonPredicate('>', 'age', 20), ComparisonPredicate('<', 'age', 30)])) == [2, 3]

def test_or_any_of_nothing_matches_nothing():
    assert isinstance(or_any([]), NeverPredicate)
    assert matching_ids(or_any([ComparisonPredicate('=', 'id', 1), ComparisonPredicate('=', 'id', 3)])) == [1, 3]

def test_str_shows_params():
    assert str(ComparisonPredicate('=', 'id', 1)) == "id = ? [1]"
    assert str(IsNullPredicate('city')) == "city IS NULL"
