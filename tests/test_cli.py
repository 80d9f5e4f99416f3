import sqlite3
import pytest
from unittest.mock import MagicMock

from cli import lex_line, render_result, repl, run_statement
from context import Context
from main import seed_demo_data

@pytest.fixture
def context():
    conn = sqlite3.connect(":memory:", isolation_level=None)
    ctx = Context(conn)
    seed_demo_data(ctx)
    yield ctx
    conn.close()


def test_render_result_table(context, capsys):
    render_result(context.query("SELECT id, name FROM employee WHERE id <= 2 ORDER BY id"))
    out = capsys.readouterr().out

    assert "| id |  name |" in out
    assert "| 1  | Alice |" in out
    assert "| 2  | Bob   |" in out
    assert "(2 rows in set)" in out

def test_render_empty_result(context, capsys):
    render_result(context.query("SELECT * FROM employee WHERE id = 99"))
    assert "RESULT: (Empty set)" in capsys.readouterr().out

def test_render_affected_rows(context, capsys):
    render_result(context.query("UPDATE employee SET salary = 1 WHERE city = 'NY'"))
    assert "OK, 3 rows affected" in capsys.readouterr().out

def test_render_insert_id(context, capsys):
    render_result(context.query("INSERT INTO employee (name) VALUES ('Heidi')"))
    assert "OK, 1 rows affected (insert id 8)" in capsys.readouterr().out

def test_run_statement_reports_errors(context, capsys):
    assert run_statement(context, "SELECT * FROM nowhere") is None
    assert "ERROR: sqlite3.OperationalError: no such table: nowhere" in capsys.readouterr().out

def test_repl_runs_until_exit(context, capsys):
    session = MagicMock()
    session.prompt.side_effect = ["", "SELECT name FROM employee WHERE id = 5", "exit", "SELECT 1"]
    repl(context, session)

    out = capsys.readouterr().out
    assert "| Eve  |" in out
    assert session.prompt.call_count == 3

def test_repl_stops_on_eof(context, capsys):
    session = MagicMock()
    session.prompt.side_effect = EOFError
    repl(context, session)
    assert "bye" in capsys.readouterr().out

def test_lexer_classes():
    tokens = lex_line("SELECT name, 42 FROM employee WHERE city >= 'NY';")
    classes = {text: style for style, text in tokens if not text.isspace()}

    assert classes["SELECT"] == "class:keyword"
    assert classes["name"] == "class:identifier"
    assert classes[","] == "class:punctuation"
    assert classes["42"] == "class:number"
    assert classes[">="] == "class:comparator"
    assert classes["'NY'"] == "class:string"
    assert classes[";"] == "class:punctuation"
