import os
import re
import readline
import sqlite3
import sys
import traceback

from prompt_toolkit import PromptSession
from prompt_toolkit.lexers import Lexer
from prompt_toolkit.styles import Style

from context import Context
from errors import DBError
from keywords import qarithmaticoperators, qcomparators, qseparators, qtrans, qtype
from request import QueryRequest
from result import Result

def clear_screen():
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")

SQL_STYLE = Style.from_dict({
    "keyword": "bold ansiblue",
    "operator": "ansiyellow",
    "comparator": "ansired",
    "number": "ansimagenta",
    "string": "ansigreen",
    "punctuation": "ansicyan",
    "default": "",
})

KEYWORDS = {e.value.upper() for e in qtype} | {e.value.upper() for e in qtrans}
OPERATORS = {e.value for e in qarithmaticoperators}
COMPARATORS = {e.value for e in qcomparators}
PUNCTUATION = {e.value for e in qseparators}

class SQLLexer(Lexer):
    def lex_document(self, document):
        lines = document.text.splitlines()

        def get_line(lineno):
            if lineno >= len(lines):
                return []
            return lex_line(lines[lineno])

        return get_line

def lex_line(line: str):
    tokens = []
    i = 0
    while i < len(line):
        c = line[i]

        # Match multi-character tokens first
        if line[i:i+2] in COMPARATORS:
            tokens.append(("class:comparator", line[i:i+2]))
            i += 2
        elif c in COMPARATORS:
            tokens.append(("class:comparator", c))
            i += 1
        elif c in OPERATORS:
            tokens.append(("class:operator", c))
            i += 1
        elif c in PUNCTUATION:
            tokens.append(("class:punctuation", c))
            i += 1
        elif c.isspace():
            tokens.append(("class:default", c))
            i += 1
        elif c == "'":
            end = line.find("'", i + 1)
            end = len(line) if end == -1 else end + 1
            tokens.append(("class:string", line[i:end]))
            i = end
        else:
            m = re.match(r"[a-zA-Z_][a-zA-Z0-9_]*|\d+(\.\d+)?", line[i:])
            if m:
                word = m.group(0)
                if word[0].isdigit():
                    tokens.append(("class:number", word))
                elif word.upper() in KEYWORDS:
                    tokens.append(("class:keyword", word))
                else:
                    tokens.append(("class:identifier", word))
                i += len(word)
            else:
                # Any other single char
                tokens.append(("class:default", c))
                i += 1
    return tokens

def create_session() -> PromptSession:
    return PromptSession(
        lexer=SQLLexer(),
        style=SQL_STYLE,
        multiline=False,
        prompt_continuation="... ",
    )


def repl(context: Context, prompt_session: None | PromptSession = None):

    welcome_msg = """Welcome to rowset. Statements run directly against the connected database.
Demo tables: employee, contract (contract.employee_id references employee.id)

Suggestion for first query: SELECT * FROM employee;

exit  - exit program
quit  - same as exit
clear - clear the terminal text
                      """
    print(welcome_msg)
    while True:
        try:
            get_input = input
            if prompt_session:
                get_input = prompt_session.prompt
            sql = get_input("db> ").strip()

            if not sql:
                continue
            if sql.lower() in {"exit", "quit"}:
                break
            if sql.lower() == "clear":
                clear_screen()
                continue

            run_statement(context, sql)

        except (KeyboardInterrupt, EOFError):
            print("\nbye")
            break

def run_statement(context: Context, sql: str):
    print("\n" + "="*80)
    print(f"QUERY: {sql}")
    print("="*80)
    try:
        result = context.execute(QueryRequest(sql=sql))
    except (DBError, sqlite3.Error) as e:
        print("ERROR: " + "".join(traceback.format_exception_only(e)).strip())
        return None
    render_result(result)
    return result

def render_result(result: Result):
    """
    Formats and prints a result in an ASCII table.
    """
    if not result.count():
        if result.affected or result.insert_id is not None:
            print(f"OK, {result.affected} rows affected" + (f" (insert id {result.insert_id})" if result.insert_id is not None else ""))
        else:
            print("RESULT: (Empty set)")
        print("="*80)
        return

    columns = list(result.first())
    string_columns = [str(c) for c in columns]
    string_results = [tuple(str(row.get(c)) for c in columns) for row in result]

    num_cols = len(string_columns)
    max_widths = [len(header) for header in string_columns]

    for row in string_results:
        for i in range(num_cols):
            max_widths[i] = max(max_widths[i], len(row[i]))

    col_widths = [w + 2 for w in max_widths]

    header_line = ""
    for i in range(num_cols):
        header_line += f"| {string_columns[i].center(col_widths[i] - 2)} "
    header_line += "|"

    separator = "+" + "+".join("-" * w for w in col_widths) + "+"

    print(separator)
    print(header_line)
    print(separator)

    for row in string_results:
        row_line = ""
        for i in range(num_cols):
            # Left-align the data
            row_line += f"| {row[i].ljust(col_widths[i] - 2)} "
        row_line += "|"
        print(row_line)

    print(separator)
    print(f"({result.count()} rows in set)")
    print("="*80)
