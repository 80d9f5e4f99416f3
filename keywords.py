from enum import StrEnum

class qtype(StrEnum):
    SELECT = 'SELECT'
    INSERT = 'INSERT'
    REPLACE = 'REPLACE'
    UPDATE = 'UPDATE'
    DELETE = 'DELETE'
    CREATE = 'CREATE'
    DROP = 'DROP'

class qtrans(StrEnum):
    WITH = 'WITH'
    FROM = 'FROM'
    INTO = 'INTO'
    VALUES = 'VALUES'
    SET = 'SET'
    WHERE = 'WHERE'
    ORDER = 'ORDER'
    BY = 'BY'
    LIMIT = 'LIMIT'
    OFFSET = 'OFFSET'
    AND = 'AND'
    OR = 'OR'
    NOT = 'NOT'
    IN = 'IN'
    IS = 'IS'
    NULL = 'NULL'
    DESC = 'DESC'
    ASC = 'ASC'
    AS = 'AS'
    JOIN = 'JOIN'
    ON = 'ON'
    DISTINCT = 'DISTINCT'
    COUNT = 'COUNT'

class qcomparators(StrEnum):
    EQ = '='
    NEQ = '!='
    LT = '<'
    GT = '>'
    LE = '<='
    GE = '>='

class qarithmaticoperators(StrEnum):
    ADD = '+'
    SUB = '-'
    DIV = '/'
    PRD = '*'
    OB = '('
    CB = ')'

class qseparators(StrEnum):
    SEMICOLON = ';'
    COMMA = ','
