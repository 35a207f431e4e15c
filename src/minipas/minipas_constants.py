"""
Shared lexical constants for the minipas front end.

Exports:
    - TokenType: closed enumeration of token kinds. The integer values are the
      two-digit codes written to token ledgers and must not be renumbered.
    - KEYWORDS: lowercase keyword text -> TokenType.
    - SINGLE_CHAR_TOKENS: one-character operators and punctuation.
    - RELATIONAL_OPERATORS: token kinds accepted between two expressions of a condition.
    - TOKEN_DESCRIPTIONS: how each kind is named in "Expect ..." diagnostics.
    - EOLN_LABEL, EOF_LABEL: fixed values carried by the sentinel tokens.
    - MAX_IDENTIFIER_LENGTH, MAX_NESTING_DEPTH: default analysis limits.
    - MAX_NESTING_DEPTH_CEILING: largest nesting limit a configuration may set.
    - MAIN_PROCEDURE: owner name for variables of the top-level program body.
"""

from enum import IntEnum


class TokenType(IntEnum):
    BEGIN = 1
    END = 2
    INTEGER = 3
    IF = 4
    THEN = 5
    ELSE = 6
    FUNCTION = 7
    READ = 8
    WRITE = 9
    IDENTIFIER = 10
    CONSTANT = 11
    EQUAL = 12
    NOT_EQUAL = 13
    LESS_THAN_OR_EQUAL = 14
    LESS_THAN = 15
    GREATER_THAN_OR_EQUAL = 16
    GREATER_THAN = 17
    SUBTRACT = 18
    MULTIPLY = 19
    ASSIGN = 20
    LEFT_PARENTHESES = 21
    RIGHT_PARENTHESES = 22
    SEMICOLON = 23
    END_OF_LINE = 24
    END_OF_FILE = 25


KEYWORDS: dict[str, TokenType] = {
    "begin": TokenType.BEGIN,
    "end": TokenType.END,
    "integer": TokenType.INTEGER,
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "function": TokenType.FUNCTION,
    "read": TokenType.READ,
    "write": TokenType.WRITE,
}

SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "=": TokenType.EQUAL,
    "-": TokenType.SUBTRACT,
    "*": TokenType.MULTIPLY,
    "(": TokenType.LEFT_PARENTHESES,
    ")": TokenType.RIGHT_PARENTHESES,
    ";": TokenType.SEMICOLON,
}

RELATIONAL_OPERATORS: frozenset[TokenType] = frozenset(
    {
        TokenType.EQUAL,
        TokenType.NOT_EQUAL,
        TokenType.LESS_THAN,
        TokenType.LESS_THAN_OR_EQUAL,
        TokenType.GREATER_THAN,
        TokenType.GREATER_THAN_OR_EQUAL,
    }
)

EOLN_LABEL = "EOLN"
EOF_LABEL = "EOF"

TOKEN_DESCRIPTIONS: dict[TokenType, str] = {
    **{kind: f"'{text}'" for text, kind in KEYWORDS.items()},
    TokenType.IDENTIFIER: "identifier",
    TokenType.CONSTANT: "constant",
    TokenType.EQUAL: "'='",
    TokenType.NOT_EQUAL: "'<>'",
    TokenType.LESS_THAN_OR_EQUAL: "'<='",
    TokenType.LESS_THAN: "'<'",
    TokenType.GREATER_THAN_OR_EQUAL: "'>='",
    TokenType.GREATER_THAN: "'>'",
    TokenType.SUBTRACT: "'-'",
    TokenType.MULTIPLY: "'*'",
    TokenType.ASSIGN: "':='",
    TokenType.LEFT_PARENTHESES: "'('",
    TokenType.RIGHT_PARENTHESES: "')'",
    TokenType.SEMICOLON: "';'",
    TokenType.END_OF_LINE: EOLN_LABEL,
    TokenType.END_OF_FILE: EOF_LABEL,
}

MAX_IDENTIFIER_LENGTH = 16
MAX_NESTING_DEPTH = 64
# each nesting level costs up to five parser frames
MAX_NESTING_DEPTH_CEILING = 128

MAIN_PROCEDURE = "main"
VALUE_TYPE = "integer"

__all__ = [
    "EOF_LABEL",
    "EOLN_LABEL",
    "KEYWORDS",
    "MAIN_PROCEDURE",
    "MAX_IDENTIFIER_LENGTH",
    "MAX_NESTING_DEPTH",
    "MAX_NESTING_DEPTH_CEILING",
    "RELATIONAL_OPERATORS",
    "SINGLE_CHAR_TOKENS",
    "TOKEN_DESCRIPTIONS",
    "TokenType",
    "VALUE_TYPE",
]
