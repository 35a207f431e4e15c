"""
Lexical analyzer for the minipas language.

This module converts raw source text into the flat token stream consumed by the parser.

Classes:
    Token: Represents a single token with type, value and source line.
    Lexer: Converts source text into tokens, one source line at a time.

Functions:
    tokenize(source): Convenience wrapper returning `(tokens, errors)`.

Features:
    - Skips runs of spaces (tabs count as spaces)
    - Case-insensitive keywords; the source spelling is kept as the token value
    - Identifiers longer than the configured limit are rejected
    - One-character lookahead for `<=`, `<>`, `>=` and `:=`
    - Emits an `END_OF_LINE` token per non-empty line and a final `END_OF_FILE`

Errors:
    Lexing never stops on bad input. Invalid characters, over-length identifiers
    and a colon not followed by `=` are collected as `LexicalError` records and
    scanning continues after the offending text.

Example:
    >>> tokens, errors = tokenize("begin integer a; end")
    >>> [t.value for t in tokens]
    ['begin', 'integer', 'a', ';', 'end', 'EOLN', 'EOF']
    >>> errors
    []
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from minipas.minipas_constants import (
    EOF_LABEL,
    EOLN_LABEL,
    KEYWORDS,
    MAX_IDENTIFIER_LENGTH,
    SINGLE_CHAR_TOKENS,
    TokenType,
)
from minipas.minipas_cursor import Cursor
from minipas.minipas_errors import LexicalError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, repr=False)
class Token:
    """Represents a single lexical token in the minipas language.

    Attributes:
        type (TokenType): The token kind.
        value (str): The literal text, or the fixed label of a sentinel token.
        line (int): The 1-based source line, 0 when unknown. Ignored by equality.
    """

    type: TokenType
    value: str
    line: int = field(default=0, compare=False)

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value})"


class Lexer:
    """Lexical analyzer for minipas source text.

    Attributes:
        source (str): The source text to tokenize.
        max_identifier_length (int): Longest accepted identifier.
        errors (list[LexicalError]): Errors collected by the last `tokenize()` call.
    """

    def __init__(self, source: str, max_identifier_length: int = MAX_IDENTIFIER_LENGTH) -> None:
        self.source = source
        self.max_identifier_length = max_identifier_length
        self.errors: list[LexicalError] = []
        self.line = 0
        self.cursor: Cursor[str] = Cursor("")

    @property
    def succeeded(self) -> bool:
        """True when the last run produced no lexical errors."""
        return not self.errors

    def tokenize(self) -> tuple[list[Token], list[LexicalError]]:
        """Tokenizes the whole source.

        Returns:
            tuple[list[Token], list[LexicalError]]: The best-effort token stream,
            always terminated by `END_OF_FILE`, and every lexical error found.
        """
        self.errors = []
        tokens = list(self.iter_tokens())
        logger.debug(
            "tokenized %d lines into %d tokens with %d errors",
            self.line,
            len(tokens),
            len(self.errors),
        )
        return tokens, list(self.errors)

    def iter_tokens(self) -> Iterator[Token]:
        """Yields tokens line by line; errors accumulate on `self.errors`.

        Only `\\n` ends a line (a preceding `\\r` is dropped), so reported line
        numbers match what an editor shows.
        """
        self.line = 0
        for number, text in enumerate(self.source.split("\n"), start=1):
            self.line = number
            stripped = text.removesuffix("\r").replace("\t", " ").strip()
            if not stripped:
                continue
            yield from self.tokenize_line(stripped)
            yield Token(TokenType.END_OF_LINE, EOLN_LABEL, number)
        yield Token(TokenType.END_OF_FILE, EOF_LABEL)

    def tokenize_line(self, text: str) -> Iterator[Token]:
        """Yields the tokens of a single stripped line, excluding the line sentinel."""
        self.cursor = Cursor(text)
        while self.cursor.is_open():
            if self.cursor.current == " ":
                self.cursor.consume()
                continue
            try:
                token = self.next_token()
            except LexicalError as error:
                logger.debug("lexical error: %s", error)
                self.errors.append(error)
                continue
            yield token

    def next_token(self) -> Token:
        """Consumes and returns the next token of the current line.

        Raises:
            LexicalError: If the text at the cursor cannot start a token. The
                offending text has already been consumed.
        """
        initial = self.cursor.consume()

        # 1. Keyword or identifier
        if is_letter(initial):
            value = initial + self._consume_while(lambda ch: is_letter(ch) or is_digit(ch))
            keyword = KEYWORDS.get(value.lower())
            if keyword is not None:
                return Token(keyword, value, self.line)
            if len(value) > self.max_identifier_length:
                raise LexicalError(
                    self.line,
                    f"Identifier '{value}' exceeds {self.max_identifier_length} characters",
                )
            return Token(TokenType.IDENTIFIER, value, self.line)

        # 2. Constant
        if is_digit(initial):
            value = initial + self._consume_while(is_digit)
            return Token(TokenType.CONSTANT, value, self.line)

        # 3. Single-character operators and punctuation
        if initial in SINGLE_CHAR_TOKENS:
            return Token(SINGLE_CHAR_TOKENS[initial], initial, self.line)

        # 4. Operators needing one character of lookahead
        if initial == "<":
            if self._accept("="):
                return Token(TokenType.LESS_THAN_OR_EQUAL, "<=", self.line)
            if self._accept(">"):
                return Token(TokenType.NOT_EQUAL, "<>", self.line)
            return Token(TokenType.LESS_THAN, "<", self.line)

        if initial == ">":
            if self._accept("="):
                return Token(TokenType.GREATER_THAN_OR_EQUAL, ">=", self.line)
            return Token(TokenType.GREATER_THAN, ">", self.line)

        if initial == ":":
            if self._accept("="):
                return Token(TokenType.ASSIGN, ":=", self.line)
            # the character paired with the colon is dropped as well
            if self.cursor.is_open():
                self.cursor.consume()
            raise LexicalError(self.line, "Misused colon")

        # 5. Unknown character
        raise LexicalError(self.line, f"Invalid character '{initial}'")

    def _accept(self, expected: str) -> bool:
        if self.cursor.peek() == expected:
            self.cursor.consume()
            return True
        return False

    def _consume_while(self, predicate: Callable[[str], bool]) -> str:
        text = ""
        while self.cursor.is_open() and predicate(self.cursor.current):
            text += self.cursor.consume()
        return text


def is_letter(ch: str) -> bool:
    return ch.isascii() and ch.isalpha()


def is_digit(ch: str) -> bool:
    return ch.isascii() and ch.isdigit()


def tokenize(
    source: str, max_identifier_length: int = MAX_IDENTIFIER_LENGTH
) -> tuple[list[Token], list[LexicalError]]:
    """Tokenizes `source` and returns `(tokens, errors)`.

    The run is successful exactly when the returned error list is empty.
    """
    return Lexer(source, max_identifier_length).tokenize()


__all__ = ["Lexer", "Token", "is_digit", "is_letter", "tokenize"]
