"""
minipas Language Parser

Checks a minipas token stream against the grammar and builds its symbol tables.

This module implements a one-token-lookahead recursive-descent parser. While it
walks the token stream it declares variables, parameters and procedures, resolves
every reference against the enclosing scopes and records diagnostics. It produces
no syntax tree: its output is the stream of tokens it consumed, the variable and
procedure tables and the error list.

Grammar
-------
::

    program       := subprogram EOF
    subprogram    := 'begin' declarations executions 'end'
    declarations  := declaration*                 (while lookahead is 'integer')
    declaration   := 'integer' (IDENT | procedure) ';'
    procedure     := 'function' IDENT '(' IDENT ')' ';' 'begin' declarations executions 'end'
    executions    := execution? (';' execution?)* (empty only before 'end')
    execution     := read | write | assignment | condition
    read          := 'read' '(' variable ')'
    write         := 'write' '(' variable ')'
    assignment    := (variable | procedure-name) ':=' expression
    condition     := 'if' expression relop expression 'then' execution 'else' execution
    expression    := term ('-' term)*
    term          := factor ('*' factor)*
    factor        := CONSTANT | variable | procedure-name '(' expression ')'
    relop         := '=' | '<>' | '<' | '<=' | '>' | '>='

Parser Behavior
---------------
- Line sentinels are consumed around every real token; crossing one moves to the
  next source line and re-arms error reporting.
- Only the first error on a line is recorded, so one malformed line yields one
  diagnostic.
- Recoverable problems (wrong token, undefined or duplicate symbol, bad
  relational operator) are recorded and parsing continues as if the expected
  construct had been present.
- A statement position holding a token that cannot start a statement aborts the
  parse. So does nesting deeper than the configured limit, or deep enough to
  exhaust the interpreter stack before that limit is reached. The aborting error is
  recorded with `fatal=True` and everything collected before it is kept.

Entry Points
------------
- `Parser(tokens).parse()`: Parse a complete token stream into a `ParseResult`.
- `parse_tokens(tokens)`: Functional shorthand for the above.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field

from minipas.minipas_constants import (
    EOF_LABEL,
    MAIN_PROCEDURE,
    MAX_NESTING_DEPTH,
    RELATIONAL_OPERATORS,
    TOKEN_DESCRIPTIONS,
    TokenType,
)
from minipas.minipas_cursor import Cursor
from minipas.minipas_errors import CompileError, GrammarError, SemanticError
from minipas.minipas_lexer import Token
from minipas.minipas_symbols import Procedure, SymbolTable, Variable, VariableKind

logger = logging.getLogger(__name__)

UNMATCHED_PARENTHESIS = "Unmatched '('"


@dataclass
class ParseResult:
    """Everything a parse produces.

    Attributes:
        tokens (list[Token]): Tokens consumed by the parser, line sentinels included.
        variables (list[Variable]): Declared variables and parameters.
        procedures (list[Procedure]): Declared procedures.
        errors (list[CompileError]): Recorded diagnostics in order; a fatal error, if any, is last.
    """

    tokens: list[Token] = field(default_factory=list)
    variables: list[Variable] = field(default_factory=list)
    procedures: list[Procedure] = field(default_factory=list)
    errors: list[CompileError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def aborted(self) -> bool:
        return any(error.fatal for error in self.errors)


class Parser:
    """
    minipas Parser Class

    Attributes
    ----------
    cursor : Cursor[Token]
        Read head over the input tokens.
    line : int
        Source line of the lookahead token.
    current_level : int
        Lexical level of the body being parsed; 1 for the program body.
    procedure_stack : list[str]
        Owners for new declarations, innermost last. The bottom entry is `main`.
    open_procedures : list[Procedure | None]
        Records whose address range is still growing, parallel to `procedure_stack`.
        None where the owner was not added to the table (program body, duplicates).
    scope_starts : list[int]
        Size of the variable table when each open body began, parallel to
        `procedure_stack`. Duplicate checks only look at later declarations.
    should_add_error : bool
        False once an error has been recorded on the current line.
    depth : int
        Current nesting of statements, expressions and procedure bodies.
    symbols : SymbolTable
        Declared variables and procedures.
    consumed : list[Token]
        Every token consumed so far, in order.
    errors : list[CompileError]
        Recorded diagnostics.
    """

    def __init__(self, tokens: Sequence[Token], max_nesting_depth: int = MAX_NESTING_DEPTH) -> None:
        self.cursor: Cursor[Token] = Cursor(tokens)
        self.max_nesting_depth = max_nesting_depth
        self.line = 1
        self.current_level = 1
        self.procedure_stack: list[str] = [MAIN_PROCEDURE]
        self.open_procedures: list[Procedure | None] = [None]
        self.scope_starts: list[int] = [0]
        self.should_add_error = True
        self.depth = 0
        self.symbols = SymbolTable()
        self.consumed: list[Token] = []
        self.errors: list[CompileError] = []
        self._end_of_file = Token(TokenType.END_OF_FILE, EOF_LABEL)

    def parse(self) -> ParseResult:
        """Parses the whole token stream.

        Returns:
            ParseResult: Consumed tokens, symbol tables and diagnostics. A fatal
            error ends the parse early but is returned like any other error.
        """
        try:
            self.go_to_next_line()
            self.parse_program()
        except CompileError as error:
            logger.debug("parse aborted: %s", error)
            self.errors.append(error)
        except RecursionError:
            error = GrammarError(self.line, "Nesting too deep to analyze", fatal=True)
            logger.warning("parse aborted: %s", error)
            self.errors.append(error)
        logger.debug(
            "parsed %d tokens: %d variables, %d procedures, %d errors",
            len(self.consumed),
            len(self.symbols.variables),
            len(self.symbols.procedures),
            len(self.errors),
        )
        return ParseResult(
            tokens=list(self.consumed),
            variables=list(self.symbols.variables),
            procedures=list(self.symbols.procedures),
            errors=list(self.errors),
        )

    # Program structure

    def parse_program(self) -> None:
        self.parse_subprogram()
        self.match(TokenType.END_OF_FILE)

    def parse_subprogram(self) -> None:
        self.match(TokenType.BEGIN)
        self.parse_declarations()
        self.parse_executions()
        self.match(TokenType.END)

    def parse_declarations(self) -> None:
        while self.has_type(TokenType.INTEGER):
            self.parse_declaration()

    def parse_declaration(self) -> None:
        """Parses `integer <name>;` or `integer function ...;`."""
        self.match(TokenType.INTEGER)

        if self.has_type(TokenType.IDENTIFIER):
            self.parse_variable_declaration()
        elif self.has_type(TokenType.FUNCTION):
            self.parse_procedure_declaration()
        else:
            self.add_error(
                GrammarError, f"'{self.current().value}' is not a valid variable name"
            )
            if not self.has_type(TokenType.SEMICOLON):
                self.consume_token()

        self.match(TokenType.SEMICOLON)

    def parse_variable_declaration(self) -> None:
        token = self.current()
        if token.type == TokenType.IDENTIFIER:
            self.register_variable(token.value)
        self.match(TokenType.IDENTIFIER)

    def parse_procedure_declaration(self) -> None:
        """Parses a function header and its body.

        The function's name is pushed as the owner of new declarations before its
        parameter is read, and popped once the body's `end` has been matched. The
        body opens a fresh duplicate-check scope, so a repeated function does not
        clash with the locals of the one it repeats.
        """
        self.match(TokenType.FUNCTION)
        token = self.current()
        procedure = None
        if token.type == TokenType.IDENTIFIER:
            procedure = self.register_procedure(token.value)
        self.match(TokenType.IDENTIFIER)

        self.procedure_stack.append(token.value)
        self.open_procedures.append(procedure)
        self.scope_starts.append(len(self.symbols.variables))

        self.match(TokenType.LEFT_PARENTHESES)
        self.parse_parameter_declaration()
        self.match(TokenType.RIGHT_PARENTHESES, UNMATCHED_PARENTHESIS)
        self.match(TokenType.SEMICOLON)
        self.parse_procedure_body()

        self.procedure_stack.pop()
        self.open_procedures.pop()
        self.scope_starts.pop()

    def parse_parameter_declaration(self) -> None:
        token = self.current()
        if token.type == TokenType.IDENTIFIER:
            self.register_parameter(token.value)
        self.match(TokenType.IDENTIFIER)

    def parse_procedure_body(self) -> None:
        with self.nested():
            self.current_level += 1
            logger.debug(
                "entering %s at level %d", self.procedure_stack[-1], self.current_level
            )
            self.parse_subprogram()
            logger.debug(
                "leaving %s at level %d", self.procedure_stack[-1], self.current_level
            )
            self.current_level -= 1

    # Statements

    def parse_executions(self) -> None:
        if not self.at_block_end():
            self.parse_execution()

        while self.has_type(TokenType.SEMICOLON):
            self.match(TokenType.SEMICOLON)
            if self.at_block_end():
                break
            self.parse_execution()

    def parse_execution(self) -> None:
        """Dispatches on the lookahead to one statement form.

        Raises:
            GrammarError: Fatal, if the lookahead cannot start a statement. This
                usually means a declaration follows the first statement of a body.
        """
        with self.nested():
            if self.has_type(TokenType.READ):
                self.parse_read()
            elif self.has_type(TokenType.WRITE):
                self.parse_write()
            elif self.has_type(TokenType.IDENTIFIER):
                self.parse_assignment()
            elif self.has_type(TokenType.IF):
                self.parse_condition()
            else:
                line = self.line
                token = self.consume_token()
                raise GrammarError(
                    line,
                    f"Expect executions, but got '{token.value}'. "
                    "Please move all declarations to the beginning of the procedure",
                    fatal=True,
                )

    def parse_read(self) -> None:
        self.match(TokenType.READ)
        self.match(TokenType.LEFT_PARENTHESES)
        self.parse_variable()
        self.match(TokenType.RIGHT_PARENTHESES, UNMATCHED_PARENTHESIS)

    def parse_write(self) -> None:
        self.match(TokenType.WRITE)
        self.match(TokenType.LEFT_PARENTHESES)
        self.parse_variable()
        self.match(TokenType.RIGHT_PARENTHESES, UNMATCHED_PARENTHESIS)

    def parse_assignment(self) -> None:
        """Parses `<variable or function name> := <expression>`.

        Assigning to a function name sets its return value.
        """
        name = self.current().value
        if self.symbols.find_variable(name, self.current_level) is not None:
            self.parse_variable()
        elif self.symbols.find_procedure(name, self.current_level) is not None:
            self.parse_procedure_name()
        else:
            self.add_error(SemanticError, f"Undefined variable or procedure '{name}'")
            self.consume_token()

        self.match(TokenType.ASSIGN)
        self.parse_expression()

    def parse_condition(self) -> None:
        self.match(TokenType.IF)
        self.parse_expression()
        self.parse_relational_operator()
        self.parse_expression()
        self.match(TokenType.THEN)
        self.parse_execution()
        self.match(TokenType.ELSE)
        self.parse_execution()

    def parse_relational_operator(self) -> None:
        token = self.current()
        if token.type not in RELATIONAL_OPERATORS:
            self.add_error(SemanticError, f"'{token.value}' is not a valid operator")
        self.consume_token()

    # Expressions

    def parse_expression(self) -> None:
        with self.nested():
            self.parse_term()
            while self.has_type(TokenType.SUBTRACT):
                self.match(TokenType.SUBTRACT)
                self.parse_term()

    def parse_term(self) -> None:
        self.parse_factor()
        while self.has_type(TokenType.MULTIPLY):
            self.match(TokenType.MULTIPLY)
            self.parse_factor()

    def parse_factor(self) -> None:
        """Parses a constant, a variable reference or a function call.

        For an identifier the symbol table decides between variable and call. An
        undefined identifier is reported and skipped, together with a bracketed
        argument when one follows it.
        """
        if self.has_type(TokenType.CONSTANT):
            self.match(TokenType.CONSTANT)
            return

        if not self.has_type(TokenType.IDENTIFIER):
            self.add_error(
                GrammarError,
                f"Expect variable, procedure or constant, but got '{self.current().value}'",
            )
            return

        name = self.current().value
        if self.symbols.find_variable(name, self.current_level) is not None:
            self.parse_variable()
        elif self.symbols.find_procedure(name, self.current_level) is not None:
            self.parse_procedure_call()
        else:
            self.add_error(SemanticError, f"Undefined variable or procedure '{name}'")
            self.consume_token()
            if self.has_type(TokenType.LEFT_PARENTHESES):
                self.parse_arguments()

    def parse_procedure_call(self) -> None:
        self.parse_procedure_name()
        self.parse_arguments()

    def parse_arguments(self) -> None:
        self.match(TokenType.LEFT_PARENTHESES)
        self.parse_expression()
        self.match(TokenType.RIGHT_PARENTHESES, UNMATCHED_PARENTHESIS)

    def parse_variable(self) -> None:
        token = self.current()
        if (
            token.type == TokenType.IDENTIFIER
            and self.symbols.find_variable(token.value, self.current_level) is None
        ):
            self.add_error(SemanticError, f"Undefined variable '{token.value}'")
        self.match(TokenType.IDENTIFIER)

    def parse_procedure_name(self) -> None:
        # callers have already resolved the name
        self.match(TokenType.IDENTIFIER)

    # Declarations

    def register_variable(self, name: str) -> None:
        variable = self.symbols.declare_variable(
            name,
            self.procedure_stack[-1],
            VariableKind.LOCAL,
            self.current_level,
            self.scope_starts[-1],
        )
        if variable is None:
            self.add_error(SemanticError, f"Variable '{name}' has already been declared")
            return
        self.claim_address(variable)

    def register_parameter(self, name: str) -> None:
        # first declaration of a freshly opened scope, so it cannot be a duplicate
        variable = self.symbols.add_variable(
            name, self.procedure_stack[-1], VariableKind.PARAMETER, self.current_level + 1
        )
        self.claim_address(variable)

    def register_procedure(self, name: str) -> Procedure | None:
        procedure = self.symbols.declare_procedure(name, self.current_level + 1)
        if procedure is None:
            self.add_error(SemanticError, f"Procedure '{name}' has already been declared")
        return procedure

    def claim_address(self, variable: Variable) -> None:
        owner = self.open_procedures[-1]
        if owner is not None:
            owner.claim(variable.address)

    # Token handling

    def current(self) -> Token:
        """Returns the lookahead token; a synthetic EOF once the input is exhausted."""
        token = self.cursor.peek()
        return token if token is not None else self._end_of_file

    def has_type(self, expected: TokenType) -> bool:
        return self.current().type == expected

    def at_block_end(self) -> bool:
        return self.has_type(TokenType.END) or self.has_type(TokenType.END_OF_FILE)

    def match(self, expected: TokenType, message: str | None = None) -> Token:
        """Consumes the lookahead, recording an error if it is not of type `expected`.

        The token is consumed either way so that parsing always makes progress.

        Args:
            expected: The token type the grammar requires here.
            message: Replaces the default "Expect ..., but got ..." message.

        Returns:
            Token: The consumed token, whatever its type.
        """
        if not self.has_type(expected):
            self.add_error(
                GrammarError,
                message
                or f"Expect {TOKEN_DESCRIPTIONS[expected]}, but got '{self.current().value}'",
            )
        return self.consume_token()

    def consume_token(self) -> Token:
        self.go_to_next_line()
        if not self.cursor.is_open():
            return self._end_of_file
        token = self.cursor.consume()
        self.consumed.append(token)
        self.go_to_next_line()
        return token

    def go_to_next_line(self) -> None:
        while self.cursor.is_open() and self.cursor.current.type == TokenType.END_OF_LINE:
            self.consumed.append(self.cursor.consume())
            lookahead = self.current()
            self.line = lookahead.line if lookahead.line else self.line + 1
            self.should_add_error = True

    @contextmanager
    def nested(self) -> Iterator[None]:
        self.depth += 1
        if self.depth > self.max_nesting_depth:
            raise GrammarError(
                self.line, f"Nesting exceeds {self.max_nesting_depth} levels", fatal=True
            )
        try:
            yield
        finally:
            self.depth -= 1

    def add_error(self, kind: type[CompileError], message: str) -> None:
        if not self.should_add_error:
            return
        self.should_add_error = False
        error = kind(self.line, message)
        logger.debug("recorded %s", error)
        self.errors.append(error)


def parse_tokens(tokens: Sequence[Token], max_nesting_depth: int = MAX_NESTING_DEPTH) -> ParseResult:
    """Parses `tokens` and returns the `ParseResult`."""
    return Parser(tokens, max_nesting_depth).parse()


__all__ = ["ParseResult", "Parser", "UNMATCHED_PARENTHESIS", "parse_tokens"]
