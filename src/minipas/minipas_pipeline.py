"""
Runs the lexer and the parser back to back and merges their diagnostics.

Functions:
    analyze(source, config=None) -> AnalysisResult
    analyze_tokens(tokens, config=None) -> AnalysisResult

The parser always runs, even when the lexer reported errors: its input is the
best-effort token stream, and its own errors are appended after the lexical ones.
"""

import logging
from dataclasses import dataclass, field

from minipas.minipas_config import CompilerConfig
from minipas.minipas_errors import CompileError
from minipas.minipas_lexer import Lexer, Token
from minipas.minipas_parser import Parser
from minipas.minipas_symbols import Procedure, Variable

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Combined output of one front-end run.

    Attributes:
        tokens (list[Token]): Lexer output, the content of the `.dyd` ledger.
        cleaned_tokens (list[Token]): Tokens the parser consumed, the content of the `.dys` ledger.
        variables (list[Variable]): Variable table.
        procedures (list[Procedure]): Procedure table.
        lexical_errors (list[CompileError]): Errors found while tokenizing.
        errors (list[CompileError]): Lexical errors followed by parser errors.
    """

    tokens: list[Token] = field(default_factory=list)
    cleaned_tokens: list[Token] = field(default_factory=list)
    variables: list[Variable] = field(default_factory=list)
    procedures: list[Procedure] = field(default_factory=list)
    lexical_errors: list[CompileError] = field(default_factory=list)
    errors: list[CompileError] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def aborted(self) -> bool:
        return any(error.fatal for error in self.errors)


def analyze(source: str, config: CompilerConfig | None = None) -> AnalysisResult:
    """Tokenizes and parses `source`.

    Args:
        source: Complete program text.
        config: Limits to apply; defaults to `CompilerConfig()`.

    Returns:
        AnalysisResult: Token streams, symbol tables and the cumulative error list.
    """
    config = config or CompilerConfig()

    lexer = Lexer(source, config.max_identifier_length)
    tokens, lexical_errors = lexer.tokenize()
    if not lexer.succeeded:
        logger.warning("Lexer reported %d error(s); parsing anyway.", len(lexical_errors))

    parsed = Parser(tokens, config.max_nesting_depth).parse()

    return AnalysisResult(
        tokens=tokens,
        cleaned_tokens=parsed.tokens,
        variables=parsed.variables,
        procedures=parsed.procedures,
        lexical_errors=list(lexical_errors),
        errors=[*lexical_errors, *parsed.errors],
    )


def analyze_tokens(tokens: list[Token], config: CompilerConfig | None = None) -> AnalysisResult:
    """Parses an existing token stream, e.g. one read back from a token ledger."""
    config = config or CompilerConfig()
    parsed = Parser(tokens, config.max_nesting_depth).parse()
    return AnalysisResult(
        tokens=list(tokens),
        cleaned_tokens=parsed.tokens,
        variables=parsed.variables,
        procedures=parsed.procedures,
        errors=parsed.errors,
    )


__all__ = ["AnalysisResult", "analyze", "analyze_tokens"]
