"""
Plain-text ledgers exchanged with downstream tools.

Layouts, one record per line:

    token      value(16, right-justified) code(2 digits)
    variable   name(16) procedure(16) kind integer level address
    procedure  name(16) integer level first_address last_address
    error      Line <n>: <message>[ [FATAL]]

Functions:
    format_token, format_variable, format_procedure, format_error: Render one record.
    parse_token_line, parse_token_ledger, read_token_ledger: Read token ledgers back.
    write_ledgers: Write every ledger of an `AnalysisResult` under the configured directory.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from minipas.minipas_config import CompilerConfig
from minipas.minipas_constants import TokenType
from minipas.minipas_errors import CompileError
from minipas.minipas_lexer import Token
from minipas.minipas_pipeline import AnalysisResult
from minipas.minipas_symbols import Procedure, Variable

logger = logging.getLogger(__name__)

FIELD_WIDTH = 16


def format_token(token: Token) -> str:
    return f"{token.value:>{FIELD_WIDTH}} {int(token.type):02d}"


def format_variable(variable: Variable) -> str:
    return " ".join(
        [
            f"{variable.name:>{FIELD_WIDTH}}",
            f"{variable.procedure:>{FIELD_WIDTH}}",
            str(int(variable.kind)),
            variable.type,
            str(variable.level),
            str(variable.address),
        ]
    )


def format_procedure(procedure: Procedure) -> str:
    return " ".join(
        [
            f"{procedure.name:>{FIELD_WIDTH}}",
            procedure.type,
            str(procedure.level),
            str(procedure.first_address),
            str(procedure.last_address),
        ]
    )


def format_error(error: CompileError) -> str:
    return error.render()


def parse_token_line(line: str) -> Token | None:
    """Parses one token ledger record.

    Returns:
        Token | None: The token, or None for blank or malformed records.
    """
    parts = line.split()
    if len(parts) != 2 or not parts[1].isdigit():
        return None
    value, code = parts
    try:
        kind = TokenType(int(code))
    except ValueError:
        return None
    return Token(kind, value)


def parse_token_ledger(text: str) -> list[Token]:
    tokens = []
    for number, line in enumerate(text.splitlines(), start=1):
        token = parse_token_line(line)
        if token is None:
            if line.strip():
                logger.warning("Skipping malformed token record on line %d: %r", number, line)
            continue
        tokens.append(token)
    return tokens


def read_token_ledger(path: str | Path) -> list[Token]:
    return parse_token_ledger(Path(path).read_text(encoding="utf-8"))


def render(lines: Iterable[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def write_ledgers(result: AnalysisResult, config: CompilerConfig) -> dict[str, Path]:
    """Writes the five ledgers of `result`, creating the output directory if needed.

    Returns:
        dict[str, Path]: Ledger name ("tokens", "cleaned", "variables",
        "procedures", "errors") to the path written.
    """
    Path(config.output_dir).mkdir(parents=True, exist_ok=True)

    contents = {
        "tokens": (config.token_file, render(map(format_token, result.tokens))),
        "cleaned": (
            config.cleaned_token_file,
            render(map(format_token, result.cleaned_tokens)),
        ),
        "variables": (config.variable_file, render(map(format_variable, result.variables))),
        "procedures": (
            config.procedure_file,
            render(map(format_procedure, result.procedures)),
        ),
        "errors": (config.error_file, render(map(format_error, result.errors))),
    }

    written = {}
    for name, (filename, text) in contents.items():
        path = config.output_path(filename)
        path.write_text(text, encoding="utf-8")
        logger.debug("wrote %s ledger to %s", name, path)
        written[name] = path
    return written


__all__ = [
    "format_error",
    "format_procedure",
    "format_token",
    "format_variable",
    "parse_token_ledger",
    "parse_token_line",
    "read_token_ledger",
    "render",
    "write_ledgers",
]
