"""
Error taxonomy for the minipas front end.

Every diagnostic is an instance of `CompileError`. Recoverable diagnostics are
recorded as data in the error list of a run; only fatal parser errors are raised,
and `Parser.parse()` catches those and records them too.

Classes:
    - CompileError: Base class carrying `line`, `message` and `fatal`.
    - LexicalError: Invalid character, over-length identifier, misused colon.
    - GrammarError: A token other than the one the grammar requires.
    - SemanticError: Undefined or duplicate symbol, invalid relational operator.
    - ConfigError: Invalid run configuration (outer layer only).

Example:
    >>> err = LexicalError(3, "Misused colon")
    >>> str(err)
    'Line 3: Misused colon'
"""

FATAL_MARKER = "[FATAL]"


class CompileError(Exception):
    """A diagnostic tied to a source line.

    Attributes:
        line (int): 1-based source line the diagnostic refers to.
        message (str): Human-readable description without the line prefix.
        fatal (bool): True for the single error that aborted a parse.
    """

    def __init__(self, line: int, message: str, fatal: bool = False) -> None:
        self.line = line
        self.message = message
        self.fatal = fatal
        super().__init__(self.render())

    def render(self) -> str:
        text = f"Line {self.line}: {self.message}"
        if self.fatal:
            text += f" {FATAL_MARKER}"
        return text

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.line}, {self.message!r}, fatal={self.fatal})"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, CompileError)
            and type(self) is type(other)
            and self.line == other.line
            and self.message == other.message
            and self.fatal == other.fatal
        )

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.line, self.message, self.fatal))


class LexicalError(CompileError):
    pass


class GrammarError(CompileError):
    pass


class SemanticError(CompileError):
    pass


class ConfigError(Exception):
    """Raised when a configuration file cannot be loaded or contains invalid entries."""


__all__ = [
    "FATAL_MARKER",
    "CompileError",
    "ConfigError",
    "GrammarError",
    "LexicalError",
    "SemanticError",
]
