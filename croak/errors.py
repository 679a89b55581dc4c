"""
Croak Errors
============
Exception hierarchy shared by every stage of the pipeline.

Each stage raises as soon as it finds a problem; nothing is accumulated.
Hosts catch ``CroakError`` and decide whether to abort or carry on.
"""
from typing import Any


class CroakError(Exception):
    """Base class for all language-level errors."""

    kind = "Error"

    def __init__(self, message: str, line: int | None = None, col: int | None = None):
        self.message = message
        self.line = line
        self.col = col
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} at L{self.line}:{self.col}"


class LexError(CroakError):
    """An unrecognised character in the source text."""

    kind = "Lex Error"

    def __init__(self, char: str, line: int, col: int):
        self.char = char
        super().__init__(f"Unknown character {char!r}", line, col)


class ParseError(CroakError):
    """A structural mismatch between the token stream and the grammar."""

    kind = "Syntax Error"

    def __init__(self, expected: str, token: Any):
        self.expected = expected
        self.token = token
        actual = "end of input" if token.type.name == "EOF" else f"{token.type.name} ({token.lexeme!r})"
        super().__init__(f"Expected {expected}, got {actual}", token.line, token.col)


class CroakTypeError(CroakError):
    """A program rejected by the static type checker."""

    kind = "Type Error"


class CroakRuntimeError(CroakError):
    """A failure while executing a program."""

    kind = "Runtime Error"


class ReturnSignal(Exception):
    """Internal exception that unwinds a function body on ``return``."""

    def __init__(self, value: Any):
        super().__init__("return")
        self.value = value
