"""
Croak Lexer
===========
Tokenizes Croak source code into a stream of typed tokens.
Handles punctuation, operators, keywords, type names, and literals.
"""
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from .errors import LexError

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """All token types in the Croak language."""
    PUNCTUATION = auto()   # ( ) { } ; : ,
    KEYWORD     = auto()   # let croak while if else func return
    OPERATOR    = auto()   # = == + - * / > <
    IDENTIFIER  = auto()   # variable/function names
    NUMBER      = auto()   # 32-bit signed integer
    BOOLEAN     = auto()   # true, false
    TYPE_NAME   = auto()   # number, bool
    EOF         = auto()


@dataclass(frozen=True)
class Token:
    """A single token from the Croak source."""
    type: TokenType
    value: str | int | bool
    lexeme: str
    line: int
    col: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.col})"


PUNCTUATION = frozenset("(){};:,")
SINGLE_CHAR_OPERATORS = frozenset("+-*/><")
WHITESPACE = frozenset(" \t\n\r")

KEYWORDS = frozenset({"let", "croak", "while", "if", "else", "func", "return"})
TYPE_NAMES = frozenset({"number", "bool"})
BOOLEANS = {"true": True, "false": False}

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


def parse_int32(word: str) -> int | None:
    """Parse a decimal word as a 32-bit signed integer, or return None."""
    if not word.isascii() or not word.isdigit():
        return None
    number = int(word)
    if number > INT_MAX:
        return None
    return number


def _starts_word(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch == "_")


class Lexer:
    """
    Tokenizes Croak source code.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1

    def _current(self) -> str | None:
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> str | None:
        idx = self.pos + offset
        if idx >= len(self.source):
            return None
        return self.source[idx]

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _read_word(self) -> Token:
        """Read a word and classify it as keyword, type, boolean, number or identifier."""
        start_line, start_col = self.line, self.col
        chars = [self._advance()]
        while self.pos < len(self.source):
            ch = self._current()
            if ch is not None and (ch.isalnum() or ch == "_"):
                chars.append(self._advance())
            else:
                break
        word = "".join(chars)

        if word in KEYWORDS:
            return Token(TokenType.KEYWORD, word, word, start_line, start_col)
        if word in TYPE_NAMES:
            return Token(TokenType.TYPE_NAME, word, word, start_line, start_col)
        if word in BOOLEANS:
            return Token(TokenType.BOOLEAN, BOOLEANS[word], word, start_line, start_col)

        number = parse_int32(word)
        if number is not None:
            return Token(TokenType.NUMBER, number, word, start_line, start_col)
        return Token(TokenType.IDENTIFIER, word, word, start_line, start_col)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source into a list of tokens."""
        tokens = list(self._iter_tokens())
        tokens.append(Token(TokenType.EOF, "", "", self.line, self.col))
        logger.debug("lexed %d token(s)", len(tokens))
        return tokens

    def _iter_tokens(self) -> Iterator[Token]:
        """Generate tokens one at a time."""
        while self.pos < len(self.source):
            ch = self._current()
            line, col = self.line, self.col

            if ch in WHITESPACE:
                self._advance()
                continue

            if ch in PUNCTUATION:
                self._advance()
                yield Token(TokenType.PUNCTUATION, ch, ch, line, col)
                continue

            if _starts_word(ch):
                yield self._read_word()
                continue

            if ch == "=" and self._peek() == "=":
                self._advance()
                self._advance()
                yield Token(TokenType.OPERATOR, "==", "==", line, col)
                continue

            if ch == "=":
                self._advance()
                yield Token(TokenType.OPERATOR, "=", "=", line, col)
                continue

            if ch in SINGLE_CHAR_OPERATORS:
                self._advance()
                yield Token(TokenType.OPERATOR, ch, ch, line, col)
                continue

            raise LexError(ch, line, col)


def tokenize(source: str) -> list[Token]:
    """Convenience wrapper: ``Lexer(source).tokenize()``."""
    return Lexer(source).tokenize()
