"""
Croak Parser
============
Recursive-descent parser that builds an Abstract Syntax Tree (AST)
from the token stream produced by the Lexer.

Grammar (loosest to tightest expression binding):
  comparison := addition (("==" | ">" | "<") addition)*
  addition   := term (("+" | "-") term)*
  term       := factor (("*" | "/") factor)*
  factor     := NUMBER | BOOLEAN | IDENT | IDENT "(" args ")" | "(" comparison ")"

Parsing stops at the first error; there is no recovery.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum

from .errors import ParseError
from .lexer import Token, TokenType

logger = logging.getLogger(__name__)


class Type(Enum):
    """Static types of the language."""
    NUMBER  = "number"
    BOOLEAN = "bool"
    VOID    = "void"

    def __str__(self) -> str:
        return self.value


# ─────────────────────────────────────────────────────────────
#  AST Node Types
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes. Positions do not take part in equality."""
    line: int = field(default=0, compare=False)
    col: int = field(default=0, compare=False)


# Expressions

@dataclass(frozen=True)
class NumberLiteral(ASTNode):
    value: int = 0


@dataclass(frozen=True)
class BoolLiteral(ASTNode):
    value: bool = False


@dataclass(frozen=True)
class Variable(ASTNode):
    """A reference to a declared variable."""
    name: str = ""


@dataclass(frozen=True)
class BinaryOp(ASTNode):
    """A binary operation: left <operator> right."""
    left: "Expression | None" = None
    operator: str = ""
    right: "Expression | None" = None


@dataclass(frozen=True)
class FunctionCall(ASTNode):
    """A call: name(arg1, arg2, ...)."""
    name: str = ""
    arguments: tuple = ()


Expression = NumberLiteral | BoolLiteral | Variable | BinaryOp | FunctionCall


# Statements

@dataclass(frozen=True)
class Declaration(ASTNode):
    """let name (: type)? = initializer;"""
    name: str = ""
    initializer: Expression | None = None
    declared_type: Type | None = None


@dataclass(frozen=True)
class Assignment(ASTNode):
    """name = value; (to an already-declared variable)"""
    name: str = ""
    value: Expression | None = None


@dataclass(frozen=True)
class Print(ASTNode):
    """croak expression;"""
    expression: Expression | None = None


@dataclass(frozen=True)
class While(ASTNode):
    condition: Expression | None = None
    body: tuple = ()


@dataclass(frozen=True)
class Block(ASTNode):
    body: tuple = ()


@dataclass(frozen=True)
class FunctionDeclaration(ASTNode):
    """func name(param: type, ...) (: type)? { body }"""
    name: str = ""
    params: tuple[tuple[str, Type], ...] = ()
    return_type: Type = Type.VOID
    body: tuple = ()


@dataclass(frozen=True)
class If(ASTNode):
    condition: Expression | None = None
    then_body: tuple = ()
    else_body: tuple | None = None


@dataclass(frozen=True)
class ExpressionStatement(ASTNode):
    """A bare expression whose result is discarded (a call used as a statement)."""
    expression: Expression | None = None


@dataclass(frozen=True)
class Return(ASTNode):
    expression: Expression | None = None


Statement = (
    Declaration | Assignment | Print | While | Block
    | FunctionDeclaration | If | ExpressionStatement | Return
)

TYPES_BY_NAME = {"number": Type.NUMBER, "bool": Type.BOOLEAN}

COMPARISON_OPERATORS = ("==", ">", "<")
ADDITION_OPERATORS = ("+", "-")
TERM_OPERATORS = ("*", "/")


# ─────────────────────────────────────────────────────────────
#  Parser
# ─────────────────────────────────────────────────────────────

class Parser:
    """
    Recursive-descent parser for Croak source.

    Usage:
        parser = Parser(tokens)
        statements = parser.parse()
    """

    def __init__(self, tokens: list[Token]):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token stream must end with an EOF token")
        self.tokens = tokens
        self.pos = 0

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _peek(self, offset: int = 1) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[idx]

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def _check(self, token_type: TokenType, value: str | None = None) -> bool:
        token = self._current()
        return token.type == token_type and (value is None or token.value == value)

    def _match(self, token_type: TokenType, value: str | None = None) -> bool:
        if self._check(token_type, value):
            self._advance()
            return True
        return False

    def _expect(self, token_type: TokenType, value: str | None = None) -> Token:
        if not self._check(token_type, value):
            expected = repr(value) if value is not None else token_type.name
            raise ParseError(expected, self._current())
        return self._advance()

    # ─────────────────────────────────────────────────────────
    #  Top-Level Parsing
    # ─────────────────────────────────────────────────────────

    def parse(self) -> list[Statement]:
        """Parse the token stream into a list of statements."""
        statements = []
        while not self._check(TokenType.EOF):
            statements.append(self._parse_statement())
        logger.debug("parsed %d top-level statement(s)", len(statements))
        return statements

    def _parse_statement(self) -> Statement:
        token = self._current()

        if token.type == TokenType.KEYWORD:
            match token.value:
                case "let":
                    return self._parse_declaration()
                case "croak":
                    return self._parse_print()
                case "return":
                    return self._parse_return()
                case "while":
                    return self._parse_while()
                case "if":
                    return self._parse_if()
                case "func":
                    return self._parse_function_declaration()
            raise ParseError("statement", token)

        if token.type == TokenType.PUNCTUATION and token.value == "{":
            body = self._parse_body()
            return Block(body=body, line=token.line, col=token.col)

        if token.type == TokenType.IDENTIFIER:
            following = self._peek()
            if following.type == TokenType.OPERATOR and following.value == "=":
                return self._parse_assignment()
            if following.type == TokenType.PUNCTUATION and following.value == "(":
                call = self._parse_call()
                self._expect(TokenType.PUNCTUATION, ";")
                return ExpressionStatement(expression=call, line=token.line, col=token.col)
            raise ParseError("'=' or '(' after identifier", following)

        raise ParseError("statement", token)

    def _parse_body(self) -> tuple:
        """Parse: { statement* }"""
        self._expect(TokenType.PUNCTUATION, "{")
        body = []
        while not self._check(TokenType.PUNCTUATION, "}"):
            if self._check(TokenType.EOF):
                raise ParseError("'}'", self._current())
            body.append(self._parse_statement())
        self._advance()  # consume }
        return tuple(body)

    def _parse_type(self) -> Type:
        token = self._expect(TokenType.TYPE_NAME)
        return TYPES_BY_NAME[token.value]

    # ─────────────────────────────────────────────────────────
    #  Statements
    # ─────────────────────────────────────────────────────────

    def _parse_declaration(self) -> Declaration:
        """Parse: let name = expr;  |  let name: type = expr;"""
        token = self._advance()  # consume 'let'
        name = self._expect(TokenType.IDENTIFIER).value
        declared_type = None
        if self._match(TokenType.PUNCTUATION, ":"):
            declared_type = self._parse_type()
        self._expect(TokenType.OPERATOR, "=")
        initializer = self._parse_expression()
        self._expect(TokenType.PUNCTUATION, ";")
        return Declaration(
            name=name, initializer=initializer, declared_type=declared_type,
            line=token.line, col=token.col,
        )

    def _parse_assignment(self) -> Assignment:
        """Parse: name = expr;"""
        name_token = self._advance()
        self._expect(TokenType.OPERATOR, "=")
        value = self._parse_expression()
        self._expect(TokenType.PUNCTUATION, ";")
        return Assignment(name=name_token.value, value=value, line=name_token.line, col=name_token.col)

    def _parse_print(self) -> Print:
        token = self._advance()  # consume 'croak'
        expr = self._parse_expression()
        self._expect(TokenType.PUNCTUATION, ";")
        return Print(expression=expr, line=token.line, col=token.col)

    def _parse_return(self) -> Return:
        token = self._advance()  # consume 'return'
        expr = self._parse_expression()
        self._expect(TokenType.PUNCTUATION, ";")
        return Return(expression=expr, line=token.line, col=token.col)

    def _parse_while(self) -> While:
        token = self._advance()  # consume 'while'
        condition = self._parse_expression()
        body = self._parse_body()
        return While(condition=condition, body=body, line=token.line, col=token.col)

    def _parse_if(self) -> If:
        token = self._advance()  # consume 'if'
        condition = self._parse_expression()
        then_body = self._parse_body()
        else_body = None
        if self._match(TokenType.KEYWORD, "else"):
            else_body = self._parse_body()
        return If(
            condition=condition, then_body=then_body, else_body=else_body,
            line=token.line, col=token.col,
        )

    def _parse_function_declaration(self) -> FunctionDeclaration:
        """Parse: func name(a: type, b: type) (: type)? { body }"""
        token = self._advance()  # consume 'func'
        name = self._expect(TokenType.IDENTIFIER).value
        self._expect(TokenType.PUNCTUATION, "(")

        params = []
        if not self._check(TokenType.PUNCTUATION, ")"):
            while True:
                param_name = self._expect(TokenType.IDENTIFIER).value
                self._expect(TokenType.PUNCTUATION, ":")
                params.append((param_name, self._parse_type()))
                if not self._match(TokenType.PUNCTUATION, ","):
                    break
        self._expect(TokenType.PUNCTUATION, ")")

        return_type = Type.VOID
        if self._match(TokenType.PUNCTUATION, ":"):
            return_type = self._parse_type()

        body = self._parse_body()
        return FunctionDeclaration(
            name=name, params=tuple(params), return_type=return_type, body=body,
            line=token.line, col=token.col,
        )

    # ─────────────────────────────────────────────────────────
    #  Expressions
    # ─────────────────────────────────────────────────────────

    def _parse_binary(self, operators: tuple[str, ...], operand) -> Expression:
        """Parse a left-associative chain of one precedence level."""
        expr = operand()
        while self._current().type == TokenType.OPERATOR and self._current().value in operators:
            op_token = self._advance()
            right = operand()
            expr = BinaryOp(
                left=expr, operator=op_token.value, right=right,
                line=op_token.line, col=op_token.col,
            )
        return expr

    def _parse_expression(self) -> Expression:
        return self._parse_binary(COMPARISON_OPERATORS, self._parse_addition)

    def _parse_addition(self) -> Expression:
        return self._parse_binary(ADDITION_OPERATORS, self._parse_term)

    def _parse_term(self) -> Expression:
        return self._parse_binary(TERM_OPERATORS, self._parse_factor)

    def _parse_factor(self) -> Expression:
        token = self._current()

        if token.type == TokenType.NUMBER:
            self._advance()
            return NumberLiteral(value=token.value, line=token.line, col=token.col)

        if token.type == TokenType.BOOLEAN:
            self._advance()
            return BoolLiteral(value=token.value, line=token.line, col=token.col)

        if token.type == TokenType.IDENTIFIER:
            if self._peek().type == TokenType.PUNCTUATION and self._peek().value == "(":
                return self._parse_call()
            self._advance()
            return Variable(name=token.value, line=token.line, col=token.col)

        if token.type == TokenType.PUNCTUATION and token.value == "(":
            self._advance()
            inner = self._parse_expression()
            self._expect(TokenType.PUNCTUATION, ")")
            return inner

        raise ParseError("expression", token)

    def _parse_call(self) -> FunctionCall:
        """Parse: name(arg, arg, ...)"""
        name_token = self._advance()
        self._expect(TokenType.PUNCTUATION, "(")
        arguments = []
        if not self._check(TokenType.PUNCTUATION, ")"):
            arguments.append(self._parse_expression())
            while self._match(TokenType.PUNCTUATION, ","):
                arguments.append(self._parse_expression())
        self._expect(TokenType.PUNCTUATION, ")")
        return FunctionCall(
            name=name_token.value, arguments=tuple(arguments),
            line=name_token.line, col=name_token.col,
        )


def parse(tokens: list[Token]) -> list[Statement]:
    """Convenience wrapper: ``Parser(tokens).parse()``."""
    return Parser(tokens).parse()
