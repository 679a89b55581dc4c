"""
Croak Interpreter
=================
Tree-walking interpreter that executes the AST produced by the Parser.

The interpreter assumes the type checker has already accepted the
program; the runtime checks that remain (undefined names, arity,
unsupported operand shapes, division by zero, 32-bit overflow, runaway
recursion) raise ``CroakRuntimeError``.
"""
import logging
from dataclasses import dataclass
from typing import Callable

from .errors import CroakRuntimeError, ReturnSignal
from .lexer import INT_MAX, INT_MIN
from .parser import (
    ASTNode, Type,
    NumberLiteral, BoolLiteral, Variable, BinaryOp, FunctionCall,
    Declaration, Assignment, Print, While, Block, FunctionDeclaration,
    If, ExpressionStatement, Return,
)
from .scope import ScopeStack
from .values import VOID, BoolValue, NumberValue, Value

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Function:
    """A declared function: parameter list plus body."""
    name: str
    params: tuple[tuple[str, Type], ...]
    body: tuple


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


ARITHMETIC = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _truncating_div,
}

ORDERING = {
    ">": lambda a, b: a > b,
    "<": lambda a, b: a < b,
}


class Interpreter:
    """
    Tree-walking interpreter for Croak programs.

    Usage:
        interp = Interpreter()
        interp.interpret(statements)
        interp.environment        # {"x": NumberValue(7), ...}

    ``output_fn`` receives the text of every ``croak`` statement.
    """

    def __init__(self, output_fn: Callable[[str], None] | None = None):
        self.environments: ScopeStack[Value] = ScopeStack("runtime scope")
        self.functions: dict[str, Function] = {}
        self.output_fn = output_fn or (lambda s: print(s))

    @property
    def environment(self) -> dict[str, Value]:
        """The global variable scope."""
        return self.environments.globals

    def _error(self, message: str, node: ASTNode):
        raise CroakRuntimeError(message, node.line, node.col)

    def interpret(self, statements) -> "Interpreter":
        """Execute statements in order against the current environment."""
        try:
            self._execute_all(statements)
        except ReturnSignal:
            raise CroakRuntimeError("return outside of a function")
        except RecursionError:
            # Caught here, after the Python stack has unwound
            raise CroakRuntimeError("maximum call depth exceeded") from None
        return self

    def _execute_all(self, statements):
        for stmt in statements:
            self.execute(stmt)

    # ─────────────────────────────────────────────────────────
    #  Statements
    # ─────────────────────────────────────────────────────────

    def execute(self, stmt):
        """Execute a single statement."""
        match stmt:
            case Declaration(name=name, initializer=initializer):
                self.environments.declare(name, self.evaluate(initializer))
            case Assignment(name=name, value=expr):
                value = self.evaluate(expr)
                try:
                    self.environments.assign(name, value)
                except KeyError:
                    self._error(f"cannot assign to undeclared variable '{name}'", stmt)
            case Print(expression=expr):
                self.output_fn(str(self.evaluate(expr)))
            case ExpressionStatement(expression=expr):
                self.evaluate(expr)
            case While(condition=condition, body=body):
                # One scope for the whole loop, shared by every iteration
                with self.environments.scope():
                    while self._condition(condition):
                        self._execute_all(body)
            case Block(body=body):
                with self.environments.scope():
                    self._execute_all(body)
            case If(condition=condition, then_body=then_body, else_body=else_body):
                if self._condition(condition):
                    with self.environments.scope():
                        self._execute_all(then_body)
                elif else_body is not None:
                    with self.environments.scope():
                        self._execute_all(else_body)
            case FunctionDeclaration(name=name, params=params, body=body):
                self.functions[name] = Function(name, params, body)
                logger.debug("registered function %s/%d", name, len(params))
            case Return(expression=expr):
                raise ReturnSignal(self.evaluate(expr))
            case _:
                raise CroakRuntimeError(f"unknown statement {type(stmt).__name__}")

    def _condition(self, expr) -> bool:
        value = self.evaluate(expr)
        if not isinstance(value, BoolValue):
            self._error(f"condition is not a boolean: {value}", expr)
        return value.value

    # ─────────────────────────────────────────────────────────
    #  Expressions
    # ─────────────────────────────────────────────────────────

    def evaluate(self, expr) -> Value:
        """Evaluate an expression to a runtime value."""
        match expr:
            case NumberLiteral(value=value):
                return NumberValue(value)
            case BoolLiteral(value=value):
                return BoolValue(value)
            case Variable(name=name):
                try:
                    return self.environments.lookup(name)
                except KeyError:
                    self._error(f"undefined variable '{name}'", expr)
            case BinaryOp():
                return self._evaluate_binary(expr)
            case FunctionCall():
                return self._call(expr)
        raise CroakRuntimeError(f"unknown expression {type(expr).__name__}")

    def _evaluate_binary(self, expr: BinaryOp) -> Value:
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        op = expr.operator

        if op == "==":
            return BoolValue(left == right)

        if isinstance(left, NumberValue) and isinstance(right, NumberValue):
            if op in ARITHMETIC:
                if op == "/" and right.value == 0:
                    self._error("division by zero", expr)
                result = ARITHMETIC[op](left.value, right.value)
                if not INT_MIN <= result <= INT_MAX:
                    self._error(f"integer overflow in {left} {op} {right}", expr)
                return NumberValue(result)
            if op in ORDERING:
                return BoolValue(ORDERING[op](left.value, right.value))

        self._error(f"unsupported operation: {left} {op} {right}", expr)

    def _call(self, expr: FunctionCall) -> Value:
        func = self.functions.get(expr.name)
        if func is None:
            self._error(f"unknown function '{expr.name}'", expr)
        if len(expr.arguments) != len(func.params):
            self._error(
                f"function '{expr.name}' expects {len(func.params)} argument(s), got {len(expr.arguments)}",
                expr,
            )

        arguments = [self.evaluate(arg) for arg in expr.arguments]
        logger.debug("call %s(%s)", expr.name, ", ".join(str(a) for a in arguments))

        # No closures: the body runs against a fresh stack holding only its parameters
        caller_environments = self.environments
        self.environments = ScopeStack("runtime scope")
        try:
            with self.environments.scope():
                for (param_name, _), value in zip(func.params, arguments):
                    self.environments.declare(param_name, value)
                self._execute_all(func.body)
        except ReturnSignal as signal:
            return signal.value
        finally:
            self.environments = caller_environments
        return VOID


def interpret(statements, output_fn: Callable[[str], None] | None = None) -> Interpreter:
    """Convenience wrapper: run statements in a fresh interpreter and return it."""
    return Interpreter(output_fn).interpret(statements)
