"""
Croak Type Checker
==================
Static validation pass that runs after parsing and before execution.

The checker walks the AST once with a scope stack of variable types and
a scope stack of function signatures. It never rewrites the tree: it
either returns quietly or raises ``CroakTypeError`` at the first problem.

Checks:
  1. Operators are applied to operands of the right types
  2. Variables and functions are declared before use
  3. Declarations and assignments agree with the variable's type
  4. ``while`` / ``if`` conditions are boolean
  5. Calls supply the declared number and types of arguments
  6. ``return`` matches the enclosing function's return type
  7. A void call result is never used as a value
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass

from .errors import CroakTypeError
from .parser import (
    ASTNode, Type,
    NumberLiteral, BoolLiteral, Variable, BinaryOp, FunctionCall,
    Declaration, Assignment, Print, While, Block, FunctionDeclaration,
    If, ExpressionStatement, Return,
)
from .scope import ScopeStack

logger = logging.getLogger(__name__)


ARITHMETIC_OPERATORS = frozenset({"+", "-", "*", "/"})
ORDERING_OPERATORS = frozenset({">", "<"})


@dataclass(frozen=True)
class FunctionSignature:
    """Parameter types in declared order plus the return type."""
    param_types: tuple[Type, ...]
    return_type: Type


class TypeChecker:
    """
    Static type checker for Croak programs.

    Usage:
        checker = TypeChecker()
        checker.check(statements)   # raises CroakTypeError on failure

    One checker can validate several programs in a row; bindings made by
    earlier programs stay visible, which is what a REPL session wants.
    """

    def __init__(self):
        self.variables: ScopeStack[Type] = ScopeStack("type scope")
        self.functions: ScopeStack[FunctionSignature] = ScopeStack("function scope")
        # Return types of the functions whose bodies are being checked
        self._return_types: list[Type] = []

    @contextmanager
    def _body_scope(self):
        """Push a variable scope and a signature scope together."""
        with self.variables.scope(), self.functions.scope():
            yield

    def reset_function_context(self):
        """Forget any enclosing-function state left by an aborted check."""
        self._return_types.clear()

    def _error(self, message: str, node: ASTNode):
        raise CroakTypeError(message, node.line, node.col)

    def check(self, statements) -> None:
        """Validate a sequence of statements in the current scope."""
        for stmt in statements:
            self._check_statement(stmt)

    # ─────────────────────────────────────────────────────────
    #  Expressions
    # ─────────────────────────────────────────────────────────

    def infer(self, expr) -> Type:
        """Infer the type of an expression."""
        match expr:
            case NumberLiteral():
                return Type.NUMBER
            case BoolLiteral():
                return Type.BOOLEAN
            case Variable(name=name):
                try:
                    return self.variables.lookup(name)
                except KeyError:
                    self._error(f"undefined variable '{name}'", expr)
            case BinaryOp():
                return self._infer_binary(expr)
            case FunctionCall():
                return self._infer_call(expr)
        raise CroakTypeError(f"unknown expression {type(expr).__name__}")

    def _infer_value(self, expr) -> Type:
        """Infer the type of an expression whose result is used as a value."""
        inferred = self.infer(expr)
        if inferred == Type.VOID:
            self._error(f"void call '{expr.name}' used as a value", expr)
        return inferred

    def _infer_binary(self, expr: BinaryOp) -> Type:
        left = self._infer_value(expr.left)
        right = self._infer_value(expr.right)
        op = expr.operator

        if op in ARITHMETIC_OPERATORS or op in ORDERING_OPERATORS:
            if left != Type.NUMBER or right != Type.NUMBER:
                self._error(f"operator {op} requires number operands, got {left} and {right}", expr)
            return Type.NUMBER if op in ARITHMETIC_OPERATORS else Type.BOOLEAN

        if op == "==":
            if left != right:
                self._error(f"operator == requires operands of the same type, got {left} and {right}", expr)
            return Type.BOOLEAN

        self._error(f"unknown operator {op}", expr)

    def _infer_call(self, expr: FunctionCall) -> Type:
        try:
            signature = self.functions.lookup(expr.name)
        except KeyError:
            self._error(f"undefined function '{expr.name}'", expr)

        expected = len(signature.param_types)
        if len(expr.arguments) != expected:
            self._error(
                f"function '{expr.name}' expects {expected} argument(s), got {len(expr.arguments)}",
                expr,
            )
        for position, (arg, param_type) in enumerate(zip(expr.arguments, signature.param_types), 1):
            arg_type = self._infer_value(arg)
            if arg_type != param_type:
                self._error(
                    f"argument {position} of '{expr.name}' must be {param_type}, got {arg_type}",
                    arg,
                )
        return signature.return_type

    def _check_condition(self, condition, construct: str):
        if self._infer_value(condition) != Type.BOOLEAN:
            self._error(f"{construct} condition is not boolean", condition)

    # ─────────────────────────────────────────────────────────
    #  Statements
    # ─────────────────────────────────────────────────────────

    def _check_statement(self, stmt):
        match stmt:
            case Declaration():
                self._check_declaration(stmt)
            case Assignment():
                self._check_assignment(stmt)
            case Print(expression=expr):
                self._infer_value(expr)
            case ExpressionStatement(expression=expr):
                self.infer(expr)
            case While(condition=condition, body=body):
                self._check_condition(condition, "while")
                with self._body_scope():
                    self.check(body)
            case If():
                self._check_if(stmt)
            case Block(body=body):
                with self._body_scope():
                    self.check(body)
            case FunctionDeclaration():
                self._check_function(stmt)
            case Return():
                self._check_return(stmt)
            case _:
                raise CroakTypeError(f"unknown statement {type(stmt).__name__}")

    def _check_declaration(self, stmt: Declaration):
        inferred = self._infer_value(stmt.initializer)
        if stmt.declared_type is not None and stmt.declared_type != inferred:
            self._error(
                f"type mismatch in declaration of '{stmt.name}': expected {stmt.declared_type}, got {inferred}",
                stmt,
            )
        self.variables.declare(stmt.name, inferred)

    def _check_assignment(self, stmt: Assignment):
        try:
            var_type = self.variables.lookup(stmt.name)
        except KeyError:
            self._error(f"undefined variable '{stmt.name}'", stmt)
        value_type = self._infer_value(stmt.value)
        if value_type != var_type:
            self._error(f"cannot assign {value_type} to '{stmt.name}' of type {var_type}", stmt)

    def _check_if(self, stmt: If):
        self._check_condition(stmt.condition, "if")
        with self._body_scope():
            self.check(stmt.then_body)
        if stmt.else_body is not None:
            with self._body_scope():
                self.check(stmt.else_body)

    def _check_function(self, stmt: FunctionDeclaration):
        # Registered before the body so the function can call itself
        signature = FunctionSignature(
            param_types=tuple(param_type for _, param_type in stmt.params),
            return_type=stmt.return_type,
        )
        self.functions.declare(stmt.name, signature)
        logger.debug("declared function %s%s", stmt.name, signature)

        # The body sees its parameters only, never the caller's variables
        outer_variables = self.variables
        self.variables = ScopeStack("type scope")
        self._return_types.append(stmt.return_type)
        try:
            with self.functions.scope():
                for param_name, param_type in stmt.params:
                    self.variables.declare(param_name, param_type)
                self.check(stmt.body)
        finally:
            self._return_types.pop()
            self.variables = outer_variables

    def _check_return(self, stmt: Return):
        if not self._return_types:
            self._error("return outside of a function", stmt)
        expected = self._return_types[-1]
        if expected == Type.VOID:
            self._error("cannot return a value from a function without a return type", stmt)
        actual = self._infer_value(stmt.expression)
        if actual != expected:
            self._error(f"return type mismatch: expected {expected}, got {actual}", stmt)


def check(statements) -> None:
    """Convenience wrapper: ``TypeChecker().check(statements)``."""
    TypeChecker().check(statements)
