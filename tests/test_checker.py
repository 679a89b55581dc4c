"""
Croak Type Checker Tests
========================
Usage:
    python -m pytest tests/test_checker.py
"""
import sys
import os
import unittest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from croak.checker import TypeChecker, FunctionSignature, check
from croak.errors import CroakTypeError
from croak.lexer import tokenize
from croak.parser import (
    Type, parse,
    NumberLiteral, BoolLiteral, Variable, BinaryOp,
    Declaration, Assignment, While,
)


class TestInference(unittest.TestCase):

    def setUp(self):
        self.checker = TypeChecker()

    def test_literals(self):
        self.assertEqual(self.checker.infer(NumberLiteral(value=1)), Type.NUMBER)
        self.assertEqual(self.checker.infer(BoolLiteral(value=False)), Type.BOOLEAN)

    def test_arithmetic_is_number(self):
        for op in "+-*/":
            expr = BinaryOp(left=NumberLiteral(value=1), operator=op, right=NumberLiteral(value=2))
            self.assertEqual(self.checker.infer(expr), Type.NUMBER)

    def test_ordering_is_boolean(self):
        for op in "<>":
            expr = BinaryOp(left=NumberLiteral(value=1), operator=op, right=NumberLiteral(value=2))
            self.assertEqual(self.checker.infer(expr), Type.BOOLEAN)

    def test_equality_on_booleans(self):
        expr = BinaryOp(left=BoolLiteral(value=True), operator="==", right=BoolLiteral(value=False))
        self.assertEqual(self.checker.infer(expr), Type.BOOLEAN)

    def test_arithmetic_rejects_boolean(self):
        expr = BinaryOp(left=NumberLiteral(value=1), operator="+", right=BoolLiteral(value=True))
        with self.assertRaises(CroakTypeError):
            self.checker.infer(expr)

    def test_ordering_rejects_boolean(self):
        expr = BinaryOp(left=BoolLiteral(value=True), operator="<", right=BoolLiteral(value=False))
        with self.assertRaises(CroakTypeError):
            self.checker.infer(expr)

    def test_equality_rejects_mixed_types(self):
        expr = BinaryOp(left=NumberLiteral(value=1), operator="==", right=BoolLiteral(value=True))
        with self.assertRaisesRegex(CroakTypeError, "same type"):
            self.checker.infer(expr)

    def test_unknown_operator(self):
        expr = BinaryOp(left=NumberLiteral(value=1), operator="%", right=NumberLiteral(value=2))
        with self.assertRaisesRegex(CroakTypeError, "unknown operator %"):
            self.checker.infer(expr)

    def test_undefined_variable(self):
        with self.assertRaisesRegex(CroakTypeError, "undefined variable 'nope'"):
            self.checker.infer(Variable(name="nope"))


class TestStatements(unittest.TestCase):

    def _check(self, source: str) -> TypeChecker:
        checker = TypeChecker()
        checker.check(parse(tokenize(source)))
        return checker

    def assertRejected(self, source: str, pattern: str = ""):
        with self.assertRaisesRegex(CroakTypeError, pattern):
            self._check(source)

    def test_declaration_and_assignment(self):
        checker = TypeChecker()
        checker.check([
            Declaration(name="x", initializer=NumberLiteral(value=10)),
            Assignment(name="x", value=NumberLiteral(value=42)),
        ])
        self.assertEqual(checker.variables.lookup("x"), Type.NUMBER)

    def test_assignment_type_mismatch(self):
        self.assertRejected("let x = 10; x = true;", "cannot assign bool to 'x' of type number")

    def test_bool_assigned_to_number(self):
        self.assertRejected("let x: bool = true; let y: number = 1; y = x;")

    def test_declared_type_mismatch(self):
        self.assertRejected("let x: number = true;", "type mismatch in declaration of 'x'")

    def test_declared_type_match(self):
        checker = self._check("let x: bool = 1 < 2;")
        self.assertEqual(checker.variables.lookup("x"), Type.BOOLEAN)

    def test_undeclared_assignment(self):
        self.assertRejected("y = 5;", "undefined variable 'y'")

    def test_redeclaration_in_same_scope_allowed(self):
        checker = self._check("let x = 1; let x = true;")
        self.assertEqual(checker.variables.lookup("x"), Type.BOOLEAN)

    def test_while_condition_must_be_boolean(self):
        with self.assertRaisesRegex(CroakTypeError, "while condition is not boolean"):
            TypeChecker().check([While(condition=NumberLiteral(value=1), body=())])

    def test_if_condition_must_be_boolean(self):
        self.assertRejected("if 1 { }", "if condition is not boolean")

    def test_valid_while(self):
        self._check("let cond = true; while cond { let x = 5; x = 10; }")

    def test_outer_variable_visible_in_while(self):
        self._check("let x = 0; while true { x = 10; }")

    def test_block_scope_is_discarded(self):
        self.assertRejected("{ let inner = 1; } croak inner;", "undefined variable 'inner'")

    def test_while_scope_is_discarded(self):
        self.assertRejected("while false { let inner = 1; } croak inner;")

    def test_if_branches_have_separate_scopes(self):
        self.assertRejected("if true { let a = 1; } else { croak a; }")

    def test_shadowing_keeps_outer_type(self):
        checker = self._check("let x = 1; { let x = true; } x = 2;")
        self.assertEqual(checker.variables.lookup("x"), Type.NUMBER)
        self.assertEqual(len(checker.variables), 1)

    def test_print_checks_expression(self):
        self.assertRejected("croak 1 + true;")

    # ─── Functions ───

    def test_function_registered_with_signature(self):
        checker = self._check("func add(a: number, b: number): number { return a + b; }")
        self.assertEqual(
            checker.functions.lookup("add"),
            FunctionSignature(param_types=(Type.NUMBER, Type.NUMBER), return_type=Type.NUMBER),
        )

    def test_call_type_is_return_type(self):
        checker = self._check("func yes(): bool { return true; } let b = yes();")
        self.assertEqual(checker.variables.lookup("b"), Type.BOOLEAN)

    def test_recursion(self):
        self._check("func fact(n: number): number { if n < 2 { return 1; } return n * fact(n - 1); }")

    def test_undefined_function(self):
        self.assertRejected("croak missing(1);", "undefined function 'missing'")

    def test_call_before_declaration(self):
        self.assertRejected("croak f(); func f(): number { return 1; }", "undefined function 'f'")

    def test_arity_mismatch(self):
        self.assertRejected(
            "func f(a: number): number { return a; } croak f(1, 2);",
            "expects 1 argument\\(s\\), got 2",
        )

    def test_argument_type_mismatch(self):
        self.assertRejected(
            "func f(a: number): number { return a; } croak f(true);",
            "argument 1 of 'f' must be number, got bool",
        )

    def test_parameters_are_in_scope(self):
        self._check("func f(flag: bool) { if flag { croak 1; } }")

    def test_parameters_do_not_leak(self):
        self.assertRejected("func f(a: number) { } croak a;", "undefined variable 'a'")

    def test_body_cannot_see_outer_variables(self):
        self.assertRejected("let g = 1; func f(): number { return g; }", "undefined variable 'g'")

    def test_return_type_mismatch(self):
        self.assertRejected("func f(): number { return true; }", "return type mismatch")

    def test_return_in_void_function(self):
        self.assertRejected("func f() { return 1; }", "without a return type")

    def test_return_outside_function(self):
        self.assertRejected("return 1;", "return outside of a function")

    def test_void_call_as_statement(self):
        self._check("func hi() { croak 1; } hi();")

    def test_void_call_as_value(self):
        self.assertRejected("func hi() { } let x = hi();", "void call 'hi' used as a value")

    def test_void_call_as_operand(self):
        self.assertRejected("func hi() { } croak hi() == hi();")

    def test_nested_function_not_visible_outside(self):
        self.assertRejected("func outer() { func inner() { } inner(); } inner();", "undefined function 'inner'")

    def test_function_in_block_not_visible_outside(self):
        self.assertRejected("{ func f(): number { return 1; } } croak f();", "undefined function 'f'")

    def test_function_in_if_branch_not_visible_outside(self):
        self.assertRejected("if false { func g(): number { return 1; } } croak g();", "undefined function 'g'")

    def test_function_in_else_branch_not_visible_outside(self):
        self.assertRejected("if true { } else { func g() { } } g();", "undefined function 'g'")

    def test_function_in_while_body_not_visible_outside(self):
        self.assertRejected("while false { func w() { } } w();", "undefined function 'w'")

    def test_function_in_block_callable_inside(self):
        self._check("{ func f(): number { return 1; } croak f(); }")

    def test_error_reports_position(self):
        with self.assertRaises(CroakTypeError) as ctx:
            self._check("let x = 1;\nx = false;")
        self.assertEqual((ctx.exception.line, ctx.exception.col), (2, 1))

    def test_failed_function_check_restores_scopes(self):
        checker = TypeChecker()
        checker.check(parse(tokenize("let x = 1;")))
        with self.assertRaises(CroakTypeError):
            checker.check(parse(tokenize("func f(): number { return true; }")))
        self.assertEqual(checker.variables.lookup("x"), Type.NUMBER)

    def test_reset_function_context(self):
        checker = TypeChecker()
        checker._return_types.append(Type.NUMBER)
        checker.reset_function_context()
        with self.assertRaisesRegex(CroakTypeError, "return outside of a function"):
            checker.check(parse(tokenize("return 1;")))

    def test_check_helper(self):
        self.assertIsNone(check(parse(tokenize("let x = 1; croak x;"))))


if __name__ == "__main__":
    unittest.main(verbosity=2)
