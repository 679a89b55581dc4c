"""
Croak Lexer Tests
=================
Usage:
    python -m pytest tests/test_lexer.py
"""
import sys
import os
import unittest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from croak.errors import LexError
from croak.lexer import Lexer, TokenType, tokenize


def kinds(source: str) -> list[tuple[TokenType, object]]:
    return [(t.type, t.value) for t in tokenize(source)]


class TestLexer(unittest.TestCase):

    def test_single_identifier(self):
        tokens = tokenize("frog")
        self.assertEqual(len(tokens), 2)
        self.assertEqual(tokens[0].type, TokenType.IDENTIFIER)
        self.assertEqual(tokens[0].value, "frog")
        self.assertEqual(tokens[1].type, TokenType.EOF)

    def test_empty_source_is_just_eof(self):
        tokens = tokenize("  \n\t\r ")
        self.assertEqual([t.type for t in tokens], [TokenType.EOF])

    def test_let_assignment(self):
        self.assertEqual(kinds("let x = 42;"), [
            (TokenType.KEYWORD, "let"),
            (TokenType.IDENTIFIER, "x"),
            (TokenType.OPERATOR, "="),
            (TokenType.NUMBER, 42),
            (TokenType.PUNCTUATION, ";"),
            (TokenType.EOF, ""),
        ])

    def test_arithmetic_expression(self):
        self.assertEqual(kinds("1 + 2 * 3"), [
            (TokenType.NUMBER, 1),
            (TokenType.OPERATOR, "+"),
            (TokenType.NUMBER, 2),
            (TokenType.OPERATOR, "*"),
            (TokenType.NUMBER, 3),
            (TokenType.EOF, ""),
        ])

    def test_all_keywords(self):
        tokens = tokenize("let croak while if else func return")[:-1]
        self.assertTrue(all(t.type == TokenType.KEYWORD for t in tokens))
        self.assertEqual(len(tokens), 7)

    def test_type_names(self):
        self.assertEqual(kinds("number bool")[:2], [
            (TokenType.TYPE_NAME, "number"),
            (TokenType.TYPE_NAME, "bool"),
        ])

    def test_boolean_literals(self):
        self.assertEqual(kinds("true false")[:2], [
            (TokenType.BOOLEAN, True),
            (TokenType.BOOLEAN, False),
        ])

    def test_keyword_prefix_is_identifier(self):
        tokens = tokenize("letter iffy numbers _if")
        self.assertTrue(all(t.type == TokenType.IDENTIFIER for t in tokens[:-1]))

    def test_double_equals_is_one_operator(self):
        self.assertEqual(kinds("a == b")[1], (TokenType.OPERATOR, "=="))

    def test_triple_equals_splits(self):
        ops = [t.value for t in tokenize("===") if t.type == TokenType.OPERATOR]
        self.assertEqual(ops, ["==", "="])

    def test_all_punctuation(self):
        tokens = tokenize("(){};:,")[:-1]
        self.assertEqual([t.value for t in tokens], list("(){};:,"))
        self.assertTrue(all(t.type == TokenType.PUNCTUATION for t in tokens))

    def test_comparison_operators(self):
        ops = [t.value for t in tokenize("a > b < c")[:-1] if t.type == TokenType.OPERATOR]
        self.assertEqual(ops, [">", "<"])

    def test_int32_boundary(self):
        self.assertEqual(kinds("2147483647")[0], (TokenType.NUMBER, 2147483647))

    def test_number_too_large_becomes_identifier(self):
        self.assertEqual(kinds("2147483648")[0], (TokenType.IDENTIFIER, "2147483648"))

    def test_digit_led_word_is_identifier(self):
        self.assertEqual(kinds("1abc")[0], (TokenType.IDENTIFIER, "1abc"))

    def test_minus_is_operator_not_sign(self):
        self.assertEqual(kinds("-5")[:2], [
            (TokenType.OPERATOR, "-"),
            (TokenType.NUMBER, 5),
        ])

    def test_unknown_character(self):
        with self.assertRaises(LexError) as ctx:
            tokenize("let x = 1 @ 2;")
        self.assertEqual(ctx.exception.char, "@")
        self.assertEqual((ctx.exception.line, ctx.exception.col), (1, 11))

    def test_unknown_character_position_on_later_line(self):
        with self.assertRaises(LexError) as ctx:
            tokenize("let x = 1;\n  croak $;")
        self.assertEqual((ctx.exception.line, ctx.exception.col), (2, 9))

    def test_positions(self):
        tokens = tokenize("let x\n  = 5;")
        self.assertEqual([(t.line, t.col) for t in tokens], [
            (1, 1), (1, 5), (2, 3), (2, 5), (2, 6), (2, 7),
        ])

    def test_lexemes_reconstruct_source(self):
        source = "func f(a: number): bool {\n  return a == 007;\n}\nlet y = f(1) ;"
        rebuilt = "".join(t.lexeme for t in tokenize(source))
        self.assertEqual(rebuilt, "".join(source.split()))

    def test_class_form_matches_helper(self):
        source = "croak 1 + 2;"
        self.assertEqual(Lexer(source).tokenize(), tokenize(source))


if __name__ == "__main__":
    unittest.main(verbosity=2)
