"""
Croak: a small typed imperative scripting language.

Pipeline: Lexer → Parser → TypeChecker → Interpreter.
"""
from .errors import (
    CroakError, LexError, ParseError, CroakTypeError, CroakRuntimeError,
)
from .lexer import Lexer, Token, TokenType, tokenize
from .parser import (
    Parser, Type, parse,
    NumberLiteral, BoolLiteral, Variable, BinaryOp, FunctionCall,
    Declaration, Assignment, Print, While, Block, FunctionDeclaration,
    If, ExpressionStatement, Return,
)
from .checker import TypeChecker, FunctionSignature, check
from .interpreter import Interpreter, interpret
from .values import NumberValue, BoolValue, VoidValue, VOID
from .session import Session, RunResult, run_source

__version__ = "0.1.0"
__all__ = [
    "CroakError", "LexError", "ParseError", "CroakTypeError", "CroakRuntimeError",
    "Lexer", "Token", "TokenType", "tokenize",
    "Parser", "Type", "parse",
    "NumberLiteral", "BoolLiteral", "Variable", "BinaryOp", "FunctionCall",
    "Declaration", "Assignment", "Print", "While", "Block", "FunctionDeclaration",
    "If", "ExpressionStatement", "Return",
    "TypeChecker", "FunctionSignature", "check",
    "Interpreter", "interpret",
    "NumberValue", "BoolValue", "VoidValue", "VOID",
    "Session", "RunResult", "run_source",
]
