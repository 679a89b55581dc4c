"""
Croak Sessions
==============
Glue between the pipeline stages and the host programs.

``run_source`` runs one program from scratch; ``Session`` keeps the
checker and interpreter alive between inputs so a REPL can build on
earlier lines. Both report language errors as values on ``RunResult``
instead of raising, so the host decides whether to stop or carry on.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable

from .checker import TypeChecker
from .errors import CroakError
from .interpreter import Interpreter
from .lexer import Lexer
from .parser import Parser
from .values import Value

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """Outcome of running one input unit."""
    output: list[str] = field(default_factory=list)
    environment: dict[str, Value] = field(default_factory=dict)
    error: CroakError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Session:
    """
    A persistent evaluation context.

    Usage:
        session = Session()
        session.run("let x = 1;")
        result = session.run("croak x + 1;")
        result.output   # ["2"]

    A failed input is rolled back: variables and functions return to the
    state they had before it ran. Output already produced is kept.
    """

    def __init__(self, output_fn: Callable[[str], None] | None = None, check: bool = True):
        self.output_fn = output_fn
        self.check = check
        self.checker = TypeChecker()
        self.interpreter = Interpreter(self._emit)
        self._output: list[str] = []

    def _emit(self, text: str):
        self._output.append(text)
        if self.output_fn is not None:
            self.output_fn(text)

    @property
    def environment(self) -> dict[str, Value]:
        return dict(self.interpreter.environment)

    def run(self, source: str, execute: bool = True) -> RunResult:
        """Lex, parse, check and (unless ``execute`` is False) interpret ``source``."""
        self._output = []
        result = RunResult(output=self._output)
        saved = self._snapshot()
        try:
            tokens = Lexer(source).tokenize()
            statements = Parser(tokens).parse()
            if self.check:
                self.checker.check(statements)
                logger.debug("type check passed for %d statement(s)", len(statements))
            if execute:
                self.interpreter.interpret(statements)
        except CroakError as e:
            logger.info("%s: %s", e.kind, e)
            result.error = e
            self._restore(saved)
        result.environment = self.environment
        return result

    def _snapshot(self) -> tuple:
        return (
            self.checker.variables.snapshot(),
            self.checker.functions.snapshot(),
            self.interpreter.environments.snapshot(),
            dict(self.interpreter.functions),
        )

    def _restore(self, saved: tuple):
        variables, signatures, environments, functions = saved
        self.checker.variables.scopes = variables
        self.checker.functions.scopes = signatures
        self.checker.reset_function_context()
        self.interpreter.environments.scopes = environments
        self.interpreter.functions = functions

    def reset(self):
        """Forget every binding and function."""
        self.checker = TypeChecker()
        self.interpreter = Interpreter(self._emit)


def run_source(
    source: str,
    output_fn: Callable[[str], None] | None = None,
    check: bool = True,
) -> RunResult:
    """Run a complete program in a fresh session."""
    return Session(output_fn=output_fn, check=check).run(source)
