"""
Croak Scopes
============
A stack of flat name → binding maps with push/pop discipline.

Used by the type checker (bindings are types or signatures) and by the
interpreter (bindings are runtime values). Lookup walks from the
innermost scope outward and the first match wins, so an inner binding
shadows an outer one until its scope is popped.
"""
import logging
from contextlib import contextmanager
from typing import Generic, Iterator, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ScopeStack(Generic[T]):
    """
    Lexical scopes as an explicit stack.

    Usage:
        scopes = ScopeStack()
        scopes.declare("x", value)
        with scopes.scope():
            scopes.declare("x", other)   # shadows
        scopes.lookup("x")               # outer binding again
    """

    def __init__(self, name: str = "scope"):
        self.name = name
        self.scopes: list[dict[str, T]] = [{}]

    def __len__(self) -> int:
        return len(self.scopes)

    def __contains__(self, name: str) -> bool:
        return any(name in scope for scope in self.scopes)

    @property
    def globals(self) -> dict[str, T]:
        return self.scopes[0]

    @property
    def innermost(self) -> dict[str, T]:
        return self.scopes[-1]

    def push(self):
        self.scopes.append({})
        logger.debug("ENTER %s (depth %d)", self.name, len(self.scopes))

    def pop(self) -> dict[str, T]:
        if len(self.scopes) == 1:
            raise IndexError(f"cannot pop the global {self.name}")
        logger.debug("LEAVE %s (depth %d)", self.name, len(self.scopes))
        return self.scopes.pop()

    @contextmanager
    def scope(self) -> Iterator[dict[str, T]]:
        """Push a fresh scope for the duration of the ``with`` block."""
        self.push()
        try:
            yield self.innermost
        finally:
            self.pop()

    def declare(self, name: str, binding: T):
        """Bind ``name`` in the innermost scope, replacing any binding made there."""
        self.innermost[name] = binding

    def lookup(self, name: str) -> T:
        """Return the innermost binding of ``name``; raise KeyError if unbound."""
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        raise KeyError(name)

    def assign(self, name: str, binding: T):
        """Overwrite ``name`` in the nearest scope that holds it; raise KeyError if unbound."""
        for scope in reversed(self.scopes):
            if name in scope:
                scope[name] = binding
                return
        raise KeyError(name)

    def snapshot(self) -> list[dict[str, T]]:
        """Copy of every scope, outermost first."""
        return [dict(scope) for scope in self.scopes]
