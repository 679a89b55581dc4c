"""Runtime values produced by the interpreter."""
from dataclasses import dataclass


@dataclass(frozen=True)
class NumberValue:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BoolValue:
    value: bool

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class VoidValue:
    """Result of a call that finished without ``return``."""

    def __str__(self) -> str:
        return "void"


VOID = VoidValue()

Value = NumberValue | BoolValue | VoidValue
