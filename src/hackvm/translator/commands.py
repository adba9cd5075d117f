"""
VM Command Model
================

Immutable representations of the nine VM command kinds. A command carries
only what was written in the source; all generation state (jump counter,
current function, static name) lives in the GenerationContext.

    push constant 7      -> Push(Segment.CONSTANT, 7)
    add                  -> Arithmetic(ArithmeticOp.ADD)
    if-goto LOOP         -> IfGoto("LOOP")
    function Main.f 2    -> Function("Main.f", 2)
    call Math.max 2      -> Call("Math.max", 2)

str() of any command renders it back to VM text, which the translator
uses for annotated output.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from hackvm.translator.errors import UnrecognizedOperatorError, UnrecognizedSegmentError


# Largest value an index, local count or argument count may take.
MAX_OPERAND = 0xFFFF


class Segment(Enum):
    """The eight memory segments addressed by push and pop."""

    CONSTANT = "constant"
    LOCAL = "local"
    ARGUMENT = "argument"
    THIS = "this"
    THAT = "that"
    POINTER = "pointer"
    TEMP = "temp"
    STATIC = "static"

    @classmethod
    def parse(cls, name: str) -> "Segment":
        """Look up a segment by its VM name."""
        try:
            return cls(name)
        except ValueError:
            raise UnrecognizedSegmentError(name) from None


class ArithmeticOp(Enum):
    """Arithmetic and logical stack operations."""

    ADD = "add"
    SUB = "sub"
    NEG = "neg"
    EQ = "eq"
    GT = "gt"
    LT = "lt"
    AND = "and"
    OR = "or"
    NOT = "not"

    @classmethod
    def parse(cls, name: str) -> "ArithmeticOp":
        """Look up an operator by its VM mnemonic."""
        try:
            return cls(name)
        except ValueError:
            raise UnrecognizedOperatorError(name) from None

    @property
    def is_unary(self) -> bool:
        return self in (ArithmeticOp.NEG, ArithmeticOp.NOT)

    @property
    def is_comparison(self) -> bool:
        return self in (ArithmeticOp.EQ, ArithmeticOp.GT, ArithmeticOp.LT)


@dataclass(frozen=True)
class Arithmetic:
    op: ArithmeticOp

    def __str__(self) -> str:
        return self.op.value


@dataclass(frozen=True)
class Push:
    segment: Segment
    index: int

    def __str__(self) -> str:
        return f"push {self.segment.value} {self.index}"


@dataclass(frozen=True)
class Pop:
    segment: Segment
    index: int

    def __str__(self) -> str:
        return f"pop {self.segment.value} {self.index}"


@dataclass(frozen=True)
class Label:
    name: str

    def __str__(self) -> str:
        return f"label {self.name}"


@dataclass(frozen=True)
class Goto:
    name: str

    def __str__(self) -> str:
        return f"goto {self.name}"


@dataclass(frozen=True)
class IfGoto:
    name: str

    def __str__(self) -> str:
        return f"if-goto {self.name}"


@dataclass(frozen=True)
class Function:
    """
    Function entry point.

    Attributes:
        name: Function name, unique across the whole program
        local_count: Number of local variables to zero on entry
    """
    name: str
    local_count: int

    def __str__(self) -> str:
        return f"function {self.name} {self.local_count}"


@dataclass(frozen=True)
class Return:
    def __str__(self) -> str:
        return "return"


@dataclass(frozen=True)
class Call:
    """
    Function call.

    Attributes:
        name: Callee function name
        arg_count: Number of arguments already pushed by the caller
    """
    name: str
    arg_count: int

    def __str__(self) -> str:
        return f"call {self.name} {self.arg_count}"


Command = Union[Arithmetic, Push, Pop, Label, Goto, IfGoto, Function, Return, Call]
