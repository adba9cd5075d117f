"""
VM Translator Error Hierarchy
=============================

Exceptions raised while parsing VM source and generating Hack assembly.
All of them inherit from VMTranslatorError, which itself inherits from the
base HackVMError.

Every error is terminal for a translation run: the translator stops at the
first one and writes nothing, because a partially translated stack program
breaks stack-height and label invariants that span the whole program.

Example:
    SimpleAdd.vm:3:1: error: unrecognized command 'mul'
        mul
        ^
    hint: arithmetic commands are add, sub, neg, eq, gt, lt, and, or, not
"""

from typing import Optional

from hackvm.errors import HackVMError, SourceLocation


class VMTranslatorError(HackVMError):
    """
    Base exception for all translator errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            Main.vm:12:5: error: unrecognized segment 'locals'
                push locals 0
                    ^
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)

    def attach_location(
        self,
        location: SourceLocation,
        source_line: Optional[str] = None,
    ) -> "VMTranslatorError":
        """
        Record where the error occurred, if not already known.

        Code generation works on parsed commands, which carry no position,
        so the translator attaches the location of the offending line
        before re-raising.
        """
        if self.location is None:
            self.location = location
            if source_line is not None:
                self.source_line = source_line
            self.args = (self._format_message(),)
        return self


class UnrecognizedCommandError(VMTranslatorError):
    """The first token of a line is not a VM command keyword."""

    def __init__(
        self,
        token: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.token = token
        super().__init__(
            f"unrecognized command '{token}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnrecognizedSegmentError(VMTranslatorError):
    """
    A push/pop names a segment that does not exist or cannot be addressed.

    Raised by the parser for unknown segment names, and by the code
    generator for `pop constant` and `pointer` indices other than 0 and 1.
    """

    def __init__(
        self,
        segment: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.segment = segment
        super().__init__(
            f"unrecognized segment '{segment}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnrecognizedOperatorError(VMTranslatorError):
    """An arithmetic operator outside the supported set."""

    def __init__(
        self,
        operator: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.operator = operator
        super().__init__(
            f"unrecognized arithmetic operator '{operator}'",
            location=location,
            source_line=source_line,
        )


class MalformedOperandError(VMTranslatorError):
    """
    An operand is missing, superfluous, non-numeric or out of range.

    Examples:
        push constant       // missing index
        push constant -1    // not a non-negative integer
        function Main.f     // missing local count
        return 0            // return takes no operands
    """
    pass
