"""
hackvm Error Hierarchy
======================

This module defines the root of the exception hierarchy for hackvm.
All exceptions inherit from HackVMError, allowing callers to catch every
toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
HackVMError (base)
├── SourceInputError - input path holds no translatable VM source
└── VMTranslatorError (translator-related, see hackvm.translator.errors)
    ├── UnrecognizedCommandError - unknown VM command keyword
    ├── UnrecognizedSegmentError - unknown or unaddressable memory segment
    ├── UnrecognizedOperatorError - arithmetic mnemonic not supported
    └── MalformedOperandError - missing, extra or non-numeric operand

Error messages follow this format:
    filename:line:column: error: description
    source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class HackVMError(Exception):
    """
    Base exception for all hackvm errors.

        try:
            translator.translate_path("ProgramFlow/")
        except HackVMError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in VM source for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Input Errors
# =============================================================================

class SourceInputError(HackVMError):
    """
    The input path cannot be turned into a list of VM units.

    Raised for a file without the .vm suffix or a directory that holds
    no .vm files.
    """
    pass
