"""
hackvm - VM Translator for the Hack Platform
============================================

This package translates programs written in the stack-based VM language
into Hack assembly, ready for a Hack assembler.

Main Components
---------------
- **translator**: parser, code generator, bootstrap and unit orchestration
- **cli**: the `vmtrans` command-line tool

Quick Start
-----------
Translate a program directory:
    >>> from hackvm.translator import translate_file
    >>> result = translate_file("FibonacciElement/")
    >>> print(result.output_path)

Or use the command-line tool:
    $ vmtrans FibonacciElement/
    $ vmtrans SimpleAdd.vm -o SimpleAdd.asm
"""

__version__ = "0.8.0"

from hackvm.errors import HackVMError, SourceInputError, SourceLocation

__all__ = [
    "__version__",
    "HackVMError",
    "SourceInputError",
    "SourceLocation",
]
