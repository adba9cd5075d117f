"""
Hack VM Translator
==================

This module translates programs written in the stack-based VM language
into assembly for the 16-bit Hack computer.

Pipeline
--------
    VM Source → Parser → Commands → Code Generator → Hack Assembly

The code generator threads a GenerationContext (jump counter, current
function, static name) through every command of a program. A whole
program translated from a directory starts with a bootstrap that sets
the stack pointer and calls Sys.init.

Usage
-----
>>> from hackvm.translator import translate_source
>>> asm = translate_source('''
... push constant 7
... push constant 8
... add
... ''')
>>> print(asm)  # Hack assembly

Memory Model
------------
- 16-bit words, two's complement
- SP, LCL, ARG, THIS, THAT in RAM[0..4], temp in RAM[5..12]
- Stack grows upward from 256
- Booleans: true is -1, false is 0
"""

from hackvm.translator.translator import (
    VMTranslator,
    TranslatorOptions,
    TranslationResult,
    translate_source,
    translate_file,
)
from hackvm.translator.errors import (
    VMTranslatorError,
    UnrecognizedCommandError,
    UnrecognizedSegmentError,
    UnrecognizedOperatorError,
    MalformedOperandError,
)
from hackvm.translator.commands import (
    Command,
    Segment,
    ArithmeticOp,
    Arithmetic,
    Push,
    Pop,
    Label,
    Goto,
    IfGoto,
    Function,
    Return,
    Call,
)
from hackvm.translator.parser import ParsedLine, parse_line, parse_source, strip_comment
from hackvm.translator.codegen import CodeGenerator, GenerationContext
from hackvm.translator.bootstrap import emit_bootstrap
from hackvm.translator.sources import SourceUnit, TranslationTarget, resolve_target

__all__ = [
    # Main API
    "VMTranslator",
    "TranslatorOptions",
    "TranslationResult",
    "translate_source",
    "translate_file",
    # Errors
    "VMTranslatorError",
    "UnrecognizedCommandError",
    "UnrecognizedSegmentError",
    "UnrecognizedOperatorError",
    "MalformedOperandError",
    # Commands
    "Command",
    "Segment",
    "ArithmeticOp",
    "Arithmetic",
    "Push",
    "Pop",
    "Label",
    "Goto",
    "IfGoto",
    "Function",
    "Return",
    "Call",
    # Parser
    "ParsedLine",
    "parse_line",
    "parse_source",
    "strip_comment",
    # Code Generator
    "CodeGenerator",
    "GenerationContext",
    "emit_bootstrap",
    # Sources
    "SourceUnit",
    "TranslationTarget",
    "resolve_target",
]
