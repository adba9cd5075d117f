"""
VM Translator Main Module
=========================

This module provides the main translator interface. It orchestrates the
complete translation of one program:

    Units → Parse → Generate (shared context) → Concatenate → Assembly

Usage
-----
Command line:
    $ vmtrans FibonacciElement/            # writes FibonacciElement/FibonacciElement.asm
    $ vmtrans SimpleAdd.vm -o out.asm

Programmatic:
    >>> from hackvm.translator import translate_source
    >>> asm = translate_source("push constant 7\\npush constant 8\\nadd\\n")

Translation Pipeline
--------------------
1. **Bootstrap** (whole programs only): set SP and call Sys.init
2. **Per unit**, in order: bind the unit's static name, reset the
   function scope, then parse and generate each command
3. **Concatenation**: all fragments joined into one assembly text

One GenerationContext spans the whole program, so the jump counter keeps
counting across units and every generated label stays unique.

Error Handling
--------------
The first error stops the translation. Errors raised during generation
get the location of the offending source line attached, and nothing is
written to the output file.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from hackvm.translator.bootstrap import (
    DEFAULT_ENTRY_FUNCTION,
    DEFAULT_STACK_BASE,
    emit_bootstrap,
)
from hackvm.translator.codegen import DEFAULT_SCOPE, CodeGenerator, GenerationContext
from hackvm.translator.errors import VMTranslatorError
from hackvm.translator.parser import parse_source
from hackvm.translator.sources import SourceUnit, resolve_target

logger = logging.getLogger(__name__)


@dataclass
class TranslatorOptions:
    """
    Translator configuration options.

    Attributes:
        bootstrap: Emit the bootstrap prologue. None means decide from the
                   input: on for a directory, off for a single file.
        entry_function: Function called by the bootstrap
        stack_base: Initial stack pointer set by the bootstrap
        default_scope: Function scope for labels that precede any
                       function declaration in a unit
        annotate: Precede each command's code with a `// <command>` line
    """
    bootstrap: Optional[bool] = None
    entry_function: str = DEFAULT_ENTRY_FUNCTION
    stack_base: int = DEFAULT_STACK_BASE
    default_scope: str = DEFAULT_SCOPE
    annotate: bool = False


@dataclass
class TranslationResult:
    """
    Result of a translation.

    Attributes:
        assembly: Generated Hack assembly
        units: Static names of the translated units, in output order
        command_count: Number of VM commands translated
        jump_counter: Value of the jump counter after the last command
        bootstrapped: Whether the bootstrap prologue was emitted
        output_path: File the assembly was written to, if any
    """
    assembly: str = ""
    units: list[str] = field(default_factory=list)
    command_count: int = 0
    jump_counter: int = 0
    bootstrapped: bool = False
    output_path: Optional[Path] = None


class VMTranslator:
    """
    Translator from VM units to a single Hack assembly program.

    Example:
        translator = VMTranslator(TranslatorOptions(bootstrap=True))
        result = translator.translate([SourceUnit.from_path(Path("Main.vm"))])
        print(result.assembly)
    """

    def __init__(self, options: Optional[TranslatorOptions] = None):
        self.options = options or TranslatorOptions()
        self._generator = CodeGenerator()

    def translate(
        self,
        units: Iterable[SourceUnit],
        bootstrap: Optional[bool] = None,
    ) -> TranslationResult:
        """
        Translate units, in the given order, as one program.

        Args:
            units: Source units of the program
            bootstrap: Overrides options.bootstrap when not None

        Returns:
            TranslationResult with the complete assembly

        Raises:
            VMTranslatorError: On the first untranslatable line
            OSError: If a unit cannot be read
        """
        if bootstrap is None:
            bootstrap = bool(self.options.bootstrap)

        context = GenerationContext()
        result = TranslationResult(bootstrapped=bootstrap)
        lines: list[str] = []

        if bootstrap:
            if self.options.annotate:
                lines.append("// bootstrap")
            lines.extend(emit_bootstrap(
                self._generator,
                context,
                entry_function=self.options.entry_function,
                stack_base=self.options.stack_base,
            ))

        for unit in units:
            context.enter_unit(unit.static_name, self.options.default_scope)
            count = self._translate_unit(unit, context, lines)
            logger.debug(
                f"translated {unit.filename}: {count} command(s), "
                f"jump counter now {context.jump_counter}"
            )
            result.units.append(unit.static_name)
            result.command_count += count

        result.jump_counter = context.jump_counter
        result.assembly = "\n".join(lines) + "\n" if lines else ""
        return result

    def translate_path(
        self,
        path: Path,
        output_path: Optional[Path] = None,
        write: bool = True,
    ) -> TranslationResult:
        """
        Translate a .vm file or a directory of .vm files.

        Args:
            path: Input file or directory
            output_path: Output file (default: derived from path)
            write: Write the assembly to the output file

        Returns:
            TranslationResult; output_path is set to the resolved output

        Raises:
            VMTranslatorError: On the first untranslatable line
            SourceInputError: If path holds no VM source
            OSError: If an input cannot be read or the output written
        """
        target = resolve_target(Path(path), output_path)

        bootstrap = self.options.bootstrap
        if bootstrap is None:
            bootstrap = target.is_program

        result = self.translate(target.units, bootstrap=bootstrap)
        result.output_path = target.output_path

        if write:
            target.output_path.write_text(result.assembly, encoding="utf-8")
            logger.info(f"wrote {target.output_path}")

        return result

    def _translate_unit(
        self,
        unit: SourceUnit,
        context: GenerationContext,
        lines: list[str],
    ) -> int:
        """Append the unit's assembly to lines; return the command count."""
        count = 0
        for parsed in parse_source(unit.read(), unit.filename):
            try:
                fragment = self._generator.generate(parsed.command, context)
            except VMTranslatorError as e:
                raise e.attach_location(parsed.location, parsed.text)
            if self.options.annotate:
                lines.append(f"// {parsed.command}")
            lines.extend(fragment)
            count += 1
        return count


# =============================================================================
# Convenience Functions
# =============================================================================

def translate_source(
    source: str,
    static_name: str = "Main",
    bootstrap: bool = False,
) -> str:
    """
    Translate a single VM unit held in memory.

    Args:
        source: VM source text
        static_name: Prefix for the unit's static variables
        bootstrap: Emit the bootstrap prologue first

    Returns:
        Generated Hack assembly

    Raises:
        VMTranslatorError: If translation fails

    Example:
        >>> asm = translate_source("push constant 1\\nneg\\n", "Neg")
    """
    translator = VMTranslator()
    unit = SourceUnit.from_text(source, static_name)
    return translator.translate([unit], bootstrap=bootstrap).assembly


def translate_file(
    path: str,
    output_path: Optional[str] = None,
    bootstrap: Optional[bool] = None,
) -> TranslationResult:
    """
    Translate a .vm file or directory and write the assembly.

    Args:
        path: Input .vm file or directory
        output_path: Output file (default: derived from path)
        bootstrap: Force the bootstrap on or off (default: directories only)

    Returns:
        TranslationResult for the written program

    Example:
        >>> result = translate_file("StaticsTest/")
        >>> result.output_path.name
        'StaticsTest.asm'
    """
    translator = VMTranslator(TranslatorOptions(bootstrap=bootstrap))
    return translator.translate_path(
        Path(path),
        Path(output_path) if output_path is not None else None,
    )
