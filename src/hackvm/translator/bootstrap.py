"""
Program Bootstrap
=================

A whole-program translation starts with a short prologue that points SP
at the base of the stack and calls the program's entry function:

    @256
    D=A
    @SP
    M=D
    ... call Sys.init 0 ...

The call is generated with the program's own GenerationContext, so its
return label (Sys.init$ret.0 for a fresh context) takes one number from the
jump counter like any other call.
"""

from hackvm.translator.codegen import CodeGenerator, GenerationContext
from hackvm.translator.commands import Call


DEFAULT_ENTRY_FUNCTION = "Sys.init"
DEFAULT_STACK_BASE = 256


def emit_bootstrap(
    generator: CodeGenerator,
    context: GenerationContext,
    entry_function: str = DEFAULT_ENTRY_FUNCTION,
    stack_base: int = DEFAULT_STACK_BASE,
) -> list[str]:
    """
    Generate the program prologue.

    Args:
        generator: Code generator used for the entry call
        context: Program-wide generation state; its jump counter advances
        entry_function: Function called once the stack is set up
        stack_base: Initial value of SP

    Returns:
        Assembly lines of the prologue
    """
    lines = [f"@{stack_base}", "D=A", "@SP", "M=D"]
    lines.extend(generator.generate(Call(entry_function, 0), context))
    return lines
