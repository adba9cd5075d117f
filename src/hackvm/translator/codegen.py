"""
Hack Code Generator for VM Commands
===================================

This module maps each VM command to a fixed sequence of Hack assembly
instructions. It implements the arithmetic, memory access, branching and
function-calling parts of the translator.

Generation State
----------------
Commands are stateless; everything that has to survive from one command to
the next lives in a GenerationContext that the caller passes in:

| Field            | Used by                | Lifetime                     |
|------------------|------------------------|------------------------------|
| jump_counter     | eq/gt/lt, call         | whole program, never reset   |
| current_function | label, goto, if-goto   | set by each function command |
| static_name      | push/pop static        | rebound per source unit      |

Comparison labels (JMP_FALSE<n>) and return labels (<f>$ret.<n>) draw
from the same counter, so no two generated labels in a program can collide.

Memory Map
----------
| Address | Name  | Usage                                  |
|---------|-------|----------------------------------------|
| 0       | SP    | Stack pointer                          |
| 1       | LCL   | Base of the current function's locals  |
| 2       | ARG   | Base of the current function's args    |
| 3       | THIS  | Base of the this segment (pointer 0)   |
| 4       | THAT  | Base of the that segment (pointer 1)   |
| 5-12    | temp  | Temp segment                           |
| 13      | R13   | Frame pointer scratch during return    |
| 14      | R14   | Return address scratch during return   |
| 15      | R15   | Scratch (pop address, comparison flag) |
| 16-255  |       | Static variables (assembler-allocated) |
| 256-    |       | Stack                                  |

Stack Frame Layout
------------------
After `call f n` the stack looks like:

    +----------------+ <- ARG (first of n arguments)
    | argument 0..n-1|
    +----------------+
    | return address |  LCL - 5
    | saved LCL      |  LCL - 4
    | saved ARG      |  LCL - 3
    | saved THIS     |  LCL - 2
    | saved THAT     |  LCL - 1
    +----------------+ <- LCL
    | local 0..k-1   |  (zeroed by `function f k`)
    +----------------+ <- SP

`return` copies the return value to *ARG, sets SP to ARG + 1, restores the
four saved registers and jumps to the return address.

Usage
-----
>>> from hackvm.translator.codegen import CodeGenerator, GenerationContext
>>> from hackvm.translator.parser import parse_line
>>> context = GenerationContext(static_name="Main")
>>> CodeGenerator().generate(parse_line("push constant 7"), context)
['@7', 'D=A', '@SP', 'AM=M+1', 'A=A-1', 'M=D']
"""

import logging
from dataclasses import dataclass

from hackvm.translator.commands import (
    Arithmetic,
    ArithmeticOp,
    Call,
    Command,
    Function,
    Goto,
    IfGoto,
    Label,
    Pop,
    Push,
    Return,
    Segment,
)
from hackvm.translator.errors import (
    UnrecognizedCommandError,
    UnrecognizedSegmentError,
)

logger = logging.getLogger(__name__)


# Scope used for labels that appear before any function declaration
DEFAULT_SCOPE = "System"

TEMP_BASE = 5

# Segments addressed through a base register
BASE_REGISTERS = {
    Segment.LOCAL: "LCL",
    Segment.ARGUMENT: "ARG",
    Segment.THIS: "THIS",
    Segment.THAT: "THAT",
}

# pointer 0 / pointer 1
POINTER_REGISTERS = ("THIS", "THAT")

# Registers saved by call, in push order (restored by return in reverse)
FRAME_REGISTERS = ("LCL", "ARG", "THIS", "THAT")

BINARY_OPERATORS = {
    ArithmeticOp.ADD: "+",
    ArithmeticOp.SUB: "-",
    ArithmeticOp.AND: "&",
    ArithmeticOp.OR: "|",
}

UNARY_OPERATORS = {
    ArithmeticOp.NEG: "-",
    ArithmeticOp.NOT: "!",
}

COMPARISON_JUMPS = {
    ArithmeticOp.EQ: "JEQ",
    ArithmeticOp.GT: "JGT",
    ArithmeticOp.LT: "JLT",
}

# D -> *SP, SP++
PUSH_D = ["@SP", "AM=M+1", "A=A-1", "M=D"]


# =============================================================================
# Generation Context
# =============================================================================

@dataclass
class GenerationContext:
    """
    Mutable state threaded through every command of one program.

    Attributes:
        static_name: Prefix for static variables of the current unit
        jump_counter: Next free number for generated labels
        current_function: Name of the most recently declared function
    """
    static_name: str = ""
    jump_counter: int = 0
    current_function: str = DEFAULT_SCOPE

    def next_jump(self) -> int:
        """Return the current counter value and advance it."""
        value = self.jump_counter
        self.jump_counter += 1
        return value

    def enter_unit(self, static_name: str, default_scope: str = DEFAULT_SCOPE) -> None:
        """
        Prepare for the next source unit.

        Rebinds the static name and resets the function scope; the jump
        counter carries over.
        """
        self.static_name = static_name
        self.current_function = default_scope

    def qualify(self, label: str) -> str:
        """Scope a VM label to the current function."""
        return f"{self.current_function}${label}"


# =============================================================================
# Code Generator Class
# =============================================================================

class CodeGenerator:
    """
    Generates Hack assembly for individual VM commands.

    The generator itself holds no cross-command state, so one instance can
    serve any number of programs as long as each program has its own
    GenerationContext.
    """

    def __init__(self):
        self._output: list[str] = []

        # Value of segment[index] -> D
        self._value_loaders = {
            Segment.CONSTANT: self._load_constant,
            Segment.LOCAL: self._load_based_value,
            Segment.ARGUMENT: self._load_based_value,
            Segment.THIS: self._load_based_value,
            Segment.THAT: self._load_based_value,
            Segment.POINTER: self._load_pointer_value,
            Segment.TEMP: self._load_temp_value,
            Segment.STATIC: self._load_static_value,
        }

        # Address of segment[index] -> D. Constants have no address.
        self._address_loaders = {
            Segment.LOCAL: self._load_based_address,
            Segment.ARGUMENT: self._load_based_address,
            Segment.THIS: self._load_based_address,
            Segment.THAT: self._load_based_address,
            Segment.POINTER: self._load_pointer_address,
            Segment.TEMP: self._load_temp_address,
            Segment.STATIC: self._load_static_address,
        }

    def generate(self, command: Command, context: GenerationContext) -> list[str]:
        """
        Generate assembly for one command.

        Args:
            command: The command to translate
            context: Program-wide generation state, updated in place

        Returns:
            Assembly lines for the command

        Raises:
            VMTranslatorError: If the command cannot be translated
        """
        self._output = []

        if isinstance(command, Arithmetic):
            self._generate_arithmetic(command.op, context)
        elif isinstance(command, Push):
            self._generate_push(command, context)
        elif isinstance(command, Pop):
            self._generate_pop(command, context)
        elif isinstance(command, Label):
            self._emit_label(context.qualify(command.name))
        elif isinstance(command, Goto):
            self._emit(f"@{context.qualify(command.name)}", "0;JMP")
        elif isinstance(command, IfGoto):
            self._generate_if_goto(command, context)
        elif isinstance(command, Function):
            self._generate_function(command, context)
        elif isinstance(command, Call):
            self._generate_call(command, context)
        elif isinstance(command, Return):
            self._generate_return()
        else:
            raise UnrecognizedCommandError(
                type(command).__name__,
                hint="expected a Command from hackvm.translator.commands",
            )

        return list(self._output)

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, *lines: str) -> None:
        self._output.extend(lines)

    def _emit_label(self, label: str) -> None:
        self._emit(f"({label})")

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def _generate_arithmetic(self, op: ArithmeticOp, context: GenerationContext) -> None:
        if op.is_comparison:
            self._generate_comparison(COMPARISON_JUMPS[op], context)
        elif op.is_unary:
            self._emit("@SP", "AM=M-1", f"MD={UNARY_OPERATORS[op]}M", "@SP", "M=M+1")
        else:
            # y -> D, then x = x <op> y in place
            self._emit("@SP", "AM=M-1", "D=M", "A=A-1", f"MD=M{BINARY_OPERATORS[op]}D")

    def _generate_comparison(self, jump: str, context: GenerationContext) -> None:
        """
        Compare x and y, leaving -1 (true) or 0 (false) in place of x.

        R15 is preset to true and cleared unless x - y satisfies the jump.
        """
        label = f"JMP_FALSE{context.next_jump()}"
        self._emit("@R15", "M=-1")
        self._emit("@SP", "AM=M-1", "D=M", "A=A-1", "D=M-D")
        self._emit(f"@{label}", f"D;{jump}")
        self._emit("@R15", "M=0")
        self._emit_label(label)
        self._emit("@R15", "D=M", "@SP", "A=M-1", "M=D")

    # =========================================================================
    # Memory Access
    # =========================================================================

    def _generate_push(self, command: Push, context: GenerationContext) -> None:
        loader = self._value_loaders.get(command.segment)
        if loader is None:
            raise UnrecognizedSegmentError(command.segment.value)
        loader(command.segment, command.index, context)
        self._emit(*PUSH_D)

    def _generate_pop(self, command: Pop, context: GenerationContext) -> None:
        """
        Pop the stack top into segment[index].

        The destination address is computed first and cached in R15, since
        popping needs A for the stack access.
        """
        loader = self._address_loaders.get(command.segment)
        if loader is None:
            hint = None
            if command.segment is Segment.CONSTANT:
                hint = "the constant segment has no storage and can only be pushed"
            raise UnrecognizedSegmentError(command.segment.value, hint=hint)
        loader(command.segment, command.index, context)
        self._emit("@R15", "M=D")
        self._emit("@SP", "AM=M-1", "D=M")
        self._emit("@R15", "A=M", "M=D")

    def _load_constant(self, segment: Segment, index: int, context: GenerationContext) -> None:
        self._emit(f"@{index}", "D=A")

    def _load_based_value(self, segment: Segment, index: int, context: GenerationContext) -> None:
        self._emit(f"@{BASE_REGISTERS[segment]}", "D=M", f"@{index}", "A=D+A", "D=M")

    def _load_based_address(self, segment: Segment, index: int, context: GenerationContext) -> None:
        self._emit(f"@{BASE_REGISTERS[segment]}", "D=M", f"@{index}", "D=D+A")

    def _load_pointer_value(self, segment: Segment, index: int, context: GenerationContext) -> None:
        self._emit(f"@{self._pointer_register(index)}", "D=M")

    def _load_pointer_address(self, segment: Segment, index: int, context: GenerationContext) -> None:
        self._emit(f"@{self._pointer_register(index)}", "D=A")

    def _load_temp_value(self, segment: Segment, index: int, context: GenerationContext) -> None:
        self._emit(f"@{TEMP_BASE}", "D=A", f"@{index}", "A=D+A", "D=M")

    def _load_temp_address(self, segment: Segment, index: int, context: GenerationContext) -> None:
        self._emit(f"@{TEMP_BASE}", "D=A", f"@{index}", "D=D+A")

    def _load_static_value(self, segment: Segment, index: int, context: GenerationContext) -> None:
        self._emit(f"@{context.static_name}.{index}", "D=M")

    def _load_static_address(self, segment: Segment, index: int, context: GenerationContext) -> None:
        self._emit(f"@{context.static_name}.{index}", "D=A")

    def _pointer_register(self, index: int) -> str:
        if index >= len(POINTER_REGISTERS):
            raise UnrecognizedSegmentError(
                f"pointer {index}",
                hint="pointer only has entries 0 (THIS) and 1 (THAT)",
            )
        return POINTER_REGISTERS[index]

    # =========================================================================
    # Program Flow
    # =========================================================================

    def _generate_if_goto(self, command: IfGoto, context: GenerationContext) -> None:
        self._emit("@SP", "AM=M-1", "D=M")
        self._emit(f"@{context.qualify(command.name)}", "D;JNE")

    # =========================================================================
    # Functions
    # =========================================================================

    def _generate_function(self, command: Function, context: GenerationContext) -> None:
        """
        Emit a function entry point and zero its locals.

        The zeroing loop label is derived from the function name, which is
        unique across the program, so it does not use the jump counter.
        """
        name = command.name
        logger.debug(f"function {name}: {command.local_count} local(s)")
        self._emit_label(name)
        if command.local_count > 0:
            self._emit(f"@{command.local_count}", "D=A")
            self._emit_label(f"{name}_rep")
            self._emit("@SP", "AM=M+1", "A=A-1", "M=0")
            self._emit(f"@{name}_rep", "D=D-1;JGT")
        context.current_function = name

    def _generate_call(self, command: Call, context: GenerationContext) -> None:
        """Save the caller's frame, reposition ARG and LCL, and jump."""
        return_label = f"{command.name}$ret.{context.next_jump()}"

        self._emit(f"@{return_label}", "D=A", *PUSH_D)
        for register in FRAME_REGISTERS:
            self._emit(f"@{register}", "D=M", *PUSH_D)

        # LCL = SP
        self._emit("@SP", "D=M", "@LCL", "M=D")
        # ARG = SP - 5 - nArgs
        self._emit("@5", "D=D-A", f"@{command.arg_count}", "D=D-A", "@ARG", "M=D")

        self._emit(f"@{command.name}", "0;JMP")
        self._emit_label(return_label)

    def _generate_return(self) -> None:
        # R13 = frame (LCL), R14 = return address (*(frame - 5))
        self._emit("@LCL", "D=M", "@R13", "M=D")
        self._emit("@5", "A=D-A", "D=M", "@R14", "M=D")
        # *ARG = pop()
        self._emit("@SP", "AM=M-1", "D=M", "@ARG", "A=M", "M=D")
        # SP = ARG + 1
        self._emit("@ARG", "D=M", "@SP", "M=D+1")
        # THAT, THIS, ARG, LCL = *(frame - 1) .. *(frame - 4)
        for register in reversed(FRAME_REGISTERS):
            self._emit("@R13", "AM=M-1", "D=M", f"@{register}", "M=D")
        self._emit("@R14", "A=M", "0;JMP")
