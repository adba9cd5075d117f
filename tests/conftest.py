# =============================================================================
# conftest.py - Shared fixtures for hackvm tests
# =============================================================================
# Provides a small Hack CPU simulator that runs generated assembly text
# directly, so tests can check what translated programs actually do
# (stack contents, segment memory, saved frames) rather than only the
# emitted text.
#
# The simulator resolves symbols like a two-pass Hack assembler:
#   pass 1 - (LABEL) declarations bind to instruction addresses
#   pass 2 - other @symbols become variables allocated from RAM[16]
# =============================================================================

import re
from typing import Callable, Optional

import pytest

from hackvm.translator import SourceUnit, TranslatorOptions, VMTranslator


WORD_MASK = 0xFFFF

PREDEFINED_SYMBOLS = {
    "SP": 0, "LCL": 1, "ARG": 2, "THIS": 3, "THAT": 4,
    "SCREEN": 16384, "KBD": 24576,
    **{f"R{i}": i for i in range(16)},
}

# Standard test-script initial state for programs run without bootstrap
DEFAULT_REGISTERS = {"SP": 256, "LCL": 300, "ARG": 400, "THIS": 3000, "THAT": 3010}

BINARY_COMP = re.compile(r"^([ADM01])([-+&|])([ADM01])$")
UNARY_COMP = re.compile(r"^([-!])([ADM1])$")


def to_signed(value: int) -> int:
    """Interpret a 16-bit word as two's complement."""
    value &= WORD_MASK
    return value - 0x10000 if value & 0x8000 else value


class HackCPU:
    """
    Hack CPU executing assembly text.

    Attributes:
        ram: Data memory (16-bit words, stored unsigned)
        a, d, pc: CPU registers
        symbols: Resolved label and variable addresses
    """

    def __init__(self, assembly: str, ram_size: int = 32768):
        self.ram = [0] * ram_size
        self.a = 0
        self.d = 0
        self.pc = 0
        self.steps = 0
        self.symbols = dict(PREDEFINED_SYMBOLS)
        self.program = self._load(assembly)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def _load(self, assembly: str) -> list[tuple]:
        instructions = []
        for raw in assembly.splitlines():
            line = raw.split("//", 1)[0].strip()
            if not line:
                continue
            if line.startswith("(") and line.endswith(")"):
                label = line[1:-1]
                assert label not in self.symbols, f"duplicate label {label}"
                self.symbols[label] = len(instructions)
            else:
                instructions.append(line)

        next_variable = 16
        program = []
        for line in instructions:
            if line.startswith("@"):
                operand = line[1:]
                if operand.isdigit():
                    value = int(operand)
                else:
                    if operand not in self.symbols:
                        self.symbols[operand] = next_variable
                        next_variable += 1
                    value = self.symbols[operand]
                program.append(("A", value & WORD_MASK))
            else:
                dest, _, rest = line.rpartition("=") if "=" in line else ("", "", line)
                comp, _, jump = rest.partition(";")
                program.append(("C", dest, comp, jump))
        return program

    # -------------------------------------------------------------------------
    # Execution
    # -------------------------------------------------------------------------

    def _operand(self, name: str) -> int:
        if name == "A":
            return self.a
        if name == "D":
            return self.d
        if name == "M":
            return self.ram[self.a]
        return int(name)

    def _compute(self, comp: str) -> int:
        if comp in ("0", "1", "A", "D", "M"):
            return self._operand(comp)
        if comp == "-1":
            return WORD_MASK
        match = UNARY_COMP.match(comp)
        if match:
            op, x = match.groups()
            value = self._operand(x)
            return (-value if op == "-" else ~value) & WORD_MASK
        match = BINARY_COMP.match(comp)
        if match:
            x, op, y = match.groups()
            left, right = self._operand(x), self._operand(y)
            if op == "+":
                return (left + right) & WORD_MASK
            if op == "-":
                return (left - right) & WORD_MASK
            if op == "&":
                return left & right
            return left | right
        raise ValueError(f"unsupported comp '{comp}'")

    @staticmethod
    def _jumps(jump: str, value: int) -> bool:
        signed = to_signed(value)
        return {
            "": False,
            "JGT": signed > 0,
            "JEQ": signed == 0,
            "JGE": signed >= 0,
            "JLT": signed < 0,
            "JNE": signed != 0,
            "JLE": signed <= 0,
            "JMP": True,
        }[jump]

    def step(self) -> None:
        instruction = self.program[self.pc]
        self.steps += 1
        if instruction[0] == "A":
            self.a = instruction[1]
            self.pc += 1
            return

        _, dest, comp, jump = instruction
        value = self._compute(comp)
        address = self.a
        if "M" in dest:
            self.ram[address] = value
        if "D" in dest:
            self.d = value
        if "A" in dest:
            self.a = value
        self.pc = address if self._jumps(jump, value) else self.pc + 1

    def run(self, stop_at: Optional[str] = None, max_steps: int = 200_000) -> None:
        """Run until falling off the program, reaching stop_at, or max_steps."""
        stop_pc = self.symbols[stop_at] if stop_at else None
        while self.pc < len(self.program):
            if self.pc == stop_pc:
                return
            if self.steps >= max_steps:
                raise RuntimeError(f"no halt after {max_steps} steps (pc={self.pc})")
            self.step()

    # -------------------------------------------------------------------------
    # Inspection
    # -------------------------------------------------------------------------

    def word(self, address: int) -> int:
        """Signed value at an address."""
        return to_signed(self.ram[address])

    def set_registers(self, **registers: int) -> None:
        for name, value in registers.items():
            self.ram[PREDEFINED_SYMBOLS[name]] = value & WORD_MASK

    @property
    def sp(self) -> int:
        return self.ram[0]

    @property
    def top(self) -> int:
        """Signed value on top of the stack."""
        return self.word(self.sp - 1)

    def stack(self, base: int = 256) -> list[int]:
        return [self.word(i) for i in range(base, self.sp)]


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def hack_cpu() -> Callable[..., HackCPU]:
    """Factory building a HackCPU from assembly text."""
    return HackCPU


@pytest.fixture
def run_vm() -> Callable[..., HackCPU]:
    """
    Translate VM source, run it, and return the CPU.

    Without bootstrap the standard test registers are preset
    (SP=256, LCL=300, ARG=400, THIS=3000, THAT=3010).
    """
    def _run(
        source: str,
        static_name: str = "Test",
        stop_at: Optional[str] = None,
        registers: Optional[dict] = None,
        max_steps: int = 200_000,
    ) -> HackCPU:
        unit = SourceUnit.from_text(source, static_name)
        result = VMTranslator(TranslatorOptions()).translate([unit])
        cpu = HackCPU(result.assembly)
        cpu.set_registers(**(registers or DEFAULT_REGISTERS))
        cpu.run(stop_at=stop_at, max_steps=max_steps)
        return cpu

    return _run
