"""
VM Source Discovery
===================

Turns the path given on the command line into the units to translate.

    Prog.vm        -> one unit "Prog",          output Prog.asm,       no bootstrap
    FibonacciElem/ -> every *.vm in the folder, output FibonacciElem/FibonacciElem.asm,
                      bootstrap

Each unit's static name is its file stem, so `push static 3` in Main.vm
refers to the assembler symbol Main.3. Units found in a directory are
sorted by file name to make the output deterministic.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from hackvm.errors import SourceInputError

logger = logging.getLogger(__name__)


VM_SUFFIX = ".vm"
ASM_SUFFIX = ".asm"


@dataclass(frozen=True)
class SourceUnit:
    """
    One VM source unit.

    Attributes:
        static_name: Prefix for the unit's static variables
        path: File to read the source from
        text: Source held in memory (takes precedence over path)
    """
    static_name: str
    path: Optional[Path] = None
    text: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path) -> "SourceUnit":
        return cls(static_name=path.stem, path=path)

    @classmethod
    def from_text(cls, text: str, static_name: str) -> "SourceUnit":
        return cls(static_name=static_name, text=text)

    @property
    def filename(self) -> str:
        """Name used in error messages."""
        if self.path is not None:
            return str(self.path)
        return f"{self.static_name}{VM_SUFFIX}"

    def read(self) -> str:
        """Return the unit's source text."""
        if self.text is not None:
            return self.text
        if self.path is None:
            raise SourceInputError(f"unit '{self.static_name}' has neither a path nor text")
        try:
            return self.path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise SourceInputError(
                f"{self.filename}: not valid UTF-8 (byte {e.start})"
            ) from e


@dataclass(frozen=True)
class TranslationTarget:
    """
    Everything the translator needs to know about an input path.

    Attributes:
        units: Units to translate, in output order
        output_path: Where the assembly goes
        is_program: True when the input was a directory (whole program)
    """
    units: tuple[SourceUnit, ...]
    output_path: Path
    is_program: bool


def discover_units(directory: Path) -> list[SourceUnit]:
    """Find the VM files in a directory, sorted by file name."""
    files = sorted(
        (p for p in directory.iterdir() if p.is_file() and p.suffix == VM_SUFFIX),
        key=lambda p: p.name,
    )
    logger.debug(f"found {len(files)} VM file(s) in {directory}")
    return [SourceUnit.from_path(p) for p in files]


def resolve_target(path: Path, output_path: Optional[Path] = None) -> TranslationTarget:
    """
    Resolve an input path into units, an output path and a bootstrap flag.

    Args:
        path: A .vm file or a directory of .vm files
        output_path: Explicit output file (default derived from path)

    Returns:
        The resolved TranslationTarget

    Raises:
        FileNotFoundError: If path does not exist
        SourceInputError: If path holds no VM source
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input not found: {path}")

    resolved = path.resolve()

    if resolved.is_dir():
        units = discover_units(resolved)
        if not units:
            raise SourceInputError(f"no {VM_SUFFIX} files in directory: {path}")
        default_output = resolved / f"{resolved.name}{ASM_SUFFIX}"
        is_program = True
    else:
        if resolved.suffix != VM_SUFFIX:
            raise SourceInputError(f"not a {VM_SUFFIX} file: {path}")
        units = [SourceUnit.from_path(resolved)]
        default_output = resolved.with_suffix(ASM_SUFFIX)
        is_program = False

    return TranslationTarget(
        units=tuple(units),
        output_path=Path(output_path) if output_path is not None else default_output,
        is_program=is_program,
    )
