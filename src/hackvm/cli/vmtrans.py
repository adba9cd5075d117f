"""
vmtrans - VM Translator Command-Line Interface
==============================================

Translates VM programs into Hack assembly from the terminal.

Usage Examples
--------------
Single file (no bootstrap, writes SimpleAdd.asm next to the input):
    $ vmtrans SimpleAdd.vm

Whole program (bootstrap, writes FibonacciElement/FibonacciElement.asm):
    $ vmtrans FibonacciElement/

Explicit output and bootstrap control:
    $ vmtrans --no-bootstrap -o out.asm NestedCall/

Annotated output for debugging:
    $ vmtrans --annotate -v BasicLoop.vm
"""

import logging
from pathlib import Path
from typing import Optional

import click

from hackvm import __version__
from hackvm.cli.errors import handle_cli_exception
from hackvm.translator import TranslatorOptions, VMTranslator

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_path",
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output assembly file (default: <file>.asm, or <dir>/<dir>.asm)",
)
@click.option(
    "--bootstrap/--no-bootstrap",
    default=None,
    help="Emit the SP=256 / call Sys.init prologue (default: only for directories)",
)
@click.option(
    "--entry",
    default="Sys.init",
    show_default=True,
    help="Function called by the bootstrap",
)
@click.option(
    "--annotate",
    is_flag=True,
    help="Precede each command's code with a // comment",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="vmtrans")
def main(
    input_path: Path,
    output: Optional[Path],
    bootstrap: Optional[bool],
    entry: str,
    annotate: bool,
    verbose: bool,
) -> None:
    """
    Translate VM code into Hack assembly.

    INPUT_PATH is a .vm file or a directory of .vm files. A directory is
    translated as one program: its files are processed in name order into
    a single output file that starts with the bootstrap code.

    \b
    Examples:
        vmtrans SimpleAdd.vm           # Outputs SimpleAdd.asm
        vmtrans StaticsTest/           # Outputs StaticsTest/StaticsTest.asm
        vmtrans Prog.vm -o out.asm     # Specify output file
        vmtrans --annotate Prog.vm     # Interleave VM commands as comments
    """
    setup_logging(verbose)

    options = TranslatorOptions(
        bootstrap=bootstrap,
        entry_function=entry,
        annotate=annotate,
    )
    logger.debug(f"options: {options}")

    try:
        if verbose:
            click.echo(f"Translating {input_path}...")

        translator = VMTranslator(options)
        result = translator.translate_path(input_path, output)

        if verbose:
            click.echo(f"Units: {', '.join(result.units)}")
            click.echo(f"Commands: {result.command_count}")
            click.echo(f"Bootstrap: {'yes' if result.bootstrapped else 'no'}")

        click.echo(f"Translated {len(result.units)} unit(s) -> {result.output_path}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
