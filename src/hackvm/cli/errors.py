"""
CLI Error Reporting
===================

Maps the exceptions a translation can raise to a message on stderr and
an exit code.

    VMTranslatorError        -> BUILD_ERROR     (message printed as formatted)
    SourceInputError         -> INVALID_ARGS    (nothing translatable at the path)
    OSError                  -> INVALID_ARGS    (input unreadable, output unwritable)
    anything else            -> INTERNAL_ERROR  (traceback with --verbose)
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Exit codes of the vmtrans command."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Untranslatable VM source
    INVALID_ARGS = 2     # Bad input path, unreadable source or unwritable output
    INTERNAL_ERROR = 3   # Unexpected internal error


def exit_code_for(error: Exception) -> ExitCode:
    """Return the exit code reported for an exception."""
    from hackvm.errors import SourceInputError
    from hackvm.translator.errors import VMTranslatorError

    if isinstance(error, VMTranslatorError):
        return ExitCode.BUILD_ERROR
    if isinstance(error, (SourceInputError, OSError)):
        return ExitCode.INVALID_ARGS
    return ExitCode.INTERNAL_ERROR


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception raised by a translation and exit.

    Args:
        error: The exception that was raised
        verbose: If True, print a traceback for internal errors

    Raises:
        SystemExit: Always, with the code from exit_code_for()
    """
    code = exit_code_for(error)

    if code == ExitCode.BUILD_ERROR:
        # Already formatted as "file:line:col: error: ..."
        click.echo(str(error), err=True)
    elif code == ExitCode.INVALID_ARGS:
        click.echo(f"Error: {error}", err=True)
    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()

    sys.exit(code)
