"""
VM Line Parser
==============

Converts lines of VM source into Command objects.

Each line holds at most one command. Everything from `//` to the end of
the line is a comment; blank and comment-only lines are skipped. A cleaned
line is split on whitespace and classified by its first token:

    push <segment> <index>        pop <segment> <index>
    add | sub | neg | eq | gt | lt | and | or | not
    label <name>                  goto <name>           if-goto <name>
    function <name> <nLocals>     call <name> <nArgs>   return

Numeric operands are unsigned decimal integers that fit in 16 bits. The
parser accepts the full range, but the Hack assembler only loads 15-bit
constants through `@value`, so `push constant` above 32767 produces an
instruction the assembler rejects.

Usage
-----
>>> from hackvm.translator.parser import parse_line
>>> parse_line("push constant 7")
Push(segment=<Segment.CONSTANT: 'constant'>, index=7)
"""

import dataclasses
import re
from dataclasses import dataclass
from typing import Iterator, Optional

from hackvm.errors import SourceLocation
from hackvm.translator.commands import (
    MAX_OPERAND,
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
    MalformedOperandError,
    UnrecognizedCommandError,
    UnrecognizedSegmentError,
)


COMMENT_MARKER = "//"

TOKEN_PATTERN = re.compile(r"\S+")
NUMBER_PATTERN = re.compile(r"[0-9]+")

# Keyword -> number of tokens the line must have, keyword included
COMMAND_ARITY = {
    "push": 3,
    "pop": 3,
    "label": 2,
    "goto": 2,
    "if-goto": 2,
    "function": 3,
    "call": 3,
    "return": 1,
}
COMMAND_ARITY.update({op.value: 1 for op in ArithmeticOp})

ARITHMETIC_HINT = "arithmetic commands are " + ", ".join(op.value for op in ArithmeticOp)


@dataclass(frozen=True)
class ParsedLine:
    """
    A command together with where it came from.

    Attributes:
        command: The parsed command
        location: Position of the command's first token
        text: The source line as written (without its line terminator)
    """
    command: Command
    location: SourceLocation
    text: str


def strip_comment(line: str) -> str:
    """Remove a trailing `//` comment and surrounding whitespace."""
    marker = line.find(COMMENT_MARKER)
    if marker >= 0:
        line = line[:marker]
    return line.strip()


def parse_line(
    line: str,
    location: Optional[SourceLocation] = None,
    source_line: Optional[str] = None,
) -> Command:
    """
    Parse one cleaned VM line into a Command.

    Args:
        line: Line with comments removed and whitespace trimmed
        location: Position of the line's first character, used for errors
        source_line: Original text of the line, used for errors

    Returns:
        The parsed command

    Raises:
        UnrecognizedCommandError: Unknown first token (or an empty line)
        UnrecognizedSegmentError: push/pop names an unknown segment
        MalformedOperandError: Wrong token count or bad numeric operand
    """
    matches = list(TOKEN_PATTERN.finditer(line))
    tokens = [m.group() for m in matches]

    def token_location(position: int) -> Optional[SourceLocation]:
        if location is None:
            return None
        offset = matches[position].start() if position < len(matches) else len(line)
        return dataclasses.replace(location, column=location.column + offset)

    if not tokens:
        raise UnrecognizedCommandError(
            "", location=location, hint="line holds no command", source_line=source_line
        )

    keyword = tokens[0]
    arity = COMMAND_ARITY.get(keyword)
    if arity is None:
        raise UnrecognizedCommandError(
            keyword, location=token_location(0),
            hint=ARITHMETIC_HINT, source_line=source_line,
        )

    if len(tokens) != arity:
        if arity == 1:
            message = f"'{keyword}' takes no operands"
        else:
            message = f"'{keyword}' expects {arity - 1} operand(s), got {len(tokens) - 1}"
        raise MalformedOperandError(
            message,
            location=token_location(min(len(tokens), arity)),
            hint=f"usage: {_usage(keyword)}",
            source_line=source_line,
        )

    def number(position: int) -> int:
        text = tokens[position]
        if not NUMBER_PATTERN.fullmatch(text):
            raise MalformedOperandError(
                f"'{text}' is not a non-negative integer",
                location=token_location(position),
                source_line=source_line,
            )
        value = int(text)
        if value > MAX_OPERAND:
            raise MalformedOperandError(
                f"operand {value} does not fit in 16 bits",
                location=token_location(position),
                hint=f"the largest operand is {MAX_OPERAND}",
                source_line=source_line,
            )
        return value

    if keyword in ("push", "pop"):
        try:
            segment = Segment.parse(tokens[1])
        except UnrecognizedSegmentError:
            raise UnrecognizedSegmentError(
                tokens[1],
                location=token_location(1),
                hint="segments are " + ", ".join(s.value for s in Segment),
                source_line=source_line,
            ) from None
        if keyword == "push":
            return Push(segment, number(2))
        return Pop(segment, number(2))

    if keyword == "label":
        return Label(tokens[1])
    if keyword == "goto":
        return Goto(tokens[1])
    if keyword == "if-goto":
        return IfGoto(tokens[1])
    if keyword == "function":
        return Function(tokens[1], number(2))
    if keyword == "call":
        return Call(tokens[1], number(2))
    if keyword == "return":
        return Return()

    return Arithmetic(ArithmeticOp.parse(keyword))


def parse_source(source: str, filename: str = "<input>") -> Iterator[ParsedLine]:
    """
    Parse VM source text, skipping blank and comment-only lines.

    Args:
        source: Complete contents of one VM unit
        filename: Name used in error locations

    Yields:
        ParsedLine for every command, in source order

    Raises:
        VMTranslatorError: On the first malformed line
    """
    for line_number, raw in enumerate(source.splitlines(), start=1):
        cleaned = strip_comment(raw)
        if not cleaned:
            continue
        column = len(raw) - len(raw.lstrip()) + 1
        location = SourceLocation(filename, line_number, column)
        command = parse_line(cleaned, location, raw)
        yield ParsedLine(command, location, raw)


def _usage(keyword: str) -> str:
    if keyword in ("push", "pop"):
        return f"{keyword} <segment> <index>"
    if keyword in ("label", "goto", "if-goto"):
        return f"{keyword} <label>"
    if keyword == "function":
        return "function <name> <nLocals>"
    if keyword == "call":
        return "call <name> <nArgs>"
    return keyword
