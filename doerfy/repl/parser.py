"""
FILE: doerfy/repl/parser.py
PURPOSE: Split a REPL input line into command, positional args and flags
EXPORTS:
  - ParseResult (dataclass for parsed commands)
  - parse_command(input_str) -> ParseResult
DEPENDENCIES:
  - shlex (quote-aware splitting)
NOTES:
  - Command names are lower-cased, arguments are kept as typed
  - "--flag value" stores the value; a flag followed by another flag
    (or nothing) is a boolean
  - An unclosed quote falls back to whitespace splitting
"""

import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Union


@dataclass
class ParseResult:
    """
    Result of parsing a REPL command.

    Attributes:
        command: The command name (e.g., "add", "mv", "filter")
        args: Positional arguments in the order typed
        flags: Flag arguments (e.g., {"list": "work", "all": True})
        raw_input: Original input string
    """
    command: str
    args: List[str] = field(default_factory=list)
    flags: Dict[str, Union[str, bool]] = field(default_factory=dict)
    raw_input: str = ""

    def flag(self, name: str, default=None):
        """Value of a flag, or ``default`` when it wasn't given."""
        return self.flags.get(name, default)


def parse_command(input_str: str) -> ParseResult:
    """
    Parse REPL input into command, args, and flags.

    Examples:
        >>> parse_command('add "Call the bank" --list errands')
        ParseResult(command="add", args=["Call the bank"], flags={"list": "errands"})

        >>> parse_command("mv 3,4 doing")
        ParseResult(command="mv", args=["3,4", "doing"], flags={})

        >>> parse_command("ls --all")
        ParseResult(command="ls", args=[], flags={"all": True})
    """
    input_str = input_str.strip()
    if not input_str:
        return ParseResult(command="", raw_input=input_str)

    try:
        tokens = shlex.split(input_str)
    except ValueError:
        tokens = input_str.split()

    if not tokens:
        return ParseResult(command="", raw_input=input_str)

    command = tokens[0].lower()
    args: List[str] = []
    flags: Dict[str, Union[str, bool]] = {}

    i = 1
    while i < len(tokens):
        token = tokens[i]
        if token.startswith("--") and len(token) > 2:
            name = token[2:]
            if i + 1 < len(tokens) and not tokens[i + 1].startswith("--"):
                flags[name] = tokens[i + 1]
                i += 2
            else:
                flags[name] = True
                i += 1
        else:
            args.append(token)
            i += 1

    return ParseResult(command=command, args=args, flags=flags, raw_input=input_str)
