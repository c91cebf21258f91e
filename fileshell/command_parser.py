#!/usr/bin/env python3
"""
Command parser for the fileshell terminal.

This module turns a raw input line into structured data the executor can
dispatch on. Parsing happens in two independent steps:

1. ``parse`` splits off an output redirection (``>`` or ``>>``) and
   yields a ParsedCommand.
2. ``tokenize`` splits the command text into a Command: the keyword plus
   its argument list, read according to how many arguments that keyword
   takes.

Design Principles:
- Single responsibility: parse commands, don't execute them
- Pure functions with predictable outputs
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class RedirectType(Enum):
    """Types of output redirection."""
    NONE = ''
    OVERWRITE = '>'   # Truncate target file
    APPEND = '>>'     # Append to target file


@dataclass
class ParsedCommand:
    """A raw line split into command text and redirection."""
    command_text: str
    redirect: RedirectType = RedirectType.NONE
    target_filename: str = ''

    @property
    def redirected(self) -> bool:
        return self.redirect is not RedirectType.NONE


@dataclass
class Command:
    """
    A single command: keyword plus arguments.

    The keyword doubles as the tag the executor dispatches on.
    """
    name: str
    args: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        parts = [self.name]
        parts.extend(f'"{arg}"' if ' ' in arg else arg for arg in self.args)
        return ' '.join(parts)


def strip_quotes(token: str) -> str:
    """Remove one pair of enclosing double quotes, if present."""
    if len(token) >= 2 and token.startswith('"') and token.endswith('"'):
        return token[1:-1]
    return token


class CommandParser:
    """
    Parser for fileshell command lines.

    Handles:
    - Output redirection (>, >>)
    - One free-form argument (``cd My Folder``) or a fixed number of
      whitespace-delimited arguments (``cp a b``)
    - Double-quoted arguments containing spaces
    """

    # Commands that read a fixed number of whitespace-delimited tokens.
    # Any other command takes the whole remainder of the line as one argument.
    ARGUMENT_COUNTS = {
        'cp': 2,
        'mv': 2,
        'perm': 2,
        'pwd': 0,
        'exit': 0,
        'quit': 0,
        'back': 0,
    }

    def __init__(self):
        """Initialize the parser."""
        self.token_pattern = re.compile(r'"[^"]*"|\S+')

    def parse(self, raw_line: str) -> ParsedCommand:
        """
        Split a raw line into command text and an optional redirect.

        ``>>`` is looked for first; only if it is absent is a single ``>``
        considered. Both halves are trimmed.
        """
        line = raw_line or ''

        for redirect in (RedirectType.APPEND, RedirectType.OVERWRITE):
            command_text, sep, target = line.partition(redirect.value)
            if sep:
                return ParsedCommand(
                    command_text=command_text.strip(),
                    redirect=redirect,
                    target_filename=strip_quotes(target.strip())
                )

        return ParsedCommand(command_text=line.strip())

    def tokenize(self, command_text: str) -> Optional[Command]:
        """Split command text into a Command, or None for a blank line."""
        text = command_text.strip()
        if not text:
            return None

        parts = text.split(None, 1)
        name = parts[0]
        remainder = parts[1] if len(parts) > 1 else ''

        count = self.ARGUMENT_COUNTS.get(name)
        if count is None:
            args = [strip_quotes(remainder)] if remainder else []
        else:
            # Extra tokens beyond the expected count are ignored
            tokens = self.token_pattern.findall(remainder)[:count]
            args = [strip_quotes(token) for token in tokens]

        return Command(name=name, args=args)

    def parse_simple(self, command_line: str) -> Command:
        """
        Tokenize a line without redirection handling.

        Convenience method for testing and simple cases.
        """
        cmd = self.tokenize(command_line)
        return cmd if cmd else Command(name='')
