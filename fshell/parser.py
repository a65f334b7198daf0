"""Command line parser for pipe segments and output redirection"""

import re
from typing import List, Optional


REDIRECT_OVERWRITE = '>'
REDIRECT_APPEND = '>>'
REDIRECT_OPERATORS = (REDIRECT_OVERWRITE, REDIRECT_APPEND)

_WHITESPACE = re.compile(r'\s+')


class Redirection:
    """Represents an output redirection found in a segment"""

    def __init__(self, operator: str, target: Optional[str]):
        self.operator = operator  # '>' or '>>'
        self.target = target      # filename, None if the operator was the last token

    @property
    def append(self) -> bool:
        return self.operator == REDIRECT_APPEND

    @property
    def mode(self) -> str:
        """open() mode used to write the redirected output"""
        return 'a' if self.append else 'w'

    def __eq__(self, other):
        if not isinstance(other, Redirection):
            return NotImplemented
        return (self.operator, self.target) == (other.operator, other.target)

    def __repr__(self):
        return f"Redirection({self.operator!r}, {self.target!r})"


class Segment:
    """One pipe segment: its tokens and the redirection it carries, if any"""

    def __init__(self, tokens: List[str], redirection: Optional[Redirection] = None):
        self.tokens = tokens
        self.redirection = redirection

    @property
    def command(self) -> str:
        return self.tokens[0]

    @property
    def args(self) -> List[str]:
        return self.tokens[1:]

    def __repr__(self):
        return f"Segment({self.tokens!r}, redirection={self.redirection!r})"


class CommandParser:
    """Parse command lines into pipe segments"""

    @staticmethod
    def parse_command_line(command_line: str) -> List[Segment]:
        """
        Parse a complete command line into segments

        Args:
            command_line: Full command line string

        Returns:
            One Segment per '|' delimited part, in order

        Example:
            >>> CommandParser.parse_command_line("pwd | ls -a > out.txt")
            [Segment(['pwd'], redirection=None), Segment(['ls', '-a', '>', 'out.txt'], redirection=Redirection('>', 'out.txt'))]
        """
        segments = []
        for part in CommandParser.split_pipeline(command_line):
            tokens = CommandParser.tokenize(part)
            segments.append(Segment(tokens, CommandParser.find_redirection(tokens)))
        return segments

    @staticmethod
    def split_pipeline(command_line: str) -> List[str]:
        """
        Split a command line on every literal '|'

        Trailing empty parts are dropped, leading and inner ones are kept:
        "ls |" gives ['ls'], "| ls" gives ['', 'ls'] and "|" gives nothing.
        An empty line gives [''].
        """
        if not command_line.strip():
            return ['']
        parts = [part.strip() for part in command_line.split('|')]
        while parts and not parts[-1]:
            parts.pop()
        return parts

    @staticmethod
    def tokenize(segment: str) -> List[str]:
        """
        Split a segment on runs of whitespace

        There is no quoting. An empty segment yields a single empty token so
        that it still dispatches (to an unknown command named '').
        """
        tokens = [token for token in _WHITESPACE.split(segment.strip()) if token]
        return tokens or ['']

    @staticmethod
    def find_redirection(tokens: List[str]) -> Optional[Redirection]:
        """
        Find the first '>' or '>>' token

        Scanning starts at index 0 and stops at the first operator; later
        operators are ordinary tokens.
        """
        for i, token in enumerate(tokens):
            if token in REDIRECT_OPERATORS:
                target = tokens[i + 1] if i + 1 < len(tokens) else None
                return Redirection(token, target)
        return None
