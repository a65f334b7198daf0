"""Command processor: parsing, dispatch and output routing"""

import errno
import io
import logging
import os
import shutil
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from rich.console import Console
from rich.markup import escape

from .decorators import shell_command
from .errors import NotFoundError, ShellError, StateConflictError, UsageError
from .parser import REDIRECT_OPERATORS, REDIRECT_OVERWRITE, CommandParser, Redirection, Segment

logger = logging.getLogger(__name__)


HELP_ENTRIES = [
    ("help", "Show this help message."),
    ("pwd", "Print the current directory."),
    ("cd", "Change directory to home directory."),
    ("cd <dir>", "Change directory to <dir>."),
    ("cd ..", "Change directory to the parent directory."),
    ("ls", "List files in the directory."),
    ("ls -a", "List all files, including hidden ones."),
    ("ls -r", "List files in reverse order."),
    ("mkdir <dir>", "Create a new directory."),
    ("rmdir <dir>", "Remove an empty directory."),
    ("touch <file>", "Create a new file."),
    ("mv <src> <dst>", "Move or rename a file."),
    ("rm <file>", "Remove a file."),
    ("cat <file>", "Display file contents."),
    ("cat > <file>", "Write input to a file until 'Exit' is entered."),
    ("command1 | command2", "Run both, show only the output of command2."),
    ("command > file", "Redirect output to a file, overwriting it."),
    ("command >> file", "Redirect output to a file, appending to it."),
    ("exit", "Exit the CLI."),
]


class Capture:
    """A pending `cat > file` request, carried out by the session loop"""

    def __init__(self, path: Path):
        self.path = path  # resolved against the cursor

    def __repr__(self):
        return f"Capture({str(self.path)!r})"


class LsOptions:
    """Options accepted by ls"""

    def __init__(self, show_hidden: bool = False, reverse: bool = False):
        self.show_hidden = show_hidden
        self.reverse = reverse

    @classmethod
    def parse(cls, args: List[str]) -> "LsOptions":
        """
        Scan ls arguments left to right

        A redirection operator and the filename after it are skipped. Any
        other token that is not -a or -r is an error.
        """
        options = cls()
        skip_next = False
        for arg in args:
            if skip_next:
                skip_next = False
            elif arg == '-a':
                options.show_hidden = True
            elif arg == '-r':
                options.reverse = True
            elif arg in REDIRECT_OPERATORS:
                skip_next = True
            else:
                raise ShellError(f"Unknown option for ls: {arg}")
        return options


class CommandProcessor:
    """Runs command lines against a working-directory cursor"""

    def __init__(
        self,
        start_directory,
        home_directory=None,
        stdout=None,
        console: Optional[Console] = None,
        error_console: Optional[Console] = None,
    ):
        self._current_directory = Path(os.path.abspath(start_directory))
        self.home_directory = Path(home_directory) if home_directory else Path.home()
        self.stdout = stdout or sys.stdout
        self.console = console or Console(highlight=False, soft_wrap=True)
        self.error_console = error_console or Console(stderr=True, highlight=False, soft_wrap=True)
        self.parser = CommandParser()
        self.commands = {
            "pwd": self.cmd_pwd,
            "cd": self.cmd_cd,
            "ls": self.cmd_ls,
            "mkdir": self.cmd_mkdir,
            "rmdir": self.cmd_rmdir,
            "touch": self.cmd_touch,
            "mv": self.cmd_mv,
            "rm": self.cmd_rm,
            "cat": self.cmd_cat,
        }

    @property
    def current_directory(self) -> Path:
        return self._current_directory

    def resolve_path(self, path: str) -> Path:
        """Resolve a path against the cursor (absolute paths are kept) and normalize it"""
        return Path(os.path.normpath(self._current_directory / path))

    def process_input(self, line: str) -> List[Capture]:
        """
        Process one command line

        Every segment runs in order against the cursor. Redirected output goes
        to its file; of the rest, only the last segment's output is printed.

        Args:
            line: Trimmed command line

        Returns:
            Captures requested by `cat > file` segments, for the session
            loop to run
        """
        if line == 'help':
            self.show_help()
            return []

        results = []
        captures = []

        for segment in self.parser.parse_command_line(line):
            redirection = segment.redirection
            if redirection is not None and redirection.target is None:
                self.error_console.print(
                    "shell: syntax error near unexpected token `newline'", markup=False
                )
                continue

            content, capture = self.execute_segment(segment)
            if capture is not None:
                captures.append(capture)

            # `cat > file` owns its '>', the file is filled by capture mode
            if redirection is not None and not self.is_capture_command(segment.tokens):
                self._write_redirection(content, redirection)
            else:
                results.append(content)

        if results:
            self._print_result(results[-1])

        return captures

    def _print_result(self, content: str):
        """Write the last result to stdout"""
        try:
            self.stdout.write(content)
        except UnicodeEncodeError:
            # Undecodable file names come back from os.listdir as surrogates
            encoding = getattr(self.stdout, 'encoding', None) or 'utf-8'
            self.stdout.write(content.encode(encoding, 'backslashreplace').decode(encoding))
        self.stdout.flush()

    @staticmethod
    def is_capture_command(tokens: List[str]) -> bool:
        """True for `cat > file`, which reads the file contents from the terminal"""
        return len(tokens) == 3 and tokens[0] == 'cat' and tokens[1] == REDIRECT_OVERWRITE

    def execute_segment(self, segment: Segment) -> Tuple[str, Optional[Capture]]:
        """Dispatch one segment and return its captured output"""
        output = io.StringIO()
        handler = self.commands.get(segment.command)
        logger.debug("dispatch %r in %s", segment.tokens, self._current_directory)

        capture = None
        if handler is None:
            output.write(f"Unknown command: {segment.command}\n")
        else:
            capture = handler(segment.tokens, output)

        return output.getvalue(), capture

    def _write_redirection(self, content: str, redirection: Redirection):
        """Write a segment's output to its redirection target"""
        path = self.resolve_path(redirection.target)
        try:
            # Encode before opening so a bad string never truncates the target
            data = content.encode('utf-8', 'surrogateescape')
            with open(path, redirection.mode + 'b') as f:
                f.write(data)
            logger.debug("wrote %d bytes to %s (mode %s)", len(data), path, redirection.mode)
        except (OSError, UnicodeError) as e:
            logger.debug("redirection to %s failed", path, exc_info=True)
            self.error_console.print(f"[red]Error writing to file: {escape(str(e))}[/red]")

    def _change_directory(self, path: Path):
        logger.debug("cursor %s -> %s", self._current_directory, path)
        self._current_directory = path

    def show_help(self):
        """Show help information"""
        self.console.print("Available commands:")
        for cmd, desc in HELP_ENTRIES:
            self.console.print(f"  [bold]{escape(cmd):<22}[/bold]: {desc}")

    @shell_command()
    def cmd_pwd(self, tokens: List[str], output):
        """Print working directory"""
        output.write(f"{self._current_directory}\n")

    @shell_command("Error changing directory")
    def cmd_cd(self, tokens: List[str], output):
        """Change directory"""
        if len(tokens) == 1:
            self._change_directory(self.home_directory)
            return

        target = tokens[1]
        if target == '.':
            output.write('\n')
            return

        if target == '..':
            parent = self._current_directory.parent
            if parent == self._current_directory:
                raise StateConflictError(f"Already at root directory: {self._current_directory}")
            new_path = parent
        else:
            new_path = self.resolve_path(target)

        if not new_path.is_dir():
            raise NotFoundError(f"Directory does not exist: {target}")
        self._change_directory(new_path)

    @shell_command("Error listing directory")
    def cmd_ls(self, tokens: List[str], output):
        """List directory contents"""
        options = LsOptions.parse(tokens[1:])

        names = os.listdir(self._current_directory)
        if not options.show_hidden:
            names = [name for name in names if not name.startswith('.')]
        names.sort(reverse=options.reverse)

        for name in names:
            output.write(f"{name}\n")

    @shell_command("Error creating directory")
    def cmd_mkdir(self, tokens: List[str], output):
        """Create directory, including missing parents"""
        if len(tokens) < 2:
            raise UsageError("mkdir <dir>")
        self.resolve_path(tokens[1]).mkdir(parents=True, exist_ok=True)

    @shell_command("Error removing directory")
    def cmd_rmdir(self, tokens: List[str], output):
        """Remove an empty directory"""
        if len(tokens) < 2:
            raise UsageError("rmdir <dir>")

        name = tokens[1]
        path = self.resolve_path(name)
        if not path.exists():
            raise NotFoundError(f"Directory does not exist: {name}")
        if path.is_dir() and os.listdir(path):
            raise StateConflictError(f"Directory not empty: {name}")
        path.rmdir()

    @shell_command("Error creating file")
    def cmd_touch(self, tokens: List[str], output):
        """Create a new empty file; an existing file is an error"""
        if len(tokens) < 2:
            raise UsageError("touch <file>")
        self.resolve_path(tokens[1]).touch(exist_ok=False)

    @shell_command("Error moving file")
    def cmd_mv(self, tokens: List[str], output):
        """Move/rename a file without overwriting the destination"""
        if len(tokens) < 3:
            raise UsageError("mv <src> <dst>")

        source = self.resolve_path(tokens[1])
        destination = self.resolve_path(tokens[2])
        if os.path.lexists(destination):
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), str(destination))
        shutil.move(str(source), str(destination))

    @shell_command("Error removing file")
    def cmd_rm(self, tokens: List[str], output):
        """Remove a file"""
        if len(tokens) < 2:
            raise UsageError("rm <file>")

        name = tokens[1]
        path = self.resolve_path(name)
        if not os.path.lexists(path):
            raise NotFoundError(f"File does not exist: {name}")
        try:
            if path.is_dir() and not path.is_symlink():
                path.rmdir()
            else:
                path.unlink()
        except FileNotFoundError:
            raise NotFoundError(f"File does not exist: {name}")

    @shell_command()
    def cmd_cat(self, tokens: List[str], output):
        """Display file contents, or start capture mode with `cat > file`"""
        if len(tokens) < 2:
            raise UsageError("cat <file> or cat > <file>")

        if self.is_capture_command(tokens):
            return self._start_capture(tokens[2])

        self._read_file(tokens[1], output)
        return None

    def _read_file(self, name: str, output):
        path = self.resolve_path(name)
        try:
            with open(path, encoding='utf-8') as f:
                for line in f:
                    output.write(line[:-1] if line.endswith('\n') else line)
                    output.write('\n')
        except FileNotFoundError:
            raise NotFoundError(f"File does not exist: {name}")
        except (OSError, UnicodeDecodeError) as e:
            raise ShellError(f"Error reading file: {e}") from e

    def _start_capture(self, name: str) -> Capture:
        # Create/truncate now so errors surface before capture mode starts
        path = self.resolve_path(name)
        try:
            with open(path, 'w', encoding='utf-8'):
                pass
        except OSError as e:
            raise ShellError(f"Error writing to file: {e}") from e
        logger.debug("capture requested for %s", path)
        return Capture(path)
