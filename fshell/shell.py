"""Shell implementation with REPL and capture mode"""

import logging
import os
import sys
import tempfile
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.history import FileHistory, InMemoryHistory
from rich.console import Console
from rich.markup import escape

from .completion import ShellCompleter
from .processor import Capture, CommandProcessor

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the CLI! Type 'help' for a list of commands."
FAREWELL_MESSAGE = "Exiting the CLI. Goodbye!"
CAPTURE_MESSAGE = "Enter text (type 'Exit' on a new line to finish):"


class StreamReader:
    """Reads lines from a plain text stream (pipes, files, tests)"""

    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def read_line(self, prompt: str, capture: bool = False) -> str:
        """Show the prompt and read one line; raises EOFError at end of input"""
        if prompt:
            self.stdout.write(prompt)
            self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError
        return line.rstrip('\r\n')


class PromptReader:
    """Reads lines from the terminal through prompt_toolkit"""

    def __init__(self, processor: CommandProcessor, history_file: Optional[str] = None,
                 console: Optional[Console] = None, input=None, output=None):
        self.console = console or Console(highlight=False)
        self.session = PromptSession(
            history=self._open_history(history_file),
            auto_suggest=AutoSuggestFromHistory(),
            completer=ShellCompleter(processor),
            complete_while_typing=True,
            input=input,
            output=output,
        )
        # File contents typed in capture mode stay out of the command history
        self.capture_session = PromptSession(
            history=InMemoryHistory(),
            input=input,
            output=output,
        )

    def _open_history(self, history_file: Optional[str]):
        """Open the history file, falling back to a temporary one"""
        history_path = os.path.expanduser(history_file or "~/.fshell_history")
        try:
            directory = os.path.dirname(history_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(history_path, "a"):
                pass  # Just test if we can open for append
            return FileHistory(history_path)
        except OSError:
            temp_history = tempfile.NamedTemporaryFile(
                mode="w", delete=False, suffix="_fshell_history"
            )
            temp_history.close()
            self.console.print(
                f"[yellow]Warning: Cannot use {escape(history_path)}, using temporary history file[/yellow]"
            )
            return FileHistory(temp_history.name)

    def read_line(self, prompt: str, capture: bool = False) -> str:
        """Show the prompt and read one line; raises EOFError on Ctrl+D"""
        if capture:
            return self.capture_session.prompt(prompt)
        return self.session.prompt(prompt)


class Shell:
    """Session loop: prompt, read, hand the line to the processor, repeat"""

    def __init__(self, processor: CommandProcessor, reader=None, console: Optional[Console] = None):
        self.processor = processor
        self.reader = reader or StreamReader()
        self.console = console or processor.console
        self.running = False

    @property
    def prompt(self) -> str:
        return f"{self.processor.current_directory}> "

    def repl(self):
        """Run the interactive loop until `exit` or end of input"""
        self.running = True
        self.console.print(WELCOME_MESSAGE, markup=False)

        while self.running:
            try:
                line = self.reader.read_line(self.prompt)
            except EOFError:
                break
            except KeyboardInterrupt:
                # Ctrl+C at the prompt - drop the line
                self.console.print()
                continue

            line = line.strip()
            if line.lower() == 'exit':
                break
            self.execute(line)

        self.running = False
        self.console.print(FAREWELL_MESSAGE, markup=False)

    def execute(self, line: str):
        """Process one line, then run any capture it asked for"""
        try:
            captures = self.processor.process_input(line)
        except KeyboardInterrupt:
            self.console.print("^C", markup=False)
            return
        except Exception as e:
            logger.exception("unexpected error processing %r", line)
            self.console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
            return

        for capture in captures:
            self.run_capture(capture)

    def run_capture(self, capture: Capture):
        """
        Capture mode for `cat > file`

        Lines are appended to the (already truncated) file until a line that
        reads 'Exit' in any case, or end of input. No prompt is shown.
        """
        logger.debug("capture mode on %s", capture.path)
        self.console.print(CAPTURE_MESSAGE, markup=False)
        lines = 0
        try:
            with open(capture.path, 'a', encoding='utf-8', errors='surrogateescape') as f:
                while True:
                    try:
                        line = self.reader.read_line('', capture=True)
                    except (EOFError, KeyboardInterrupt):
                        break
                    if line.strip().lower() == 'exit':
                        break
                    f.write(line + '\n')
                    lines += 1
        except (OSError, UnicodeError) as e:
            logger.debug("capture to %s failed", capture.path, exc_info=True)
            self.console.print(f"Error writing to file: {escape(str(e))}")
        logger.debug("capture mode done, %d lines", lines)
