"""Main CLI Entry Point"""

import logging
import sys

import click
from rich.console import Console

from .config import LOG_LEVELS, Config
from .processor import CommandProcessor
from .shell import PromptReader, Shell, StreamReader
from .version import get_version_string

logger = logging.getLogger(__name__)


def setup_logging(config: Config):
    """Send log records to stderr at the configured level"""
    logging.basicConfig(
        level=config.logging_level,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def start_repl(config: Config):
    """Start interactive REPL session"""
    console = Console(highlight=False, soft_wrap=True)
    processor = CommandProcessor(
        config.start_directory,
        home_directory=config.home_directory,
        console=console,
    )

    # prompt_toolkit needs a real terminal; pipes get plain line reading
    if sys.stdin.isatty() and sys.stdout.isatty():
        reader = PromptReader(processor, history_file=config.history_file, console=console)
    else:
        reader = StreamReader(sys.stdin, sys.stdout)

    logger.debug("starting session with %r", config)
    Shell(processor, reader=reader, console=console).repl()


def run_command(config: Config, command: str):
    """Process a single command line and exit"""
    processor = CommandProcessor(config.start_directory, home_directory=config.home_directory)
    shell = Shell(processor, reader=StreamReader(sys.stdin, sys.stdout))
    shell.execute(command.strip())


@click.command()
@click.version_option(version=get_version_string(), prog_name="fshell")
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False, dir_okay=True),
    default=None,
    help="Start directory (can also set via FSHELL_START_DIR environment variable)",
)
@click.option(
    "-c",
    "--command",
    "command_string",
    default=None,
    help="Process one command line and exit",
)
@click.option(
    "--history-file",
    default=None,
    help="History file for the interactive prompt (default: ~/.fshell_history or $FSHELL_HISTFILE)",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level for messages on stderr (default: WARNING or $FSHELL_LOG_LEVEL)",
)
def main(directory, command_string, history_file, log_level):
    """fshell - a small interactive file-management shell"""
    config = Config.from_args(
        start_directory=directory,
        history_file=history_file,
        log_level=log_level,
    )
    setup_logging(config)

    if command_string is not None:
        run_command(config, command_string)
    else:
        start_repl(config)


if __name__ == "__main__":
    main()
