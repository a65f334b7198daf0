"""Decorators to reduce code duplication in command handlers"""

import functools
import logging

from .errors import ShellError

logger = logging.getLogger(__name__)


def shell_command(error_prefix=None):
    """
    Decorator that handles common error reporting for command handlers.

    Handlers take ``(self, tokens, output)`` and write to ``output``. This
    decorator:
    - Writes the message of a raised ShellError (usage, not found,
      state conflict) into the output buffer
    - Writes ``"<error_prefix>: <message>"`` for an OSError
    - Leaves the session running in both cases

    Args:
        error_prefix: Text put in front of OSError messages. Without one,
            OSError propagates.

    Example:
        @shell_command("Error creating directory")
        def cmd_mkdir(self, tokens, output):
            if len(tokens) < 2:
                raise UsageError("mkdir <dir>")
            ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, tokens, output):
            try:
                return func(self, tokens, output)
            except ShellError as e:
                logger.debug("%s: %s", tokens[0], e)
                output.write(f"{e}\n")
            except OSError as e:
                if error_prefix is None:
                    raise
                logger.debug("%s failed", tokens[0], exc_info=True)
                output.write(f"{error_prefix}: {e}\n")
            return None

        return wrapper
    return decorator
