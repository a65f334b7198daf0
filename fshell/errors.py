"""Exceptions raised by command handlers.

Handlers never print. They raise one of these and the ``shell_command``
decorator turns the exception into a line of captured output. Underlying
filesystem failures are left as ``OSError`` and get the handler's error
prefix instead.
"""


class ShellError(Exception):
    """Base class for errors reported into a command's captured output"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return self.message


class UsageError(ShellError):
    """A required argument is missing"""

    def __init__(self, usage: str):
        super().__init__(f"Usage: {usage}")


class NotFoundError(ShellError):
    """The file or directory a command targets does not exist"""


class StateConflictError(ShellError):
    """The target exists but is in a state the command refuses to touch"""
