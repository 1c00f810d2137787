"""Exception types for system-stats."""

from collections.abc import Sequence


class SystemStatsError(Exception):
    """Base class for every failure a tool call can report."""


class CommandExecutionError(SystemStatsError):
    """
    A subordinate command could not be spawned, failed, or timed out.

    Attributes:
        argv: The argument vector that was executed.
        exit_code: Process exit status; negative when killed by a signal,
            None when the process never ran or was killed on timeout.
        stderr: Captured standard error, stripped.
    """

    def __init__(
        self,
        message: str,
        argv: Sequence[str],
        exit_code: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.argv = tuple(argv)
        self.exit_code = exit_code
        self.stderr = stderr


class ParseError(SystemStatsError):
    """Command output did not have the expected shape."""


class UnknownToolError(SystemStatsError):
    """The requested tool is not in the catalog."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class ArgumentError(SystemStatsError):
    """A tool argument is malformed or out of range."""
