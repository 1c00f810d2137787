"""Raw command runner."""

import asyncio
import contextlib
from collections.abc import Sequence

import structlog

from sysstats.errors import CommandExecutionError

log = structlog.get_logger(__name__)


async def run_command(argv: Sequence[str], timeout: float | None = None) -> str:
    """
    Run one command and return its trimmed standard output.

    The command is executed directly from its argument vector, never through
    a shell, so arguments are passed to the program verbatim.

    Args:
        argv: Program followed by its arguments.
        timeout: Seconds to wait before killing the process. None waits forever.

    Returns:
        Standard output decoded as UTF-8 with surrounding whitespace removed.

    Raises:
        CommandExecutionError: The program is missing, exits non-zero,
            or does not finish within ``timeout``.
    """
    if not argv:
        raise ValueError("argv must be a non-empty sequence of strings")

    log.debug("command_started", argv=list(argv))
    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        log.warning("command_failed", argv=list(argv), error=str(e))
        raise CommandExecutionError(f"cannot run {argv[0]}: {e.strerror or e}", argv) from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError as e:
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
        await proc.wait()
        log.warning("command_failed", argv=list(argv), timeout=timeout)
        raise CommandExecutionError(f"{argv[0]} timed out after {timeout}s", argv) from e

    err = stderr.decode("utf-8", errors="replace").strip()
    if proc.returncode != 0:
        log.warning("command_failed", argv=list(argv), exit_code=proc.returncode, stderr=err)
        if proc.returncode is not None and proc.returncode < 0:
            reason = f"killed by signal {-proc.returncode}"
        else:
            reason = f"exited with status {proc.returncode}"
        message = f"{' '.join(argv)} {reason}"
        if err:
            message = f"{message}: {err}"
        raise CommandExecutionError(message, argv, exit_code=proc.returncode, stderr=err)

    return stdout.decode("utf-8", errors="replace").strip()
