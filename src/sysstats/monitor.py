"""Metric pipelines: one command run feeding one parser."""

from collections.abc import Awaitable, Callable, Sequence

import psutil
import structlog

from sysstats import parsers
from sysstats.catalog import DEFAULT_MOUNT_POINT, DEFAULT_PROCESS_LIMIT
from sysstats.errors import CommandExecutionError
from sysstats.models import (
    DiskStats,
    LoadStats,
    MemoryStats,
    ProcessCensus,
    ProcessSample,
    UptimeInfo,
)
from sysstats.runner import run_command

log = structlog.get_logger(__name__)

CommandRunner = Callable[[Sequence[str], float | None], Awaitable[str]]

LOADAVG_COMMAND = ("cat", "/proc/loadavg")
MEMORY_COMMAND = ("free", "-b")
UPTIME_COMMAND = ("uptime", "-p")
UPTIME_FALLBACK_COMMAND = ("uptime",)
CENSUS_COMMAND = ("ps", "-e", "--no-headers", "-o", "pid")
TOP_PROCESSES_COMMAND = ("ps", "aux", "--no-headers", "--sort=-%mem")


def usable_cpu_count() -> int | None:
    """
    Number of CPUs this process may run on.

    Honors CPU affinity like ``nproc``; falls back to the online count where
    affinity is not available.
    """
    try:
        return len(psutil.Process().cpu_affinity())
    except (AttributeError, NotImplementedError, psutil.Error, OSError):
        return psutil.cpu_count(logical=True)


def disk_command(mount_point: str) -> tuple[str, ...]:
    """Build the ``df`` invocation for a mount point."""
    return ("df", "--output=size,used,avail", "-B1", "--", mount_point)


class SystemMonitor:
    """
    Collects system metrics by running commands and parsing their output.

    Each public coroutine is one pipeline. Nothing is cached: every call
    spawns its command afresh and returns a new record.
    """

    def __init__(
        self,
        run: CommandRunner = run_command,
        timeout: float | None = 30.0,
        cpu_count: Callable[[], int | None] | None = None,
    ) -> None:
        """
        Initialize the SystemMonitor.

        Args:
            run: Coroutine executing an argument vector and returning its output.
            timeout: Per-command timeout in seconds, None for no limit.
            cpu_count: Returns the usable core count. Defaults to
                ``usable_cpu_count``.
        """
        self._run = run
        self._timeout = timeout
        self._cpu_count = cpu_count or usable_cpu_count

    @property
    def timeout(self) -> float | None:
        """Get the per-command timeout."""
        return self._timeout

    async def _output(self, argv: Sequence[str]) -> str:
        return await self._run(argv, self._timeout)

    async def load_stats(self) -> LoadStats:
        """Load averages over 1, 5 and 15 minutes plus the core count."""
        raw = await self._output(LOADAVG_COMMAND)
        return parsers.parse_load(raw, self._cpu_count())

    async def memory_stats(self) -> MemoryStats:
        """Physical memory usage."""
        return parsers.parse_memory(await self._output(MEMORY_COMMAND))

    async def disk_stats(self, mount_point: str = DEFAULT_MOUNT_POINT) -> DiskStats:
        """Filesystem usage for ``mount_point``."""
        raw = await self._output(disk_command(mount_point))
        return parsers.parse_disk(raw, mount_point)

    async def uptime(self) -> UptimeInfo:
        """
        Human-readable uptime.

        Uses ``uptime -p`` and falls back to plain ``uptime`` where the
        pretty format is not supported.
        """
        try:
            raw = await self._output(UPTIME_COMMAND)
        except CommandExecutionError as e:
            log.info("uptime_fallback", reason=str(e))
            raw = await self._output(UPTIME_FALLBACK_COMMAND)
        return parsers.parse_uptime(raw)

    async def process_census(self) -> ProcessCensus:
        """Number of running processes."""
        return parsers.parse_process_count(await self._output(CENSUS_COMMAND))

    async def top_processes(self, limit: int = DEFAULT_PROCESS_LIMIT) -> list[ProcessSample]:
        """The ``limit`` processes using the most memory, largest first."""
        raw = await self._output(TOP_PROCESSES_COMMAND)
        return parsers.parse_top_processes(raw, limit)
