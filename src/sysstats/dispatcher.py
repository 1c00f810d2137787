"""Tool dispatch: validate arguments, run pipelines, render a response."""

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import structlog

from sysstats.catalog import DEFAULT_MOUNT_POINT, DEFAULT_PROCESS_LIMIT, ToolDescriptor
from sysstats.errors import ArgumentError, SystemStatsError, UnknownToolError
from sysstats.models import AggregateReport, render_json
from sysstats.monitor import SystemMonitor

log = structlog.get_logger(__name__)

MOUNT_POINT_PATTERN = re.compile(r"/[A-Za-z0-9._@%+=:,/ -]*")
MOUNT_POINT_MAX_LENGTH = 4096
MAX_PROCESS_LIMIT = 100


@dataclass(slots=True, frozen=True)
class ToolResponse:
    """Text payload of a tool call and whether it reports a failure."""

    text: str
    is_error: bool = False


def resolve_mount_point(arguments: Mapping[str, Any]) -> str:
    """
    Return the requested mount point, or ``/`` when none is given.

    Both ``mount_point`` and ``mountPoint`` are accepted.
    """
    value = arguments.get("mount_point")
    if value is None or value == "":
        value = arguments.get("mountPoint")
    if value is None or value == "":
        return DEFAULT_MOUNT_POINT
    if not isinstance(value, str):
        raise ArgumentError(f"mount_point must be a string, got {type(value).__name__}")
    if len(value) > MOUNT_POINT_MAX_LENGTH:
        raise ArgumentError("mount_point is too long")
    if not MOUNT_POINT_PATTERN.fullmatch(value):
        raise ArgumentError(f"mount_point must be an absolute path of safe characters: {value!r}")
    return value


def resolve_limit(arguments: Mapping[str, Any], max_limit: int = MAX_PROCESS_LIMIT) -> int:
    """
    Return the requested process limit.

    Missing or non-positive values fall back to the default. Integral floats
    and numeric strings are accepted; anything else is an ArgumentError.
    """
    value = arguments.get("limit")
    if value is None:
        return DEFAULT_PROCESS_LIMIT
    if isinstance(value, bool):
        raise ArgumentError("limit must be an integer, got a boolean")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ArgumentError(f"limit must be an integer, got {value!r}") from None
    elif isinstance(value, float):
        if not value.is_integer():
            raise ArgumentError(f"limit must be an integer, got {value!r}")
        value = int(value)
    elif not isinstance(value, int):
        raise ArgumentError(f"limit must be an integer, got {type(value).__name__}")

    if value <= 0:
        return DEFAULT_PROCESS_LIMIT
    if value > max_limit:
        raise ArgumentError(f"limit must be at most {max_limit}, got {value}")
    return value


class Dispatcher:
    """
    Maps tool calls onto metric pipelines.

    Pipelines needed by one call run one after another, in a fixed order.
    Any failure is turned into an error response; nothing raised by a tool
    escapes ``handle``.
    """

    def __init__(
        self,
        catalog: Sequence[ToolDescriptor],
        monitor: SystemMonitor,
        max_limit: int = MAX_PROCESS_LIMIT,
    ) -> None:
        self._catalog = tuple(catalog)
        self._monitor = monitor
        self._max_limit = max_limit
        self._handlers = {
            "cpu": self._cpu,
            "memory": self._memory,
            "disk": self._disk,
            "uptime": self._uptime,
            "processes": self._processes,
            "all": self._all,
        }

    @property
    def catalog(self) -> tuple[ToolDescriptor, ...]:
        """The tools this dispatcher answers, in catalog order."""
        return self._catalog

    def list_tools(self) -> tuple[ToolDescriptor, ...]:
        """Return the catalog unchanged."""
        return self._catalog

    async def handle(self, tool_name: str, arguments: Mapping[str, Any] | None = None) -> ToolResponse:
        """
        Run one tool and render its result.

        Args:
            tool_name: Name of a catalog entry.
            arguments: Tool arguments; None is treated as empty.

        Returns:
            JSON text on success, ``"Error: <message>"`` with ``is_error`` set
            on failure.
        """
        log.info("tool_call_started", tool=tool_name)
        try:
            payload = await self._dispatch(tool_name, arguments)
        except SystemStatsError as e:
            log.warning("tool_call_failed", tool=tool_name, error=str(e), error_type=type(e).__name__)
            return ToolResponse(f"Error: {e}", is_error=True)
        except Exception as e:
            log.exception("tool_call_failed", tool=tool_name)
            return ToolResponse(f"Error: {e}", is_error=True)
        log.info("tool_call_completed", tool=tool_name)
        return ToolResponse(render_json(payload))

    async def _dispatch(self, tool_name: str, arguments: Mapping[str, Any] | None) -> dict[str, Any]:
        known = {tool.name for tool in self._catalog}
        handler = self._handlers.get(tool_name) if tool_name in known else None
        if handler is None:
            raise UnknownToolError(tool_name)

        if arguments is None:
            arguments = {}
        elif not isinstance(arguments, Mapping):
            raise ArgumentError("arguments must be an object")
        return await handler(arguments)

    async def _cpu(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        return (await self._monitor.load_stats()).to_dict()

    async def _memory(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        return (await self._monitor.memory_stats()).to_dict()

    async def _disk(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        mount_point = resolve_mount_point(arguments)
        return (await self._monitor.disk_stats(mount_point)).to_dict()

    async def _uptime(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        return (await self._monitor.uptime()).to_dict()

    async def _processes(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        limit = resolve_limit(arguments, self._max_limit)
        census = await self._monitor.process_census()
        top = await self._monitor.top_processes(limit)
        return {**census.to_dict(), "top_processes": [sample.to_dict() for sample in top]}

    async def _all(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        report = AggregateReport(
            cpu=await self._monitor.load_stats(),
            memory=await self._monitor.memory_stats(),
            disk=await self._monitor.disk_stats(DEFAULT_MOUNT_POINT),
            uptime=await self._monitor.uptime(),
            processes=await self._monitor.process_census(),
            top_processes=tuple(await self._monitor.top_processes(DEFAULT_PROCESS_LIMIT)),
        )
        return report.to_dict()
