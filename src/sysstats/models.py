"""Data models for system-stats."""

import json
from dataclasses import dataclass
from typing import Any


def format_percent(used: int, total: int) -> str:
    """Return used/total as a percentage string with two decimals."""
    return f"{used / total * 100:.2f}"


@dataclass(slots=True, frozen=True)
class LoadStats:
    """Load averages and logical core count."""

    load1: float
    load5: float
    load15: float
    cpu_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "load_avg": {"1m": self.load1, "5m": self.load5, "15m": self.load15},
            "cpu_count": self.cpu_count,
        }


@dataclass(slots=True, frozen=True)
class MemoryStats:
    """Physical memory usage in bytes."""

    total_bytes: int
    used_bytes: int
    free_bytes: int

    @property
    def usage_percent(self) -> str:
        """Used share of total memory, e.g. ``"42.17"``."""
        return format_percent(self.used_bytes, self.total_bytes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_bytes": self.total_bytes,
            "used_bytes": self.used_bytes,
            "free_bytes": self.free_bytes,
            "usage_percent": self.usage_percent,
        }


@dataclass(slots=True, frozen=True)
class DiskStats:
    """Filesystem usage in bytes for one mount point."""

    total_bytes: int
    used_bytes: int
    free_bytes: int
    mount_point: str

    @property
    def usage_percent(self) -> str:
        """Used share of the filesystem, e.g. ``"87.50"``."""
        return format_percent(self.used_bytes, self.total_bytes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_bytes": self.total_bytes,
            "used_bytes": self.used_bytes,
            "free_bytes": self.free_bytes,
            "usage_percent": self.usage_percent,
            "mount_point": self.mount_point,
        }


@dataclass(slots=True, frozen=True)
class UptimeInfo:
    """Uptime as printed by the system; not further structured."""

    uptime_string: str

    def to_dict(self) -> dict[str, Any]:
        return {"uptime_string": self.uptime_string}


@dataclass(slots=True, frozen=True)
class ProcessCensus:
    """Number of processes at sample time."""

    process_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"process_count": self.process_count}


@dataclass(slots=True, frozen=True)
class ProcessSample:
    """One row of the process listing."""

    user: str
    pid: int
    cpu_percent: float
    mem_percent: float
    command: str  # May contain spaces

    def to_dict(self) -> dict[str, Any]:
        return {
            "user": self.user,
            "pid": self.pid,
            "cpu": self.cpu_percent,
            "mem": self.mem_percent,
            "command": self.command,
        }


@dataclass(slots=True, frozen=True)
class AggregateReport:
    """Everything the ``all`` tool returns."""

    cpu: LoadStats
    memory: MemoryStats
    disk: DiskStats
    uptime: UptimeInfo
    processes: ProcessCensus
    top_processes: tuple[ProcessSample, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "cpu": self.cpu.to_dict(),
            "memory": self.memory.to_dict(),
            "disk": self.disk.to_dict(),
            "uptime": self.uptime.to_dict(),
            "processes": self.processes.to_dict(),
            "top_processes": [sample.to_dict() for sample in self.top_processes],
        }


def render_json(payload: dict[str, Any]) -> str:
    """Serialize a payload with 2-space indentation, keeping key order."""
    return json.dumps(payload, indent=2, ensure_ascii=False)
