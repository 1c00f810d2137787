"""
Parsers turning raw command output into metric records.

Every function here is pure: it takes text that a command printed and
returns a record from ``sysstats.models``, or raises ``ParseError`` when the
text does not have the expected shape.
"""

import math

from sysstats.errors import ParseError
from sysstats.models import (
    DiskStats,
    LoadStats,
    MemoryStats,
    ProcessCensus,
    ProcessSample,
    UptimeInfo,
)

# ps aux: USER PID %CPU %MEM VSZ RSS TTY STAT START TIME COMMAND...
PS_AUX_MIN_FIELDS = 11
PS_AUX_COMMAND_FIELD = 10


def _to_float(token: str, field: str) -> float:
    try:
        value = float(token)
    except ValueError:
        raise ParseError(f"{field}: expected a number, got {token!r}") from None
    if not math.isfinite(value):
        raise ParseError(f"{field}: expected a finite number, got {token!r}")
    return value


def _to_int(token: str, field: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise ParseError(f"{field}: expected an integer, got {token!r}") from None


def _usage_triplet(tokens: list[str], source: str) -> tuple[int, int, int]:
    """Parse ``total used free`` byte counts and reject an empty total."""
    total = _to_int(tokens[0], f"{source} total")
    used = _to_int(tokens[1], f"{source} used")
    free = _to_int(tokens[2], f"{source} free")
    if min(total, used, free) < 0:
        raise ParseError(f"{source}: byte counts must not be negative")
    if total == 0:
        raise ParseError(f"{source}: total size is zero, usage percent is undefined")
    return total, used, free


def parse_load(raw: str, cpu_count: int | None) -> LoadStats:
    """
    Parse load averages.

    Args:
        raw: Text starting with the 1, 5 and 15 minute averages, such as the
            contents of ``/proc/loadavg``. Extra tokens are ignored.
        cpu_count: Logical core count, fetched separately.
    """
    tokens = raw.split()
    if len(tokens) < 3:
        raise ParseError(f"load average: expected 3 values, got {len(tokens)}")
    load1, load5, load15 = (
        _to_float(token, f"load average {window}")
        for token, window in zip(tokens[:3], ("1m", "5m", "15m"))
    )
    if min(load1, load5, load15) < 0:
        raise ParseError("load average: values must not be negative")
    if cpu_count is None or cpu_count < 1:
        raise ParseError(f"cpu count: expected a positive integer, got {cpu_count!r}")
    return LoadStats(load1=load1, load5=load5, load15=load15, cpu_count=cpu_count)


def parse_memory(raw: str) -> MemoryStats:
    """
    Parse the ``Mem:`` row of ``free -b``.

    A single line is taken as the row itself; otherwise the line whose label
    starts with ``Mem`` is used. Columns are ``label total used free ...``.
    """
    lines = [line for line in raw.splitlines() if line.strip()]
    if len(lines) == 1:
        row = lines[0]
    else:
        rows = [line for line in lines if line.lstrip().startswith("Mem")]
        if not rows:
            raise ParseError("memory: no 'Mem' row in output")
        row = rows[0]

    tokens = row.split()
    if len(tokens) < 4:
        raise ParseError(f"memory: expected at least 4 columns, got {len(tokens)}")
    total, used, free = _usage_triplet(tokens[1:4], "memory")
    return MemoryStats(total_bytes=total, used_bytes=used, free_bytes=free)


def parse_disk(raw: str, mount_point: str) -> DiskStats:
    """
    Parse ``total used free`` byte counts for a mount point.

    The values are read from the last line so the header printed by
    ``df --output=size,used,avail`` is skipped.
    """
    lines = raw.strip().splitlines()
    if not lines:
        raise ParseError("disk: empty output")
    tokens = lines[-1].split()
    if len(tokens) != 3:
        raise ParseError(f"disk: expected 3 columns, got {len(tokens)}")
    total, used, free = _usage_triplet(tokens, "disk")
    return DiskStats(total_bytes=total, used_bytes=used, free_bytes=free, mount_point=mount_point)


def parse_uptime(raw: str) -> UptimeInfo:
    """Keep the uptime text as-is, trimmed."""
    text = raw.strip()
    if not text:
        raise ParseError("uptime: empty output")
    return UptimeInfo(uptime_string=text)


def parse_process_count(raw: str) -> ProcessCensus:
    """Count a one-PID-per-line listing."""
    count = 0
    for line in raw.splitlines():
        token = line.strip()
        if not token:
            continue
        _to_int(token, "process id")
        count += 1
    return ProcessCensus(process_count=count)


def parse_process_line(line: str) -> ProcessSample:
    """
    Parse one ``ps aux`` row.

    The command is everything after the tenth field, rejoined with single
    spaces.

    Raises:
        ParseError: The row has fewer than 11 fields or bad numeric fields.
    """
    parts = line.split()
    if len(parts) < PS_AUX_MIN_FIELDS:
        raise ParseError(
            f"process listing: expected at least {PS_AUX_MIN_FIELDS} fields, "
            f"got {len(parts)} in {line.strip()!r}"
        )
    pid = _to_int(parts[1], "pid")
    if pid < 1:
        raise ParseError(f"pid: expected a positive integer, got {pid}")
    return ProcessSample(
        user=parts[0],
        pid=pid,
        cpu_percent=_to_float(parts[2], "cpu percent"),
        mem_percent=_to_float(parts[3], "mem percent"),
        command=" ".join(parts[PS_AUX_COMMAND_FIELD:]),
    )


def parse_top_processes(raw: str, limit: int) -> list[ProcessSample]:
    """
    Parse a ``ps aux`` listing and keep the ``limit`` largest memory users.

    A malformed row fails the whole listing rather than being dropped.
    Samples with equal memory share keep their listing order.
    """
    samples = [parse_process_line(line) for line in raw.splitlines() if line.strip()]
    samples.sort(key=lambda sample: sample.mem_percent, reverse=True)
    return samples[:limit]
