"""Shared fixtures: canned command output and a fake command runner."""

from collections.abc import Sequence

import pytest

from sysstats.catalog import TOOL_CATALOG
from sysstats.dispatcher import Dispatcher
from sysstats.errors import CommandExecutionError
from sysstats.monitor import (
    CENSUS_COMMAND,
    LOADAVG_COMMAND,
    MEMORY_COMMAND,
    TOP_PROCESSES_COMMAND,
    UPTIME_COMMAND,
    SystemMonitor,
    disk_command,
)

LOADAVG_OUTPUT = "0.52 0.58 0.59 1/1234 5678"

FREE_OUTPUT = """\
               total        used        free      shared  buff/cache   available
Mem:     16000000000  4000000000  8000000000   100000000  4000000000 11000000000
Swap:     2000000000           0  2000000000"""

DF_ROOT_OUTPUT = """\
   1B-blocks         Used        Avail
500000000000 125000000000 375000000000"""

DF_DATA_OUTPUT = """\
    1B-blocks          Used         Avail
2000000000000 1500000000000  500000000000"""

UPTIME_OUTPUT = "up 3 days, 4 hours, 5 minutes"

CENSUS_OUTPUT = """\
      1
      2
    345
   2345
   4567"""

PS_AUX_OUTPUT = """\
root         1  0.0  0.1 167744 13140 ?        Ss   Oct18   0:05 /sbin/init splash
alice     2345 12.5 20.3 3456789 812345 ?      Sl   09:12  10:01 /usr/lib/firefox/firefox -contentproc --channel
bob       4567  1.0  5.5 123456 45678 pts/0    S+   10:00   0:01 python3 worker.py --queue jobs
postgres   890  0.3  8.1 223344 99887 ?        Ss   Oct18   1:20 postgres: checkpointer
alice     3333  0.0  0.0      0     0 ?        I    08:00   0:00 [kworker/0:1]
root       777  2.0  1.2  55555 11111 ?        Ssl  Oct18   0:30 /usr/sbin/sshd -D"""


class FakeRunner:
    """
    Stand-in for ``run_command`` answering from a table of canned outputs.

    Unknown commands fail like a missing executable. A table value that is
    an exception is raised instead of returned.
    """

    def __init__(self, outputs: dict[tuple[str, ...], str | Exception]) -> None:
        self.outputs = dict(outputs)
        self.calls: list[tuple[str, ...]] = []
        self.timeouts: list[float | None] = []

    async def __call__(self, argv: Sequence[str], timeout: float | None = None) -> str:
        key = tuple(argv)
        self.calls.append(key)
        self.timeouts.append(timeout)
        result = self.outputs.get(key)
        if result is None:
            raise CommandExecutionError(f"cannot run {key[0]}: not found", key, exit_code=127)
        if isinstance(result, Exception):
            raise result
        return result


def default_outputs() -> dict[tuple[str, ...], str | Exception]:
    """Canned output for every pipeline command."""
    return {
        LOADAVG_COMMAND: LOADAVG_OUTPUT,
        MEMORY_COMMAND: FREE_OUTPUT,
        disk_command("/"): DF_ROOT_OUTPUT,
        disk_command("/data"): DF_DATA_OUTPUT,
        UPTIME_COMMAND: UPTIME_OUTPUT,
        CENSUS_COMMAND: CENSUS_OUTPUT,
        TOP_PROCESSES_COMMAND: PS_AUX_OUTPUT,
    }


@pytest.fixture
def fake_runner() -> FakeRunner:
    """A runner serving the default canned outputs."""
    return FakeRunner(default_outputs())


@pytest.fixture
def monitor(fake_runner: FakeRunner) -> SystemMonitor:
    """A monitor reading from the fake runner, reporting 8 cores."""
    return SystemMonitor(run=fake_runner, timeout=5.0, cpu_count=lambda: 8)


@pytest.fixture
def dispatcher(monitor: SystemMonitor) -> Dispatcher:
    """A dispatcher over the standard catalog and the fake monitor."""
    return Dispatcher(TOOL_CATALOG, monitor)


@pytest.fixture
def loadavg_output() -> str:
    """Contents of /proc/loadavg."""
    return LOADAVG_OUTPUT


@pytest.fixture
def free_output() -> str:
    """Output of ``free -b``."""
    return FREE_OUTPUT


@pytest.fixture
def df_root_output() -> str:
    """Output of ``df --output=size,used,avail -B1 -- /``."""
    return DF_ROOT_OUTPUT


@pytest.fixture
def df_data_output() -> str:
    """Output of ``df --output=size,used,avail -B1 -- /data``."""
    return DF_DATA_OUTPUT


@pytest.fixture
def census_output() -> str:
    """Output of ``ps -e --no-headers -o pid``."""
    return CENSUS_OUTPUT


@pytest.fixture
def ps_aux_output() -> str:
    """Output of ``ps aux --no-headers``, deliberately not sorted by memory."""
    return PS_AUX_OUTPUT
