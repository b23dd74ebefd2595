"""Shared pytest fixtures for dht_accessory tests."""

from __future__ import annotations

import stat
from pathlib import Path
from typing import Callable, Optional, Sequence

import pytest

from dht_accessory.domain.errors import ReaderProcessError
from dht_accessory.domain.models import RawSample, SensorConfig, SensorKind
from dht_accessory.services.poller import SensorPoller

# =============================================================================
# Fake reader
# =============================================================================


class FakeInvoker:
    """Replays queued RawSamples and records every invocation."""

    def __init__(self, *outputs: RawSample | str) -> None:
        self.outputs = [o if isinstance(o, RawSample) else RawSample(stdout=o) for o in outputs]
        self.calls: list[tuple[str, tuple[str, ...], Optional[float]]] = []

    def push(self, output: RawSample | str) -> None:
        self.outputs.append(output if isinstance(output, RawSample) else RawSample(stdout=output))

    async def invoke(
        self,
        command: str,
        args: Sequence[str] = (),
        timeout_s: Optional[float] = None,
    ) -> RawSample:
        self.calls.append((command, tuple(args), timeout_s))
        return self.outputs.pop(0)


def process_failure(command: str = "dht22") -> RawSample:
    """RawSample for a reader that could not be spawned."""
    return RawSample(
        stdout="",
        error=ReaderProcessError(
            command, ("-g", "4"), cause=FileNotFoundError(2, "No such file or directory")
        ),
    )


# =============================================================================
# Sensor configs
# =============================================================================


@pytest.fixture
def dht_config() -> SensorConfig:
    """Temperature + humidity accessory on GPIO 4."""
    return SensorConfig(
        kind=SensorKind.TEMPERATURE_HUMIDITY,
        reader_command="dht22",
        reader_args=("-g", "4"),
        poll_interval_s=60,
        name="Indoor",
        name_temperature="Indoor Temperature",
        name_humidity="Indoor Humidity",
    )


@pytest.fixture
def cpu_config() -> SensorConfig:
    """CPU temperature accessory."""
    return SensorConfig(
        kind=SensorKind.TEMPERATURE_ONLY,
        reader_command="cputemp",
        reader_args=(),
        poll_interval_s=60,
        name="cputemp",
        name_temperature="cputemp",
        name_humidity="cputemp",
    )


@pytest.fixture
def make_poller() -> Callable[..., tuple[SensorPoller, FakeInvoker, list]]:
    """Build a poller wired to a FakeInvoker and a list-collecting sink."""

    def _make(config: SensorConfig, *outputs: RawSample | str):
        invoker = FakeInvoker(*outputs)
        received: list = []
        poller = SensorPoller(config, invoker=invoker, sinks=[received.append])
        return poller, invoker, received

    return _make


# =============================================================================
# Reader scripts on disk
# =============================================================================


@pytest.fixture
def write_script(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write an executable /bin/sh script and return its path."""

    def _write(name: str, body: str) -> Path:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body + "\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _write
