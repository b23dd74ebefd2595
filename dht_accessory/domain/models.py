from __future__ import annotations
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from .errors import SensorError


class SensorKind(str, Enum):
    TEMPERATURE_ONLY = "Temperature"
    TEMPERATURE_HUMIDITY = "dht22"

    @property
    def has_humidity(self) -> bool:
        return self is SensorKind.TEMPERATURE_HUMIDITY


class StatusOutcome(str, Enum):
    GOOD = "good"
    BAD_CHECKSUM = "bad_checksum"
    BAD_DATA = "bad_data"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"

    @property
    def usable(self) -> bool:
        return self is StatusOutcome.GOOD


@dataclass(frozen=True)
class SensorConfig:
    kind: SensorKind
    reader_command: str
    reader_args: tuple[str, ...]
    poll_interval_s: int
    name: str
    name_temperature: str
    name_humidity: str
    reader_timeout_s: Optional[float] = None
    sample_on_start: bool = False


@dataclass(frozen=True)
class RawSample:
    stdout: str
    error: Optional[SensorError] = None


@dataclass(frozen=True)
class ParsedSample:
    temperature: float
    humidity: Optional[float] = None
    status_code: Optional[int] = None  # None for single-channel readers
    raw_tokens: tuple[str, ...] = ()


@dataclass
class SensorState:
    last_temperature: Optional[float] = None
    last_humidity: Optional[float] = None
    last_good_utc: Optional[datetime] = None


# A channel carries either a number or the error that replaced it.
ChannelValue = Union[float, SensorError]


@dataclass(frozen=True)
class Reading:
    ts_utc: datetime
    accessory: str
    temperature: ChannelValue
    humidity: Optional[ChannelValue] = None  # None for single-channel sensors
    outcome: Optional[StatusOutcome] = StatusOutcome.GOOD  # None when the reader never ran
    errors: tuple[SensorError, ...] = field(default=())

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def error(self) -> Optional[SensorError]:
        return self.errors[0] if self.errors else None


def is_number(value: object) -> bool:
    """True for finite floats; NaN and infinities are not usable readings."""
    return isinstance(value, float) and math.isfinite(value)
