from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel
from typing import Optional, List

from ..domain.models import Reading, SensorState
from ..services.poller import SensorPoller

# Ranges the HomeKit characteristics accept
TEMPERATURE_RANGE = (-100.0, 100.0)
HUMIDITY_RANGE = (0.0, 100.0)


class ChannelOut(BaseModel):
    name: str
    value: Optional[float] = None
    error: Optional[str] = None
    min_value: float
    max_value: float


class ReadingOut(BaseModel):
    ts_utc: datetime
    ok: bool
    outcome: Optional[str]
    temperature: ChannelOut
    humidity: Optional[ChannelOut] = None


class StateOut(BaseModel):
    last_temperature: Optional[float]
    last_humidity: Optional[float]
    last_good_utc: Optional[datetime]


class AccessoryOut(BaseModel):
    name: str
    service: str
    interval_s: int
    running: bool
    ticks: int
    failures: int
    last_reading: Optional[ReadingOut]
    last_known: StateOut


class AccessoryListOut(BaseModel):
    accessories: List[AccessoryOut]


def _channel(name: str, value, bounds: tuple[float, float]) -> ChannelOut:
    lo, hi = bounds
    if isinstance(value, float):
        return ChannelOut(name=name, value=value, min_value=lo, max_value=hi)
    return ChannelOut(name=name, error=str(value), min_value=lo, max_value=hi)


def reading_out(poller: SensorPoller, r: Reading) -> ReadingOut:
    cfg = poller.config
    return ReadingOut(
        ts_utc=r.ts_utc,
        ok=r.ok,
        outcome=r.outcome.value if r.outcome else None,
        temperature=_channel(cfg.name_temperature, r.temperature, TEMPERATURE_RANGE),
        humidity=(
            _channel(cfg.name_humidity, r.humidity, HUMIDITY_RANGE)
            if cfg.kind.has_humidity else None
        ),
    )


def state_out(s: SensorState) -> StateOut:
    return StateOut(
        last_temperature=s.last_temperature,
        last_humidity=s.last_humidity,
        last_good_utc=s.last_good_utc,
    )


def accessory_out(poller: SensorPoller) -> AccessoryOut:
    r = poller.live.last_reading
    return AccessoryOut(
        name=poller.name,
        service=poller.config.kind.value,
        interval_s=poller.config.poll_interval_s,
        running=poller.running,
        ticks=poller.live.ticks,
        failures=poller.live.failures,
        last_reading=reading_out(poller, r) if r else None,
        last_known=state_out(poller.state),
    )
