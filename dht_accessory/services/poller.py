from __future__ import annotations
import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

from ..core.timeutil import now_utc
from ..domain.errors import ReadingParseError, SensorError, SensorStatusError
from ..domain.interfaces import ReaderInvoker, ReadingSink
from ..domain.models import (
    ChannelValue,
    ParsedSample,
    Reading,
    SensorConfig,
    SensorState,
    StatusOutcome,
    is_number,
)
from ..drivers.reader_exec import SubprocessReaderInvoker
from ..sensors.classifier import classify
from ..sensors.parser import HUMIDITY_IDX, STATUS_IDX, TEMPERATURE_IDX, parse_output


logger = logging.getLogger(__name__)


class PollerPhase(str, Enum):
    IDLE = "idle"
    SAMPLING = "sampling"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass
class LiveState:
    last_reading: Optional[Reading] = None
    last_phase: Optional[PollerPhase] = None
    ticks: int = 0
    failures: int = 0
    in_flight: bool = False


class SensorPoller:
    """
    Periodically samples one accessory's reader and pushes each result to
    its subscribers.

    One tick: invoke reader -> parse stdout -> classify status -> update
    last-known-good state -> emit. Every completed tick calls each sink
    exactly once, with a value or an error on every channel. A failed tick
    never overwrites the last-known-good state, and the failure itself is
    what gets emitted (not the stale value).
    """

    def __init__(
        self,
        config: SensorConfig,
        invoker: Optional[ReaderInvoker] = None,
        sinks: Iterable[ReadingSink] = (),
    ) -> None:
        self.config = config
        self._invoker = invoker or SubprocessReaderInvoker()
        self._sinks: list[ReadingSink] = list(sinks)

        self._task: Optional[asyncio.Task] = None
        self._stop = asyncio.Event()

        self.state = SensorState()
        self.live = LiveState()
        self.phase = PollerPhase.IDLE

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def subscribe(self, sink: ReadingSink) -> Callable[[], None]:
        self._sinks.append(sink)

        def unsubscribe() -> None:
            if sink in self._sinks:
                self._sinks.remove(sink)

        return unsubscribe

    async def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._task = asyncio.create_task(self._run(), name=f"poller:{self.name}")

    async def stop(self) -> None:
        """Stop the timer. A tick still waiting on its reader is cancelled."""
        self._stop.set()
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def _run(self) -> None:
        cfg = self.config
        logger.info(
            "[%s] Poller started (kind=%s command=%s interval=%ss)",
            cfg.name, cfg.kind.value, cfg.reader_command, cfg.poll_interval_s,
        )

        first = True
        try:
            while not self._stop.is_set():
                if not (first and cfg.sample_on_start):
                    # sleep with cancellation awareness
                    try:
                        await asyncio.wait_for(self._stop.wait(), timeout=cfg.poll_interval_s)
                        break
                    except asyncio.TimeoutError:
                        pass
                first = False
                await self.tick()
        finally:
            logger.info("[%s] Poller stopped", cfg.name)

    async def tick(self) -> Optional[Reading]:
        """Run one sampling cycle now. Returns None if one is already running."""
        if self.live.in_flight:
            logger.debug("[%s] Tick skipped, previous sample still in flight", self.name)
            return None

        self.live.in_flight = True
        self.phase = PollerPhase.SAMPLING
        try:
            try:
                reading = await self._sample()
            except Exception as e:
                logger.exception("[%s] Sample failed unexpectedly: %s", self.name, e)
                reading = self._reject(SensorError(f"sample failed: {e}"), outcome=None)

            self.live.ticks += 1
            if not reading.ok:
                self.live.failures += 1
            self.live.last_reading = reading
            self.live.last_phase = self.phase

            await self._emit(reading)
            return reading
        finally:
            self.live.in_flight = False
            self.phase = PollerPhase.IDLE

    async def _sample(self) -> Reading:
        cfg = self.config
        raw = await self._invoker.invoke(cfg.reader_command, cfg.reader_args, cfg.reader_timeout_s)
        if raw.error is not None:
            logger.error("[%s] %s function failed: %s", cfg.name, cfg.reader_command, raw.error)
            return self._reject(raw.error, outcome=None)

        sample = parse_output(cfg.kind, raw.stdout)
        if cfg.kind.has_humidity:
            logger.info(
                "[%s] DHT Status: %s, Temperature: %s, Humidity: %s",
                cfg.name, _token(sample, STATUS_IDX), sample.temperature, sample.humidity,
            )
        else:
            logger.info("[%s] CPU Temperature: %s", cfg.name, sample.temperature)

        outcome = classify(sample, has_status=cfg.kind.has_humidity)
        if not outcome.usable:
            status = _token(sample, STATUS_IDX)
            if outcome is StatusOutcome.TIMEOUT:
                logger.error("[%s] Error: dht22 read timeout: status code: %s", cfg.name, status)
            else:
                logger.error("[%s] Error: dht22 read failed with status code: %s", cfg.name, status)
            return self._reject(SensorStatusError(outcome, sample.status_code), outcome=outcome)

        return self._accept(sample)

    def _accept(self, sample: ParsedSample) -> Reading:
        ts = now_utc()
        errors: list[SensorError] = []
        fresh = False

        temperature: ChannelValue
        if is_number(sample.temperature):
            temperature = sample.temperature
            self.state.last_temperature = sample.temperature
            fresh = True
        else:
            idx = TEMPERATURE_IDX if self.config.kind.has_humidity else 0
            temperature = ReadingParseError("temperature", _token(sample, idx))
            errors.append(temperature)

        humidity: Optional[ChannelValue] = None
        if self.config.kind.has_humidity:
            if is_number(sample.humidity):
                humidity = sample.humidity
                self.state.last_humidity = sample.humidity
                fresh = True
            else:
                humidity = ReadingParseError("humidity", _token(sample, HUMIDITY_IDX))
                errors.append(humidity)

        if fresh:
            self.state.last_good_utc = ts
        for err in errors:
            logger.warning("[%s] %s", self.name, err)

        self.phase = PollerPhase.ACCEPTED
        return Reading(
            ts_utc=ts,
            accessory=self.name,
            temperature=temperature,
            humidity=humidity,
            outcome=StatusOutcome.GOOD,
            errors=tuple(errors),
        )

    def _reject(self, error: SensorError, outcome: Optional[StatusOutcome]) -> Reading:
        self.phase = PollerPhase.REJECTED
        return Reading(
            ts_utc=now_utc(),
            accessory=self.name,
            temperature=error,
            humidity=error if self.config.kind.has_humidity else None,
            outcome=outcome,
            errors=(error,),
        )

    async def _emit(self, reading: Reading) -> None:
        for sink in list(self._sinks):
            try:
                result = sink(reading)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.exception("[%s] Reading sink failed: %s", self.name, e)


def _token(sample: ParsedSample, idx: int) -> Optional[str]:
    return sample.raw_tokens[idx] if idx < len(sample.raw_tokens) else None
