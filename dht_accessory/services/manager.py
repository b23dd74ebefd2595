from __future__ import annotations
import asyncio
import logging
from typing import Iterable, Optional

from ..core.config import Settings
from ..domain.interfaces import ReaderInvoker
from .poller import SensorPoller

logger = logging.getLogger(__name__)


class AccessoryManager:
    """Owns one independent SensorPoller per configured accessory."""

    def __init__(self, pollers: Iterable[SensorPoller] = ()) -> None:
        self._pollers: dict[str, SensorPoller] = {}
        for p in pollers:
            if p.name in self._pollers:
                raise ValueError(f"Duplicate accessory name: {p.name}")
            self._pollers[p.name] = p

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        invoker: Optional[ReaderInvoker] = None,
    ) -> "AccessoryManager":
        pollers = []
        for acc in settings.accessories:
            logger.info("Adding Accessory %s (service=%s)", acc.name, acc.service)
            pollers.append(SensorPoller(acc.to_sensor_config(), invoker=invoker))
        if not pollers:
            logger.warning("No accessories configured")
        return cls(pollers)

    def get(self, name: str) -> SensorPoller:
        return self._pollers[name]

    def pollers(self) -> list[SensorPoller]:
        return list(self._pollers.values())

    async def start(self) -> None:
        for p in self._pollers.values():
            await p.start()

    async def stop(self) -> None:
        await asyncio.gather(*(p.stop() for p in self._pollers.values()))
