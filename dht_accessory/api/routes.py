from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..services.manager import AccessoryManager
from ..services.poller import SensorPoller
from .schemas import AccessoryListOut, AccessoryOut, ReadingOut, accessory_out, reading_out

logger = logging.getLogger(__name__)

router = APIRouter()


# Overridden in main via app.dependency_overrides
def get_manager() -> AccessoryManager:
    raise RuntimeError("Accessory manager dependency not configured")


def _poller(name: str, manager: AccessoryManager) -> SensorPoller:
    try:
        return manager.get(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown accessory: {name}")


@router.get("/accessories", response_model=AccessoryListOut)
async def list_accessories(manager: AccessoryManager = Depends(get_manager)):
    return AccessoryListOut(accessories=[accessory_out(p) for p in manager.pollers()])


@router.get("/accessories/{name}", response_model=AccessoryOut)
async def get_accessory(name: str, manager: AccessoryManager = Depends(get_manager)):
    return accessory_out(_poller(name, manager))


@router.post("/accessories/{name}/sample", response_model=ReadingOut)
async def sample_now(name: str, manager: AccessoryManager = Depends(get_manager)):
    poller = _poller(name, manager)
    reading = await poller.tick()
    if reading is None:
        raise HTTPException(status_code=409, detail="A sample is already in flight")
    return reading_out(poller, reading)


@router.post("/accessories/{name}/identify")
async def identify(name: str, manager: AccessoryManager = Depends(get_manager)):
    poller = _poller(name, manager)
    logger.info("%s Identify requested!", poller.name)
    return {"ok": True, "name": poller.name}
