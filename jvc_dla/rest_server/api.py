# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""
REST API routes for the JVC D-ILA projector server.

The routes only talk to the JvcDlaMonitor, which serializes access to the
projector; they never use the client directly.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from ..internal_types import *
from ..client import JvcDlaMonitor, MIN_LENS_POSITION, MAX_LENS_POSITION
from .logger import logger

router = APIRouter(prefix="/api/v1")

class PowerRequest(BaseModel):
    on: bool

class LensRequest(BaseModel):
    position: int

def monitor_dependency(request: Request) -> JvcDlaMonitor:
    monitor: Optional[JvcDlaMonitor] = getattr(request.app.state, 'monitor', None)
    if monitor is None:
        raise HTTPException(status_code=503, detail="Projector monitor is not running")
    return monitor

@router.get("/status")
async def get_status(monitor: JvcDlaMonitor = Depends(monitor_dependency)) -> Dict[str, Any]:
    """Returns the most recently polled projector state."""
    return monitor.status()

@router.put("/power")
async def put_power(body: PowerRequest, monitor: JvcDlaMonitor = Depends(monitor_dependency)) -> Dict[str, Any]:
    """Turns the projector on or off."""
    accepted = await monitor.set_power(body.on)
    logger.debug(f"PUT /power on={body.on}: accepted={accepted}")
    return dict(accepted=accepted, status=monitor.status())

@router.put("/lens")
async def put_lens(body: LensRequest, monitor: JvcDlaMonitor = Depends(monitor_dependency)) -> Dict[str, Any]:
    """Moves the lens to a position between 10 and 100 (lens memory slot * 10)."""
    if not MIN_LENS_POSITION <= body.position <= MAX_LENS_POSITION:
        raise HTTPException(
            status_code=422,
            detail=f"Lens position must be between {MIN_LENS_POSITION} and {MAX_LENS_POSITION}")
    accepted = await monitor.set_lens_position(body.position)
    logger.debug(f"PUT /lens position={body.position}: accepted={accepted}")
    return dict(accepted=accepted, status=monitor.status())
