from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends

from dashboard_backend.application import DashboardServices, get_services
from dashboard_backend.core.schema import TimeSavedResponse, TimeSavedUpdate

router = APIRouter(prefix="/rbm-time-saved", tags=["time-saved"])


@router.get("")
async def get_time_saved(services: DashboardServices = Depends(get_services)) -> dict:
    state = await asyncio.to_thread(services.time_saved.get_state)
    return state.to_dict()


@router.post("")
async def add_time_saved(payload: TimeSavedUpdate, services: DashboardServices = Depends(get_services)) -> dict:
    service = services.time_saved
    state = await service.record_items(payload.asinCount)
    return TimeSavedResponse(
        totalMinutes=state.total_minutes,
        addedMinutes=payload.asinCount * service.minutes_per_item,
        executionCount=state.execution_count,
    ).model_dump()
