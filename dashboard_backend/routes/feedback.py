from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends

from dashboard_backend.application import DashboardServices, get_services
from dashboard_backend.core.schema import FeedbackSubmission

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.get("")
async def list_feedback(services: DashboardServices = Depends(get_services)) -> list[dict]:
    return await asyncio.to_thread(services.feedback.list_feedback)


@router.post("")
async def submit_feedback(payload: FeedbackSubmission, services: DashboardServices = Depends(get_services)) -> dict:
    entry = await services.feedback.submit(payload.model_dump(exclude_none=True))
    return {"success": True, "id": entry["id"]}
