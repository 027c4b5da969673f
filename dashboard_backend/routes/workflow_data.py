from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from dashboard_backend.application import DashboardServices, get_services
from dashboard_backend.core.schema import MergeSummary, WorkflowStats
from dashboard_backend.core.validation import PayloadParseError

router = APIRouter(prefix="/workflow-data", tags=["workflow"])


@router.post("")
async def submit_workflow_data(request: Request, services: DashboardServices = Depends(get_services)) -> dict:
    """Merge records pushed by the automation pipeline into the stored collection."""
    try:
        payload = await request.json()
    except ValueError as exc:
        raise PayloadParseError("Request body must be valid JSON") from exc

    result = await services.workflow.ingest_payload(payload)
    return MergeSummary.from_result(result, "Workflow data received and merged").model_dump()


@router.get("")
async def get_workflow_data(services: DashboardServices = Depends(get_services)) -> dict:
    return {"data": await asyncio.to_thread(services.workflow.list_records)}


@router.delete("")
async def clear_workflow_data(services: DashboardServices = Depends(get_services)) -> dict:
    await services.workflow.clear()
    return {"success": True, "message": "All workflow data cleared"}


@router.get("/stats")
async def get_workflow_stats(
    gl: list[str] | None = Query(default=None),
    services: DashboardServices = Depends(get_services),
) -> dict:
    stats = await asyncio.to_thread(services.workflow.get_stats, gl)
    return WorkflowStats(**stats).model_dump()


@router.get("/export")
async def export_workflow_data(services: DashboardServices = Depends(get_services)) -> Response:
    return Response(
        content=await asyncio.to_thread(services.workflow.export_csv),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="workflow-data.csv"'},
    )
