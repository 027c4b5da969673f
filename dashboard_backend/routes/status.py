from __future__ import annotations

from fastapi import APIRouter, Depends

from dashboard_backend.application import DashboardServices, get_services

router = APIRouter(tags=["status"])


@router.get("/storage-status")
async def get_storage_status(services: DashboardServices = Depends(get_services)) -> dict:
    """Report which storage backend is configured, without credentials."""
    return services.settings.storage_status()
