"""Per-application wiring of the dashboard services."""
from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from dashboard_backend.application.feedback import FeedbackService
from dashboard_backend.application.time_saved import TimeSavedService
from dashboard_backend.application.workflow import WorkflowDataService
from dashboard_backend.core.settings import Settings
from dashboard_backend.infrastructure import BlobStore, build_blob_store
from dashboard_backend.workers.notifier import TimeSavedNotifier


@dataclass(slots=True)
class DashboardServices:
    """Services created once at application start-up.

    They only hold the blob store and in-process locks, so no teardown is
    needed beyond draining pending notifier tasks.
    """

    settings: Settings
    store: BlobStore
    workflow: WorkflowDataService
    feedback: FeedbackService
    time_saved: TimeSavedService
    notifier: TimeSavedNotifier


def build_services(settings: Settings, store: BlobStore | None = None) -> DashboardServices:
    store = store if store is not None else build_blob_store(settings)
    time_saved = TimeSavedService(store, minutes_per_item=settings.minutes_per_item)
    return DashboardServices(
        settings=settings,
        store=store,
        workflow=WorkflowDataService(store),
        feedback=FeedbackService(store),
        time_saved=time_saved,
        notifier=TimeSavedNotifier(time_saved),
    )


def get_services(request: Request) -> DashboardServices:
    """FastAPI dependency returning the services of the running app."""

    return request.app.state.services
