"""Application services."""

from .feedback import FeedbackService
from .services import DashboardServices, build_services, get_services
from .time_saved import TimeSavedService
from .workflow import WorkflowDataService

__all__ = [
    "DashboardServices",
    "FeedbackService",
    "TimeSavedService",
    "WorkflowDataService",
    "build_services",
    "get_services",
]
