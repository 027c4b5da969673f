from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from dashboard_backend.domain import MergeResult


class MergeSummary(BaseModel):
    success: bool = True
    message: str
    recordCount: int
    totalRecords: int
    newASINs: int
    updatedASINs: int

    @classmethod
    def from_result(cls, result: MergeResult, message: str) -> "MergeSummary":
        return cls(
            message=message,
            recordCount=result.incoming_count,
            totalRecords=result.total_count,
            newASINs=result.new_count,
            updatedASINs=result.updated_count,
        )


class TimeSavedUpdate(BaseModel):
    asinCount: int = Field(ge=0)


class TimeSavedResponse(BaseModel):
    success: bool = True
    totalMinutes: int
    addedMinutes: int
    executionCount: int


class FeedbackSubmission(BaseModel):
    """Feedback sent by the dashboard; unknown fields are stored as given."""

    model_config = ConfigDict(extra="allow")

    asin: str | None = None
    type: Literal["positive", "negative"] | None = None
    text: str = ""
    timestamp: str | None = None


class WorkflowStats(BaseModel):
    totalRecords: int = 0
    priceMatch: int = 0
    revertToBase: int = 0
    comparable: int = 0
    underSpec: int = 0
    overSpec: int = 0
    availableGLs: list[str] = Field(default_factory=list)
    selectedGLs: list[str] = Field(default_factory=list)
