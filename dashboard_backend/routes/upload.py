from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from dashboard_backend.application import DashboardServices, get_services
from dashboard_backend.core.csvio import upload_template_csv
from dashboard_backend.core.schema import MergeSummary
from dashboard_backend.core.validation import InputError

router = APIRouter(tags=["upload"])


@router.post("/upload-data")
async def upload_data(
    file: UploadFile | None = File(default=None),
    services: DashboardServices = Depends(get_services),
) -> dict:
    """Merge an uploaded CSV or JSON file and credit the time-saved counter."""
    if file is None:
        raise InputError("No file provided")

    try:
        content = await file.read()
    finally:
        await file.close()

    result = await services.workflow.ingest_upload(file.filename, content)
    services.notifier.schedule(result.incoming_count)
    return MergeSummary.from_result(result, "File uploaded and data merged successfully").model_dump()


@router.get("/upload-template")
async def download_upload_template() -> Response:
    return Response(
        content=upload_template_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="sample-upload-template.csv"'},
    )
