from __future__ import annotations

from pathlib import Path


class DashboardError(Exception):
    """Base error rendered as ``{"success": false, "error": message}``."""

    status_code = 500

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict[str, object]:
        return {"success": False, "error": self.message}


class InputError(DashboardError):
    """Raised when a request payload cannot be accepted."""

    status_code = 400


class UnsupportedFileTypeError(InputError):
    def __init__(self, filename: str | None = None) -> None:
        super().__init__("Unsupported file type. Please upload CSV or JSON.")
        self.filename = filename


class CSVParseError(InputError):
    """Raised when uploaded CSV text has no header or no data rows."""


class PayloadParseError(InputError):
    """Raised when a JSON body or file cannot be decoded."""


class StorageError(DashboardError):
    """Raised when the blob storage backend fails."""


class BlobNotFoundError(StorageError):
    """Raised when a requested blob does not exist."""

    status_code = 404

    def __init__(self, key: str) -> None:
        super().__init__(f"blob not found: {key}")
        self.key = key


UPLOAD_FILE_TYPES = {".csv": "csv", ".json": "json"}


def validate_upload_filename(filename: str | None) -> str:
    """Return ``"csv"`` or ``"json"`` for an uploaded filename."""

    if not filename:
        raise InputError("No file provided")
    suffix = Path(filename).suffix.lower()
    kind = UPLOAD_FILE_TYPES.get(suffix)
    if kind is None:
        raise UnsupportedFileTypeError(filename)
    return kind
