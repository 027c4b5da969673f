"""Turn uploaded CSV/JSON files into workflow records."""
from __future__ import annotations

import json

from dashboard_backend.core.csv_tokenizer import parse_csv_records
from dashboard_backend.core.records import coerce_records, keyed_records
from dashboard_backend.core.validation import InputError, PayloadParseError, validate_upload_filename
from dashboard_backend.domain import IDENTITY_KEY, Record


def decode_upload(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InputError("Uploaded file must be UTF-8 encoded text") from exc


def parse_json_records(text: str, identity_key: str = IDENTITY_KEY) -> list[Record]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PayloadParseError(f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})") from exc
    return keyed_records(coerce_records(payload), identity_key)


def parse_upload(filename: str | None, content: bytes, identity_key: str = IDENTITY_KEY) -> list[Record]:
    """Validate the extension and parse ``content``; nothing is persisted here."""

    kind = validate_upload_filename(filename)
    text = decode_upload(content)
    if kind == "csv":
        return parse_csv_records(text, identity_key)
    return parse_json_records(text, identity_key)
