"""Infrastructure layer exports."""

from .storage import (
    BlobStore,
    InMemoryBlobStore,
    LocalBlobStore,
    S3BlobStore,
    build_blob_store,
    load_json_or_default,
    read_json,
    write_json,
)

__all__ = [
    "BlobStore",
    "InMemoryBlobStore",
    "LocalBlobStore",
    "S3BlobStore",
    "build_blob_store",
    "load_json_or_default",
    "read_json",
    "write_json",
]
