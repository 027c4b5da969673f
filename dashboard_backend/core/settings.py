from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from dashboard_backend.core.time_saved import DEFAULT_MINUTES_PER_ITEM

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]
DEFAULT_REGION = "us-east-2"


def _default_data_root() -> Path:
    return Path(__file__).resolve().parents[2] / "data"


def _first_env(*names: str) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


class Settings(BaseModel):
    """Runtime configuration, usually loaded from the environment."""

    storage_backend: Literal["s3", "local", "memory"] = "local"
    s3_bucket: str | None = None
    s3_prefix: str = ""
    aws_region: str = DEFAULT_REGION
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    data_root: Path = Field(default_factory=_default_data_root)
    minutes_per_item: int = Field(default=DEFAULT_MINUTES_PER_ITEM, ge=0)
    cors_origins: list[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        bucket = _first_env("S3_BUCKET", "NEXT_PUBLIC_S3_BUCKET")
        backend = (os.getenv("DASHBOARD_STORAGE_BACKEND") or ("s3" if bucket else "local")).strip().lower()

        origins_env = os.getenv("API_CORS_ORIGINS", "")
        origins = [origin.strip() for origin in origins_env.split(",") if origin.strip()]

        data_root = os.getenv("DASHBOARD_DATA_ROOT")

        return cls(
            storage_backend=backend,  # type: ignore[arg-type]
            s3_bucket=bucket,
            s3_prefix=os.getenv("S3_PREFIX", ""),
            aws_region=_first_env("AWS_REGION", "NEXT_PUBLIC_AWS_REGION") or DEFAULT_REGION,
            aws_access_key_id=os.getenv("S3_ACCESS_KEY_ID") or None,
            aws_secret_access_key=os.getenv("S3_SECRET_ACCESS_KEY") or None,
            data_root=Path(data_root).expanduser().resolve() if data_root else _default_data_root(),
            minutes_per_item=int(os.getenv("RBM_MINUTES_PER_ITEM") or DEFAULT_MINUTES_PER_ITEM),
            cors_origins=origins or list(DEFAULT_CORS_ORIGINS),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )

    def storage_status(self) -> dict[str, object]:
        """Describe the storage configuration without exposing secrets."""

        return {
            "backend": self.storage_backend,
            "bucket": self.s3_bucket,
            "region": self.aws_region,
            "prefix": self.s3_prefix,
            "hasAccessKey": bool(self.aws_access_key_id),
            "hasSecretKey": bool(self.aws_secret_access_key),
            "dataRoot": str(self.data_root) if self.storage_backend == "local" else None,
        }
