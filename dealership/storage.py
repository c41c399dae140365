"""
S3-compatible object storage (DigitalOcean Spaces) for contract files.
"""
import logging
import re
import threading
import time
from functools import lru_cache
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from dealership.config import Settings, get_settings
from dealership.exceptions import StorageError, StorageNotConfiguredError

logger = logging.getLogger(__name__)

PLACEHOLDER_BUCKET = "your-bucket-name"
PLACEHOLDER_ENDPOINT_HOST = "nyc3.digitaloceanspaces.com"


def sanitize_filename(filename: str) -> str:
    return re.sub(r"[^a-zA-Z0-9.-]", "_", filename)


def generate_file_path(contract_id: int, filename: str, timestamp_ms: Optional[int] = None) -> str:
    """Object key for a contract file: ``contracts/{id}/files/{ms}_{name}``."""
    if not contract_id or not filename:
        raise ValueError("contract_id and filename are required")
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"contracts/{contract_id}/files/{timestamp_ms}_{sanitize_filename(filename)}"


def sanitize_metadata(value) -> str:
    """Object metadata must be printable ASCII."""
    cleaned = re.sub(r"[^\x20-\x7e]", "_", str(value or "")).strip()
    return cleaned or "unknown"


class ObjectStorage:
    """Thin wrapper around a boto3 S3 client bound to one bucket."""

    def __init__(self, settings: Settings):
        self.endpoint = settings.spaces_endpoint.rstrip("/")
        self.bucket = settings.spaces_bucket
        self.region = settings.spaces_region
        self.cdn_endpoint = settings.spaces_cdn_endpoint.rstrip("/")
        self._access_key_id = settings.spaces_access_key_id
        self._secret_access_key = settings.spaces_secret_access_key
        self._client = None
        self._client_lock = threading.Lock()

    def configuration_errors(self) -> list[str]:
        errors = []
        if not self._access_key_id:
            errors.append("SPACES_ACCESS_KEY_ID is required")
        if not self._secret_access_key:
            errors.append("SPACES_SECRET_ACCESS_KEY is required")
        if not self.bucket or self.bucket == PLACEHOLDER_BUCKET:
            errors.append("SPACES_BUCKET must be set to your actual bucket name")
        if not self.endpoint or PLACEHOLDER_ENDPOINT_HOST in self.endpoint:
            errors.append("SPACES_ENDPOINT must be set to your actual endpoint")
        return errors

    @property
    def is_configured(self) -> bool:
        return not self.configuration_errors()

    def status(self) -> dict:
        errors = self.configuration_errors()
        return {
            "endpoint": self.endpoint,
            "bucket": self.bucket,
            "region": self.region,
            "access_key_id": "SET" if self._access_key_id else "NOT SET",
            "secret_access_key": "SET" if self._secret_access_key else "NOT SET",
            "cdn_endpoint": self.cdn_endpoint,
            "is_configured": not errors,
            "errors": errors,
        }

    @property
    def client(self):
        with self._client_lock:
            if self._client is None:
                errors = self.configuration_errors()
                if errors:
                    raise StorageNotConfiguredError(errors)
                # boto3 sessions are not thread-safe; the client built here is.
                session = boto3.session.Session()
                self._client = session.client(
                    "s3",
                    endpoint_url=self.endpoint,
                    region_name=self.region,
                    aws_access_key_id=self._access_key_id,
                    aws_secret_access_key=self._secret_access_key,
                )
        return self._client

    def ensure_client(self) -> None:
        """Build the client on the calling thread, before work is handed to a worker thread."""
        self.client

    def public_url(self, key: str) -> str:
        if self.cdn_endpoint:
            return f"{self.cdn_endpoint}/{key}"
        return f"{self.endpoint}/{self.bucket}/{key}"

    def put(self, key: str, body: bytes, content_type: str,
            acl: str = "public-read", metadata: Optional[dict] = None) -> None:
        disposition = "inline" if content_type == "application/pdf" or content_type.startswith("image/") else "attachment"
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                ContentDisposition=disposition,
                ACL=acl,
                Metadata={k: sanitize_metadata(v) for k, v in (metadata or {}).items()},
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Upload of {key} failed: {exc}") from exc
        logger.info("Stored object %s (%d bytes)", key, len(body))

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"Delete of {key} failed: {exc}") from exc
        logger.info("Deleted object %s", key)


@lru_cache()
def get_storage() -> ObjectStorage:
    """FastAPI dependency returning the process-wide storage."""
    return ObjectStorage(get_settings())
