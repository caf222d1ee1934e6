"""Resume uploads to S3-compatible object storage."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import PurePath

import boto3
from botocore.config import Config
from django.conf import settings
from django.core.files.uploadedfile import UploadedFile

logger = logging.getLogger(__name__)

RESUME_KEY_PREFIX = "resumes"


@dataclass(frozen=True)
class StoredResume:
    storage_path: str
    url: str | None = None


def get_resume_storage_config() -> dict:
    return getattr(settings, "RESUME_STORAGE", {})


def build_resume_key(filename: str, now: datetime | None = None) -> str:
    """``resumes/YYYY/MM/DD/<random hex><original extension>`` in UTC."""
    now = now or datetime.now(timezone.utc)
    extension = PurePath(filename or "").suffix
    return f"{RESUME_KEY_PREFIX}/{now:%Y/%m/%d}/{uuid.uuid4().hex}{extension}"


def _make_client(config: dict):
    timeout = config.get("TIMEOUT", 10)
    return boto3.client(
        "s3",
        endpoint_url=config.get("ENDPOINT_URL") or None,
        region_name=config.get("REGION") or None,
        aws_access_key_id=config.get("ACCESS_KEY_ID") or None,
        aws_secret_access_key=config.get("SECRET_ACCESS_KEY") or None,
        config=Config(
            connect_timeout=timeout,
            read_timeout=timeout,
            retries={"max_attempts": 1, "mode": "standard"},
        ),
    )


def upload_resume(upload: UploadedFile) -> StoredResume | None:
    """
    Store an already validated resume and describe where it went.

    Returns None when object storage is not configured or the upload fails;
    the application is then saved without resume metadata.
    """
    config = get_resume_storage_config()
    bucket = config.get("BUCKET")
    if not bucket:
        logger.info("No S3 bucket configured, skipping resume upload for %s", upload.name)
        return None

    key = build_resume_key(upload.name)
    try:
        client = _make_client(config)
        upload.seek(0)
        client.upload_fileobj(
            upload,
            bucket,
            key,
            ExtraArgs={"ContentType": upload.content_type},
        )
    except Exception as exc:
        logger.warning("Resume upload to %s/%s failed: %s", bucket, key, exc)
        return None

    public_url = config.get("PUBLIC_URL")
    url = f"{public_url.rstrip('/')}/{key}" if public_url else None
    logger.info("Uploaded resume %s to %s/%s", upload.name, bucket, key)
    return StoredResume(storage_path=f"{bucket}/{key}", url=url)
