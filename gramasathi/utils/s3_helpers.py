"""
Image storage in an S3-compatible bucket (MinIO locally).

Connection settings are read from app.config (S3_ENDPOINT, S3_REGION,
S3_ACCESS_KEY, S3_SECRET_KEY, S3_BUCKET, S3_USE_PATH_STYLE).
"""

import re
import uuid
from urllib.parse import urlparse

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError
from flask import current_app

from gramasathi.errors import StorageError

_NAME_JUNK = re.compile(r"[^a-z0-9]+")


def _client():
    cfg = current_app.config
    return boto3.client(
        "s3",
        endpoint_url=cfg["S3_ENDPOINT"] or None,
        region_name=cfg["S3_REGION"],
        aws_access_key_id=cfg["S3_ACCESS_KEY"],
        aws_secret_access_key=cfg["S3_SECRET_KEY"],
        config=Config(
            s3={"addressing_style": "path" if cfg["S3_USE_PATH_STYLE"] else "virtual"}
        ),
    )


def make_key(folder: str, owner_id: str, filename: str) -> str:
    """folder/owner/<random>-<slugged stem>.<ext>, so uploads never collide."""
    stem, dot, ext = filename.rpartition(".")
    if not dot:
        stem, ext = ext, ""
    slug = _NAME_JUNK.sub("-", stem.strip().lower()).strip("-") or "file"
    suffix = f".{ext.lower()}" if ext else ""
    return f"{folder}/{owner_id}/{uuid.uuid4().hex}-{slug}{suffix}"


def put_object(key: str, data: bytes, content_type: str) -> None:
    try:
        _client().put_object(
            Bucket=current_app.config["S3_BUCKET"],
            Key=key,
            Body=data,
            ContentType=content_type,
        )
    except (BotoCoreError, ClientError) as e:
        current_app.logger.error("upload of %s failed: %s", key, e)
        raise StorageError() from e


def public_url(key: str) -> str:
    cfg = current_app.config
    endpoint = cfg["S3_ENDPOINT"].rstrip("/")
    bucket = cfg["S3_BUCKET"]
    if cfg["S3_USE_PATH_STYLE"]:
        return f"{endpoint}/{bucket}/{key}"
    ep = urlparse(endpoint)
    return f"{ep.scheme}://{bucket}.{ep.netloc}/{key}"
