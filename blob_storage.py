# blob_storage.py
import base64
import binascii
import logging
import re
import time
import uuid
from typing import Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request

from errors import UpstreamFailure, ValidationFailed

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")


class BlobStore(Protocol):
    def put(self, key: str, data: bytes, content_type: str = "image/png") -> str:
        ...


class S3BlobStore:
    """Uploads objects to a single S3 bucket and hands back their public URL."""

    def __init__(self, bucket: str, region: str, client=None):
        self.bucket = bucket
        self.client = client or boto3.client("s3", region_name=region)

    def url_for(self, key: str) -> str:
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    def put(self, key: str, data: bytes, content_type: str = "image/png") -> str:
        if not self.bucket:
            raise UpstreamFailure("Error adding movie: no S3 bucket configured")
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ACL="bucket-owner-full-control",
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Upload of %s to %s failed: %s", key, self.bucket, e)
            raise UpstreamFailure(f"Error adding movie: {e}")
        return self.url_for(key)


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def new_object_key() -> str:
    return f"{uuid.uuid4()}-{int(time.time() * 1000)}.png"


def decode_image_data(image_data: str) -> bytes:
    """Base64 payload, optionally wrapped as a data URL, to raw bytes."""
    encoded = DATA_URL_PREFIX.sub("", image_data.strip())
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationFailed([
            {"field": "image_data", "message": "Image data is not valid base64"},
        ])
