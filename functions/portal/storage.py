"""
Blob storage for uploaded files: local disk, Tencent COS (S3-compatible) and in-memory testing.

Every client returns storage-relative locators of the form ``uploads/<name>``;
``public_url`` turns one into an address a browser can fetch.
"""

from __future__ import annotations

import logging
import os
import shutil
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from portal.exceptions import StorageError

logger = logging.getLogger(__name__)

DEFAULT_LOCATOR_PREFIX = "uploads"


class StorageClient(Protocol):
    """Defines the operations the API needs from blob storage."""

    def save(self, filename: str, stream: BinaryIO) -> str:
        ...

    def public_url(self, locator: str) -> str:
        ...


def unique_blob_name(filename: str) -> str:
    """
    Build a collision-resistant name from the ingest time and the original filename.

    Directory components of the client-supplied name are dropped.
    """
    basename = os.path.basename((filename or "").replace("\\", "/")) or "upload"
    millis = int(time.time() * 1000)
    return f"{millis}-{uuid.uuid4().hex[:8]}-{basename}"


def join_url(base_url: str, locator: str) -> str:
    return f"{base_url.rstrip('/')}/{locator.lstrip('/')}"


def make_locator(prefix: str, name: str) -> str:
    """Key a blob under ``prefix``, the URL path the blobs are served from."""
    prefix = prefix.strip("/")
    return f"{prefix}/{name}" if prefix else name


@dataclass
class LocalStorageClient:
    """Writes blobs under ``root`` so the static mount can serve them."""

    root: str
    base_url: str = "http://localhost:3000"
    prefix: str = DEFAULT_LOCATOR_PREFIX

    def save(self, filename: str, stream: BinaryIO) -> str:
        directory = Path(self.root)
        directory.mkdir(parents=True, exist_ok=True)
        name = unique_blob_name(filename)
        try:
            with open(directory / name, "xb") as out:
                shutil.copyfileobj(stream, out)
        except OSError as exc:
            logger.exception("Could not write upload %s", name)
            raise StorageError("Internal Server Error") from exc
        return make_locator(self.prefix, name)

    def public_url(self, locator: str) -> str:
        return join_url(self.base_url, locator)


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://example.test"
    prefix: str = DEFAULT_LOCATOR_PREFIX
    stored_objects: dict = field(default_factory=dict)

    def save(self, filename: str, stream: BinaryIO) -> str:
        locator = make_locator(self.prefix, unique_blob_name(filename))
        self.stored_objects[locator] = stream.read()
        return locator

    def public_url(self, locator: str) -> str:
        return join_url(self.base_url, locator)

    def get_bytes(self, locator: str) -> bytes:
        stored = self.stored_objects.get(locator)
        if stored is None:
            raise FileNotFoundError(locator)
        return stored


@dataclass
class CosStorageClient:
    """
    S3-compatible storage client for Tencent COS. Object keys are the locators.
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str
    base_url: str = ""
    prefix: str = DEFAULT_LOCATOR_PREFIX

    def __post_init__(self):
        # Use virtual-hosted style addressing to satisfy COS requirements.
        config = Config(
            s3={"addressing_style": "virtual"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint,
            region_name=self.region,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def save(self, filename: str, stream: BinaryIO) -> str:
        locator = make_locator(self.prefix, unique_blob_name(filename))
        try:
            self._client.upload_fileobj(stream, self.bucket, locator)
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Could not upload %s to bucket %s", locator, self.bucket)
            raise StorageError("Internal Server Error") from exc
        return locator

    def public_url(self, locator: str) -> str:
        if self.base_url:
            return join_url(self.base_url, locator)
        return self._client.generate_presigned_url(
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": locator},
            ExpiresIn=3600,
        )
