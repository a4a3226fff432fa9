"""
Storage abstraction for Tencent COS (S3-compatible) and in-memory testing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class StorageError(Exception):
    """A store failure other than a missing key, tagged with the store's code."""

    def __init__(self, code: str, message: str, request_id: str | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.request_id = request_id


class StorageClient(Protocol):
    """Defines the operations the card store needs from object storage.

    ``get_bytes`` raises ``FileNotFoundError`` when the key does not exist and
    ``StorageError`` for every other failure.
    """

    def get_bytes(self, path: str) -> bytes:
        ...

    def put_bytes(
        self, path: str, data: bytes, content_type: str = "application/json"
    ) -> None:
        ...


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    stored_objects: dict[str, bytes] = field(default_factory=dict)
    failures: dict[str, StorageError] = field(default_factory=dict)
    calls: list[tuple[str, str]] = field(default_factory=list)

    def get_bytes(self, path: str) -> bytes:
        self.calls.append(("get", path))
        if path in self.failures:
            raise self.failures[path]
        stored = self.stored_objects.get(path)
        if stored is None:
            raise FileNotFoundError(path)
        return stored

    def put_bytes(
        self, path: str, data: bytes, content_type: str = "application/json"
    ) -> None:
        self.calls.append(("put", path))
        if path in self.failures:
            raise self.failures[path]
        self.stored_objects[path] = bytes(data)


def _request_id(response: dict) -> str | None:
    metadata = response.get("ResponseMetadata") or {}
    headers = metadata.get("HTTPHeaders") or {}
    return headers.get("x-cos-request-id") or metadata.get("RequestId")


def _translate_client_error(path: str, exc: ClientError) -> Exception:
    error = exc.response.get("Error") or {}
    code = str(error.get("Code") or "Unknown")
    if code in NOT_FOUND_CODES:
        return FileNotFoundError(path)
    return StorageError(
        code=code,
        message=error.get("Message") or str(exc),
        request_id=_request_id(exc.response),
    )


@dataclass
class CosStorageClient:
    """
    S3-compatible storage client for Tencent COS.
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str

    def __post_init__(self):
        # Use virtual-hosted style addressing to satisfy COS requirements.
        config = Config(
            s3={"addressing_style": "virtual"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id,
            aws_secret_access_key=self.secret_access_key,
            config=config,
        )

    def get_bytes(self, path: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self.bucket, Key=path)
        except ClientError as exc:
            raise _translate_client_error(path, exc) from exc
        except BotoCoreError as exc:
            raise StorageError(code=type(exc).__name__, message=str(exc)) from exc
        logger.info("COS read ok (%s): %s", path, _request_id(response))
        return response["Body"].read()

    def put_bytes(
        self, path: str, data: bytes, content_type: str = "application/json"
    ) -> None:
        try:
            response = self._client.put_object(
                Bucket=self.bucket,
                Key=path,
                Body=data,
                ContentType=content_type,
            )
        except ClientError as exc:
            raise _translate_client_error(path, exc) from exc
        except BotoCoreError as exc:
            raise StorageError(code=type(exc).__name__, message=str(exc)) from exc
        logger.info("COS write ok (%s): %s", path, _request_id(response))
