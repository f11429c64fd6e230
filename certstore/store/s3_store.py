from __future__ import annotations

import logging
from contextlib import closing
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from certstore.config import StorageConfig
from certstore.context import CallContext
from certstore.errors import BackendError, KeyNotFoundError
from certstore.io.keys import (
    is_direct_child,
    is_terminal,
    namespace_prefix,
    resolve_key,
    strip_prefix,
)
from certstore.models import KeyInfo
from certstore.observability import log_event
from certstore.storage import Storage

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = frozenset({"404", "NoSuchKey", "NotFound"})


def error_code(exc: BaseException) -> str:
    response = getattr(exc, "response", None) or {}
    error = response.get("Error") or {}
    return str(error.get("Code") or "")


def _is_not_found(exc: BaseException) -> bool:
    return error_code(exc) in NOT_FOUND_CODES


class S3Storage(Storage):
    """Certificate storage on an S3-compatible bucket.

    Every logical key maps to ``join_key(config.prefix, key)``; keys that would
    land outside the prefix raise ``InvalidKeyError``. The adapter holds
    no per-key state; the boto3 client is shared across threads as-is.

    Locking is a no-op: ``lock``/``unlock`` always succeed and give no
    inter-process exclusion (``provides_exclusion`` is False). A conditional
    write lock can replace them without changing the signatures.
    """

    provides_exclusion = False

    def __init__(self, client: Any, config: StorageConfig) -> None:
        self._client = client
        self._config = config

    @property
    def bucket(self) -> str:
        return self._config.bucket

    @property
    def prefix(self) -> str:
        return self._config.prefix

    @property
    def config(self) -> StorageConfig:
        return self._config

    def physical_key(self, key: str) -> str:
        return resolve_key(self._config.prefix, key)

    def store(self, key: str, value: bytes, *, ctx: CallContext | None = None) -> None:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f"value must be bytes-like, got {type(value).__name__}")
        data = bytes(value)
        physical = self.physical_key(key)
        log_event(logger, "storage.store", key=key, size=len(data))
        _check(ctx, "store", key)

        try:
            self._client.put_object(
                Bucket=self._config.bucket,
                Key=physical,
                Body=data,
                ContentLength=len(data),
            )
        except (ClientError, BotoCoreError) as exc:
            raise BackendError("store", key, str(exc)) from exc

    def load(self, key: str, *, ctx: CallContext | None = None) -> bytes:
        physical = self.physical_key(key)
        log_event(logger, "storage.load", key=key)
        _check(ctx, "load", key)

        try:
            response = self._client.get_object(Bucket=self._config.bucket, Key=physical)
            with closing(response["Body"]) as body:
                data = body.read()
        except ClientError as exc:
            if _is_not_found(exc):
                raise KeyNotFoundError(key) from exc
            raise BackendError("load", key, str(exc)) from exc
        except BotoCoreError as exc:
            raise BackendError("load", key, str(exc)) from exc

        _check(ctx, "load", key)
        return data

    def delete(self, key: str, *, ctx: CallContext | None = None) -> None:
        physical = self.physical_key(key)
        log_event(logger, "storage.delete", key=key)
        _check(ctx, "delete", key)

        try:
            self._client.delete_object(Bucket=self._config.bucket, Key=physical)
        except ClientError as exc:
            if _is_not_found(exc):
                return
            raise BackendError("delete", key, str(exc)) from exc
        except BotoCoreError as exc:
            raise BackendError("delete", key, str(exc)) from exc

    def exists(self, key: str, *, ctx: CallContext | None = None) -> bool:
        # Any probe failure, transient ones included, reads as "absent".
        physical = self.physical_key(key)
        log_event(logger, "storage.exists", key=key)
        _check(ctx, "exists", key)
        return self._head(key, physical) is not None

    def list(
        self, prefix: str, recursive: bool = True, *, ctx: CallContext | None = None
    ) -> list[str]:
        namespace = namespace_prefix(self._config.prefix, prefix)
        log_event(logger, "storage.list", prefix=prefix, recursive=recursive)
        _check(ctx, "list", prefix)

        keys: list[str] = []
        try:
            paginator = self._client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self._config.bucket, Prefix=namespace):
                _check(ctx, "list", prefix)
                for obj in page.get("Contents", []) or []:
                    physical = obj.get("Key")
                    if not physical or not physical.startswith(namespace):
                        continue
                    if not recursive and not is_direct_child(namespace, physical):
                        continue
                    keys.append(strip_prefix(self._config.prefix, physical))
        except (ClientError, BotoCoreError) as exc:
            raise BackendError("list", prefix, str(exc)) from exc

        log_event(logger, "storage.list.done", prefix=prefix, key_count=len(keys))
        return sorted(keys)

    def stat(self, key: str, *, ctx: CallContext | None = None) -> KeyInfo:
        physical = self.physical_key(key)
        log_event(logger, "storage.stat", key=key)
        _check(ctx, "stat", key)

        head = self._head(key, physical)
        if head is None:
            return KeyInfo.zero()

        return KeyInfo(
            key=physical,
            modified=head.get("LastModified"),
            size=int(head.get("ContentLength") or 0),
            is_terminal=is_terminal(physical),
        )

    def lock(self, key: str, *, ctx: CallContext | None = None) -> None:
        log_event(logger, "storage.lock", level=logging.DEBUG, key=key, enforced=False)

    def unlock(self, key: str, *, ctx: CallContext | None = None) -> None:
        log_event(logger, "storage.unlock", level=logging.DEBUG, key=key, enforced=False)

    def describe(self) -> str:
        return f"S3 Storage Bucket: {self._config.bucket}, Prefix: {self._config.prefix}"

    def __str__(self) -> str:
        return self.describe()

    def __repr__(self) -> str:
        return f"S3Storage(bucket={self._config.bucket!r}, prefix={self._config.prefix!r})"

    def _head(self, key: str, physical: str) -> dict[str, Any] | None:
        try:
            return self._client.head_object(Bucket=self._config.bucket, Key=physical)
        except Exception as exc:  # noqa: BLE001
            log_event(
                logger,
                "storage.head.miss",
                level=logging.DEBUG,
                key=key,
                code=error_code(exc) or type(exc).__name__,
            )
            return None


def _check(ctx: CallContext | None, operation: str, key: str) -> None:
    if ctx is not None:
        ctx.check(operation, key)
