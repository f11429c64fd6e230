from __future__ import annotations

import hashlib
import io
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from botocore.exceptions import ClientError


@dataclass
class ClientCall:
    name: str
    params: dict[str, Any]


@dataclass
class _StoredObject:
    data: bytes
    last_modified: datetime
    etag: str


@dataclass
class _Failure:
    operation: str
    code: str
    status: int
    remaining: int = 1


class _Body:
    """Minimal stand-in for botocore's ``StreamingBody``."""

    def __init__(self, data: bytes) -> None:
        self._stream = io.BytesIO(data)
        self.closed = False

    def read(self, amt: int | None = None) -> bytes:
        if self.closed:
            raise ValueError("I/O operation on closed body")
        return self._stream.read() if amt is None else self._stream.read(amt)

    def close(self) -> None:
        self.closed = True
        self._stream.close()


def _client_error(operation: str, code: str, message: str, status: int) -> ClientError:
    return ClientError(
        {
            "Error": {"Code": code, "Message": message},
            "ResponseMetadata": {"HTTPStatusCode": status},
        },
        operation,
    )


class _ListObjectsV2Paginator:
    def __init__(self, client: InMemoryS3Client) -> None:
        self._client = client

    def paginate(
        self,
        *,
        Bucket: str,
        Prefix: str = "",
        PaginationConfig: dict[str, Any] | None = None,
    ) -> Iterator[dict[str, Any]]:
        page_size = (PaginationConfig or {}).get("PageSize")
        token: str | None = None
        while True:
            params: dict[str, Any] = {"Bucket": Bucket, "Prefix": Prefix}
            if page_size:
                params["MaxKeys"] = page_size
            if token:
                params["ContinuationToken"] = token
            page = self._client.list_objects_v2(**params)
            yield page
            if not page.get("IsTruncated"):
                return
            token = page["NextContinuationToken"]


@dataclass
class InMemoryS3Client:
    """boto3-shaped S3 client that keeps objects in memory.

    Errors are raised as ``botocore.exceptions.ClientError`` with the codes S3
    uses (``NoSuchKey`` for GET, bare ``404`` for HEAD, ``NoSuchBucket``).
    ``page_size`` caps every ``list_objects_v2`` page so pagination can be exercised.
    Like a boto3 client, one instance may be shared between threads.
    """

    buckets: set[str] | None = None
    page_size: int = 1000
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(timezone.utc))
    ops: list[ClientCall] = field(default_factory=list)
    _objects: dict[tuple[str, str], _StoredObject] = field(default_factory=dict, repr=False)
    _failures: list[_Failure] = field(default_factory=list, repr=False)
    _lock: Any = field(default_factory=threading.RLock, repr=False)

    def fail_next(
        self, operation: str, *, code: str = "InternalError", status: int = 500, times: int = 1
    ) -> None:
        """Make the next ``times`` calls to ``operation`` raise a ``ClientError``."""

        self._failures.append(_Failure(operation, code, status, times))

    def keys(self, bucket: str) -> list[str]:
        with self._lock:
            return sorted(key for b, key in self._objects if b == bucket)

    def put_object(
        self, *, Bucket: str, Key: str, Body: Any = b"", ContentLength: int | None = None, **_: Any
    ) -> dict[str, Any]:
        self._enter("PutObject", Bucket=Bucket, Key=Key, ContentLength=ContentLength)
        data = Body.read() if hasattr(Body, "read") else bytes(Body)
        if ContentLength is not None and ContentLength != len(data):
            raise _client_error(
                "PutObject",
                "IncompleteBody",
                "You did not provide the number of bytes specified by the Content-Length",
                400,
            )
        etag = '"' + hashlib.md5(data).hexdigest() + '"'  # noqa: S324
        with self._lock:
            self._objects[(Bucket, Key)] = _StoredObject(data, self.clock(), etag)
        return {"ETag": etag}

    def get_object(self, *, Bucket: str, Key: str, **_: Any) -> dict[str, Any]:
        self._enter("GetObject", Bucket=Bucket, Key=Key)
        obj = self._objects.get((Bucket, Key))
        if obj is None:
            raise _client_error(
                "GetObject", "NoSuchKey", "The specified key does not exist.", 404
            )
        return {
            "Body": _Body(obj.data),
            "ContentLength": len(obj.data),
            "LastModified": obj.last_modified,
            "ETag": obj.etag,
        }

    def head_object(self, *, Bucket: str, Key: str, **_: Any) -> dict[str, Any]:
        self._enter("HeadObject", Bucket=Bucket, Key=Key)
        obj = self._objects.get((Bucket, Key))
        if obj is None:
            raise _client_error("HeadObject", "404", "Not Found", 404)
        return {
            "ContentLength": len(obj.data),
            "LastModified": obj.last_modified,
            "ETag": obj.etag,
        }

    def delete_object(self, *, Bucket: str, Key: str, **_: Any) -> dict[str, Any]:
        self._enter("DeleteObject", Bucket=Bucket, Key=Key)
        with self._lock:
            self._objects.pop((Bucket, Key), None)
        return {}

    def list_objects_v2(
        self,
        *,
        Bucket: str,
        Prefix: str = "",
        MaxKeys: int | None = None,
        ContinuationToken: str | None = None,
        **_: Any,
    ) -> dict[str, Any]:
        self._enter(
            "ListObjectsV2", Bucket=Bucket, Prefix=Prefix, ContinuationToken=ContinuationToken
        )
        limit = min(MaxKeys or self.page_size, self.page_size)
        with self._lock:
            matching = [key for key in self.keys(Bucket) if key.startswith(Prefix)]
            if ContinuationToken:
                matching = [key for key in matching if key > ContinuationToken]
            batch = matching[:limit]
            stored = {key: self._objects[(Bucket, key)] for key in batch}

        page: dict[str, Any] = {
            "Name": Bucket,
            "Prefix": Prefix,
            "KeyCount": len(batch),
            "MaxKeys": limit,
            "IsTruncated": len(matching) > limit,
        }
        if batch:
            page["Contents"] = [
                {
                    "Key": key,
                    "Size": len(stored[key].data),
                    "LastModified": stored[key].last_modified,
                }
                for key in batch
            ]
        if page["IsTruncated"]:
            page["NextContinuationToken"] = batch[-1]
        return page

    def get_paginator(self, operation_name: str) -> _ListObjectsV2Paginator:
        if operation_name != "list_objects_v2":
            raise NotImplementedError(f"paginator not supported: {operation_name}")
        return _ListObjectsV2Paginator(self)

    def _enter(self, operation: str, **params: Any) -> None:
        with self._lock:
            self.ops.append(ClientCall(operation, params))
            failure = next(
                (f for f in self._failures if f.operation == operation and f.remaining > 0),
                None,
            )
            if failure is not None:
                failure.remaining -= 1
        if failure is not None:
            raise _client_error(operation, failure.code, "Injected failure", failure.status)
        bucket = params.get("Bucket")
        if self.buckets is not None and bucket not in self.buckets:
            raise _client_error(
                operation, "NoSuchBucket", "The specified bucket does not exist", 404
            )
