"""Storage adapter implementations."""

from certstore.store.client import build_s3_client
from certstore.store.s3_store import S3Storage

__all__ = ["S3Storage", "build_s3_client"]
