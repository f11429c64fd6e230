"""Test doubles for exercising storage adapters without a live object store."""

from certstore.testing.memory_client import ClientCall, InMemoryS3Client

__all__ = ["ClientCall", "InMemoryS3Client"]
