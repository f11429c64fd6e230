"""Stable public imports for `certstore`.

Prefer importing from these symbols when wiring the storage into a certificate manager.
Lower-level helpers should be imported from their submodules explicitly.
"""

from certstore.api import provision_storage
from certstore.config import (
    S3ConnectionConfig,
    StorageConfig,
    load_storage_config,
    s3_connection_config_from_env,
    storage_config_from_env,
    storage_config_from_mapping,
)
from certstore.context import CallContext
from certstore.errors import (
    BackendError,
    CertStoreError,
    ConfigurationError,
    InvalidKeyError,
    KeyNotFoundError,
    OperationCancelledError,
)
from certstore.models import KeyInfo
from certstore.storage import Storage
from certstore.store import S3Storage, build_s3_client

__all__ = [
    "BackendError",
    "CallContext",
    "CertStoreError",
    "ConfigurationError",
    "InvalidKeyError",
    "KeyInfo",
    "KeyNotFoundError",
    "OperationCancelledError",
    "S3ConnectionConfig",
    "S3Storage",
    "Storage",
    "StorageConfig",
    "build_s3_client",
    "load_storage_config",
    "provision_storage",
    "s3_connection_config_from_env",
    "storage_config_from_env",
    "storage_config_from_mapping",
]
