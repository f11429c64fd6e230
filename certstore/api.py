from __future__ import annotations

import logging
from typing import Any

from certstore.config import S3ConnectionConfig, StorageConfig, s3_connection_config_from_env
from certstore.observability import log_event, storage_log_fields
from certstore.store.client import build_s3_client
from certstore.store.s3_store import S3Storage

logger = logging.getLogger(__name__)


def provision_storage(
    config: StorageConfig,
    *,
    connection: S3ConnectionConfig | None = None,
    client: Any | None = None,
) -> S3Storage:
    """Build a ready-to-use ``S3Storage``.

    An injected ``client`` is used as-is; otherwise one is built from ``connection``
    (or from ``S3_*`` environment variables when no connection is given).
    """

    if client is None:
        connection = connection or s3_connection_config_from_env()
        client = build_s3_client(connection, insecure=config.insecure)
        endpoint = connection.endpoint_url
    else:
        endpoint = None

    storage = S3Storage(client, config)
    log_event(
        logger,
        "storage.provision",
        **storage_log_fields(config.bucket, config.prefix),
        endpoint=endpoint,
        insecure=config.insecure or None,
    )
    return storage
