from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config

from certstore.config import S3ConnectionConfig


def build_s3_client(
    connection: S3ConnectionConfig,
    *,
    insecure: bool = False,
    client_kwargs: dict[str, Any] | None = None,
):  # noqa: ANN201
    """Create a boto3 S3 client (AWS, MinIO or any S3-compatible endpoint).

    ``insecure`` skips certificate verification; whether TLS is used at all is
    ``connection.use_ssl``. Neither touches key handling.
    """

    config = Config(
        s3={"addressing_style": connection.url_style},
        connect_timeout=connection.connect_timeout,
        read_timeout=connection.read_timeout,
    )
    kwargs: dict[str, Any] = dict(client_kwargs or {})
    kwargs.update(
        dict(
            service_name="s3",
            endpoint_url=connection.endpoint_url,
            region_name=connection.region,
            use_ssl=connection.use_ssl,
            aws_access_key_id=connection.access_key,
            aws_secret_access_key=connection.secret_key,
            aws_session_token=connection.session_token,
            config=config,
        )
    )
    if insecure:
        kwargs["verify"] = False
    return boto3.client(**kwargs)
