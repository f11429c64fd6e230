"""Storage configuration (env-first, YAML file or mapping)."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from certstore.errors import ConfigurationError
from certstore.io.keys import normalize_prefix


@dataclass(frozen=True)
class StorageConfig:
    """Where the adapter keeps certificate material. Immutable once built."""

    bucket: str
    prefix: str = ""
    insecure: bool = False

    def __post_init__(self) -> None:
        bucket = (self.bucket or "").strip()
        if not bucket:
            raise ConfigurationError("bucket is required")
        object.__setattr__(self, "bucket", bucket)
        object.__setattr__(self, "prefix", normalize_prefix(self.prefix))


@dataclass(frozen=True)
class S3ConnectionConfig:
    """Client connection settings. Unset credentials fall back to boto3's default chain."""

    endpoint_url: str | None = None
    access_key: str | None = None
    secret_key: str | None = None
    region: str = "us-east-1"
    use_ssl: bool = True
    url_style: str = "path"
    session_token: str | None = None
    connect_timeout: float = 10.0
    read_timeout: float = 60.0


def _parse_bool(value: Any, *, default: bool | None = None) -> bool | None:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "y", "on"}:
        return True
    if text in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _require_bool(name: str, value: Any, *, default: bool) -> bool:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    parsed = _parse_bool(value)
    if parsed is None:
        raise ConfigurationError(f"{name} must be a boolean, got: {value!r}")
    return parsed


def _parse_float(name: str, value: str | None, *, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got: {value}") from exc
    if parsed <= 0:
        raise ConfigurationError(f"{name} must be > 0, got: {parsed}")
    return parsed


def storage_config_from_mapping(mapping: Mapping[str, Any]) -> StorageConfig:
    """Build a ``StorageConfig`` from ``bucket``/``prefix``/``insecure`` keys.

    Keys are matched case-insensitively; unknown keys are ignored.
    """

    values = {str(key).strip().lower(): value for key, value in mapping.items()}
    bucket = values.get("bucket")
    prefix = values.get("prefix")
    return StorageConfig(
        bucket=str(bucket or ""),
        prefix=str(prefix or ""),
        insecure=_require_bool("insecure", values.get("insecure"), default=False),
    )


def load_storage_config(path: str | Path) -> StorageConfig:
    """Load a ``StorageConfig`` from YAML.

    The document is either the mapping itself or nests it under ``storage``.
    """

    config_path = Path(path)
    try:
        with open(config_path, encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read storage config: {config_path}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in storage config: {config_path}") from exc

    if isinstance(data, dict) and isinstance(data.get("storage"), dict):
        data = data["storage"]
    if not isinstance(data, dict):
        raise ConfigurationError(f"Invalid storage config: {config_path}")
    return storage_config_from_mapping(data)


def storage_config_from_env(env: Mapping[str, str] | None = None) -> StorageConfig:
    env = dict(os.environ) if env is None else env
    return StorageConfig(
        bucket=str(env.get("CERTSTORE_S3_BUCKET") or ""),
        prefix=str(env.get("CERTSTORE_S3_PREFIX") or ""),
        insecure=_require_bool(
            "CERTSTORE_S3_INSECURE", env.get("CERTSTORE_S3_INSECURE"), default=False
        ),
    )


def s3_connection_config_from_env(env: Mapping[str, str] | None = None) -> S3ConnectionConfig:
    """Resolve client connection settings from ``S3_*`` env vars.

    Explicit credentials must be complete; with none set, boto3 resolves them itself.
    """

    env = dict(os.environ) if env is None else env
    endpoint = (env.get("S3_ENDPOINT_URL") or "").strip() or None
    access_key = env.get("S3_ACCESS_KEY_ID") or None
    secret_key = env.get("S3_SECRET_ACCESS_KEY") or None

    if bool(access_key) != bool(secret_key):
        raise ConfigurationError("S3_ACCESS_KEY_ID and S3_SECRET_ACCESS_KEY must be set together")

    use_ssl = _parse_bool(env.get("S3_USE_SSL"))
    if use_ssl is None:
        use_ssl = not (endpoint or "").startswith("http://")

    return S3ConnectionConfig(
        endpoint_url=endpoint,
        access_key=access_key,
        secret_key=secret_key,
        region=str(env.get("S3_REGION") or "us-east-1"),
        use_ssl=bool(use_ssl),
        url_style=str(env.get("S3_URL_STYLE") or "path"),
        session_token=str(env.get("S3_SESSION_TOKEN") or "") or None,
        connect_timeout=_parse_float(
            "S3_CONNECT_TIMEOUT", env.get("S3_CONNECT_TIMEOUT"), default=10.0
        ),
        read_timeout=_parse_float("S3_READ_TIMEOUT", env.get("S3_READ_TIMEOUT"), default=60.0),
    )
