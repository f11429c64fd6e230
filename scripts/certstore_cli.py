from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

from certstore.api import provision_storage
from certstore.config import StorageConfig, load_storage_config, storage_config_from_mapping
from certstore.errors import (
    CertStoreError,
    ConfigurationError,
    InvalidKeyError,
    KeyNotFoundError,
)
from certstore.store import S3Storage

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_MISSING = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect certificate storage on S3.")
    parser.add_argument("--config", type=Path, default=None, help="YAML storage config")
    parser.add_argument("--bucket", type=str, default=os.getenv("CERTSTORE_S3_BUCKET"))
    parser.add_argument("--prefix", type=str, default=os.getenv("CERTSTORE_S3_PREFIX", ""))
    parser.add_argument("--insecure", action="store_true", default=False)
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    ls = sub.add_parser("ls", help="list keys under a prefix")
    ls.add_argument("prefix", nargs="?", default="")
    ls.add_argument("--non-recursive", action="store_true", help="direct children only")

    stat = sub.add_parser("stat", help="show key metadata")
    stat.add_argument("key")

    exists = sub.add_parser("exists", help="exit 0 when the key exists, 1 otherwise")
    exists.add_argument("key")

    get = sub.add_parser("get", help="print or save a stored value")
    get.add_argument("key")
    get.add_argument("--output", type=Path, default=None)

    put = sub.add_parser("put", help="store a local file under a key")
    put.add_argument("key")
    put.add_argument("path", type=Path)

    rm = sub.add_parser("rm", help="delete a key")
    rm.add_argument("key")
    return parser


def _storage_config(args: argparse.Namespace) -> StorageConfig:
    if args.config is not None:
        config = load_storage_config(args.config)
        if args.insecure and not config.insecure:
            return replace(config, insecure=True)
        return config
    return storage_config_from_mapping(
        {"bucket": args.bucket, "prefix": args.prefix, "insecure": args.insecure}
    )


def _run(storage: S3Storage, args: argparse.Namespace) -> int:
    if args.command == "ls":
        for key in storage.list(args.prefix, recursive=not args.non_recursive):
            print(key)
        return EXIT_OK

    if args.command == "stat":
        info = storage.stat(args.key)
        if info.is_zero:
            print(f"{args.key}: not found", file=sys.stderr)
            return EXIT_MISSING
        modified = info.modified.isoformat() if info.modified else "-"
        print(f"key={info.key} size={info.size} modified={modified} terminal={info.is_terminal}")
        return EXIT_OK

    if args.command == "exists":
        return EXIT_OK if storage.exists(args.key) else EXIT_MISSING

    if args.command == "get":
        data = storage.load(args.key)
        if args.output is not None:
            args.output.write_bytes(data)
        else:
            sys.stdout.buffer.write(data)
            sys.stdout.flush()
        return EXIT_OK

    if args.command == "put":
        storage.store(args.key, args.path.read_bytes())
        return EXIT_OK

    if args.command == "rm":
        storage.delete(args.key)
        return EXIT_OK

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None, *, client: Any | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        storage = provision_storage(_storage_config(args), client=client)
    except ConfigurationError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    try:
        return _run(storage, args)
    except KeyNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_MISSING
    except InvalidKeyError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_CONFIG
    except CertStoreError:
        logger.exception("%s failed against %s", args.command, storage.describe())
        raise


if __name__ == "__main__":
    raise SystemExit(main())
