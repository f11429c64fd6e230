from __future__ import annotations

from typing import Protocol

from certstore.context import CallContext
from certstore.models import KeyInfo


class Storage(Protocol):
    """Pluggable certificate storage contract.

    All methods take logical keys (e.g. ``acme/example.com/cert.pem``). Adapters own
    the mapping to their backend's physical keys and never interpret stored bytes.
    """

    def store(self, key: str, value: bytes, *, ctx: CallContext | None = None) -> None:
        """Write value to key, overwriting any existing object."""

    def load(self, key: str, *, ctx: CallContext | None = None) -> bytes:
        """Return the bytes at key; raise ``KeyNotFoundError`` when absent."""

    def delete(self, key: str, *, ctx: CallContext | None = None) -> None:
        """Remove key. Missing keys are not an error."""

    def exists(self, key: str, *, ctx: CallContext | None = None) -> bool:
        """Return True when key exists. Probe failures count as absent."""

    def list(
        self, prefix: str, recursive: bool = True, *, ctx: CallContext | None = None
    ) -> list[str]:
        """Return keys under prefix; direct children only when recursive is False."""

    def stat(self, key: str, *, ctx: CallContext | None = None) -> KeyInfo:
        """Return metadata for key, or the zero ``KeyInfo`` when it cannot be probed."""

    def lock(self, key: str, *, ctx: CallContext | None = None) -> None:
        """Acquire the named issuance lock."""

    def unlock(self, key: str, *, ctx: CallContext | None = None) -> None:
        """Release the named issuance lock."""

    def describe(self) -> str:
        """Human-readable description for diagnostics."""
