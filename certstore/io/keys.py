"""Logical/physical key helpers.

Every key sent to the object store is ``join_key(prefix, logical_key)``. Joining
uses path semantics: empty elements are skipped, duplicate separators and ``.``
segments collapse, and a trailing ``/`` on the last element is kept so that
namespace markers (``acme/``) survive the round trip.

``..`` segments are never resolved: a logical key that climbs out of the
configured prefix is rejected with ``InvalidKeyError``.
"""

from __future__ import annotations

import posixpath

from certstore.errors import InvalidKeyError

SEPARATOR = "/"
PARENT_SEGMENT = ".."


def join_key(*parts: str) -> str:
    elements = [part for part in parts if part]
    if not elements:
        return ""

    cleaned = posixpath.normpath(SEPARATOR.join(elements))
    if cleaned == ".":
        return ""
    if cleaned.startswith("//"):
        cleaned = SEPARATOR + cleaned.lstrip(SEPARATOR)
    if elements[-1].endswith(SEPARATOR) and not cleaned.endswith(SEPARATOR):
        cleaned += SEPARATOR
    return cleaned


def has_parent_segment(key: str) -> bool:
    return PARENT_SEGMENT in key.split(SEPARATOR)


def resolve_key(base: str, key: str) -> str:
    """Return the physical key for ``key`` under ``base``.

    Raises ``InvalidKeyError`` for keys with ``..`` segments and for keys that
    name nothing below ``base`` (empty, ``.``, ``/``).
    """

    if has_parent_segment(key):
        raise InvalidKeyError(key, "parent segments are not allowed")
    physical = join_key(base, key)
    head = base if not base or base.endswith(SEPARATOR) else base + SEPARATOR
    if not physical.startswith(head) or not physical[len(head) :].strip(SEPARATOR):
        raise InvalidKeyError(key, "key does not name an object below the prefix")
    return physical


def normalize_prefix(prefix: str | None) -> str:
    """Normalize a configured key prefix: cleaned, without trailing ``/``."""

    value = join_key((prefix or "").strip())
    if value == SEPARATOR:
        return value
    return value.rstrip(SEPARATOR)


def namespace_prefix(base: str, prefix: str) -> str:
    """Return the raw string prefix used to list ``prefix`` under ``base``.

    No directory inference: ``acme`` also matches ``acme2/...`` while ``acme/``
    matches only keys nested below ``acme``. An empty ``prefix`` lists the whole
    ``base`` namespace.
    """

    if has_parent_segment(prefix):
        raise InvalidKeyError(prefix, "parent segments are not allowed")
    if not prefix:
        if not base or base.endswith(SEPARATOR):
            return base
        return base + SEPARATOR
    return join_key(base, prefix)


def strip_prefix(base: str, physical_key: str) -> str:
    """Map a physical key back to the logical key it was derived from."""

    if not base:
        return physical_key
    head = base if base.endswith(SEPARATOR) else base + SEPARATOR
    if physical_key.startswith(head):
        return physical_key[len(head) :]
    return physical_key


def is_terminal(key: str) -> bool:
    return key.endswith(SEPARATOR)


def is_direct_child(namespace: str, physical_key: str) -> bool:
    """True when ``physical_key`` sits directly under ``namespace``.

    The remainder after the namespace may end with ``/`` (a nested namespace
    marker) but must not contain any other separator. A key equal to the
    namespace, or to its marker, is its own direct child, so a query naming an
    existing key lists it whether or not the listing is recursive.
    """

    if not physical_key.startswith(namespace):
        return False
    remainder = physical_key[len(namespace) :].lstrip(SEPARATOR).rstrip(SEPARATOR)
    return SEPARATOR not in remainder
