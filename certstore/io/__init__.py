"""Key namespacing helpers."""

from certstore.io.keys import (
    SEPARATOR,
    has_parent_segment,
    is_direct_child,
    is_terminal,
    join_key,
    namespace_prefix,
    normalize_prefix,
    resolve_key,
    strip_prefix,
)

__all__ = [
    "SEPARATOR",
    "has_parent_segment",
    "is_direct_child",
    "is_terminal",
    "join_key",
    "namespace_prefix",
    "normalize_prefix",
    "resolve_key",
    "strip_prefix",
]
