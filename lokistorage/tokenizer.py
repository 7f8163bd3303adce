"""Tokens for structured metadata entries used by bloom filters."""

from __future__ import annotations

from collections.abc import Iterator


class StructuredMetadataTokenizer:
    """Produces plain and prefixed tokens for a name/value pair."""

    def __init__(self, prefix: str) -> None:
        self.prefix = prefix

    def tokens(self, name: str, value: str) -> Iterator[str]:
        combined = f"{name}={value}"
        p = self.prefix
        return iter((name, p + name, value, p + value, combined, p + combined))