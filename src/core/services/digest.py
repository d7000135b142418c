"""Digest computer.

The range service indexes SHA-1 digests, so that is the algorithm here.
SHA-1 is used for lookup compatibility only (`usedforsecurity=False`).
"""

from __future__ import annotations

import hashlib

from core.domain.errors import EncodingError
from core.domain.models import PREFIX_LENGTH


def _to_utf8(secret: bytes | str) -> bytes:
    if isinstance(secret, str):
        try:
            return secret.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise EncodingError(f"secret cannot be encoded as UTF-8 (offset {exc.start})") from exc
    try:
        secret.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(f"secret is not valid UTF-8 (offset {exc.start})") from exc
    return bytes(secret)


def digest(secret: bytes | str) -> str:
    """Return the uppercase hex SHA-1 digest of `secret`."""

    data = _to_utf8(secret)
    return hashlib.sha1(data, usedforsecurity=False).hexdigest().upper()


def range_prefix(value: str) -> str:
    return value[:PREFIX_LENGTH].upper()


def range_suffix(value: str) -> str:
    return value[PREFIX_LENGTH:].upper()


def split_digest(value: str) -> tuple[str, str]:
    """Partition a digest into (prefix, suffix); `prefix + suffix == value`."""

    return value[:PREFIX_LENGTH], value[PREFIX_LENGTH:]
