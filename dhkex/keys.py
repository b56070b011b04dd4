"""Diffie-Hellman key pairs and their on-disk text format.

The format is three lines::

    name:<name>
    pk:<decimal public key>
    sk:<decimal secret key, 0 for public keys>
"""

from __future__ import annotations

import hashlib
import os
import re
from dataclasses import dataclass

from .util import int_to_bytes

MAX_NAME = 128
PATH_MAX = 4096

_KEY_RE = re.compile(r"name:(\S+)\s*pk:\s*([+-]?\d+)\s*sk:\s*([+-]?\d+)")


class KeyFormatError(ValueError):
    """Raised when a key file cannot be parsed."""


@dataclass
class DHKey:
    """A named Diffie-Hellman key; ``sk`` is 0 when only the public part is known."""

    name: str = "default"
    pk: int = 0
    sk: int = 0

    def __post_init__(self) -> None:
        self.name = self.name[:MAX_NAME]

    def has_secret(self) -> bool:
        """Whether the secret exponent is present."""
        return self.sk != 0

    def shred(self) -> None:
        """Forget all key material."""
        self.sk = 0
        self.pk = 0
        self.name = ""

    def public_hash(self) -> str:
        """Hex SHA-256 of the public key's little-endian bytes."""
        return hashlib.sha256(int_to_bytes(self.pk)).hexdigest()


def _format(name: str, pk: int, sk: int) -> str:
    return f"name:{name}\npk:{pk}\nsk:{sk}\n"


def write_key(path: str | os.PathLike, key: DHKey) -> None:
    """Write ``path.pub`` and, if the secret is present, ``path`` (mode 0600)."""
    path = os.fspath(path)
    if len(path) > PATH_MAX - 4:
        raise ValueError(f"no room for .pub suffix in filename {path}")
    if key.has_secret():
        fd = os.open(path, os.O_RDWR | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(_format(key.name, key.pk, key.sk))
    with open(path + ".pub", "w", encoding="utf-8") as f:
        f.write(_format(key.name, key.pk, 0))


def read_key(path: str | os.PathLike) -> DHKey:
    """Read a public or secret key file."""
    with open(path, encoding="utf-8") as f:
        text = f.read()
    match = _KEY_RE.match(text)
    if match is None:
        raise KeyFormatError(f"malformed key file: {os.fspath(path)}")
    name, pk, sk = match.groups()
    return DHKey(name=name, pk=int(pk), sk=int(sk))