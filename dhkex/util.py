"""Integer/byte conversions, primality testing and fd-based integer serialization."""

from __future__ import annotations

import os
import secrets

MPZ_MAX_LEN = 1024
"""Never read serialized integers longer than this many bytes."""

_SMALL_PRIMES = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47,
    53, 59, 61, 67, 71, 73, 79, 83, 89, 97,
)


class SerializationError(ValueError):
    """Raised when a serialized integer cannot be decoded."""


def bytes_to_int(data: bytes) -> int:
    """Read an unsigned integer stored least significant byte first."""
    return int.from_bytes(data, "little")


def int_to_bytes(x: int, length: int | None = None) -> bytes:
    """Write a non-negative integer least significant byte first.

    Without a length the shortest encoding is used; zero encodes as b"".
    With a length the result is zero-padded to exactly that many bytes.
    """
    if x < 0:
        raise ValueError("cannot encode a negative integer")
    if length is None:
        length = (x.bit_length() + 7) // 8
    try:
        return x.to_bytes(length, "little")
    except OverflowError as exc:
        raise ValueError(f"integer does not fit in {length} bytes") from exc


def is_probable_prime(n: int, rounds: int = 10) -> bool:
    """Trial division followed by Miller-Rabin with random bases."""
    if n < 2:
        return False
    for sp in _SMALL_PRIMES:
        if n % sp == 0:
            return n == sp
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    for _ in range(rounds):
        a = secrets.randbelow(n - 3) + 2
        x = pow(a, d, n)
        if x in (1, n - 1):
            continue
        for _ in range(s - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True


def read_exact(fd: int, size: int) -> bytes:
    """Read exactly ``size`` bytes from ``fd``, retrying interrupted reads."""
    chunks = bytearray()
    while len(chunks) < size:
        try:
            chunk = os.read(fd, size - len(chunks))
        except (InterruptedError, BlockingIOError):
            continue
        if not chunk:
            raise EOFError(f"expected {size} bytes, got {len(chunks)}")
        chunks += chunk
    return bytes(chunks)


def write_all(fd: int, data: bytes) -> None:
    """Write all of ``data`` to ``fd``, retrying interrupted writes."""
    view = memoryview(data)
    while view:
        try:
            written = os.write(fd, view)
        except (InterruptedError, BlockingIOError):
            continue
        view = view[written:]


def serialize_int(fd: int, x: int) -> int:
    """Write ``x`` as a 4-byte little-endian length and little-endian bytes.

    Returns the total number of bytes written.
    """
    body = int_to_bytes(x) or b"\x00"
    if len(body) >= 1 << 32:
        raise ValueError("integer too large to serialize")
    write_all(fd, len(body).to_bytes(4, "little"))
    write_all(fd, body)
    return len(body) + 4


def deserialize_int(fd: int) -> int:
    """Read an integer written by :func:`serialize_int`."""
    size = bytes_to_int(read_exact(fd, 4))
    if size > MPZ_MAX_LEN:
        raise SerializationError(f"serialized integer too long: {size} bytes")
    return bytes_to_int(read_exact(fd, size))