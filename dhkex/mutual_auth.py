"""Mutual authentication of ephemeral public keys with long-term signing keys."""

from __future__ import annotations

import os
import socket
import sys

from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import dsa, ec, padding, rsa

_LEN_BYTES = 2
_MAX_SIG_LEN = (1 << 16) - 1


class AuthenticationError(Exception):
    """Raised when keys cannot be loaded or the peer fails to authenticate."""


def _read_file(path: str | os.PathLike, what: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as exc:
        raise AuthenticationError(
            f"cannot open {what} key {os.fspath(path)!r}: {exc}"
        ) from exc


def load_private_key(path: str | os.PathLike):
    """Load an unencrypted PEM private key."""
    data = _read_file(path, "private")
    try:
        return serialization.load_pem_private_key(data, password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise AuthenticationError(f"priv load error: {exc}") from exc


def load_public_key(path: str | os.PathLike):
    """Load a PEM public key."""
    data = _read_file(path, "public")
    try:
        return serialization.load_pem_public_key(data)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise AuthenticationError(f"pub load error: {exc}") from exc


def sign_buffer(key, message: bytes) -> bytes:
    """Sign ``message`` with SHA-256 using an RSA, EC or DSA private key."""
    if isinstance(key, rsa.RSAPrivateKey):
        return key.sign(message, padding.PKCS1v15(), hashes.SHA256())
    if isinstance(key, ec.EllipticCurvePrivateKey):
        return key.sign(message, ec.ECDSA(hashes.SHA256()))
    if isinstance(key, dsa.DSAPrivateKey):
        return key.sign(message, hashes.SHA256())
    raise AuthenticationError(f"unsupported key type: {type(key).__name__}")


def verify_buffer(key, message: bytes, signature: bytes) -> bool:
    """Check a SHA-256 signature made by :func:`sign_buffer`."""
    try:
        if isinstance(key, rsa.RSAPublicKey):
            key.verify(signature, message, padding.PKCS1v15(), hashes.SHA256())
        elif isinstance(key, ec.EllipticCurvePublicKey):
            key.verify(signature, message, ec.ECDSA(hashes.SHA256()))
        elif isinstance(key, dsa.DSAPublicKey):
            key.verify(signature, message, hashes.SHA256())
        else:
            return False
    except InvalidSignature:
        return False
    return True


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            raise AuthenticationError(
                f"connection closed: expected {size} bytes, got {len(data)}"
            )
        data += chunk
    return bytes(data)


def _send_signature(sock: socket.socket, signature: bytes) -> None:
    if len(signature) > _MAX_SIG_LEN:
        raise AuthenticationError("signature too long to send")
    sock.sendall(len(signature).to_bytes(_LEN_BYTES, "big") + signature)


def _recv_signature(sock: socket.socket) -> bytes:
    size = int.from_bytes(_recv_exact(sock, _LEN_BYTES), "big")
    return _recv_exact(sock, size)


def mutual_authenticate(
    my_privkey_file: str | os.PathLike,
    peer_pubkey_file: str | os.PathLike,
    my_pub: bytes,
    peer_pub: bytes,
    sock: socket.socket,
    is_client: bool,
) -> bool:
    """Exchange signatures over the ephemeral public keys and verify the peer's.

    Each signature travels as a 2-byte big-endian length followed by its bytes.
    The client sends first; the server receives first. Returns True on success
    and raises :class:`AuthenticationError` otherwise.
    """
    my_priv = load_private_key(my_privkey_file)
    peer_long = load_public_key(peer_pubkey_file)

    if is_client:
        _send_signature(sock, sign_buffer(my_priv, my_pub))
        peer_sig = _recv_signature(sock)
    else:
        peer_sig = _recv_signature(sock)
        _send_signature(sock, sign_buffer(my_priv, my_pub))

    if not verify_buffer(peer_long, peer_pub, peer_sig):
        print("Mutual auth FAILED", file=sys.stderr)
        raise AuthenticationError("peer signature did not verify")
    print("Mutual auth success", file=sys.stderr)
    return True