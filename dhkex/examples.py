"""Small demonstrations of hashing, HMAC and AES in counter mode."""

from __future__ import annotations

import hashlib
import hmac
import sys

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

MESSAGE = "this is a test message :D"
HMAC_KEY = b"asdfasdfasdfasdfasdfasdf"
SEPARATOR = "~~~~~~~~~~~~~~~~~~~~~~~"


def sha_example() -> str:
    """Print and return the hex SHA-256 of the demo message."""
    digest = hashlib.sha256(MESSAGE.encode()).hexdigest()
    print(digest)
    return digest


def hmac_example() -> str:
    """Print and return the hex HMAC-SHA512 of the demo message."""
    mac = hmac.new(HMAC_KEY, MESSAGE.encode(), hashlib.sha512).hexdigest()
    print(f'hmac-512("{MESSAGE}"):')
    print(mac)
    return mac


def ctr_example() -> tuple[bytes, bytes]:
    """Encrypt the demo message with AES-256-CTR, then decrypt it byte by byte.

    Uses the dummy key 0..31 and IV 0..15. Returns (ciphertext, plaintext).
    """
    key = bytes(range(32))
    iv = bytes(range(16))
    message = MESSAGE.encode()

    encryptor = Cipher(algorithms.AES(key), modes.CTR(iv)).encryptor()
    ciphertext = encryptor.update(message)
    print(f"ciphertext of length {len(ciphertext)}:")
    print(ciphertext.hex())

    # The context carries the counter forward between calls.
    decryptor = Cipher(algorithms.AES(key), modes.CTR(iv)).decryptor()
    plaintext = b"".join(decryptor.update(bytes([c])) for c in ciphertext)
    print(f"decrypted {len(message)} bytes:")
    print(plaintext.decode(errors="replace"))
    return ciphertext, plaintext


def main(argv: list[str] | None = None) -> int:
    """Run all demonstrations."""
    print(SEPARATOR)
    ctr_example()
    print(SEPARATOR)
    sha_example()
    print(SEPARATOR)
    hmac_example()
    return 0


if __name__ == "__main__":
    sys.exit(main())