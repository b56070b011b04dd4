"""Diffie-Hellman and 3DH key exchange with key derivation, key files and mutual authentication."""

__version__ = "0.1.0"
__all__ = ["dh", "dh_example", "examples", "keys", "mutual_auth", "util"]