"""Diffie-Hellman and 3DH key agreement with HKDF-style key derivation."""

from __future__ import annotations

import hashlib
import hmac
import os
import re
import secrets
from dataclasses import dataclass

from .keys import DHKey
from .util import bytes_to_int, int_to_bytes, is_probable_prime

HMAC_SALT = b"z3Dow}^Z]8Uu5>pr#;{QUs!133"
"""Fixed, non-secret salt for the extraction step."""

_MAC_LEN = 64  # SHA-512 output length

_PARAMS_RE = re.compile(
    r"q\s*=\s*([+-]?\d+)\s*p\s*=\s*([+-]?\d+)\s*g\s*=\s*([+-]?\d+)"
)


class DHParamsError(ValueError):
    """Raised when group parameters cannot be read or are invalid."""


def _byte_len(bits: int) -> int:
    return (bits + 7) // 8


def _expand(prk: bytes, context: bytes, length: int) -> bytes:
    """K(0) = HMAC(PRK, 0^64 || ctx || 0); K(i+1) = HMAC(PRK, K(i) || ctx || i+1)."""
    if length < 0:
        raise ValueError("key length must be non-negative")
    out = bytearray()
    block = bytes(_MAC_LEN)
    index = 0
    while True:
        block = hmac.new(
            prk, block + context + index.to_bytes(8, "big"), hashlib.sha512
        ).digest()
        out += block
        if len(out) >= length:
            return bytes(out[:length])
        index += 1


@dataclass(frozen=True)
class DHParams:
    """Group parameters: primes q and p with q | p-1, and g of order q."""

    q: int
    p: int
    g: int

    def __str__(self) -> str:
        return f"q = {self.q}\np = {self.p}\ng = {self.g}\n"

    @property
    def q_bitlen(self) -> int:
        return self.q.bit_length()

    @property
    def p_bitlen(self) -> int:
        return self.p.bit_length()

    @property
    def q_len(self) -> int:
        return _byte_len(self.q_bitlen)

    @property
    def p_len(self) -> int:
        return _byte_len(self.p_bitlen)

    @classmethod
    def parse(cls, text: str) -> DHParams:
        """Parse ``q = ...``, ``p = ...``, ``g = ...`` and check the group."""
        match = _PARAMS_RE.match(text)
        if match is None:
            raise DHParamsError("couldn't parse parameter file")
        q, p, g = (int(v) for v in match.groups())
        if not is_probable_prime(q):
            raise DHParamsError("q not prime!")
        if not is_probable_prime(p):
            raise DHParamsError("p not prime!")
        r = p - 1
        if r % q:
            raise DHParamsError("q does not divide (p-1)!")
        t = r // q
        if t % q == 0:
            raise DHParamsError("q^2 divides (p-1)!")
        if pow(g, t, p) == 1:
            raise DHParamsError("g does not generate subgroup of order q!")
        return cls(q, p, g)

    @classmethod
    def load(cls, path: str | os.PathLike) -> DHParams:
        """Read and check parameters from a file."""
        try:
            with open(path, encoding="utf-8") as f:
                text = f.read()
        except OSError as exc:
            raise DHParamsError(f"could not open file {os.fspath(path)!r}") from exc
        return cls.parse(text)

    @classmethod
    def generate(cls, qbits: int, pbits: int) -> DHParams:
        """Generate fresh parameters; expensive for realistic sizes."""
        q_len = _byte_len(qbits)
        p_len = _byte_len(pbits)
        r_len = p_len - q_len
        if qbits <= 0 or r_len <= 0:
            raise ValueError("p must be at least a byte longer than q")
        while True:
            q = bytes_to_int(secrets.token_bytes(q_len))
            while not is_probable_prime(q):
                q = bytes_to_int(secrets.token_bytes(q_len))
            r_bytes = bytearray(secrets.token_bytes(r_len))
            r_bytes[0] &= 0xFE  # least significant byte: make r even
            r = bytes_to_int(r_bytes)
            if r % q == 0:
                continue
            p = q * r + 1
            if is_probable_prime(p):
                break
        while True:
            t = bytes_to_int(secrets.token_bytes(q_len))
            if t == 0:
                continue
            g = pow(t, r, p)
            if g != 1:
                return cls(q, p, g)

    def generate_keypair(self) -> tuple[int, int]:
        """Return a random secret exponent and g to that power mod p."""
        a = bytes_to_int(secrets.token_bytes(self.q_len + 32))
        sk = a % self.q
        return sk, pow(self.g, sk, self.p)

    def generate_key(self, name: str = "default") -> DHKey:
        """Return a fresh named key pair."""
        sk, pk = self.generate_keypair()
        return DHKey(name=name, pk=pk, sk=sk)

    def final(self, sk_mine: int, pk_mine: int, pk_yours: int, length: int) -> bytes:
        """Derive ``length`` bytes of shared key from a DH exchange."""
        shared = pow(pk_yours, sk_mine, self.p)
        prk = hmac.new(HMAC_SALT, int_to_bytes(shared), hashlib.sha512).digest()
        low, high = sorted((pk_mine, pk_yours))
        context = int_to_bytes(low, self.p_len) + int_to_bytes(high, self.p_len)
        return _expand(prk, context, length)

    def final3(
        self,
        a: int,
        big_a: int,
        x: int,
        big_x: int,
        big_b: int,
        big_y: int,
        length: int,
    ) -> bytes:
        """Derive ``length`` bytes of shared key by triple Diffie-Hellman.

        ``a``/``big_a`` is the long-term pair, ``x``/``big_x`` the ephemeral
        pair, ``big_b``/``big_y`` the peer's long-term and ephemeral public keys.
        """
        p = self.p
        ay = pow(big_y, a, p)
        xy = pow(big_y, x, p)
        xb = pow(big_b, x, p)
        if big_a > big_b:
            ay, xb = xb, ay
        material = b"".join(int_to_bytes(v, self.p_len) for v in (ay, xy, xb))
        prk = hmac.new(HMAC_SALT, material, hashlib.sha512).digest()
        low, high = sorted((big_x, big_y))
        context = int_to_bytes(low, self.p_len) + int_to_bytes(high, self.p_len)
        return _expand(prk, context, length)

    def final3_keys(
        self, sk_a: DHKey, sk_x: DHKey, pk_b: DHKey, pk_y: DHKey, length: int
    ) -> bytes:
        """Same as :meth:`final3`, taking key objects."""
        if sk_a.sk <= 0 or sk_x.sk <= 0:
            raise ValueError("secret keys must be present")
        return self.final3(
            sk_a.sk, sk_a.pk, sk_x.sk, sk_x.pk, pk_b.pk, pk_y.pk, length
        )