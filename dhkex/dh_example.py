"""Demonstration of plain and triple Diffie-Hellman key agreement."""

from __future__ import annotations

import argparse
import sys

from .dh import DHParams, DHParamsError

DEFAULT_KEY_LEN = 128


def _hex_line(key: bytes) -> str:
    return "".join(f"{b:02x} " for b in key)


def _report(k_alice: bytes, k_bob: bytes) -> None:
    if k_alice == k_bob:
        print("Alice and Bob have the same key :D")
    else:
        print("T.T")
    print("Alice's key:")
    print(_hex_line(k_alice))
    print("Bob's key:")
    print(_hex_line(k_bob))


def demo_dh(params: DHParams, length: int = DEFAULT_KEY_LEN) -> tuple[bytes, bytes]:
    """Run a DH exchange between Alice and Bob, print and return both keys."""
    a, big_a = params.generate_keypair()
    b, big_b = params.generate_keypair()
    k_alice = params.final(a, big_a, big_b, length)
    k_bob = params.final(b, big_b, big_a, length)
    _report(k_alice, k_bob)
    return k_alice, k_bob


def demo_3dh(params: DHParams, length: int = DEFAULT_KEY_LEN) -> tuple[bytes, bytes]:
    """Run a 3DH exchange between Alice and Bob, print and return both keys."""
    a, big_a = params.generate_keypair()
    x, big_x = params.generate_keypair()
    b, big_b = params.generate_keypair()
    y, big_y = params.generate_keypair()
    k_alice = params.final3(a, big_a, x, big_x, big_b, big_y, length)
    k_bob = params.final3(b, big_b, y, big_y, big_a, big_x, length)
    _report(k_alice, k_bob)
    return k_alice, k_bob


def main(argv: list[str] | None = None) -> int:
    """Load parameters and run both demonstrations."""
    parser = argparse.ArgumentParser(description="Diffie-Hellman key exchange demo")
    parser.add_argument("params", nargs="?", default="params", help="parameter file")
    parser.add_argument(
        "--length", type=int, default=DEFAULT_KEY_LEN, help="derived key length"
    )
    args = parser.parse_args(argv)
    try:
        params = DHParams.load(args.params)
    except DHParamsError as exc:
        print(exc, file=sys.stderr)
        return 1
    print("Successfully read DH params.")
    print("...testing DH key exchange...")
    demo_dh(params, args.length)
    print("...testing 3DH key exchange...")
    demo_3dh(params, args.length)
    return 0


if __name__ == "__main__":
    sys.exit(main())