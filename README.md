# dhkex

Finite-field Diffie-Hellman key exchange for Python. The package provides:

- loading, checking and generating group parameters `q`, `p`, `g`
  (`q` prime, `p` prime, `q` divides `p - 1` exactly once, `g` of order `q`);
- plain DH and triple DH (3DH), each followed by an HMAC-SHA512
  extract-and-expand key derivation that yields any number of bytes;
- a small text format for named key pairs, with the public half written
  to a separate `.pub` file, and a SHA-256 fingerprint of the public key;
- length-prefixed serialisation of big integers over file descriptors;
- mutual authentication of ephemeral public keys with long-term PEM keys
  over a connected socket;
- two demonstration commands.

## Installing

```
pip install .
```

For the test suite:

```
pip install .[test]
pytest
```

## Parameters (`dhkex.dh`)

A parameter file holds three decimal integers:

```
q = <decimal>
p = <decimal>
g = <decimal>
```

```python
from dhkex.dh import DHParams

params = DHParams.load("params")    # raises DHParamsError if the file is unreadable or a check fails
params = DHParams.parse(text)       # the same checks on a string
params = DHParams.generate(256, 2048)  # fresh parameters; slow for realistic sizes
```

`str(params)` gives the parameter file format, so generated parameters can
be saved with `Path("params").write_text(str(params))`. `DHParams` is a
frozen dataclass with fields `q`, `p`, `g` and the properties `q_bitlen`,
`p_bitlen`, `q_len` and `p_len` (lengths in bits and bytes).

## Key exchange

```python
a, big_a = params.generate_keypair()
b, big_b = params.generate_keypair()

k_alice = params.final(a, big_a, big_b, 128)
k_bob = params.final(b, big_b, big_a, 128)
assert k_alice == k_bob
```

Triple DH combines long-term keys (`a`/`A`, `b`/`B`) with ephemeral ones
(`x`/`X`, `y`/`Y`):

```python
k_alice = params.final3(a, big_a, x, big_x, big_b, big_y, 64)
k_bob = params.final3(b, big_b, y, big_y, big_a, big_x, 64)
```

`generate_key(name)` returns a `DHKey`; `final3_keys(sk_a, sk_x, pk_b, pk_y, length)`
takes `DHKey` objects and raises `ValueError` if either of its own secret
keys is missing.

The derivation uses the fixed, non-secret salt `HMAC_SALT` for the
extraction step, and the two relevant public keys, sorted ascending, as
context for the expansion, so both parties obtain the same bytes.

## Key files (`dhkex.keys`)

```python
from dhkex.keys import write_key, read_key

key = params.generate_key("alice")
write_key("alice", key)       # writes "alice" (mode 0600) and "alice.pub"
public = read_key("alice.pub")
print(public.has_secret(), public.public_hash())
```

A key file has three lines, `name:<name>`, `pk:<decimal>` and
`sk:<decimal>`; public key files carry `sk:0`. Names are cut to 128
characters and must not contain whitespace to be read back. `read_key`
raises `KeyFormatError` for a malformed file. `DHKey.shred()` clears the
name and both key values; `public_hash()` is the hex SHA-256 of the public
key's little-endian bytes.

## Integers and file descriptors (`dhkex.util`)

`serialize_int(fd, x)` writes a 4-byte little-endian length followed by
the little-endian bytes of `x` (zero is written as one zero byte) and
returns the number of bytes written; `deserialize_int(fd)` reads it back
and raises `SerializationError` for lengths over 1024 bytes.
`read_exact` and `write_all` retry interrupted reads and writes;
`read_exact` raises `EOFError` if the descriptor ends early. The module
also has `bytes_to_int`, `int_to_bytes` (least significant byte first)
and `is_probable_prime` (Miller-Rabin).

## Mutual authentication (`dhkex.mutual_auth`)

```python
from dhkex.mutual_auth import mutual_authenticate

mutual_authenticate("me.pem", "peer_pub.pem", my_pub, peer_pub, sock, is_client=True)
```

Each side signs its own ephemeral public key bytes with SHA-256 using an
RSA (PKCS#1 v1.5), EC (ECDSA) or DSA private key from an unencrypted PEM
file. The signatures are exchanged with a 2-byte big-endian length prefix,
the client sending first, and the peer's signature is checked against its
long-term PEM public key. The function returns `True` on success and
raises `AuthenticationError` when a key cannot be loaded, the connection
closes early or the signature does not verify. `sign_buffer`,
`verify_buffer`, `load_private_key` and `load_public_key` are available
on their own.

## Commands

```
dhkex-demo [params] [--length N]
```

Reads the parameter file (`params` in the current directory by default)
and runs a DH and a 3DH exchange between two parties, printing both derived
keys of `N` bytes (128 by default).

```
dhkex-examples
```

Shows AES-256-CTR encryption and byte-by-byte decryption with a fixed
dummy key and IV, SHA-256 and HMAC-SHA512 on a fixed test message.

## What the package does not do

It offers the building blocks of a secure conversation but no chat client
or server, and it does not encrypt or carry messages itself. It ships no
parameter file: supply one or make one with `DHParams.generate`.