import hashlib
import hmac

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from dhkex.examples import (
    HMAC_KEY,
    MESSAGE,
    ctr_example,
    hmac_example,
    main,
    sha_example,
)


def test_sha_example(capsys):
    digest = sha_example()
    assert digest == hashlib.sha256(b"this is a test message :D").hexdigest()
    assert capsys.readouterr().out == digest + "\n"


def test_hmac_example(capsys):
    mac = hmac_example()
    assert len(mac) == 128
    assert hmac.compare_digest(
        bytes.fromhex(mac),
        hmac.new(HMAC_KEY, MESSAGE.encode(), hashlib.sha512).digest(),
    )
    out = capsys.readouterr().out
    assert out.splitlines()[0] == 'hmac-512("this is a test message :D"):'


def test_ctr_round_trip(capsys):
    ciphertext, plaintext = ctr_example()
    assert plaintext == MESSAGE.encode()
    assert len(ciphertext) == len(MESSAGE)
    assert ciphertext != plaintext
    out = capsys.readouterr().out
    assert f"ciphertext of length {len(MESSAGE)}:" in out
    assert ciphertext.hex() in out
    assert f"decrypted {len(MESSAGE)} bytes:\n{MESSAGE}\n" in out


def test_ctr_matches_independent_decryption(capsys):
    ciphertext, _ = ctr_example()
    capsys.readouterr()
    decryptor = Cipher(
        algorithms.AES(bytes(range(32))), modes.CTR(bytes(range(16)))
    ).decryptor()
    assert decryptor.update(ciphertext) + decryptor.finalize() == MESSAGE.encode()


def test_ctr_is_deterministic(capsys):
    first, _ = ctr_example()
    second, _ = ctr_example()
    capsys.readouterr()
    assert first == second


def test_main_output(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert out.count("~~~~~~~~~~~~~~~~~~~~~~~") == 3
    assert hashlib.sha256(MESSAGE.encode()).hexdigest() in out
    assert out.index("ciphertext of length") < out.index("hmac-512")