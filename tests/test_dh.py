import pytest

from dhkex.dh import DHParams, DHParamsError
from dhkex.keys import DHKey

SMALL = "q = 11\np = 23\ng = 5"


@pytest.fixture(scope="module")
def params():
    return DHParams.generate(32, 128)


def test_parse_small_group():
    params = DHParams.parse(SMALL)
    assert (params.q, params.p, params.g) == (11, 23, 5)
    assert params.p_len == 1 and params.q_len == 1


def test_str_round_trip():
    params = DHParams.parse(SMALL)
    assert DHParams.parse(str(params)) == params


@pytest.mark.parametrize(
    "text",
    [
        "garbage",
        "q = 9\np = 23\ng = 5",
        "q = 11\np = 21\ng = 5",
        "q = 7\np = 23\ng = 5",
        "q = 3\np = 19\ng = 2",
        "q = 11\np = 23\ng = 1",
    ],
)
def test_parse_rejects_invalid(text):
    with pytest.raises(DHParamsError):
        DHParams.parse(text)


def test_load_file(tmp_path):
    path = tmp_path / "params"
    path.write_text(SMALL + "\n")
    assert DHParams.load(path) == DHParams(11, 23, 5)


def test_load_missing_file(tmp_path):
    with pytest.raises(DHParamsError):
        DHParams.load(tmp_path / "missing")


def test_generate_invariants(params):
    q, p, g = params.q, params.p, params.g
    assert (p - 1) % q == 0
    assert ((p - 1) // q) % q != 0
    assert g != 1
    assert pow(g, q, p) == 1
    assert DHParams.parse(str(params)) == params


def test_generate_rejects_bad_sizes():
    with pytest.raises(ValueError):
        DHParams.generate(64, 64)


def test_keypair(params):
    sk, pk = params.generate_keypair()
    assert 0 <= sk < params.q
    assert pk == pow(params.g, sk, params.p)


def test_generate_key(params):
    key = params.generate_key("alice")
    assert key.name == "alice"
    assert key.pk == pow(params.g, key.sk, params.p)


@pytest.mark.parametrize("length", [0, 1, 32, 64, 65, 128, 200])
def test_dh_agreement(params, length):
    a, big_a = params.generate_keypair()
    b, big_b = params.generate_keypair()
    ka = params.final(a, big_a, big_b, length)
    kb = params.final(b, big_b, big_a, length)
    assert ka == kb
    assert len(ka) == length


def test_dh_prefix_consistency(params):
    a, big_a = params.generate_keypair()
    _, big_b = params.generate_keypair()
    long_key = params.final(a, big_a, big_b, 128)
    assert params.final(a, big_a, big_b, 32) == long_key[:32]
    assert long_key[:64] != long_key[64:]


def test_dh_different_peers_differ(params):
    a, big_a = params.generate_keypair()
    _, big_b = params.generate_keypair()
    _, big_c = params.generate_keypair()
    if big_b == big_c:
        big_c = pow(params.g, 1, params.p)
    assert params.final(a, big_a, big_b, 32) != params.final(a, big_a, big_c, 32)


@pytest.mark.parametrize("length", [0, 32, 128, 150])
def test_3dh_agreement(params, length):
    a, big_a = params.generate_keypair()
    x, big_x = params.generate_keypair()
    b, big_b = params.generate_keypair()
    y, big_y = params.generate_keypair()
    ka = params.final3(a, big_a, x, big_x, big_b, big_y, length)
    kb = params.final3(b, big_b, y, big_y, big_a, big_x, length)
    assert ka == kb
    assert len(ka) == length


def test_3dh_keys_matches_raw(params):
    alice, alice_eph = params.generate_key("alice"), params.generate_key()
    bob, bob_eph = params.generate_key("bob"), params.generate_key()
    for k in (alice, alice_eph):
        if k.sk == 0:
            k.sk, k.pk = 1, params.g
    ka = params.final3_keys(alice, alice_eph, bob, bob_eph, 64)
    raw = params.final3(
        alice.sk, alice.pk, alice_eph.sk, alice_eph.pk, bob.pk, bob_eph.pk, 64
    )
    assert ka == raw


def test_3dh_keys_requires_secret(params):
    pub = DHKey(pk=params.g)
    sec = DHKey(pk=params.g, sk=1)
    with pytest.raises(ValueError):
        params.final3_keys(pub, sec, pub, pub, 32)
    with pytest.raises(ValueError):
        params.final3_keys(sec, pub, pub, pub, 32)


def test_negative_length_rejected(params):
    a, big_a = params.generate_keypair()
    with pytest.raises(ValueError):
        params.final(a, big_a, big_a, -1)