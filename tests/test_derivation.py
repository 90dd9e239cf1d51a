import pytest

from solsign.crypto.bip39 import mnemonic_to_seed, normalize_mnemonic, validate_mnemonic
from solsign.crypto.derivation import (
    account_path,
    derive_candidates,
    seed_from,
    select_candidate,
)
from solsign.crypto.hd import HDNode, derive_keypair, parse_path
from solsign.crypto.keys import Keypair
from solsign.crypto.secret import SecretBytes
from solsign.exceptions import DerivationError

ABANDON = " ".join(["abandon"] * 11 + ["about"])

# BIP39 reference vector (passphrase "TREZOR")
ABANDON_TREZOR_SEED = bytes.fromhex(
    "c55257c360c07c72029aebc1b53c05ed0362ada38ead3e3e9efa3708e53495531"
    "f09a6987599d18264c1e1c92f2cf141630c7a3c4ab7c81b2f001698e7463b04"
)

# SLIP-0010 ed25519 test vector 1
SLIP10_SEED = bytes.fromhex("000102030405060708090a0b0c0d0e0f")


def test_bip39_seed_vector():
    with mnemonic_to_seed(ABANDON, "TREZOR") as seed:
        assert seed.reveal() == ABANDON_TREZOR_SEED


def test_mnemonic_normalization():
    assert normalize_mnemonic("  Abandon\tABANDON \n about ") == "abandon abandon about"
    with seed_from(ABANDON.upper().replace(" ", "   "), "TREZOR") as seed:
        assert seed.reveal() == ABANDON_TREZOR_SEED


@pytest.mark.parametrize("words, message", [
    ("", "Empty"),
    ("   ", "Empty"),
    (" ".join(["abandon"] * 12), "checksum"),
    (" ".join(["abandon"] * 11 + ["notaword"]), "word 12"),
    (" ".join(["abandon"] * 10 + ["about"]), "12, 15, 18, 21 or 24"),
])
def test_invalid_mnemonics(words, message):
    with pytest.raises(DerivationError, match=message):
        validate_mnemonic(words)


def test_invalid_mnemonic_error_hides_words():
    with pytest.raises(DerivationError) as info:
        seed_from(" ".join(["abandon"] * 11 + ["zebrafish"]), "")
    assert "zebrafish" not in str(info.value)


def test_slip10_master_vector():
    master = HDNode.from_seed(SecretBytes(SLIP10_SEED))
    assert master.private_key.reveal().hex() == (
        "2b4be7f19ee27bbf30c667b642d5f4aa69fd169872f8fc3059c08ebae2eb19e7"
    )
    assert master.chain_code.reveal().hex() == (
        "90046a93de5380a72b5e45010748567d5ea02bbf6522f979e05c0d8d8ca9fffb"
    )


def test_slip10_child_vector():
    master = HDNode.from_seed(SecretBytes(SLIP10_SEED))
    child = master.derive_path("m/0'")
    assert child.depth == 1
    assert child.private_key.reveal().hex() == (
        "68e0fe46dfb67e368c75379acec591dad19df3cde26e63b93a8e704f1dade7a3"
    )
    assert child.chain_code.reveal().hex() == (
        "8b59aa11380b624e81507a27fedda59fea6d0b779a778918a2fd3590e16e9c69"
    )
    
    keypair = derive_keypair(SecretBytes(SLIP10_SEED), "m/0'")
    assert keypair == Keypair.from_seed(child.private_key.reveal())


def test_parse_path():
    assert parse_path("m") == []
    assert parse_path("m/44'/501'/0h/0'") == [
        0x8000002C, 0x800001F5, 0x80000000, 0x80000000,
    ]
    for bad in ("44'/501'", "m/44'/501", "m/x'", "m/44'//0'"):
        with pytest.raises(DerivationError):
            parse_path(bad)


def test_derive_candidates_shape():
    with seed_from(ABANDON, "") as seed:
        candidates = derive_candidates(seed)
        direct = Keypair.from_seed(seed.reveal()[:32])
        
    assert [c.index for c in candidates] == list(range(10))
    assert candidates[0].path is None
    assert candidates[0].keypair == direct
    assert [c.path for c in candidates[1:]] == [account_path(a) for a in range(9)]
    assert candidates[1].path == "m/44'/501'/0'/0'"
    assert len({c.public_key for c in candidates}) == 10
    assert "no derivation path" in str(candidates[0])


def test_derive_candidates_is_deterministic():
    def public_keys(passphrase):
        with seed_from(ABANDON, passphrase) as seed:
            return [c.public_key for c in derive_candidates(seed)]
            
    assert public_keys("") == public_keys("")
    assert public_keys("") != public_keys("other")


def test_select_candidate_wipes_others():
    with seed_from(ABANDON, "") as seed:
        candidates = derive_candidates(seed)
        
    keypair = select_candidate(candidates, 3)
    assert keypair is candidates[3].keypair
    assert not keypair.is_wiped
    assert all(c.keypair.is_wiped for c in candidates if c.index != 3)


def test_select_none_wipes_all():
    with seed_from(ABANDON, "") as seed:
        candidates = derive_candidates(seed)
    assert select_candidate(candidates, None) is None
    assert all(c.keypair.is_wiped for c in candidates)


def test_select_out_of_range():
    with seed_from(ABANDON, "") as seed:
        candidates = derive_candidates(seed)
    with pytest.raises(DerivationError):
        select_candidate(candidates, 10)
    assert all(c.keypair.is_wiped for c in candidates)


def test_derive_candidates_known_addresses():
    # First account matches wallets using m/44'/501'/0'/0'; candidate 0
    # matches `solana-keygen recover` without a derivation path.
    with seed_from(ABANDON, "") as seed:
        candidates = derive_candidates(seed)
        
    assert str(candidates[0].public_key) == "EHqmfkN89RJ7Y33CXM6uCzhVeuywHoJXZZLszBHHZy7o"
    assert candidates[1].path == "m/44'/501'/0'/0'"
    assert str(candidates[1].public_key) == "HAgk14JpMQLgt6rVgv7cBQFJWFto5Dqxi472uT3DKpqk"
