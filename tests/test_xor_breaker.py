"""
Tests for key assembly, decryption and the repeating-key XOR breaker
"""

import pytest

from xorscope.core.errors import InvalidKeysize
from xorscope.core.presets import BreakerConfig, PresetLibrary
from xorscope.core.xor_breaker import (
    KeyRecovery, XORBreaker, assemble_and_decrypt, minimal_period, recover_key
)
from xorscope.core.xor_ops import repeating_key_xor

from conftest import ICE_PLAINTEXT


class TestAssembleAndDecrypt:

    def test_ice_full_pipeline(self, ice_ciphertext):
        (recovery,) = assemble_and_decrypt(ice_ciphertext, [3])
        assert recovery.key == b"ICE"
        assert recovery.keysize == 3
        assert recovery.plaintext == ICE_PLAINTEXT

    def test_one_result_per_candidate_in_caller_order(self, ice_ciphertext):
        recoveries = assemble_and_decrypt(ice_ciphertext, [5, 3, 1])
        assert [r.keysize for r in recoveries] == [5, 3, 1]
        assert [len(r.key) for r in recoveries] == [5, 3, 1]

    def test_plaintext_is_repeating_key_xor(self, ice_ciphertext):
        for recovery in assemble_and_decrypt(ice_ciphertext, [2, 4]):
            assert recovery.plaintext == repeating_key_xor(ice_ciphertext, recovery.key)

    def test_rejects_zero_keysize(self, ice_ciphertext):
        with pytest.raises(InvalidKeysize):
            assemble_and_decrypt(ice_ciphertext, [0])

    def test_keysize_longer_than_buffer(self):
        (recovery,) = assemble_and_decrypt(b"ab", [4])
        # empty columns solve to key byte 0
        assert recovery.key[2:] == b"\x00\x00"
        assert len(recovery.plaintext) == 2


def test_recover_key_scores_in_offset_order(dickens):
    key, scores = recover_key(repeating_key_xor(dickens, b"YELLOW"), 6)
    assert key == b"YELLOW"
    assert len(scores) == 6
    assert all(score > 0 for score in scores)


@pytest.mark.parametrize("key, expected", [
    (b"ICEICE", b"ICE"),
    (b"ICEICEICE", b"ICE"),
    (b"AAAA", b"A"),
    (b"ICEIC", b"ICEIC"),
    (b"ABAB", b"AB"),
    (b"X", b"X"),
])
def test_minimal_period(key, expected):
    assert minimal_period(key) == expected


def test_key_recovery_properties():
    recovery = KeyRecovery(keysize=2, key=b"ab", plaintext=b"hi", column_scores=(0.1, 0.3))
    assert recovery.score == pytest.approx(0.2)
    assert recovery.key_text == "ab"
    assert recovery.plaintext_text == "hi"
    assert recovery.to_dict()['key_hex'] == "6162"
    assert KeyRecovery(keysize=1, key=b"a", plaintext=b"").score == 0.0


def test_key_recovery_exports_raw_plaintext():
    recovery = KeyRecovery(keysize=1, key=b"\xe9", plaintext=b"caf\xe9")
    data = recovery.to_dict()
    assert data['key'] == "\u00e9"
    assert data['plaintext'] == "caf\ufffd"
    assert bytes.fromhex(data['plaintext_hex']) == b"caf\xe9"


class TestXORBreaker:

    def test_breaks_yellow(self, dickens):
        breaker = XORBreaker()
        results = breaker.break_repeating_key_xor(repeating_key_xor(dickens, b"YELLOW"))
        assert results[0].key == b"YELLOW"
        assert results[0].plaintext == dickens

    def test_folds_multiple_of_key_length(self, dickens):
        # the reference estimator ranks 27 (three periods) first for this key
        breaker = XORBreaker()
        results = breaker.break_repeating_key_xor(repeating_key_xor(dickens, b"SUBMARINE"))
        assert results[0].key == b"SUBMARINE"
        assert results[0].keysize == 9
        assert results[0].plaintext == dickens

    def test_no_folding(self, dickens):
        config = BreakerConfig(fold_repeated_keys=False)
        results = XORBreaker(config).break_repeating_key_xor(repeating_key_xor(dickens, b"SUBMARINE"))
        assert results[0].key == b"SUBMARINE" * 3

    def test_top_n_deduplicates_keys(self, dickens):
        config = BreakerConfig(top_n=5)
        results = XORBreaker(config).break_repeating_key_xor(repeating_key_xor(dickens, b"YELLOW"))
        keys = [r.key for r in results]
        assert keys[0] == b"YELLOW"
        assert len(keys) == len(set(keys))

    def test_thorough_recovers_ice(self, ice_ciphertext):
        breaker = XORBreaker(PresetLibrary.thorough())
        results = breaker.break_repeating_key_xor(ice_ciphertext)
        assert b"ICE" in [r.key for r in results]
        ice = next(r for r in results if r.key == b"ICE")
        assert ice.plaintext == ICE_PLAINTEXT

    def test_threaded_matches_serial(self, dickens):
        ciphertext = repeating_key_xor(dickens, b"secret")
        serial = XORBreaker(BreakerConfig(top_n=3)).break_repeating_key_xor(ciphertext)
        threaded = XORBreaker(BreakerConfig(top_n=3, workers=4)).break_repeating_key_xor(ciphertext)
        assert serial == threaded
        assert serial[0].key == b"secret"

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            XORBreaker(BreakerConfig(top_n=0))
