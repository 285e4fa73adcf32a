"""
Shared fixtures for the Xorscope test suite
"""

import pytest

ICE_PLAINTEXT = b"Burning 'em, if you ain't quick and nimble\nI go crazy when I hear a cymbal"
ICE_CIPHERTEXT_HEX = (
    "0b3637272a2b2e63622c2e69692a23693a2a3c6324202d623d63343c2a26226324272765272"
    "a282b2f20430a652e2c652a3124333a653e2b2027630c692b20283165286326302e27282f"
)

DICKENS = (
    b"It was the best of times, it was the worst of times, it was the age of wisdom, "
    b"it was the age of foolishness, it was the epoch of belief, it was the epoch of "
    b"incredulity, it was the season of light, it was the season of darkness, it was "
    b"the spring of hope, it was the winter of despair, we had everything before us, "
    b"we had nothing before us, we were all going direct to heaven, we were all going "
    b"direct the other way. In short, the period was so far like the present period, "
    b"that some of its noisiest authorities insisted on its being received, for good "
    b"or for evil, in the superlative degree of comparison only."
)

COOKING_HEX = "1b37373331363f78151b7f2b783431333d78397828372d363c78373e783a393b3736"


@pytest.fixture
def ice_ciphertext():
    return bytes.fromhex(ICE_CIPHERTEXT_HEX)


@pytest.fixture
def dickens():
    return DICKENS
