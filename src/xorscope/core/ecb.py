"""
ECB Detection and AES Helpers
Flags ciphertexts with repeated blocks and wraps AES-ECB for decryption

A block cipher in ECB mode maps identical plaintext blocks to identical
ciphertext blocks, so a repeated block in a multi-block ciphertext is
strong evidence of ECB.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List

from Crypto.Cipher import AES
from Crypto.Util.Padding import pad, unpad

from .errors import InvalidKeysize, PaddingError
from .transpose import chunk

AES_BLOCK_SIZE = AES.block_size


@dataclass
class EcbCandidate:
    """Ciphertext line that contains at least one repeated block"""
    line_number: int
    ciphertext: bytes
    repeated_blocks: int

    def to_dict(self) -> Dict:
        return {
            'line_number': self.line_number,
            'ciphertext_hex': self.ciphertext.hex(),
            'repeated_blocks': self.repeated_blocks,
        }


def _blocks(buf: bytes, block_size: int) -> List[bytes]:
    if block_size < 1:
        raise InvalidKeysize(f"Block size must be >= 1, got {block_size}")
    return chunk(buf, block_size, drop_partial=True)


def has_repeated_block(buf: bytes, block_size: int = AES_BLOCK_SIZE) -> bool:
    """
    True if any two complete blocks of buf are byte-for-byte identical

    A trailing partial block is ignored.
    """
    seen = set()
    for block in _blocks(buf, block_size):
        if block in seen:
            return True
        seen.add(block)
    return False


def count_repeated_blocks(buf: bytes, block_size: int = AES_BLOCK_SIZE) -> int:
    """Number of complete blocks that duplicate an earlier block"""
    blocks = _blocks(buf, block_size)
    return len(blocks) - len(set(blocks))


def detect_ecb_lines(lines: Iterable[bytes], block_size: int = AES_BLOCK_SIZE) -> List[EcbCandidate]:
    """
    Check each ciphertext line for repeated blocks

    Args:
        lines: Raw ciphertext per line
        block_size: Cipher block size in bytes

    Returns:
        EcbCandidate for every line with a repeat, in input order
    """
    candidates = []
    for line_number, ciphertext in enumerate(lines, start=1):
        repeats = count_repeated_blocks(ciphertext, block_size)
        if repeats > 0:
            candidates.append(EcbCandidate(
                line_number=line_number,
                ciphertext=ciphertext,
                repeated_blocks=repeats,
            ))
    return candidates


def aes_ecb_decrypt(key: bytes, ciphertext: bytes, strip_padding: bool = False) -> bytes:
    """
    Decrypt AES in ECB mode

    Args:
        key: 16, 24 or 32 byte AES key
        ciphertext: Multiple of the block size
        strip_padding: Remove PKCS#7 padding after decryption

    Returns:
        Plaintext bytes
    """
    plaintext = AES.new(key, AES.MODE_ECB).decrypt(ciphertext)
    if strip_padding:
        return pkcs7_unpad(plaintext, AES_BLOCK_SIZE)
    return plaintext


def aes_ecb_encrypt(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt PKCS#7-padded plaintext with AES in ECB mode"""
    return AES.new(key, AES.MODE_ECB).encrypt(pkcs7_pad(plaintext, AES_BLOCK_SIZE))


def pkcs7_pad(data: bytes, block_size: int = AES_BLOCK_SIZE) -> bytes:
    """Pad data to a multiple of block_size (a full block if already aligned)"""
    if not 1 <= block_size <= 255:
        raise InvalidKeysize(f"PKCS#7 block size must be 1-255, got {block_size}")
    return pad(data, block_size, style='pkcs7')


def pkcs7_unpad(data: bytes, block_size: int = AES_BLOCK_SIZE) -> bytes:
    """
    Strip PKCS#7 padding

    Raises:
        PaddingError: padding bytes are missing or inconsistent
    """
    try:
        return unpad(data, block_size, style='pkcs7')
    except ValueError as e:
        raise PaddingError(str(e)) from e
