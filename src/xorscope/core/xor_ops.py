"""
XOR Primitives
Fixed-length, single-byte and repeating-key XOR over byte buffers
"""

from .errors import EmptyKeyError, LengthMismatch


def fixed_xor(left: bytes, right: bytes) -> bytes:
    """
    XOR two equal-length buffers

    Raises:
        LengthMismatch: buffers differ in length
    """
    if len(left) != len(right):
        raise LengthMismatch(len(left), len(right))
    return bytes(a ^ b for a, b in zip(left, right))


def single_byte_xor(data: bytes, key: int) -> bytes:
    """XOR every byte of data with one key byte"""
    return bytes(b ^ key for b in data)


def repeating_key_xor(data: bytes, key: bytes) -> bytes:
    """
    Encrypt or decrypt with a cyclically repeated key

    The operation is its own inverse: applying it twice with the same key
    returns the original data.

    Args:
        data: Plaintext or ciphertext bytes
        key: Non-empty key bytes

    Returns:
        data[i] ^ key[i % len(key)] for every position i
    """
    if not key:
        raise EmptyKeyError("Repeating-key XOR requires a non-empty key")

    key_len = len(key)
    return bytes(data[i] ^ key[i % key_len] for i in range(len(data)))
