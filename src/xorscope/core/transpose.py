"""
Transposition Engine
Regroups a ciphertext by position modulo the key length so each column was
encrypted with a single key byte
"""

from typing import List, Sequence

from .errors import InvalidKeysize


def transpose(buf: bytes, keysize: int) -> List[bytes]:
    """
    Split buf into keysize columns

    Column `offset` holds buf[offset], buf[offset + keysize], ... in
    ascending index order. Columns are empty when keysize > len(buf).

    Raises:
        InvalidKeysize: keysize < 1
    """
    if keysize < 1:
        raise InvalidKeysize(f"Keysize must be >= 1, got {keysize}")
    return [bytes(buf[offset::keysize]) for offset in range(keysize)]


def interleave(columns: Sequence[bytes]) -> bytes:
    """Read columns back round-robin, undoing transpose()"""
    if not columns:
        return b""

    out = bytearray()
    for row in range(len(columns[0])):
        for column in columns:
            if row < len(column):
                out.append(column[row])
    return bytes(out)


def chunk(buf: bytes, size: int, drop_partial: bool = True) -> List[bytes]:
    """
    Cut buf into consecutive non-overlapping chunks of `size` bytes

    Args:
        buf: Input bytes
        size: Chunk length (>= 1)
        drop_partial: Discard a trailing chunk shorter than size

    Returns:
        List of chunks in buffer order
    """
    if size < 1:
        raise InvalidKeysize(f"Chunk size must be >= 1, got {size}")

    end = len(buf) - (len(buf) % size) if drop_partial else len(buf)
    return [bytes(buf[i:i + size]) for i in range(0, end, size)]
