"""
Base64 and Hexadecimal Codec
Strict transport decoding for ciphertext buffers

Unlike a lenient deobfuscation decoder, every function here either decodes
the whole input or raises a DecodeError subclass. Nothing is repaired or
skipped.
"""

import re
from typing import List

from .errors import InvalidCharacter, InvalidLength, InvalidPadding

BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
PAD = "="

# Character code -> sextet value, -1 for characters outside the alphabet
_INVALID = -1
_DECODE_TABLE: List[int] = [_INVALID] * 256
for _value, _char in enumerate(BASE64_ALPHABET):
    _DECODE_TABLE[ord(_char)] = _value
del _value, _char

HEX_DIGITS = frozenset('0123456789abcdefABCDEF')

SUPPORTED_ENCODINGS = ("base64", "hex", "raw")

_WHITESPACE = re.compile(r'\s')


def _sextet(text: str, position: int) -> int:
    char = text[position]
    code = ord(char)
    value = _DECODE_TABLE[code] if code < 256 else _INVALID
    if value == _INVALID:
        raise InvalidCharacter(char, position, "base64")
    return value


def base64_to_bytes(text: str) -> bytes:
    """
    Decode standard base64 text into raw bytes

    Each 4-character group yields 3, 2 or 1 bytes depending on whether it
    ends in 0, 1 or 2 '=' characters. Only the final group may be padded.

    Args:
        text: Base64 text without whitespace

    Returns:
        Decoded bytes

    Raises:
        InvalidLength: len(text) is not a multiple of 4
        InvalidPadding: 3+ padding characters, or padding in the wrong place
        InvalidCharacter: character outside A-Z, a-z, 0-9, '+', '/'
    """
    if len(text) % 4 != 0:
        raise InvalidLength(
            f"Invalid base64 string, length {len(text)} is not divisible by 4"
        )

    out = bytearray()
    last_group = len(text) - 4

    for start in range(0, len(text), 4):
        group = text[start:start + 4]
        padding = len(group) - len(group.rstrip(PAD))

        if padding > 2:
            raise InvalidPadding(
                f"Invalid base64 group {group!r} at position {start}: {padding} padding characters"
            )
        if padding and start != last_group:
            raise InvalidPadding(f"Padding before the final group at position {start}")
        if PAD in group[:4 - padding]:
            raise InvalidPadding(f"Misplaced padding in group {group!r} at position {start}")

        s0 = _sextet(text, start)
        s1 = _sextet(text, start + 1)
        out.append((s0 << 2 | s1 >> 4) & 0xFF)

        if padding < 2:
            s2 = _sextet(text, start + 2)
            out.append((s1 << 4 | s2 >> 2) & 0xFF)

            if padding == 0:
                s3 = _sextet(text, start + 3)
                out.append((s2 << 6 | s3) & 0xFF)

    return bytes(out)


def bytes_to_base64(data: bytes) -> str:
    """Encode raw bytes as padded base64 text"""
    chars = []

    for start in range(0, len(data), 3):
        block = data[start:start + 3]
        b0 = block[0]
        b1 = block[1] if len(block) > 1 else 0
        b2 = block[2] if len(block) > 2 else 0

        chars.append(BASE64_ALPHABET[b0 >> 2])
        chars.append(BASE64_ALPHABET[(b0 & 0b11) << 4 | b1 >> 4])
        chars.append(BASE64_ALPHABET[(b1 & 0b1111) << 2 | b2 >> 6] if len(block) > 1 else PAD)
        chars.append(BASE64_ALPHABET[b2 & 0b111111] if len(block) > 2 else PAD)

    return ''.join(chars)


def hex_to_bytes(text: str) -> bytes:
    """
    Decode hexadecimal text, most-significant nibble first

    Raises:
        InvalidLength: odd number of characters
        InvalidCharacter: non-hex digit
    """
    if len(text) % 2 != 0:
        raise InvalidLength("Invalid hex string, it should be even in length")

    for position, char in enumerate(text):
        if char not in HEX_DIGITS:
            raise InvalidCharacter(char, position, "hex")

    return bytes.fromhex(text)


def bytes_to_hex(data: bytes) -> str:
    """Encode bytes as lowercase hexadecimal"""
    return data.hex()


def strip_whitespace(text: str) -> str:
    """Remove newlines and other whitespace from wrapped ciphertext"""
    return _WHITESPACE.sub('', text)


def decode_transport(text: str, encoding: str = "base64") -> bytes:
    """
    Decode ciphertext text in the given transport encoding

    Args:
        text: Encoded ciphertext (line-wrapped input is accepted)
        encoding: One of "base64", "hex" or "raw"

    Returns:
        Raw ciphertext bytes
    """
    encoding = encoding.lower()

    if encoding == "base64":
        return base64_to_bytes(strip_whitespace(text))
    if encoding == "hex":
        return hex_to_bytes(strip_whitespace(text))
    if encoding == "raw":
        return text.encode('latin-1')

    raise ValueError(f"Unknown encoding: {encoding}. Available: {', '.join(SUPPORTED_ENCODINGS)}")
