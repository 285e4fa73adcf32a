"""
Core cryptanalysis modules

- codec: strict base64 / hex transport decoding
- xor_ops: fixed, single-byte and repeating-key XOR
- keysize: Hamming-distance keysize estimation
- transpose: column transposition
- frequency: single-byte XOR solver
- xor_breaker: key assembly and decryption
- ecb: repeated-block detection and AES-ECB helpers
"""

from .codec import base64_to_bytes, bytes_to_base64, hex_to_bytes, bytes_to_hex, decode_transport
from .ecb import has_repeated_block, detect_ecb_lines, aes_ecb_decrypt
from .errors import (
    XorscopeError, DecodeError, InvalidLength, InvalidPadding, InvalidCharacter,
    LengthMismatch, InvalidKeysize, EmptyKeyError, PaddingError
)
from .frequency import best_key_byte, detect_single_byte_xor, XorKeyByte
from .keysize import estimate_keysizes, hamming_distance, KeysizeCandidate
from .transpose import transpose, interleave
from .xor_breaker import assemble_and_decrypt, KeyRecovery, XORBreaker
from .xor_ops import fixed_xor, repeating_key_xor, single_byte_xor

__all__ = [
    # Codec
    'base64_to_bytes',
    'bytes_to_base64',
    'hex_to_bytes',
    'bytes_to_hex',
    'decode_transport',

    # Errors
    'XorscopeError',
    'DecodeError',
    'InvalidLength',
    'InvalidPadding',
    'InvalidCharacter',
    'LengthMismatch',
    'InvalidKeysize',
    'EmptyKeyError',
    'PaddingError',

    # XOR
    'fixed_xor',
    'repeating_key_xor',
    'single_byte_xor',

    # Cryptanalysis
    'estimate_keysizes',
    'hamming_distance',
    'KeysizeCandidate',
    'transpose',
    'interleave',
    'best_key_byte',
    'detect_single_byte_xor',
    'XorKeyByte',
    'assemble_and_decrypt',
    'KeyRecovery',
    'XORBreaker',

    # ECB
    'has_repeated_block',
    'detect_ecb_lines',
    'aes_ecb_decrypt',
]
