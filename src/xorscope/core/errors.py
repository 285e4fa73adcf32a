"""
Error Taxonomy
Exceptions raised by the codec, XOR primitives and cryptanalysis modules
"""


class XorscopeError(Exception):
    """Base class for all Xorscope errors"""
    pass


class DecodeError(XorscopeError, ValueError):
    """Transport-encoded text (base64/hex) could not be decoded"""
    pass


class InvalidLength(DecodeError):
    """Encoded text length is not a multiple of the group size"""
    pass


class InvalidPadding(DecodeError):
    """Base64 group carries misplaced or too many '=' characters"""
    pass


class InvalidCharacter(DecodeError):
    """Encoded text contains a character outside the alphabet"""

    def __init__(self, character: str, position: int, alphabet: str = "base64"):
        self.character = character
        self.position = position
        self.alphabet = alphabet
        super().__init__(
            f"Invalid {alphabet} character {character!r} at position {position}"
        )


class LengthMismatch(XorscopeError, ValueError):
    """Fixed-length primitive received buffers of different lengths"""

    def __init__(self, left: int, right: int):
        self.left = left
        self.right = right
        super().__init__(f"Buffers are not the same length ({left} != {right})")


class InvalidKeysize(XorscopeError, ValueError):
    """Keysize or block size outside its valid domain"""
    pass


class EmptyKeyError(XorscopeError, ValueError):
    """Repeating-key XOR requires at least one key byte"""
    pass


class PaddingError(XorscopeError, ValueError):
    """PKCS#7 padding is malformed"""
    pass
