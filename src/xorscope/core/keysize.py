"""
Keysize Estimation Module
Ranks candidate repeating-key lengths by normalized Hamming distance

Bytes encrypted with the same key byte differ only where their plaintexts
differ, so chunks cut at the true key length look more alike than chunks cut
at any other length.
"""

from dataclasses import dataclass
from itertools import combinations
from typing import Dict, List, Optional

from .errors import InvalidKeysize, LengthMismatch
from .transpose import chunk

# Chunks compared when every chunk is sampled
MAX_SAMPLE_BLOCKS = 32

# Pairs (1,2),(2,3),(3,4),(4,1),(1,3),(2,4) of the four reference chunks
_REFERENCE_PAIRS = ((0, 1), (1, 2), (2, 3), (3, 0), (0, 2), (1, 3))


@dataclass(frozen=True)
class KeysizeCandidate:
    """Candidate key length and its normalized distance (lower is better)"""
    size: int
    score: float

    def to_dict(self) -> Dict:
        return {'size': self.size, 'score': round(self.score, 6)}


def hamming_distance(left: bytes, right: bytes) -> int:
    """
    Count differing bits between two equal-length buffers

    Raises:
        LengthMismatch: buffers differ in length
    """
    if len(left) != len(right):
        raise LengthMismatch(len(left), len(right))
    return sum(bin(a ^ b).count('1') for a, b in zip(left, right))


def keysize_score(buf: bytes, size: int, sample_blocks: Optional[int] = 4,
                  max_sample_blocks: int = MAX_SAMPLE_BLOCKS) -> Optional[float]:
    """
    Average bit distance per byte between chunks of `size` bytes

    Args:
        buf: Ciphertext bytes
        size: Candidate key length
        sample_blocks: Number of leading chunks to compare. 4 uses the six
            reference pairs; any other n >= 2 compares all pairs of the first
            n chunks; None compares all pairs of every complete chunk, up to
            max_sample_blocks of them.
        max_sample_blocks: Chunk cap for sample_blocks=None

    Returns:
        Normalized score, or None if buf is too short for the sample
    """
    if size < 1:
        raise InvalidKeysize(f"Keysize must be >= 1, got {size}")

    needed = 2 if sample_blocks is None else sample_blocks
    if len(buf) < needed * size:
        return None

    if sample_blocks is None:
        chunks = chunk(buf[:max_sample_blocks * size], size)
    else:
        chunks = chunk(buf[:sample_blocks * size], size)

    if sample_blocks == 4:
        pairs = _REFERENCE_PAIRS
    else:
        pairs = tuple(combinations(range(len(chunks)), 2))

    total = sum(hamming_distance(chunks[i], chunks[j]) for i, j in pairs)
    return total / (len(pairs) * size)


def estimate_keysizes(buf: bytes, max_keysize: int,
                      sample_blocks: Optional[int] = 4,
                      max_sample_blocks: int = MAX_SAMPLE_BLOCKS) -> List[KeysizeCandidate]:
    """
    Score every key length in [1, max_keysize)

    Lengths the buffer is too short to sample are left out. The result is
    sorted by ascending score; equal scores keep the smaller size first.

    Args:
        buf: Ciphertext bytes
        max_keysize: Exclusive upper bound on candidate lengths
        sample_blocks: See keysize_score()
        max_sample_blocks: See keysize_score()

    Returns:
        Ranked list of KeysizeCandidate
    """
    if max_keysize < 2:
        raise InvalidKeysize(f"max_keysize must be >= 2, got {max_keysize}")
    if sample_blocks is not None and sample_blocks < 2:
        raise InvalidKeysize(f"sample_blocks must be >= 2 or None, got {sample_blocks}")
    if max_sample_blocks < 2:
        raise InvalidKeysize(f"max_sample_blocks must be >= 2, got {max_sample_blocks}")

    candidates = []
    for size in range(1, max_keysize):
        score = keysize_score(buf, size, sample_blocks, max_sample_blocks)
        if score is not None:
            candidates.append(KeysizeCandidate(size=size, score=score))

    # sort() is stable and the scan is ascending, so ties keep the smaller size
    candidates.sort(key=lambda c: c.score)
    return candidates


def select_keysizes(candidates: List[KeysizeCandidate], top_n: int = 1) -> List[int]:
    """Take the `top_n` best key lengths from a ranked candidate list"""
    if top_n < 1:
        raise ValueError(f"top_n must be >= 1, got {top_n}")
    return [c.size for c in candidates[:top_n]]
