"""
Frequency Analysis Module
Solves single-byte XOR by matching byte distributions against English

The scoring model is a dot product: for a candidate key byte j, each
observed ciphertext byte c contributes the English frequency of c ^ j. All
256 candidates are scored from one precomputed 256x256 table.

The dot product is a simple stand-in for a proper goodness-of-fit statistic
(chi-squared, n-gram log-likelihood). Swapping it only has to keep the
contract of best_key_byte(): highest score wins, lowest byte on ties.
"""

from collections import Counter
from dataclasses import dataclass
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Tuple

from .xor_ops import single_byte_xor

# Relative frequency of lowercase letters and space in English text
ENGLISH_FREQUENCIES = MappingProxyType({
    ord('a'): 0.08167, ord('b'): 0.01492, ord('c'): 0.02782, ord('d'): 0.04253,
    ord('e'): 0.12702, ord('f'): 0.02228, ord('g'): 0.02015, ord('h'): 0.06094,
    ord('i'): 0.06966, ord('j'): 0.00153, ord('k'): 0.00772, ord('l'): 0.04025,
    ord('m'): 0.02406, ord('n'): 0.06749, ord('o'): 0.07507, ord('p'): 0.01929,
    ord('q'): 0.00095, ord('r'): 0.05987, ord('s'): 0.06327, ord('t'): 0.09056,
    ord('u'): 0.02758, ord('v'): 0.00978, ord('w'): 0.02360, ord('x'): 0.00150,
    ord('y'): 0.01974, ord('z'): 0.00074, ord(' '): 0.13000,
})


@dataclass(frozen=True)
class XorKeyByte:
    """Best single-byte key for a column and its frequency score"""
    key: int
    score: float


@dataclass
class SingleByteXorResult:
    """Line most likely to be single-byte XOR encrypted English"""
    line_number: int
    ciphertext: bytes
    key: int
    score: float
    plaintext: bytes

    def to_dict(self) -> Dict:
        return {
            'line_number': self.line_number,
            'ciphertext_hex': self.ciphertext.hex(),
            'key': self.key,
            'key_char': chr(self.key),
            'score': round(self.score, 6),
            'plaintext': self.plaintext.decode('latin-1'),
        }


@lru_cache(maxsize=None)
def frequency_matrix() -> Tuple[Tuple[float, ...], ...]:
    """
    Build the 256x256 key-byte by ciphertext-byte frequency table

    Row j, column (source ^ j) holds the English frequency of `source`.
    Built once per process and returned as immutable tuples.
    """
    rows = []
    for j in range(256):
        row = [0.0] * 256
        for source, freq in ENGLISH_FREQUENCIES.items():
            row[source ^ j] = freq
        rows.append(tuple(row))
    return tuple(rows)


def byte_distribution(data: bytes) -> List[float]:
    """Relative frequency of every byte value in data (all zeros if empty)"""
    distribution = [0.0] * 256
    if not data:
        return distribution

    total = len(data)
    for value, count in Counter(data).items():
        distribution[value] = count / total
    return distribution


def score_key_bytes(data: bytes) -> List[float]:
    """Score all 256 candidate key bytes against data"""
    distribution = byte_distribution(data)
    observed = [(value, weight) for value, weight in enumerate(distribution) if weight]

    return [
        sum(row[value] * weight for value, weight in observed)
        for row in frequency_matrix()
    ]


def best_key_byte(column: bytes) -> XorKeyByte:
    """
    Find the XOR byte that makes column look most like English

    Scans candidates in ascending order and only replaces the incumbent on a
    strictly greater score, so ties resolve to the smallest byte and an empty
    column yields key 0 with score 0.0.
    """
    best_key = 0
    best_score = 0.0

    for key, score in enumerate(score_key_bytes(column)):
        if score > best_score:
            best_score = score
            best_key = key

    return XorKeyByte(key=best_key, score=best_score)


def english_score(text: bytes) -> float:
    """Mean English frequency of the bytes in an already-decrypted text"""
    if not text:
        return 0.0
    return sum(ENGLISH_FREQUENCIES.get(b, 0.0) for b in text) / len(text)


def detect_single_byte_xor(lines: Iterable[bytes]) -> Optional[SingleByteXorResult]:
    """
    Find the line most likely encrypted with single-byte XOR

    Every line is solved independently; the line whose best key byte scores
    highest overall wins (first line on ties).

    Args:
        lines: Ciphertext lines as raw bytes

    Returns:
        SingleByteXorResult, or None if no line produced a positive score
    """
    best: Optional[SingleByteXorResult] = None

    for line_number, ciphertext in enumerate(lines, start=1):
        candidate = best_key_byte(ciphertext)
        if best is None and candidate.score <= 0.0:
            continue
        if best is None or candidate.score > best.score:
            best = SingleByteXorResult(
                line_number=line_number,
                ciphertext=ciphertext,
                key=candidate.key,
                score=candidate.score,
                plaintext=single_byte_xor(ciphertext, candidate.key),
            )

    return best
