"""
Repeating-key XOR breaker using Hamming-distance keysize estimation and
per-column frequency analysis
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import InvalidKeysize
from .frequency import best_key_byte, english_score
from .keysize import KeysizeCandidate, estimate_keysizes, select_keysizes
from .presets import BreakerConfig
from .transpose import transpose
from .xor_ops import repeating_key_xor


@dataclass(frozen=True)
class KeyRecovery:
    """Key recovered for one keysize and the plaintext it produces"""
    keysize: int
    key: bytes
    plaintext: bytes
    column_scores: Tuple[float, ...] = ()

    @property
    def score(self) -> float:
        """Mean frequency score over the key's columns"""
        if not self.column_scores:
            return 0.0
        return sum(self.column_scores) / len(self.column_scores)

    @property
    def key_text(self) -> str:
        return self.key.decode('latin-1')

    @property
    def plaintext_text(self) -> str:
        """Plaintext decoded as UTF-8 for display, invalid bytes replaced"""
        return self.plaintext.decode('utf-8', errors='replace')

    def to_dict(self) -> Dict:
        return {
            'keysize': self.keysize,
            'key': self.key_text,
            'key_hex': self.key.hex(),
            'score': round(self.score, 6),
            'english_score': round(english_score(self.plaintext), 6),
            'plaintext': self.plaintext_text,
            'plaintext_hex': self.plaintext.hex(),
        }


def recover_key(buf: bytes, keysize: int,
                executor: Optional[ThreadPoolExecutor] = None) -> Tuple[bytes, Tuple[float, ...]]:
    """
    Solve every transposed column for its single-byte key

    Args:
        buf: Ciphertext bytes
        keysize: Key length to assume
        executor: Optional pool to solve columns concurrently

    Returns:
        (key, per-column scores), both in offset order
    """
    columns = transpose(buf, keysize)

    if executor is not None:
        # map() yields in submission order, so offsets stay aligned
        solved = list(executor.map(best_key_byte, columns))
    else:
        solved = [best_key_byte(column) for column in columns]

    key = bytes(s.key for s in solved)
    return key, tuple(s.score for s in solved)


def assemble_and_decrypt(buf: bytes, keysize_candidates: Sequence[int],
                         executor: Optional[ThreadPoolExecutor] = None) -> List[KeyRecovery]:
    """
    Recover a key and plaintext for each candidate keysize

    One KeyRecovery per requested keysize, in the order given. Plaintext
    quality is not checked: a wrong keysize simply yields garbage.
    """
    recoveries = []
    for keysize in keysize_candidates:
        if keysize < 1:
            raise InvalidKeysize(f"Keysize must be >= 1, got {keysize}")
        key, scores = recover_key(buf, keysize, executor)
        recoveries.append(KeyRecovery(
            keysize=keysize,
            key=key,
            plaintext=repeating_key_xor(buf, key),
            column_scores=scores,
        ))
    return recoveries


def minimal_period(key: bytes) -> bytes:
    """Shortest prefix that repeats to form key (b"ICEICE" -> b"ICE")"""
    length = len(key)
    for period in range(1, length):
        if length % period == 0 and key[:period] * (length // period) == key:
            return key[:period]
    return key


class XORBreaker:
    """Break repeating-key XOR using keysize estimation and frequency analysis"""

    def __init__(self, config: Optional[BreakerConfig] = None):
        self.config = (config or BreakerConfig()).validate()

    def estimate(self, ciphertext: bytes) -> List[KeysizeCandidate]:
        """Rank candidate key lengths for ciphertext"""
        return estimate_keysizes(ciphertext, self.config.max_keysize,
                                 self.config.sample_blocks, self.config.max_sample_blocks)

    def break_repeating_key_xor(self, ciphertext: bytes,
                                candidates: Optional[List[KeysizeCandidate]] = None) -> List[KeyRecovery]:
        """
        Recover keys for the best `top_n` keysizes

        Keys that are whole repetitions of a shorter key are folded when
        `fold_repeated_keys` is set, and duplicate keys are dropped, so the
        result keeps estimator order without repeats.

        Args:
            ciphertext: Raw ciphertext bytes
            candidates: Precomputed estimate() output (optional)

        Returns:
            List of KeyRecovery, best-ranked keysize first
        """
        if candidates is None:
            candidates = self.estimate(ciphertext)
        keysizes = select_keysizes(candidates, self.config.top_n)

        if self.config.workers > 1:
            with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
                recoveries = assemble_and_decrypt(ciphertext, keysizes, executor)
        else:
            recoveries = assemble_and_decrypt(ciphertext, keysizes)

        results = []
        seen = set()
        for recovery in recoveries:
            if self.config.fold_repeated_keys:
                recovery = self._fold(recovery)
            if recovery.key in seen:
                continue
            seen.add(recovery.key)
            results.append(recovery)

        return results

    def _fold(self, recovery: KeyRecovery) -> KeyRecovery:
        period = minimal_period(recovery.key)
        if len(period) == len(recovery.key):
            return recovery

        repeats = len(recovery.key) // len(period)
        # Average the scores of columns that share a key byte
        scores = tuple(
            sum(recovery.column_scores[offset::len(period)]) / repeats
            for offset in range(len(period))
        )
        return KeyRecovery(
            keysize=len(period),
            key=period,
            plaintext=recovery.plaintext,
            column_scores=scores,
        )
