"""
Core Analysis Engine
Orchestrates decoding, keysize estimation, key recovery and ECB detection
"""

from typing import Dict, Iterable, List, Optional, Union
from pathlib import Path
from dataclasses import dataclass, field
import json

import yaml

from .codec import decode_transport, hex_to_bytes
from .ecb import EcbCandidate, aes_ecb_decrypt, detect_ecb_lines
from .frequency import SingleByteXorResult, detect_single_byte_xor
from .keysize import KeysizeCandidate
from .presets import BreakerConfig, dump_config
from .xor_breaker import KeyRecovery, XORBreaker


@dataclass
class BreakResult:
    """
    Complete results of a repeating-key XOR attack

    Recoveries are ordered by keysize rank, best first.
    """
    # Input metadata
    input_name: str = ""
    encoding: str = ""
    ciphertext_size: int = 0

    # Configuration used
    config: Optional[BreakerConfig] = None

    # Keysize estimation
    candidates: List[KeysizeCandidate] = field(default_factory=list)
    tried_keysizes: List[int] = field(default_factory=list)

    # Key recovery
    recoveries: List[KeyRecovery] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def best(self) -> Optional[KeyRecovery]:
        return self.recoveries[0] if self.recoveries else None

    def to_dict(self) -> Dict:
        """Convert all results to dictionary for JSON export"""
        return {
            'metadata': {
                'input': self.input_name,
                'encoding': self.encoding,
                'ciphertext_size': self.ciphertext_size,
                'preset': self.config.name if self.config else None,
            },
            'keysizes': {
                'tried': self.tried_keysizes,
                'ranking': [c.to_dict() for c in self.candidates[:20]]  # Limit for JSON size
            },
            'config': self.config.to_dict() if self.config else None,
            'recoveries': [r.to_dict() for r in self.recoveries],
            'warnings': self.warnings,
        }


class XorscopeEngine:
    """
    Main analysis engine that coordinates all modules

    Workflow:
    1. Decode transport encoding (base64/hex) into ciphertext bytes
    2. Rank candidate key lengths by normalized Hamming distance
    3. Transpose the ciphertext for the best keysizes
    4. Solve each column as single-byte XOR by frequency analysis
    5. Assemble keys and decrypt
    """

    def __init__(self, config: Optional[BreakerConfig] = None, verbose: bool = True):
        """
        Initialize engine

        Args:
            config: Breaker configuration (default: balanced preset)
            verbose: Print progress lines
        """
        self.config = (config or BreakerConfig()).validate()
        self.breaker = XORBreaker(self.config)
        self.verbose = verbose

    def _log(self, message: str):
        if self.verbose:
            print(message)

    def break_bytes(self, ciphertext: bytes, input_name: str = "bytes_input",
                    encoding: str = "raw") -> BreakResult:
        """
        Run the full attack on raw ciphertext bytes

        Args:
            ciphertext: Raw ciphertext
            input_name: Label stored in the result
            encoding: Transport encoding the bytes came from (metadata only)

        Returns:
            BreakResult with ranked keysizes and recovered keys
        """
        result = BreakResult(
            input_name=input_name,
            encoding=encoding,
            ciphertext_size=len(ciphertext),
            config=self.config,
        )

        if len(ciphertext) < self.config.min_ciphertext_bytes:
            warning = (f"Ciphertext too short ({len(ciphertext)} bytes, "
                       f"need {self.config.min_ciphertext_bytes})")
            result.warnings.append(warning)
            self._log(f"[!] {warning}")
            return result

        # Step 1: Estimate keysizes
        self._log(f"[*] Estimating key length (max {self.config.max_keysize - 1} bytes)...")
        result.candidates = self.breaker.estimate(ciphertext)
        if not result.candidates:
            warning = "Ciphertext too short to sample any key length"
            result.warnings.append(warning)
            self._log(f"[!] {warning}")
            return result

        result.tried_keysizes = [c.size for c in result.candidates[:self.config.top_n]]
        ranking = ', '.join(f"{c.size} ({c.score:.3f})" for c in result.candidates[:5])
        self._log(f"    Best keysizes: {ranking}")

        # Step 2: Recover keys
        self._log(f"[*] Solving {len(result.tried_keysizes)} keysize candidate(s)...")
        result.recoveries = self.breaker.break_repeating_key_xor(ciphertext, result.candidates)
        for recovery in result.recoveries:
            self._log(f"    Key ({recovery.keysize} bytes): {recovery.key_text!r}")

        self._log(f"[+] Analysis complete!")
        return result

    def break_text(self, text: str, encoding: str = "base64",
                   input_name: str = "text_input") -> BreakResult:
        """Decode transport-encoded ciphertext and break it"""
        self._log(f"[*] Decoding {encoding} ciphertext...")
        ciphertext = decode_transport(text, encoding)
        self._log(f"    Decoded {len(ciphertext)} bytes")
        return self.break_bytes(ciphertext, input_name=input_name, encoding=encoding)

    def break_file(self, file_path: Union[str, Path], encoding: str = "base64") -> BreakResult:
        """Read a ciphertext file and break it"""
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if encoding == "raw":
            ciphertext = file_path.read_bytes()
            return self.break_bytes(ciphertext, input_name=file_path.name, encoding=encoding)

        return self.break_text(file_path.read_text(), encoding=encoding, input_name=file_path.name)

    def detect_single_byte_lines(self, lines: Iterable[str]) -> Optional[SingleByteXorResult]:
        """Find the hex line most likely encrypted with single-byte XOR"""
        buffers = [hex_to_bytes(line.strip()) for line in lines if line.strip()]
        self._log(f"[*] Scoring {len(buffers)} lines for single-byte XOR...")

        found = detect_single_byte_xor(buffers)
        if found is not None:
            self._log(f"[+] Line {found.line_number}: key {found.key} ({chr(found.key)!r})")
        else:
            self._log(f"[!] No English-like line found")
        return found

    def detect_single_byte_file(self, file_path: Union[str, Path]) -> Optional[SingleByteXorResult]:
        return self.detect_single_byte_lines(self._read_lines(file_path))

    def detect_ecb_lines(self, lines: Iterable[str], encoding: str = "hex") -> List[EcbCandidate]:
        """Flag ciphertext lines with repeated blocks"""
        buffers = [decode_transport(line, encoding) for line in lines if line.strip()]
        self._log(f"[*] Checking {len(buffers)} lines for repeated {self.config.block_size}-byte blocks...")

        candidates = detect_ecb_lines(buffers, self.config.block_size)
        for candidate in candidates:
            self._log(f"    Line {candidate.line_number}: {candidate.repeated_blocks} repeated block(s)")
        if not candidates:
            self._log(f"    No repeated blocks found")
        return candidates

    def detect_ecb_file(self, file_path: Union[str, Path], encoding: str = "hex") -> List[EcbCandidate]:
        return self.detect_ecb_lines(self._read_lines(file_path), encoding)

    def decrypt_aes_file(self, file_path: Union[str, Path], key: bytes,
                         encoding: str = "base64", strip_padding: bool = True) -> bytes:
        """Decrypt an AES-ECB ciphertext file with a known key"""
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        ciphertext = decode_transport(file_path.read_text(), encoding)
        self._log(f"[*] Decrypting {len(ciphertext)} bytes with AES-{len(key) * 8}-ECB...")
        return aes_ecb_decrypt(key, ciphertext, strip_padding=strip_padding)

    def export_results(self, result: BreakResult, output_dir: str, base_name: str):
        """
        Export all results to files

        Args:
            result: BreakResult to export
            output_dir: Directory to write output files
            base_name: Base name for output files
        """
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        # Export JSON summary
        json_file = output_path / f"{base_name}.json"
        with open(json_file, 'w') as f:
            json.dump(result.to_dict(), f, indent=2)
        self._log(f"[+] JSON summary: {json_file}")

        # Export YAML summary
        yaml_file = output_path / f"{base_name}.yml"
        with open(yaml_file, 'w') as f:
            yaml.dump(result.to_dict(), f, sort_keys=False, default_flow_style=False)
        self._log(f"[+] YAML summary: {yaml_file}")

        # Export recovered plaintext
        if result.best is not None:
            plaintext_file = output_path / f"{base_name}.txt"
            with open(plaintext_file, 'wb') as f:
                f.write(result.best.plaintext)
            self._log(f"[+] Plaintext: {plaintext_file}")

        # Export the config so the run can be repeated with --config
        if result.config is not None:
            config_file = output_path / f"{base_name}_config.yml"
            with open(config_file, 'w') as f:
                f.write(dump_config(result.config))
            self._log(f"[+] Config: {config_file}")

    def export_ecb_results(self, candidates: List[EcbCandidate], output_dir: str, base_name: str):
        """Export ECB detections as JSON"""
        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        json_file = output_path / f"{base_name}.json"
        with open(json_file, 'w') as f:
            json.dump({
                'block_size': self.config.block_size,
                'detections': [c.to_dict() for c in candidates],
            }, f, indent=2)
        self._log(f"[+] JSON summary: {json_file}")

    @staticmethod
    def _read_lines(file_path: Union[str, Path]) -> List[str]:
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        return file_path.read_text().splitlines()
