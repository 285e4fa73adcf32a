"""
Breaker Presets
Predefined configuration sets for repeating-key XOR cryptanalysis

Instead of tuning the estimator by hand for every ciphertext, pick a preset
and override individual fields, either in code or from a YAML file.
"""

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml

# Upper bound on compared chunks; sampling n chunks costs n*(n-1)/2 distances per keysize
MAX_SAMPLE_BLOCKS_LIMIT = 64


@dataclass
class BreakerConfig:
    """Complete cryptanalysis configuration"""
    name: str = "balanced"
    description: str = "Reference behaviour: four sample blocks, single best keysize"

    # Keysize estimation
    max_keysize: int = 41                  # Exclusive upper bound on key lengths
    sample_blocks: Optional[int] = 4       # None = compare every complete chunk
    max_sample_blocks: int = 32            # Chunk cap when sample_blocks is None
    top_n: int = 1                         # Keysizes handed to the solver

    # Key assembly
    fold_repeated_keys: bool = True        # ICEICE -> ICE
    workers: int = 1                       # Threads for per-column solving

    # Input checks
    min_ciphertext_bytes: int = 8

    # ECB detection
    block_size: int = 16

    def validate(self) -> "BreakerConfig":
        """Raise ValueError on out-of-range settings, return self otherwise"""
        if self.max_keysize < 2:
            raise ValueError(f"max_keysize must be >= 2, got {self.max_keysize}")
        if self.top_n < 1:
            raise ValueError(f"top_n must be >= 1, got {self.top_n}")
        if self.sample_blocks is not None and not 2 <= self.sample_blocks <= MAX_SAMPLE_BLOCKS_LIMIT:
            raise ValueError(
                f"sample_blocks must be in [2, {MAX_SAMPLE_BLOCKS_LIMIT}] or null, got {self.sample_blocks}"
            )
        if not 2 <= self.max_sample_blocks <= MAX_SAMPLE_BLOCKS_LIMIT:
            raise ValueError(
                f"max_sample_blocks must be in [2, {MAX_SAMPLE_BLOCKS_LIMIT}], got {self.max_sample_blocks}"
            )
        if self.block_size < 1:
            raise ValueError(f"block_size must be >= 1, got {self.block_size}")
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")
        if self.min_ciphertext_bytes < 0:
            raise ValueError(f"min_ciphertext_bytes must be >= 0, got {self.min_ciphertext_bytes}")
        return self

    def to_dict(self) -> Dict:
        return asdict(self)


class PresetLibrary:
    """Library of predefined breaker presets"""

    @staticmethod
    def get_preset(name: str) -> Optional[BreakerConfig]:
        """Get preset by name"""
        presets = {
            "quick": PresetLibrary.quick(),
            "balanced": PresetLibrary.balanced(),
            "thorough": PresetLibrary.thorough(),
        }
        return presets.get(name.lower())

    @staticmethod
    def list_presets() -> List[str]:
        """List all available preset names"""
        return ["quick", "balanced", "thorough"]

    @staticmethod
    def quick() -> BreakerConfig:
        """
        Quick preset: short keys only

        Use when:
        - Triage of many small ciphertexts
        - Keys known to be short (passwords, words)
        """
        return BreakerConfig(
            name="quick",
            description="Keys up to 16 bytes, single best keysize",
            max_keysize=17,
            sample_blocks=4,
            top_n=1,
        )

    @staticmethod
    def balanced() -> BreakerConfig:
        """Balanced preset: the reference four-block estimator, best keysize only"""
        return BreakerConfig()

    @staticmethod
    def thorough() -> BreakerConfig:
        """
        Thorough preset: every complete chunk, five keysizes

        Use when:
        - Short ciphertexts where four sample blocks are too noisy
        - The balanced preset produced garbage plaintext
        """
        return BreakerConfig(
            name="thorough",
            description="All-chunk Hamming average, five best keysizes tried",
            max_keysize=41,
            sample_blocks=None,
            top_n=5,
            workers=4,
        )


def get_config(preset: str = "balanced", **overrides) -> BreakerConfig:
    """
    Build a validated config from a preset plus keyword overrides

    Raises:
        ValueError: unknown preset or field
    """
    config = PresetLibrary.get_preset(preset)
    if config is None:
        raise ValueError(f"Unknown preset: {preset}. Available: {PresetLibrary.list_presets()}")
    return apply_overrides(config, **overrides)


def apply_overrides(config: BreakerConfig, **overrides) -> BreakerConfig:
    """
    Copy config with keyword overrides applied and validated

    None values are ignored, except for sample_blocks where None selects
    all-chunk sampling.

    Raises:
        ValueError: unknown field or out-of-range value
    """
    known = {f.name for f in fields(BreakerConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown config field(s): {', '.join(unknown)}")

    overrides = {k: v for k, v in overrides.items() if v is not None or k == 'sample_blocks'}
    return replace(config, **overrides).validate()


def load_config(path: Union[str, Path]) -> BreakerConfig:
    """
    Load a config from a YAML file

    The file may name a base `preset` and override any BreakerConfig field:

        preset: thorough
        max_keysize: 60
        top_n: 3
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}")

    preset = data.pop('preset', 'balanced')
    return get_config(preset, **data)


def dump_config(config: BreakerConfig) -> str:
    """Serialize a config as YAML"""
    return yaml.dump(config.to_dict(), sort_keys=False, default_flow_style=False)
