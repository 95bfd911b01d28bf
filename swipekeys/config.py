"""
Configuration for the swipekeys gesture decoder and typing session.

All timings are in seconds and all distances are in the calibrated key
map's coordinate space (screen pixels for a real keyboard).
"""

import os
from dataclasses import dataclass, fields
from typing import Tuple


def _env_overrides(cls, prefix: str) -> dict:
    """Collect SWIPEKEYS_* environment overrides for scalar dataclass fields."""
    overrides = {}
    for f in fields(cls):
        raw = os.environ.get(f'{prefix}{f.name.upper()}')
        if raw is None:
            continue
        if f.type in (bool, 'bool'):
            overrides[f.name] = raw.strip().lower() in ('1', 'true', 'yes', 'on')
        elif f.type in (int, 'int'):
            overrides[f.name] = int(raw)
        elif f.type in (float, 'float'):
            overrides[f.name] = float(raw)
        elif f.type in (str, 'str'):
            overrides[f.name] = raw
    return overrides


@dataclass
class KeyboardConfig:
    """Default QWERTY key map, used when no calibrated map is supplied."""
    rows: Tuple[str, ...] = ('qwertyuiop', 'asdfghjkl', 'zxcvbnm')
    row_offsets: Tuple[float, ...] = (0.0, 0.5, 1.0)  # Horizontal offset for each row, in keys

    # Key pitch and origin in pixels
    key_size: float = 40.0
    origin: float = 20.0

    @classmethod
    def from_env(cls, prefix: str = 'SWIPEKEYS_KEYBOARD_') -> 'KeyboardConfig':
        return cls(**_env_overrides(cls, prefix))


@dataclass
class DecoderConfig:
    """Signature extraction and candidate filtering parameters."""
    # Trajectories shorter than this are literal taps
    min_swipe_points: int = 4

    # Anchor heuristics
    dwell_factor: float = 1.3  # Dwell anchor if duration > factor * mean duration
    inflection_degrees: float = 45.0  # Turn anchor if direction changes by more than this

    # Candidate filter
    hit_radius: float = 80.0  # Max distance from a trajectory point to a letter's key center
    max_candidates: int = 20

    @classmethod
    def from_env(cls, prefix: str = 'SWIPEKEYS_DECODER_') -> 'DecoderConfig':
        return cls(**_env_overrides(cls, prefix))


@dataclass
class SessionConfig:
    """Typing session timing and key bindings."""
    idle_timeout: float = 0.4  # Pause that ends a gesture, measured from the latest point
    ghost_spacing: float = 0.05  # Time between ghost-path points
    scorer_timeout: float = 10.0

    commit_keys: Tuple[str, ...] = (' ', 'Enter')
    cancel_keys: Tuple[str, ...] = ('Escape',)
    backspace_keys: Tuple[str, ...] = ('Backspace',)

    # Row sweeps (e.g. 'asdfghjkl') become commands instead of words
    detect_row_sweeps: bool = False

    # Swipes recorded per word in training mode
    training_repetitions: int = 3

    @classmethod
    def from_env(cls, prefix: str = 'SWIPEKEYS_SESSION_') -> 'SessionConfig':
        return cls(**_env_overrides(cls, prefix))


@dataclass
class PatternCacheConfig:
    """Learned pattern persistence."""
    storage_key: str = 'gesture_patterns'

    @classmethod
    def from_env(cls, prefix: str = 'SWIPEKEYS_CACHE_') -> 'PatternCacheConfig':
        return cls(**_env_overrides(cls, prefix))


@dataclass
class Shark2Config:
    """Parameters for the local SHARK2 candidate ranker."""
    # Channel weights; sigma_loc is measured in key widths
    sigma_loc: float = 1.5
    sigma_shape: float = 0.1
    sigma_lm: float = 0.5

    num_points: int = 64  # Resampled points per gesture and template
    top_k: int = 6

    @classmethod
    def from_env(cls, prefix: str = 'SWIPEKEYS_SHARK2_') -> 'Shark2Config':
        return cls(**_env_overrides(cls, prefix))


# Default configurations
DEFAULT_KEYBOARD_CONFIG = KeyboardConfig()
DEFAULT_DECODER_CONFIG = DecoderConfig()
DEFAULT_SESSION_CONFIG = SessionConfig()
DEFAULT_PATTERN_CACHE_CONFIG = PatternCacheConfig()
DEFAULT_SHARK2_CONFIG = Shark2Config()
