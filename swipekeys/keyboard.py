"""
Key maps: calibrated key centers and extents, plus a default QWERTY layout.
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from .config import KeyboardConfig, DEFAULT_KEYBOARD_CONFIG
from .trajectory import Point
from .utils import resample_path


@dataclass(frozen=True)
class KeyRect:
    """Calibrated key: center (x, y) and extents."""
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x, self.y)


class KeyMap:
    """
    Read-only mapping from lowercase character to calibrated key geometry.

    Maps may be incomplete; lookups for unknown characters return None.
    """

    def __init__(self, keys: Optional[Mapping[str, KeyRect]] = None):
        self._keys: Dict[str, KeyRect] = {k.lower(): v for k, v in (keys or {}).items()}

    @classmethod
    def from_rects(cls, rects: Mapping[str, Tuple[float, float, float, float]]) -> 'KeyMap':
        """Build from bounding boxes given as (left, top, width, height)."""
        keys = {}
        for char, (left, top, width, height) in rects.items():
            keys[char] = KeyRect(x=left + width / 2, y=top + height / 2, width=width, height=height)
        return cls(keys)

    @classmethod
    def from_centers(cls, centers: Mapping[str, Tuple[float, float]], key_size: float = 0.0) -> 'KeyMap':
        return cls({c: KeyRect(x=x, y=y, width=key_size, height=key_size) for c, (x, y) in centers.items()})

    def get(self, char: str) -> Optional[KeyRect]:
        if not char:
            return None
        return self._keys.get(char.lower())

    def center(self, char: str) -> Optional[Tuple[float, float]]:
        rect = self.get(char)
        return rect.center if rect is not None else None

    def __contains__(self, char: str) -> bool:
        return self.get(char) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def key_pitch(self) -> float:
        """Mean key width, used to express distances in key units."""
        widths = [r.width for r in self._keys.values() if r.width > 0]
        return float(np.mean(widths)) if widths else 1.0

    def point_for_key(self, key: str, t: float) -> Optional[Point]:
        """Sample located at the calibrated center of a pressed key."""
        rect = self.get(key)
        if rect is None:
            return None
        return Point.from_key(key, rect.x, rect.y, t)

    def get_key_centers_for_word(self, word: str) -> np.ndarray:
        """Centers of the mapped letters of a word, shape (k, 2)."""
        centers = [self.center(letter) for letter in word.lower()]
        centers = [c for c in centers if c is not None]
        return np.array(centers, dtype=np.float64).reshape(-1, 2)

    def ghost_trajectory(self, word: str, start_t: float = 0.0, spacing: float = 0.05) -> List[Point]:
        """
        Synthetic trajectory through each mapped letter of a word.

        One point per letter at its key center, timestamps `spacing` apart.
        Letters without a calibrated key are skipped.
        """
        ghost = []
        for letter in word.lower():
            point = self.point_for_key(letter, start_t + len(ghost) * spacing)
            if point is not None:
                ghost.append(point)
        return ghost

    def word_template(self, word: str, num_points: int = 64) -> np.ndarray:
        """
        Word template: straight lines through the letter centers, resampled
        to num_points evenly spaced by arc length.

        Returns:
            Array of shape (num_points, 2); zeros if no letter is mapped
        """
        return resample_path(self.get_key_centers_for_word(word), num_points)


class QWERTYKeyboard:
    """
    Default QWERTY geometry in pixel space.

    Key (row r, column c) is centered at
    ((c + row_offset) * key_size + origin, r * key_size + origin).
    """

    def __init__(self, config: KeyboardConfig = DEFAULT_KEYBOARD_CONFIG):
        self.config = config
        self.key_centers = self._compute_key_centers()

    def _compute_key_centers(self) -> Dict[str, Tuple[float, float]]:
        key_centers = {}
        size, origin = self.config.key_size, self.config.origin
        for row_idx, (row, offset) in enumerate(zip(self.config.rows, self.config.row_offsets)):
            for key_idx, key in enumerate(row):
                key_centers[key.lower()] = ((key_idx + offset) * size + origin, row_idx * size + origin)
        return key_centers

    def get_key_center(self, letter: str) -> Optional[Tuple[float, float]]:
        return self.key_centers.get(letter.lower())

    def key_map(self) -> KeyMap:
        return KeyMap.from_centers(self.key_centers, key_size=self.config.key_size)

    def trajectory_for_keys(self, keys: str, start_t: float = 0.0, spacing: float = 0.05) -> List[Point]:
        """Samples at the centers of the given keys, e.g. a recorded key stream."""
        points = []
        for i, key in enumerate(keys):
            center = self.get_key_center(key)
            if center is None:
                points.append(Point(x=0.0, y=0.0, t=start_t + i * spacing))
            else:
                points.append(Point.from_key(key, center[0], center[1], start_t + i * spacing))
        return points
