"""
Trajectory primitives and run-length segmentation of key samples.

A gesture arrives as a stream of Points, one per sample while a physical
key is held. Segmentation collapses consecutive samples on the same key
into KeySegments carrying timing and the last-seen position on that key.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class Point:
    """
    One timestamped sample of the gesture.

    Attributes:
        x, y: Position in key-map coordinates
        t: Timestamp (any monotonic unit, consistently used within a gesture)
        key: Normalized (lowercase) key under the sample, None if unmapped
        original_key: The literal key as pressed, used for tap fallback
    """
    x: float
    y: float
    t: float
    key: Optional[str] = None
    original_key: Optional[str] = None

    @classmethod
    def from_key(cls, key: str, x: float, y: float, t: float) -> 'Point':
        """Build a point for a pressed key, keeping the literal for tap insertion."""
        return cls(x=x, y=y, t=t, key=key.lower() if key else None, original_key=key or None)

    def to_dict(self) -> dict:
        return {'x': self.x, 'y': self.y, 't': self.t, 'key': self.key, 'original_key': self.original_key}


@dataclass
class KeySegment:
    """A maximal run of consecutive samples on the same key."""
    key: str
    start_t: float
    end_t: float
    sample_count: int
    last_x: float
    last_y: float

    @property
    def duration(self) -> float:
        return self.end_t - self.start_t


def segment_trajectory(points: Sequence[Point]) -> List[KeySegment]:
    """
    Collapse a point stream into consecutive same-key segments.

    Points without a key are skipped. A new segment starts whenever the
    (case-insensitive) key differs from the current segment's key;
    otherwise the current segment is extended and its position is
    overwritten with the latest sample.

    Args:
        points: Ordered samples of one gesture

    Returns:
        Segments in temporal order, each with sample_count >= 1
    """
    segments: List[KeySegment] = []
    current: Optional[KeySegment] = None

    for p in points:
        if not p.key:
            continue
        key = p.key.lower()

        if current is not None and current.key == key:
            current.end_t = p.t
            current.sample_count += 1
            current.last_x = p.x
            current.last_y = p.y
        else:
            current = KeySegment(key=key, start_t=p.t, end_t=p.t, sample_count=1, last_x=p.x, last_y=p.y)
            segments.append(current)

    return segments


def literal_text(points: Sequence[Point]) -> str:
    """Concatenate the literal keys of a tap sequence."""
    return ''.join(p.original_key for p in points if p.original_key)
