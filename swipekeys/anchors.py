"""
Anchor extraction: turns key segments into a gesture signature.

Anchors are the keys of a gesture judged significant enough to constrain
dictionary search: the start key, keys held noticeably longer than
average (dwell), keys where the path turns sharply (inflection) and the
end key.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .config import DecoderConfig, DEFAULT_DECODER_CONFIG, DEFAULT_KEYBOARD_CONFIG
from .trajectory import KeySegment, Point
from .utils import angle_between


@dataclass(frozen=True)
class GestureSignature:
    """Collapsed key sequence plus ordered, de-duplicated anchor keys."""
    sequence: str
    anchors: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def start_key(self) -> Optional[str]:
        return self.sequence[0] if self.sequence else None

    @property
    def end_key(self) -> Optional[str]:
        return self.sequence[-1] if self.sequence else None


def dwell_keys(segments: Sequence[KeySegment], factor: float) -> List[str]:
    """Keys whose segment duration exceeds factor times the mean duration."""
    durations = [s.duration for s in segments]
    avg_duration = sum(durations) / len(durations) if durations else 0.0
    if avg_duration <= 0:
        return []
    return [s.key for s, d in zip(segments, durations) if d > factor * avg_duration]


def inflection_keys(segments: Sequence[KeySegment], threshold_degrees: float) -> List[str]:
    """Interior keys where the heading changes by more than the threshold."""
    keys = []
    for i in range(1, len(segments) - 1):
        prev, curr, nxt = segments[i - 1], segments[i], segments[i + 1]
        incoming = (curr.last_x - prev.last_x, curr.last_y - prev.last_y)
        outgoing = (nxt.last_x - curr.last_x, nxt.last_y - curr.last_y)
        if angle_between(incoming, outgoing) > threshold_degrees:
            keys.append(curr.key)
    return keys


def extract_signature(
    segments: Sequence[KeySegment],
    config: DecoderConfig = DEFAULT_DECODER_CONFIG
) -> GestureSignature:
    """
    Compute the signature of a segmented gesture.

    Anchor order is fixed: first key, dwell keys, inflection keys, last
    key; duplicates collapse to their first occurrence. The function is
    pure, so repeated calls on the same segments yield equal signatures.

    Args:
        segments: Output of segment_trajectory
        config: Dwell and inflection thresholds

    Returns:
        GestureSignature; empty when there are no segments
    """
    if not segments:
        return GestureSignature(sequence='', anchors=())

    ordered = (
        [segments[0].key]
        + dwell_keys(segments, config.dwell_factor)
        + inflection_keys(segments, config.inflection_degrees)
        + [segments[-1].key]
    )

    anchors: List[str] = []
    for key in ordered:
        if key and key not in anchors:
            anchors.append(key)

    sequence = ''.join(s.key for s in segments if s.key)
    return GestureSignature(sequence=sequence, anchors=tuple(anchors))


def is_tap(points: Sequence[Point], config: DecoderConfig = DEFAULT_DECODER_CONFIG) -> bool:
    """A trajectory too short to be a swipe is typed literally."""
    return 1 <= len(points) < config.min_swipe_points


def classify_row_sweep(
    sequence: str,
    rows: Sequence[str] = DEFAULT_KEYBOARD_CONFIG.rows,
    min_length: int = 5
) -> Optional[str]:
    """
    Detect a straight sweep along one keyboard row.

    Returns:
        'sweep_right' for a left-to-right run (e.g. 'asdfg'), 'sweep_left'
        for the reverse, None otherwise
    """
    if len(sequence) < min_length:
        return None
    for row in rows:
        if sequence in row:
            return 'sweep_right'
        if sequence in row[::-1]:
            return 'sweep_left'
    return None
