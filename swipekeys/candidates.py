"""
Candidate filtering: narrows a frequency-ordered dictionary to words that
are lexically and geometrically consistent with a gesture.

Checks run cheapest first and short-circuit:
1. Start/end letters equal the trajectory's first/last key
2. Word length is at least the number of anchors
3. Interior anchors occur in the word as an ordered subsequence
4. Every interior letter (except immediate repeats) has a key center
   within hit_radius of some trajectory point
"""

import numpy as np
from typing import Iterable, List, Sequence, Union

from scipy.spatial.distance import cdist

from .config import DecoderConfig, DEFAULT_DECODER_CONFIG
from .dictionary import Dictionary
from .keyboard import KeyMap
from .trajectory import Point


def contains_anchors_in_order(word: str, anchors: Sequence[str]) -> bool:
    """True if every anchor is found at or after the previous match."""
    cursor = 0
    for anchor in anchors:
        idx = word.find(anchor, cursor)
        if idx == -1:
            return False
        cursor = idx + 1
    return True


def required_letters(word: str) -> List[str]:
    """Interior letters of a word, minus letters repeating their predecessor."""
    return [word[i] for i in range(1, len(word) - 1) if word[i] != word[i - 1]]


class CandidateFilter:
    """
    Filters a dictionary down to plausible words for a gesture.

    Example usage:
        keyboard = QWERTYKeyboard()
        candidate_filter = CandidateFilter(
            dictionary=frequency_dictionary(5000),
            key_map=keyboard.key_map(),
        )
        words = candidate_filter.filter(trajectory, signature.anchors)
    """

    def __init__(
        self,
        dictionary: Union[Dictionary, Iterable[str]],
        key_map: KeyMap,
        config: DecoderConfig = DEFAULT_DECODER_CONFIG
    ):
        self.dictionary = dictionary if isinstance(dictionary, Dictionary) else Dictionary(dictionary)
        self.key_map = key_map
        self.config = config

    def passes_hit_test(self, word: str, trajectory_xy: np.ndarray) -> bool:
        """Every required interior letter is near some trajectory point."""
        centers = [self.key_map.center(letter) for letter in required_letters(word)]
        centers = [c for c in centers if c is not None]
        if not centers:
            return True
        # (n_letters, n_points) distances; each letter needs one close point
        dists = cdist(np.array(centers, dtype=np.float64), trajectory_xy, metric='euclidean')
        return bool(np.all(dists.min(axis=1) <= self.config.hit_radius))

    def filter(self, trajectory: Sequence[Point], anchors: Sequence[str]) -> List[str]:
        """
        Candidate words for a gesture, in dictionary order.

        Args:
            trajectory: Raw samples of the gesture
            anchors: Signature anchors (first entry is the start key, last is the end key)

        Returns:
            At most config.max_candidates words; empty when the trajectory
            has fewer than two points or unresolved endpoints
        """
        if len(trajectory) < 2:
            return []
        start_key = trajectory[0].key
        end_key = trajectory[-1].key
        if not start_key or not end_key:
            return []
        start_key, end_key = start_key.lower(), end_key.lower()

        middle_anchors = list(anchors[1:-1])
        trajectory_xy = np.array([(p.x, p.y) for p in trajectory], dtype=np.float64)

        candidates = []
        for word in self.dictionary.words_between(start_key, end_key):
            if not (word.startswith(start_key) and word.endswith(end_key)):
                continue
            if len(word) < len(anchors):
                continue
            if not contains_anchors_in_order(word, middle_anchors):
                continue
            if not self.passes_hit_test(word, trajectory_xy):
                continue

            candidates.append(word)
            if len(candidates) >= self.config.max_candidates:
                break

        return candidates
