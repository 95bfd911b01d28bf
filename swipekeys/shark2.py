"""
SHARK2 ranking of gesture candidates.

Implements the multi-channel recognition system from:
"SHARK2: A Large Vocabulary Shorthand Writing System for Pen-based Computers" (UIST 2004)

Here the lexicon is the per-gesture candidate list produced by the
candidate filter, so SHARK2 acts as an offline stand-in for a hosted
scorer. Three channels are combined:
- Location channel: Distance from gesture to word template (key positions)
- Shape channel: Shape similarity after normalizing for position/scale
- Language model: Unigram word probabilities

Combined log score: -dist_loc^2 / 2*sigma_loc^2 - dist_shape^2 / 2*sigma_shape^2 + sigma_lm * log P(word)
"""

import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple

from wordfreq import zipf_frequency

from .config import Shark2Config, DEFAULT_SHARK2_CONFIG
from .keyboard import KeyMap
from .scorer import ScoreRequest, ScoreResult
from .trajectory import Point
from .utils import log, resample_path


def load_word_frequencies(lexicon: Sequence[str], lang: str = 'en') -> Dict[str, float]:
    """
    Unigram pseudo-probabilities from wordfreq's Zipf scale.

    10^(zipf - 8) gives ~1 for "the"; unknown words get 1e-9.
    """
    frequencies = {}
    for word in lexicon:
        freq = zipf_frequency(word.lower(), lang)
        frequencies[word] = 10 ** (freq - 8) if freq > 0 else 1e-9
    return frequencies


def normalize_shape_batch(templates: np.ndarray) -> np.ndarray:
    """
    Normalize shapes for a batch of gestures.

    Centers gestures at origin and scales by path length for
    position/scale-invariant shape comparison.

    Args:
        templates: Array of shape (n_gestures, seq_len, 2)

    Returns:
        Normalized templates of shape (n_gestures, seq_len, 2)
    """
    centered = templates - templates.mean(axis=1, keepdims=True)
    diffs = np.diff(centered, axis=1)
    path_lengths = np.sum(np.sqrt(np.sum(diffs**2, axis=2)), axis=1, keepdims=True)
    path_lengths = np.maximum(path_lengths, 1e-6)  # Avoid division by zero
    return centered / path_lengths[:, :, np.newaxis]


class Shark2Scorer:
    """
    Local scorer ranking the candidate list with SHARK2 channels.

    Example usage:
        scorer = Shark2Scorer(keyboard.key_map())
        result = await scorer.score(request)
        result.predictions  # best first
    """

    def __init__(
        self,
        key_map: KeyMap,
        config: Shark2Config = DEFAULT_SHARK2_CONFIG,
        word_frequencies: Optional[Dict[str, float]] = None
    ):
        self.key_map = key_map
        self.config = config
        self.word_frequencies = word_frequencies

    def _log_probs(self, words: Sequence[str]) -> np.ndarray:
        freqs = self.word_frequencies
        if freqs is None:
            freqs = load_word_frequencies(words)
        values = np.array([freqs.get(w, 1e-6) for w in words], dtype=np.float64)
        return np.log(values / values.sum())

    def compute_scores(
        self,
        trajectory: Sequence[Point],
        words: Sequence[str]
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Per-channel scores for each word.

        Returns:
            (location_scores, shape_scores, total_scores), each of shape (len(words),)
        """
        n = self.config.num_points
        scale = self.key_map.key_pitch

        # Work in key-width units so sigma_loc does not depend on screen size
        gesture_xy = np.array([(p.x, p.y) for p in trajectory], dtype=np.float64) / scale
        gesture = resample_path(gesture_xy, n)
        templates = np.stack([self.key_map.word_template(w, n) / scale for w in words], axis=0)

        loc_dists = np.sqrt(np.mean((templates - gesture)**2, axis=(1, 2)))
        loc_scores = -loc_dists**2 / (2 * self.config.sigma_loc**2)

        shape_dists = np.sqrt(np.mean(
            (normalize_shape_batch(templates) - normalize_shape_batch(gesture[np.newaxis]))**2,
            axis=(1, 2)
        ))
        shape_scores = -shape_dists**2 / (2 * self.config.sigma_shape**2)

        total_scores = loc_scores + shape_scores + self.config.sigma_lm * self._log_probs(words)
        return loc_scores, shape_scores, total_scores

    def rank(self, trajectory: Sequence[Point], words: Sequence[str]) -> List[Tuple[str, float]]:
        """Words sorted by total score, best first; ties keep dictionary order."""
        if not words or not trajectory:
            return []
        _, _, scores = self.compute_scores(trajectory, words)
        order = np.argsort(-scores, kind='stable')
        return [(words[i], float(scores[i])) for i in order]

    async def score(self, request: ScoreRequest) -> ScoreResult:
        ranked = self.rank(request.trajectory, request.candidates)
        if ranked:
            log(f'[Shark2] {request.sequence}: ' + ', '.join(f'{w}={s:.2f}' for w, s in ranked[:3]))
        return ScoreResult(predictions=tuple(w for w, _ in ranked[:self.config.top_k]))
