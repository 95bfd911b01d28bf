"""
Guided training: the user swipes a chosen word several times and every
swipe's sequence is stored for that word.
"""

from typing import List

from .anchors import GestureSignature
from .pattern_cache import PatternCache


class PatternTrainer:
    """Records a fixed number of swipes for one target word."""

    def __init__(self, cache: PatternCache, target_word: str, repetitions: int = 3):
        target_word = target_word.strip()
        if not target_word:
            raise ValueError('training needs a target word')
        if repetitions < 1:
            raise ValueError('repetitions must be at least 1')
        self.cache = cache
        self.target_word = target_word
        self.repetitions = repetitions
        self.sequences: List[str] = []

    @property
    def step(self) -> int:
        return len(self.sequences)

    @property
    def done(self) -> bool:
        return self.step >= self.repetitions

    def record(self, signature: GestureSignature) -> bool:
        """
        Learn one training swipe.

        Returns:
            False if training is finished or the swipe had no keys
        """
        if self.done or not signature.sequence:
            return False
        self.cache.learn(signature.sequence, self.target_word)
        self.sequences.append(signature.sequence)
        return True
