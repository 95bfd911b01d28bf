"""
Contract for the word scorer that ranks a gesture's candidates.

The scorer is opaque to the session: it may be a hosted language model
behind HTTP or the local SHARK2 ranker. It receives the trajectory, the
anchors, the filtered candidates and the committed text as context.
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Tuple

from .trajectory import Point


class ScorerError(Exception):
    """The scorer failed or returned an unusable payload."""


@dataclass(frozen=True)
class ScoreRequest:
    trajectory: Tuple[Point, ...]
    anchors: Tuple[str, ...]
    candidates: Tuple[str, ...]
    context: str = ''
    sequence: str = ''

    def to_payload(self) -> dict:
        """JSON-ready request body for a remote scorer."""
        return {
            'sequence': self.sequence,
            'trajectory': [p.to_dict() for p in self.trajectory],
            'anchors': list(self.anchors),
            'candidates': list(self.candidates),
            'context': self.context,
        }


@dataclass(frozen=True)
class ScoreResult:
    """Ranked predictions, best first, plus an optional next-word hint."""
    predictions: Tuple[str, ...] = field(default_factory=tuple)
    next_word: Optional[str] = None

    @property
    def top(self) -> Optional[str]:
        return self.predictions[0] if self.predictions else None


class GestureScorer(Protocol):
    async def score(self, request: ScoreRequest) -> ScoreResult:
        ...


def _clean_word(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    word = value.strip()
    return word or None


def parse_score_payload(payload: Any) -> ScoreResult:
    """
    Validate a scorer response of the form
    {"predictions": ["best", ...], "next_word": "hint"}.

    Raises:
        ScorerError: If the payload is not an object or predictions is not a list
    """
    if not isinstance(payload, Mapping):
        raise ScorerError(f'expected a JSON object, got {type(payload).__name__}')

    predictions = payload.get('predictions')
    if not isinstance(predictions, Sequence) or isinstance(predictions, str):
        raise ScorerError('missing "predictions" list')

    words: List[str] = []
    for item in predictions:
        word = _clean_word(item)
        if word is not None and word not in words:
            words.append(word)

    return ScoreResult(predictions=tuple(words), next_word=_clean_word(payload.get('next_word')))
