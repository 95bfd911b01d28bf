"""
Typing session: the state machine that turns key events into text.

Idle -> Capturing -> Resolving -> Idle, once per gesture. A gesture ends
when no key arrives for idle_timeout (measured from the latest point), or
immediately on a commit key. Resolution then:
- commits short trajectories (taps) literally,
- commits a learned word on an exact pattern-cache hit,
- otherwise filters dictionary candidates and asks the scorer to rank
  them, committing the top prediction when the scorer answers.

Scorer calls run as tasks, so capture of the next gesture can start at
once. Results of gestures superseded by a cancel or clear are dropped,
as are results that arrive after a later gesture was already applied.
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Set, Tuple, Union

from .anchors import GestureSignature, classify_row_sweep, extract_signature, is_tap
from .candidates import CandidateFilter
from .config import (
    DecoderConfig, SessionConfig, DEFAULT_DECODER_CONFIG, DEFAULT_SESSION_CONFIG, DEFAULT_KEYBOARD_CONFIG
)
from .dictionary import Dictionary
from .keyboard import KeyMap
from .pattern_cache import PatternCache
from .scorer import GestureScorer, ScoreRequest, ScoreResult
from .trajectory import Point, literal_text, segment_trajectory
from .training import PatternTrainer
from .utils import log


class SessionMode(str, Enum):
    IDLE = 'idle'
    CAPTURING = 'capturing'
    RESOLVING = 'resolving'


@dataclass(frozen=True)
class SessionEvent:
    """
    Notification for the display layer.

    kind is one of: commit, edit, clear, cancel, predictions, learn,
    trained, command.
    """
    kind: str
    word: Optional[str] = None
    sequence: Optional[str] = None
    predictions: Tuple[str, ...] = ()
    text: str = ''


@dataclass(frozen=True)
class SessionState:
    mode: SessionMode
    trajectory: Tuple[Point, ...] = field(default_factory=tuple)
    pending_word: Optional[str] = None
    pending_signature: Optional[str] = None
    last_activity_t: Optional[float] = None


def join_word(text: str, word: str) -> str:
    """Append a word, inserting one space unless text is empty or ends in whitespace."""
    if text and not text[-1].isspace():
        return f'{text} {word}'
    return text + word


class GestureSession:
    """
    One live gesture-typing session for one input surface.

    Example usage:
        keyboard = QWERTYKeyboard()
        session = GestureSession(
            key_map=keyboard.key_map(),
            dictionary=frequency_dictionary(5000),
            pattern_cache=PatternCache(FileStore('~/.swipekeys')),
            scorer=Shark2Scorer(keyboard.key_map()),
        )
        await session.pattern_cache.load()
        await session.run(key_events)  # asyncio.Queue of key strings
    """

    def __init__(
        self,
        key_map: KeyMap,
        dictionary: Union[Dictionary, List[str]],
        pattern_cache: Optional[PatternCache] = None,
        scorer: Optional[GestureScorer] = None,
        decoder_config: DecoderConfig = DEFAULT_DECODER_CONFIG,
        config: SessionConfig = DEFAULT_SESSION_CONFIG,
        clock: Callable[[], float] = time.monotonic
    ):
        self.key_map = key_map
        self.candidate_filter = CandidateFilter(dictionary, key_map, decoder_config)
        self.pattern_cache = pattern_cache if pattern_cache is not None else PatternCache()
        self.scorer = scorer
        self.decoder_config = decoder_config
        self.config = config
        self.clock = clock

        self.mode = SessionMode.IDLE
        self.trajectory: List[Point] = []
        self.pending_word: Optional[str] = None
        self.pending_signature: Optional[str] = None
        self.last_activity_t: Optional[float] = None
        self.deadline: Optional[float] = None

        self.committed_text = ''
        self.predictions: Tuple[str, ...] = ()
        self.candidates: Tuple[str, ...] = ()
        self.last_signature: Optional[GestureSignature] = None
        self.ghost_path: List[Point] = []
        self.trainer: Optional[PatternTrainer] = None

        self._listeners: List[Callable[[SessionEvent], None]] = []
        self._inflight: Set[asyncio.Task] = set()
        # Bumped by cancel/clear; results from an older epoch are stale
        self._epoch = 0
        self._gesture_seq = 0
        self._last_applied = 0
        # (gesture seq, separator) typed while that gesture was being scored
        self._held_separator: Optional[Tuple[int, str]] = None

    # ----- Observation -----

    @property
    def state(self) -> SessionState:
        return SessionState(
            mode=self.mode,
            trajectory=tuple(self.trajectory),
            pending_word=self.pending_word,
            pending_signature=self.pending_signature,
            last_activity_t=self.last_activity_t,
        )

    def subscribe(self, callback: Callable[[SessionEvent], None]) -> None:
        self._listeners.append(callback)

    def _emit(self, kind: str, **kwargs) -> None:
        event = SessionEvent(kind=kind, text=self.committed_text, **kwargs)
        for callback in self._listeners:
            callback(event)

    # ----- Input -----

    def feed(self, point: Point) -> None:
        """
        Append a sample to the gesture being captured.

        A mapped sample while not capturing starts a new gesture; an
        unconfirmed word from the previous gesture is learned first.
        Unmapped samples only extend a gesture already in progress.
        """
        if self.mode != SessionMode.CAPTURING:
            if not point.key:
                return
            self._learn_pending()
            self.trajectory = []
            self.mode = SessionMode.CAPTURING

        self.trajectory.append(point)
        self.last_activity_t = point.t
        self.deadline = point.t + self.config.idle_timeout

    def key_down(self, key: str, t: Optional[float] = None) -> Optional[asyncio.Task]:
        """
        Handle a physical key press.

        Returns:
            The scorer task when the key ended a gesture that needs scoring
        """
        t = self.clock() if t is None else t

        if key in self.config.cancel_keys:
            self.cancel()
            return None
        if key in self.config.commit_keys:
            return self.commit(separator='\n' if key == 'Enter' else key)
        if key in self.config.backspace_keys:
            self.backspace()
            return None
        if len(key) != 1:
            return None

        point = self.key_map.point_for_key(key, t)
        if point is not None:
            self.feed(point)
        return None

    def tick(self, now: Optional[float] = None) -> Optional[asyncio.Task]:
        """Fire the idle deadline if it has passed."""
        now = self.clock() if now is None else now
        if self.mode == SessionMode.CAPTURING and self.deadline is not None and now >= self.deadline:
            return self._resolve()
        return None

    async def run(self, events: asyncio.Queue) -> None:
        """
        Consume key events (key strings or Points) until None arrives.

        Each wait races the next event against the idle deadline of the
        gesture being captured.
        """
        while True:
            timeout = None
            if self.mode == SessionMode.CAPTURING and self.deadline is not None:
                timeout = max(0.0, self.deadline - self.clock())
            try:
                item = await asyncio.wait_for(events.get(), timeout=timeout)
            except asyncio.TimeoutError:
                self.tick()
                continue

            if item is None:
                break
            if isinstance(item, Point):
                self.feed(item)
                if self.mode == SessionMode.CAPTURING:
                    # Sample timestamps need not share the session clock
                    self.deadline = self.clock() + self.config.idle_timeout
            else:
                self.key_down(item)

        if self.mode == SessionMode.CAPTURING:
            self._resolve()
        await self.wait_idle()

    async def wait_idle(self) -> None:
        """Wait for every outstanding scorer call to finish."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight))

    # ----- Explicit actions -----

    def commit(self, separator: str = ' ') -> Optional[asyncio.Task]:
        """
        Commit key: end the gesture now and treat its word as confirmed.

        In Idle this confirms the last committed word and types the separator.
        While the last gesture is still being scored, the separator and the
        confirmation wait for its word.
        """
        if self.mode == SessionMode.CAPTURING:
            self._learn_pending()
            return self._resolve(confirmed=True, separator=separator)
        if self.mode == SessionMode.RESOLVING:
            held = self._take_held_separator(self._gesture_seq) or ''
            self._held_separator = (self._gesture_seq, held + separator)
            return None

        self._learn_pending()
        self.committed_text += separator
        self._emit('edit')
        return None

    def cancel(self) -> None:
        """Drop the current gesture and pending word without learning."""
        self._epoch += 1
        self.trajectory = []
        self.deadline = None
        self.pending_word = None
        self.pending_signature = None
        self.ghost_path = []
        self._held_separator = None
        self.mode = SessionMode.IDLE
        self._emit('cancel')

    def backspace(self) -> None:
        self.committed_text = self.committed_text[:-1]
        self.pending_word = None
        self.pending_signature = None
        self._emit('edit')

    def clear_text(self) -> None:
        self._epoch += 1
        self.committed_text = ''
        self.trajectory = []
        self.deadline = None
        self.pending_word = None
        self.pending_signature = None
        self.predictions = ()
        self.candidates = ()
        self.ghost_path = []
        self._held_separator = None
        self.mode = SessionMode.IDLE
        self._emit('clear')

    def select_prediction(self, word: str) -> None:
        """
        The user picked a word from the predictions.

        With a pending gesture, a different word replaces the committed one
        and is learned for the gesture's sequence; the same word confirms it.
        """
        word = word.strip()
        if not word:
            return

        if self.pending_signature and self.pending_word:
            if word != self.pending_word and self.committed_text.endswith(self.pending_word):
                self.committed_text = self.committed_text[:-len(self.pending_word)] + word
            elif word != self.pending_word:
                self.committed_text = join_word(self.committed_text, word)
            self.pending_word = word
            self._learn_pending()
        else:
            self.committed_text = join_word(self.committed_text, word)
        self._emit('commit', word=word)

    def start_training(self, word: str, repetitions: Optional[int] = None) -> PatternTrainer:
        self.trainer = PatternTrainer(
            self.pattern_cache, word, repetitions or self.config.training_repetitions
        )
        return self.trainer

    def stop_training(self) -> None:
        self.trainer = None

    # ----- Resolution -----

    def _learn_pending(self) -> None:
        if self.pending_signature and self.pending_word:
            if self.pattern_cache.learn(self.pending_signature, self.pending_word):
                self._emit('learn', word=self.pending_word, sequence=self.pending_signature)
        self.pending_word = None
        self.pending_signature = None

    def _take_held_separator(self, seq: int) -> Optional[str]:
        if self._held_separator is None or self._held_separator[0] != seq:
            return None
        separator = self._held_separator[1]
        self._held_separator = None
        return separator

    def _commit_word(self, word: str, signature: GestureSignature, confirmed: bool, separator: str) -> None:
        # A word applied while the next gesture was capturing is still pending
        self._learn_pending()
        self.committed_text = join_word(self.committed_text, word)
        self.pending_word = word
        self.pending_signature = signature.sequence
        if confirmed:
            self.committed_text += separator
            self._learn_pending()
        self._emit('commit', word=word, sequence=signature.sequence)

    def _finish(self, seq: int) -> None:
        self._last_applied = max(self._last_applied, seq)
        if self.mode == SessionMode.RESOLVING and seq == self._gesture_seq:
            self.mode = SessionMode.IDLE

    def _resolve(self, confirmed: bool = False, separator: str = '') -> Optional[asyncio.Task]:
        points = self.trajectory
        self.trajectory = []
        self.deadline = None
        self.ghost_path = []
        self._gesture_seq += 1
        seq = self._gesture_seq
        self.mode = SessionMode.RESOLVING

        if not points:
            self._finish(seq)
            return None

        if is_tap(points, self.decoder_config):
            if self.trainer is None:
                self.committed_text += literal_text(points)
                if confirmed:
                    self.committed_text += separator
                self._emit('commit', word=literal_text(points))
            self._finish(seq)
            return None

        signature = extract_signature(segment_trajectory(points), self.decoder_config)
        self.last_signature = signature
        self.predictions = ()
        self.candidates = ()
        if not signature.sequence:
            self._finish(seq)
            return None

        if self.trainer is not None:
            if self.trainer.record(signature):
                self._emit('trained', word=self.trainer.target_word, sequence=signature.sequence)
            if self.trainer.done:
                self.trainer = None
            self._finish(seq)
            return None

        if self.config.detect_row_sweeps:
            command = classify_row_sweep(signature.sequence, DEFAULT_KEYBOARD_CONFIG.rows)
            if command is not None:
                self._emit('command', word=command, sequence=signature.sequence)
                self._finish(seq)
                return None

        cached = self.pattern_cache.lookup(signature.sequence)
        if cached:
            self.predictions = (cached,)
            self._commit_word(cached, signature, confirmed, separator)
            self._finish(seq)
            return None

        self.candidates = tuple(self.candidate_filter.filter(points, signature.anchors))
        if self.scorer is None:
            log(f'[Session] No scorer configured; dropping {signature.sequence}')
            self._finish(seq)
            return None

        request = ScoreRequest(
            trajectory=tuple(points),
            anchors=signature.anchors,
            candidates=self.candidates,
            context=self.committed_text,
            sequence=signature.sequence,
        )
        task = asyncio.get_running_loop().create_task(
            self._score(request, signature, self._epoch, seq, confirmed, separator)
        )
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _score(
        self,
        request: ScoreRequest,
        signature: GestureSignature,
        epoch: int,
        seq: int,
        confirmed: bool,
        separator: str
    ) -> Optional[ScoreResult]:
        try:
            try:
                result = await asyncio.wait_for(self.scorer.score(request), timeout=self.config.scorer_timeout)
            except asyncio.TimeoutError:
                log(f'[Session] Scorer timed out for {signature.sequence}')
                return None
            except Exception as e:
                log(f'[Session] Scorer failed for {signature.sequence}: {e}')
                return None

            if epoch != self._epoch or seq <= self._last_applied:
                log(f'[Session] Dropping stale result for {signature.sequence}')
                return None
            if not result.predictions:
                log(f'[Session] No predictions for {signature.sequence}')
                return result

            held = self._take_held_separator(seq)
            if held is not None:
                confirmed, separator = True, separator + held

            self.predictions = tuple(result.predictions)
            self._emit('predictions', predictions=self.predictions, sequence=signature.sequence)
            self._commit_word(result.predictions[0], signature, confirmed, separator)

            if result.next_word:
                self.ghost_path = self.key_map.ghost_trajectory(
                    result.next_word, start_t=self.clock(), spacing=self.config.ghost_spacing
                )
            return result
        finally:
            if epoch == self._epoch:
                held = self._take_held_separator(seq)
                if held is not None:
                    self.committed_text += held
                    self._emit('edit')
                self._finish(seq)
