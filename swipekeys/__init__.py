# swipekeys: gesture typing on physical keyboards
# Decodes swipes across held keys into words, with a learned pattern shortcut.

__version__ = "1.0.0"

# Configuration
from .config import (
    KeyboardConfig, DecoderConfig, SessionConfig, PatternCacheConfig, Shark2Config,
    DEFAULT_KEYBOARD_CONFIG, DEFAULT_DECODER_CONFIG, DEFAULT_SESSION_CONFIG,
    DEFAULT_PATTERN_CACHE_CONFIG, DEFAULT_SHARK2_CONFIG
)

# Trajectory and signature
from .trajectory import Point, KeySegment, segment_trajectory, literal_text
from .anchors import GestureSignature, extract_signature, is_tap, classify_row_sweep

# Keyboard
from .keyboard import KeyRect, KeyMap, QWERTYKeyboard

# Dictionary and candidates
from .dictionary import Dictionary, load_dictionary, frequency_dictionary
from .candidates import CandidateFilter

# Pattern cache
from .pattern_cache import PatternCache, KeyValueStore, MemoryStore, FileStore

# Scoring
from .scorer import ScoreRequest, ScoreResult, ScorerError, GestureScorer, parse_score_payload
from .shark2 import Shark2Scorer

# Session
from .training import PatternTrainer
from .session import GestureSession, SessionMode, SessionEvent, SessionState

# Utils
from .utils import log
