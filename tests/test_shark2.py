import numpy as np

from swipekeys.config import Shark2Config
from swipekeys.scorer import ScoreRequest
from swipekeys.shark2 import Shark2Scorer, load_word_frequencies, normalize_shape_batch
from swipekeys.utils import resample_path


def test_resample_path_is_evenly_spaced():
    xy = np.array([[0.0, 0.0], [10.0, 0.0], [10.0, 10.0]])
    resampled = resample_path(xy, 5)

    assert resampled.shape == (5, 2)
    np.testing.assert_allclose(resampled[0], [0, 0])
    np.testing.assert_allclose(resampled[2], [10, 0])
    np.testing.assert_allclose(resampled[-1], [10, 10])


def test_resample_degenerate_paths():
    assert resample_path(np.array([[3.0, 4.0]]), 4).tolist() == [[3.0, 4.0]] * 4
    assert resample_path(np.array([[1.0, 1.0], [1.0, 1.0]]), 3).tolist() == [[1.0, 1.0]] * 3


def test_normalize_shape_is_translation_and_scale_invariant():
    shape = np.array([[[0.0, 0.0], [1.0, 0.0], [1.0, 2.0]]])
    moved = shape * 3.0 + 7.0
    np.testing.assert_allclose(normalize_shape_batch(shape), normalize_shape_batch(moved))


def test_exact_trace_ranks_first(keyboard, key_map):
    scorer = Shark2Scorer(key_map, word_frequencies={'hello': 1.0, 'halo': 1.0, 'hero': 1.0})
    trajectory = keyboard.trajectory_for_keys('hello')

    ranked = scorer.rank(trajectory, ['halo', 'hero', 'hello'])

    assert ranked[0][0] == 'hello'
    scores = [s for _, s in ranked]
    assert scores == sorted(scores, reverse=True)


def test_channel_scores_have_one_entry_per_word(keyboard, key_map):
    scorer = Shark2Scorer(key_map, word_frequencies={'are': 0.5, 'ace': 0.5})
    loc, shape, total = scorer.compute_scores(keyboard.trajectory_for_keys('asdre'), ['are', 'ace'])
    assert loc.shape == shape.shape == total.shape == (2,)
    assert np.all(loc <= 0)


def test_wordfreq_frequencies_prefer_common_words():
    freqs = load_word_frequencies(['the', 'xylophone'])
    assert freqs['the'] > freqs['xylophone'] > 0


async def test_score_returns_top_k(keyboard, key_map):
    scorer = Shark2Scorer(key_map, Shark2Config(top_k=2))
    request = ScoreRequest(
        trajectory=tuple(keyboard.trajectory_for_keys('hello')),
        anchors=('h', 'o'),
        candidates=('hello', 'halo', 'hero'),
        sequence='helo',
    )
    result = await scorer.score(request)

    assert len(result.predictions) == 2
    assert result.top == 'hello'
    assert result.next_word is None


async def test_score_without_candidates_is_empty(keyboard, key_map):
    scorer = Shark2Scorer(key_map)
    request = ScoreRequest(trajectory=tuple(keyboard.trajectory_for_keys('hello')), anchors=(), candidates=())
    result = await scorer.score(request)
    assert result.predictions == ()
    assert result.top is None
