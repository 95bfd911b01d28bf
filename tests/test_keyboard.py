import numpy as np

from swipekeys.config import KeyboardConfig
from swipekeys.keyboard import KeyMap, KeyRect, QWERTYKeyboard


def test_default_qwerty_centers(keyboard):
    assert keyboard.get_key_center('q') == (20.0, 20.0)
    assert keyboard.get_key_center('A') == (40.0, 60.0)
    assert keyboard.get_key_center('z') == (60.0, 100.0)
    assert keyboard.get_key_center('p') == (380.0, 20.0)
    assert keyboard.get_key_center('1') is None


def test_custom_key_size():
    keyboard = QWERTYKeyboard(KeyboardConfig(key_size=60.0, origin=30.0))
    assert keyboard.get_key_center('w') == (90.0, 30.0)
    assert keyboard.key_map().key_pitch == 60.0


def test_key_map_from_rects_uses_centers():
    key_map = KeyMap.from_rects({'H': (100, 50, 40, 30)})
    assert key_map.get('h') == KeyRect(x=120, y=65, width=40, height=30)
    assert key_map.center('H') == (120, 65)
    assert 'h' in key_map
    assert 'x' not in key_map
    assert key_map.get('') is None


def test_point_for_key(key_map):
    point = key_map.point_for_key('E', 1.5)
    assert (point.x, point.y, point.t) == (100.0, 20.0, 1.5)
    assert point.key == 'e' and point.original_key == 'E'
    assert key_map.point_for_key('#', 0.0) is None


def test_ghost_trajectory_skips_unmapped_letters(key_map):
    ghost = key_map.ghost_trajectory("it's", start_t=2.0, spacing=0.05)
    assert [p.key for p in ghost] == ['i', 't', 's']
    assert [round(p.t, 2) for p in ghost] == [2.0, 2.05, 2.1]
    assert (ghost[1].x, ghost[1].y) == key_map.center('t')


def test_word_template_runs_through_key_centers(key_map):
    template = key_map.word_template('are', 9)
    assert template.shape == (9, 2)
    np.testing.assert_allclose(template[0], key_map.center('a'))
    np.testing.assert_allclose(template[-1], key_map.center('e'))
    assert np.all(key_map.word_template('123', 4) == 0)


def test_trajectory_for_keys(keyboard):
    points = keyboard.trajectory_for_keys('hi', start_t=1.0, spacing=0.1)
    assert [p.key for p in points] == ['h', 'i']
    assert [p.t for p in points] == [1.0, 1.1]
