from swipekeys.trajectory import Point, literal_text, segment_trajectory


def pt(key, t, x=0.0, y=0.0):
    return Point(x=x, y=y, t=t, key=key, original_key=key)


def test_runs_collapse_into_segments():
    points = [pt('h', 0), pt('h', 10), pt('e', 20), pt('l', 30), pt('l', 40), pt('l', 50), pt('o', 60)]
    segments = segment_trajectory(points)

    assert [s.key for s in segments] == ['h', 'e', 'l', 'o']
    assert [s.sample_count for s in segments] == [2, 1, 3, 1]
    assert (segments[2].start_t, segments[2].end_t) == (30, 50)
    assert segments[2].duration == 20


def test_segment_keeps_last_position_not_average():
    points = [pt('a', 0, x=0, y=0), pt('a', 10, x=10, y=4), pt('a', 20, x=3, y=7)]
    [segment] = segment_trajectory(points)
    assert (segment.last_x, segment.last_y) == (3, 7)


def test_key_comparison_ignores_case():
    points = [Point(0, 0, 0, key='H'), Point(0, 0, 5, key='h'), Point(0, 0, 9, key='E')]
    segments = segment_trajectory(points)
    assert [s.key for s in segments] == ['h', 'e']
    assert segments[0].sample_count == 2


def test_unmapped_points_are_skipped():
    points = [pt('a', 0), Point(5, 5, 5), pt('a', 10), Point(6, 6, 12), pt('b', 20)]
    segments = segment_trajectory(points)
    assert [s.key for s in segments] == ['a', 'b']
    assert segments[0].sample_count == 2


def test_segments_never_outnumber_points():
    points = [pt(k, i) for i, k in enumerate('abcabc')]
    segments = segment_trajectory(points)
    assert len(segments) == len(points)
    assert all(s.sample_count >= 1 for s in segments)
    assert [s.start_t for s in segments] == sorted(s.start_t for s in segments)


def test_separate_visits_to_same_key_stay_separate():
    segments = segment_trajectory([pt(k, i) for i, k in enumerate('aba')])
    assert ''.join(s.key for s in segments) == 'aba'


def test_empty_and_unmapped_only_streams():
    assert segment_trajectory([]) == []
    assert segment_trajectory([Point(1, 1, 0), Point(2, 2, 1)]) == []


def test_from_key_normalizes_but_keeps_literal():
    p = Point.from_key('Q', 1.0, 2.0, 3.0)
    assert p.key == 'q'
    assert p.original_key == 'Q'


def test_literal_text_concatenates_original_keys():
    points = [Point.from_key('H', 0, 0, 0), Point(0, 0, 1), Point.from_key('i', 0, 0, 2)]
    assert literal_text(points) == 'Hi'
