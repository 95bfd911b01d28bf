import pytest

from swipekeys.scorer import ScoreRequest, ScoreResult, ScorerError, parse_score_payload


def test_parse_payload():
    result = parse_score_payload({'predictions': [' there ', 'their', 'there', 3, ''], 'next_word': 'is'})
    assert result.predictions == ('there', 'their')
    assert result.next_word == 'is'


def test_parse_payload_without_next_word():
    assert parse_score_payload({'predictions': []}).next_word is None


@pytest.mark.parametrize('payload', [None, [], 'hello', {}, {'predictions': 'hello'}, {'predictions': 3}])
def test_parse_payload_rejects_malformed(payload):
    with pytest.raises(ScorerError):
        parse_score_payload(payload)


def test_request_payload_is_json_ready(keyboard):
    request = ScoreRequest(
        trajectory=tuple(keyboard.trajectory_for_keys('hi')),
        anchors=('h', 'i'),
        candidates=('hi',),
        context='say',
        sequence='hi',
    )
    payload = request.to_payload()
    assert payload['trajectory'][0]['key'] == 'h'
    assert payload['candidates'] == ['hi']
    assert payload['context'] == 'say'


def test_result_top_is_first_prediction():
    assert ScoreResult(predictions=('there', 'their')).top == 'there'
    assert ScoreResult().top is None
