import pytest

from swipekeys.anchors import GestureSignature
from swipekeys.training import PatternTrainer


async def test_records_each_swipe_until_done(cache):
    trainer = PatternTrainer(cache, ' Supabase ', repetitions=2)

    assert trainer.record(GestureSignature('supase', ('s', 'e')))
    assert not trainer.done
    assert trainer.record(GestureSignature('sdupase', ('s', 'e')))
    assert trainer.done
    assert not trainer.record(GestureSignature('spase', ('s', 'e')))

    assert trainer.target_word == 'Supabase'
    assert cache.patterns() == {'supase': 'Supabase', 'sdupase': 'Supabase'}


async def test_empty_signature_is_not_recorded(cache):
    trainer = PatternTrainer(cache, 'word')
    assert not trainer.record(GestureSignature('', ()))
    assert trainer.step == 0


async def test_invalid_arguments(cache):
    with pytest.raises(ValueError):
        PatternTrainer(cache, '   ')
    with pytest.raises(ValueError):
        PatternTrainer(cache, 'word', repetitions=0)
