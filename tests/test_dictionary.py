from swipekeys.dictionary import Dictionary, frequency_dictionary, load_dictionary


def test_words_are_lowercased_deduplicated_and_ordered():
    dictionary = Dictionary(['The', 'the', ' of ', '', 'and'])
    assert dictionary.words == ['the', 'of', 'and']
    assert len(dictionary) == 3
    assert 'THE' in dictionary
    assert 'xyz' not in dictionary


def test_endpoint_index_keeps_frequency_order():
    dictionary = Dictionary(['there', 'three', 'the', 'these', 'tree'])
    assert dictionary.words_between('t', 'e') == ['there', 'three', 'the', 'these', 'tree']
    assert dictionary.words_between('T', 'S') == []


def test_load_dictionary_skips_comments(tmp_path):
    path = tmp_path / 'words.txt'
    path.write_text('# most common first\nhello\nWorld\n\nhello\n', encoding='utf-8')
    assert load_dictionary(path).words == ['hello', 'world']


def test_frequency_dictionary_from_wordfreq():
    dictionary = frequency_dictionary(200)
    assert 0 < len(dictionary) <= 200
    assert dictionary.words[0] == 'the'
    assert all(w.isalpha() for w in dictionary)
