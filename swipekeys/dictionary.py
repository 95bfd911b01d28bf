"""
Frequency-ordered word lists for candidate filtering.

Words are kept most-common first and indexed by their (first, last)
letter pair, so the start/end check of candidate filtering only visits
words that can pass it.
"""

from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Tuple, Union

from wordfreq import top_n_list


class Dictionary:
    """Lowercase words in frequency order (most common first)."""

    def __init__(self, words: Iterable[str]):
        self.words: List[str] = []
        seen = set()
        for word in words:
            w = word.strip().lower()
            if w and w not in seen:
                seen.add(w)
                self.words.append(w)

        self._by_endpoints: Dict[Tuple[str, str], List[str]] = defaultdict(list)
        for w in self.words:
            self._by_endpoints[(w[0], w[-1])].append(w)

    def __len__(self) -> int:
        return len(self.words)

    def __iter__(self) -> Iterator[str]:
        return iter(self.words)

    def __contains__(self, word: str) -> bool:
        return word.lower() in self._by_endpoints.get((word[:1].lower(), word[-1:].lower()), ())

    def words_between(self, first: str, last: str) -> List[str]:
        """Words starting with `first` and ending with `last`, in frequency order."""
        return list(self._by_endpoints.get((first.lower(), last.lower()), ()))


def load_dictionary(path: Union[str, Path]) -> Dictionary:
    """Load a plain word list, one word per line, most common first."""
    with open(path, 'r', encoding='utf-8') as f:
        return Dictionary(line for line in f if not line.startswith('#'))


def frequency_dictionary(n: int = 5000, lang: str = 'en') -> Dictionary:
    """
    The n most frequent alphabetic words of a language from wordfreq.

    Args:
        n: Number of words to request from wordfreq
        lang: wordfreq language code

    Returns:
        Dictionary ordered by frequency
    """
    return Dictionary(w for w in top_n_list(lang, n) if w.isalpha())
