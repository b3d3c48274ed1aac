import logging
import os
import random
from typing import Dict, List, Optional

from ..sessions.errors import ConfigurationError

logger = logging.getLogger(__name__)

MIN_WORD_LENGTH = 3
MAX_WORD_LENGTH = 15


class WordListProvider:
    """Loads the word corpus once and serves it by length.

    One word per line; blank lines, ``#`` comments and anything that is not
    purely alphabetic are skipped. Words are kept upper case.
    """

    def __init__(self, path: str):
        self.path = path
        self._words: Optional[List[str]] = None
        self._by_length: Dict[int, List[str]] = {}

    def load_words(self) -> List[str]:
        if self._words is not None:
            return self._words
        if not os.path.exists(self.path):
            raise ConfigurationError(f"word list not found: {self.path}")
        try:
            with open(self.path, encoding='utf-8') as fh:
                raw = fh.read().splitlines()
        except OSError as exc:
            raise ConfigurationError(f"word list unreadable: {self.path}: {exc}") from exc

        seen = set()
        words = []
        for line in raw:
            word = line.strip().upper()
            if not word or word.startswith('#') or not word.isalpha() or not word.isascii():
                continue
            if not MIN_WORD_LENGTH <= len(word) <= MAX_WORD_LENGTH or word in seen:
                continue
            seen.add(word)
            words.append(word)
        if not words:
            raise ConfigurationError(f"word list is empty: {self.path}")

        by_length: Dict[int, List[str]] = {}
        for word in words:
            by_length.setdefault(len(word), []).append(word)
        # Only cache a successful load so a fixed file is picked up next time
        self._words = words
        self._by_length = by_length
        logger.info(f"[wordlist-loaded] path={self.path} words={len(words)}")
        return words

    def words_between(self, min_length: int, max_length: int) -> List[str]:
        self.load_words()
        out: List[str] = []
        for length in range(min_length, max_length + 1):
            out.extend(self._by_length.get(length, []))
        return out

    def random_word(self, min_length: int, max_length: int, rng: Optional[random.Random] = None) -> str:
        bucket = self.words_between(min_length, max_length)
        if not bucket:
            raise ConfigurationError(f"no words of length {min_length}-{max_length} in {self.path}")
        return (rng or random).choice(bucket)
