"""Word sources: the local corpus and the remote dictionary check."""

from .wordlist import WordListProvider
from .dictionary import DictionaryValidator

__all__ = ['WordListProvider', 'DictionaryValidator']
