import logging
from collections import OrderedDict
from typing import Optional
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)


class DictionaryValidator:
    """Asks a dictionary HTTP API whether a word exists.

    Any timeout, connection problem or unexpected status counts as "not a
    word": a player is never credited on a failed lookup. Definite answers
    (found / not found) are kept in a least-recently-used cache of at most
    ``cache_size`` words.
    """

    def __init__(self, base_url: str, timeout: float = 3.0, session: Optional[requests.Session] = None,
                 cache_size: int = 2048):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.http = session or requests.Session()
        self.cache_size = max(1, int(cache_size))
        self._cache: 'OrderedDict[str, bool]' = OrderedDict()

    def is_valid_word(self, word: str) -> bool:
        key = (word or '').strip().lower()
        if not key or not key.isalpha():
            return False
        if key in self._cache:
            self._cache.move_to_end(key)
            return self._cache[key]
        try:
            resp = self.http.get(f"{self.base_url}/{quote(key)}", timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning(f"[dictionary-error] word={key} error={exc}")
            return False
        if resp.status_code == 200:
            return self._remember(key, True)
        if resp.status_code == 404:
            return self._remember(key, False)
        logger.warning(f"[dictionary-error] word={key} status={resp.status_code}")
        return False

    def _remember(self, key: str, found: bool) -> bool:
        self._cache[key] = found
        while len(self._cache) > self.cache_size:
            self._cache.popitem(last=False)
        return found
