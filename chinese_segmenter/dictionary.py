"""Prefix dictionaries: find every registered word that starts a string."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import marisa_trie

from .models import DictionaryEntry

logger = logging.getLogger(__name__)


class PrefixDictionary(ABC):
    """Base class for append-only prefix dictionaries.

    Words are added in strictly increasing order, then the dictionary is
    finished once. Only a finished dictionary answers prefix queries.
    """

    def __init__(self):
        self._last_word: Optional[str] = None
        self._count = 0
        self._max_word_length = 0
        self._finished = False

    @property
    def num_added(self) -> int:
        """Number of words added so far."""
        return self._count

    @property
    def max_word_length(self) -> int:
        """Length of the longest word added so far."""
        return self._max_word_length

    @property
    def is_finished(self) -> bool:
        return self._finished

    def add(self, word: str) -> None:
        """Register a word.

        Args:
            word: Word to add. Must sort strictly after the previous word.

        Raises:
            RuntimeError: If the dictionary is already finished
            ValueError: If the word is empty, repeated or out of order
        """
        if self._finished:
            raise RuntimeError("Cannot add words to a finished dictionary")
        if not word:
            raise ValueError("Cannot add an empty word")
        if self._last_word is not None and word <= self._last_word:
            if word == self._last_word:
                raise ValueError(f"Duplicate word: {word!r}")
            raise ValueError(
                f"Words must be added in sorted order: {word!r} after {self._last_word!r}"
            )
        self._add(word)
        self._last_word = word
        self._count += 1
        self._max_word_length = max(self._max_word_length, len(word))

    def finish(self) -> None:
        """Freeze the dictionary so it can be queried."""
        if self._finished:
            raise RuntimeError("Dictionary is already finished")
        self._finish()
        self._finished = True

    def find_prefixes(self, suffix: str) -> list[DictionaryEntry]:
        """Find all registered words that are prefixes of ``suffix``.

        Args:
            suffix: Text to match against

        Returns:
            Matching entries, shortest word first

        Raises:
            RuntimeError: If the dictionary is not finished
        """
        if not self._finished:
            raise RuntimeError("Dictionary must be finished before querying")
        # No word is longer than this, so the rest of the suffix is never needed
        return self._find_prefixes(suffix[: self._max_word_length])

    def index_of(self, word: str) -> int:
        """Return the canonical index of a registered word.

        Raises:
            RuntimeError: If the dictionary is not finished
            KeyError: If the word is not registered
        """
        if not self._finished:
            raise RuntimeError("Dictionary must be finished before querying")
        return self._index_of(word)

    @abstractmethod
    def _add(self, word: str) -> None:
        pass

    @abstractmethod
    def _finish(self) -> None:
        pass

    @abstractmethod
    def _find_prefixes(self, suffix: str) -> list[DictionaryEntry]:
        pass

    @abstractmethod
    def _index_of(self, word: str) -> int:
        pass


class MarisaPrefixDictionary(PrefixDictionary):
    """Prefix dictionary backed by a MARISA trie.

    Canonical indices are the trie's key ids, which are dense (0..n-1) but
    follow the trie's internal ordering rather than insertion order.
    """

    def __init__(self):
        super().__init__()
        self._pending: list[str] = []
        self._trie: Optional[marisa_trie.Trie] = None

    def _add(self, word: str) -> None:
        self._pending.append(word)

    def _finish(self) -> None:
        if self._pending:
            self._trie = marisa_trie.Trie(self._pending)
        self._pending = []
        logger.debug(f"Built trie with {self._count} keys")

    def _find_prefixes(self, suffix: str) -> list[DictionaryEntry]:
        if not suffix or self._trie is None:
            return []
        matches = sorted(self._trie.prefixes(suffix), key=len)
        return [DictionaryEntry(word=word, index=self._trie[word]) for word in matches]

    def _index_of(self, word: str) -> int:
        if self._trie is None:
            raise KeyError(word)
        return self._trie[word]
