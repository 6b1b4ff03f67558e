"""Word models: dictionary prefix lookups with per-word path weights."""

import logging
import math
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .dictionary import MarisaPrefixDictionary, PrefixDictionary
from .models import WordWeight

logger = logging.getLogger(__name__)


class WordModel(ABC):
    """Anything that can list the weighted dictionary words starting a string."""

    @abstractmethod
    def find_prefixes_with_weight(self, suffix: str) -> list[WordWeight]:
        """Find all known words that are prefixes of ``suffix``.

        Args:
            suffix: Remaining input text

        Returns:
            List of WordWeight, where a lower weight means a more probable word
        """
        pass

    @property
    def max_word_length(self) -> Optional[int]:
        """Length of the longest word the model can match, or None if unbounded.

        Callers may pass only this many characters of the remaining text to
        find_prefixes_with_weight.
        """
        return None


class WeightedWordModel(WordModel):
    """Unigram word model built from raw frequency counts.

    Words are added once, in strictly increasing order, and the model is then
    finished. Finishing converts each raw frequency ``f`` into the weight
    ``log2(S) - log2(f)``, where ``S`` is the sum of all frequencies, so the
    weight of a path is the negative log2 likelihood of its words.

    Example:
        >>> model = WeightedWordModel()
        >>> model.add_word("儿", 1)
        >>> model.add_word("儿子", 2)
        >>> model.finish()
        >>> [w.word for w in model.find_prefixes_with_weight("儿子们")]
        ['儿', '儿子']
    """

    def __init__(self, dictionary: Optional[PrefixDictionary] = None):
        """Initialize an empty model.

        Args:
            dictionary: Empty prefix dictionary to fill (default: MARISA trie)
        """
        self.dictionary = dictionary if dictionary is not None else MarisaPrefixDictionary()
        self._words: list[str] = []
        self._frequencies: list[float] = []
        self._weights: Optional[np.ndarray] = None

    @property
    def is_finished(self) -> bool:
        return self._weights is not None

    def __len__(self) -> int:
        return self.dictionary.num_added

    @property
    def max_word_length(self) -> int:
        return self.dictionary.max_word_length

    def add_word(self, word: str, frequency: float) -> None:
        """Add a word and its raw frequency count.

        If real frequencies are unknown, the word length works as a stand-in;
        the segmenter then prefers fewer, longer words.

        Args:
            word: Word to add, sorting strictly after the previous one
            frequency: Raw (not log) frequency, must be positive

        Raises:
            RuntimeError: If the model is already finished
            ValueError: If the word is out of order or repeated, or the
                frequency is not a positive number
        """
        if self.is_finished:
            raise RuntimeError("Cannot add words to a finished model")
        frequency = float(frequency)
        if not math.isfinite(frequency) or frequency <= 0:
            raise ValueError(f"Frequency of {word!r} must be positive, got {frequency}")
        self.dictionary.add(word)
        self._words.append(word)
        self._frequencies.append(frequency)

    def finish(self) -> None:
        """Finish the dictionary and convert frequencies to weights.

        Raises:
            RuntimeError: If called more than once
        """
        if self.is_finished:
            raise RuntimeError("Model is already finished")
        self.dictionary.finish()
        logger.info(f"Model has {self.dictionary.num_added} words")

        frequencies = np.asarray(self._frequencies, dtype=np.float64)
        total = float(frequencies.sum())
        logger.info(f"Frequency sum is {total}")

        weights = np.zeros(len(self._words), dtype=np.float32)
        if len(self._words):
            # Weights are aligned with the dictionary's own indices, not insertion order
            indices = np.fromiter(
                (self.dictionary.index_of(word) for word in self._words),
                dtype=np.int64,
                count=len(self._words),
            )
            weights[indices] = (np.log2(total) - np.log2(frequencies)).astype(np.float32)

        self._weights = weights
        self._words = []
        self._frequencies = []

    def find_prefixes_with_weight(self, suffix: str) -> list[WordWeight]:
        """Find all dictionary words that are prefixes of ``suffix``.

        Raises:
            RuntimeError: If the model is not finished
        """
        if not self.is_finished:
            raise RuntimeError("Model must be finished before querying")
        return [
            WordWeight(word=entry.word, weight=float(self._weights[entry.index]))
            for entry in self.dictionary.find_prefixes(suffix)
        ]

    def weight_of(self, word: str) -> float:
        """Return the weight of a single dictionary word.

        Raises:
            RuntimeError: If the model is not finished
            KeyError: If the word is unknown
        """
        if not self.is_finished:
            raise RuntimeError("Model must be finished before querying")
        return float(self._weights[self.dictionary.index_of(word)])
