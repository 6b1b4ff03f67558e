"""Shared fixtures for the segmenter tests."""

from pathlib import Path

import pytest

from chinese_segmenter.models import WordWeight
from chinese_segmenter.word_model import WeightedWordModel, WordModel

# (word, raw frequency), already in sorted order
EXAMPLE_WORDS = [
    ("他", 1),
    ("儿", 1),
    ("儿子", 2),
    ("叫", 1),
    ("名", 1),
    ("名字", 2),
    ("四", 1),
    ("子", 1),
    ("字", 1),
    ("岁", 1),
    ("的", 1),
]

EXAMPLE_SENTENCE = "我儿子四岁。他的名字叫Zack。"
EXAMPLE_SEGMENTS = ["我", "儿子", "四", "岁", "。", "他", "的", "名字", "叫", "Zack。"]


class FakeWordModel(WordModel):
    """In-memory word model with fixed weights that records every query."""

    def __init__(self, weights: dict[str, float], bounded: bool = True):
        self.weights = weights
        self.bounded = bounded
        self.queries: list[str] = []

    @property
    def max_word_length(self):
        if not self.bounded:
            return None
        return max((len(word) for word in self.weights), default=0)

    def find_prefixes_with_weight(self, suffix: str) -> list[WordWeight]:
        self.queries.append(suffix)
        matches = [word for word in self.weights if suffix.startswith(word)]
        return [WordWeight(word, self.weights[word]) for word in sorted(matches, key=len)]


@pytest.fixture
def example_model() -> WeightedWordModel:
    """Finished model built from EXAMPLE_WORDS."""
    model = WeightedWordModel()
    for word, frequency in EXAMPLE_WORDS:
        model.add_word(word, frequency)
    model.finish()
    return model


@pytest.fixture
def empty_model() -> WeightedWordModel:
    """Finished model with no words."""
    model = WeightedWordModel()
    model.finish()
    return model


@pytest.fixture
def dictionary_file(tmp_path: Path) -> Path:
    """EXAMPLE_WORDS written as an unsorted frequency table."""
    path = tmp_path / "dictionary.txt"
    lines = [f"{word} {frequency} n" for word, frequency in reversed(EXAMPLE_WORDS)]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path
