"""Data models for the segmentation engine and pipeline."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class WordWeight:
    """A dictionary word matched at some offset, with its path weight.

    Lower weight means a more probable word.
    """

    word: str
    weight: float


@dataclass(frozen=True)
class DictionaryEntry:
    """A registered dictionary word and its canonical index."""

    word: str
    index: int


@dataclass(frozen=True)
class FrequencyRecord:
    """One line of a raw frequency table."""

    word: str
    frequency: float


@dataclass
class DocumentMetadata:
    """Metadata for a source record."""

    record_id: str
    line_number: int


@dataclass
class SegmentationResult:
    """Result of segmenting one record."""

    spans: list[tuple[str, int, int]]  # (word, start_index, end_index)
    metadata: DocumentMetadata
    words: list[str] = field(default_factory=list)

    def __post_init__(self):
        if not self.words:
            self.words = [word for word, _, _ in self.spans]
