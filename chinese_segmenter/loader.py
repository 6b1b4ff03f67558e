"""Loading word frequency tables into a WeightedWordModel.

A frequency table is a text file with one word per line followed by its raw
frequency count, separated by whitespace. Any further fields (such as a
part-of-speech tag) are ignored::

    儿子 2 n
    名字 2 n

Tables can be read from an open stream, a local file (optionally ``.gz`` or
``.bz2`` compressed) or an http(s) URL.
"""

import bz2
import gzip
import io
import logging
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, Union

import httpx

from .models import FrequencyRecord
from .word_model import WeightedWordModel

logger = logging.getLogger(__name__)

DEFAULT_DICTIONARY_URL = (
    "https://raw.githubusercontent.com/go-ego/gse/master/data/dict/dictionary.txt"
)
DEFAULT_TIMEOUT = 30.0

Source = Union[str, Path, IO]


def _is_url(source: str) -> bool:
    return source.startswith("https:") or source.startswith("http:")


def _open_path(path: Path) -> IO[bytes]:
    """Open a local file, decompressing by suffix."""
    suffix = path.suffix.lower()
    if suffix == ".gz":
        return gzip.open(path, "rb")
    if suffix == ".bz2":
        return bz2.open(path, "rb")
    return open(path, "rb")


def _fetch_url(url: str, timeout: float) -> bytes:
    """Download a table, decompressing by suffix."""
    logger.info(f"Fetching word frequencies from {url}")
    response = httpx.get(url, timeout=timeout, follow_redirects=True)
    response.raise_for_status()
    suffix = Path(httpx.URL(url).path).suffix.lower()
    if suffix == ".gz":
        return gzip.decompress(response.content)
    if suffix == ".bz2":
        return bz2.decompress(response.content)
    return response.content


def open_source(
    source: Source, timeout: float = DEFAULT_TIMEOUT, encoding: str = "utf-8"
) -> IO[str]:
    """Open a frequency table as a text stream.

    Args:
        source: Open stream, local path or http(s) URL
        timeout: Network timeout in seconds for URLs
        encoding: Text encoding of the table

    Returns:
        Text stream over the table contents

    Raises:
        TypeError: If the source type is not supported
        FileNotFoundError: If a local file does not exist
        httpx.HTTPError: If a URL cannot be fetched
    """
    if isinstance(source, io.TextIOBase):
        return source
    if isinstance(source, (io.RawIOBase, io.BufferedIOBase)):
        return io.TextIOWrapper(source, encoding=encoding)

    if isinstance(source, str) and _is_url(source):
        return io.TextIOWrapper(io.BytesIO(_fetch_url(source, timeout)), encoding=encoding)

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Frequency table not found: {path}")
        logger.info(f"Reading word frequencies from {path}")
        return io.TextIOWrapper(_open_path(path), encoding=encoding)

    raise TypeError(f"Don't know how to open a frequency table from {type(source).__name__}")


def parse_frequency_table(lines: Iterable[str]) -> Iterator[FrequencyRecord]:
    """Parse ``word frequency [extra...]`` lines.

    Args:
        lines: Lines of the table

    Yields:
        FrequencyRecord per non-blank line

    Raises:
        ValueError: If a line has fewer than two fields or a bad frequency
    """
    for line_num, line in enumerate(lines, 1):
        fields = line.split()
        if not fields:
            continue
        if len(fields) < 2:
            raise ValueError(f"Line {line_num}: not enough fields in {line.strip()!r}")
        try:
            frequency = float(fields[1])
        except ValueError:
            raise ValueError(
                f"Line {line_num}: invalid frequency {fields[1]!r}"
            ) from None
        yield FrequencyRecord(word=fields[0], frequency=frequency)


def build_model(
    records: Iterable[FrequencyRecord], model: Optional[WeightedWordModel] = None
) -> WeightedWordModel:
    """Sort, de-duplicate and load records into a finished model.

    When a word appears more than once, its first occurrence wins.

    Args:
        records: Parsed frequency records, in any order
        model: Empty model to fill (default: new WeightedWordModel)

    Returns:
        Finished model
    """
    model = model if model is not None else WeightedWordModel()
    ordered = sorted(records, key=lambda record: record.word)

    duplicates = 0
    previous = None
    for record in ordered:
        if record.word == previous:
            duplicates += 1
            continue
        previous = record.word
        model.add_word(record.word, record.frequency)

    if duplicates:
        logger.warning(f"Skipped {duplicates} duplicate words")
    model.finish()
    return model


def load_model(
    source: Optional[Source] = None,
    timeout: float = DEFAULT_TIMEOUT,
    encoding: str = "utf-8",
) -> WeightedWordModel:
    """Load a finished model from a frequency table.

    Args:
        source: Stream, path or URL (default: DEFAULT_DICTIONARY_URL)
        timeout: Network timeout in seconds for URLs
        encoding: Text encoding of the table

    Returns:
        Finished WeightedWordModel
    """
    if source is None:
        source = DEFAULT_DICTIONARY_URL
    stream = open_source(source, timeout=timeout, encoding=encoding)
    try:
        return build_model(parse_frequency_table(stream))
    finally:
        # Caller-owned streams stay open
        if not isinstance(source, io.IOBase):
            stream.close()
        elif stream is not source:
            stream.detach()


class ModelLoader:
    """Loads the word model a segmenter should use.

    This is the single place where a default dictionary source is resolved.
    Engines never load a model on their own.
    """

    def __init__(
        self,
        source: Optional[Source] = None,
        timeout: float = DEFAULT_TIMEOUT,
        encoding: str = "utf-8",
    ):
        """Initialize loader.

        Args:
            source: Stream, path or URL (default: DEFAULT_DICTIONARY_URL)
            timeout: Network timeout in seconds for URLs
            encoding: Text encoding of the table
        """
        self.source = source if source is not None else DEFAULT_DICTIONARY_URL
        self.timeout = timeout
        self.encoding = encoding

    def load(self) -> WeightedWordModel:
        """Load and finish the model."""
        return load_model(self.source, timeout=self.timeout, encoding=self.encoding)
