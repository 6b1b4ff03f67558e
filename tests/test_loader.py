"""Tests for loading frequency tables."""

import bz2
import gzip
import io
import math

import httpx
import pytest

from chinese_segmenter.engines import ShortestPathSegmenter
from chinese_segmenter.loader import (
    DEFAULT_DICTIONARY_URL,
    ModelLoader,
    build_model,
    load_model,
    parse_frequency_table,
)
from chinese_segmenter.models import FrequencyRecord

from conftest import EXAMPLE_SEGMENTS, EXAMPLE_SENTENCE, EXAMPLE_WORDS

TABLE = "".join(f"{word} {frequency} n\n" for word, frequency in EXAMPLE_WORDS)


def fake_get(content: bytes, status_code: int = 200, calls: list = None):
    """Build a stand-in for httpx.get returning a fixed response."""

    def get(url, **kwargs):
        if calls is not None:
            calls.append((url, kwargs))
        return httpx.Response(
            status_code, content=content, request=httpx.Request("GET", url)
        )

    return get


class TestParse:
    """Tests for parse_frequency_table."""

    def test_fields(self):
        """Word and frequency are read; extra fields are ignored."""
        records = list(parse_frequency_table(["儿子 2 n\n", "\n", "他\t1\n"]))
        assert records == [FrequencyRecord("儿子", 2.0), FrequencyRecord("他", 1.0)]

    def test_not_enough_fields(self):
        """A line with only a word is rejected with its line number."""
        with pytest.raises(ValueError, match="Line 2"):
            list(parse_frequency_table(["他 1\n", "儿子\n"]))

    def test_bad_frequency(self):
        """A non-numeric frequency is rejected."""
        with pytest.raises(ValueError, match="invalid frequency"):
            list(parse_frequency_table(["他 many\n"]))


class TestBuildModel:
    """Tests for build_model."""

    def test_sorts_input(self):
        """Records may arrive in any order."""
        model = build_model([FrequencyRecord("b", 1), FrequencyRecord("a", 3)])
        assert model.is_finished
        assert model.weight_of("a") < model.weight_of("b")

    def test_first_duplicate_wins(self):
        """Repeated words keep their first frequency."""
        records = [
            FrequencyRecord("b", 1),
            FrequencyRecord("a", 2),
            FrequencyRecord("a", 5),
        ]
        model = build_model(records)
        assert len(model) == 2
        assert model.weight_of("a") == pytest.approx(math.log2(3) - 1, rel=1e-6)


class TestLoadModel:
    """Tests for load_model sources."""

    def test_plain_file(self, dictionary_file):
        """A text file builds the example model."""
        model = load_model(dictionary_file)
        assert ShortestPathSegmenter(model).segment(EXAMPLE_SENTENCE) == EXAMPLE_SEGMENTS

    def test_path_as_string(self, dictionary_file):
        """Paths may be given as strings."""
        assert len(load_model(str(dictionary_file))) == len(EXAMPLE_WORDS)

    def test_gzip_file(self, tmp_path):
        """.gz files are decompressed."""
        path = tmp_path / "dictionary.txt.gz"
        with gzip.open(path, "wt", encoding="utf-8") as f:
            f.write(TABLE)
        assert len(load_model(path)) == len(EXAMPLE_WORDS)

    def test_bz2_file(self, tmp_path):
        """.bz2 files are decompressed."""
        path = tmp_path / "dictionary.txt.bz2"
        with bz2.open(path, "wt", encoding="utf-8") as f:
            f.write(TABLE)
        assert len(load_model(path)) == len(EXAMPLE_WORDS)

    def test_text_stream(self):
        """An open text stream is read and left open."""
        stream = io.StringIO(TABLE)
        assert len(load_model(stream)) == len(EXAMPLE_WORDS)
        assert not stream.closed

    def test_binary_stream(self):
        """An open binary stream is decoded and left open."""
        stream = io.BytesIO(TABLE.encode("utf-8"))
        assert len(load_model(stream)) == len(EXAMPLE_WORDS)
        assert not stream.closed

    def test_missing_file(self, tmp_path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_model(tmp_path / "nope.txt")

    def test_unsupported_source(self):
        """Unknown source types raise TypeError."""
        with pytest.raises(TypeError):
            load_model(42)

    def test_url(self, monkeypatch):
        """URLs are fetched with httpx."""
        calls = []
        monkeypatch.setattr(httpx, "get", fake_get(TABLE.encode("utf-8"), calls=calls))
        model = load_model("https://example.com/dictionary.txt", timeout=5)
        assert len(model) == len(EXAMPLE_WORDS)
        assert calls[0][0] == "https://example.com/dictionary.txt"
        assert calls[0][1]["timeout"] == 5

    def test_gzip_url(self, monkeypatch):
        """Compressed downloads are decompressed by suffix."""
        monkeypatch.setattr(httpx, "get", fake_get(gzip.compress(TABLE.encode("utf-8"))))
        model = load_model("https://example.com/dictionary.txt.gz")
        assert len(model) == len(EXAMPLE_WORDS)

    def test_url_error(self, monkeypatch):
        """HTTP errors propagate."""
        monkeypatch.setattr(httpx, "get", fake_get(b"", status_code=404))
        with pytest.raises(httpx.HTTPStatusError):
            load_model("https://example.com/missing.txt")

    def test_default_source(self, monkeypatch):
        """Without a source, the default dictionary URL is used."""
        calls = []
        monkeypatch.setattr(httpx, "get", fake_get(TABLE.encode("utf-8"), calls=calls))
        load_model()
        assert calls[0][0] == DEFAULT_DICTIONARY_URL


class TestModelLoader:
    """Tests for the injectable loader."""

    def test_default_source(self):
        """The loader resolves the default source without fetching it."""
        assert ModelLoader().source == DEFAULT_DICTIONARY_URL

    def test_load(self, dictionary_file):
        """load() returns a finished model."""
        model = ModelLoader(source=dictionary_file).load()
        assert model.is_finished
        assert len(model) == len(EXAMPLE_WORDS)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
