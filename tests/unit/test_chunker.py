"""Unit tests for the TextChunker - fixed-size overlapping character windows."""

from __future__ import annotations

import math
import string

import pytest

from lexrag.services.ingestion.chunker import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_OVERLAP,
    TextChunker,
    split_text,
)
from lexrag.utils.errors import ConfigurationError, InvalidConfigurationError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _text(length: int) -> str:
    """Non-repeating-looking text of exactly *length* characters."""
    alphabet = string.ascii_letters + string.digits + " .,;"
    return "".join(alphabet[(i * 7) % len(alphabet)] for i in range(length))


def _expected_count(length: int, chunk_size: int, overlap: int) -> int:
    if length == 0:
        return 0
    if length <= chunk_size:
        return 1
    return 1 + math.ceil((length - chunk_size) / (chunk_size - overlap))


# ---------------------------------------------------------------------------
# Window layout
# ---------------------------------------------------------------------------


class TestWindowLayout:
    def test_defaults(self) -> None:
        chunker = TextChunker()
        assert chunker.chunk_size == DEFAULT_CHUNK_SIZE == 1000
        assert chunker.overlap == DEFAULT_OVERLAP == 200

    def test_2300_chars_gives_three_windows(self) -> None:
        text = _text(2300)
        chunks = split_text(text, 1000, 200)

        assert [len(c) for c in chunks] == [1000, 1000, 700]
        assert chunks[0] == text[0:1000]
        assert chunks[1] == text[800:1800]
        assert chunks[2] == text[1600:2300]

    def test_2500_chars_gives_three_windows(self) -> None:
        text = _text(2500)
        chunker = TextChunker(chunk_size=1000, overlap=200)
        chunks = chunker.chunk(text)

        assert [(c.start, c.end) for c in chunks] == [(0, 1000), (800, 1800), (1600, 2500)]
        assert chunks[-1].length == 900

    def test_consecutive_windows_share_overlap(self) -> None:
        text = _text(2300)
        chunks = split_text(text, 1000, 200)

        for left, right in zip(chunks, chunks[1:]):
            assert left[-200:] == right[:200]

    def test_exact_multiple_has_no_trailing_fragment(self) -> None:
        # 1000 + 800: the second window ends exactly at the text end.
        chunks = split_text(_text(1800), 1000, 200)
        assert [len(c) for c in chunks] == [1000, 1000]

    def test_zero_overlap_tiles_text(self) -> None:
        text = _text(25)
        chunks = split_text(text, 10, 0)
        assert chunks == [text[0:10], text[10:20], text[20:25]]

    @pytest.mark.parametrize(
        ("length", "chunk_size", "overlap"),
        [(1, 1000, 200), (999, 1000, 200), (1001, 1000, 200), (5000, 1000, 200),
         (37, 5, 4), (100, 7, 3), (64, 8, 0)],
    )
    def test_count_and_sizes(self, length: int, chunk_size: int, overlap: int) -> None:
        chunks = split_text(_text(length), chunk_size, overlap)

        assert len(chunks) == _expected_count(length, chunk_size, overlap)
        assert all(len(c) == chunk_size for c in chunks[:-1])
        assert 0 < len(chunks[-1]) <= chunk_size


# ---------------------------------------------------------------------------
# Edge cases
# ---------------------------------------------------------------------------


class TestEdgeCases:
    def test_empty_text(self) -> None:
        assert split_text("") == []
        assert TextChunker().chunk("") == []

    def test_short_text_is_single_window(self) -> None:
        assert split_text("Short clause.") == ["Short clause."]

    def test_text_equal_to_chunk_size(self) -> None:
        text = _text(1000)
        assert split_text(text) == [text]

    def test_whitespace_is_not_special(self) -> None:
        text = "   \n\n   " * 3
        chunks = split_text(text, 10, 2)
        assert TextChunker(10, 2).reassemble(chunks) == text

    def test_unicode_text(self) -> None:
        text = "§ 12 Kündigung - Frist: drei Monate. " * 40
        chunker = TextChunker(chunk_size=100, overlap=30)
        assert chunker.reassemble(chunker.split(text)) == text


# ---------------------------------------------------------------------------
# Reassembly and offsets
# ---------------------------------------------------------------------------


class TestReassembly:
    @pytest.mark.parametrize(
        ("length", "chunk_size", "overlap"),
        [(0, 10, 3), (9, 10, 3), (2300, 1000, 200), (2500, 1000, 200), (101, 10, 9)],
    )
    def test_round_trip(self, length: int, chunk_size: int, overlap: int) -> None:
        text = _text(length)
        chunker = TextChunker(chunk_size=chunk_size, overlap=overlap)
        assert chunker.reassemble(chunker.split(text)) == text

    def test_offsets_index_the_source(self, sample_lease_text: str) -> None:
        chunker = TextChunker(chunk_size=300, overlap=50)
        chunks = chunker.chunk(sample_lease_text)

        assert chunks[0].start == 0
        assert chunks[-1].end == len(sample_lease_text)
        for chunk in chunks:
            assert sample_lease_text[chunk.start : chunk.end] == chunk.text
        for left, right in zip(chunks, chunks[1:]):
            assert right.start == left.start + 250

    def test_split_and_chunk_agree(self, sample_lease_text: str) -> None:
        chunker = TextChunker(chunk_size=300, overlap=50)
        assert chunker.split(sample_lease_text) == [c.text for c in chunker.chunk(sample_lease_text)]


# ---------------------------------------------------------------------------
# Parameter validation
# ---------------------------------------------------------------------------


class TestValidation:
    @pytest.mark.parametrize(
        ("chunk_size", "overlap"),
        [(0, 0), (-5, 0), (10, 10), (10, 11), (10, -1)],
    )
    def test_invalid_parameters(self, chunk_size: int, overlap: int) -> None:
        with pytest.raises(InvalidConfigurationError):
            TextChunker(chunk_size=chunk_size, overlap=overlap)

    def test_split_text_validates_before_splitting(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            split_text("", chunk_size=100, overlap=100)

    def test_non_integer_parameters(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="integer"):
            TextChunker(chunk_size=10.5, overlap=2)  # type: ignore[arg-type]
        with pytest.raises(InvalidConfigurationError):
            TextChunker(chunk_size=True, overlap=0)  # type: ignore[arg-type]

    def test_is_a_configuration_error(self) -> None:
        with pytest.raises(ConfigurationError):
            TextChunker(chunk_size=1, overlap=1)

    def test_smallest_valid_configuration(self) -> None:
        chunks = split_text("abc", chunk_size=1, overlap=0)
        assert chunks == ["a", "b", "c"]
