"""Tests for in-memory GZIP string compression."""

import gzip

import pytest

from gzmethod.codec import GzipCompressionMethod, UncompressError, compress_string, uncompress_string
from gzmethod.codec.errors import GzipUncompressError
from gzmethod.config import GzipConfig


class TestStringCompression:
    """Test compress_string/uncompress_string."""

    def test_round_trip(self, sample_text):
        """Test that uncompressing restores the original bytes."""
        data = sample_text.encode("utf-8")
        compressed = compress_string(data)

        assert compressed != data
        assert len(compressed) < len(data)
        assert uncompress_string(compressed) == data

    def test_empty_string(self):
        """Test the empty buffer round trip."""
        compressed = compress_string(b"")

        assert compressed[:2] == b"\x1f\x8b"
        assert uncompress_string(compressed) == b""

    def test_text_input_is_utf8(self):
        """Test that str input is encoded before compression."""
        assert uncompress_string(compress_string("naïve café")) == "naïve café".encode("utf-8")

    def test_interoperates_with_stdlib_gzip(self, sample_text):
        """Test that output is plain RFC 1952 in both directions."""
        data = sample_text.encode("utf-8")

        assert gzip.decompress(compress_string(data)) == data
        assert uncompress_string(gzip.compress(data)) == data

    def test_level_changes_size(self, sample_text):
        """Test that level 0 stores and level 9 compresses."""
        data = sample_text.encode("utf-8")

        assert len(compress_string(data, 0)) > len(data)
        assert len(compress_string(data, 9)) < len(compress_string(data, 1))

    def test_garbage_input(self):
        """Test that non-GZIP bytes fail instead of returning garbage."""
        with pytest.raises(GzipUncompressError):
            uncompress_string(b"this is definitely not gzip data")

    def test_empty_input(self):
        """Test that an empty buffer is not a GZIP stream."""
        with pytest.raises(UncompressError):
            uncompress_string(b"")

    def test_truncated_input(self, sample_text):
        """Test that a cut-off stream is rejected."""
        compressed = compress_string(sample_text)

        with pytest.raises(GzipUncompressError):
            uncompress_string(compressed[: len(compressed) // 2])

    def test_checksum_mismatch(self, sample_text):
        """Test that a corrupted CRC is detected."""
        corrupted = bytearray(compress_string(sample_text))
        corrupted[-8] ^= 0xFF

        with pytest.raises(GzipUncompressError) as exc_info:
            uncompress_string(bytes(corrupted))

        assert exc_info.value.__cause__ is not None


class TestMethodStrings:
    """Test the string methods exposed on GzipCompressionMethod."""

    def test_uses_configured_level(self, sample_text):
        """Test that the method compresses at its own level."""
        stored = GzipCompressionMethod(config=GzipConfig(compression_level=0))
        best = GzipCompressionMethod(config=GzipConfig(compression_level=9))

        assert len(stored.compress_string(sample_text)) > len(best.compress_string(sample_text))
        assert best.uncompress_string(stored.compress_string(sample_text)) == sample_text.encode("utf-8")
