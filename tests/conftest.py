"""Shared fixtures for gzmethod tests."""

import random
import string
from pathlib import Path
from typing import Tuple

import pytest

WORDS = [
    "archive", "stream", "chunk", "header", "trailer", "deflate", "member",
    "directory", "suffix", "level", "buffer", "checksum", "tarball", "restore",
]


@pytest.fixture
def sample_text() -> str:
    """A few dozen KB of mixed prose, hex digests and addresses."""
    rng = random.Random(1952)
    lines = []
    for _ in range(400):
        lines.append(" ".join(rng.choice(WORDS) for _ in range(12)).capitalize() + ".")
        lines.append("".join(rng.choice("0123456789abcdef") for _ in range(32)))
        user = "".join(rng.choice(string.ascii_uppercase + string.digits) for _ in range(8))
        lines.append(f"{user}@EXAMPLE.ORG")
    return "\n".join(lines)


@pytest.fixture
def sample_tree(tmp_path: Path, sample_text: str) -> Tuple[Path, Path]:
    """A directory holding one file a few levels down."""
    root = tmp_path / "abc"
    nested = root / "def" / "ghi" / "jkl"
    nested.mkdir(parents=True)
    test_file = nested / "file.txt"
    test_file.write_text(sample_text)
    return root, test_file
