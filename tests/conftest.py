"""Shared test fixtures for notebook-model tests."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_path(fixtures_dir: Path) -> Path:
    """Return the path to the sample visualization notebook."""
    return fixtures_dir / "visualization.ipynb"


@pytest.fixture
def sample_bytes(sample_path: Path) -> bytes:
    """Return the raw bytes of the sample notebook."""
    return sample_path.read_bytes()


@pytest.fixture
def tmp_output(tmp_path: Path) -> Path:
    """Return a temporary output directory."""
    output = tmp_path / "output"
    output.mkdir()
    return output
