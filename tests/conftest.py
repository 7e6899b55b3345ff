"""Shared fixtures for the packer test suite."""

import os
import sys

import pytest

# Ensure the src/ layout is importable without an editable install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from atlas_packer import MaxRectsPacker  # noqa: E402


@pytest.fixture
def packer():
    """Empty 100x100 bin, rotations disabled."""
    return MaxRectsPacker(100, 100, allow_rotations=False)


@pytest.fixture
def rotating_packer():
    """Empty 100x100 bin, rotations enabled."""
    return MaxRectsPacker(100, 100, allow_rotations=True)
