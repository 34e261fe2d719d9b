"""Shared fixtures for PyMetaSync tests."""

import tempfile
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

from pymetasync.output import OutputFormatter


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def output():
    """Output formatter writing to an in-memory buffer."""
    return OutputFormatter(console=Console(file=StringIO(), width=120))
