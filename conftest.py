"""Pytest configuration for the Prequel test suite."""
import sys
from pathlib import Path

import pytest

# Make the prequel package importable without installing it
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from prequel.PrequelSemanticChecker import PrequelSemanticChecker  # noqa: E402
from prequel.PrequelScope import VariableScope  # noqa: E402


@pytest.fixture
def checker():
    return PrequelSemanticChecker()


@pytest.fixture
def scope():
    return VariableScope()
