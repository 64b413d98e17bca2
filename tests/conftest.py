"""Pytest configuration and fixtures for dataknobs_rules tests."""

import shutil
import sys
import tempfile
from pathlib import Path

import pytest

# Add the package source to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dataknobs_rules.person import InMemoryUserRepo, PersonName  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


class CountingUserRepo:
    """UserRepo that records every lookup."""

    def __init__(self, existing=None):
        self.existing = dict(existing or {})
        self.calls = []

    def find_by_name(self, name):
        self.calls.append(name)
        return self.existing.get(name)


class FailingUserRepo:
    """UserRepo whose lookups always fail, as an unreachable store would."""

    def find_by_name(self, name):
        raise ConnectionError("user store unavailable")


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp = tempfile.mkdtemp()
    yield Path(temp)
    shutil.rmtree(temp)


@pytest.fixture
def fixtures_dir():
    return FIXTURES_DIR


@pytest.fixture
def empty_repo():
    return InMemoryUserRepo()


@pytest.fixture
def repo_with_jan_bols():
    return InMemoryUserRepo({1: PersonName("Jan", "Bols")})


@pytest.fixture
def counting_repo():
    return CountingUserRepo()


@pytest.fixture
def failing_repo():
    return FailingUserRepo()
