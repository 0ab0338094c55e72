"""Shared test fixtures and configuration for Squire chunking tests."""

import logging
import shutil
import tempfile
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the sample documents."""
    return FIXTURES_DIR


@pytest.fixture
def read_fixture():
    """Read a sample document by file name."""
    def _read(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")
    return _read


@pytest.fixture
def sample_text(read_fixture) -> str:
    return read_fixture("sample.txt")


@pytest.fixture
def sample_markdown(read_fixture) -> str:
    return read_fixture("sample.md")


@pytest.fixture
def long_document(read_fixture) -> str:
    return read_fixture("long-document.txt")


@pytest.fixture
def document_id() -> str:
    return "00000000-0000-0000-0000-000000000001"


@pytest.fixture
def temp_directory():
    """Provide a temporary directory for testing."""
    temp_dir = tempfile.mkdtemp()
    temp_path = Path(temp_dir)

    yield temp_path

    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def restore_logging():
    """Restore root and package logger state changed by logging setup."""
    root_logger = logging.getLogger()
    package_logger = logging.getLogger("squire_chunking")
    handlers = list(root_logger.handlers)
    root_level = root_logger.level
    package_level = package_logger.level

    yield

    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(root_level)
    package_logger.setLevel(package_level)
