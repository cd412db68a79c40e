import pytest

from lms.library import Library
from lms.ui import OUTPUT_MODE_ENV


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # Output mode is read from the environment on every render
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")


@pytest.fixture
def lib(tmp_path):
    # Each test gets its own data directory so no state leaks between tests
    return Library(data_dir=tmp_path)


@pytest.fixture
def dune(lib):
    book, _ = lib.catalog.add_book("Dune", "Frank Herbert", "1234567890123", 2)
    return book
