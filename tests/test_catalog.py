import pytest

from lms.catalog import Catalog
from lms.errors import BookNotFoundError, ValidationError
from lms.library import Library


def test_empty_inventory(lib):
    assert lib.catalog.is_empty
    assert list(lib.catalog.list_books()) == []


def test_add_and_find(lib):
    book, created = lib.catalog.add_book("Dune", "Frank Herbert", "1234567890123", 2)

    assert created is True
    assert lib.catalog.find_book("1234567890123") is book
    assert len(lib.catalog) == 1
    assert not lib.catalog.is_empty


def test_adding_same_isbn_merges_copies(lib):
    lib.catalog.add_book("Dune", "Frank Herbert", "1234567890123", 2)
    book, created = lib.catalog.add_book("Dune Reissue", "F. Herbert", "1234567890123", 5)

    assert created is False
    assert book.copies == 7
    assert book.name == "Dune"
    assert len(lib.catalog) == 1


def test_list_books_is_lazy_and_ordered(lib):
    lib.catalog.add_book("Dune", "Frank Herbert", "1234567890123", 1)
    lib.catalog.add_book("Emma", "Jane Austen", "9780141439587", 1)

    listing = lib.catalog.list_books()
    assert not isinstance(listing, list)
    assert [b.name for b in listing] == ["Dune", "Emma"]


@pytest.mark.parametrize(
    "name,author,isbn,copies",
    [
        ("Dune, Part 1", "Frank Herbert", "1234567890123", 1),
        ("Dune", "Frank Herbert 2", "1234567890123", 1),
        ("Dune", "Frank Herbert", "12345", 1),
        ("Dune", "Frank Herbert", "1234567890123", -1),
    ],
)
def test_add_rejects_invalid_fields(lib, name, author, isbn, copies):
    with pytest.raises(ValidationError):
        lib.catalog.add_book(name, author, isbn, copies)
    assert lib.catalog.is_empty


def test_delete_some_copies(lib, dune):
    remaining = lib.catalog.delete_book("1234567890123", 1)

    assert remaining == 1
    assert lib.catalog.find_book("1234567890123").copies == 1


@pytest.mark.parametrize("count", [2, 10])
def test_delete_all_copies_removes_record(lib, dune, count):
    assert lib.catalog.delete_book("1234567890123", count) == 0
    assert lib.catalog.find_book("1234567890123") is None
    assert lib.catalog.is_empty


def test_delete_unknown_isbn(lib, dune):
    with pytest.raises(BookNotFoundError, match="Book not found"):
        lib.catalog.delete_book("9999999999999", 1)
    assert dune.copies == 2


def test_update_replaces_copies(lib, dune):
    book = lib.catalog.update_book("1234567890123", 9)
    assert book.copies == 9


def test_update_unknown_isbn(lib):
    with pytest.raises(BookNotFoundError):
        lib.catalog.update_book("9999999999999", 1)


def test_every_change_is_persisted(tmp_path):
    lib = Library(data_dir=tmp_path)
    lib.catalog.add_book("Dune", "Frank Herbert", "1234567890123", 2)
    lib.catalog.add_book("Emma", "Jane Austen", "9780141439587", 3)
    lib.catalog.delete_book("1234567890123", 1)
    lib.catalog.update_book("9780141439587", 8)

    reloaded = Catalog(tmp_path / "books.txt")
    assert [(b.isbn, b.copies) for b in reloaded.list_books()] == [("1234567890123", 1), ("9780141439587", 8)]


def test_failed_save_keeps_in_memory_change(lib, monkeypatch):
    monkeypatch.setattr("lms.catalog.storage.save_books", lambda path, books: False)

    book, _ = lib.catalog.add_book("Dune", "Frank Herbert", "1234567890123", 2)

    assert lib.catalog.persisted is False
    assert lib.catalog.find_book("1234567890123") is book
