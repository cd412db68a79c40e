import logging
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from lms import storage
from lms.book import Book
from lms.errors import BookNotFoundError, ValidationError
from lms.validators import ISBNValidator, TextValidator, ValidationResult

logger = logging.getLogger(__name__)


def _require(result: ValidationResult):
    if not result.ok:
        raise ValidationError(result.reason)
    return result.value


class Catalog:
    """Book inventory keyed by ISBN, saved to the books file after every change."""

    def __init__(self, books_file: Union[str, Path]) -> None:
        self.books_file = Path(books_file)
        self.books: List[Book] = storage.load_books(self.books_file)
        # False when the most recent save could not be written.
        self.persisted = True

    def __len__(self) -> int:
        return len(self.books)

    @property
    def is_empty(self) -> bool:
        return not self.books

    # ------------------------- Core operations ------------------------- #
    def add_book(self, name: str, author: str, isbn: str, copies: int) -> Tuple[Book, bool]:
        """Add copies of a title. Returns the record and whether it was newly created.

        An ISBN already in the catalog gets the copies added to its existing
        record; name and author of that record are left as they were.
        """
        name = _require(TextValidator.validate_book_name(name))
        author = _require(TextValidator.validate_author(author))
        isbn = _require(ISBNValidator.validate(isbn))
        copies = _require(TextValidator.validate_copies(copies))

        book = self.find_book(isbn)
        if book:
            book.copies += copies
            logger.info("Merged %d copies into ISBN %s (now %d)", copies, isbn, book.copies)
            self.save()
            return book, False

        book = Book(name=name, author=author, isbn=isbn, copies=copies)
        self.books.append(book)
        logger.info("Added ISBN %s with %d copies", isbn, copies)
        self.save()
        return book, True

    def delete_book(self, isbn: str, copies_to_remove: int) -> int:
        """Remove copies of a title and return how many remain.

        Asking for at least as many copies as the record holds removes the
        record entirely and returns 0.
        """
        copies_to_remove = _require(TextValidator.validate_copies(copies_to_remove))
        book = self.find_book(isbn)
        if not book:
            raise BookNotFoundError("Book not found in the inventory.")

        if copies_to_remove >= book.copies:
            self.books.remove(book)
            remaining = 0
            logger.info("Removed ISBN %s from the inventory", book.isbn)
        else:
            book.copies -= copies_to_remove
            remaining = book.copies
            logger.info("Removed %d copies of ISBN %s (now %d)", copies_to_remove, book.isbn, remaining)
        self.save()
        return remaining

    def update_book(self, isbn: str, copies: int) -> Book:
        copies = _require(TextValidator.validate_copies(copies))
        book = self.find_book(isbn)
        if not book:
            raise BookNotFoundError("Book not found in the inventory.")
        book.copies = copies
        self.save()
        return book

    def list_books(self) -> Iterator[Book]:
        yield from self.books

    def find_book(self, isbn: str) -> Optional[Book]:
        norm = ISBNValidator.normalize_isbn(isbn)
        for book in self.books:
            if book.isbn == norm:
                return book
        return None

    # ------------------------- Persistence ------------------------- #
    def save(self) -> bool:
        self.persisted = storage.save_books(self.books_file, self.books)
        return self.persisted
