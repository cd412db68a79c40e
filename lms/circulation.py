"""Issue/return bookkeeping.

The ledger tracks, per registration number, which ISBNs a student currently
holds. Every issue appends a line to the issued-books log and every return
removes one, so the log always lists the open loans; the ledger is rebuilt
from it on startup.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, List, Set, Union

from lms import storage
from lms.catalog import Catalog
from lms.errors import (
    AlreadyIssuedError,
    BookNotFoundError,
    BookUnavailableError,
    IssueLimitError,
    ValidationError,
)
from lms.storage import IssueLogEntry
from lms.validators import StudentValidator

logger = logging.getLogger(__name__)

DEFAULT_MAX_BOOKS = 3


@dataclass
class IssueReceipt:
    book_name: str
    author: str
    isbn: str
    reg_number: str
    issued_at: str
    logged: bool = True


@dataclass
class ReturnReceipt:
    book_name: str
    author: str
    isbn: str
    reg_number: str
    first_name: str = ""
    last_name: str = ""
    # False when the log held no record of this loan, or could not be read.
    log_updated: bool = True
    log_error: bool = False

    @property
    def student_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class CirculationLedger:
    """Enforces the per-student loan cap and the one-copy-per-title rule."""

    def __init__(self, catalog: Catalog, issued_file: Union[str, Path], max_books: int = DEFAULT_MAX_BOOKS) -> None:
        self.catalog = catalog
        self.issued_file = Path(issued_file)
        self.max_books = max_books
        self._issued: Dict[str, Set[str]] = defaultdict(set)
        self._replay_log()

    def _replay_log(self) -> None:
        for entry in storage.read_issue_log(self.issued_file):
            self._issued[entry.reg_number].add(entry.isbn)
        if self._issued:
            logger.debug("Restored open loans for %d students", len(self._issued))

    # ------------------------- Queries ------------------------- #
    def issued_count(self, reg_number: str) -> int:
        return len(self._issued.get(reg_number, ()))

    def issued_isbns(self, reg_number: str) -> FrozenSet[str]:
        return frozenset(self._issued.get(reg_number, ()))

    def _still_open(self, reg_number: str, isbn: str) -> bool:
        return any(e.reg_number == reg_number and e.isbn == isbn for e in self.entries())

    def _release(self, reg_number: str, isbn: str) -> None:
        held = self._issued.get(reg_number)
        if held is None:
            return
        held.discard(isbn)
        if not held:
            del self._issued[reg_number]

    def entries(self) -> List[IssueLogEntry]:
        return storage.read_issue_log(self.issued_file)

    # ------------------------- Transactions ------------------------- #
    def issue(self, isbn: str, reg_number: str) -> IssueReceipt:
        book = self.catalog.find_book(isbn)
        if book is None or book.copies <= 0:
            raise BookUnavailableError("The requested book is not available or not found in the inventory.")

        result = StudentValidator.validate_reg_number(reg_number)
        if not result.ok:
            raise ValidationError(result.reason)
        reg_number = result.value

        held = self._issued.get(reg_number, set())
        if len(held) >= self.max_books:
            raise IssueLimitError(
                f"This student has already issued {self.max_books} books and cannot issue more."
            )
        if book.isbn in held:
            raise AlreadyIssuedError("This student has already issued this book.")

        book.copies -= 1
        self._issued[reg_number].add(book.isbn)
        self.catalog.save()

        entry = IssueLogEntry(reg_number, book.name, book.author, book.isbn, storage.timestamp())
        logged = storage.append_issue_log(self.issued_file, entry)
        logger.info("Issued ISBN %s to %s", book.isbn, reg_number)
        return IssueReceipt(
            book_name=book.name,
            author=book.author,
            isbn=book.isbn,
            reg_number=reg_number,
            issued_at=entry.timestamp,
            logged=logged,
        )

    def return_book(self, isbn: str, reg_number: str, first_name: str = "", last_name: str = "") -> ReturnReceipt:
        """Take a copy back onto the shelf.

        The copy is counted back even when the log has no record of the loan;
        ``log_updated`` on the receipt reports that case, and ``log_error``
        tells an unreadable log apart from a missing record.
        """
        book = self.catalog.find_book(isbn)
        if book is None:
            raise BookNotFoundError("Invalid ISBN. Book not found in the inventory.")

        reg_number = (reg_number or "").strip()
        book.copies += 1

        removed = storage.remove_issue_log(self.issued_file, reg_number, book.isbn)
        # A log carrying duplicate lines for one loan keeps the slot taken
        # until the last of them is returned.
        if not self._still_open(reg_number, book.isbn):
            self._release(reg_number, book.isbn)
        self.catalog.save()
        if removed:
            logger.info("Returned ISBN %s from %s", book.isbn, reg_number)
        elif removed is None:
            logger.error("Issued books log could not be updated for ISBN %s", book.isbn)
        else:
            logger.warning("No record of ISBN %s being issued to %s", book.isbn, reg_number)
        return ReturnReceipt(
            book_name=book.name,
            author=book.author,
            isbn=book.isbn,
            reg_number=reg_number,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            log_updated=bool(removed),
            log_error=removed is None,
        )
