"""Flat-file persistence for books, students and the circulation logs.

Books and students are loaded whole at startup and saved whole after every
change. The issued-books log is append-only; a return is recorded by copying
every other line into a temp file and replacing the log with it.

Write failures never raise: they are logged and reported through a ``False``
return (``None`` for log removal) so the caller's in-memory change still
stands.
"""

import logging
import os
import time
from pathlib import Path
from typing import Iterable, List, NamedTuple, Optional, Union

from lms.book import Book
from lms.student import Student

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# ctime() renders as "Mon Oct 19 10:00:00 2026": five whitespace tokens.
_TIMESTAMP_TOKENS = 5


class IssueLogEntry(NamedTuple):
    reg_number: str
    book_name: str
    author: str
    isbn: str
    timestamp: str

    def to_line(self) -> str:
        return f"{self.reg_number} {self.book_name} {self.author} {self.isbn} {self.timestamp}\n"


def timestamp() -> str:
    """Human-readable local date-time, as printed by ``ctime`` without the newline."""
    return time.ctime()


def parse_issue_line(line: str) -> Optional[IssueLogEntry]:
    """Parse one issued-books log line, or return None if it is malformed.

    Book names and authors may contain spaces, so the line is read from both
    ends: reg number first, then the ISBN right before the timestamp. Whatever
    sits between them is kept as the book name, since the two free-text
    fields cannot be told apart once written.
    """
    tokens = line.split()
    if len(tokens) < 2 + _TIMESTAMP_TOKENS:
        return None
    reg_number = tokens[0]
    isbn = tokens[-(_TIMESTAMP_TOKENS + 1)]
    middle = " ".join(tokens[1:-(_TIMESTAMP_TOKENS + 1)])
    stamp = " ".join(tokens[-_TIMESTAMP_TOKENS:])
    return IssueLogEntry(reg_number, middle, "", isbn, stamp)


# ------------------------- Books ------------------------- #
def load_books(path: PathLike) -> List[Book]:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except OSError:
        # Missing or unreadable file means no data yet.
        return []

    books: List[Book] = []
    for lineno, line in enumerate(lines, 1):
        if not line.strip():
            continue
        try:
            books.append(Book.from_line(line))
        except ValueError as e:
            logger.warning("Skipping malformed line %d in %s: %s", lineno, path, e)
    logger.debug("Loaded %d books from %s", len(books), path)
    return books


def save_books(path: PathLike, books: Iterable[Book]) -> bool:
    return _write_lines(path, (book.to_line() for book in books))


# ------------------------- Students ------------------------- #
def load_students(path: PathLike) -> List[Student]:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except OSError:
        return []

    students: List[Student] = []
    for lineno, line in enumerate(lines, 1):
        tokens = line.split()
        if not tokens:
            continue
        try:
            students.append(Student.from_tokens(tokens))
        except ValueError as e:
            logger.warning("Skipping malformed line %d in %s: %s", lineno, path, e)
    logger.debug("Loaded %d students from %s", len(students), path)
    return students


def save_students(path: PathLike, students: Iterable[Student]) -> bool:
    return _write_lines(path, (student.to_line() for student in students))


# ------------------------- Issued books log ------------------------- #
def append_issue_log(path: PathLike, entry: IssueLogEntry) -> bool:
    return _append_line(path, entry.to_line())


def read_issue_log(path: PathLike) -> List[IssueLogEntry]:
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except OSError:
        return []

    entries: List[IssueLogEntry] = []
    for lineno, line in enumerate(lines, 1):
        if not line.strip():
            continue
        entry = parse_issue_line(line)
        if entry is None:
            logger.warning("Skipping malformed line %d in %s", lineno, path)
            continue
        entries.append(entry)
    return entries


def remove_issue_log(path: PathLike, reg_number: str, isbn: str) -> Optional[bool]:
    """Drop the first log line recording ``isbn`` issued to ``reg_number``.

    Returns False when no line matches (a missing log counts as empty) and
    None when a file cannot be opened. The log is untouched in both cases.
    """
    path = Path(path)
    tmp_path = path.with_name(path.name + ".tmp")
    found = False
    try:
        with open(path, "r", encoding="utf-8") as src, open(tmp_path, "w", encoding="utf-8") as dst:
            for line in src:
                entry = parse_issue_line(line)
                if not found and entry is not None and entry.reg_number == reg_number and entry.isbn == isbn:
                    found = True
                    continue
                dst.write(line if line.endswith("\n") else line + "\n")
    except FileNotFoundError:
        _discard(tmp_path)
        return False
    except OSError as e:
        logger.error("Unable to open issued books log file %s: %s", path, e)
        _discard(tmp_path)
        return None

    if not found:
        _discard(tmp_path)
        return False
    os.replace(tmp_path, path)
    return True


# ------------------------- Login log ------------------------- #
def format_login_line(role: str, success: bool, when: Optional[str] = None) -> str:
    return f"Role: {role}, Success: {'Yes' if success else 'No'}, Time: {when or timestamp()}\n"


def append_login_log(path: PathLike, role: str, success: bool) -> bool:
    return _append_line(path, format_login_line(role, success))


# ------------------------- Helpers ------------------------- #
def _write_lines(path: PathLike, lines: Iterable[str]) -> bool:
    path = Path(path)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.writelines(lines)
    except OSError as e:
        logger.error("Could not open %s for writing: %s", path, e)
        return False
    return True


def _append_line(path: PathLike, line: str) -> bool:
    path = Path(path)
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(line)
    except OSError as e:
        logger.error("Unable to open log file %s: %s", path, e)
        return False
    return True


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
