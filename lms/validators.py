import re
from typing import Iterable, NamedTuple, Optional

from lms.config import settings

BOOK_NAME_RE = re.compile(r"^[A-Za-z0-9 .\-]+$")
AUTHOR_RE = re.compile(r"^[A-Za-z .,\-]+$")
PERSON_NAME_RE = re.compile(r"^[A-Za-z.'\-]+$")
ISBN_RE = re.compile(r"^\d{13}$")
REG_NUMBER_RE = re.compile(r"^\d{8}$")
PHONE_RE = re.compile(r"^[6-9]\d{9}$")
EMAIL_RE = re.compile(r"^(?P<local>[A-Za-z0-9._%+\-]+)@(?P<domain>[A-Za-z0-9.\-]+)$")


class ValidationResult(NamedTuple):
    """Outcome of a field check: the cleaned value, or the reason it was rejected."""

    value: Optional[str]
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.reason is None


def _accept(value: str) -> ValidationResult:
    return ValidationResult(value)


def _reject(reason: str) -> ValidationResult:
    return ValidationResult(None, reason)


class ISBNValidator:
    """ISBNs in this library are plain 13-digit strings; no checksum is applied."""

    @staticmethod
    def normalize_isbn(raw: Optional[str]) -> str:
        if raw is None:
            return ""
        return raw.strip()

    @staticmethod
    def validate(raw: Optional[str]) -> ValidationResult:
        isbn = ISBNValidator.normalize_isbn(raw)
        if not ISBN_RE.match(isbn):
            return _reject("Invalid ISBN! It must be exactly 13 digits.")
        return _accept(isbn)


class TextValidator:
    """Allow-list checks for free-text book fields."""

    @staticmethod
    def validate_book_name(name: Optional[str]) -> ValidationResult:
        # Commas are the field separator of the books file.
        t = (name or "").strip()
        if not BOOK_NAME_RE.match(t):
            return _reject("Invalid book name! Only letters, numbers, spaces, '.' and '-' allowed.")
        return _accept(t)

    @staticmethod
    def validate_author(author: Optional[str]) -> ValidationResult:
        t = (author or "").strip()
        if not AUTHOR_RE.match(t):
            return _reject("Invalid author name! Only letters, spaces, and basic punctuation allowed.")
        return _accept(t)

    @staticmethod
    def validate_copies(raw) -> ValidationResult:
        try:
            copies = int(str(raw).strip())
        except (TypeError, ValueError):
            return _reject("Invalid input! Please enter a valid number.")
        if copies < 0:
            return _reject("Number of copies cannot be negative.")
        return ValidationResult(copies)


class StudentValidator:
    """Checks for the fields of a student registration."""

    @staticmethod
    def validate_name(name: Optional[str]) -> ValidationResult:
        t = (name or "").strip()
        if not PERSON_NAME_RE.match(t):
            return _reject("Invalid name! Use a single word of letters, '.', ''' or '-'.")
        return _accept(t)

    @staticmethod
    def validate_reg_number(raw: Optional[str]) -> ValidationResult:
        t = (raw or "").strip()
        if not REG_NUMBER_RE.match(t):
            return _reject("Invalid registration number! It must be an 8-digit number.")
        return _accept(t)

    @staticmethod
    def validate_phone(raw: Optional[str]) -> ValidationResult:
        t = (raw or "").strip()
        if not PHONE_RE.match(t):
            return _reject("Invalid phone number! It must start with 6, 7, 8, or 9 and be 10 digits long.")
        return _accept(t)

    @staticmethod
    def validate_email(raw: Optional[str], domains: Optional[Iterable[str]] = None) -> ValidationResult:
        allowed = [d.lower() for d in (domains if domains is not None else settings.email_domains)]
        t = (raw or "").strip()
        match = EMAIL_RE.match(t)
        if not match or match.group("domain").lower() not in allowed:
            suffixes = ", ".join(f"@{d}" for d in allowed)
            return _reject(f"Invalid email! It must end with {suffixes}.")
        return _accept(t)
