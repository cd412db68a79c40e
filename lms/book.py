from __future__ import annotations


class Book:
    """A single title held by the library, with its count of shelf copies."""

    def __init__(self, name: str, author: str, isbn: str, copies: int = 0) -> None:
        self.name = name.strip()
        self.author = author.strip()
        self.isbn = isbn.strip()
        self.copies = int(copies)

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.name} by {self.author} (ISBN: {self.isbn})"

    def __repr__(self) -> str:
        return f"Book(name={self.name!r}, author={self.author!r}, isbn={self.isbn!r}, copies={self.copies})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "author": self.author,
            "isbn": self.isbn,
            "copies": self.copies,
        }

    def to_line(self) -> str:
        """Render the record as a books-file line: ``name,author,isbn copies``."""
        return f"{self.name},{self.author},{self.isbn} {self.copies}\n"

    @staticmethod
    def from_line(line: str) -> "Book":
        """Parse a books-file line. Raises ValueError on malformed input."""
        line = line.rstrip("\r\n")
        head, sep, tail = line.rpartition(",")
        if not sep:
            raise ValueError(f"missing field separator in {line!r}")
        name, sep, author = head.partition(",")
        if not sep:
            raise ValueError(f"missing author in {line!r}")
        parts = tail.split()
        if len(parts) != 2:
            raise ValueError(f"expected 'isbn copies' in {line!r}")
        isbn, copies = parts
        return Book(name=name, author=author, isbn=isbn, copies=int(copies))
