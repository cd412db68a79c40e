from __future__ import annotations


class Student:
    """A registered borrower."""

    def __init__(self, first_name: str, last_name: str, reg_number: str, phone: str, email: str) -> None:
        self.first_name = first_name.strip()
        self.last_name = last_name.strip()
        self.reg_number = reg_number.strip()
        self.phone = phone.strip()
        self.email = email.strip()

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.full_name} ({self.reg_number})"

    def __repr__(self) -> str:
        return f"Student(reg_number={self.reg_number!r}, name={self.full_name!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Student):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict:
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "reg_number": self.reg_number,
            "phone": self.phone,
            "email": self.email,
        }

    def to_line(self) -> str:
        return f"{self.first_name} {self.last_name} {self.reg_number} {self.phone} {self.email}\n"

    @staticmethod
    def from_tokens(tokens: list) -> "Student":
        if len(tokens) != 5:
            raise ValueError(f"expected 5 fields, got {len(tokens)}")
        return Student(*tokens)
