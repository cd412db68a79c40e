import json
import os
from dataclasses import asdict
from typing import Iterable, List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lms.book import Book
from lms.circulation import IssueReceipt, ReturnReceipt
from lms.storage import IssueLogEntry
from lms.student import Student

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LMS_OUTPUT"

RULE = "--------------------------------------------"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_books(books: Iterable[Book]) -> None:
    """Print the inventory in the current output mode.
    - plain: fixed-width columns, or 'The library inventory is currently empty.'
    - json: array of book objects
    - rich: Rich table
    """
    books: List[Book] = list(books)
    mode = get_output_mode()

    if not books:
        print("The library inventory is currently empty.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="List of All Books", show_lines=True, header_style="bold cyan")
        table.add_column("Book Name", style="white")
        table.add_column("Author", style="white")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Copies", justify="right")
        for b in books:
            table.add_row(b.name, b.author, b.isbn, str(b.copies))
        _console.print(table)
    else:
        print("List of All Books")
        print(f"{'Book Name':<30}{'Author':<25}{'ISBN':<20}Copies")
        print("-" * 81)
        for b in books:
            print(f"{b.name:<30}{b.author:<25}{b.isbn:<20}{b.copies}")


def print_students(students: Iterable[Student]) -> None:
    students: List[Student] = list(students)
    mode = get_output_mode()

    if not students:
        print("No students have been registered yet.")
        return

    if mode == "json":
        print(json.dumps([s.to_dict() for s in students], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="List of All Students", show_lines=True, header_style="bold cyan")
        for column in ("First Name", "Last Name", "Reg. Number", "Phone", "Email"):
            table.add_column(column, style="magenta" if column == "Reg. Number" else "white")
        for s in students:
            table.add_row(s.first_name, s.last_name, s.reg_number, s.phone, s.email)
        _console.print(table)
    else:
        print("List of All Students")
        print(f"{'First Name':<25}{'Last Name':<25}{'Reg. Number':<20}{'Phone':<15}Email")
        print("-" * 100)
        for s in students:
            print(f"{s.first_name:<25}{s.last_name:<25}{s.reg_number:<20}{s.phone:<15}{s.email}")


def print_issue_log(entries: Iterable[IssueLogEntry]) -> None:
    entries: List[IssueLogEntry] = list(entries)
    mode = get_output_mode()

    if not entries:
        print("No books are currently issued.")
        return

    if mode == "json":
        payload = [
            {"reg_number": e.reg_number, "book": e.book_name, "isbn": e.isbn, "timestamp": e.timestamp}
            for e in entries
        ]
        print(json.dumps(payload, ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="Issued Books", show_lines=True, header_style="bold cyan")
        table.add_column("Reg. Number", style="magenta", no_wrap=True)
        table.add_column("Book", style="white")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Issued At", style="dim")
        for e in entries:
            table.add_row(e.reg_number, e.book_name, e.isbn, e.timestamp)
        _console.print(table)
    else:
        for e in entries:
            print(f"{e.reg_number}  {e.isbn}  {e.timestamp}  {e.book_name}")


def print_issue_receipt(receipt: IssueReceipt) -> None:
    if get_output_mode() == "json":
        print(json.dumps(asdict(receipt), ensure_ascii=False))
        return
    body = (
        f"Book Name: {receipt.book_name}\n"
        f"Author: {receipt.author}\n"
        f"ISBN: {receipt.isbn}\n"
        f"Student Registration Number: {receipt.reg_number}"
    )
    _print_receipt("Receipt for Book Issue", body)


def print_return_receipt(receipt: ReturnReceipt) -> None:
    if get_output_mode() == "json":
        print(json.dumps(asdict(receipt), ensure_ascii=False))
        return
    body = (
        f"Book Name: {receipt.book_name}\n"
        f"Author: {receipt.author}\n"
        f"ISBN: {receipt.isbn}\n"
        f"Student Name: {receipt.student_name}\n"
        f"Registration Number: {receipt.reg_number}"
    )
    _print_receipt("Receipt for Book Return", body)


def _print_receipt(title: str, body: str) -> None:
    if get_output_mode() == "rich":
        _console.print(Panel.fit(body, title=title, border_style="green"))
        return
    print("=" * len(RULE))
    print(title)
    print(RULE)
    print(body)
    print(RULE)
