import logging
from pathlib import Path
from typing import Callable, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from lms.auth import COUNTER, LIBRARIAN, Authenticator, default_roles
from lms.config import settings
from lms.errors import LibraryError
from lms.library import Library
from lms.ui import (
    print_books,
    print_issue_log,
    print_issue_receipt,
    print_return_receipt,
    print_students,
    set_output_mode,
)
from lms.validators import ISBNValidator, StudentValidator, TextValidator, ValidationResult

console = Console()

app = typer.Typer(help="Library management CLI", add_completion=False)


def _open_library(ctx: typer.Context) -> Library:
    obj = ctx.ensure_object(dict)
    if "library" not in obj:
        obj["library"] = Library(data_dir=obj.get("data_dir"))
    return obj["library"]


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Directory holding books.txt, students.txt and the logs",
    ),
):
    """Global options for the CLI (output mode, data directory)."""
    if output:
        set_output_mode(output)
    ctx.ensure_object(dict)["data_dir"] = data_dir
    if ctx.invoked_subcommand is None:
        run_menu(_open_library(ctx))


@app.command("books")
def cli_books(ctx: typer.Context):
    """List all books in the inventory."""
    print_books(_open_library(ctx).catalog.list_books())


@app.command("students")
def cli_students(ctx: typer.Context):
    """List all registered students."""
    print_students(_open_library(ctx).registry.list_students())


@app.command("issued")
def cli_issued(ctx: typer.Context):
    """List books currently issued, from the issued-books log."""
    print_issue_log(_open_library(ctx).circulation.entries())


@app.command("menu")
def cli_menu(ctx: typer.Context):
    """Start the interactive, password-protected menu."""
    run_menu(_open_library(ctx))


# ------------------------- Prompt helpers ------------------------- #
def _ask_valid(label: str, validate: Callable[[str], ValidationResult]):
    """Prompt until ``validate`` accepts the answer."""
    while True:
        result = validate(Prompt.ask(label, console=console))
        if result.ok:
            return result.value
        console.print(f"[yellow]{result.reason}[/]")


def _warn_if_unsaved(lib: Library) -> None:
    if not lib.catalog.persisted:
        console.print(f"[bold red]Error:[/] Could not write {lib.catalog.books_file}; changes are not saved.")
    if not lib.registry.persisted:
        console.print(f"[bold red]Error:[/] Could not write {lib.registry.students_file}; changes are not saved.")


def _render_menu(title: str, items) -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label in items:
        table.add_row(key, label)
    console.print(Panel(table, title=title, border_style="cyan", box=box.HEAVY, padding=(0, 2)))


# ------------------------- Librarian actions ------------------------- #
def add_book(lib: Library) -> None:
    name = _ask_valid("Enter book name", TextValidator.validate_book_name)
    author = _ask_valid("Enter author name", TextValidator.validate_author)
    isbn = _ask_valid("Enter ISBN (13 digits)", ISBNValidator.validate)
    copies = _ask_valid("Enter number of copies", TextValidator.validate_copies)
    try:
        _, created = lib.catalog.add_book(name, author, isbn, copies)
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {e}")
        return
    if created:
        console.print("[green]The book has been successfully added.[/]")
    else:
        console.print("[green]The book already exists. Updated copies count.[/]")
    _warn_if_unsaved(lib)


def delete_book(lib: Library) -> None:
    isbn = Prompt.ask("Enter ISBN to delete", console=console).strip()
    if not lib.catalog.find_book(isbn):
        console.print("[yellow]Book not found in the inventory.[/]")
        return
    copies = _ask_valid("Enter number of copies to remove", TextValidator.validate_copies)
    try:
        remaining = lib.catalog.delete_book(isbn, copies)
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {e}")
        return
    if remaining == 0:
        console.print("[green]All copies of the book have been removed from the inventory.[/]")
    else:
        console.print(f"[green]{copies} copies have been removed. Remaining: {remaining}[/]")
    _warn_if_unsaved(lib)


def update_book(lib: Library) -> None:
    isbn = Prompt.ask("Enter ISBN to update", console=console).strip()
    if not lib.catalog.find_book(isbn):
        console.print("[yellow]Book not found in the inventory.[/]")
        return
    copies = _ask_valid("Enter new number of copies", TextValidator.validate_copies)
    try:
        lib.catalog.update_book(isbn, copies)
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {e}")
        return
    console.print("[green]The book details have been successfully updated.[/]")
    _warn_if_unsaved(lib)


def add_student(lib: Library) -> None:
    first_name = _ask_valid("Enter first name", StudentValidator.validate_name)
    last_name = _ask_valid("Enter last name", StudentValidator.validate_name)
    reg_number = _ask_valid("Enter registration number (8 digits)", StudentValidator.validate_reg_number)
    if lib.registry.find_student(reg_number):
        console.print("[bold red]Error:[/] A student with this registration number already exists!")
        return
    phone = _ask_valid("Enter phone number (starting with 6, 7, 8, or 9)", StudentValidator.validate_phone)
    email = _ask_valid(
        "Enter email address",
        lambda raw: StudentValidator.validate_email(raw, lib.registry.email_domains),
    )
    try:
        lib.registry.add_student(first_name, last_name, reg_number, phone, email)
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {e}")
        return
    console.print("[green]The student has been successfully registered.[/]")
    _warn_if_unsaved(lib)


# ------------------------- Counter actions ------------------------- #
def issue_book(lib: Library) -> None:
    isbn = Prompt.ask("Enter ISBN", console=console).strip()
    book = lib.catalog.find_book(isbn)
    if book is None or book.copies <= 0:
        console.print("[yellow]The requested book is not available or not found in the inventory.[/]")
        return
    reg_number = _ask_valid("Enter student registration number (8 digits)", StudentValidator.validate_reg_number)
    try:
        receipt = lib.circulation.issue(isbn, reg_number)
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {e}")
        return
    console.print("[green]The book has been successfully issued.[/]")
    print_issue_receipt(receipt)
    if not receipt.logged:
        console.print("[bold red]Error:[/] Unable to open issued books log file.")
    _warn_if_unsaved(lib)


def return_book(lib: Library) -> None:
    isbn = Prompt.ask("Enter ISBN of the book to return", console=console).strip()
    if not lib.catalog.find_book(isbn):
        console.print("[yellow]Invalid ISBN. Book not found in the inventory.[/]")
        return
    first_name = Prompt.ask("Enter student first name", console=console)
    last_name = Prompt.ask("Enter student last name", console=console)
    reg_number = Prompt.ask("Enter student registration number", console=console)
    try:
        receipt = lib.circulation.return_book(isbn, reg_number, first_name, last_name)
    except LibraryError as e:
        console.print(f"[bold red]Error:[/] {e}")
        return
    console.print("[green]The book has been successfully returned.[/]")
    print_return_receipt(receipt)
    if receipt.log_updated:
        console.print("[dim]Issued book log updated successfully.[/]")
    elif receipt.log_error:
        console.print("[bold red]Error:[/] Unable to open issued books log file.")
    else:
        console.print("[bold red]Error:[/] No record of this book being issued to this student.")
    _warn_if_unsaved(lib)


# ------------------------- Session ------------------------- #
def authenticate(auth: Authenticator, role: str) -> bool:
    while not auth.is_locked(role):
        password = typer.prompt("Enter password", hide_input=True)
        if auth.check(role, password):
            console.print(f"[bold green]Welcome {role}![/]")
            return True
        console.print(f"[red]Incorrect password! Attempts left: {auth.attempts_left(role)}[/]")
    console.print("[bold red]Too many failed attempts. Access denied.[/]")
    return False


def librarian_menu(lib: Library) -> None:
    actions = {
        "1": ("Add Book", lambda: add_book(lib)),
        "2": ("Delete Book", lambda: delete_book(lib)),
        "3": ("Update Book", lambda: update_book(lib)),
        "4": ("Show All Books", lambda: print_books(lib.catalog.list_books())),
        "5": ("Add Student", lambda: add_student(lib)),
        "6": ("Show All Students", lambda: print_students(lib.registry.list_students())),
        "7": ("Show Issued Books", lambda: print_issue_log(lib.circulation.entries())),
    }
    _session_loop(LIBRARIAN, actions)


def counter_menu(lib: Library) -> None:
    actions = {
        "1": ("Issue Book", lambda: issue_book(lib)),
        "2": ("Return Book", lambda: return_book(lib)),
        "3": ("Show All Books", lambda: print_books(lib.catalog.list_books())),
        "4": ("Show All Students", lambda: print_students(lib.registry.list_students())),
    }
    _session_loop(COUNTER, actions)


def _session_loop(role: str, actions) -> None:
    logout = str(len(actions) + 1)
    items = [(key, label) for key, (label, _) in actions.items()] + [(logout, "Logout")]
    while True:
        _render_menu(f"{role} Menu", items)
        choice = Prompt.ask("Enter choice", choices=[key for key, _ in items], console=console)
        if choice == logout:
            console.print(f"[green]Logged out from {role}.[/]")
            return
        actions[choice][1]()


def run_menu(lib: Library, auth: Optional[Authenticator] = None) -> None:
    """Role selection loop: authenticate, then hand over to the role's menu."""
    auth = auth or Authenticator(default_roles(lib.settings).values(), lib.login_log_file)
    console.print(Panel.fit(f"Welcome to the {settings.app_name}!", border_style="cyan"))
    while True:
        _render_menu("Main Menu", [("1", LIBRARIAN), ("2", COUNTER), ("3", "Exit")])
        choice = Prompt.ask("Enter choice", choices=["1", "2", "3"], console=console)
        if choice == "1":
            if authenticate(auth, LIBRARIAN):
                librarian_menu(lib)
        elif choice == "2":
            if authenticate(auth, COUNTER):
                counter_menu(lib)
        else:
            console.print("[green]Goodbye![/]")
            break


def main() -> None:
    logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(message)s")
    app()


if __name__ == "__main__":
    main()
