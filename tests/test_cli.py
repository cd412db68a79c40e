import json

from typer.testing import CliRunner

from lms.library import Library
from lms.main import app

runner = CliRunner()

DUNE = "1234567890123"


def _invoke(tmp_path, args, input=None):
    return runner.invoke(app, ["--data-dir", str(tmp_path), *args], input=input)


def test_list_no_books(tmp_path):
    result = _invoke(tmp_path, ["books"])
    assert result.exit_code == 0
    assert "The library inventory is currently empty." in result.stdout


def test_list_no_students(tmp_path):
    result = _invoke(tmp_path, ["students"])
    assert result.exit_code == 0
    assert "No students have been registered yet." in result.stdout


def test_list_books_plain(tmp_path):
    Library(data_dir=tmp_path).catalog.add_book("Dune", "Frank Herbert", DUNE, 2)

    result = _invoke(tmp_path, ["books"])

    assert result.exit_code == 0
    assert "List of All Books" in result.stdout
    assert DUNE in result.stdout


def test_list_books_json(tmp_path):
    Library(data_dir=tmp_path).catalog.add_book("Dune", "Frank Herbert", DUNE, 2)

    result = _invoke(tmp_path, ["--output", "json", "books"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == [
        {"name": "Dune", "author": "Frank Herbert", "isbn": DUNE, "copies": 2}
    ]


def test_issued_listing(tmp_path):
    lib = Library(data_dir=tmp_path)
    lib.catalog.add_book("Dune", "Frank Herbert", DUNE, 2)
    lib.circulation.issue(DUNE, "20231234")

    result = _invoke(tmp_path, ["issued"])

    assert result.exit_code == 0
    assert "20231234" in result.stdout
    assert DUNE in result.stdout


def test_librarian_adds_book_through_menu(tmp_path):
    keystrokes = "\n".join(["1", "lib123", "1", "Dune", "Frank Herbert", DUNE, "2", "8", "3"]) + "\n"

    result = _invoke(tmp_path, ["menu"], input=keystrokes)

    assert result.exit_code == 0, result.output
    assert "Welcome Librarian!" in result.stdout
    assert "The book has been successfully added." in result.stdout
    assert (tmp_path / "books.txt").read_text() == f"Dune,Frank Herbert,{DUNE} 2\n"
    assert "Success: Yes" in (tmp_path / "login_log.txt").read_text()


def test_menu_reprompts_invalid_isbn(tmp_path):
    keystrokes = "\n".join(["1", "lib123", "1", "Dune", "Frank Herbert", "123", DUNE, "1", "8", "3"]) + "\n"

    result = _invoke(tmp_path, [], input=keystrokes)

    assert result.exit_code == 0, result.output
    assert "Invalid ISBN!" in result.stdout
    assert Library(data_dir=tmp_path).catalog.find_book(DUNE).copies == 1


def test_librarian_registers_student(tmp_path):
    keystrokes = "\n".join(
        ["1", "lib123", "5", "Asha", "Rao", "12345678", "9876543210", "asha@gmail.com", "8", "3"]
    ) + "\n"

    result = _invoke(tmp_path, ["menu"], input=keystrokes)

    assert result.exit_code == 0, result.output
    assert "The student has been successfully registered." in result.stdout
    assert (tmp_path / "students.txt").read_text() == "Asha Rao 12345678 9876543210 asha@gmail.com\n"


def test_counter_issues_and_returns(tmp_path):
    Library(data_dir=tmp_path).catalog.add_book("Dune", "Frank Herbert", DUNE, 2)
    keystrokes = "\n".join(
        ["2", "counter123", "1", DUNE, "20231234", "2", DUNE, "Asha", "Rao", "20231234", "5", "3"]
    ) + "\n"

    result = _invoke(tmp_path, ["menu"], input=keystrokes)

    assert result.exit_code == 0, result.output
    assert "Receipt for Book Issue" in result.stdout
    assert "Receipt for Book Return" in result.stdout
    assert "Student Name: Asha Rao" in result.stdout
    assert "Issued book log updated successfully." in result.stdout
    assert (tmp_path / "issued_books.txt").read_text() == ""
    assert Library(data_dir=tmp_path).catalog.find_book(DUNE).copies == 2


def test_lockout_after_five_failures(tmp_path):
    keystrokes = "\n".join(["1"] + ["wrong"] * 5 + ["1", "3"]) + "\n"

    result = _invoke(tmp_path, ["menu"], input=keystrokes)

    assert result.exit_code == 0, result.output
    assert "Attempts left: 0" in result.stdout
    assert result.stdout.count("Too many failed attempts. Access denied.") == 2
    lines = (tmp_path / "login_log.txt").read_text().splitlines()
    assert len(lines) == 5


def test_return_reports_unreadable_log(tmp_path, monkeypatch):
    lib = Library(data_dir=tmp_path)
    lib.catalog.add_book("Dune", "Frank Herbert", DUNE, 2)
    lib.circulation.issue(DUNE, "20231234")
    monkeypatch.setattr("lms.circulation.storage.remove_issue_log", lambda path, reg, isbn: None)
    keystrokes = "\n".join(["2", "counter123", "2", DUNE, "Asha", "Rao", "20231234", "5", "3"]) + "\n"

    result = _invoke(tmp_path, ["menu"], input=keystrokes)

    assert result.exit_code == 0, result.output
    assert "Unable to open issued books log file." in result.stdout
    assert "No record of this book being issued" not in result.stdout
