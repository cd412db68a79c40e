import pytest

from lms.auth import COUNTER, LIBRARIAN, Authenticator, RoleConfig, default_roles
from lms.config import Settings


@pytest.fixture
def auth(tmp_path):
    roles = [RoleConfig(LIBRARIAN, "lib123", 3), RoleConfig(COUNTER, "counter123", 3)]
    return Authenticator(roles, tmp_path / "login_log.txt")


def test_correct_password(auth, tmp_path):
    assert auth.check(LIBRARIAN, "lib123") is True
    assert auth.attempts_left(LIBRARIAN) == 3
    assert (tmp_path / "login_log.txt").read_text().startswith("Role: Librarian, Success: Yes, Time: ")


def test_wrong_password_consumes_an_attempt(auth):
    assert auth.check(LIBRARIAN, "nope") is False
    assert auth.attempts_left(LIBRARIAN) == 2
    assert auth.attempts_left(COUNTER) == 3


def test_lockout_after_budget_is_spent(auth, tmp_path):
    for _ in range(3):
        auth.check(COUNTER, "wrong")

    assert auth.is_locked(COUNTER)
    assert auth.check(COUNTER, "counter123") is False
    lines = (tmp_path / "login_log.txt").read_text().splitlines()
    assert len(lines) == 3
    assert all("Success: No" in line for line in lines)


def test_passwords_are_per_role(auth):
    assert auth.check(COUNTER, "lib123") is False
    assert auth.check(COUNTER, "counter123") is True


def test_unknown_role(auth):
    with pytest.raises(KeyError):
        auth.check("Janitor", "x")


def test_without_log_file_nothing_is_written(tmp_path):
    auth = Authenticator([RoleConfig(LIBRARIAN, "pw")])
    assert auth.check(LIBRARIAN, "pw")
    assert list(tmp_path.iterdir()) == []


def test_default_roles_follow_settings():
    roles = default_roles(Settings(librarian_password="a", counter_password="b", login_attempts=2))
    assert roles[LIBRARIAN].password == "a"
    assert roles[COUNTER].password == "b"
    assert roles[COUNTER].max_attempts == 2
