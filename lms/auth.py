import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

from lms import storage
from lms.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

LIBRARIAN = "Librarian"
COUNTER = "Counter"


@dataclass
class RoleConfig:
    name: str
    password: str
    max_attempts: int = 5


def default_roles(settings: Optional[Settings] = None) -> Dict[str, RoleConfig]:
    settings = settings or default_settings
    return {
        LIBRARIAN: RoleConfig(LIBRARIAN, settings.librarian_password, settings.login_attempts),
        COUNTER: RoleConfig(COUNTER, settings.counter_password, settings.login_attempts),
    }


class Authenticator:
    """Shared-password check per role with a lockout after too many failures.

    Failed attempts are counted for the lifetime of the authenticator and are
    not reset by a later successful login, so a role that has burned through
    its budget stays locked until the program restarts.
    """

    def __init__(self, roles: Iterable[RoleConfig], log_file: Optional[Union[str, Path]] = None) -> None:
        self.roles: Dict[str, RoleConfig] = {role.name: role for role in roles}
        self.log_file = Path(log_file) if log_file is not None else None
        self._remaining: Dict[str, int] = {name: role.max_attempts for name, role in self.roles.items()}

    def attempts_left(self, role: str) -> int:
        return self._remaining[role]

    def is_locked(self, role: str) -> bool:
        return self._remaining[role] <= 0

    def check(self, role: str, password: str) -> bool:
        if role not in self.roles:
            raise KeyError(f"Unknown role: {role}")
        if self.is_locked(role):
            return False

        success = password == self.roles[role].password
        if not success:
            self._remaining[role] -= 1
            logger.warning("Failed login for %s, %d attempts left", role, self._remaining[role])
        if self.log_file is not None:
            storage.append_login_log(self.log_file, role, success)
        return success
