from pathlib import Path
from typing import Optional, Union

from lms.catalog import Catalog
from lms.circulation import CirculationLedger
from lms.config import Settings, settings as default_settings
from lms.registry import Registry


class Library:
    """Loads the catalog, registry and circulation ledger from one data directory."""

    def __init__(self, data_dir: Optional[Union[str, Path]] = None, settings: Optional[Settings] = None) -> None:
        self.settings = settings or default_settings
        self.data_dir = Path(data_dir if data_dir is not None else self.settings.data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.catalog = Catalog(self.data_dir / self.settings.books_file)
        self.registry = Registry(self.data_dir / self.settings.students_file, self.settings.email_domains)
        self.circulation = CirculationLedger(
            self.catalog,
            self.data_dir / self.settings.issued_file,
            max_books=self.settings.max_books_per_student,
        )

    @property
    def login_log_file(self) -> Path:
        return self.data_dir / self.settings.login_log_file
