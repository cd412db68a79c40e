import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_list(raw: str) -> List[str]:
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    # Data files
    data_dir: str = os.getenv("LMS_DATA_DIR", ".")
    books_file: str = os.getenv("LMS_BOOKS_FILE", "books.txt")
    students_file: str = os.getenv("LMS_STUDENTS_FILE", "students.txt")
    issued_file: str = os.getenv("LMS_ISSUED_FILE", "issued_books.txt")
    login_log_file: str = os.getenv("LMS_LOGIN_LOG_FILE", "login_log.txt")

    # Role passwords and lockout
    librarian_password: str = os.getenv("LMS_LIBRARIAN_PASSWORD", "lib123")
    counter_password: str = os.getenv("LMS_COUNTER_PASSWORD", "counter123")
    login_attempts: int = int(os.getenv("LMS_LOGIN_ATTEMPTS", "5"))

    # Circulation rules
    max_books_per_student: int = int(os.getenv("LMS_MAX_BOOKS", "3"))
    email_domains: List[str] = field(
        default_factory=lambda: _split_list(os.getenv("LMS_EMAIL_DOMAINS", "gmail.com,outlook.com,lpu.in"))
    )

    # Application
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    log_level: str = os.getenv("LMS_LOG_LEVEL", "WARNING").upper()


settings = Settings()
