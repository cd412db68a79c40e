import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Union

from lms import storage
from lms.errors import StudentExistsError, ValidationError
from lms.student import Student
from lms.validators import StudentValidator

logger = logging.getLogger(__name__)


class Registry:
    """Student directory keyed by registration number. Students are never removed."""

    def __init__(self, students_file: Union[str, Path], email_domains: Optional[Iterable[str]] = None) -> None:
        self.students_file = Path(students_file)
        self.email_domains = list(email_domains) if email_domains is not None else None
        self.students: List[Student] = storage.load_students(self.students_file)
        self.persisted = True

    def __len__(self) -> int:
        return len(self.students)

    @property
    def is_empty(self) -> bool:
        return not self.students

    def add_student(self, first_name: str, last_name: str, reg_number: str, phone: str, email: str) -> Student:
        checks = [
            StudentValidator.validate_name(first_name),
            StudentValidator.validate_name(last_name),
            StudentValidator.validate_reg_number(reg_number),
            StudentValidator.validate_phone(phone),
            StudentValidator.validate_email(email, self.email_domains),
        ]
        for result in checks:
            if not result.ok:
                raise ValidationError(result.reason)
        first_name, last_name, reg_number, phone, email = (result.value for result in checks)

        if self.find_student(reg_number):
            raise StudentExistsError("A student with this registration number already exists!")

        student = Student(first_name, last_name, reg_number, phone, email)
        self.students.append(student)
        logger.info("Registered student %s", reg_number)
        self.save()
        return student

    def list_students(self) -> Iterator[Student]:
        yield from self.students

    def find_student(self, reg_number: str) -> Optional[Student]:
        reg_number = (reg_number or "").strip()
        for student in self.students:
            if student.reg_number == reg_number:
                return student
        return None

    def save(self) -> bool:
        self.persisted = storage.save_students(self.students_file, self.students)
        return self.persisted
