from models.errors import (
    DuplicateIdError,
    NotFoundError,
    StorageError,
    StudentError,
    ValidationError,
)
from models.student import GradeStatus, Student
from models.student_manager import StudentManager

__all__ = [
    "Student",
    "GradeStatus",
    "StudentManager",
    "StudentError",
    "ValidationError",
    "DuplicateIdError",
    "NotFoundError",
    "StorageError",
]
