__all__ = [
    # Base
    "BaseModel",
    "WithTimestamps",
    # Enums
    "DeploymentEnvironment",
    "MediaKind",
    "UserRole",
    "UserState",
    # ID Types
    "BookID",
    "CourseID",
    "ShortUUIDKey",
    "UserID",
    # Snapshots
    "CourseSnapshot",
    "InstructorSnapshot",
    # Entities
    "Book",
    "Course",
    "CourseFile",
    "InstructorRoles",
    "Lesson",
    "User",
]

from .base import BaseModel, WithTimestamps
from .book import Book
from .course import Course, CourseFile, Lesson
from .enum import DeploymentEnvironment, MediaKind, UserRole, UserState
from .id import BookID, CourseID, ShortUUIDKey, UserID
from .snapshot import CourseSnapshot, InstructorSnapshot
from .user import InstructorRoles, User
