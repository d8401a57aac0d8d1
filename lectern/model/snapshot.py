"""Denormalized copies of one entity embedded in another.

Snapshots have no lifecycle of their own; they are rebuilt from their source
record whenever it changes.
"""

from __future__ import annotations

from pydantic import EmailStr

from .base import BaseModel
from .enum import UserRole, UserState
from .id import CourseID, UserID


class InstructorSnapshot(BaseModel):
    """Instructor identity embedded in a course."""

    user_id: UserID
    user_name: str
    user_email: EmailStr
    user_role: UserRole
    user_state: UserState


class CourseSnapshot(BaseModel):
    """Course summary embedded in an instructor's `user_uploaded_courses`."""

    course_id: CourseID
    course_name: str
    course_description: str | None = None
    course_price: float
    course_image: str | None = None
    course_published: bool = False
