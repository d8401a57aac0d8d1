"""View models for user profiles, enrollment and super-admin user management."""

from __future__ import annotations

import datetime

import pydantic as p
from pydantic import EmailStr

from lectern.model import BookID, CourseID, CourseSnapshot, User, UserID, UserRole, UserState

from .book import BookResponse
from .course import CourseResponse


class UserResponse(p.BaseModel):
    """A user as returned to clients; the password hash never leaves the store."""

    user_id: UserID
    user_name: str
    user_email: EmailStr
    user_role: UserRole
    user_state: UserState
    user_books: list[BookID] = []
    user_courses: list[CourseID] = []
    user_uploaded_courses: list[CourseSnapshot] = []
    create_time: datetime.datetime | None = None
    update_time: datetime.datetime | None = None

    @classmethod
    def of(cls, user: User) -> UserResponse:
        return cls.model_validate(user.model_dump(exclude={"user_password"}))


class ProfileUpdateRequest(p.BaseModel):
    """Partial profile update; `user_role` and `user_state` are not accepted here."""

    user_name: str | None = p.Field(default=None, min_length=1)
    user_email: EmailStr | None = None
    user_password: str | None = p.Field(default=None, min_length=8, max_length=72)


class UserEnvelope(p.BaseModel):
    message: str | None = None
    user: UserResponse
    warnings: list[str] = []


class AdminEnvelope(p.BaseModel):
    message: str | None = None
    admin: UserResponse
    warnings: list[str] = []


class UserListResponse(p.BaseModel):
    users: list[UserResponse]


class AdminListResponse(p.BaseModel):
    admins: list[UserResponse]


class ApproveRequest(p.BaseModel):
    user_state: UserState


class EnrollmentRequest(p.BaseModel):
    """New enrollment lists; a list that is omitted keeps its current value."""

    user_books: str | list[str] | None = None
    user_courses: str | list[str] | None = None


class MessageResponse(p.BaseModel):
    message: str
    warnings: list[str] = []


class EnrollmentResponse(p.BaseModel):
    """The caller's enrollment with every enrolled book and course loaded."""

    message: str | None = None
    user: UserResponse
    user_books: list[BookResponse]
    user_courses: list[CourseResponse]
