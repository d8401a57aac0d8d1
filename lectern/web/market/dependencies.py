"""Loaders shared by the marketplace routes.

Each one fetches a record by ID and turns absence into NotFoundError, so
routes can authorize against a loaded target before they write.
"""

from __future__ import annotations

from lectern.errors import NotFoundError
from lectern.model import Book, BookID, Course, CourseID, User, UserID, UserRole
from lectern.storage import book as book_storage
from lectern.storage import course as course_storage
from lectern.storage import user as user_storage

RoleLabels = {
    UserRole.Normal: "User",
    UserRole.Admin: "Admin",
    UserRole.Super: "User",
}


async def load_user(user_id: UserID, role: UserRole | None = None) -> User:
    """Load a user; with `role`, a user holding any other role is reported as not found."""
    user = await user_storage.get(user_id)
    if user is None or (role is not None and user.user_role is not role):
        raise NotFoundError(f"{RoleLabels[role] if role else 'User'} not found")
    return user


async def load_course(course_id: CourseID) -> Course:
    course = await course_storage.get(course_id)
    if course is None:
        raise NotFoundError("Course not found")
    return course


async def load_book(book_id: BookID) -> Book:
    book = await book_storage.get(book_id)
    if book is None:
        raise NotFoundError("Book not found")
    return book
