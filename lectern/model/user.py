import pydantic as p
from pydantic import EmailStr

from .base import WithTimestamps
from .enum import UserRole, UserState
from .id import BookID, CourseID, UserID
from .snapshot import CourseSnapshot, InstructorSnapshot

InstructorRoles = frozenset({UserRole.Admin, UserRole.Super})


class User(WithTimestamps):
    user_id: UserID
    user_name: str
    user_email: EmailStr
    user_password: str | None = p.Field(default=None, repr=False)
    user_role: UserRole
    user_state: UserState = UserState.Active
    user_books: list[BookID] = []
    user_courses: list[CourseID] = []
    user_uploaded_courses: list[CourseSnapshot] = []

    def instructor_snapshot(self) -> InstructorSnapshot:
        return InstructorSnapshot(
            user_id=self.user_id,
            user_name=self.user_name,
            user_email=self.user_email,
            user_role=self.user_role,
            user_state=self.user_state,
        )
