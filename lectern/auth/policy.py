"""Role and ownership decisions for every guarded operation.

`authorize` is pure: it looks only at the actor, the operation and, where
ownership matters, the already-loaded target. Routes load the target, call
`require`, and only then touch the store.
"""

from __future__ import annotations

import enum
import typing as t

from lectern.errors import AuthorizationError
from lectern.model import Course, User, UserID, UserRole


class Operation(enum.Enum):
    RegisterUser = "register_user"
    RegisterAdmin = "register_admin"
    BrowseCatalog = "browse_catalog"
    SetAdminState = "set_admin_state"
    CreateCourse = "create_course"
    ViewCourse = "view_course"
    UpdateCourse = "update_course"
    DeleteCourse = "delete_course"
    UploadCourseMedia = "upload_course_media"
    ListInstructedCourses = "list_instructed_courses"
    ViewProfile = "view_profile"
    UpdateProfile = "update_profile"
    ViewUser = "view_user"
    UpdateUser = "update_user"
    DeleteUser = "delete_user"
    ListUsers = "list_users"
    Enroll = "enroll"
    ViewEnrollments = "view_enrollments"
    CreateBook = "create_book"
    UpdateBook = "update_book"
    DeleteBook = "delete_book"


class Rule(enum.Enum):
    Allow = "allow"
    Deny = "deny"
    # the target user is the actor
    Self = "self"
    # the target course lists the actor as an instructor
    Instructor = "instructor"


class Actor(t.NamedTuple):
    user_id: UserID
    role: UserRole

    @classmethod
    def of(cls, user: User) -> Actor:
        return cls(user_id=user.user_id, role=user.user_role)


class Decision(t.NamedTuple):
    allowed: bool
    reason: str

    def __bool__(self) -> bool:
        return self.allowed


Target = User | Course | None

PublicOperations = frozenset({Operation.RegisterUser, Operation.RegisterAdmin, Operation.BrowseCatalog})

_N, _A, _S = UserRole.Normal, UserRole.Admin, UserRole.Super

# fmt: off
Policy: t.Mapping[Operation, t.Mapping[UserRole, Rule]] = {
    Operation.SetAdminState:         {_N: Rule.Deny,  _A: Rule.Deny,       _S: Rule.Allow},
    Operation.CreateCourse:          {_N: Rule.Deny,  _A: Rule.Allow,      _S: Rule.Allow},
    Operation.ViewCourse:            {_N: Rule.Deny,  _A: Rule.Instructor, _S: Rule.Allow},
    Operation.UpdateCourse:          {_N: Rule.Deny,  _A: Rule.Instructor, _S: Rule.Allow},
    Operation.DeleteCourse:          {_N: Rule.Deny,  _A: Rule.Instructor, _S: Rule.Allow},
    Operation.UploadCourseMedia:     {_N: Rule.Deny,  _A: Rule.Instructor, _S: Rule.Allow},
    Operation.ListInstructedCourses: {_N: Rule.Deny,  _A: Rule.Allow,      _S: Rule.Allow},
    Operation.ViewProfile:           {_N: Rule.Self,  _A: Rule.Self,       _S: Rule.Allow},
    Operation.UpdateProfile:         {_N: Rule.Self,  _A: Rule.Self,       _S: Rule.Allow},
    Operation.ViewUser:              {_N: Rule.Deny,  _A: Rule.Deny,       _S: Rule.Allow},
    Operation.UpdateUser:            {_N: Rule.Deny,  _A: Rule.Deny,       _S: Rule.Allow},
    Operation.DeleteUser:            {_N: Rule.Deny,  _A: Rule.Deny,       _S: Rule.Allow},
    Operation.ListUsers:             {_N: Rule.Deny,  _A: Rule.Deny,       _S: Rule.Allow},
    Operation.Enroll:                {_N: Rule.Self,  _A: Rule.Deny,       _S: Rule.Allow},
    Operation.ViewEnrollments:       {_N: Rule.Self,  _A: Rule.Deny,       _S: Rule.Allow},
    Operation.CreateBook:            {_N: Rule.Deny,  _A: Rule.Deny,       _S: Rule.Allow},
    Operation.UpdateBook:            {_N: Rule.Deny,  _A: Rule.Deny,       _S: Rule.Allow},
    Operation.DeleteBook:            {_N: Rule.Deny,  _A: Rule.Deny,       _S: Rule.Allow},
}
# fmt: on


def authorize(actor: Actor | None, operation: Operation, target: Target = None) -> Decision:
    if operation in PublicOperations:
        return Decision(True, "public")
    if actor is None:
        return Decision(False, "Authentication required")

    rule = Policy[operation].get(actor.role, Rule.Deny)
    match rule:
        case Rule.Allow:
            return Decision(True, f"{actor.role.value} may {operation.value}")
        case Rule.Deny:
            return Decision(False, f"Role '{actor.role.value}' is not allowed to {operation.value}")
        case Rule.Self:
            if isinstance(target, User) and target.user_id == actor.user_id:
                return Decision(True, "self")
            return Decision(False, "You may only act on your own account")
        case Rule.Instructor:
            if isinstance(target, Course) and target.is_instructed_by(actor.user_id):
                return Decision(True, "instructor")
            return Decision(False, "You are not an instructor of this course")


def require(actor: Actor | None, operation: Operation, target: Target = None) -> Decision:
    """Like `authorize`, but a denial raises AuthorizationError."""
    decision = authorize(actor, operation, target)
    if not decision.allowed:
        raise AuthorizationError(decision.reason)
    return decision
