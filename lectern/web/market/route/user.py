"""Routes for normal users: own profile and enrollment."""

from __future__ import annotations

import pydantic as p
from fastapi import APIRouter, Depends

from lectern.auth import AuthContext, Operation, require, require_normal
from lectern.catalog import Synchronizer
from lectern.core import di
from lectern.errors import NotFoundError
from lectern.lib import NotSet
from lectern.storage import user as user_storage

from ..view import BookListResponse, BookResponse, CourseListResponse, CourseResponse, EnrollmentRequest, \
    EnrollmentResponse, ProfileUpdateRequest, UserEnvelope, UserResponse

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/profile", operation_id="get_profile")
async def get_profile(auth: AuthContext = Depends(require_normal)) -> UserEnvelope:
    require(auth.actor, Operation.ViewProfile, auth.user)
    return UserEnvelope(user=UserResponse.of(auth.user))


@router.put("/profile", operation_id="update_profile")
@di.inject
async def update_profile(
    request: ProfileUpdateRequest,
    auth: AuthContext = Depends(require_normal),
    bcrypt_rounds: int = Depends(di.Provide["config.web.market.auth.bcrypt_rounds"]),
) -> UserEnvelope:
    """Update the caller's name, email or password. The role is never changed here."""
    require(auth.actor, Operation.UpdateProfile, auth.user)
    updated = await user_storage.update(
        auth.user.user_id,
        name=request.user_name if request.user_name is not None else NotSet(),
        email=request.user_email if request.user_email is not None else NotSet(),
        password=p.Secret(request.user_password) if request.user_password is not None else NotSet(),
        bcrypt_rounds=bcrypt_rounds,
    )
    if updated is None:
        raise NotFoundError("User not found")
    return UserEnvelope(message="Profile updated successfully!", user=UserResponse.of(updated))


@router.put("/enrollments", operation_id="update_enrollments")
@di.inject
async def update_enrollments(
    request: EnrollmentRequest,
    auth: AuthContext = Depends(require_normal),
    synchronizer: Synchronizer = Depends(di.Provide["catalog.synchronizer"]),
) -> EnrollmentResponse:
    """Replace the caller's enrolled books and/or courses.

    Every ID is checked before anything is stored; one unknown ID rejects the
    whole request and is named in the error.
    """
    require(auth.actor, Operation.Enroll, auth.user)
    enrollment = await synchronizer.on_enrollment_change(
        auth.user, books=request.user_books, courses=request.user_courses
    )
    return EnrollmentResponse(
        message="Enrollment updated successfully!",
        user=UserResponse.of(enrollment.user),
        user_books=[BookResponse.of(b) for b in enrollment.books],
        user_courses=[CourseResponse.of(c) for c in enrollment.courses],
    )


@router.get("/usercourses", operation_id="list_user_courses")
@di.inject
async def list_user_courses(
    auth: AuthContext = Depends(require_normal),
    synchronizer: Synchronizer = Depends(di.Provide["catalog.synchronizer"]),
) -> CourseListResponse:
    require(auth.actor, Operation.ViewEnrollments, auth.user)
    enrollment = await synchronizer.hydrate(auth.user, books=[])
    return CourseListResponse(courses=[CourseResponse.of(c) for c in enrollment.courses])


@router.get("/userbooks", operation_id="list_user_books")
@di.inject
async def list_user_books(
    auth: AuthContext = Depends(require_normal),
    synchronizer: Synchronizer = Depends(di.Provide["catalog.synchronizer"]),
) -> BookListResponse:
    require(auth.actor, Operation.ViewEnrollments, auth.user)
    enrollment = await synchronizer.hydrate(auth.user, courses=[])
    return BookListResponse(books=[BookResponse.of(b) for b in enrollment.books])
