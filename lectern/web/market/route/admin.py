"""Course authoring and admin profile routes (role admin or super)."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath

import pydantic as p
import shortuuid
from fastapi import APIRouter, Depends, File, Form, status, UploadFile

from lectern.auth import AuthContext, Operation, require, require_admin
from lectern.catalog import ReferenceResolver, Synchronizer
from lectern.core import di
from lectern.errors import NotFoundError, UpstreamStoreError, ValidationError
from lectern.lib import NotSet
from lectern.model import Course, CourseFile, CourseID, InstructorRoles, MediaKind, User, UserRole
from lectern.storage import course as course_storage
from lectern.storage import user as user_storage
from lectern.storage.object import ObjectStore

from ..dependencies import load_course
from ..view import AdminEnvelope, CourseCreateRequest, CourseEnvelope, CourseListResponse, CourseResponse, \
    CourseUpdateRequest, MediaUploadResponse, MessageResponse, ProfileUpdateRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


async def _resolve_instructors(
    actor: User, requested: str | list[str] | None, resolver: ReferenceResolver
) -> list[User]:
    """Resolve the instructor list for a course the actor is writing.

    An admin always instructs the courses they create; a super may create
    courses for other instructors without joining them.
    """
    ids = [requested] if isinstance(requested, str) else list(requested or [])
    if not ids or (actor.user_role is UserRole.Admin and actor.user_id not in ids):
        ids.insert(0, actor.user_id)
    return await resolver.users(ids, roles=InstructorRoles, label="Instructor")


@router.post("/courses", operation_id="create_course", status_code=status.HTTP_201_CREATED)
@di.inject
async def create_course(
    request: CourseCreateRequest,
    auth: AuthContext = Depends(require_admin),
    resolver: ReferenceResolver = Depends(di.Provide["catalog.resolver"]),
    synchronizer: Synchronizer = Depends(di.Provide["catalog.synchronizer"]),
) -> CourseEnvelope:
    """Create a course and publish its snapshot to every instructor."""
    require(auth.actor, Operation.CreateCourse)
    instructors = await _resolve_instructors(auth.user, request.course_instructor, resolver)

    course = await course_storage.create(
        name=request.course_name,
        description=request.course_description,
        price=request.course_price,
        instructors=instructors,
        image=request.course_image,
        videos=request.course_videos,
        lessons=request.course_lessons,
        files=request.course_files,
        published=request.course_published,
    )
    report = await synchronizer.on_course_write(course)
    return CourseEnvelope(
        message="Course added successfully!",
        course=CourseResponse.of(course),
        warnings=list(report.warnings),
    )


async def _instructed_courses(auth: AuthContext) -> CourseListResponse:
    require(auth.actor, Operation.ListInstructedCourses)
    if auth.user.user_role is UserRole.Super:
        courses = await course_storage.find()
    else:
        courses = await course_storage.find(instructor_id=auth.user.user_id)
    return CourseListResponse(courses=[CourseResponse.of(c) for c in courses])


@router.get("/courses", operation_id="list_courses")
async def list_courses(auth: AuthContext = Depends(require_admin)) -> CourseListResponse:
    """List the caller's courses; a super sees every course."""
    return await _instructed_courses(auth)


@router.get("/admincourses", operation_id="list_admin_courses")
async def list_admin_courses(auth: AuthContext = Depends(require_admin)) -> CourseListResponse:
    return await _instructed_courses(auth)


@router.get("/courses/{course_id}", operation_id="get_course")
async def get_course(course_id: CourseID, auth: AuthContext = Depends(require_admin)) -> CourseEnvelope:
    course = await load_course(course_id)
    require(auth.actor, Operation.ViewCourse, course)
    return CourseEnvelope(course=CourseResponse.of(course))


@router.put("/courses/{course_id}", operation_id="update_course")
@di.inject
async def update_course(
    course_id: CourseID,
    request: CourseUpdateRequest,
    auth: AuthContext = Depends(require_admin),
    resolver: ReferenceResolver = Depends(di.Provide["catalog.resolver"]),
    synchronizer: Synchronizer = Depends(di.Provide["catalog.synchronizer"]),
) -> CourseEnvelope:
    """Partially update a course; only fields present in the body change.

    Only an instructor of the course, or a super, may update it.
    """
    course = await load_course(course_id)
    require(auth.actor, Operation.UpdateCourse, course)

    sent = request.model_fields_set
    instructors: list[User] | NotSet = NotSet()
    if "course_instructor" in sent and request.course_instructor is not None:
        instructors = await resolver.users(request.course_instructor, roles=InstructorRoles, label="Instructor")
        if not instructors:
            raise ValidationError(["course_instructor must name at least one instructor"])

    def given(field: str) -> bool:
        return field in sent and getattr(request, field) is not None

    updated = await course_storage.update(
        course_id,
        name=request.course_name if given("course_name") else NotSet(),
        price=request.course_price if given("course_price") else NotSet(),
        description=request.course_description if "course_description" in sent else NotSet(),
        instructors=instructors,
        image=request.course_image if "course_image" in sent else NotSet(),
        videos=request.course_videos if given("course_videos") else NotSet(),
        lessons=request.course_lessons if given("course_lessons") else NotSet(),
        files=request.course_files if given("course_files") else NotSet(),
        published=request.course_published if given("course_published") else NotSet(),
    )
    if updated is None:
        raise NotFoundError("Course not found")

    report = await synchronizer.on_course_write(updated, previous=course)
    return CourseEnvelope(
        message="Course updated successfully!",
        course=CourseResponse.of(updated),
        warnings=list(report.warnings),
    )


@router.delete("/courses/{course_id}", operation_id="delete_course")
@di.inject
async def delete_course(
    course_id: CourseID,
    auth: AuthContext = Depends(require_admin),
    synchronizer: Synchronizer = Depends(di.Provide["catalog.synchronizer"]),
) -> MessageResponse:
    course = await load_course(course_id)
    require(auth.actor, Operation.DeleteCourse, course)

    if not await course_storage.delete(course_id):
        raise NotFoundError("Course not found")
    report = await synchronizer.on_course_delete(course)
    return MessageResponse(message="Course deleted successfully!", warnings=list(report.warnings))


@router.post("/courses/{course_id}/media", operation_id="upload_course_media", status_code=status.HTTP_201_CREATED)
@di.inject
async def upload_course_media(
    course_id: CourseID,
    kind: MediaKind = Form(...),
    file: UploadFile = File(...),
    auth: AuthContext = Depends(require_admin),
    object_store: ObjectStore = Depends(di.Provide["storage.object_store"]),
    max_upload_bytes: int = Depends(di.Provide["config.web.market.max_upload_bytes"]),
    synchronizer: Synchronizer = Depends(di.Provide["catalog.synchronizer"]),
) -> MediaUploadResponse:
    """Store an image, video or file for a course and attach it to the course.

    An image replaces `course_image`; videos and files are appended.
    """
    course = await load_course(course_id)
    require(auth.actor, Operation.UploadCourseMedia, course)

    data = await file.read(max_upload_bytes + 1)
    if len(data) > max_upload_bytes:
        raise ValidationError([f"file exceeds the {max_upload_bytes} byte upload limit"])
    if not data:
        raise ValidationError(["file is empty"])

    name = PurePosixPath(file.filename or "upload").name or "upload"
    key = f"courses/{course_id.key}/{kind.value}/{shortuuid.uuid()}-{name}"
    try:
        uploaded = await object_store.upload(key, data, content_type=file.content_type or "application/octet-stream")
    except OSError as e:
        logger.error("media upload failed", extra={"course_id": str(course_id), "key": key, "error": str(e)})
        raise UpstreamStoreError("Error uploading file", details=str(e)) from e

    updated: Course | None
    try:
        match kind:
            case MediaKind.Image:
                updated = await course_storage.update(course_id, image=uploaded.url)
            case MediaKind.Video:
                updated = await course_storage.update(course_id, videos=[*course.course_videos, uploaded.url])
            case MediaKind.File:
                entry = CourseFile(file_name=name, file_reference=uploaded.url)
                updated = await course_storage.update(course_id, files=[*course.course_files, entry])
    except Exception:
        logger.warning("removing upload after failed course update", extra={"course_id": str(course_id), "key": key})
        await object_store.delete(key)
        raise
    if updated is None:
        await object_store.delete(key)
        raise NotFoundError("Course not found")

    report = await synchronizer.on_course_write(updated)
    return MediaUploadResponse(
        message="File uploaded successfully!",
        kind=kind,
        url=uploaded.url,
        course=CourseResponse.of(updated),
        warnings=list(report.warnings),
    )


@router.get("/profile", operation_id="get_admin_profile")
async def get_admin_profile(auth: AuthContext = Depends(require_admin)) -> AdminEnvelope:
    require(auth.actor, Operation.ViewProfile, auth.user)
    return AdminEnvelope(admin=UserResponse.of(auth.user))


@router.put("/profile", operation_id="update_admin_profile")
@di.inject
async def update_admin_profile(
    request: ProfileUpdateRequest,
    auth: AuthContext = Depends(require_admin),
    bcrypt_rounds: int = Depends(di.Provide["config.web.market.auth.bcrypt_rounds"]),
    synchronizer: Synchronizer = Depends(di.Provide["catalog.synchronizer"]),
) -> AdminEnvelope:
    """Update the caller's own profile and refresh their snapshot in every course they instruct."""
    require(auth.actor, Operation.UpdateProfile, auth.user)
    updated = await user_storage.update(
        auth.user.user_id,
        name=request.user_name if request.user_name is not None else NotSet(),
        email=request.user_email if request.user_email is not None else NotSet(),
        password=p.Secret(request.user_password) if request.user_password is not None else NotSet(),
        bcrypt_rounds=bcrypt_rounds,
    )
    if updated is None:
        raise NotFoundError("Admin not found")
    report = await synchronizer.on_admin_change(updated)
    return AdminEnvelope(
        message="Profile updated successfully!",
        admin=UserResponse.of(updated),
        warnings=list(report.warnings),
    )
