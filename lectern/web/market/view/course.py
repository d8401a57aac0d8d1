"""View models for courses.

Create and update share field definitions; update makes every field optional
and only applies the fields the client actually sent.
"""

from __future__ import annotations

import datetime

import pydantic as p

from lectern.model import Course, CourseFile, CourseID, InstructorSnapshot, Lesson, MediaKind, UserID


class CourseCreateRequest(p.BaseModel):
    course_name: str = p.Field(min_length=1)
    course_description: str | None = None
    course_price: p.PositiveFloat
    # one instructor ID or a list of them; the caller is used when omitted
    course_instructor: str | list[str] | None = None
    course_image: str | None = None
    course_videos: list[str] = []
    course_lessons: list[Lesson] = []
    course_files: list[CourseFile] = []
    course_published: bool = False


class CourseUpdateRequest(p.BaseModel):
    course_name: str | None = p.Field(default=None, min_length=1)
    course_description: str | None = None
    course_price: p.PositiveFloat | None = None
    course_instructor: str | list[str] | None = None
    course_image: str | None = None
    course_videos: list[str] | None = None
    course_lessons: list[Lesson] | None = None
    course_files: list[CourseFile] | None = None
    course_published: bool | None = None


class CourseResponse(p.BaseModel):
    course_id: CourseID
    course_name: str
    course_description: str | None = None
    course_price: float
    course_instructor_ids: list[UserID]
    course_instructor: list[InstructorSnapshot]
    course_image: str | None = None
    course_videos: list[str] = []
    course_lessons: list[Lesson] = []
    course_files: list[CourseFile] = []
    course_published: bool
    create_time: datetime.datetime | None = None
    update_time: datetime.datetime | None = None

    @classmethod
    def of(cls, course: Course) -> CourseResponse:
        return cls.model_validate(course.model_dump())


class CourseEnvelope(p.BaseModel):
    message: str | None = None
    course: CourseResponse
    warnings: list[str] = []


class CourseListResponse(p.BaseModel):
    courses: list[CourseResponse]


class MediaUploadResponse(p.BaseModel):
    message: str
    kind: MediaKind
    url: str
    course: CourseResponse
    warnings: list[str] = []
