from __future__ import annotations

import datetime
import typing as t

from lectern.core import di
from lectern.lib import NotSet
from lectern.model import Course, CourseFile, CourseID, InstructorSnapshot, Lesson, User, UserID

from .record import Item, RecordStore

TABLE = "courses"


def _load(item: Item | None) -> Course | None:
    return Course.model_validate(item) if item is not None else None


async def get(course_id: CourseID, *, store: RecordStore = di.Provide["storage.records"]) -> Course | None:
    return _load(await store.get(TABLE, course_id))


async def find(
    *,
    instructor_id: UserID | None = None,
    published: bool | None = None,
    store: RecordStore = di.Provide["storage.records"],
) -> tuple[Course, ...]:
    """Find courses, by instructor through the instructor index, otherwise by scanning."""
    if instructor_id is not None:
        items = await store.query(TABLE, "course_instructor_ids", instructor_id)
    else:
        items = await store.scan(TABLE)
    courses = (Course.model_validate(item) for item in items)
    return tuple(c for c in courses if published is None or c.course_published is published)


async def create(
    *,
    name: str,
    price: float,
    instructors: t.Sequence[User],
    description: str | None = None,
    image: str | None = None,
    videos: t.Sequence[str] = (),
    lessons: t.Sequence[Lesson] = (),
    files: t.Sequence[CourseFile] = (),
    published: bool = False,
    store: RecordStore = di.Provide["storage.records"],
) -> Course:
    """Create a course instructed by already-resolved `instructors`."""
    now = datetime.datetime.now(datetime.UTC)
    course = Course(
        course_id=CourseID(),
        course_name=name,
        course_description=description,
        course_price=price,
        course_instructor_ids=[i.user_id for i in instructors],
        course_instructor=[i.instructor_snapshot() for i in instructors],
        course_image=image,
        course_videos=list(videos),
        course_lessons=list(lessons),
        course_files=list(files),
        course_published=published,
        create_time=now,
        update_time=now,
    )
    await store.put(TABLE, course.model_dump(mode="json"))
    return course


async def update(
    course_id: CourseID,
    *,
    name: str | NotSet = NotSet(),
    price: float | NotSet = NotSet(),
    description: str | None | NotSet = NotSet(),
    instructors: t.Sequence[User] | NotSet = NotSet(),
    image: str | None | NotSet = NotSet(),
    videos: t.Sequence[str] | NotSet = NotSet(),
    lessons: t.Sequence[Lesson] | NotSet = NotSet(),
    files: t.Sequence[CourseFile] | NotSet = NotSet(),
    published: bool | NotSet = NotSet(),
    store: RecordStore = di.Provide["storage.records"],
) -> Course | None:
    """Update a course; only supplied fields change.

    Uses NotSet sentinel for parameters where None is a valid update value.
    Returns None if the course does not exist.
    """
    values: dict[str, t.Any] = {}
    if not isinstance(name, NotSet):
        values["course_name"] = name
    if not isinstance(price, NotSet):
        values["course_price"] = price
    if not isinstance(description, NotSet):
        values["course_description"] = description
    if not isinstance(instructors, NotSet):
        values["course_instructor_ids"] = [str(i.user_id) for i in instructors]
        values["course_instructor"] = [i.instructor_snapshot().model_dump(mode="json") for i in instructors]
    if not isinstance(image, NotSet):
        values["course_image"] = image
    if not isinstance(videos, NotSet):
        values["course_videos"] = list(videos)
    if not isinstance(lessons, NotSet):
        values["course_lessons"] = [lesson.model_dump(mode="json") for lesson in lessons]
    if not isinstance(files, NotSet):
        values["course_files"] = [f.model_dump(mode="json") for f in files]
    if not isinstance(published, NotSet):
        values["course_published"] = published
    values["update_time"] = datetime.datetime.now(datetime.UTC).isoformat()

    return _load(await store.update_fields(TABLE, course_id, values))


async def set_instructor_snapshots(
    course_id: CourseID,
    snapshots: t.Sequence[InstructorSnapshot],
    *,
    store: RecordStore = di.Provide["storage.records"],
) -> Course | None:
    """Overwrite only the embedded instructor snapshots, leaving the course otherwise untouched."""
    item = await store.update_fields(
        TABLE, course_id, {"course_instructor": [s.model_dump(mode="json") for s in snapshots]}
    )
    return _load(item)


async def delete(course_id: CourseID, *, store: RecordStore = di.Provide["storage.records"]) -> bool:
    return await store.delete(TABLE, course_id)
