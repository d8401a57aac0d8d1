"""Fan-out of denormalized snapshots after a primary write.

The caller writes the source record first; the synchronizer then pushes fresh
snapshots into every dependent record, concurrently. A failed fan-out write
never fails the operation: it is logged and returned as a warning, and the
copy it would have refreshed stays stale until the next write of its source.

Each dependent record is refreshed with read, merge, `update_fields`. Two
requests racing on the same dependent record can interleave; the merge is
idempotent (replace by key, never append a duplicate) and the last write wins.
"""

from __future__ import annotations

import asyncio
import logging
import typing as t

from lectern.errors import NotFoundError, ReferenceResolutionError
from lectern.lib import NotSet
from lectern.lib.util import dedupe, replace_or_append
from lectern.model import Book, BookID, Course, CourseID, CourseSnapshot, InstructorSnapshot, User, UserID
from lectern.storage import course as course_storage
from lectern.storage import user as user_storage
from lectern.storage.record import RecordStore

from .resolver import IDs, ReferenceResolver

logger = logging.getLogger(__name__)


class SyncReport(t.NamedTuple):
    """Outcome of a fan-out; `warnings` names every dependent copy that may be stale."""

    warnings: tuple[str, ...] = ()

    def merge(self, other: SyncReport) -> SyncReport:
        return SyncReport(self.warnings + other.warnings)

    @property
    def degraded(self) -> bool:
        return bool(self.warnings)


class Enrollment(t.NamedTuple):
    """A user's enrollment, hydrated for display."""

    user: User
    books: list[Book]
    courses: list[Course]


class Task(t.NamedTuple):
    description: str
    extra: dict[str, str]
    coro: t.Coroutine[t.Any, t.Any, t.Any]


class Synchronizer(object):
    def __init__(self, store: RecordStore, resolver: ReferenceResolver) -> None:
        self._store = store
        self._resolver = resolver

    async def on_course_write(self, course: Course, previous: Course | None = None) -> SyncReport:
        """Refresh the course's snapshot in each instructor's `user_uploaded_courses`.

        With `previous`, instructors who were dropped by this write also lose
        the snapshot.
        """
        snapshot = course.snapshot()
        tasks = [
            Task(
                f"course {course.course_id} in uploaded courses of {uid}",
                {"course_id": str(course.course_id), "user_id": str(uid)},
                self._put_uploaded(uid, snapshot),
            )
            for uid in dedupe(course.course_instructor_ids)
        ]
        if previous is not None:
            dropped = set(previous.course_instructor_ids) - set(course.course_instructor_ids)
            tasks.extend(
                Task(
                    f"course {course.course_id} removal from uploaded courses of {uid}",
                    {"course_id": str(course.course_id), "user_id": str(uid)},
                    self._drop_uploaded(uid, course.course_id),
                )
                for uid in dedupe(previous.course_instructor_ids)
                if uid in dropped
            )
        return await self._fan_out(tasks)

    async def on_course_delete(self, course: Course) -> SyncReport:
        """Remove a deleted course from its instructors and from every enrolled user."""
        tasks = [
            Task(
                f"course {course.course_id} removal from uploaded courses of {uid}",
                {"course_id": str(course.course_id), "user_id": str(uid)},
                self._drop_uploaded(uid, course.course_id),
            )
            for uid in dedupe(course.course_instructor_ids)
        ]
        try:
            enrolled = await user_storage.find(enrolled_course=course.course_id, store=self._store)
        except Exception as e:
            report = await self._fan_out(tasks)
            failed = self._failed(f"enrollments in course {course.course_id}", {"course_id": str(course.course_id)}, e)
            return report.merge(failed)
        tasks.extend(
            Task(
                f"course {course.course_id} removal from enrollments of {u.user_id}",
                {"course_id": str(course.course_id), "user_id": str(u.user_id)},
                self._drop_enrollment(u.user_id, course_id=course.course_id),
            )
            for u in enrolled
        )
        return await self._fan_out(tasks)

    async def on_book_delete(self, book_id: BookID) -> SyncReport:
        try:
            enrolled = await user_storage.find(enrolled_book=book_id, store=self._store)
        except Exception as e:
            return self._failed(f"enrollments in book {book_id}", {"book_id": str(book_id)}, e)
        return await self._fan_out([
            Task(
                f"book {book_id} removal from enrollments of {u.user_id}",
                {"book_id": str(book_id), "user_id": str(u.user_id)},
                self._drop_enrollment(u.user_id, book_id=book_id),
            )
            for u in enrolled
        ])

    async def on_admin_change(self, user: User) -> SyncReport:
        """Overwrite the user's instructor snapshot in every course they instruct.

        Courses are found through the instructor index rather than a scan.
        """
        try:
            courses = await course_storage.find(instructor_id=user.user_id, store=self._store)
        except Exception as e:
            return self._failed(f"courses instructed by {user.user_id}", {"user_id": str(user.user_id)}, e)

        snapshot = user.instructor_snapshot()
        return await self._fan_out([
            Task(
                f"instructor {user.user_id} in course {c.course_id}",
                {"course_id": str(c.course_id), "user_id": str(user.user_id)},
                self._put_instructor(c.course_id, snapshot),
            )
            for c in courses
        ])

    async def on_enrollment_change(self, user: User, books: IDs = None, courses: IDs = None) -> Enrollment:
        """Replace the user's enrolled books and/or courses.

        Both lists are resolved before anything is written; an unknown ID in
        either rejects the whole change. Only bare IDs are stored. A list left
        as None keeps its current value.

        Raises:
            ReferenceResolutionError: naming every unknown ID across both lists
        """
        pending: list[t.Awaitable[t.Any]] = []
        if books is not None:
            pending.append(self._resolver.books(books))
        if courses is not None:
            pending.append(self._resolver.courses(courses))
        results = await asyncio.gather(*pending, return_exceptions=True)

        errors = [r for r in results if isinstance(r, BaseException)]
        for r in errors:
            if not isinstance(r, ReferenceResolutionError):
                raise r
        if errors:
            failed = t.cast(list[ReferenceResolutionError], errors)
            raise ReferenceResolutionError(
                [m for e in failed for m in ([e.error] if isinstance(e.error, str) else e.error)],
                unresolved=[u for e in failed for u in e.unresolved],
            )

        resolved = iter(results)
        new_books = t.cast(list[Book], next(resolved)) if books is not None else NotSet()
        new_courses = t.cast(list[Course], next(resolved)) if courses is not None else NotSet()
        updated = await user_storage.update(
            user.user_id,
            books=NotSet() if isinstance(new_books, NotSet) else [b.book_id for b in new_books],
            courses=NotSet() if isinstance(new_courses, NotSet) else [c.course_id for c in new_courses],
            store=self._store,
        )
        if updated is None:
            raise NotFoundError("User not found")
        return await self.hydrate(
            updated,
            books=None if isinstance(new_books, NotSet) else new_books,
            courses=None if isinstance(new_courses, NotSet) else new_courses,
        )

    async def hydrate(
        self, user: User, *, books: list[Book] | None = None, courses: list[Course] | None = None
    ) -> Enrollment:
        """Load the entities behind a user's enrolled IDs; IDs whose record is gone are skipped."""
        if books is None:
            books = await self._resolver.present_books(user.user_books)
        if courses is None:
            courses = await self._resolver.present_courses(user.user_courses)
        return Enrollment(user=user, books=books, courses=courses)

    async def _put_uploaded(self, user_id: UserID, snapshot: CourseSnapshot) -> None:
        user = await user_storage.get(user_id, store=self._store)
        if user is None:
            raise LookupError(f"instructor {user_id} does not exist")
        merged = replace_or_append(user.user_uploaded_courses, snapshot, key=lambda s: s.course_id)
        await user_storage.update(user_id, uploaded_courses=merged, store=self._store)

    async def _drop_uploaded(self, user_id: UserID, course_id: CourseID) -> None:
        user = await user_storage.get(user_id, store=self._store)
        if user is None:
            return
        remaining = [s for s in user.user_uploaded_courses if s.course_id != course_id]
        if len(remaining) != len(user.user_uploaded_courses):
            await user_storage.update(user_id, uploaded_courses=remaining, store=self._store)

    async def _drop_enrollment(
        self, user_id: UserID, *, course_id: CourseID | None = None, book_id: BookID | None = None
    ) -> None:
        user = await user_storage.get(user_id, store=self._store)
        if user is None:
            return
        if course_id is not None:
            await user_storage.update(
                user_id, courses=[c for c in user.user_courses if c != course_id], store=self._store
            )
        if book_id is not None:
            await user_storage.update(user_id, books=[b for b in user.user_books if b != book_id], store=self._store)

    async def _put_instructor(self, course_id: CourseID, snapshot: InstructorSnapshot) -> None:
        course = await course_storage.get(course_id, store=self._store)
        if course is None or not course.is_instructed_by(snapshot.user_id):
            return
        merged = replace_or_append(course.course_instructor, snapshot, key=lambda s: s.user_id)
        # keep snapshots in instructor order, and only for current instructors
        order = {uid: i for i, uid in enumerate(course.course_instructor_ids)}
        merged = sorted((s for s in merged if s.user_id in order), key=lambda s: order[s.user_id])
        await course_storage.set_instructor_snapshots(course_id, merged, store=self._store)

    async def _fan_out(self, tasks: t.Sequence[Task]) -> SyncReport:
        results = await asyncio.gather(*(task.coro for task in tasks), return_exceptions=True)
        report = SyncReport()
        for task, result in zip(tasks, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                report = report.merge(self._failed(task.description, task.extra, result))
        return report

    def _failed(self, description: str, extra: dict[str, str], error: Exception) -> SyncReport:
        logger.warning(
            "fan-out write failed",
            extra={**extra, "target": description, "error": f"{type(error).__name__}: {error}"},
        )
        return SyncReport((f"Could not refresh {description}; it may be stale",))
