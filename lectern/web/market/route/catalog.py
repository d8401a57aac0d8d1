"""Public catalog routes; no token required."""

from __future__ import annotations

from fastapi import APIRouter

from lectern.errors import NotFoundError
from lectern.model import BookID, CourseID
from lectern.storage import book as book_storage
from lectern.storage import course as course_storage

from ..dependencies import load_book
from ..view import BookEnvelope, BookListResponse, BookResponse, CourseEnvelope, CourseListResponse, CourseResponse

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/courses", operation_id="browse_courses")
async def browse_courses() -> CourseListResponse:
    """List published courses."""
    courses = await course_storage.find(published=True)
    return CourseListResponse(courses=[CourseResponse.of(c) for c in courses])


@router.get("/courses/{course_id}", operation_id="browse_course")
async def browse_course(course_id: CourseID) -> CourseEnvelope:
    course = await course_storage.get(course_id)
    # an unpublished course is not part of the public catalog
    if course is None or not course.course_published:
        raise NotFoundError("Course not found")
    return CourseEnvelope(course=CourseResponse.of(course))


@router.get("/books", operation_id="browse_books")
async def browse_books() -> BookListResponse:
    books = await book_storage.find()
    return BookListResponse(books=[BookResponse.of(b) for b in books])


@router.get("/books/{book_id}", operation_id="browse_book")
async def browse_book(book_id: BookID) -> BookEnvelope:
    return BookEnvelope(book=BookResponse.of(await load_book(book_id)))
