from .base import BaseModel, WithTimestamps
from .id import CourseID, UserID
from .snapshot import CourseSnapshot, InstructorSnapshot


class Lesson(BaseModel):
    subject: str
    description: str | None = None
    video_reference: str | None = None


class CourseFile(BaseModel):
    file_name: str
    file_reference: str


class Course(WithTimestamps):
    """A course and the instructors who own it.

    `course_instructor_ids` is authoritative; `course_instructor` holds the
    matching snapshots and is kept current by the synchronizer.
    """

    course_id: CourseID
    course_name: str
    course_description: str | None = None
    course_price: float
    course_instructor_ids: list[UserID]
    course_instructor: list[InstructorSnapshot] = []
    course_image: str | None = None
    course_videos: list[str] = []
    course_lessons: list[Lesson] = []
    course_files: list[CourseFile] = []
    course_published: bool = False

    def snapshot(self) -> CourseSnapshot:
        return CourseSnapshot(
            course_id=self.course_id,
            course_name=self.course_name,
            course_description=self.course_description,
            course_price=self.course_price,
            course_image=self.course_image,
            course_published=self.course_published,
        )

    def is_instructed_by(self, user_id: UserID) -> bool:
        return user_id in self.course_instructor_ids
