"""Tests for course authoring and the admin profile."""

from __future__ import annotations

import typing as t
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from lectern.model import Course, CourseID, User, UserID, UserRole, UserState
from lectern.storage.memory import MemoryRecordStore
from lectern.storage.object import LocalObjectStore
from lectern.storage.record import StoreError

Headers = t.Callable[[User], dict[str, str]]


class TestCreateCourse:
    """Tests for POST /admin/courses."""

    def test_creator_is_instructor(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        auth_headers: Headers,
        get_user: t.Callable[[User], User | None],
    ) -> None:
        """With no instructor given, the creating admin instructs the course and holds its snapshot."""
        bob = user_factory(email="bob@example.com", name="Bob", role=UserRole.Admin)

        response = client.post(
            "/admin/courses",
            json={"course_name": "Intro", "course_price": 10.0},
            headers=auth_headers(bob),
        )

        assert response.status_code == 201
        course = response.json()["course"]
        assert course["course_instructor_ids"] == [str(bob.user_id)]
        assert course["course_instructor"][0]["user_name"] == "Bob"
        assert response.json()["warnings"] == []

        fresh = get_user(bob)
        assert fresh is not None
        assert [s.course_id for s in fresh.user_uploaded_courses] == [course["course_id"]]

    def test_admin_always_joins(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        auth_headers: Headers,
        get_user: t.Callable[[User], User | None],
    ) -> None:
        """An admin naming only a co-instructor is still added as an instructor."""
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        carol = user_factory(email="carol@example.com", role=UserRole.Admin)

        response = client.post(
            "/admin/courses",
            json={"course_name": "Intro", "course_price": 10.0, "course_instructor": str(carol.user_id)},
            headers=auth_headers(bob),
        )

        assert response.status_code == 201
        assert response.json()["course"]["course_instructor_ids"] == [str(bob.user_id), str(carol.user_id)]
        fresh = get_user(carol)
        assert fresh is not None
        assert len(fresh.user_uploaded_courses) == 1

    def test_super_creates_for_others(
        self, client: TestClient, user_factory: t.Callable[..., User], auth_headers: Headers
    ) -> None:
        root = user_factory(email="root@example.com", role=UserRole.Super)
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)

        response = client.post(
            "/admin/courses",
            json={"course_name": "Intro", "course_price": 10.0, "course_instructor": [str(bob.user_id)]},
            headers=auth_headers(root),
        )

        assert response.status_code == 201
        assert response.json()["course"]["course_instructor_ids"] == [str(bob.user_id)]

    def test_unknown_instructor_rejects_course(
        self, client: TestClient, user_factory: t.Callable[..., User], auth_headers: Headers
    ) -> None:
        """Nothing is written when any instructor fails to resolve, and the error names it."""
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        ghost = str(UserID())

        response = client.post(
            "/admin/courses",
            json={"course_name": "Intro", "course_price": 10.0, "course_instructor": [ghost]},
            headers=auth_headers(bob),
        )

        assert response.status_code == 400
        assert any(ghost in e for e in response.json()["error"])
        assert client.get("/admin/courses", headers=auth_headers(bob)).json()["courses"] == []

    def test_normal_user_cannot_instruct(
        self, client: TestClient, user_factory: t.Callable[..., User], auth_headers: Headers
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        alice = user_factory(email="alice@example.com")

        response = client.post(
            "/admin/courses",
            json={"course_name": "Intro", "course_price": 10.0, "course_instructor": [str(alice.user_id)]},
            headers=auth_headers(bob),
        )

        assert response.status_code == 400
        assert any(str(alice.user_id) in e for e in response.json()["error"])

    def test_invalid_price_returns_400(
        self, client: TestClient, user_factory: t.Callable[..., User], auth_headers: Headers
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)

        response = client.post(
            "/admin/courses", json={"course_name": "Intro", "course_price": -1}, headers=auth_headers(bob)
        )

        assert response.status_code == 400

    def test_normal_user_forbidden(
        self, client: TestClient, user_factory: t.Callable[..., User], auth_headers: Headers
    ) -> None:
        alice = user_factory(email="alice@example.com")

        response = client.post(
            "/admin/courses", json={"course_name": "Intro", "course_price": 10.0}, headers=auth_headers(alice)
        )

        assert response.status_code == 403

    def test_inactive_admin_forbidden(
        self, client: TestClient, user_factory: t.Callable[..., User], auth_headers: Headers
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin, state=UserState.Inactive)

        response = client.post(
            "/admin/courses", json={"course_name": "Intro", "course_price": 10.0}, headers=auth_headers(bob)
        )

        assert response.status_code == 403


class TestListCourses:
    """Tests for GET /admin/courses and /admin/admincourses."""

    def test_admin_sees_own_courses(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        carol = user_factory(email="carol@example.com", role=UserRole.Admin)
        mine = course_factory([bob], name="Mine", published=False)
        course_factory([carol], name="Theirs")

        for path in ("/admin/courses", "/admin/admincourses"):
            response = client.get(path, headers=auth_headers(bob))
            assert response.status_code == 200
            assert [c["course_id"] for c in response.json()["courses"]] == [str(mine.course_id)]

    def test_super_sees_everything(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
    ) -> None:
        root = user_factory(email="root@example.com", role=UserRole.Super)
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        course_factory([bob], name="A")
        course_factory([bob], name="B", published=False)

        response = client.get("/admin/courses", headers=auth_headers(root))

        assert len(response.json()["courses"]) == 2


class TestGetCourse:
    """Tests for GET /admin/courses/{course_id}."""

    def test_instructor_reads_own_draft(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        course = course_factory([bob], name="Draft", published=False)

        response = client.get(f"/admin/courses/{course.course_id}", headers=auth_headers(bob))

        assert response.status_code == 200
        assert response.json()["course"]["course_name"] == "Draft"

    def test_other_admin_forbidden(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
    ) -> None:
        """An admin cannot read another admin's unpublished course."""
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        mallory = user_factory(email="mallory@example.com", role=UserRole.Admin)
        course = course_factory([bob], name="Draft", published=False)

        response = client.get(f"/admin/courses/{course.course_id}", headers=auth_headers(mallory))

        assert response.status_code == 403
        assert "Draft" not in response.text


class TestUpdateCourse:
    """Tests for PUT /admin/courses/{course_id}."""

    def test_non_instructor_forbidden(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
        get_course: t.Callable[[Course], Course | None],
    ) -> None:
        """An admin who does not instruct the course gets 403 and the course is untouched."""
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        mallory = user_factory(email="mallory@example.com", role=UserRole.Admin)
        course = course_factory([bob], name="Intro")

        response = client.put(
            f"/admin/courses/{course.course_id}", json={"course_name": "Hijacked"}, headers=auth_headers(mallory)
        )

        assert response.status_code == 403
        fresh = get_course(course)
        assert fresh is not None
        assert fresh.course_name == "Intro"
        assert fresh.update_time == course.update_time

    def test_rename_refreshes_instructor_copy(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
        get_user: t.Callable[[User], User | None],
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        course = course_factory([bob], name="Intro", price=10.0)

        response = client.put(
            f"/admin/courses/{course.course_id}", json={"course_name": "Advanced"}, headers=auth_headers(bob)
        )

        assert response.status_code == 200
        assert response.json()["course"]["course_name"] == "Advanced"
        assert response.json()["course"]["course_price"] == 10.0
        fresh = get_user(bob)
        assert fresh is not None
        assert [s.course_name for s in fresh.user_uploaded_courses] == ["Advanced"]

    def test_reassign_instructors(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
        get_user: t.Callable[[User], User | None],
    ) -> None:
        """Dropped instructors lose the snapshot and new ones gain it."""
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        carol = user_factory(email="carol@example.com", role=UserRole.Admin)
        course = course_factory([bob])

        response = client.put(
            f"/admin/courses/{course.course_id}",
            json={"course_instructor": [str(carol.user_id)]},
            headers=auth_headers(bob),
        )

        assert response.status_code == 200
        assert response.json()["course"]["course_instructor_ids"] == [str(carol.user_id)]
        old, new = get_user(bob), get_user(carol)
        assert old is not None and new is not None
        assert old.user_uploaded_courses == []
        assert [s.course_id for s in new.user_uploaded_courses] == [course.course_id]

    def test_unknown_instructor_leaves_course(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
        get_course: t.Callable[[Course], Course | None],
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        course = course_factory([bob], name="Intro")
        ghost = str(UserID())

        response = client.put(
            f"/admin/courses/{course.course_id}",
            json={"course_name": "Renamed", "course_instructor": [str(bob.user_id), ghost]},
            headers=auth_headers(bob),
        )

        assert response.status_code == 400
        fresh = get_course(course)
        assert fresh is not None
        assert fresh.course_name == "Intro"

    def test_super_may_update_any_course(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
    ) -> None:
        root = user_factory(email="root@example.com", role=UserRole.Super)
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        course = course_factory([bob])

        response = client.put(
            f"/admin/courses/{course.course_id}", json={"course_published": False}, headers=auth_headers(root)
        )

        assert response.status_code == 200
        assert response.json()["course"]["course_published"] is False

    def test_unknown_course_returns_404(
        self, client: TestClient, user_factory: t.Callable[..., User], auth_headers: Headers
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)

        response = client.put(
            f"/admin/courses/{CourseID()}", json={"course_name": "x"}, headers=auth_headers(bob)
        )

        assert response.status_code == 404


class TestDeleteCourse:
    """Tests for DELETE /admin/courses/{course_id}."""

    def test_delete_removes_every_reference(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
        get_user: t.Callable[[User], User | None],
        get_course: t.Callable[[Course], Course | None],
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        alice = user_factory(email="alice@example.com")
        course = course_factory([bob])
        client.put(
            "/user/enrollments", json={"user_courses": [str(course.course_id)]}, headers=auth_headers(alice)
        )

        response = client.delete(f"/admin/courses/{course.course_id}", headers=auth_headers(bob))

        assert response.status_code == 200
        assert response.json()["warnings"] == []
        assert get_course(course) is None
        instructor, learner = get_user(bob), get_user(alice)
        assert instructor is not None and learner is not None
        assert instructor.user_uploaded_courses == []
        assert learner.user_courses == []

    def test_non_instructor_forbidden(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
        get_course: t.Callable[[Course], Course | None],
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        mallory = user_factory(email="mallory@example.com", role=UserRole.Admin)
        course = course_factory([bob])

        response = client.delete(f"/admin/courses/{course.course_id}", headers=auth_headers(mallory))

        assert response.status_code == 403
        assert get_course(course) is not None


class TestUploadMedia:
    """Tests for POST /admin/courses/{course_id}/media."""

    def test_upload_image(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
        object_store: LocalObjectStore,
        get_user: t.Callable[[User], User | None],
    ) -> None:
        """An image replaces the course image and the instructor's copy follows."""
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        course = course_factory([bob])

        response = client.post(
            f"/admin/courses/{course.course_id}/media",
            data={"kind": "image"},
            files={"file": ("cover.png", b"\x89PNG fake", "image/png")},
            headers=auth_headers(bob),
        )

        assert response.status_code == 201
        url = response.json()["url"]
        assert url.startswith(f"/uploads/courses/{course.course_id.key}/image/")
        assert url.endswith("-cover.png")
        assert response.json()["course"]["course_image"] == url
        stored = Path(object_store.base_path, url.removeprefix("/uploads/"))
        assert stored.read_bytes() == b"\x89PNG fake"

        fresh = get_user(bob)
        assert fresh is not None
        assert fresh.user_uploaded_courses[0].course_image == url

    def test_failed_course_update_removes_upload(
        self,
        client: TestClient,
        store: MemoryRecordStore,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
        object_store: LocalObjectStore,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A stored file is not left behind when its course cannot be updated."""
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        course = course_factory([bob])

        async def refuse(table: str, key: str, fields: t.Mapping[str, t.Any]) -> None:
            raise StoreError("write timed out")

        monkeypatch.setattr(store, "update_fields", refuse)

        response = client.post(
            f"/admin/courses/{course.course_id}/media",
            data={"kind": "image"},
            files={"file": ("cover.png", b"\x89PNG fake", "image/png")},
            headers=auth_headers(bob),
        )

        assert response.status_code == 500
        assert response.json()["details"] == "write timed out"
        assert [f for f in Path(object_store.base_path).rglob("*") if f.is_file()] == []

    def test_upload_video_and_file_append(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        course = course_factory([bob])
        path = f"/admin/courses/{course.course_id}/media"

        headers = auth_headers(bob)

        for name in ("a.mp4", "b.mp4"):
            client.post(path, data={"kind": "video"}, files={"file": (name, b"video", "video/mp4")}, headers=headers)
        response = client.post(
            path, data={"kind": "file"}, files={"file": ("notes.pdf", b"pdf", "application/pdf")}, headers=headers
        )

        assert response.status_code == 201
        course_data = response.json()["course"]
        assert len(course_data["course_videos"]) == 2
        assert [f["file_name"] for f in course_data["course_files"]] == ["notes.pdf"]

    def test_too_large(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        course = course_factory([bob])

        response = client.post(
            f"/admin/courses/{course.course_id}/media",
            data={"kind": "file"},
            files={"file": ("big.bin", b"x" * 2048, "application/octet-stream")},
            headers=auth_headers(bob),
        )

        assert response.status_code == 400

    def test_unknown_kind(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        course = course_factory([bob])

        response = client.post(
            f"/admin/courses/{course.course_id}/media",
            data={"kind": "audio"},
            files={"file": ("a.mp3", b"x", "audio/mpeg")},
            headers=auth_headers(bob),
        )

        assert response.status_code == 400

    def test_non_instructor_forbidden(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
        get_course: t.Callable[[Course], Course | None],
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)
        mallory = user_factory(email="mallory@example.com", role=UserRole.Admin)
        course = course_factory([bob])

        response = client.post(
            f"/admin/courses/{course.course_id}/media",
            data={"kind": "image"},
            files={"file": ("x.png", b"x", "image/png")},
            headers=auth_headers(mallory),
        )

        assert response.status_code == 403
        fresh = get_course(course)
        assert fresh is not None
        assert fresh.course_image is None


class TestAdminProfile:
    """Tests for GET/PUT /admin/profile."""

    def test_get_profile(self, client: TestClient, user_factory: t.Callable[..., User], auth_headers: Headers) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)

        response = client.get("/admin/profile", headers=auth_headers(bob))

        assert response.status_code == 200
        assert response.json()["admin"]["user_email"] == "bob@example.com"
        assert "user_password" not in response.json()["admin"]

    def test_rename_refreshes_courses(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        course_factory: t.Callable[..., Course],
        auth_headers: Headers,
        get_course: t.Callable[[Course], Course | None],
    ) -> None:
        """Every course the admin instructs carries the new name."""
        bob = user_factory(email="bob@example.com", name="Bob", role=UserRole.Admin)
        courses = [course_factory([bob], name="A"), course_factory([bob], name="B")]

        response = client.put("/admin/profile", json={"user_name": "Robert"}, headers=auth_headers(bob))

        assert response.status_code == 200
        assert response.json()["admin"]["user_name"] == "Robert"
        for course in courses:
            fresh = get_course(course)
            assert fresh is not None
            assert [s.user_name for s in fresh.course_instructor] == ["Robert"]

    def test_role_cannot_change(
        self,
        client: TestClient,
        user_factory: t.Callable[..., User],
        auth_headers: Headers,
        get_user: t.Callable[[User], User | None],
    ) -> None:
        bob = user_factory(email="bob@example.com", role=UserRole.Admin)

        response = client.put(
            "/admin/profile", json={"user_role": "super", "user_state": "inactive"}, headers=auth_headers(bob)
        )

        assert response.status_code == 200
        fresh = get_user(bob)
        assert fresh is not None
        assert fresh.user_role is UserRole.Admin
        assert fresh.user_state is UserState.Active
