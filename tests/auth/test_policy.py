"""Tests for the authorization policy."""

from __future__ import annotations

import datetime

import pytest

from lectern.auth.policy import Actor, authorize, Operation, Policy, PublicOperations, require
from lectern.errors import AuthorizationError
from lectern.model import Course, CourseID, User, UserID, UserRole


def make_user(role: UserRole) -> User:
    now = datetime.datetime.now(datetime.UTC)
    return User(
        user_id=UserID(),
        user_name="Someone",
        user_email="someone@example.com",
        user_role=role,
        create_time=now,
        update_time=now,
    )


def make_course(*instructors: User) -> Course:
    now = datetime.datetime.now(datetime.UTC)
    return Course(
        course_id=CourseID(),
        course_name="Intro",
        course_price=10.0,
        course_instructor_ids=[i.user_id for i in instructors],
        create_time=now,
        update_time=now,
    )


class TestTable(object):
    def test_every_guarded_operation_has_rules(self) -> None:
        """Each operation is either public or has a rule for every role."""
        for operation in Operation:
            if operation in PublicOperations:
                continue
            assert set(Policy[operation]) == set(UserRole), operation

    @pytest.mark.parametrize("operation", sorted(PublicOperations, key=lambda o: o.value))
    def test_public_operations_need_no_actor(self, operation: Operation) -> None:
        assert authorize(None, operation)

    def test_anonymous_is_denied(self) -> None:
        decision = authorize(None, Operation.CreateCourse)

        assert not decision
        assert decision.reason == "Authentication required"


class TestRoles(object):
    @pytest.mark.parametrize(
        "operation",
        [Operation.SetAdminState, Operation.ListUsers, Operation.CreateBook, Operation.DeleteUser],
    )
    def test_super_only(self, operation: Operation) -> None:
        """Operations reserved to the super role."""
        for role in (UserRole.Normal, UserRole.Admin):
            assert not authorize(Actor.of(make_user(role)), operation)
        assert authorize(Actor.of(make_user(UserRole.Super)), operation)

    def test_normal_cannot_create_course(self) -> None:
        assert not authorize(Actor.of(make_user(UserRole.Normal)), Operation.CreateCourse)
        assert authorize(Actor.of(make_user(UserRole.Admin)), Operation.CreateCourse)

    def test_admin_cannot_enroll(self) -> None:
        admin = make_user(UserRole.Admin)

        assert not authorize(Actor.of(admin), Operation.Enroll, admin)


class TestOwnership(object):
    def test_instructor_may_update(self) -> None:
        bob = make_user(UserRole.Admin)

        assert authorize(Actor.of(bob), Operation.UpdateCourse, make_course(bob))

    def test_co_instructor_may_update(self) -> None:
        bob, carol = make_user(UserRole.Admin), make_user(UserRole.Admin)

        assert authorize(Actor.of(carol), Operation.DeleteCourse, make_course(bob, carol))

    def test_only_instructors_view_a_course(self) -> None:
        bob, mallory = make_user(UserRole.Admin), make_user(UserRole.Admin)
        course = make_course(bob)

        assert authorize(Actor.of(bob), Operation.ViewCourse, course)
        assert not authorize(Actor.of(mallory), Operation.ViewCourse, course)
        assert authorize(Actor.of(make_user(UserRole.Super)), Operation.ViewCourse, course)

    def test_other_admin_may_not(self) -> None:
        """An admin who does not instruct the course is denied."""
        bob, mallory = make_user(UserRole.Admin), make_user(UserRole.Admin)

        decision = authorize(Actor.of(mallory), Operation.UpdateCourse, make_course(bob))

        assert not decision
        assert decision.reason == "You are not an instructor of this course"

    def test_super_overrides_ownership(self) -> None:
        bob = make_user(UserRole.Admin)

        assert authorize(Actor.of(make_user(UserRole.Super)), Operation.UploadCourseMedia, make_course(bob))

    def test_self_rule(self) -> None:
        alice, eve = make_user(UserRole.Normal), make_user(UserRole.Normal)

        assert authorize(Actor.of(alice), Operation.UpdateProfile, alice)
        assert not authorize(Actor.of(eve), Operation.UpdateProfile, alice)

    def test_instructor_rule_needs_a_course(self) -> None:
        bob = make_user(UserRole.Admin)

        assert not authorize(Actor.of(bob), Operation.UpdateCourse, None)


class TestRequire(object):
    def test_require_raises(self) -> None:
        with pytest.raises(AuthorizationError) as exc:
            require(Actor.of(make_user(UserRole.Normal)), Operation.CreateBook)

        assert exc.value.http_status == 403

    def test_require_returns_decision(self) -> None:
        decision = require(Actor.of(make_user(UserRole.Super)), Operation.CreateBook)

        assert decision.allowed
