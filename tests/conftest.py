"""Pytest fixtures for Lectern tests.

The container is booted once per session in the test environment. Every test
gets a fresh in-memory record store and a temporary object store, installed
as overrides on the container, so API requests and direct repository calls
see the same data.

Usage:
    def test_get_profile(client: TestClient, user_factory, auth_headers):
        alice = user_factory(email="alice@example.com")
        response = client.get("/user/profile", headers=auth_headers(alice))
        assert response.status_code == 200
"""

from __future__ import annotations

import asyncio
import os
import typing as t
from pathlib import Path

import pydantic as p
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import lectern
from lectern.core import LecternContainer
from lectern.auth import JWTManager
from lectern.model import Book, Course, DeploymentEnvironment, User, UserRole, UserState
from lectern.storage import book as book_storage
from lectern.storage import course as course_storage
from lectern.storage import user as user_storage
from lectern.storage.memory import MemoryRecordStore
from lectern.storage.object import LocalObjectStore

TEST_JWT_SECRET = "test-jwt-secret-for-integration-tests"
TEST_PASSWORD = "password123"
TEST_BCRYPT_ROUNDS = 4


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(scope="session")
def container() -> t.Generator[LecternContainer]:
    """Boot the DI container for the test session."""
    ct = LecternContainer()
    root = Path(os.path.dirname(lectern.__file__)).parent

    LecternContainer.boot(
        ct,
        debug=True,
        env=DeploymentEnvironment.Test,
        config_root=p.FileUrl(f"file://{root}/config"),
        override=(),
    )
    # the test environment has no secrets in its environment variables
    ct.secrets.override({"auth": {"jwt": p.Secret(TEST_JWT_SECRET)}})

    yield ct

    ct.shutdown_resources()


@pytest.fixture
def store(container: LecternContainer) -> t.Generator[MemoryRecordStore]:
    """A fresh record store, installed as the container's record store for this test."""
    records = MemoryRecordStore()
    container.storage().records.override(records)

    yield records

    container.storage().records.reset_override()


@pytest.fixture
def object_store(container: LecternContainer, tmp_path: Path) -> t.Generator[LocalObjectStore]:
    objects = LocalObjectStore(tmp_path / "uploads")
    container.storage().object_store.override(objects)

    yield objects

    container.storage().object_store.reset_override()


@pytest.fixture
def app(container: LecternContainer, store: MemoryRecordStore, object_store: LocalObjectStore) -> FastAPI:
    """Create the FastAPI application against this test's stores."""
    from lectern.core.config.web import MarketWebSettings
    from lectern.web.market.main import _create_app  # pyright: ignore[reportPrivateUsage]

    return _create_app(
        config=MarketWebSettings(**container.config.web.market()),
        env=DeploymentEnvironment.Test,
        records=store,
        object_store=object_store,
    )


@pytest.fixture
def client(app: FastAPI) -> t.Generator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def jwt_manager(container: LecternContainer) -> JWTManager:
    return t.cast(JWTManager, container.auth().jwt_manager())


@pytest.fixture
def user_factory(store: MemoryRecordStore) -> t.Callable[..., User]:
    """Factory fixture for creating users directly in the record store.

    Usage:
        def test_something(user_factory):
            admin = user_factory(email="bob@example.com", role=UserRole.Admin)
    """

    def create_user(
        email: str = "test@example.com",
        name: str = "Test User",
        password: str = TEST_PASSWORD,
        role: UserRole = UserRole.Normal,
        state: UserState = UserState.Active,
    ) -> User:
        return asyncio.run(
            user_storage.create(
                name=name,
                email=email,
                password=p.Secret(password),
                role=role,
                state=state,
                bcrypt_rounds=TEST_BCRYPT_ROUNDS,
                store=store,
            )
        )

    return create_user


@pytest.fixture
def course_factory(store: MemoryRecordStore) -> t.Callable[..., Course]:
    """Factory fixture for creating courses, with instructor snapshots published to each instructor."""
    from lectern.catalog import ReferenceResolver, Synchronizer

    def create_course(
        instructors: t.Sequence[User],
        name: str = "Intro to Testing",
        price: float = 19.99,
        published: bool = True,
    ) -> Course:
        async def create() -> Course:
            course = await course_storage.create(
                name=name, price=price, instructors=instructors, published=published, store=store
            )
            await Synchronizer(store, ReferenceResolver(store)).on_course_write(course)
            return course

        return asyncio.run(create())

    return create_course


@pytest.fixture
def book_factory(store: MemoryRecordStore) -> t.Callable[..., Book]:
    def create_book(name: str = "The Testing Book", price: int | None = 25) -> Book:
        return asyncio.run(book_storage.create(name=name, price=price, store=store))

    return create_book


@pytest.fixture
def auth_headers(jwt_manager: JWTManager) -> t.Callable[[User], dict[str, str]]:
    """Build an Authorization header carrying a fresh token for `user`."""

    def headers(user: User) -> dict[str, str]:
        token = jwt_manager.create_access_token(user.user_id, user.user_role)
        return {"Authorization": f"Bearer {token}"}

    return headers


@pytest.fixture
def get_user(store: MemoryRecordStore) -> t.Callable[[User], User | None]:
    """Re-read a user from the store."""

    def get(user: User) -> User | None:
        return asyncio.run(user_storage.get(user.user_id, store=store))

    return get


@pytest.fixture
def get_course(store: MemoryRecordStore) -> t.Callable[[Course], Course | None]:
    def get(course: Course) -> Course | None:
        return asyncio.run(course_storage.get(course.course_id, store=store))

    return get
