from __future__ import annotations

import asyncio
import datetime
import typing as t

import bcrypt
import pydantic as p

from lectern.core import di
from lectern.errors import ConflictError
from lectern.lib import NotSet
from lectern.model import BookID, CourseID, CourseSnapshot, User, UserID, UserRole, UserState

from .record import Item, RecordStore, UniqueConstraintError

TABLE = "users"
DuplicateEmail = "Email already exists. Please use a different email address."


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def hash_password(password: p.Secret[str], rounds: int = 10) -> str:
    """bcrypt is CPU-bound, so hashing runs off the event loop."""
    hashed = await asyncio.to_thread(
        bcrypt.hashpw,
        password.get_secret_value().encode("utf-8"),
        bcrypt.gensalt(rounds=rounds),
    )
    return hashed.decode("utf-8")


def _load(item: Item | None) -> User | None:
    return User.model_validate(item) if item is not None else None


@t.overload
async def get(user_id: UserID, *, store: RecordStore = ...) -> User | None: ...


@t.overload
async def get(user_id: None = ..., *, email: str, store: RecordStore = ...) -> User | None: ...


async def get(
    user_id: UserID | None = None,
    *,
    email: str | None = None,
    store: RecordStore = di.Provide["storage.records"],
) -> User | None:
    """Get a user by ID or email.

    Exactly one of user_id or email must be provided.
    """
    if user_id is None and email is None:
        raise ValueError("Either user_id or email must be provided")
    if user_id is not None and email is not None:
        raise ValueError("Only one of user_id or email should be provided")

    if user_id is not None:
        return _load(await store.get(TABLE, user_id))

    assert email is not None
    items = await store.query(TABLE, "user_email", normalize_email(email))
    return _load(items[0]) if items else None


async def find(
    *,
    role: UserRole | None = None,
    enrolled_course: CourseID | None = None,
    enrolled_book: BookID | None = None,
    store: RecordStore = di.Provide["storage.records"],
) -> tuple[User, ...]:
    """Find users matching criteria.

    Enrollment lookups go through secondary indexes; a role-only lookup scans.
    """
    if enrolled_course is not None:
        items = await store.query(TABLE, "user_courses", enrolled_course)
    elif enrolled_book is not None:
        items = await store.query(TABLE, "user_books", enrolled_book)
    else:
        items = await store.scan(TABLE)
    users = (User.model_validate(item) for item in items)
    return tuple(u for u in users if role is None or u.user_role is role)


async def create(
    *,
    name: str,
    email: str,
    password: p.Secret[str],
    role: UserRole,
    state: UserState = UserState.Active,
    bcrypt_rounds: int = 10,
    store: RecordStore = di.Provide["storage.records"],
) -> User:
    """Create a new user.

    Password is hashed internally using bcrypt.

    Raises:
        ConflictError: if the email is already registered, whether found by
            lookup or rejected by the store's unique index
    """
    email = normalize_email(email)
    if await get(email=email, store=store) is not None:
        raise ConflictError(DuplicateEmail)

    now = datetime.datetime.now(datetime.UTC)
    user = User(
        user_id=UserID(),
        user_name=name,
        user_email=email,
        user_password=await hash_password(password, bcrypt_rounds),
        user_role=role,
        user_state=state,
        create_time=now,
        update_time=now,
    )
    try:
        await store.put(TABLE, user.model_dump(mode="json"))
    except UniqueConstraintError as e:
        raise ConflictError(DuplicateEmail) from e
    return user


async def update(
    user_id: UserID,
    *,
    name: str | NotSet = NotSet(),
    email: str | NotSet = NotSet(),
    password: p.Secret[str] | NotSet = NotSet(),
    state: UserState | NotSet = NotSet(),
    books: t.Sequence[BookID] | NotSet = NotSet(),
    courses: t.Sequence[CourseID] | NotSet = NotSet(),
    uploaded_courses: t.Sequence[CourseSnapshot] | NotSet = NotSet(),
    bcrypt_rounds: int = 10,
    store: RecordStore = di.Provide["storage.records"],
) -> User | None:
    """Update a user; only supplied fields change.

    There is no way to change `user_role` here. Returns None if the user does
    not exist.

    Raises:
        ConflictError: if `email` belongs to another user
    """
    values: dict[str, t.Any] = {}
    if not isinstance(name, NotSet):
        values["user_name"] = name
    if not isinstance(email, NotSet):
        email = normalize_email(email)
        holder = await get(email=email, store=store)
        if holder is not None and holder.user_id != user_id:
            raise ConflictError(DuplicateEmail)
        values["user_email"] = email
    if not isinstance(password, NotSet):
        values["user_password"] = await hash_password(password, bcrypt_rounds)
    if not isinstance(state, NotSet):
        values["user_state"] = state.value
    if not isinstance(books, NotSet):
        values["user_books"] = [str(b) for b in books]
    if not isinstance(courses, NotSet):
        values["user_courses"] = [str(c) for c in courses]
    if not isinstance(uploaded_courses, NotSet):
        values["user_uploaded_courses"] = [s.model_dump(mode="json") for s in uploaded_courses]
    values["update_time"] = datetime.datetime.now(datetime.UTC).isoformat()

    try:
        item = await store.update_fields(TABLE, user_id, values)
    except UniqueConstraintError as e:
        raise ConflictError(DuplicateEmail) from e
    return _load(item)


async def delete(user_id: UserID, *, store: RecordStore = di.Provide["storage.records"]) -> bool:
    return await store.delete(TABLE, user_id)


def verify_password(user: User, password: str) -> bool:
    if user.user_password is None:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), user.user_password.encode("utf-8"))
