"""Super-admin routes: admin approval, user management and the book catalog."""

from __future__ import annotations

import logging

import pydantic as p
from fastapi import APIRouter, Depends, status

from lectern.auth import AuthContext, Operation, require, require_super
from lectern.auth import state as auth_state
from lectern.catalog import Synchronizer
from lectern.core import di
from lectern.errors import ConflictError, NotFoundError
from lectern.lib import NotSet
from lectern.model import BookID, User, UserID, UserRole
from lectern.storage import book as book_storage
from lectern.storage import course as course_storage
from lectern.storage import user as user_storage

from ..dependencies import load_book, load_user
from ..view import AdminEnvelope, AdminListResponse, ApproveRequest, BookCreateRequest, BookEnvelope, BookResponse, \
    BookUpdateRequest, MessageResponse, ProfileUpdateRequest, UserEnvelope, UserListResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/superadmin", tags=["superadmin"])


@router.put("/approve/{user_id}", operation_id="approve_admin")
@di.inject
async def approve_admin(
    user_id: UserID,
    request: ApproveRequest,
    auth: AuthContext = Depends(require_super),
    synchronizer: Synchronizer = Depends(di.Provide["catalog.synchronizer"]),
) -> AdminEnvelope:
    """Activate or deactivate an admin, then refresh their snapshot in every course they instruct."""
    target = await load_user(user_id)
    require(auth.actor, Operation.SetAdminState, target)
    new_state = auth_state.transition(target, request.user_state)

    updated = await user_storage.update(user_id, state=new_state)
    if updated is None:
        raise NotFoundError("Admin not found")
    logger.info(
        "admin state changed",
        extra={"user_id": str(user_id), "state": new_state.value, "by": str(auth.user.user_id)},
    )

    report = await synchronizer.on_admin_change(updated)
    return AdminEnvelope(
        message=f"Admin state set to {new_state.value}",
        admin=UserResponse.of(updated),
        warnings=list(report.warnings),
    )


@router.get("/admins", operation_id="list_admins")
async def list_admins(auth: AuthContext = Depends(require_super)) -> AdminListResponse:
    require(auth.actor, Operation.ListUsers)
    admins = await user_storage.find(role=UserRole.Admin)
    return AdminListResponse(admins=[UserResponse.of(u) for u in admins])


@router.get("/users", operation_id="list_users")
async def list_users(auth: AuthContext = Depends(require_super)) -> UserListResponse:
    require(auth.actor, Operation.ListUsers)
    users = await user_storage.find(role=UserRole.Normal)
    return UserListResponse(users=[UserResponse.of(u) for u in users])


async def _update_profile(target: User, request: ProfileUpdateRequest, bcrypt_rounds: int) -> User:
    updated = await user_storage.update(
        target.user_id,
        name=request.user_name if request.user_name is not None else NotSet(),
        email=request.user_email if request.user_email is not None else NotSet(),
        password=p.Secret(request.user_password) if request.user_password is not None else NotSet(),
        bcrypt_rounds=bcrypt_rounds,
    )
    if updated is None:
        raise NotFoundError("User not found")
    return updated


@router.get("/admins/{user_id}", operation_id="get_admin")
async def get_admin(user_id: UserID, auth: AuthContext = Depends(require_super)) -> AdminEnvelope:
    target = await load_user(user_id, UserRole.Admin)
    require(auth.actor, Operation.ViewUser, target)
    return AdminEnvelope(admin=UserResponse.of(target))


@router.put("/admins/{user_id}", operation_id="update_admin")
@di.inject
async def update_admin(
    user_id: UserID,
    request: ProfileUpdateRequest,
    auth: AuthContext = Depends(require_super),
    bcrypt_rounds: int = Depends(di.Provide["config.web.market.auth.bcrypt_rounds"]),
    synchronizer: Synchronizer = Depends(di.Provide["catalog.synchronizer"]),
) -> AdminEnvelope:
    """Update an admin's profile; role and state are not changed here."""
    target = await load_user(user_id, UserRole.Admin)
    require(auth.actor, Operation.UpdateUser, target)
    updated = await _update_profile(target, request, bcrypt_rounds)
    report = await synchronizer.on_admin_change(updated)
    return AdminEnvelope(
        message="Admin updated successfully!",
        admin=UserResponse.of(updated),
        warnings=list(report.warnings),
    )


@router.delete("/admins/{user_id}", operation_id="delete_admin")
async def delete_admin(user_id: UserID, auth: AuthContext = Depends(require_super)) -> MessageResponse:
    """Delete an admin who no longer instructs any course."""
    target = await load_user(user_id, UserRole.Admin)
    require(auth.actor, Operation.DeleteUser, target)
    courses = await course_storage.find(instructor_id=user_id)
    if courses:
        raise ConflictError(
            f"Admin still instructs {len(courses)} course(s); reassign or delete them first",
        )
    if not await user_storage.delete(user_id):
        raise NotFoundError("Admin not found")
    return MessageResponse(message="Admin deleted successfully!")


@router.get("/users/{user_id}", operation_id="get_user")
async def get_user(user_id: UserID, auth: AuthContext = Depends(require_super)) -> UserEnvelope:
    target = await load_user(user_id, UserRole.Normal)
    require(auth.actor, Operation.ViewUser, target)
    return UserEnvelope(user=UserResponse.of(target))


@router.put("/users/{user_id}", operation_id="update_user")
@di.inject
async def update_user(
    user_id: UserID,
    request: ProfileUpdateRequest,
    auth: AuthContext = Depends(require_super),
    bcrypt_rounds: int = Depends(di.Provide["config.web.market.auth.bcrypt_rounds"]),
) -> UserEnvelope:
    target = await load_user(user_id, UserRole.Normal)
    require(auth.actor, Operation.UpdateUser, target)
    updated = await _update_profile(target, request, bcrypt_rounds)
    return UserEnvelope(message="User updated successfully!", user=UserResponse.of(updated))


@router.delete("/users/{user_id}", operation_id="delete_user")
async def delete_user(user_id: UserID, auth: AuthContext = Depends(require_super)) -> MessageResponse:
    target = await load_user(user_id, UserRole.Normal)
    require(auth.actor, Operation.DeleteUser, target)
    if not await user_storage.delete(user_id):
        raise NotFoundError("User not found")
    return MessageResponse(message="User deleted successfully!")


@router.post("/books", operation_id="create_book", status_code=status.HTTP_201_CREATED)
async def create_book(request: BookCreateRequest, auth: AuthContext = Depends(require_super)) -> BookEnvelope:
    require(auth.actor, Operation.CreateBook)
    book = await book_storage.create(
        name=request.book_name,
        description=request.book_description,
        price=request.book_price,
        cover=request.book_cover,
        link=str(request.book_link) if request.book_link is not None else None,
    )
    return BookEnvelope(message="Book added successfully!", book=BookResponse.of(book))


@router.put("/books/{book_id}", operation_id="update_book")
async def update_book(
    book_id: BookID,
    request: BookUpdateRequest,
    auth: AuthContext = Depends(require_super),
) -> BookEnvelope:
    await load_book(book_id)
    require(auth.actor, Operation.UpdateBook)

    sent = request.model_fields_set
    updated = await book_storage.update(
        book_id,
        name=request.book_name if "book_name" in sent and request.book_name is not None else NotSet(),
        description=request.book_description if "book_description" in sent else NotSet(),
        price=request.book_price if "book_price" in sent else NotSet(),
        cover=request.book_cover if "book_cover" in sent else NotSet(),
        link=(str(request.book_link) if request.book_link is not None else None) if "book_link" in sent else NotSet(),
    )
    if updated is None:
        raise NotFoundError("Book not found")
    return BookEnvelope(message="Book updated successfully!", book=BookResponse.of(updated))


@router.delete("/books/{book_id}", operation_id="delete_book")
@di.inject
async def delete_book(
    book_id: BookID,
    auth: AuthContext = Depends(require_super),
    synchronizer: Synchronizer = Depends(di.Provide["catalog.synchronizer"]),
) -> MessageResponse:
    await load_book(book_id)
    require(auth.actor, Operation.DeleteBook)
    if not await book_storage.delete(book_id):
        raise NotFoundError("Book not found")
    report = await synchronizer.on_book_delete(book_id)
    return MessageResponse(message="Book deleted successfully!", warnings=list(report.warnings))
