"""View models for the marketplace API."""

__all__ = [
    # Auth views
    "AdminRegisterResponse",
    "LoginRequest",
    "LoginResponse",
    "LoginUser",
    "RegisterRequest",
    "RegisterResponse",
    # User views
    "AdminEnvelope",
    "AdminListResponse",
    "ApproveRequest",
    "EnrollmentRequest",
    "EnrollmentResponse",
    "MessageResponse",
    "ProfileUpdateRequest",
    "UserEnvelope",
    "UserListResponse",
    "UserResponse",
    # Course views
    "CourseCreateRequest",
    "CourseEnvelope",
    "CourseListResponse",
    "CourseResponse",
    "CourseUpdateRequest",
    "MediaUploadResponse",
    # Book views
    "BookCreateRequest",
    "BookEnvelope",
    "BookListResponse",
    "BookResponse",
    "BookUpdateRequest",
]

from .auth import AdminRegisterResponse, LoginRequest, LoginResponse, LoginUser, RegisterRequest, RegisterResponse
from .book import BookCreateRequest, BookEnvelope, BookListResponse, BookResponse, BookUpdateRequest
from .course import CourseCreateRequest, CourseEnvelope, CourseListResponse, CourseResponse, CourseUpdateRequest, \
    MediaUploadResponse
from .user import AdminEnvelope, AdminListResponse, ApproveRequest, EnrollmentRequest, EnrollmentResponse, \
    MessageResponse, ProfileUpdateRequest, UserEnvelope, UserListResponse, UserResponse
