"""Route aggregation for the marketplace API."""

from fastapi import APIRouter

from . import admin, auth, catalog, superadmin, user

router = APIRouter()
router.include_router(auth.router)
router.include_router(catalog.router)
router.include_router(admin.router)
router.include_router(superadmin.router)
router.include_router(user.router)
