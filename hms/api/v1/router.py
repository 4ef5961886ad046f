"""
API v1 router configuration.

Aggregates all v1 API endpoints into a single router.
"""

from fastapi import APIRouter

from hms.api.v1.auth import router as auth_router
from hms.api.v1.tenants import router as tenants_router
from hms.api.v1.roles import router as roles_router
from hms.api.v1.members import router as members_router
from hms.api.v1.patients import router as patients_router
from hms.api.v1.beds import router as beds_router
from hms.api.v1.notifications import router as notifications_router
from hms.api.v1.storage import router as storage_router

# Main API v1 router
router = APIRouter(
    responses={
        400: {"description": "Bad Request"},
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
        502: {"description": "Upstream Service Error"},
    },
)

# Include sub-routers
router.include_router(
    auth_router,
    prefix="/auth",
    tags=["Authentication"],
)

router.include_router(
    tenants_router,
    prefix="/tenants",
    tags=["Tenants"],
)

router.include_router(
    roles_router,
    prefix="/roles",
    tags=["Roles"],
)

router.include_router(
    members_router,
    prefix="/members",
    tags=["Members"],
)

router.include_router(
    patients_router,
    prefix="/patients",
    tags=["Patients"],
)

router.include_router(
    beds_router,
    prefix="/beds",
    tags=["Beds"],
)

router.include_router(
    notifications_router,
    prefix="/notifications",
    tags=["Notifications"],
)

router.include_router(
    storage_router,
    prefix="/storage",
    tags=["Storage"],
)
