"""
Staff API Routes

Login/logout, profile and account creation.
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.api.dependencies import get_current_staff, get_services, require_admin
from custody_service.core.services import ServiceContainer
from custody_service.infrastructure.database.client import get_db
from custody_service.models import ApiResponse, LoginRequest, StaffMember, StaffRegisterRequest

router = APIRouter(prefix="/api/v1/staff", tags=["staff"])
logger = logging.getLogger(__name__)


def _cookie_options(services: ServiceContainer) -> dict:
    production = services.settings.is_production
    return {
        "httponly": True,
        "secure": production,
        "samesite": "none" if production else "lax",
    }


@router.post(
    "/login",
    response_model=ApiResponse,
    summary="Staff Login",
    description="""
Authenticate with badge number and password.

**Workflow**:
1. Badge number is normalised to uppercase and looked up
2. Password is verified against the stored bcrypt hash
3. A signed access token is issued and set as an HTTP-only cookie
4. The staff profile (without password hash) is returned

Unknown badges and wrong passwords get the same 401 response.

**Authorization**: None (public endpoint)
    """,
    responses={
        200: {"description": "Authenticated; session cookie set"},
        401: {"description": "Invalid credentials"}
    }
)
async def login(
    credentials: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    token, staff = await services.staff.authenticate(credentials.badge_number, credentials.password, db)

    response.set_cookie(
        key=services.settings.auth_cookie_name,
        value=token,
        max_age=services.settings.jwt_expires_minutes * 60,
        **_cookie_options(services)
    )

    return ApiResponse.ok(data={"staff_member": staff}, message="Authentication successful")


@router.post("/logout", response_model=ApiResponse, summary="Staff Logout")
async def logout(
    response: Response,
    staff: StaffMember = Depends(get_current_staff),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    """Clear the session cookie"""
    response.delete_cookie(key=services.settings.auth_cookie_name, **_cookie_options(services))
    logger.info(f"Staff member {staff.badge_number} logged out")
    return ApiResponse.ok(message="Logged out successfully")


@router.get("/profile", response_model=ApiResponse, summary="Current Staff Profile")
async def profile(staff: StaffMember = Depends(get_current_staff)) -> ApiResponse:
    return ApiResponse.ok(data={"staff_member": staff})


@router.post(
    "/register",
    response_model=ApiResponse,
    status_code=201,
    summary="Register Staff Member",
    description="""
Create a staff account. Badge numbers are unique regardless of case.

**Authorization**: ADMIN only
    """,
    responses={
        201: {"description": "Staff member created"},
        400: {"description": "Validation failed"},
        403: {"description": "Caller is not an ADMIN"},
        409: {"description": "Badge number already in use"}
    }
)
async def register_staff(
    request: StaffRegisterRequest,
    admin: StaffMember = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> ApiResponse:
    staff = await services.staff.register(request, db)
    logger.info(f"Admin {admin.badge_number} registered staff member {staff.badge_number}")
    return ApiResponse.ok(data={"staff_member": staff}, message="Staff member registered successfully")
