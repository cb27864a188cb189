"""
Request dependencies: services, current staff member, role checks.
"""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.core.errors import ForbiddenError
from custody_service.core.services import ServiceContainer
from custody_service.infrastructure.database.client import get_db
from custody_service.models.common import OfficerSnapshot
from custody_service.models.staff import Designation, StaffMember


def get_services(request: Request) -> ServiceContainer:
    """Dependency for the service container built at startup"""
    return request.app.state.services


async def get_current_staff(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    services: ServiceContainer = Depends(get_services)
) -> StaffMember:
    """Resolve the caller from a bearer token or the session cookie"""
    token = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[len("bearer "):].strip()
    if not token:
        token = request.cookies.get(services.settings.auth_cookie_name)

    return await services.staff.resolve_token(token, db)


def require_role(*allowed: Designation):
    """Dependency factory restricting a route to the given designations"""

    async def check(staff: StaffMember = Depends(get_current_staff)) -> StaffMember:
        if staff.designation not in allowed:
            raise ForbiddenError(f"Access restricted to: {', '.join(d.value for d in allowed)}")
        return staff

    return check


require_admin = require_role(Designation.ADMIN)


def snapshot_of(staff: StaffMember) -> OfficerSnapshot:
    """Freeze the caller's identity for attribution on a record"""
    return OfficerSnapshot(name=staff.full_name, badge_number=staff.badge_number)
