"""
Staff Directory

Staff accounts, login and token resolution.
"""

import logging
from typing import Optional, Tuple
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from custody_service.config.settings import Settings
from custody_service.core.errors import ConflictError, NotFoundError, UnauthorizedError
from custody_service.core.security import TokenService, hash_password, verify_password
from custody_service.infrastructure.database.models import StaffMemberDB
from custody_service.models.staff import Designation, StaffMember, StaffRegisterRequest

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials provided"


class StaffDirectory:
    """Business logic for staff accounts"""

    def __init__(self, settings: Settings, tokens: TokenService):
        self.settings = settings
        self.tokens = tokens

    async def _find_by_badge(self, badge_number: str, db: AsyncSession) -> Optional[StaffMemberDB]:
        stmt = select(StaffMemberDB).where(StaffMemberDB.badge_number == badge_number.strip().upper())
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    async def register(self, request: StaffRegisterRequest, db: AsyncSession) -> StaffMember:
        """
        Create a staff account

        Badge numbers are stored uppercased, so uniqueness is case-insensitive.

        Raises:
            ConflictError: If the badge number is already taken
        """
        badge_number = request.badge_number.upper()

        if await self._find_by_badge(badge_number, db):
            raise ConflictError("A staff member with this badge number already exists")

        staff_db = StaffMemberDB(
            staff_id=str(uuid4()),
            full_name=request.full_name,
            badge_number=badge_number,
            designation=request.designation.value,
            station_assignment=request.station_assignment,
            password_hash=hash_password(request.password, rounds=self.settings.bcrypt_rounds),
        )
        db.add(staff_db)

        try:
            await db.commit()
        except IntegrityError:
            # Lost a race against another registration of the same badge
            await db.rollback()
            raise ConflictError("A staff member with this badge number already exists")

        logger.info(f"Registered staff member {badge_number} ({request.designation.value})")
        return StaffMember.model_validate(staff_db)

    async def authenticate(self, badge_number: str, password: str, db: AsyncSession) -> Tuple[str, StaffMember]:
        """
        Verify credentials and issue an access token

        Returns:
            Tuple of (access_token, staff_member)

        Raises:
            UnauthorizedError: If the badge is unknown or the password is wrong
        """
        staff_db = await self._find_by_badge(badge_number, db)

        if not staff_db or not verify_password(password, staff_db.password_hash):
            logger.warning(f"Failed login attempt for badge {badge_number.strip().upper()}")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        token = self.tokens.issue(staff_db.staff_id, staff_db.designation)
        logger.info(f"Staff member {staff_db.badge_number} logged in")
        return token, StaffMember.model_validate(staff_db)

    async def get(self, staff_id: str, db: AsyncSession) -> StaffMember:
        staff_db = await db.get(StaffMemberDB, staff_id)
        if not staff_db:
            raise NotFoundError("Staff member not found")
        return StaffMember.model_validate(staff_db)

    async def resolve_token(self, token: Optional[str], db: AsyncSession) -> StaffMember:
        """
        Turn a session credential into the staff member it belongs to

        Raises:
            UnauthorizedError: If the token is missing, invalid, expired, or its
                owner no longer exists
        """
        if not token:
            raise UnauthorizedError("Please login to access this resource")

        claims = self.tokens.decode(token)
        staff_db = await db.get(StaffMemberDB, str(claims["sub"]))
        if not staff_db:
            raise UnauthorizedError("User account no longer exists")

        return StaffMember.model_validate(staff_db)

    async def ensure_admin(
        self,
        db: AsyncSession,
        password: str,
        badge_number: str = "ADMIN001",
        full_name: str = "System Administrator",
        station_assignment: str = "Headquarters",
    ) -> Optional[StaffMember]:
        """
        Create the first ADMIN account

        Returns:
            The new admin, or None if an ADMIN already exists
        """
        stmt = select(func.count()).select_from(StaffMemberDB).where(
            StaffMemberDB.designation == Designation.ADMIN.value
        )
        if (await db.execute(stmt)).scalar_one() > 0:
            logger.info("Admin user already exists")
            return None

        return await self.register(
            StaffRegisterRequest(
                full_name=full_name,
                badge_number=badge_number,
                station_assignment=station_assignment,
                password=password,
                designation=Designation.ADMIN,
            ),
            db,
        )
