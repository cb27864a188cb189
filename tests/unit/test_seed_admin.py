"""Unit tests for the admin seeding script"""

import runpy
from pathlib import Path

import pytest
from sqlalchemy import select

from custody_service.infrastructure.database import StaffMemberDB

SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "seed_admin.py"


@pytest.fixture
def seed_script():
    return runpy.run_path(str(SCRIPT), run_name="seed_admin")


@pytest.mark.unit
class TestSeedAdmin:

    def test_missing_password_exits_with_usage_error(self, seed_script, monkeypatch):
        monkeypatch.delenv("SEED_ADMIN_PASSWORD", raising=False)

        assert seed_script["main"]([]) == 2

    async def test_seed_creates_admin_once(self, seed_script, settings, db):
        args = seed_script["parse_args"](["--password", "admin-pass-1", "--badge", "hq-01"])

        assert await seed_script["seed"](args, settings) is True
        assert await seed_script["seed"](args, settings) is False

        admins = (await db.execute(select(StaffMemberDB))).scalars().all()
        assert [a.badge_number for a in admins] == ["HQ-01"]
