"""Shared fixtures: a throwaway SQLite database, local blob storage and the
service container wired around them."""

import asyncio
from datetime import date

import pytest
from fastapi.testclient import TestClient

from custody_service.config.settings import Settings
from custody_service.core.services import ServiceContainer
from custody_service.infrastructure.database import DatabaseClient
from custody_service.infrastructure.storage import LocalStorage
from custody_service.main import create_app
from custody_service.models import (
    AssociatedParty,
    EvidenceRegistration,
    IncidentCreateRequest,
    OfficerSnapshot,
)

ADMIN_BADGE = "ADMIN001"
ADMIN_PASSWORD = "admin-pass-1"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'custody.db'}",
        environment="test",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
    )


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(base_path=str(tmp_path / "uploads"))


@pytest.fixture
async def db_client(settings):
    client = DatabaseClient(settings.database_url)
    await client.initialize()
    yield client
    await client.close()


@pytest.fixture
async def db(db_client):
    async with db_client.get_session() as session:
        yield session


@pytest.fixture
def services(settings, storage) -> ServiceContainer:
    return ServiceContainer(settings, storage)


@pytest.fixture
def make_services(settings, storage):
    """Build a container with some settings overridden"""

    def build(**overrides) -> ServiceContainer:
        return ServiceContainer(settings.model_copy(update=overrides), storage)

    return build


@pytest.fixture
def officer() -> OfficerSnapshot:
    return OfficerSnapshot(name="Inspector R. Sharma", badge_number="MH-1042")


def incident_request(**overrides) -> IncidentCreateRequest:
    fields = {
        "registration_station": "Central",
        "fir_number": "12/2025",
        "registration_year": 2025,
        "fir_filing_date": date(2025, 3, 2),
        "evidence_seizure_date": date(2025, 3, 3),
        "applicable_sections": "IPC 379, 411",
    }
    fields.update(overrides)
    return IncidentCreateRequest(**fields)


def evidence_registration(incident_id: str, **overrides) -> EvidenceRegistration:
    fields = {
        "incident_id": incident_id,
        "item_category": "ELECTRONICS",
        "associated_party": AssociatedParty.SUSPECT,
        "item_description": "Phone",
        "quantity": 1,
    }
    fields.update(overrides)
    return EvidenceRegistration(**fields)


@pytest.fixture
def new_incident(services, officer, db):
    async def create(**overrides):
        return await services.incidents.create(incident_request(**overrides), officer, db)

    return create


@pytest.fixture
def new_evidence(services, db):
    async def create(incident_id: str, **overrides):
        return await services.evidence.register(evidence_registration(incident_id, **overrides), db)

    return create


async def _seed_admin(settings: Settings) -> None:
    client = DatabaseClient(settings.database_url)
    await client.initialize()
    try:
        directory = ServiceContainer(settings, storage=None).staff
        async with client.get_session() as session:
            await directory.ensure_admin(session, password=ADMIN_PASSWORD, badge_number=ADMIN_BADGE)
    finally:
        await client.close()


@pytest.fixture
def client(settings, storage):
    """Test client with the app lifespan running and one ADMIN seeded"""
    asyncio.run(_seed_admin(settings))
    app = create_app(settings, storage=storage)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def login(client):
    """Log in and return bearer headers; the cookie jar is left empty"""

    def do_login(badge_number: str = ADMIN_BADGE, password: str = ADMIN_PASSWORD) -> dict:
        response = client.post(
            "/api/v1/staff/login", json={"badge_number": badge_number, "password": password}
        )
        assert response.status_code == 200, response.text
        token = response.cookies.get("accessToken")
        client.cookies.clear()
        return {"Authorization": f"Bearer {token}"}

    return do_login
