"""Unit tests for case closure"""

import asyncio
from datetime import date

import pytest
from sqlalchemy import func, select

from custody_service.core.errors import ConflictError, NotFoundError
from custody_service.infrastructure.database import CaseClosureDB
from custody_service.models import (
    CaseClosure,
    ClosureCreateRequest,
    DispositionMethod,
    IncidentStatus,
    TransferCreateRequest,
    TransferPurpose,
)

MISSING_ID = "6f1c1c7e-8f7a-4d9e-9b7b-6a9f2c4a1d00"


def closure_request(incident_id: str, **overrides) -> ClosureCreateRequest:
    fields = {
        "incident_id": incident_id,
        "disposition_method": DispositionMethod.COURT_RETENTION,
        "closure_date": date.today(),
    }
    fields.update(overrides)
    return ClosureCreateRequest(**fields)


async def count_closures(db) -> int:
    return (await db.execute(select(func.count()).select_from(CaseClosureDB))).scalar_one()


@pytest.mark.unit
async def test_full_case_lifecycle(services, db, new_incident, new_evidence, officer):
    incident = await new_incident()
    assert incident.current_status == IncidentStatus.ACTIVE

    item = await new_evidence(incident.incident_id)
    assert item.tracking_payload is not None

    await services.transfers.record(
        TransferCreateRequest(
            evidence_id=item.evidence_id,
            destination_location="Forensic Lab",
            transfer_purpose=TransferPurpose.FORENSIC_LAB,
        ),
        officer,
        db,
    )
    assert len(await services.transfers.history(item.evidence_id, db)) == 1

    closure = await services.closures.close(closure_request(incident.incident_id), db)

    assert (await services.incidents.get(incident.incident_id, db)).current_status == IncidentStatus.CLOSED
    assert await services.closures.get_by_incident(incident.incident_id, db) == closure


@pytest.mark.unit
class TestClose:

    async def test_records_disposition(self, services, db, new_incident):
        incident = await new_incident()

        closure = await services.closures.close(
            closure_request(
                incident.incident_id,
                disposition_method=DispositionMethod.RETURNED_TO_OWNER,
                court_order_number="CO-2025-118",
                closure_remarks="Returned against receipt",
            ),
            db,
        )

        assert closure.disposition_method == DispositionMethod.RETURNED_TO_OWNER
        assert closure.court_order_number == "CO-2025-118"

    async def test_unknown_incident(self, services, db):
        with pytest.raises(NotFoundError):
            await services.closures.close(closure_request(MISSING_ID), db)

        assert await count_closures(db) == 0

    def test_unknown_disposition_is_rejected(self):
        with pytest.raises(ValueError):
            closure_request(MISSING_ID, disposition_method="BURIED")

    async def test_reclosing_is_rejected(self, services, db, new_incident):
        incident = await new_incident()
        first = await services.closures.close(closure_request(incident.incident_id), db)

        with pytest.raises(ConflictError):
            await services.closures.close(
                closure_request(incident.incident_id, disposition_method=DispositionMethod.DESTROYED), db
            )

        assert await count_closures(db) == 1
        assert await services.closures.get_by_incident(incident.incident_id, db) == first

    async def test_reclosing_when_allowed_records_a_new_current_closure(self, make_services, db, new_incident):
        services = make_services(allow_reclosure=True)
        incident = await new_incident()
        await services.closures.close(closure_request(incident.incident_id), db)

        second = await services.closures.close(
            closure_request(incident.incident_id, disposition_method=DispositionMethod.DESTROYED), db
        )

        assert await count_closures(db) == 2
        assert await services.closures.get_by_incident(incident.incident_id, db) == second

    async def test_concurrent_closures_record_only_one(self, services, db_client, new_incident):
        incident = await new_incident()

        async def close_in_own_session(method):
            async with db_client.get_session() as session:
                return await services.closures.close(
                    closure_request(incident.incident_id, disposition_method=method), session
                )

        results = await asyncio.gather(
            close_in_own_session(DispositionMethod.COURT_RETENTION),
            close_in_own_session(DispositionMethod.DESTROYED),
            return_exceptions=True,
        )

        closed = [r for r in results if isinstance(r, CaseClosure)]
        rejected = [r for r in results if isinstance(r, ConflictError)]
        assert len(closed) == 1
        assert len(rejected) == 1
        async with db_client.get_session() as session:
            assert await count_closures(session) == 1

    async def test_failed_commit_keeps_incident_active(self, services, db, new_incident, monkeypatch):
        incident = await new_incident()

        async def broken_commit():
            raise RuntimeError("database went away")

        monkeypatch.setattr(db, "commit", broken_commit)

        with pytest.raises(RuntimeError):
            await services.closures.close(closure_request(incident.incident_id), db)

        assert (await services.incidents.get(incident.incident_id, db)).current_status == IncidentStatus.ACTIVE
        assert await count_closures(db) == 0


@pytest.mark.unit
class TestGetByIncident:

    async def test_open_incident_has_no_closure(self, services, db, new_incident):
        incident = await new_incident()

        assert await services.closures.get_by_incident(incident.incident_id, db) is None

    async def test_unknown_incident(self, services, db):
        with pytest.raises(NotFoundError):
            await services.closures.get_by_incident(MISSING_ID, db)
