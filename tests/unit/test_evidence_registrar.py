"""Unit tests for evidence registration, tracking codes and lookup"""

import pytest
from sqlalchemy import func, select

from conftest import evidence_registration
from custody_service.core.errors import BadRequestError, ConflictError, NotFoundError
from custody_service.core.services import ServiceContainer
from custody_service.infrastructure.database import EvidenceItemDB
from custody_service.infrastructure.storage import LocalStorage
from custody_service.models import AssociatedParty, PhotoUpload

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
MISSING_ID = "6f1c1c7e-8f7a-4d9e-9b7b-6a9f2c4a1d00"


def png_photo(services) -> PhotoUpload:
    return PhotoUpload(content=services.tracking.render("photo"), content_type="image/png", filename="phone.png")


async def count_items(db) -> int:
    return (await db.execute(select(func.count()).select_from(EvidenceItemDB))).scalar_one()


class QrUploadFails(LocalStorage):
    """Local storage that refuses tracking-code uploads"""

    async def upload(self, file_stream, key, content_type):
        if key.startswith("evidence_qrcodes/"):
            raise RuntimeError("storage offline")
        return await super().upload(file_stream, key, content_type)


@pytest.mark.unit
class TestRegister:

    async def test_registered_item_has_tracking_code(self, services, db, new_incident, storage):
        incident = await new_incident()

        item = await services.evidence.register(evidence_registration(incident.incident_id), db)

        assert item.incident_id == incident.incident_id
        assert item.item_quantity.amount == 1
        assert item.item_quantity.measurement_unit == "piece"
        assert item.tracking_payload == f"EVIDENCE:{item.evidence_id}"
        assert item.tracking_qr_code == f"/api/v1/evidence/{item.evidence_id}/qrcode"
        assert item.photograph_url is None
        assert await storage.file_exists(f"evidence_qrcodes/{item.evidence_id}.png")

    async def test_photograph_is_stored(self, services, db, new_incident, storage):
        incident = await new_incident()
        photo = png_photo(services)

        item = await services.evidence.register(evidence_registration(incident.incident_id), db, photo=photo)

        assert item.photograph_url == f"/api/v1/evidence/{item.evidence_id}/photograph"
        content, content_type = await services.evidence.open_photograph(item.evidence_id, db)
        assert content == photo.content
        assert content_type == "image/png"

    async def test_unknown_incident_is_rejected(self, services, db):
        with pytest.raises(NotFoundError):
            await services.evidence.register(evidence_registration(MISSING_ID), db)

        assert await count_items(db) == 0

    async def test_closed_incident_is_locked(self, services, db, new_incident):
        incident = await new_incident()
        await services.incidents.close(incident.incident_id, db)
        await db.commit()

        with pytest.raises(ConflictError):
            await services.evidence.register(evidence_registration(incident.incident_id), db)

    async def test_closed_incident_accepts_evidence_when_unlocked(self, make_services, db, new_incident):
        services = make_services(lock_closed_incidents=False)
        incident = await new_incident()
        await services.incidents.close(incident.incident_id, db)
        await db.commit()

        item = await services.evidence.register(evidence_registration(incident.incident_id), db)

        assert item.tracking_payload is not None

    async def test_non_image_photograph_is_rejected(self, services, db, new_incident):
        incident = await new_incident()
        photo = PhotoUpload(content=b"%PDF-1.7", content_type="application/pdf", filename="report.pdf")

        with pytest.raises(BadRequestError, match="Only image files"):
            await services.evidence.register(evidence_registration(incident.incident_id), db, photo=photo)

    async def test_oversized_photograph_is_rejected(self, make_services, db, new_incident):
        services = make_services(max_photo_size_mb=1)
        incident = await new_incident()
        photo = PhotoUpload(content=b"\0" * (1024 * 1024 + 1), content_type="image/jpeg")

        with pytest.raises(BadRequestError, match="too large"):
            await services.evidence.register(evidence_registration(incident.incident_id), db, photo=photo)

    async def test_failed_upload_leaves_nothing_behind(self, settings, tmp_path, db, new_incident):
        storage = QrUploadFails(base_path=str(tmp_path / "flaky"))
        services = ServiceContainer(settings, storage)
        incident = await new_incident()

        with pytest.raises(RuntimeError):
            await services.evidence.register(
                evidence_registration(incident.incident_id), db, photo=png_photo(services)
            )

        assert await count_items(db) == 0
        assert list((tmp_path / "flaky" / "evidence_photos").iterdir()) == []


@pytest.mark.unit
class TestTrackingCodes:

    async def test_resolving_the_payload_returns_the_same_item(self, services, db, new_incident, new_evidence):
        incident = await new_incident()
        item = await new_evidence(incident.incident_id)

        resolved = await services.evidence.resolve_tracking_code(item.tracking_payload, db)

        assert resolved == item

    async def test_tracking_image_is_a_png(self, services, db, new_incident, new_evidence):
        incident = await new_incident()
        item = await new_evidence(incident.incident_id)

        content = await services.evidence.open_tracking_code(item.evidence_id, db)

        assert content.startswith(PNG_SIGNATURE)

    async def test_foreign_payload_is_rejected(self, services, db):
        with pytest.raises(BadRequestError, match="Not an evidence tracking code"):
            await services.evidence.resolve_tracking_code("https://example.com", db)

    async def test_unknown_item(self, services, db):
        with pytest.raises(NotFoundError):
            await services.evidence.resolve_tracking_code(f"EVIDENCE:{MISSING_ID}", db)


@pytest.mark.unit
class TestLookup:

    async def test_get_unknown_item(self, services, db):
        with pytest.raises(NotFoundError):
            await services.evidence.get(MISSING_ID, db)

    async def test_photograph_missing(self, services, db, new_incident, new_evidence):
        incident = await new_incident()
        item = await new_evidence(incident.incident_id)

        with pytest.raises(NotFoundError, match="No photograph"):
            await services.evidence.open_photograph(item.evidence_id, db)

    async def test_get_by_incident_only_returns_that_incident(self, services, db, new_incident, new_evidence):
        first = await new_incident(fir_number="1/2025")
        second = await new_incident(fir_number="2/2025")
        mine = await new_evidence(first.incident_id)
        await new_evidence(second.incident_id)

        items = await services.evidence.get_by_incident(first.incident_id, db)

        assert [i.evidence_id for i in items] == [mine.evidence_id]

    async def test_search(self, services, db, new_incident, new_evidence):
        incident = await new_incident()
        phone = await new_evidence(incident.incident_id)
        knife = await new_evidence(
            incident.incident_id,
            item_category="WEAPON",
            item_description="Kitchen knife with wooden handle",
            associated_party=AssociatedParty.VICTIM,
        )

        by_category = await services.evidence.search(db, category="electro")
        by_party = await services.evidence.search(db, associated_party=AssociatedParty.VICTIM)
        by_keyword = await services.evidence.search(db, keyword="WOODEN")
        nothing = await services.evidence.search(db, keyword="narcotics")

        assert [i.evidence_id for i in by_category] == [phone.evidence_id]
        assert [i.evidence_id for i in by_party] == [knife.evidence_id]
        assert [i.evidence_id for i in by_keyword] == [knife.evidence_id]
        assert nothing == []


@pytest.mark.unit
def test_negative_quantity_is_rejected():
    with pytest.raises(ValueError):
        evidence_registration(MISSING_ID, quantity=-1)


@pytest.mark.unit
def test_unknown_party_is_rejected():
    with pytest.raises(ValueError):
        evidence_registration(MISSING_ID, associated_party="WITNESS")

