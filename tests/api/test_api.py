"""HTTP-level tests: envelope, authentication, role checks and error mapping"""

from datetime import date

import pytest
from pydantic import TypeAdapter

from custody_service.core.tracking import TrackingCodes

MISSING_ID = "6f1c1c7e-8f7a-4d9e-9b7b-6a9f2c4a1d00"

INCIDENT = {
    "registration_station": "Central",
    "fir_number": "12/2025",
    "registration_year": 2025,
    "fir_filing_date": "2025-03-02",
    "evidence_seizure_date": "2025-03-03",
    "applicable_sections": "IPC 379, 411",
}

EVIDENCE = {
    "item_category": "ELECTRONICS",
    "associated_party": "SUSPECT",
    "item_description": "Phone",
    "quantity": "1",
}


@pytest.fixture
def admin(login):
    return login()


@pytest.fixture
def officer(client, admin, login):
    response = client.post(
        "/api/v1/staff/register",
        json={
            "full_name": "Constable P. Nair",
            "badge_number": "mh-3003",
            "station_assignment": "Central",
            "password": "officer-pass",
        },
        headers=admin,
    )
    assert response.status_code == 201, response.text
    return login("MH-3003", "officer-pass")


def create_incident(client, headers, **overrides) -> dict:
    response = client.post("/api/v1/incidents", json={**INCIDENT, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]["incident"]


def register_evidence(client, headers, incident_id: str, **overrides) -> dict:
    response = client.post(
        "/api/v1/evidence", data={**EVIDENCE, "incident_id": incident_id, **overrides}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]["evidence_item"]


@pytest.mark.api
class TestEnvelope:

    def test_success_shape(self, client, admin):
        body = client.get("/api/v1/incidents", headers=admin).json()

        assert set(body) == {"success", "message", "data", "meta", "timestamp"}
        assert body["success"] is True
        assert body["data"] == {"incidents": []}
        assert body["meta"] == {"count": 0}

    def test_error_shape(self, client, admin):
        response = client.get(f"/api/v1/incidents/{MISSING_ID}", headers=admin)

        body = response.json()
        assert response.status_code == 404
        assert body["success"] is False
        assert body["message"] == "Incident not found"
        assert body["data"] is None


@pytest.mark.api
class TestAuthentication:

    def test_requests_without_credentials_are_rejected(self, client):
        response = client.get("/api/v1/incidents")

        assert response.status_code == 401
        assert response.json()["message"] == "Please login to access this resource"

    def test_login_sets_http_only_cookie(self, client):
        response = client.post("/api/v1/staff/login", json={"badge_number": "admin001", "password": "admin-pass-1"})

        assert response.status_code == 200
        assert response.json()["data"]["staff_member"]["designation"] == "ADMIN"
        set_cookie = response.headers["set-cookie"]
        assert "accessToken=" in set_cookie
        assert "httponly" in set_cookie.lower()
        assert "password_hash" not in response.text

    def test_cookie_session_then_logout(self, client):
        client.post("/api/v1/staff/login", json={"badge_number": "ADMIN001", "password": "admin-pass-1"})

        assert client.get("/api/v1/staff/profile").status_code == 200

        assert client.post("/api/v1/staff/logout").status_code == 200
        assert client.get("/api/v1/staff/profile").status_code == 401

    def test_bad_credentials(self, client):
        response = client.post("/api/v1/staff/login", json={"badge_number": "ADMIN001", "password": "wrong-pass"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials provided"

    def test_garbage_bearer_token(self, client):
        response = client.get("/api/v1/staff/profile", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401


@pytest.mark.api
class TestRoles:

    def test_officer_cannot_register_staff(self, client, officer):
        response = client.post(
            "/api/v1/staff/register",
            json={"full_name": "X", "badge_number": "X1", "station_assignment": "Y", "password": "secret-1"},
            headers=officer,
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Access restricted to: ADMIN"

    def test_officer_cannot_close_cases(self, client, officer):
        incident = create_incident(client, officer)

        response = client.post(
            "/api/v1/closures",
            json={
                "incident_id": incident["incident_id"],
                "disposition_method": "DESTROYED",
                "closure_date": date.today().isoformat(),
            },
            headers=officer,
        )

        assert response.status_code == 403

    def test_officer_cannot_read_reports(self, client, officer):
        assert client.get("/api/v1/reports/overview", headers=officer).status_code == 403

    def test_duplicate_badge_is_a_conflict(self, client, admin, officer):
        response = client.post(
            "/api/v1/staff/register",
            json={
                "full_name": "Another Nair",
                "badge_number": "Mh-3003",
                "station_assignment": "North",
                "password": "officer-pass",
            },
            headers=admin,
        )

        assert response.status_code == 409


@pytest.mark.api
class TestValidation:

    def test_unknown_status_filter(self, client, admin):
        response = client.get("/api/v1/incidents", params={"status": "OPEN"}, headers=admin)

        assert response.status_code == 400
        assert response.json()["data"]["errors"][0]["field"] == "status"

    def test_missing_incident_fields(self, client, admin):
        response = client.post("/api/v1/incidents", json={"registration_station": "Central"}, headers=admin)

        body = response.json()
        assert response.status_code == 400
        fields = {error["field"] for error in body["data"]["errors"]}
        assert {"fir_number", "registration_year", "applicable_sections"} <= fields

    def test_malformed_id(self, client, admin):
        response = client.get("/api/v1/evidence/not-an-id", headers=admin)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid ID format provided"

    def test_unknown_associated_party(self, client, admin):
        incident = create_incident(client, admin)

        response = client.post(
            "/api/v1/evidence",
            data={**EVIDENCE, "incident_id": incident["incident_id"], "associated_party": "WITNESS"},
            headers=admin,
        )

        assert response.status_code == 400
        assert response.json()["data"]["errors"][0]["field"] == "associated_party"

    def test_internal_model_errors_are_server_errors(self, client, admin, monkeypatch):
        async def corrupt_metrics(db):
            return TypeAdapter(int).validate_python("not-a-count")

        monkeypatch.setattr(client.app.state.services.incidents, "metrics", corrupt_metrics)

        response = client.get("/api/v1/incidents/metrics", headers=admin)

        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error"

    def test_evidence_for_unknown_incident(self, client, admin):
        response = client.post("/api/v1/evidence", data={**EVIDENCE, "incident_id": MISSING_ID}, headers=admin)

        assert response.status_code == 404


@pytest.mark.api
class TestCaseWorkflow:

    def test_incident_to_closure(self, client, admin, officer):
        incident = create_incident(client, officer)
        assert incident["current_status"] == "ACTIVE"
        assert incident["assigned_investigator"] == {"name": "Constable P. Nair", "badge_number": "MH-3003"}

        photo = TrackingCodes().render("photo")
        response = client.post(
            "/api/v1/evidence",
            data={**EVIDENCE, "incident_id": incident["incident_id"]},
            files={"photograph": ("phone.png", photo, "image/png")},
            headers=officer,
        )
        assert response.status_code == 201, response.text
        item = response.json()["data"]["evidence_item"]
        assert item["tracking_payload"] == f"EVIDENCE:{item['evidence_id']}"

        photograph = client.get(item["photograph_url"], headers=officer)
        assert photograph.status_code == 200
        assert photograph.content == photo
        qrcode = client.get(item["tracking_qr_code"], headers=officer)
        assert qrcode.headers["content-type"] == "image/png"

        scanned = client.get(f"/api/v1/evidence/tracking/{item['tracking_payload']}", headers=officer)
        assert scanned.json()["data"]["evidence_item"]["evidence_id"] == item["evidence_id"]

        response = client.post(
            "/api/v1/transfers",
            json={
                "evidence_id": item["evidence_id"],
                "destination_location": "Forensic Lab",
                "transfer_purpose": "FORENSIC_LAB",
            },
            headers=officer,
        )
        assert response.status_code == 201, response.text
        assert response.json()["data"]["transfer"]["releasing_officer"]["badge_number"] == "MH-3003"

        history = client.get(f"/api/v1/transfers/evidence/{item['evidence_id']}", headers=officer).json()
        assert history["meta"]["count"] == 1

        response = client.get(f"/api/v1/closures/incident/{incident['incident_id']}", headers=officer)
        assert response.status_code == 200
        assert response.json()["data"] == {"closure": None}
        assert response.json()["message"] == "No closure record found for this incident"

        response = client.post(
            "/api/v1/closures",
            json={
                "incident_id": incident["incident_id"],
                "disposition_method": "COURT_RETENTION",
                "closure_date": date.today().isoformat(),
            },
            headers=admin,
        )
        assert response.status_code == 201, response.text
        closure = response.json()["data"]["closure"]

        fetched = client.get(f"/api/v1/incidents/{incident['incident_id']}", headers=officer).json()
        assert fetched["data"]["incident"]["current_status"] == "CLOSED"

        lookup = client.get(f"/api/v1/closures/incident/{incident['incident_id']}", headers=officer).json()
        assert lookup["data"]["closure"]["closure_id"] == closure["closure_id"]

        again = client.post(
            "/api/v1/closures",
            json={
                "incident_id": incident["incident_id"],
                "disposition_method": "DESTROYED",
                "closure_date": date.today().isoformat(),
            },
            headers=admin,
        )
        assert again.status_code == 409

        late = client.post(
            "/api/v1/evidence", data={**EVIDENCE, "incident_id": incident["incident_id"]}, headers=officer
        )
        assert late.status_code == 409

    def test_search_and_metrics(self, client, admin):
        incident = create_incident(client, admin)
        register_evidence(client, admin, incident["incident_id"])

        found = client.get("/api/v1/incidents/search", params={"q": "Central"}, headers=admin).json()
        none = client.get("/api/v1/incidents/search", params={"q": "Nowhere"}, headers=admin)
        items = client.get("/api/v1/evidence/search", params={"category": "electro"}, headers=admin).json()
        metrics = client.get("/api/v1/incidents/metrics", headers=admin).json()["data"]["metrics"]

        assert [i["incident_id"] for i in found["data"]["incidents"]] == [incident["incident_id"]]
        assert none.status_code == 200
        assert none.json()["data"]["incidents"] == []
        assert items["meta"]["count"] == 1
        assert metrics == {"total_incidents": 1, "active_incidents": 1, "closed_incidents": 0}

    def test_pending_alerts_default_threshold(self, client, admin):
        create_incident(client, admin)

        body = client.get("/api/v1/incidents/alerts/pending", headers=admin).json()

        assert body["data"]["incidents"] == []
        assert body["meta"] == {"count": 0, "threshold_days": 90}

    def test_overview_report(self, client, admin):
        incident = create_incident(client, admin)
        register_evidence(client, admin, incident["incident_id"])

        report = client.get("/api/v1/reports/overview", headers=admin).json()["data"]["report"]

        assert report["evidence_distribution"] == [{"item_category": "ELECTRONICS", "count": 1}]
        assert report["officer_workload"][0]["badge_number"] == "ADMIN001"
        assert report["metrics"]["total_incidents"] == 1
