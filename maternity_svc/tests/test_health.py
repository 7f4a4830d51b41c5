"""
Tests for the probe endpoints and the assembled application.
"""
from fastapi.testclient import TestClient

from maternity_svc.core import dependencies as deps
from maternity_svc.core.exceptions import PersistenceError
from maternity_svc.main import create_app
from maternity_svc.repositories import InMemoryKeyValueStore


class UnreadableNotificationsStore(InMemoryKeyValueStore):
    def get(self, key):
        if key == "doctorNotifications":
            raise PersistenceError(operation=f"read of '{key}'")
        return super().get(key)


# =============================================================================
# ROOT
# =============================================================================

def test_service_info(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["service"] == "Maternity Health Service"
    assert data["version"] == "1.0.0"
    assert data["endpoints"]["ready"] == "/ready"


# =============================================================================
# LIVENESS
# =============================================================================

def test_liveness(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == "1.0.0"
    assert data["timestamp"].endswith("Z")


# =============================================================================
# READINESS
# =============================================================================

def test_readiness_with_working_store(client):
    response = client.get("/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert [c["key"] for c in data["checks"]] == ["registeredUsers", "doctorNotifications"]
    assert all(c["status"] == "ok" for c in data["checks"])


def test_readiness_reports_unreadable_collection(test_app):
    test_app.dependency_overrides[deps.get_store] = lambda: UnreadableNotificationsStore()
    response = TestClient(test_app).get("/ready")

    assert response.status_code == 503
    data = response.json()
    assert data["status"] == "not_ready"
    by_name = {c["name"]: c for c in data["checks"]}
    assert by_name["patient_registry"]["status"] == "ok"
    assert by_name["notification_log"]["status"] == "unavailable"
    assert by_name["notification_log"]["error"] == "PersistenceError"


# =============================================================================
# APPLICATION WIRING
# =============================================================================

def test_full_app_sets_request_id(temp_store):
    """Test the assembled app tags responses with a request id."""
    app = create_app()
    app.dependency_overrides[deps.get_store] = lambda: temp_store
    client = TestClient(app)

    response = client.get("/api/v1/patients")
    assert response.status_code == 200
    assert len(response.headers["X-Request-ID"]) == 8

    response = client.get("/api/v1/patients", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_full_app_renders_domain_errors(temp_store):
    app = create_app()
    app.dependency_overrides[deps.get_store] = lambda: temp_store

    response = TestClient(app).get("/api/v1/patients/unknown/dashboard")

    assert response.status_code == 404
    assert response.json() == {
        "detail": "Patient 'unknown' not found",
        "context": {"patient_id": "unknown"},
    }
