"""
API tests for patients, health records, dashboard and notifications.
"""
import pytest


def register(client, name="Jane Doe", **extra):
    payload = {
        "name": name,
        "due_date": "2025-06-15T00:00:00Z",
        "current_week": 32,
        "emergency_contacts": [
            {"name": "John Doe", "relationship": "Partner", "phone": "555-0100"},
        ],
    }
    payload.update(extra)
    response = client.post("/api/v1/patients", json=payload)
    assert response.status_code == 201
    return response.json()


def submit(client, patient_id, record_type, fields):
    return client.post(
        f"/api/v1/patients/{patient_id}/records",
        json={"type": record_type, "fields": fields},
    )


# =============================================================================
# Patients
# =============================================================================

def test_register_patient(client):
    patient = register(client)
    assert patient["name"] == "Jane Doe"
    assert patient["due_date"] == "2025-06-15T00:00:00.000Z"
    assert patient["current_week"] == 32
    assert patient["record_count"] == 0
    assert patient["emergency_contacts"][0]["name"] == "John Doe"
    assert patient["emergency_contacts"][0]["id"]


def test_register_patient_requires_name(client):
    response = client.post("/api/v1/patients", json={"current_week": 10})
    assert response.status_code == 422


def test_register_patient_rejects_bad_week(client):
    response = client.post("/api/v1/patients", json={"name": "Jane", "current_week": 60})
    assert response.status_code == 422


def test_list_and_get_patients(client):
    first = register(client, name="Jane Doe")
    second = register(client, name="Ana Silva")

    response = client.get("/api/v1/patients")
    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [first["id"], second["id"]]

    response = client.get("/api/v1/patients", params={"limit": 1})
    assert len(response.json()) == 1

    response = client.get(f"/api/v1/patients/{second['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Ana Silva"


def test_get_unknown_patient(client):
    response = client.get("/api/v1/patients/missing")
    assert response.status_code == 404
    assert response.json()["detail"] == "Patient 'missing' not found"


# =============================================================================
# Records
# =============================================================================

def test_submit_high_blood_pressure(client):
    patient = register(client)
    response = submit(
        client, patient["id"], "blood_pressure",
        {"systolic": "150", "diastolic": "85", "heartRate": "78"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["record"]["type"] == "blood_pressure"
    assert body["record"]["patient_id"] == patient["id"]
    assert body["record"]["data"] == {
        "systolic": 150, "diastolic": 85, "heartRate": 78, "notes": "",
    }
    assert body["record"]["date"].endswith("Z")
    assert body["notification"]["severity"] == "urgent"
    assert body["notification"]["message"] == "High blood pressure reading: 150/85"
    assert body["notification"]["read"] is False


def test_submit_accepts_numeric_fields(client):
    patient = register(client)
    response = submit(client, patient["id"], "sugar_level", {"level": 95, "testType": "fasting"})

    assert response.status_code == 201
    assert response.json()["notification"]["message"] == "New sugar level reading: 95 mg/dL (fasting)"


def test_submit_invalid_field_returns_422(client):
    patient = register(client)
    response = submit(
        client, patient["id"], "blood_pressure",
        {"systolic": "abc", "diastolic": "80", "heartRate": "70"},
    )

    assert response.status_code == 422
    body = response.json()
    assert body["detail"] == "Field 'systolic' must be a whole number"
    assert body["context"]["field"] == "systolic"

    records = client.get(f"/api/v1/patients/{patient['id']}/records").json()
    assert records == []
    assert client.get("/api/v1/notifications").json() == []


@pytest.mark.parametrize("fields", [
    {"systolic": True, "diastolic": 80, "heartRate": 70},
    {"systolic": "1_50", "diastolic": 80, "heartRate": 70},
])
def test_submit_rejects_non_numeric_systolic(client, fields):
    patient = register(client)
    response = submit(client, patient["id"], "blood_pressure", fields)

    assert response.status_code == 422
    assert response.json()["context"] == {"field": "systolic", "reason": "must be a whole number"}
    assert client.get(f"/api/v1/patients/{patient['id']}/records").json() == []
    assert client.get("/api/v1/notifications").json() == []


def test_submit_unknown_type_returns_422(client):
    patient = register(client)
    response = submit(client, patient["id"], "temperature", {"value": "37"})
    assert response.status_code == 422


def test_submit_for_unknown_patient(client):
    response = submit(client, "missing", "sugar_level", {"level": "95"})
    assert response.status_code == 404


def test_list_records_in_submission_order(client):
    patient = register(client)
    submit(client, patient["id"], "sugar_level", {"level": "95"})
    submit(client, patient["id"], "baby_movement", {"count": "12", "duration": "60"})
    submit(client, patient["id"], "sugar_level", {"level": "110", "testType": "post_meal"})

    response = client.get(f"/api/v1/patients/{patient['id']}/records")
    assert response.status_code == 200
    assert [r["type"] for r in response.json()] == ["sugar_level", "baby_movement", "sugar_level"]

    response = client.get(
        f"/api/v1/patients/{patient['id']}/records", params={"type": "sugar_level"}
    )
    assert [r["data"]["level"] for r in response.json()] == [95, 110]

    assert client.get(f"/api/v1/patients/{patient['id']}").json()["record_count"] == 3


def test_latest_record(client):
    patient = register(client)
    submit(client, patient["id"], "blood_pressure",
           {"systolic": "120", "diastolic": "80", "heartRate": "70"})
    submit(client, patient["id"], "blood_pressure",
           {"systolic": "150", "diastolic": "85", "heartRate": "78"})

    response = client.get(
        f"/api/v1/patients/{patient['id']}/records/latest", params={"type": "blood_pressure"}
    )
    assert response.status_code == 200
    assert response.json()["data"]["systolic"] == 150


def test_latest_record_missing_returns_404(client):
    patient = register(client)
    response = client.get(
        f"/api/v1/patients/{patient['id']}/records/latest", params={"type": "weekly_update"}
    )
    assert response.status_code == 404
    assert response.json()["context"]["record_type"] == "weekly_update"


def test_latest_record_requires_type(client):
    patient = register(client)
    response = client.get(f"/api/v1/patients/{patient['id']}/records/latest")
    assert response.status_code == 422


# =============================================================================
# Dashboard
# =============================================================================

def test_dashboard(client):
    patient = register(client, current_week=20)
    submit(client, patient["id"], "blood_pressure",
           {"systolic": "118", "diastolic": "76", "heartRate": "70"})
    submit(client, patient["id"], "weekly_update",
           {"weight": "64.5", "mood": "8", "symptoms": ["nausea"]})

    response = client.get(f"/api/v1/patients/{patient['id']}/dashboard")
    assert response.status_code == 200
    body = response.json()
    assert body["current_week"] == 20
    assert body["progress_percent"] == 50
    assert body["weeks_remaining"] >= 0
    assert body["latest_blood_pressure"]["data"]["systolic"] == 118
    assert body["latest_sugar_level"] is None
    assert body["total_records"] == 2
    assert body["recent_records"][1]["data"]["symptoms"] == ["nausea"]
    assert len(body["emergency_contacts"]) == 1


def test_dashboard_unknown_patient(client):
    assert client.get("/api/v1/patients/missing/dashboard").status_code == 404


# =============================================================================
# Notifications
# =============================================================================

def test_notifications_newest_first_with_filters(client):
    jane = register(client, name="Jane Doe")
    ana = register(client, name="Ana Silva")
    submit(client, jane["id"], "blood_pressure",
           {"systolic": "150", "diastolic": "85", "heartRate": "78"})
    submit(client, jane["id"], "baby_movement", {"count": "12", "duration": "60"})
    submit(client, ana["id"], "weekly_update", {"weight": "70", "mood": "5"})

    feed = client.get("/api/v1/notifications").json()
    assert [n["message"] for n in feed] == [
        "New weekly update submitted",
        "Baby movement recorded: 12 movements in 60 minutes",
        "High blood pressure reading: 150/85",
    ]
    assert feed[0]["patient_name"] == "Ana Silva"

    urgent = client.get("/api/v1/notifications", params={"severity": "urgent"}).json()
    assert len(urgent) == 1

    mine = client.get("/api/v1/notifications", params={"patient_id": jane["id"]}).json()
    assert len(mine) == 2

    limited = client.get("/api/v1/notifications", params={"limit": 1}).json()
    assert len(limited) == 1


@pytest.mark.parametrize("params", [{"severity": "critical"}, {"limit": 0}])
def test_notifications_bad_query(client, params):
    response = client.get("/api/v1/notifications", params=params)
    assert response.status_code == 422


def test_notifications_with_malformed_entry(client, temp_store):
    temp_store.set("doctorNotifications", [{"id": "n1", "patientId": "p1"}])

    response = client.get("/api/v1/notifications")

    assert response.status_code == 400
    body = response.json()
    assert body["detail"].startswith("Malformed stored notification")
    assert body["context"] == {"notification_id": "n1"}
