import pytest
from fastapi.testclient import TestClient
from facility.carehome import CareHome
from main import create_app
from conftest import FakeClock, at


def post(client, path, **body):
    return client.post(f"/api{path}", json=body)


@pytest.fixture
def client():
    home = CareHome(clock=FakeClock(at(7)))
    home.seed_default_layout()
    c = TestClient(create_app(home=home, api_key=None))
    assert post(c, "/staff", id="M1", name="Mary", role="manager", username="mary", password="secret").status_code == 200
    for sid, name, role in [("D1", "Dan", "doctor"), ("N1", "Nina", "nurse"), ("N2", "Noah", "nurse")]:
        assert post(c, "/staff", actorId="M1", id=sid, name=name, role=role, password="pw").status_code == 200
    return c


def shift(client, staff_id, start, end):
    return post(
        client,
        "/shifts",
        actorId="M1",
        staffId=staff_id,
        start=f"2025-03-03T{start}:00",
        end=f"2025-03-03T{end}:00",
    )


def test_staff_listing_hides_passwords(client):
    body = client.get("/api/staff").json()
    assert body["managerId"] == "M1"
    assert body["nurseIds"] == ["N1", "N2"]
    assert all("password" not in s for s in body["staff"])


def test_login(client):
    assert post(client, "/staff/login", username="mary", password="secret").json()["id"] == "M1"
    assert post(client, "/staff/login", id="N1", password="wrong").status_code == 403
    assert post(client, "/staff/login", password="secret").status_code == 422


def test_non_manager_cannot_add_staff(client):
    r = post(client, "/staff", actorId="N1", id="N3", name="Nell", role="nurse")
    assert r.status_code == 403


def test_shift_rules_over_http(client):
    r = shift(client, "N1", "08:00", "16:00")
    assert r.status_code == 200
    assert r.json()["start"] == "2025-03-03T08:00:00"

    r = shift(client, "N1", "14:00", "22:00")
    assert r.status_code == 422
    assert "one shift per nurse per day" in r.json()["detail"]

    assert len(client.get("/api/shifts", params={"staffId": "N1"}).json()) == 1


def test_compliance_over_http(client):
    shift(client, "N1", "08:00", "16:00")

    r = client.get("/api/compliance")
    assert r.status_code == 422
    rules = {v["rule"] for v in r.json()["detail"]["violations"]}
    assert rules == {"NURSE_COVERAGE_EVENING", "DOCTOR_COVERAGE"}

    shift(client, "N2", "14:00", "22:00")
    shift(client, "D1", "11:00", "12:00")
    r = client.get("/api/compliance")
    assert r.status_code == 200
    assert r.json()["passed"] is True


def test_resident_lifecycle_over_http(client):
    shift(client, "N1", "08:00", "16:00")
    shift(client, "D1", "11:00", "12:00")

    r = post(client, "/beds/W1-R1-B1/admit", actorId="M1", residentId="R1", name="Fay", gender="female", age=80)
    assert r.status_code == 200
    assert r.json()["gender"] == "FEMALE"

    r = post(client, "/beds/W1-R1-B2/admit", actorId="M1", name="Max", gender="MALE", age=82)
    assert r.status_code == 409
    r = post(client, "/beds/W1-R1-B1/admit", actorId="M1", name="Gia", gender="FEMALE", age=70)
    assert r.status_code == 409
    r = post(client, "/beds/W1-R2-B1/admit", actorId="M1", name="Old", gender="FEMALE", age=101)
    assert r.status_code == 400

    r = client.get("/api/beds/W1-R1-B1/resident", params={"actorId": "M1"})
    assert r.json()["id"] == "R1"

    r = post(
        client,
        "/beds/W1-R1-B1/prescriptions",
        doctorId="D1",
        doses=[{"medicine": "Aspirin", "dosage": "75mg", "frequency": "OD"}],
        at="2025-03-03T11:30:00",
    )
    assert r.status_code == 200
    pid = r.json()["id"]

    r = post(
        client,
        "/beds/W1-R1-B1/administrations",
        nurseId="N1",
        prescriptionId=pid,
        medicine="Aspirin",
        at="2025-03-03T07:30:00",
    )
    assert r.status_code == 403

    r = post(client, "/beds/W1-R1-B1/move", nurseId="N1", toBedId="W1-R2-B1", at="2025-03-03T09:00:00")
    assert r.status_code == 200
    r = post(
        client,
        "/beds/W1-R2-B1/administrations",
        nurseId="N1",
        prescriptionId=pid,
        medicine="Aspirin",
        at="2025-03-03T13:00:00",
    )
    assert r.status_code == 200
    assert len(client.get("/api/residents/R1/administrations").json()) == 1

    r = post(client, "/beds/W1-R2-B1/discharge", actorId="N1", at="2025-03-03T15:00:00")
    assert r.status_code == 200
    assert r.json()["resident_id"] == "R1"
    assert len(client.get("/api/archives", params={"residentId": "R1"}).json()) == 1
    assert client.get("/api/residents/R1/prescriptions").json() == []

    actions = [entry["action"] for entry in client.get("/api/logs").json()]
    assert actions[-1] == "DISCHARGE Fay from W1-R2-B1 (archived)"


def test_api_key_guard():
    c = TestClient(create_app(home=CareHome(), api_key="k"))

    assert c.get("/api/logs").status_code == 401
    assert c.get("/api/logs", headers={"x-api-key": "bad"}).status_code == 401
    assert c.get("/api/logs", headers={"x-api-key": "k"}).status_code == 200
    assert c.get("/api/health/check").status_code == 200


def test_timezone_aware_times_rejected(client):
    r = post(client, "/shifts", actorId="M1", staffId="D1", start="2025-03-03T11:00:00Z", end="2025-03-03T12:00:00Z")
    assert r.status_code == 422

    shift(client, "N1", "08:00", "16:00")
    post(client, "/beds/W1-R2-B1/admit", actorId="M1", residentId="R1", name="Ann", gender="FEMALE", age=80)
    r = post(client, "/beds/W1-R2-B1/discharge", actorId="N1", at="2025-03-03T09:00:00Z")
    assert r.status_code == 422
    r = client.get("/api/beds/W1-R2-B1/resident", params={"actorId": "N1", "at": "2025-03-03T09:00:00+01:00"})
    assert r.status_code == 422
    assert client.get("/api/beds/W1-R2-B1/resident", params={"actorId": "M1"}).json()["id"] == "R1"
