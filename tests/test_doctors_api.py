"""
Doctor directory, login, status toggle and unavailability ledger endpoints.
"""

import asyncio
from datetime import date, timedelta

from bson import ObjectId

from conftest import doctor_payload


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "running" in response.json()["message"]


class TestDirectory:

    def test_create_hides_password(self, client, create_doctor):
        doctor = create_doctor()

        assert doctor["id"]
        assert doctor["credentials"] == {"username": "drsharma"}
        assert doctor["practice_details"]["isOnline"] is True
        assert doctor["practice_details"]["unavailableDates"] == []

        stored = client.get(f"/api/doctors/{doctor['id']}").json()
        assert "passwordHash" not in stored["credentials"]
        assert "password" not in stored["credentials"]

    def test_create_requires_fields(self, client):
        payload = doctor_payload()
        del payload["personalDetails"]["qualification"]

        response = client.post("/api/doctors", json=payload)
        assert response.status_code == 400
        assert "qualification" in response.json()["message"]

    def test_duplicate_username(self, client, create_doctor):
        create_doctor()
        response = client.post("/api/doctors", json=doctor_payload(name="Dr. Other"))

        assert response.status_code == 400
        assert response.json() == {"message": "Username already exists"}

    def test_search_filters(self, client, create_doctor):
        create_doctor(username="a", name="Dr. Asha Sharma", city="Pune", specialty="Cardiologist")
        create_doctor(username="b", name="Dr. Ravi Kumar", city="Pune", specialty="Dermatologist")
        create_doctor(username="c", name="Dr. Meera Sharma", city="Delhi", specialty="Cardiologist")

        def names(**params):
            response = client.get("/api/doctors", params=params)
            assert response.status_code == 200
            return sorted(d["personalDetails"]["name"] for d in response.json())

        assert len(names()) == 3
        assert names(city="Pune") == ["Dr. Asha Sharma", "Dr. Ravi Kumar"]
        assert names(specialty="Cardiologist", city="Delhi") == ["Dr. Meera Sharma"]
        assert names(name="sharma") == ["Dr. Asha Sharma", "Dr. Meera Sharma"]
        assert names(name="RAVI") == ["Dr. Ravi Kumar"]
        assert names(name="Dr.(") == []

    def test_distinct_cities_and_specialties(self, client, create_doctor):
        create_doctor(username="a", city="Pune", specialty="Cardiologist")
        create_doctor(username="b", city="Delhi", specialty="Cardiologist")
        create_doctor(username="c", city="Pune", specialty="ENT")

        assert client.get("/api/doctors/cities").json() == ["Delhi", "Pune"]
        assert client.get("/api/doctors/specialties").json() == ["Cardiologist", "ENT"]

    def test_get_unknown_and_malformed(self, client):
        response = client.get(f"/api/doctors/{ObjectId()}")
        assert response.status_code == 404
        assert response.json() == {"message": "Doctor not found"}

        response = client.get("/api/doctors/not-an-id")
        assert response.status_code == 400
        assert response.json() == {"message": "Invalid doctor ID format"}

    def test_update_merges_sections(self, client, create_doctor, auth_headers):
        doctor = create_doctor()
        headers = auth_headers()
        client.post(f"/api/doctors/{doctor['id']}/unavailable-dates",
                    json={"startDate": "2030-01-01", "endDate": "2030-01-05"}, headers=headers)

        response = client.put(f"/api/doctors/{doctor['id']}",
                              json={"practice_details": {"city": "Mumbai"}})
        assert response.status_code == 200
        updated = response.json()
        assert updated["practice_details"]["city"] == "Mumbai"
        assert updated["practice_details"]["specialty"] == "Cardiologist"
        assert len(updated["practice_details"]["unavailableDates"]) == 1
        assert updated["personalDetails"]["name"] == "Dr. Asha Sharma"

    def test_update_password_and_username(self, client, create_doctor, auth_headers):
        doctor = create_doctor()
        create_doctor(username="taken", name="Dr. Other")

        response = client.put(f"/api/doctors/{doctor['id']}", json={"credentials": {"username": "taken"}})
        assert response.status_code == 400

        response = client.put(f"/api/doctors/{doctor['id']}",
                              json={"credentials": {"username": "asha", "password": "newpass"}})
        assert response.status_code == 200
        assert auth_headers(username="asha", password="newpass")

    def test_update_rejects_blank_required_fields(self, client, create_doctor):
        doctor = create_doctor()
        url = f"/api/doctors/{doctor['id']}"

        for body in ({"personalDetails": {"name": ""}},
                     {"practice_details": {"city": ""}},
                     {"credentials": {"username": ""}}):
            response = client.put(url, json=body)
            assert response.status_code == 400, body

        stored = client.get(url).json()
        assert stored["personalDetails"]["name"] == "Dr. Asha Sharma"
        assert stored["practice_details"]["city"] == "Pune"
        assert stored["credentials"] == {"username": "drsharma"}

    def test_unpadded_ledger_dates_rejected_on_edit(self, client, create_doctor):
        doctor = create_doctor()
        response = client.put(f"/api/doctors/{doctor['id']}", json={"practice_details": {
            "unavailableDates": [{"startDate": "2030-1-4", "endDate": "2030-01-06"}],
        }})
        assert response.status_code == 400

    def test_update_unknown(self, client):
        response = client.put(f"/api/doctors/{ObjectId()}", json={"practice_details": {"city": "X"}})
        assert response.status_code == 404

    def test_delete_keeps_appointments(self, client, create_doctor):
        doctor = create_doctor()
        booked = client.post("/api/appointments", json={
            "doctorId": doctor["id"], "doctorName": "Dr. Asha Sharma", "patientName": "Kiran",
            "patientPhone": "9123456780", "date": "2030-01-07", "shift": "morning",
        })
        assert booked.status_code == 201

        response = client.delete(f"/api/doctors/{doctor['id']}")
        assert response.status_code == 200
        assert client.get(f"/api/doctors/{doctor['id']}").status_code == 404

        response = client.get(f"/api/appointments/doctor/{doctor['id']}")
        assert [a["id"] for a in response.json()] == [booked.json()["id"]]

        assert client.delete(f"/api/doctors/{doctor['id']}").status_code == 404


class TestLogin:

    def test_login_returns_token(self, client, create_doctor):
        doctor = create_doctor()
        response = client.post("/api/doctors/login", json={"username": "drsharma", "password": "s3cret"})

        assert response.status_code == 200
        body = response.json()
        assert body["doctor"] == {"id": doctor["id"], "name": "Dr. Asha Sharma", "specialty": "Cardiologist"}
        assert body["tokenType"] == "bearer"
        assert body["accessToken"]

    def test_bad_credentials(self, client, create_doctor):
        create_doctor()
        for username, password in (("drsharma", "wrong"), ("nobody", "s3cret")):
            response = client.post("/api/doctors/login", json={"username": username, "password": password})
            assert response.status_code == 401
            assert response.json() == {"message": "Invalid credentials"}

    def test_password_not_stored_in_plain_text(self, create_doctor, mock_db):
        create_doctor()
        doc = asyncio.run(mock_db.doctors.find_one({"credentials.username": "drsharma"}))
        assert "password" not in doc["credentials"]
        assert doc["credentials"]["passwordHash"] != "s3cret"


class TestToggleStatus:

    def test_toggle_flips(self, client, create_doctor, auth_headers):
        doctor = create_doctor()
        headers = auth_headers()

        response = client.post(f"/api/doctors/{doctor['id']}/toggle-status", headers=headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Doctor is now offline", "isOnline": False}

        response = client.post(f"/api/doctors/{doctor['id']}/toggle-status", headers=headers)
        assert response.json()["isOnline"] is True

    def test_requires_token(self, client, create_doctor):
        doctor = create_doctor()

        response = client.post(f"/api/doctors/{doctor['id']}/toggle-status")
        assert response.status_code == 401

        response = client.post(f"/api/doctors/{doctor['id']}/toggle-status",
                               headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401

    def test_other_doctor_forbidden(self, client, create_doctor, auth_headers):
        create_doctor()
        other = create_doctor(username="other", name="Dr. Other")

        response = client.post(f"/api/doctors/{other['id']}/toggle-status", headers=auth_headers())
        assert response.status_code == 403


class TestUnavailableDates:

    def test_add_list_delete(self, client, create_doctor, auth_headers):
        doctor = create_doctor()
        headers = auth_headers()
        url = f"/api/doctors/{doctor['id']}/unavailable-dates"

        response = client.post(url, json={"startDate": "2030-03-01", "endDate": "2030-03-04"}, headers=headers)
        assert response.status_code == 201
        ledger = response.json()["unavailableDates"]
        assert len(ledger) == 1
        assert ledger[0]["reason"] == "Unavailable"
        assert ledger[0]["id"]

        client.post(url, json={"startDate": "2030-04-01", "endDate": "2030-04-01", "reason": "Conference"},
                    headers=headers)
        listed = client.get(url).json()
        assert [r["reason"] for r in listed] == ["Unavailable", "Conference"]

        response = client.delete(f"{url}/{ledger[0]['id']}", headers=headers)
        assert response.status_code == 200
        assert [r["reason"] for r in response.json()["unavailableDates"]] == ["Conference"]

        response = client.delete(f"{url}/{ledger[0]['id']}", headers=headers)
        assert response.status_code == 404

    def test_validation(self, client, create_doctor, auth_headers):
        doctor = create_doctor()
        headers = auth_headers()
        url = f"/api/doctors/{doctor['id']}/unavailable-dates"

        response = client.post(url, json={"startDate": "2030-03-01"}, headers=headers)
        assert response.status_code == 400
        assert response.json() == {"message": "Start and end dates are required"}

        response = client.post(url, json={"startDate": "01/03/2030", "endDate": "2030-03-02"}, headers=headers)
        assert response.status_code == 400

        response = client.post(url, json={"startDate": "2030-3-1", "endDate": "2030-3-4"}, headers=headers)
        assert response.status_code == 400
        assert client.get(url).json() == []

        response = client.delete(f"{url}/bad-id", headers=headers)
        assert response.status_code == 400

    def test_owner_only(self, client, create_doctor, auth_headers):
        create_doctor()
        other = create_doctor(username="other", name="Dr. Other")
        url = f"/api/doctors/{other['id']}/unavailable-dates"

        response = client.post(url, json={"startDate": "2030-03-01", "endDate": "2030-03-02"},
                               headers=auth_headers())
        assert response.status_code == 403
        assert client.get(url).json() == []

    def test_unknown_doctor(self, client):
        assert client.get(f"/api/doctors/{ObjectId()}/unavailable-dates").status_code == 404


class TestAvailabilityEndpoints:

    def test_available_dates_follow_ledger(self, client, create_doctor, auth_headers):
        doctor = create_doctor()
        today = date.today()
        url = f"/api/doctors/{doctor['id']}/available-dates"

        before = client.get(url).json()
        assert before[0]["date"] == today.isoformat()
        assert len(before) == 180

        client.post(f"/api/doctors/{doctor['id']}/unavailable-dates",
                    json={"startDate": today.isoformat(), "endDate": (today + timedelta(days=2)).isoformat()},
                    headers=auth_headers())

        after = client.get(url).json()
        assert after[0]["date"] == (today + timedelta(days=3)).isoformat()
        assert set(after[0]) == {"date", "weekdayLabel", "displayDate"}

        shifts = client.get(f"{url}/{today.isoformat()}/shifts").json()
        assert shifts == []
        shifts = client.get(f"{url}/{(today + timedelta(days=3)).isoformat()}/shifts").json()
        assert shifts == [{"value": "morning", "label": "Morning", "hours": "9 AM - 1 PM"}]

    def test_empty_schedule(self, client, create_doctor):
        doctor = create_doctor(schedule={})
        assert client.get(f"/api/doctors/{doctor['id']}/available-dates").json() == []

    def test_bad_date(self, client, create_doctor):
        doctor = create_doctor()
        response = client.get(f"/api/doctors/{doctor['id']}/available-dates/tomorrow/shifts")
        assert response.status_code == 400
