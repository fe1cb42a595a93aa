"""
Pytest configuration: the API runs against an in-memory MongoDB.
"""

import os

# Before any app module reads settings
os.environ["JWT_SECRET"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from doctor_directory.database import get_db
from doctor_directory.main import app


EVERY_MORNING = {
    day: {"morning": True, "morningHours": "9 AM - 1 PM", "evening": False, "eveningHours": ""}
    for day in ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
}


def doctor_payload(username="drsharma", name="Dr. Asha Sharma", city="Pune",
                   specialty="Cardiologist", schedule=None, password="s3cret"):
    return {
        "personalDetails": {
            "name": name,
            "phone": "9876543210",
            "address": "12 MG Road",
            "qualification": "MBBS, MD",
            "designation": "Senior Consultant",
        },
        "practice_details": {
            "specialty": specialty,
            "image_path": "/images/doctor.png",
            "city": city,
            "google_map": {"qlink": "https://maps.example.com/q"},
            "schedule": schedule if schedule is not None else EVERY_MORNING,
        },
        "credentials": {"username": username, "password": password},
    }


@pytest.fixture
def mock_db():
    return AsyncMongoMockClient()["doctor_directory_test"]


@pytest.fixture
def client(mock_db):
    """Test client with the database dependency overridden (lifespan not run)."""
    app.dependency_overrides[get_db] = lambda: mock_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def create_doctor(client):
    def _create(**kwargs):
        response = client.post("/api/doctors", json=doctor_payload(**kwargs))
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def auth_headers(client):
    """Bearer headers for a doctor, via the real login endpoint."""
    def _login(username="drsharma", password="s3cret"):
        response = client.post("/api/doctors/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['accessToken']}"}
    return _login
