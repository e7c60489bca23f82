"""
Tests for Residents API
=======================

Tests resident CRUD operations and storage failure handling.
"""

import pytest
from unittest.mock import AsyncMock, patch
from fastapi import status
from fastapi.testclient import TestClient

from database import StorageError
from models import Medication, DoseEvent, DoseStatus
from services.resident_service import resident_service


class TestResidentsApi:
    """Tests for /residents endpoints"""

    @pytest.mark.api
    def test_create_and_get(self, client: TestClient, sample_resident_data):
        response = client.post("/api/v1/residents/", json=sample_resident_data)

        assert response.status_code == status.HTTP_201_CREATED
        created = response.json()
        assert created["id"].startswith("res_")
        assert created["allergies"] == ["Penicillin"]

        response = client.get(f"/api/v1/residents/{created['id']}")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["last_name"] == "Hill"

    @pytest.mark.api
    def test_create_validates_age(self, client: TestClient, sample_resident_data):
        sample_resident_data["age"] = -3
        response = client.post("/api/v1/residents/", json=sample_resident_data)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.api
    def test_list(self, client: TestClient, test_resident):
        response = client.get("/api/v1/residents/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 1
        assert data["residents"][0]["id"] == test_resident.id

    @pytest.mark.api
    def test_get_unknown(self, client: TestClient):
        response = client.get("/api/v1/residents/res_missing")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "Resident res_missing not found"

    @pytest.mark.api
    def test_partial_update(self, client: TestClient, test_resident):
        response = client.put(
            f"/api/v1/residents/{test_resident.id}",
            json={"physician": "Dr. Okafor"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["physician"] == "Dr. Okafor"
        assert data["first_name"] == "Margaret"

    @pytest.mark.api
    def test_update_unknown(self, client: TestClient):
        response = client.put("/api/v1/residents/res_missing", json={"age": 70})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.api
    def test_delete_cascades(self, client: TestClient, test_resident, test_medication,
                             make_dose_event, db_session, fixed_now):
        make_dose_event(test_medication, DoseStatus.TAKEN, fixed_now)

        response = client.delete(f"/api/v1/residents/{test_resident.id}")

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert db_session.query(Medication).count() == 0
        assert db_session.query(DoseEvent).count() == 0
        assert client.get(f"/api/v1/residents/{test_resident.id}").status_code == 404

    @pytest.mark.api
    def test_delete_unknown(self, client: TestClient):
        assert client.delete("/api/v1/residents/res_missing").status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.api
    def test_storage_error_is_503(self, client: TestClient, sample_resident_data):
        with patch.object(
            resident_service, "create_resident",
            AsyncMock(side_effect=StorageError("residents"))
        ):
            response = client.post("/api/v1/residents/", json=sample_resident_data)

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.json()["message"] == "Could not save residents. Try again."
