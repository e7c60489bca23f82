"""
Tests for Medications API
==========================

Tests medication CRUD operations and default dose times.
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient


@pytest.fixture
def medication_create_data(test_resident):
    """Sample data for creating a medication"""
    return {
        "resident_id": test_resident.id,
        "name": "Lisinopril",
        "strength": "10mg",
        "dose": "1 tablet",
        "frequency": 2,
        "food": "without",
        "prescriber": "Dr. Alvarez"
    }


class TestMedicationsApi:
    """Tests for /medications endpoints"""

    @pytest.mark.api
    def test_create_with_default_times(self, client: TestClient, medication_create_data):
        response = client.post("/api/v1/medications/", json=medication_create_data)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["id"].startswith("med_")
        assert data["times"] == ["09:00", "21:00"]
        assert data["food"] == "without"

    @pytest.mark.api
    def test_create_with_times(self, client: TestClient, medication_create_data):
        medication_create_data["times"] = ["07:30", "19:30"]
        response = client.post("/api/v1/medications/", json=medication_create_data)
        assert response.json()["times"] == ["07:30", "19:30"]

    @pytest.mark.api
    @pytest.mark.parametrize("times", [["7:30"], ["24:00"], ["noon"]])
    def test_create_rejects_bad_times(self, client: TestClient, medication_create_data, times):
        medication_create_data["times"] = times
        response = client.post("/api/v1/medications/", json=medication_create_data)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.api
    def test_create_rejects_unknown_food(self, client: TestClient, medication_create_data):
        medication_create_data["food"] = "sometimes"
        response = client.post("/api/v1/medications/", json=medication_create_data)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.api
    def test_create_for_unknown_resident(self, client: TestClient, medication_create_data):
        medication_create_data["resident_id"] = "res_missing"
        response = client.post("/api/v1/medications/", json=medication_create_data)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.api
    def test_list_by_resident(self, client: TestClient, test_medication, test_resident):
        response = client.get("/api/v1/medications/", params={"resident_id": test_resident.id})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["total"] == 1
        assert data["medications"][0]["name"] == "Metformin"

        response = client.get("/api/v1/medications/", params={"resident_id": "res_other"})
        assert response.json()["total"] == 0

    @pytest.mark.api
    def test_get_update_delete(self, client: TestClient, test_medication):
        url = f"/api/v1/medications/{test_medication.id}"

        assert client.get(url).json()["strength"] == "500mg"

        response = client.put(url, json={"times": ["08:00"], "food": "none"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["times"] == ["08:00"]
        assert response.json()["food"] == "none"

        assert client.delete(url).status_code == status.HTTP_204_NO_CONTENT
        assert client.get(url).status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.api
    def test_unknown_medication(self, client: TestClient):
        assert client.get("/api/v1/medications/med_missing").status_code == 404
        assert client.put("/api/v1/medications/med_missing", json={"name": "x"}).status_code == 404
        assert client.delete("/api/v1/medications/med_missing").status_code == 404

    @pytest.mark.api
    @pytest.mark.parametrize("frequency,times", [
        (3, ["09:00", "15:00", "21:00"]),
        (7, ["09:00"]),
    ])
    def test_default_times(self, client: TestClient, frequency, times):
        response = client.get(f"/api/v1/medications/default-times/{frequency}")
        assert response.json() == {"frequency": frequency, "times": times}
