"""
Tests for API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from fixanalytics.main import app
from fixanalytics.services import repository
from fixanalytics.services.repository import init_repository


@pytest.fixture
def sample_csv_content():
    """Standard tracker CSV content."""
    return """Transmitted Time,Latitude,Longitude,Altitude,Direction,Satellites
29/07/2025 06:06:00,17.7260000,78.2560000,540.0,45.0,10
29/07/2025 06:06:03,17.7261000,78.2561000,541.0,45.0,10
29/07/2025 06:06:06,17.7262000,78.2562000,542.0,50.0,9
29/07/2025 06:06:16,17.7263000,78.2563000,542.0,120.0,7
29/07/2025 06:06:19,17.7264000,78.2564000,543.0,120.0,12
"""


@pytest.fixture
def records():
    return [
        {"Transmitted Time": "29/07/2025 06:06:00", "Latitude": "17.726", "Longitude": "78.256", "Satellites": "10"},
        {"Transmitted Time": "29/07/2025 06:06:03", "Latitude": "17.7261", "Longitude": "78.2561", "Satellites": "10"},
        {"Transmitted Time": "bogus", "Latitude": "17.7262", "Longitude": "78.2562", "Satellites": "10"},
        {"Transmitted Time": "29/07/2025 06:06:13", "Latitude": "17.7262", "Longitude": "78.2562", "Satellites": "10"},
    ]


@pytest.fixture
def test_data_folder(sample_csv_content, tmp_path):
    """Create a test data folder with sample CSVs."""
    data_folder = tmp_path / "logs"
    data_folder.mkdir()

    (data_folder / "log_001.csv").write_text(sample_csv_content)
    (data_folder / "log_002.csv").write_text(sample_csv_content)

    return data_folder


@pytest.fixture
def client_with_data(test_data_folder):
    """Create test client with initialized repository."""
    init_repository(test_data_folder)

    client = TestClient(app)
    yield client


@pytest.fixture
def client():
    """Create test client without initialized repository."""
    repository._repository = None
    return TestClient(app)


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    def test_root_endpoint(self, client):
        """Root endpoint should return basic info."""
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Fix Analytics"
        assert data["status"] == "running"

    def test_health_endpoint(self, client):
        """Health endpoint should return status."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["log_count"] == 0


class TestAnalyzeEndpoint:
    """Tests for POST /analyze."""

    def test_analyze_records(self, client, records):
        response = client.post("/analyze", json={"records": records})

        assert response.status_code == 200
        data = response.json()
        assert data["sample_count"] == 3
        assert len(data["errors"]) == 1
        assert data["errors"][0]["row"] == 2
        assert data["errors"][0]["kind"] == "malformed_timestamp"
        assert data["samples"][2]["gap_class"] == "Gap"
        assert data["samples"][2]["gap_severity"] == "Medium"
        assert data["summary"]["temporal"]["gaps"] == 1
        assert data["summary"]["temporal"]["reliability"] == 50.0

    def test_analyze_with_config(self, client, records):
        response = client.post(
            "/analyze",
            json={"records": records, "config": {"expected_interval_s": 5.0, "gap_multiplier": 3.0}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["config"]["expected_interval_s"] == 5.0
        assert data["summary"]["temporal"]["gaps"] == 0

    def test_analyze_custom_fields(self, client):
        records = [
            {"time": "2025-07-29T06:00:00", "lat": "17.0", "lon": "78.0"},
            {"time": "2025-07-29T06:00:03", "lat": "17.0001", "lon": "78.0"},
        ]
        response = client.post(
            "/analyze",
            json={
                "records": records,
                "config": {
                    "timestamp_format": "%Y-%m-%dT%H:%M:%S",
                    "fields": {"timestamp": "time", "latitude": "lat", "longitude": "lon"},
                },
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["errors"] == []
        assert data["samples"][1]["distance_m"] > 11.0

    def test_analyze_empty(self, client):
        response = client.post("/analyze", json={"records": []})

        assert response.status_code == 200
        data = response.json()
        assert data["sample_count"] == 0
        assert data["diagnostics"][0]["kind"] == "empty_input"

    def test_invalid_gap_multiplier(self, client, records):
        response = client.post("/analyze", json={"records": records, "config": {"gap_multiplier": 0.5}})
        assert response.status_code == 422

    def test_invalid_severity_thresholds(self, client, records):
        response = client.post(
            "/analyze",
            json={"records": records, "config": {"severity_thresholds": [5.0, 3.5, 2.5]}},
        )
        assert response.status_code == 422


class TestFolderEndpoints:
    """Tests for folder management endpoints."""

    def test_get_folder_info_empty(self, client):
        """Should return empty info when no folder set."""
        response = client.get("/folder")

        assert response.status_code == 200
        data = response.json()
        assert data["path"] is None
        assert data["log_count"] == 0

    def test_set_folder(self, client, test_data_folder):
        """Should set folder and scan for CSVs."""
        response = client.post("/folder", json={"path": str(test_data_folder)})

        assert response.status_code == 200
        data = response.json()
        assert data["path"] == str(test_data_folder)
        assert data["log_count"] == 2

    def test_set_nonexistent_folder(self, client, tmp_path):
        """Should return error for nonexistent folder."""
        bad_path = tmp_path / "nonexistent"
        response = client.post("/folder", json={"path": str(bad_path)})

        assert response.status_code == 400

    def test_set_file_as_folder(self, client, test_data_folder):
        response = client.post("/folder", json={"path": str(test_data_folder / "log_001.csv")})
        assert response.status_code == 400

    def test_rescan_without_folder(self, client):
        response = client.post("/folder/rescan")
        assert response.status_code == 400

    def test_rescan_folder(self, client_with_data, test_data_folder):
        """Should rescan folder for new files."""
        (test_data_folder / "log_003.csv").write_text("""Transmitted Time,Latitude,Longitude
29/07/2025 07:00:00,17.7260,78.2560
29/07/2025 07:00:03,17.7261,78.2561
""")

        response = client_with_data.post("/folder/rescan")

        assert response.status_code == 200
        data = response.json()
        assert data["log_count"] == 3


class TestLogEndpoints:
    """Tests for log endpoints."""

    def test_list_logs(self, client_with_data):
        """Should list all available logs."""
        response = client_with_data.get("/logs")

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 2

        log = data[0]
        assert "id" in log
        assert "name" in log
        assert log["sample_count"] == 5
        assert log["start_time"] == "2025-07-29T06:06:00"

    def test_get_log(self, client_with_data):
        """Should get summaries for a specific log."""
        log_id = client_with_data.get("/logs").json()[0]["id"]

        response = client_with_data.get(f"/logs/{log_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == log_id
        assert data["sample_count"] == 5
        assert data["summary"]["temporal"]["gaps"] == 1
        assert data["summary"]["signal"]["quality_distribution"]["Excellent"] == 3

    def test_get_log_with_query_config(self, client_with_data):
        log_id = client_with_data.get("/logs").json()[0]["id"]

        response = client_with_data.get(f"/logs/{log_id}", params={"expected_interval_s": 10})

        assert response.status_code == 200
        assert response.json()["summary"]["temporal"]["gaps"] == 0

    def test_get_log_not_found(self, client_with_data):
        """Should return 404 for nonexistent log."""
        response = client_with_data.get("/logs/nonexistent_id")

        assert response.status_code == 404

    def test_get_log_samples(self, client_with_data):
        """Should get the enriched samples."""
        log_id = client_with_data.get("/logs").json()[0]["id"]

        response = client_with_data.get(f"/logs/{log_id}/samples")

        assert response.status_code == 200
        data = response.json()
        assert len(data["samples"]) == data["sample_count"]
        assert data["samples"][0]["distance_m"] == 0.0
        assert data["samples"][3]["gap_class"] == "Gap"

    def test_export_samples_csv(self, client_with_data):
        log_id = client_with_data.get("/logs").json()[0]["id"]

        response = client_with_data.get(f"/logs/{log_id}/samples.csv")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        lines = response.text.strip().splitlines()
        assert lines[0].startswith("index,row,timestamp")
        assert len(lines) == 6

    def test_samples_not_found(self, client_with_data):
        assert client_with_data.get("/logs/nonexistent_id/samples").status_code == 404
        assert client_with_data.get("/logs/nonexistent_id/samples.csv").status_code == 404
