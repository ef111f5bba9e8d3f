"""Endpoint integration tests using TestClient + SQLite."""
from unittest.mock import patch

from app.services.log_files import LogFileRepository, get_log_file_repository


class TestHealthAndRoot:
    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert "message" in r.json()


class TestLogs:
    def test_all_entries(self, client):
        r = client.get("/logs")
        assert r.status_code == 200
        body = r.json()
        assert body["total_entries"] == 8
        assert len(body["logs"]) == 8
        assert body["files"] == ["worker.log"]
        assert body["packets"] == [
            "packet_1_2025-03-10 09:00:01,000",
            "packet_2_2025-03-10 09:00:03,000",
        ]
        assert body["levels"] == ["DEBUG", "ERROR", "INFO", "WARNING"]
        assert body["settings"]["strategy"] == "counter"
        assert body["warnings"] == []

        first = body["logs"][0]
        assert first["file_name"] == "worker.log"
        assert first["line_number"] == 2
        assert first["packet_id"] is None

    def test_level_filter(self, client):
        r = client.get("/logs", params={"level": "INFO"})
        assert r.status_code == 200
        body = r.json()
        assert body["total_entries"] == 5
        assert body["levels"] == ["DEBUG", "ERROR", "INFO", "WARNING"]

    def test_packet_filter(self, client):
        r = client.get("/logs", params={"packet_id": "packet_1_2025-03-10 09:00:01,000"})
        body = r.json()
        assert body["total_entries"] == 4
        assert body["logs"][0]["is_packet_start"] is True
        assert body["logs"][-1]["is_packet_end"] is True
        assert body["logs"][-1]["duration_ms"] == 1500

    def test_keyword_search(self, client):
        r = client.get("/logs", params={"keyword": "EXTRACT MODE"})
        body = r.json()
        assert body["total_entries"] == 2
        assert {e["extract_mode"] for e in body["logs"]} == {"ocr", "text"}

    def test_pagination(self, client):
        r = client.get("/logs", params={"offset": 2, "limit": 3})
        body = r.json()
        assert body["total_entries"] == 8
        assert [e["line_number"] for e in body["logs"]] == [4, 5, 10]

    def test_missing_directory(self, client, tmp_path):
        from app.main import app

        app.dependency_overrides[get_log_file_repository] = lambda: LogFileRepository(tmp_path / "gone")
        r = client.get("/logs")
        assert r.status_code == 404
        assert r.json()["detail"] == "Logs directory not found"

    def test_no_log_files(self, client, logs_dir):
        (logs_dir / "worker.log").unlink()
        r = client.get("/logs")
        assert r.status_code == 200
        body = r.json()
        assert body["error"] == "No log files found"
        assert body["logs"] == []

    def test_invalid_stored_pattern_reports_warning(self, client, db_session):
        from app.services.settings import get_settings

        row = get_settings(db_session)
        row.packet_start_pattern = "("
        db_session.commit()

        r = client.get("/logs")
        assert r.status_code == 200
        body = r.json()
        assert body["total_entries"] == 8
        assert body["packets"] == []
        assert len(body["warnings"]) == 1


class TestSummary:
    def test_summary(self, client):
        r = client.get("/summary")
        assert r.status_code == 200
        body = r.json()
        summary = body["summary"]
        assert summary["total_entries"] == 8
        assert summary["total_files"] == 1
        assert summary["time_range"]["duration_ms"] == 4000
        assert summary["packet_stats"]["total_packets"] == 2
        assert summary["packet_stats"]["packets_with_duration"] == 1
        assert summary["packet_durations"][0]["tags"] == ["ocr"]
        assert body["packet_colors"] == {
            "packet_1_2025-03-10 09:00:01,000": "hsl(0, 70%, 50%)",
            "packet_2_2025-03-10 09:00:03,000": "hsl(180, 70%, 50%)",
        }

    def test_summary_with_job_id_strategy(self, client):
        r = client.put("/settings", json={"packet_strategy": "job_id"})
        assert r.status_code == 200

        body = client.get("/summary").json()
        assert set(body["packet_colors"]) == {"job-1", "job-2"}
        assert body["summary"]["packet_durations"][0]["packet_id"] == "job-1"

    def test_no_log_files(self, client, logs_dir):
        (logs_dir / "worker.log").unlink()
        body = client.get("/summary").json()
        assert body["error"] == "No log files found"
        assert body["summary"] is None

    def test_missing_directory(self, client, tmp_path):
        from app.main import app

        app.dependency_overrides[get_log_file_repository] = lambda: LogFileRepository(tmp_path / "gone")
        r = client.get("/summary")
        assert r.status_code == 404


class TestSettingsEndpoints:
    def test_get_defaults(self, client):
        r = client.get("/settings")
        assert r.status_code == 200
        settings = r.json()["settings"]
        assert settings["enable_packets"] is True
        assert settings["packet_start_pattern"] == "Received message on"
        assert settings["packet_strategy"] == "counter"

    def test_update(self, client):
        r = client.put("/settings", json={"packet_start_pattern": "BEGIN", "enable_packets": False})
        assert r.status_code == 200
        body = r.json()
        assert body["message"] == "Settings updated successfully"
        assert body["settings"]["packet_start_pattern"] == "BEGIN"
        assert body["settings"]["enable_packets"] is False

        assert client.get("/settings").json()["settings"]["packet_start_pattern"] == "BEGIN"

    def test_invalid_regex_rejected(self, client):
        r = client.put("/settings", json={"packet_start_pattern": "("})
        assert r.status_code == 400
        assert "Invalid regex pattern for packet start" in r.json()["detail"]

    def test_empty_pattern_rejected(self, client):
        r = client.put("/settings", json={"packet_end_pattern": " "})
        assert r.status_code == 400
        assert r.json()["detail"].startswith("Validation failed")

    def test_unknown_strategy_rejected(self, client):
        r = client.put("/settings", json={"packet_strategy": "guess"})
        assert r.status_code == 422


class TestExceptionHandler:
    def test_exception_handler_registered(self, client):
        from app.main import app
        assert Exception in app.exception_handlers

    @patch("app.routes.summary.build_log_summary")
    def test_unexpected_failure(self, mock_summary, client):
        mock_summary.side_effect = RuntimeError("boom")
        r = client.get("/summary")
        assert r.status_code == 500
        assert r.json() == {"detail": "Internal server error", "type": "RuntimeError"}
