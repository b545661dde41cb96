"""Tests for GET /validate/{key}, GET /test-notification and the system routes."""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from conftest import OPERATOR, FakeSender
from signature_api.main import create_app
from signature_api.store import RecordStore


NOT_FOUND = {"ok": False, "mensagem": "Assinatura não encontrada para este ID ou hash."}


class TestValidate:

    def test_unknown_key_on_empty_store(self, client):
        resp = client.get("/validate/does-not-exist")

        assert resp.status_code == 404
        assert resp.json() == NOT_FOUND

    def test_unknown_key_on_populated_store(self, client, store):
        store.append({"hash": "h1", "nomeCliente": "Ana", "dataHora": "2024-01-01"})

        resp = client.get("/validate/does-not-exist")

        assert resp.status_code == 404
        assert resp.json() == NOT_FOUND

    def test_lookup_by_id(self, client, store):
        store.append({"idAssinatura": "ASS-1", "hash": "h1", "nomeCliente": "Ana", "dataHora": "2024-01-01"})

        resp = client.get("/validate/ASS-1")

        assert resp.status_code == 200
        assert resp.json()["ok"] is True
        assert resp.json()["registro"]["hash"] == "h1"

    def test_lookup_returns_earliest_match(self, client, store):
        store.append({"idAssinatura": "DUP", "hash": "h1", "nomeCliente": "Primeiro", "dataHora": "2024-01-01"})
        store.append({"idAssinatura": "DUP", "hash": "h2", "nomeCliente": "Segundo", "dataHora": "2024-01-02"})

        resp = client.get("/validate/DUP")

        assert resp.json()["registro"]["nomeCliente"] == "Primeiro"

    @pytest.mark.parametrize("path", ["/validate/ASS%2F2024%2F1", "/validate/ASS/2024/1"])
    def test_lookup_by_id_containing_slashes(self, client, store, path):
        store.append({"idAssinatura": "ASS/2024/1", "hash": "h1", "nomeCliente": "Ana", "dataHora": "2024-01-01"})

        resp = client.get(path)

        assert resp.status_code == 200
        assert resp.json()["registro"]["idAssinatura"] == "ASS/2024/1"

    def test_unknown_key_with_slashes_keeps_error_shape(self, client):
        resp = client.get("/validate/a%2Fb%2Fc")

        assert resp.status_code == 404
        assert resp.json() == NOT_FOUND

    def test_corrupt_store_reads_as_not_found(self, client, store):
        store.path.write_text("[{broken", encoding="utf-8")

        resp = client.get("/validate/h1")

        assert resp.status_code == 404


class TestTestNotification:

    def test_sends_to_operator_only(self, client, store, sender):
        resp = client.get("/test-notification")

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert "sucesso" in resp.text

        assert len(sender.sent) == 1
        mail = sender.sent[0]
        assert mail["recipients"] == [OPERATOR]
        assert mail["from_name"] == "Teste Assinatura"
        assert mail["subject"] == "Teste de envio de e-mail (sem PDF)"
        assert mail["attachment"] is None
        assert store.count() == 0

    def test_failure_is_plain_text_500(self, store):
        client = TestClient(create_app(store=store, sender=FakeSender(fail=True), operator_address=OPERATOR))

        resp = client.get("/test-notification")

        assert resp.status_code == 500
        assert resp.headers["content-type"].startswith("text/plain")
        assert "Erro" in resp.text


class LoopRecordingStore(RecordStore):
    """Notes, per call, whether the file access ran on the event loop thread."""

    def __init__(self, path):
        super().__init__(path)
        self.on_loop: dict[str, bool] = {}

    @staticmethod
    def _running_on_loop() -> bool:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return False
        return True

    def append(self, fields):
        self.on_loop["append"] = self._running_on_loop()
        return super().append(fields)

    def find(self, key):
        self.on_loop["find"] = self._running_on_loop()
        return super().find(key)

    def count(self):
        self.on_loop["count"] = self._running_on_loop()
        return super().count()


class TestStoreAccessOffTheLoop:
    """Whole-file reads and rewrites run in worker threads, not on the loop."""

    @pytest.fixture
    def recording_client(self, tmp_path, sender):
        store = LoopRecordingStore(tmp_path / "assinaturas.json")
        return TestClient(create_app(store=store, sender=sender, operator_address=OPERATOR)), store

    def test_submit_appends_in_worker_thread(self, recording_client, submission):
        client, store = recording_client

        resp = client.post("/submit-signature", json=submission)

        assert resp.status_code == 200
        assert store.on_loop == {"append": False}

    def test_validate_and_health_read_in_worker_thread(self, recording_client):
        client, store = recording_client

        client.get("/validate/abc123")
        client.get("/health")

        assert store.on_loop == {"find": False, "count": False}


class TestSystemRoutes:

    def test_health_counts_records(self, client, store):
        store.append({"hash": "h1", "nomeCliente": "Ana", "dataHora": "2024-01-01"})

        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"
        assert resp.json()["records_stored"] == 1

    def test_oversized_body_rejected(self, client, sender, submission, monkeypatch):
        monkeypatch.setattr("signature_api.config.MAX_BODY_BYTES", 64)

        resp = client.post("/submit-signature", json=submission)

        assert resp.status_code == 413
        assert resp.json()["ok"] is False
    def test_chunked_body_over_limit_rejected(self, client, sender, submission, monkeypatch):
        """No Content-Length header: the limit is applied while reading."""
        monkeypatch.setattr("signature_api.config.MAX_BODY_BYTES", 64)
        payload = json.dumps(submission).encode()
        chunks = iter([payload[:50], payload[50:]])

        resp = client.post(
            "/submit-signature",
            content=chunks,
            headers={"content-type": "application/json"},
        )

        assert resp.status_code == 413
        assert resp.json()["ok"] is False
        assert sender.sent == []

    def test_chunked_body_under_limit_accepted(self, client, sender, submission):
        payload = json.dumps(submission).encode()
        chunks = iter([payload[:50], payload[50:]])

        resp = client.post(
            "/submit-signature",
            content=chunks,
            headers={"content-type": "application/json"},
        )

        assert resp.status_code == 200
        assert len(sender.sent) == 1

        assert sender.sent == []

    @pytest.mark.parametrize("path", ["/", "/validar"])
    def test_static_pages(self, client, path):
        resp = client.get(path)

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
