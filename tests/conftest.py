"""Shared fixtures: a temp-file store, a recording fake sender, and a client."""

import base64

import pytest
from fastapi.testclient import TestClient

from signature_api.errors import TransportFailure
from signature_api.main import create_app
from signature_api.store import RecordStore

OPERATOR = "escritorio@example.com"
PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"
PDF_BASE64 = base64.b64encode(PDF_BYTES).decode()


class FakeSender:
    """Records every send() call instead of talking to an SMTP server."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[dict] = []

    async def send(self, from_name, recipients, subject, body, attachment=None):
        if self.fail:
            raise TransportFailure("connection timed out")
        message_id = f"<msg-{len(self.sent) + 1}@example.com>"
        self.sent.append({
            "from_name": from_name,
            "recipients": list(recipients),
            "subject": subject,
            "body": body,
            "attachment": attachment,
            "message_id": message_id,
        })
        return message_id


@pytest.fixture
def store(tmp_path):
    return RecordStore(tmp_path / "assinaturas.json")


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def client(store, sender):
    app = create_app(store=store, sender=sender, operator_address=OPERATOR)
    return TestClient(app)


@pytest.fixture
def submission():
    return {
        "pdfBase64": PDF_BASE64,
        "nomeCliente": "Ana Silva",
        "hash": "abc123",
        "dataHora": "2024-01-01T10:00:00Z",
    }
