"""
Signature API — Pydantic Data Models

Every request, response and stored record is defined here. Python
attribute names are English; the JSON keys (aliases) are the Portuguese
names the signing form sends and the record file has always used, so an
existing assinaturas.json keeps loading unchanged.

Models accept either form on input (populate_by_name) and FastAPI
serializes responses by alias.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Older revisions of the form posted whatever the browser had, so stored
# values are not always strings (e.g. a numeric idAssinatura).
Scalar = str | int | float | bool


# ---------------------------------------------------------------------------
# Stored record
# ---------------------------------------------------------------------------

class SignatureRecord(BaseModel):
    """One persisted signing event.

    Records are immutable once written. Keys this model does not know
    about (written by an older or newer revision of the form) are kept
    verbatim through load and save."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    signature_id: Scalar | None = Field(
        default=None,
        alias="idAssinatura",
        description="Caller-supplied signature identifier. Not unique.",
        examples=["ASS-2024-0001"],
    )
    hash: Scalar = Field(
        description="Content hash (SHA-256) of the signed PDF.",
        examples=["9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08"],
    )
    client_name: Scalar = Field(
        alias="nomeCliente",
        description="Signer's full name.",
        examples=["Ana Silva"],
    )
    client_email: Scalar | None = Field(
        default=None,
        alias="emailCliente",
        examples=["ana@example.com"],
    )
    timestamp: Scalar = Field(
        alias="dataHora",
        description="Signing date/time as reported by the client, stored verbatim.",
        examples=["2024-01-01T10:00:00Z"],
    )
    created_at: Scalar = Field(
        alias="criadoEm",
        description="Server time the record was written (UTC, ISO-8601).",
        examples=["2024-01-01T10:00:02.512Z"],
    )
    cpf: Scalar | None = Field(default=None, alias="cpfCliente")
    identity_document: Scalar | None = Field(default=None, alias="docIdCliente")
    address: Scalar | None = Field(default=None, alias="enderecoCliente")
    nationality: Scalar | None = Field(default=None, alias="nacionalidade")
    marital_status: Scalar | None = Field(default=None, alias="estadoCivil")
    profession: Scalar | None = Field(default=None, alias="profissao")
    geo: Any = Field(
        default=None,
        description="Geolocation captured by the browser, any JSON value.",
        examples=[{"lat": -23.55, "lng": -46.63}],
    )
    message_id: Scalar | None = Field(
        default=None,
        alias="messageIdEmail",
        description="Message-ID of the email that carried the document.",
    )


# ---------------------------------------------------------------------------
# POST /submit-signature
# ---------------------------------------------------------------------------

class SubmitSignatureRequest(BaseModel):
    """What the signing form posts.

    The four required fields are typed optional here on purpose: the
    handler reports a missing or empty one as a 400 with the service's own
    message instead of FastAPI's 422."""

    model_config = ConfigDict(populate_by_name=True)

    pdf_base64: str | None = Field(default=None, alias="pdfBase64")
    client_name: str | None = Field(default=None, alias="nomeCliente")
    hash: str | None = None
    timestamp: str | None = Field(default=None, alias="dataHora")

    client_email: str | None = Field(default=None, alias="emailCliente")
    signature_id: str | None = Field(default=None, alias="idAssinatura")
    cpf: str | None = Field(default=None, alias="cpfCliente")
    identity_document: str | None = Field(default=None, alias="docIdCliente")
    address: str | None = Field(default=None, alias="enderecoCliente")
    nationality: str | None = Field(default=None, alias="nacionalidade")
    marital_status: str | None = Field(default=None, alias="estadoCivil")
    profession: str | None = Field(default=None, alias="profissao")
    geo: Any = None

    def missing_required(self) -> list[str]:
        """Aliases of required fields that are absent or empty."""
        required = {
            "pdfBase64": self.pdf_base64,
            "nomeCliente": self.client_name,
            "hash": self.hash,
            "dataHora": self.timestamp,
        }
        return [name for name, value in required.items() if not value]


class SubmitSignatureResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    message_id: str = Field(alias="messageId")
    saved_record: SignatureRecord = Field(alias="registroSalvo")


# ---------------------------------------------------------------------------
# GET /validate/{key}
# ---------------------------------------------------------------------------

class ValidateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    record: SignatureRecord = Field(alias="registro")


# ---------------------------------------------------------------------------
# Error bodies (documentation only -- rendered by signature_api.errors)
# ---------------------------------------------------------------------------

class ErrorResponse(BaseModel):
    ok: bool = False
    error: str = Field(examples=["Dados obrigatórios faltando."])


class NotFoundResponse(BaseModel):
    ok: bool = False
    mensagem: str = Field(examples=["Assinatura não encontrada para este ID ou hash."])


class HealthResponse(BaseModel):
    status: str = Field(examples=["healthy"])
    version: str
    records_stored: int
