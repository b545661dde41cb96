"""
Signature API -- Application entry point.

Run with:
    uvicorn signature_api.main:app --reload

or, binding to $PORT (default 3000):
    signature-api

Then open http://localhost:3000 for the signing form, /validar for the
lookup page, or /docs for the interactive Swagger UI.

This file:
  1. Configures logging
  2. Builds the record store and the mail sender once, at startup
  3. Creates the FastAPI application with CORS, the body-size limit and
     the error handlers
  4. Mounts the route modules (signatures, notifications, validate)
  5. Serves the two HTML pages and the health check
"""

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from signature_api import config
from signature_api.errors import install_error_handlers
from signature_api.middleware import BodySizeLimitMiddleware
from signature_api.models.schemas import HealthResponse
from signature_api.notify.mailer import NotificationSender, SmtpSender
from signature_api.routes import notifications, signatures, validate
from signature_api.store import RecordStore

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.3.0"


def create_app(
    store: RecordStore | None = None,
    sender: NotificationSender | None = None,
    operator_address: str | None = None,
) -> FastAPI:
    """Build the application.

    Anything not passed in is built from signature_api.config. Tests pass a
    temp-file store and a fake sender."""

    app = FastAPI(
        title="Signature API",
        version=VERSION,
        description=(
            "Receives electronically signed documents, emails them to the "
            "office and the signer, and keeps a record that can be validated "
            "later by signature ID or document hash.\n\n"
            "| Endpoint | Purpose |\n"
            "|----------|--------|\n"
            "| `POST /submit-signature` | Email a signed PDF and record it |\n"
            "| `GET /validate/{key}` | Look up a record by ID or hash |\n"
            "| `GET /test-notification` | Send a test email to the office |\n"
        ),
    )

    app.state.store = store if store is not None else RecordStore(config.REGISTROS_PATH)
    app.state.sender = sender if sender is not None else SmtpSender(
        config.SMTP_HOST, config.SMTP_PORT, config.EMAIL_USER, config.EMAIL_PASS,
    )
    app.state.operator_address = operator_address or config.EMAIL_USER

    # -----------------------------------------------------------------------
    # Middleware
    #
    # The body limit is added first so CORS wraps it and a 413 still carries
    # CORS headers. The signing page may be hosted elsewhere, so any origin
    # can post.
    # -----------------------------------------------------------------------

    app.add_middleware(BodySizeLimitMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app)

    app.include_router(signatures.router)
    app.include_router(notifications.router)
    app.include_router(validate.router)

    # -----------------------------------------------------------------------
    # Frontend routes
    # -----------------------------------------------------------------------

    @app.get("/", include_in_schema=False)
    async def signing_page():
        """Serve the signing form."""
        return FileResponse(config.FRONTEND_DIR / "procuracao_assinatura.html")

    @app.get("/validar", include_in_schema=False)
    async def validation_page():
        """Serve the signature lookup page."""
        return FileResponse(config.FRONTEND_DIR / "validar.html")

    # -----------------------------------------------------------------------
    # Health check
    # -----------------------------------------------------------------------

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health check",
        tags=["System"],
    )
    def health() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            version=VERSION,
            records_stored=app.state.store.count(),
        )

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve on 0.0.0.0:$PORT."""
    logger.info("Server listening on port %d", config.PORT)
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
