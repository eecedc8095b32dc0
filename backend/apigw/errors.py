"""Enveloppes d'erreur de l'API de suppression.

Toutes les erreurs HTTP sortent sous la forme `{"code", "message", "trace_id"}`. Les codes sont
ceux des erreurs de suppression (`unauthenticated`, `not-found`, `permission-denied`, `internal`),
complétés par quelques codes génériques pour les erreurs du framework.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass

import structlog
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from backend.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_FORBIDDEN,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_METHOD_NOT_ALLOWED,
    HTTP_NOT_FOUND,
    HTTP_UNAUTHORIZED,
)
from backend.domain.errors import DeletionError

log = structlog.get_logger(__name__)

DELETION_ERROR_STATUS = {
    "unauthenticated": HTTP_UNAUTHORIZED,
    "permission-denied": HTTP_FORBIDDEN,
    "not-found": HTTP_NOT_FOUND,
    "internal": HTTP_INTERNAL_SERVER_ERROR,
}

# statut HTTP -> code, pour les erreurs levées par FastAPI/Starlette
HTTP_STATUS_CODES = {
    HTTP_BAD_REQUEST: "bad-request",
    HTTP_UNAUTHORIZED: "unauthenticated",
    HTTP_FORBIDDEN: "permission-denied",
    HTTP_NOT_FOUND: "not-found",
    HTTP_METHOD_NOT_ALLOWED: "method-not-allowed",
    HTTP_INTERNAL_SERVER_ERROR: "internal",
}


@dataclass
class ErrorEnvelope:
    """Corps JSON d'une réponse d'erreur."""

    code: str
    message: str
    trace_id: str | None = None

    def to_response(self, status_code: int) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=asdict(self))


class APIError(HTTPException):
    """Erreur métier déjà traduite en statut HTTP et code d'enveloppe."""

    def __init__(
        self, status_code: int, code: str, message: str, trace_id: str | None = None
    ) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message
        self.trace_id = trace_id


def api_error_from_deletion(exc: DeletionError, trace_id: str | None = None) -> APIError:
    """Traduit une erreur de suppression; un code inconnu devient `internal`."""
    code = exc.code if exc.code in DELETION_ERROR_STATUS else "internal"
    return APIError(DELETION_ERROR_STATUS[code], code, exc.message, trace_id)


def extract_trace_id(request: Request) -> str | None:
    """`X-Trace-ID` fourni par l'appelant, sinon l'id posé par `RequestIDMiddleware`."""
    return request.headers.get("X-Trace-ID") or getattr(request.state, "trace_id", None)


def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    trace_id = extract_trace_id(request) or exc.trace_id
    log.warning(
        "api_error",
        code=exc.code,
        status=exc.status_code,
        error=exc.message,
        trace_id=trace_id,
        path=request.url.path,
    )
    return ErrorEnvelope(exc.code, exc.message, trace_id).to_response(exc.status_code)


def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    code = HTTP_STATUS_CODES.get(exc.status_code, "http-error")
    trace_id = extract_trace_id(request)
    log.info("http_error", code=code, status=exc.status_code, path=request.url.path)
    return ErrorEnvelope(code, str(exc.detail), trace_id).to_response(exc.status_code)


def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    """Toute exception inattendue devient `internal` sans exposer son message."""
    trace_id = extract_trace_id(request)
    log.exception("unexpected_error", error_type=type(exc).__name__, trace_id=trace_id)
    return ErrorEnvelope("internal", "An unexpected error occurred", trace_id).to_response(
        HTTP_INTERNAL_SERVER_ERROR
    )
