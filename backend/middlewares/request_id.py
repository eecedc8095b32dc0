"""Identifiant de requête propagé aux logs et aux enveloppes d'erreur.

La valeur de `X-Request-ID` (générée si absente) est posée sur `request.state.trace_id`, liée aux
contextvars structlog le temps de la requête, puis renvoyée dans la réponse.
"""

from collections.abc import Callable
from uuid import uuid4

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Relie logs de suppression, journal d'audit et réponses par un même identifiant."""

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID") -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request, call_next: Callable):
        request_id = request.headers.get(self.header_name) or uuid4().hex
        request.state.trace_id = request_id
        with structlog.contextvars.bound_contextvars(request_id=request_id):
            response = await call_next(request)
        response.headers[self.header_name] = request_id
        return response
