"""
Application principale FastAPI.

Ce module assemble tous les composants de l'application : conteneur, middlewares, gestionnaires
d'erreurs, routes et métriques du service de suppression de profils.

Responsabilités du module:
- Initialiser le logging structuré
- Construire le conteneur (magasin de documents) et le libérer à l'arrêt
- Ajouter les middlewares (request id, métriques)
- Monter les routers (santé, profils, métriques)
- Servir l'application (`python -m backend.app.main`)
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.api.routes_health import router as health_router
from backend.api.routes_profiles import router as profiles_router
from backend.apigw.errors import (
    APIError,
    handle_api_error,
    handle_generic_exception,
    handle_http_exception,
)
from backend.app.metrics import PrometheusMiddleware, metrics_router
from backend.core.container import Container
from backend.core.logging import setup_logging
from backend.middlewares.request_id import RequestIDMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise le magasin au démarrage et le libère à l'arrêt."""
    container: Container = app.state.container
    _ = container.store
    try:
        yield
    finally:
        container.close()


def create_app(container: Container | None = None) -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Attache le conteneur (construit depuis les settings si absent)
    - Ajoute les middlewares utiles au debug/traçabilité
    - Enregistre les gestionnaires d'erreurs à enveloppe standard
    - Publie les routes de santé, de suppression et de métriques
    """
    container = container or Container()
    settings = container.settings
    setup_logging(debug=settings.APP_DEBUG)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG, lifespan=lifespan)
    app.state.container = container
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(PrometheusMiddleware)
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_generic_exception)
    app.include_router(health_router)
    app.include_router(profiles_router)
    app.include_router(metrics_router)
    return app


app = create_app()


def run() -> None:
    """Sert l'application avec uvicorn sur APP_HOST:APP_PORT."""
    import uvicorn  # noqa: PLC0415

    settings = app.state.container.settings
    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT, reload=False)


if __name__ == "__main__":
    run()
