"""Dépendances partagées pour les routes de l'API.

But du module
-------------
- Exposer le conteneur applicatif attaché à `app.state` aux endpoints.
- Extraire l'identité de l'appelant à partir du token `Authorization: Bearer ...`.

Deux modes d'authentification (`AUTH_BACKEND`):
- `jwt`: token HS256 signé par `JWT_SECRET`, identité = claim `sub`;
- `firebase`: ID token Firebase vérifié par firebase_admin, identité = `uid`.
"""

from fastapi import Header, Request

from backend.core.container import Container
from backend.domain.auth import decode_token


def get_container(request: Request) -> Container:
    """Retourne le conteneur de l'application courante."""
    return request.app.state.container


def get_caller_identity(request: Request, authorization: str = Header(None)) -> str | None:
    """Retourne l'identité authentifiée de l'appelant, ou None si absente/invalide.

    Le refus (`unauthenticated`) est décidé par l'orchestrateur, pas ici.
    """
    if not authorization or not authorization.lower().startswith("bearer "):
        return None
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        return None
    container = get_container(request)
    settings = container.settings
    if settings.AUTH_BACKEND.lower() == "firebase":
        from backend.infra.firebase_app import verify_id_token  # noqa: PLC0415

        return verify_id_token(token, container.firebase_app)
    data = decode_token(token, settings.JWT_SECRET, settings.JWT_ALG)
    return data.sub if data else None
