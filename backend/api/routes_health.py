"""
Endpoint de santé pour vérifier la disponibilité de l'API et du magasin.

Expose `/health` pour signaler l'état général de l'application et le backend de stockage configuré.
"""


from fastapi import APIRouter, Depends

from backend.api.deps import get_container
from backend.core.container import Container

router = APIRouter(tags=["health"])


@router.get("/health")
def health(container: Container = Depends(get_container)):
    """Vérifie la disponibilité de l'API et le backend de stockage."""
    return {
        "status": "ok",
        "storage": container.storage_backend,
        "auth": container.settings.AUTH_BACKEND,
    }
