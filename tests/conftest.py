"""Configuration de test pour pytest avec gestion des chemins.

Ce module configure pytest pour résoudre les imports backend en ajoutant la racine du projet au
sys.path, et fournit un conteneur branché sur un magasin mémoire.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from backend...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from backend.core.container import Container  # noqa: E402
from backend.core.settings import Settings  # noqa: E402
from backend.domain.auth import create_access_token  # noqa: E402
from tests.fakes import FlakyStore  # noqa: E402

TEST_JWT_SECRET = "test-secret"


@pytest.fixture
def settings(tmp_path):
    """Settings de test: magasin mémoire, audit dans un répertoire temporaire."""
    return Settings(
        STORE_BACKEND="memory",
        AUTH_BACKEND="jwt",
        JWT_SECRET=TEST_JWT_SECRET,
        JWT_ALG="HS256",
        AUDIT_DIR=str(tmp_path / "audit"),
        AUDIT_ENABLED=True,
        PURGE_BATCH_SIZE=500,
    )


@pytest.fixture
def store():
    """Magasin mémoire avec injection de pannes (inactive par défaut)."""
    return FlakyStore()


@pytest.fixture
def container(settings, store):
    """Conteneur applicatif branché sur le magasin mémoire du test."""
    return Container(settings, store=store)


@pytest.fixture
def make_token(settings):
    """Fabrique de tokens Bearer pour une identité donnée."""

    def _make(sub: str) -> str:
        return create_access_token(
            secret=settings.JWT_SECRET,
            alg=settings.JWT_ALG,
            expires_min=settings.JWT_EXPIRES_MIN,
            payload={"sub": sub},
        )

    return _make
