"""
Tokens d'appelant pour `AUTH_BACKEND=jwt`.

L'identité de l'appelant est le claim `sub`, comparé au champ `authUid` des profils. Les tokens
sont émis par un fournisseur d'identité externe; `create_access_token` sert aux environnements de
développement et aux tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError
from pydantic import BaseModel, ValidationError


class CallerClaims(BaseModel):
    """Claims utiles d'un token d'appelant."""

    sub: str
    email: str | None = None


def create_access_token(
    secret: str, alg: str, expires_min: int, payload: dict[str, Any]
) -> str:
    """Signe `payload` avec une expiration à `expires_min` minutes."""
    exp = datetime.now(UTC) + timedelta(minutes=expires_min)
    return jwt.encode({**payload, "exp": exp}, secret, algorithm=alg)


def decode_token(token: str, secret: str, alg: str) -> CallerClaims | None:
    # signature, expiration et présence de `sub`
    try:
        return CallerClaims.model_validate(jwt.decode(token, secret, algorithms=[alg]))
    except (InvalidTokenError, ValidationError):
        return None
