# Schémas Pydantic exposés par l'API (requêtes et réponses).

from pydantic import BaseModel, ConfigDict, Field


class DeleteProfileRequest(BaseModel):
    """Requête de suppression de profil.

    Champs:
    - profileId: str | None (profil ciblé; sinon résolu depuis l'appelant)
    - beaconId: str | None (balise à nettoyer; sinon lue sur le profil)
    """

    model_config = ConfigDict(populate_by_name=True)

    profile_id: str | None = Field(default=None, alias="profileId")
    beacon_id: str | None = Field(default=None, alias="beaconId")


class DeleteProfileResponse(BaseModel):
    """Réponse renvoyée après suppression.

    Champs:
    - success: bool
    - profileId: str (profil effectivement supprimé)
    """

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    profile_id: str = Field(alias="profileId")
