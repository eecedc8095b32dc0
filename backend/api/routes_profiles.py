"""
Route de suppression de profil (procédure distante authentifiée).

`POST /profiles/delete` supprime le profil de l'appelant (ou celui demandé, s'il lui appartient)
ainsi que toutes les références dénormalisées vers ce profil.
"""

from fastapi import APIRouter, Depends, Request

from backend.api.deps import get_caller_identity, get_container
from backend.api.schemas import DeleteProfileRequest, DeleteProfileResponse
from backend.apigw.errors import api_error_from_deletion, extract_trace_id
from backend.core.container import Container
from backend.domain.deletion import DeletionRequest
from backend.domain.errors import DeletionError
from backend.services.profile_deletion import run_deletion

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.post("/delete", response_model=DeleteProfileResponse)
def delete_profile(
    request: Request,
    payload: DeleteProfileRequest | None = None,
    caller_id: str | None = Depends(get_caller_identity),
    container: Container = Depends(get_container),
):
    """
    Supprime un profil et ses références.

    Paramètres:
    - payload: `DeleteProfileRequest` (profileId et beaconId optionnels).

    Retour: `DeleteProfileResponse` (`success`, `profileId`).
    Erreurs: `unauthenticated`, `not-found`, `permission-denied`, `internal`.
    """
    payload = payload or DeleteProfileRequest()
    deletion = DeletionRequest(
        profile_id=payload.profile_id or None,
        caller_id=caller_id,
        beacon_id=payload.beacon_id or None,
    )
    try:
        result = run_deletion(
            container, deletion, entrypoint="rpc", actor=caller_id or "anonymous"
        )
    except DeletionError as err:
        raise api_error_from_deletion(err, extract_trace_id(request)) from err
    return DeleteProfileResponse(profile_id=result.profile_id)
