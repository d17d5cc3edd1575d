from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_session
from ..core.credentials import get_credential
from ..core.errors import EngineError, raise_http
from ..core.settings import Settings, get_settings
from ..models.api_key import ApiKey
from ..schemas.subticket import (
    SubticketChildrenOut,
    SubticketLinkIn,
    SubticketLinkOut,
    SubticketParentOut,
    SubticketUnlinkOut,
)
from ..services.subtickets import SubticketService

router = APIRouter(tags=["subtickets"])


def get_subticket_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> SubticketService:
    # The relationship plugin is picked once here for the whole request.
    return SubticketService(session, settings)


@router.get("/tickets/{ticket_id}/subtickets/parent", response_model=SubticketParentOut)
def get_parent(
    ticket_id: str,
    service: SubticketService = Depends(get_subticket_service),
    credential: ApiKey = Depends(get_credential),
):
    try:
        return service.get_parent(credential, ticket_id)
    except EngineError as exc:
        raise_http(exc)


@router.get("/tickets/{ticket_id}/subtickets", response_model=SubticketChildrenOut)
def list_children(
    ticket_id: str,
    service: SubticketService = Depends(get_subticket_service),
    credential: ApiKey = Depends(get_credential),
):
    try:
        return service.list_children(credential, ticket_id)
    except EngineError as exc:
        raise_http(exc)


@router.post("/subtickets", response_model=SubticketLinkOut)
def create_link(
    payload: SubticketLinkIn,
    service: SubticketService = Depends(get_subticket_service),
    credential: ApiKey = Depends(get_credential),
):
    try:
        return service.create_link(credential, payload.parent_id, payload.child_id)
    except EngineError as exc:
        raise_http(exc)


@router.delete("/subtickets/{child_ref}", response_model=SubticketUnlinkOut)
def unlink_child(
    child_ref: str,
    service: SubticketService = Depends(get_subticket_service),
    credential: ApiKey = Depends(get_credential),
):
    try:
        return service.unlink_child(credential, child_ref)
    except EngineError as exc:
        raise_http(exc)
