from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from ..db import get_session
from ..core.credentials import get_credential
from ..core.errors import EngineError, raise_http
from ..core.settings import Settings, get_settings
from ..models.api_key import ApiKey
from ..schemas.stats import TicketStatsOut
from ..schemas.ticket import (
    TicketCreateIn,
    TicketCreatedOut,
    TicketDeletedOut,
    TicketOut,
    TicketSearchItemOut,
    TicketStatusOut,
    TicketUpdateIn,
    TicketUpdatedOut,
)
from ..services.search import SearchParams, SearchService
from ..services.stats import StatsService
from ..services.tickets import TicketService

router = APIRouter(prefix="/tickets", tags=["tickets"])


def get_ticket_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> TicketService:
    return TicketService(session, settings)


@router.post("", response_model=TicketCreatedOut, status_code=201)
def create_ticket(
    payload: TicketCreateIn,
    request: Request,
    service: TicketService = Depends(get_ticket_service),
    credential: ApiKey = Depends(get_credential),
):
    client_ip = request.client.host if request.client else None
    try:
        t = service.create(credential, payload, ip_address=client_ip)
    except EngineError as exc:
        raise_http(exc)
    return {"id": t.id, "number": t.number}


# Static paths are registered before /{ticket_ref} so they are not shadowed.
@router.get("/search", response_model=list[TicketSearchItemOut])
def search_tickets(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    credential: ApiKey = Depends(get_credential),
    query: str | None = Query(default=None, max_length=255),
    status: str | None = Query(default=None),
    department: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    offset: str | None = Query(default=None),
    sort: str | None = Query(default=None),
):
    params = SearchParams(
        query=query,
        status=status,
        department=department,
        limit=limit,
        offset=offset,
        sort=sort,
    )
    try:
        return SearchService(session, settings).search(credential, params)
    except EngineError as exc:
        raise_http(exc)


@router.get("/stats", response_model=TicketStatsOut)
def ticket_stats(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    credential: ApiKey = Depends(get_credential),
):
    try:
        return StatsService(session, settings).aggregate(credential)
    except EngineError as exc:
        raise_http(exc)


@router.get("/statuses", response_model=list[TicketStatusOut])
def list_statuses(
    service: TicketService = Depends(get_ticket_service),
    credential: ApiKey = Depends(get_credential),
):
    try:
        return service.list_statuses(credential)
    except EngineError as exc:
        raise_http(exc)


@router.get("/{ticket_ref}", response_model=TicketOut)
def get_ticket(
    ticket_ref: str,
    service: TicketService = Depends(get_ticket_service),
    credential: ApiKey = Depends(get_credential),
):
    try:
        return service.get(credential, ticket_ref)
    except EngineError as exc:
        raise_http(exc)


@router.patch("/{ticket_ref}", response_model=TicketUpdatedOut)
def update_ticket(
    ticket_ref: str,
    payload: TicketUpdateIn,
    service: TicketService = Depends(get_ticket_service),
    credential: ApiKey = Depends(get_credential),
):
    try:
        t = service.update(credential, ticket_ref, payload)
    except EngineError as exc:
        raise_http(exc)
    return {
        "id": t.id,
        "number": t.number,
        "subject": t.subject,
        "department_id": t.dept_id,
        "topic_id": t.topic_id,
        "status_id": t.status_id,
        "sla_id": t.sla_id,
        "staff_id": t.staff_id,
        "parent_id": t.ticket_pid,
        "due_date": t.duedate,
        "updated": t.updated_at,
    }


@router.delete("/{ticket_ref}", response_model=TicketDeletedOut)
def delete_ticket(
    ticket_ref: str,
    service: TicketService = Depends(get_ticket_service),
    credential: ApiKey = Depends(get_credential),
):
    try:
        number = service.delete(credential, ticket_ref)
    except EngineError as exc:
        raise_http(exc)
    return {"number": number}
