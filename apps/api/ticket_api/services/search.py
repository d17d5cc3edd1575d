from dataclasses import dataclass
from enum import Enum

from sqlalchemy import desc, func, select
from sqlalchemy.orm import Session, selectinload

from ..core.settings import Settings
from ..models.api_key import ApiKey
from ..models.ticket import Ticket
from .permissions import Operation, authorize
from .projections import serialize_search_item
from .resolver import EntityResolver, ReferenceKind


class SortField(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    NUMBER = "number"

    @classmethod
    def from_string(cls, value: str | None) -> "SortField":
        if value is None:
            return cls.CREATED
        return SORT_ALIASES.get(str(value).strip().lower(), cls.CREATED)


SORT_ALIASES = {
    "created": SortField.CREATED,
    "updated": SortField.UPDATED,
    "update": SortField.UPDATED,
    "modified": SortField.UPDATED,
    "number": SortField.NUMBER,
    "id": SortField.NUMBER,
    "ticket_number": SortField.NUMBER,
}

ORDER_BY = {
    SortField.CREATED: (desc(Ticket.created_at), desc(Ticket.id)),
    SortField.UPDATED: (desc(Ticket.updated_at), desc(Ticket.id)),
    SortField.NUMBER: (Ticket.number.asc(),),
}


# Every relationship read by serialize_search_item, loaded per page in bulk.
PROJECTION_LOADS = (
    selectinload(Ticket.status),
    selectinload(Ticket.priority),
    selectinload(Ticket.department),
    selectinload(Ticket.topic),
    selectinload(Ticket.staff),
    selectinload(Ticket.team),
    selectinload(Ticket.sla),
)


def _to_int(value) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


@dataclass
class SearchParams:
    query: str | None = None
    status: int | str | None = None
    department: int | str | None = None
    limit: int | str | None = None
    offset: int | str | None = None
    sort: str | None = None


class SearchService:
    def __init__(self, session: Session, settings: Settings):
        self.session = session
        self.settings = settings
        self.resolver = EntityResolver(session)

    def resolve_limit(self, limit) -> int:
        value = _to_int(limit)
        if value is None or value < 1:
            return self.settings.SEARCH_DEFAULT_LIMIT
        return min(value, self.settings.SEARCH_MAX_LIMIT)

    @staticmethod
    def resolve_offset(offset) -> int:
        value = _to_int(offset)
        return max(0, value or 0)

    def search(self, credential: ApiKey, params: SearchParams) -> list[dict]:
        authorize(credential, Operation.SEARCH)

        stmt = select(Ticket).options(*PROJECTION_LOADS)

        query = (params.query or "").strip()
        if query:
            stmt = stmt.where(func.lower(Ticket.subject).contains(query.lower(), autoescape=True))

        # A filter that names an unknown status or department matches nothing.
        if params.status is not None and str(params.status).strip():
            status_id = self.resolver.lookup_id(ReferenceKind.STATUS, params.status)
            if status_id is None:
                return []
            stmt = stmt.where(Ticket.status_id == status_id)

        if params.department is not None and str(params.department).strip():
            dept_id = self.resolver.lookup_id(ReferenceKind.DEPARTMENT, params.department)
            if dept_id is None:
                return []
            stmt = stmt.where(Ticket.dept_id == dept_id)

        sort = SortField.from_string(params.sort)
        stmt = (
            stmt.order_by(*ORDER_BY[sort])
            .limit(self.resolve_limit(params.limit))
            .offset(self.resolve_offset(params.offset))
        )
        return [serialize_search_item(t) for t in self.session.scalars(stmt).all()]
