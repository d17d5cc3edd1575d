from datetime import datetime
import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.errors import EngineError, Internal, InvalidInput, NotFound
from ..core.settings import Settings
from ..models.api_key import ApiKey
from ..models.ticket import Ticket
from ..models.ticket_status import TicketStatus
from ..schemas.ticket import TicketCreateIn, TicketUpdateIn
from .formats import validate_format
from .host_tickets import HostTickets
from .permissions import Operation, authorize
from .projections import serialize_ticket
from .resolver import EntityResolver, ReferenceKind

logger = logging.getLogger(__name__)

# payload field -> (reference kind, ticket column)
REFERENCE_FIELDS = (
    ("department", ReferenceKind.DEPARTMENT, "dept_id"),
    ("topic", ReferenceKind.HELP_TOPIC, "topic_id"),
    ("status", ReferenceKind.STATUS, "status_id"),
    ("sla", ReferenceKind.SLA, "sla_id"),
    ("staff", ReferenceKind.STAFF, "staff_id"),
)


def parse_due_date(value) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidInput(
            'Invalid date format for due_date. Expected ISO 8601 format '
            '(e.g., "2025-01-31" or "2025-01-31T17:30:00")'
        )


class TicketService:
    def __init__(self, session: Session, settings: Settings):
        self.session = session
        self.settings = settings
        self.host = HostTickets(session, settings)
        self.resolver = EntityResolver(session)

    def get_ticket_or_404(self, ticket_ref) -> Ticket:
        t = self.host.lookup(ticket_ref)
        if not t:
            raise NotFound("Ticket not found")
        return t

    def resolve_parent(self, parent_ref, ticket: Ticket | None = None) -> int:
        """Translate a parent's public number (or id) into its internal id."""
        parent = self.host.lookup(parent_ref)
        if not parent:
            raise NotFound("Parent ticket not found")
        if ticket is not None and parent.id == ticket.id:
            raise InvalidInput("Ticket cannot be its own parent")
        if parent.ticket_pid:
            raise InvalidInput("Parent ticket cannot be a child of another ticket")
        if ticket is not None and self.host.children_ids(ticket):
            raise InvalidInput("Ticket with subtickets cannot become a child")
        return parent.id

    def create(self, credential: ApiKey, payload: TicketCreateIn, *, ip_address: str | None = None) -> Ticket:
        authorize(credential, Operation.CREATE)

        message_format = "text"
        if payload.format is not None:
            message_format = validate_format(payload.format, self.settings)
        dept_id = None
        if payload.department is not None:
            dept_id = self.resolver.resolve(ReferenceKind.DEPARTMENT, payload.department)
        topic_id = None
        if payload.topic is not None:
            topic_id = self.resolver.resolve(ReferenceKind.HELP_TOPIC, payload.topic)
        parent_id = None
        if payload.parent_ticket_number is not None:
            parent_id = self.resolve_parent(payload.parent_ticket_number)

        t = self.host.open(
            subject=payload.subject,
            message=payload.message,
            user_name=payload.name,
            user_email=payload.email,
            dept_id=dept_id,
            topic_id=topic_id,
            message_format=message_format,
            source=payload.source,
            ip_address=ip_address,
            duedate=parse_due_date(payload.due_date),
        )

        # Topic routing inside the host may have replaced the department, so the
        # caller's department and parent are forced back on afterwards.
        try:
            self.apply_overrides(t, dept_id=dept_id, parent_id=parent_id)
        except Exception:
            logger.exception("failed to apply post-create overrides (ticket=%s)", t.number)
            self.session.rollback()
            self.session.refresh(t)
        return t

    def apply_overrides(self, t: Ticket, *, dept_id: int | None = None, parent_id: int | None = None) -> bool:
        changed = False
        if dept_id is not None and t.dept_id != dept_id:
            t.dept_id = dept_id
            changed = True
        if parent_id is not None and t.ticket_pid != parent_id:
            t.ticket_pid = parent_id
            changed = True
        if changed:
            self.host.save(t)
        return changed

    def update(
        self,
        credential: ApiKey | None,
        ticket_ref,
        payload: TicketUpdateIn,
        *,
        skip_permission_check: bool = False,
    ) -> Ticket:
        if not skip_permission_check:
            authorize(credential, Operation.UPDATE)

        t = self.get_ticket_or_404(ticket_ref)
        fields = set(payload.model_fields_set)

        # Resolve everything before touching the ticket so a bad field leaves
        # it unchanged.
        changes: dict = {}
        for field, kind, column in REFERENCE_FIELDS:
            value = getattr(payload, field)
            if field in fields and value is not None:
                changes[column] = self.resolver.resolve(kind, value)
        if "parent_ticket_number" in fields and payload.parent_ticket_number is not None:
            changes["ticket_pid"] = self.resolve_parent(payload.parent_ticket_number, ticket=t)
        if "due_date" in fields:
            changes["duedate"] = parse_due_date(payload.due_date)

        note = payload.note if payload.note is not None and payload.note.strip() else None
        note_format = None
        if note is not None:
            note_format = validate_format(payload.note_format or self.settings.DEFAULT_NOTE_FORMAT, self.settings)

        changed = False
        for column, value in changes.items():
            if getattr(t, column) != value:
                setattr(t, column, value)
                changed = True

        if note is not None:
            self.host.post_note(
                t,
                body=note,
                title=payload.note_title or self.settings.DEFAULT_NOTE_TITLE,
                message_format=note_format,
            )
            changed = True

        if changed:
            self.host.save(t)
        return t

    def get(self, credential: ApiKey, ticket_ref) -> dict:
        authorize(credential, Operation.READ)
        t = self.get_ticket_or_404(ticket_ref)
        return serialize_ticket(t, self.host.children_ids(t))

    def delete(self, credential: ApiKey, ticket_ref) -> str:
        authorize(credential, Operation.DELETE)
        t = self.get_ticket_or_404(ticket_ref)

        # The row is gone after delete, keep the number for the response.
        number = t.number
        try:
            self.host.delete(t)
        except EngineError:
            raise
        except Exception as exc:
            self.session.rollback()
            logger.exception("delete failed for ticket %s", ticket_ref)
            raise Internal(f"Failed to delete ticket: {exc}") from exc
        logger.info("deleted ticket %s", number)
        return number

    def list_statuses(self, credential: ApiKey) -> list[dict]:
        authorize(credential, Operation.STATS)
        stmt = select(TicketStatus).order_by(TicketStatus.sort.asc(), TicketStatus.id.asc())
        return [
            {"id": s.id, "name": s.name, "state": s.state}
            for s in self.session.scalars(stmt).all()
        ]
