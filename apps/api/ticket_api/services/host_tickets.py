"""Host-side ticket store.

Stands in for the ticketing application's own ticket routines: number
allocation, help topic routing on creation, thread entries and deletion.
The engine services only go through this class to touch ticket rows.
"""

from datetime import datetime, timezone
import secrets

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..core.settings import Settings
from ..models.help_topic import HelpTopic
from ..models.thread_entry import ThreadEntry
from ..models.ticket import Ticket
from ..models.ticket_status import TicketPriority, TicketStatus
from .resolver import is_numeric_reference


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class HostTickets:
    def __init__(self, session: Session, settings: Settings):
        self.session = session
        self.settings = settings

    def lookup_by_number(self, number) -> Ticket | None:
        if number is None:
            return None
        return self.session.scalar(select(Ticket).where(Ticket.number == str(number).strip()))

    def lookup_by_id(self, ticket_id) -> Ticket | None:
        if not is_numeric_reference(ticket_id):
            return None
        return self.session.get(Ticket, int(ticket_id))

    def lookup(self, ref) -> Ticket | None:
        # Public number first, internal id as fallback.
        return self.lookup_by_number(ref) or self.lookup_by_id(ref)

    def list_all(self, *options) -> list[Ticket]:
        stmt = select(Ticket).options(*options).order_by(Ticket.id.asc())
        return list(self.session.scalars(stmt).all())

    def children_ids(self, ticket: Ticket) -> list[int]:
        stmt = select(Ticket.id).where(Ticket.ticket_pid == ticket.id).order_by(Ticket.id.asc())
        return list(self.session.scalars(stmt).all())

    def next_number(self) -> str:
        digits = self.settings.TICKET_NUMBER_DIGITS
        while True:
            number = str(secrets.randbelow(9 * 10 ** (digits - 1)) + 10 ** (digits - 1))
            if not self.lookup_by_number(number):
                return number

    def default_status_id(self) -> int | None:
        stmt = (
            select(TicketStatus.id)
            .where(TicketStatus.state == "open")
            .order_by(TicketStatus.sort.asc(), TicketStatus.id.asc())
            .limit(1)
        )
        return self.session.scalar(stmt)

    def default_priority_id(self) -> int | None:
        stmt = select(TicketPriority.id).where(TicketPriority.name == self.settings.DEFAULT_PRIORITY)
        return self.session.scalar(stmt)

    def open(
        self,
        *,
        subject: str,
        message: str,
        user_name: str | None = None,
        user_email: str | None = None,
        dept_id: int | None = None,
        topic_id: int | None = None,
        priority_id: int | None = None,
        message_format: str = "text",
        source: str | None = None,
        ip_address: str | None = None,
        duedate: datetime | None = None,
    ) -> Ticket:
        now = utcnow()
        t = Ticket(
            number=self.next_number(),
            subject=subject,
            dept_id=dept_id,
            topic_id=topic_id,
            status_id=self.default_status_id(),
            priority_id=priority_id,
            user_name=user_name,
            user_email=user_email,
            source=source or self.settings.DEFAULT_SOURCE,
            ip_address=ip_address,
            duedate=duedate,
            created_at=now,
            updated_at=now,
        )

        # Help topic routing runs after the payload is accepted and wins over
        # the requested department.
        if topic_id is not None:
            topic = self.session.get(HelpTopic, topic_id)
            if topic:
                if topic.dept_id:
                    t.dept_id = topic.dept_id
                if topic.sla_id:
                    t.sla_id = topic.sla_id
                if priority_id is None and topic.priority_id:
                    t.priority_id = topic.priority_id
        if t.priority_id is None:
            t.priority_id = self.default_priority_id()

        t.thread_entries.append(
            ThreadEntry(
                type="M",
                poster=user_name or "",
                title=subject,
                body=message,
                format=message_format,
                user_name=user_name,
                created_at=now,
            )
        )
        self.session.add(t)
        self.session.commit()
        self.session.refresh(t)
        return t

    def post_note(self, ticket: Ticket, *, body: str, title: str, message_format: str, poster: str = "API") -> ThreadEntry:
        entry = ThreadEntry(
            type="N",
            poster=poster,
            title=title,
            body=body,
            format=message_format,
            created_at=utcnow(),
        )
        ticket.thread_entries.append(entry)
        self.session.flush()
        return entry

    def save(self, ticket: Ticket, *, touch: bool = True) -> Ticket:
        if touch:
            ticket.updated_at = utcnow()
        self.session.add(ticket)
        self.session.commit()
        return ticket

    def delete(self, ticket: Ticket) -> None:
        # Children lose their parent; thread entries go with the ticket.
        self.session.execute(
            update(Ticket).where(Ticket.ticket_pid == ticket.id).values(ticket_pid=None)
        )
        self.session.delete(ticket)
        self.session.commit()
