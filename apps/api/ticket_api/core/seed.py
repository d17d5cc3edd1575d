from sqlalchemy.orm import Session
from sqlalchemy import select

from ..models.ticket_status import TicketStatus, TicketPriority


def seed_ticket_statuses(session: Session) -> None:
    seeds = [
        dict(name="Open", state="open", sort=1),
        dict(name="Resolved", state="closed", sort=2),
        dict(name="Closed", state="closed", sort=3),
        dict(name="Archived", state="archived", sort=4),
        dict(name="Deleted", state="deleted", sort=5),
    ]

    for s in seeds:
        exists = session.scalar(select(TicketStatus).where(TicketStatus.name == s["name"]))
        if exists:
            exists.state = s["state"]
            exists.sort = s["sort"]
        else:
            session.add(TicketStatus(**s))

    session.commit()


def seed_ticket_priorities(session: Session) -> None:
    seeds = [
        dict(name="Low", urgency=4),
        dict(name="Normal", urgency=3),
        dict(name="High", urgency=2),
        dict(name="Emergency", urgency=1),
    ]

    for s in seeds:
        exists = session.scalar(select(TicketPriority).where(TicketPriority.name == s["name"]))
        if exists:
            exists.urgency = s["urgency"]
        else:
            session.add(TicketPriority(**s))

    session.commit()
