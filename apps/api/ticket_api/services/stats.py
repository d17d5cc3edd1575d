import logging

from sqlalchemy.orm import Session, selectinload

from ..core.errors import EngineError, Internal
from ..core.settings import Settings
from ..models.api_key import ApiKey
from ..models.ticket import Ticket
from .host_tickets import HostTickets
from .permissions import Operation, authorize

logger = logging.getLogger(__name__)


def _bump(counts: dict, closed: bool, overdue: bool) -> None:
    if closed:
        counts["closed"] += 1
    else:
        counts["open"] += 1
    if overdue:
        counts["overdue"] += 1


def aggregate_tickets(tickets: list[Ticket]) -> dict:
    stats = {"total": 0, "open": 0, "closed": 0, "overdue": 0}
    by_department: dict[str, dict] = {}
    by_staff: dict[int, dict] = {}

    for t in tickets:
        closed = t.closed_at is not None
        overdue = bool(t.is_overdue)
        stats["total"] += 1
        _bump(stats, closed, overdue)

        # Only tickets whose department actually loads are broken down.
        dept = t.department
        if dept is not None:
            counts = by_department.setdefault(
                dept.name, {"total": 0, "open": 0, "closed": 0, "overdue": 0}
            )
            counts["total"] += 1
            _bump(counts, closed, overdue)

        staff = t.staff
        if t.staff_id and staff is not None:
            entry = by_staff.setdefault(
                t.staff_id,
                {"staff_id": t.staff_id, "staff_name": staff.name, "total": 0, "departments": {}},
            )
            entry["total"] += 1
            if dept is not None:
                counts = entry["departments"].setdefault(
                    dept.name, {"open": 0, "closed": 0, "overdue": 0}
                )
                _bump(counts, closed, overdue)

    stats["by_department"] = dict(sorted(by_department.items()))
    stats["by_staff"] = sorted(by_staff.values(), key=lambda e: e["staff_name"])
    return stats


class StatsService:
    def __init__(self, session: Session, settings: Settings):
        self.session = session
        self.host = HostTickets(session, settings)

    def aggregate(self, credential: ApiKey) -> dict:
        authorize(credential, Operation.STATS)
        try:
            tickets = self.host.list_all(selectinload(Ticket.department), selectinload(Ticket.staff))
            return aggregate_tickets(tickets)
        except EngineError:
            raise
        except Exception as exc:
            logger.exception("ticket stats aggregation failed")
            raise Internal(f"Failed to retrieve ticket statistics: {exc}") from exc
