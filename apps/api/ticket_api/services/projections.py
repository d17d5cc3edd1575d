from ..models.ticket import Ticket
from ..models.thread_entry import ThreadEntry


def _name(obj) -> str | None:
    return obj.name if obj is not None else None


def serialize_subticket(t: Ticket) -> dict:
    return {
        "ticket_id": t.id,
        "number": t.number,
        "subject": t.subject,
        "status": t.status.name if t.status else "Unknown",
    }


def serialize_search_item(t: Ticket) -> dict:
    # No thread entries here; search must stay cheap.
    return {
        "id": t.id,
        "number": t.number,
        "subject": t.subject,
        "status_id": t.status_id,
        "status": _name(t.status),
        "priority_id": t.priority_id,
        "priority": _name(t.priority),
        "department_id": t.dept_id,
        "department": _name(t.department),
        "topic_id": t.topic_id,
        "topic": _name(t.topic),
        "created": t.created_at,
        "updated": t.updated_at,
        "due_date": t.duedate,
        "staff_id": t.staff_id,
        "staff": _name(t.staff),
        "team_id": t.team_id,
        "team": _name(t.team),
        "sla_id": t.sla_id,
        "sla": _name(t.sla),
        "is_overdue": bool(t.is_overdue),
        "is_answered": bool(t.is_answered),
    }


def serialize_thread_entry(entry: ThreadEntry) -> dict:
    item = {
        "id": entry.id,
        "type": entry.type,
        "poster": entry.poster,
        "title": entry.title,
        "format": entry.format,
        "timestamp": entry.created_at,
        "body": entry.body,
    }
    if entry.staff_id:
        item["staff_id"] = entry.staff_id
    if entry.user_name:
        item["user"] = entry.user_name
    return item


def serialize_ticket(t: Ticket, children: list[int]) -> dict:
    data = serialize_search_item(t)
    data.pop("due_date")
    data.update(
        {
            "user": {"name": t.user_name, "email": t.user_email},
            "due_date": t.duedate,
            "closed": t.closed_at if t.is_closed else None,
            "source": t.source,
            "ip": t.ip_address,
            "parent_id": t.ticket_pid,
            "children": children,
            "thread": [serialize_thread_entry(e) for e in t.thread_entries],
        }
    )
    return data
