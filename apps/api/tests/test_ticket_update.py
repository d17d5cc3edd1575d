from datetime import datetime

import pytest

from ticket_api.core.errors import Inactive, InvalidInput, NotFound, Unauthorized
from ticket_api.schemas.ticket import TicketUpdateIn
from ticket_api.services.tickets import TicketService, parse_due_date


@pytest.fixture
def service(db, settings):
    return TicketService(db, settings)


def test_parent_number_is_translated_to_internal_id(service, factory, admin_key):
    factory.ticket(id=100, number="100100")
    child = factory.ticket(id=101, number="101101")

    t = service.update(admin_key, "101101", TicketUpdateIn(parent_ticket_number="100100"))

    assert t.id == child.id
    assert t.ticket_pid == 100


def test_ticket_reference_falls_back_to_internal_id(service, factory, admin_key):
    dept = factory.department("Support")
    t = factory.ticket(number="777777")

    updated = service.update(admin_key, str(t.id), TicketUpdateIn(department="Support"))
    assert updated.dept_id == dept.id


def test_update_resolves_every_reference_kind(service, factory, admin_key):
    dept = factory.department("Support")
    topic = factory.topic("Hardware")
    sla = factory.sla("Default SLA")
    staff = factory.staff("jdoe", first_name="Jane", last_name="Doe")
    t = factory.ticket()

    service.update(
        admin_key,
        t.number,
        TicketUpdateIn(department="support", topic=topic.id, status="Resolved", sla="default sla", staff="Jane Doe"),
    )

    assert (t.dept_id, t.topic_id, t.status_id, t.sla_id, t.staff_id) == (dept.id, topic.id, 2, sla.id, staff.id)


def test_failed_field_leaves_ticket_unchanged(service, factory, admin_key):
    factory.department("Support")
    t = factory.ticket()
    before = (t.dept_id, t.status_id, t.updated_at)

    with pytest.raises(NotFound):
        service.update(admin_key, t.number, TicketUpdateIn(department="Support", status="Bogus"))

    assert (t.dept_id, t.status_id, t.updated_at) == before


def test_inactive_reference_is_rejected(service, factory, admin_key):
    factory.department("Legacy", is_active=False)
    t = factory.ticket()

    with pytest.raises(Inactive):
        service.update(admin_key, t.number, TicketUpdateIn(department="Legacy"))


def test_update_with_current_values_does_not_touch_ticket(service, factory, admin_key):
    dept = factory.department("Support")
    t = factory.ticket(department=dept)
    before = t.updated_at

    service.update(admin_key, t.number, TicketUpdateIn(department="Support", status="Open"))
    service.update(admin_key, t.number, TicketUpdateIn(department=dept.id))

    assert t.updated_at == before


def test_note_is_posted_with_defaults(service, factory, admin_key):
    t = factory.ticket()

    service.update(admin_key, t.number, TicketUpdateIn(note="Called the user back"))

    notes = [e for e in t.thread_entries if e.type == "N"]
    assert len(notes) == 1
    assert notes[0].title == "API Update"
    assert notes[0].format == "markdown"
    assert notes[0].poster == "API"


def test_note_title_and_format_are_honoured(service, factory, admin_key):
    t = factory.ticket()

    service.update(admin_key, t.number, TicketUpdateIn(note="<b>done</b>", note_title="Closing", note_format="html"))

    note = t.thread_entries[-1]
    assert (note.title, note.format) == ("Closing", "html")


def test_blank_note_is_ignored(service, factory, admin_key):
    t = factory.ticket()
    before = t.updated_at

    service.update(admin_key, t.number, TicketUpdateIn(note="   "))

    assert t.thread_entries == []
    assert t.updated_at == before


def test_invalid_note_format(service, factory, admin_key):
    t = factory.ticket()
    with pytest.raises(InvalidInput):
        service.update(admin_key, t.number, TicketUpdateIn(note="hi", note_format="rtf"))
    assert t.thread_entries == []


def test_due_date_set_and_cleared(service, factory, admin_key):
    t = factory.ticket()

    service.update(admin_key, t.number, TicketUpdateIn(due_date="2025-01-31T17:30:00"))
    assert t.duedate == datetime(2025, 1, 31, 17, 30)

    service.update(admin_key, t.number, TicketUpdateIn(due_date=None))
    assert t.duedate is None


def test_parse_due_date():
    assert parse_due_date("2025-01-31") == datetime(2025, 1, 31)
    assert parse_due_date("") is None
    with pytest.raises(InvalidInput):
        parse_due_date("31/01/2025")


def test_ticket_cannot_be_its_own_parent(service, factory, admin_key):
    t = factory.ticket(number="100100")
    with pytest.raises(InvalidInput) as exc:
        service.update(admin_key, "100100", TicketUpdateIn(parent_ticket_number="100100"))
    assert exc.value.message == "Ticket cannot be its own parent"
    assert t.ticket_pid is None


def test_parent_that_is_a_child_is_rejected(service, factory, admin_key):
    root = factory.ticket()
    middle = factory.ticket(parent=root)
    leaf = factory.ticket()

    with pytest.raises(InvalidInput):
        service.update(admin_key, leaf.number, TicketUpdateIn(parent_ticket_number=middle.number))


def test_ticket_with_children_cannot_get_a_parent(service, factory, admin_key):
    parent = factory.ticket(number="111111")
    child = factory.ticket(number="222222", parent=parent)
    factory.ticket(number="333333")

    with pytest.raises(InvalidInput) as exc:
        service.update(admin_key, "111111", TicketUpdateIn(parent_ticket_number="333333"))
    assert exc.value.message == "Ticket with subtickets cannot become a child"
    assert parent.ticket_pid is None
    assert child.ticket_pid == parent.id


def test_missing_parent(service, factory, admin_key):
    t = factory.ticket()
    with pytest.raises(NotFound) as exc:
        service.update(admin_key, t.number, TicketUpdateIn(parent_ticket_number="999999"))
    assert exc.value.message == "Parent ticket not found"


def test_missing_ticket(service, admin_key):
    with pytest.raises(NotFound):
        service.update(admin_key, "424242", TicketUpdateIn(note="x"))


def test_update_requires_update_flag(service, factory):
    reader = factory.api_key(key="reader", can_read_tickets=True)
    t = factory.ticket()

    with pytest.raises(Unauthorized):
        service.update(reader, t.number, TicketUpdateIn(note="x"))


def test_permission_check_can_be_skipped_for_internal_callers(service, factory):
    t = factory.ticket()
    service.update(None, t.number, TicketUpdateIn(note="system note"), skip_permission_check=True)
    assert len(t.thread_entries) == 1
