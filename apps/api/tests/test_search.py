from datetime import datetime, timedelta, timezone

import pytest

from ticket_api.core.errors import Unauthorized
from ticket_api.models import Ticket
from ticket_api.services.search import SearchParams, SearchService, SortField

BASE_TIME = datetime(2025, 1, 1, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(db, settings):
    return SearchService(db, settings)


@pytest.fixture
def many_tickets(db):
    tickets = [
        Ticket(
            number=f"{200000 + i}",
            subject=f"Bulk ticket {i}",
            status_id=1,
            created_at=BASE_TIME + timedelta(minutes=i),
            updated_at=BASE_TIME + timedelta(minutes=i),
        )
        for i in range(150)
    ]
    db.add_all(tickets)
    db.commit()
    return tickets


@pytest.mark.parametrize(
    "limit,expected",
    [(None, 20), ("", 20), (0, 20), (-5, 20), ("abc", 20), (50, 50), ("75", 75), (500, 100)],
)
def test_limit_is_clamped(service, many_tickets, admin_key, limit, expected):
    assert len(service.search(admin_key, SearchParams(limit=limit))) == expected


def test_negative_offset_is_treated_as_zero(service, many_tickets, admin_key):
    first = service.search(admin_key, SearchParams(limit=5))
    shifted = service.search(admin_key, SearchParams(limit=5, offset=-3))
    assert [t["id"] for t in first] == [t["id"] for t in shifted]

    page2 = service.search(admin_key, SearchParams(limit=5, offset=5))
    assert page2[0]["number"] == "200144"


def test_default_sort_is_newest_first(service, many_tickets, admin_key):
    numbers = [t["number"] for t in service.search(admin_key, SearchParams(limit=3))]
    assert numbers == ["200149", "200148", "200147"]


def test_sort_by_number_and_aliases(service, factory, admin_key):
    factory.ticket(number="300003")
    factory.ticket(number="300001")
    factory.ticket(number="300002")

    numbers = [t["number"] for t in service.search(admin_key, SearchParams(sort="number"))]
    assert numbers == ["300001", "300002", "300003"]
    assert SortField.from_string("ID") is SortField.NUMBER
    assert SortField.from_string("modified") is SortField.UPDATED
    assert SortField.from_string("bogus") is SortField.CREATED


def test_sort_by_updated(service, factory, admin_key):
    a = factory.ticket(updated_at=BASE_TIME + timedelta(days=3))
    b = factory.ticket(updated_at=BASE_TIME + timedelta(days=1))

    ids = [t["id"] for t in service.search(admin_key, SearchParams(sort="updated"))]
    assert ids == [a.id, b.id]


def test_subject_query_is_case_insensitive_substring(service, factory, admin_key):
    hit = factory.ticket(subject="Laptop battery swelling")
    factory.ticket(subject="Monitor flicker")
    factory.ticket(subject="100% CPU")

    results = service.search(admin_key, SearchParams(query="BATTERY"))
    assert [t["id"] for t in results] == [hit.id]
    # wildcards in the query are literal
    assert len(service.search(admin_key, SearchParams(query="%"))) == 1


def test_status_and_department_filters(service, factory, admin_key):
    support = factory.department("Support")
    match = factory.ticket(department=support, status_id=3)
    factory.ticket(department=support, status_id=1)
    factory.ticket(status_id=3)

    results = service.search(admin_key, SearchParams(status="closed", department="Support"))
    assert [t["id"] for t in results] == [match.id]

    by_id = service.search(admin_key, SearchParams(status="3", department=str(support.id)))
    assert [t["id"] for t in by_id] == [match.id]


def test_unresolved_filter_returns_nothing(service, factory, admin_key):
    factory.ticket()
    assert service.search(admin_key, SearchParams(status="No Such Status")) == []
    assert service.search(admin_key, SearchParams(department="No Such Dept")) == []


def test_projection_has_no_thread(service, factory, admin_key):
    staff = factory.staff("jdoe", first_name="Jane", last_name="Doe")
    t = factory.ticket(staff=staff)
    factory.note(t)

    item = service.search(admin_key, SearchParams())[0]
    assert "thread" not in item
    assert item["staff"] == "Jane Doe"
    assert item["status"] == "Open"


def test_search_accepts_read_flag(service, factory):
    factory.ticket()
    reader = factory.api_key(key="reader", can_read_tickets=True)
    assert len(service.search(reader, SearchParams())) == 1

    nobody = factory.api_key(key="nobody", can_create_tickets=True)
    with pytest.raises(Unauthorized):
        service.search(nobody, SearchParams())


def test_projection_relationships_are_loaded_in_bulk(service, factory, admin_key, db, statements):
    for i in range(10):
        factory.ticket(
            department=factory.department(f"Dept {i}"),
            staff=factory.staff(f"agent{i}", first_name="Agent", last_name=str(i)),
        )
    db.expunge_all()
    statements.clear()

    results = service.search(admin_key, SearchParams())

    assert len(results) == 10
    assert {r["department"] for r in results} == {f"Dept {i}" for i in range(10)}
    # one query for the page plus at most one per relationship
    assert len(statements) <= 8
