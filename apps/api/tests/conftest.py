from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from ticket_api.core.seed import seed_ticket_priorities, seed_ticket_statuses
from ticket_api.core.settings import Settings, get_settings
from ticket_api.db import get_session
from ticket_api.main import app
from ticket_api.models import (
    SLA,
    ApiKey,
    Base,
    Department,
    HelpTopic,
    Staff,
    ThreadEntry,
    Ticket,
)

BASE_TIME = datetime(2025, 1, 1, 9, 0, 0, tzinfo=timezone.utc)

ALL_FLAGS = (
    "can_create_tickets",
    "can_read_tickets",
    "can_update_tickets",
    "can_search_tickets",
    "can_delete_tickets",
    "can_read_stats",
    "can_manage_subtickets",
)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    SessionTesting = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    with SessionTesting() as session:
        seed_ticket_statuses(session)
        seed_ticket_priorities(session)
        yield session


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        SUBTICKET_PLUGIN_ENABLED=True,
        MARKDOWN_PLUGIN_ENABLED=False,
        REQUIRE_MARKDOWN_PLUGIN=False,
    )


class Factory:
    """Small row builders; every call commits so ids are usable right away."""

    def __init__(self, session):
        self.session = session
        self._seq = 0

    def _add(self, obj):
        self.session.add(obj)
        self.session.commit()
        return obj

    def department(self, name, parent=None, is_active=True, **kw):
        return self._add(
            Department(name=name, pid=parent.id if parent else None, is_active=is_active, **kw)
        )

    def sla(self, name, is_active=True):
        return self._add(SLA(name=name, is_active=is_active))

    def topic(self, name, department=None, sla=None, is_active=True):
        return self._add(
            HelpTopic(
                name=name,
                is_active=is_active,
                dept_id=department.id if department else None,
                sla_id=sla.id if sla else None,
            )
        )

    def staff(self, username, first_name=None, last_name=None, email=None, is_active=True):
        return self._add(
            Staff(
                username=username,
                first_name=first_name,
                last_name=last_name,
                email=email,
                is_active=is_active,
            )
        )

    def ticket(
        self,
        number=None,
        subject="Printer on fire",
        department=None,
        status_id=1,
        staff=None,
        parent=None,
        created_at=None,
        updated_at=None,
        closed_at=None,
        is_overdue=False,
        **kw,
    ):
        self._seq += 1
        created = created_at or BASE_TIME + timedelta(minutes=self._seq)
        # a raw ticket_pid may point at a ticket that does not exist
        ticket_pid = kw.pop("ticket_pid", parent.id if parent else None)
        return self._add(
            Ticket(
                number=number or f"{500000 + self._seq}",
                subject=subject,
                dept_id=department.id if department else None,
                status_id=status_id,
                staff_id=staff.id if staff else None,
                ticket_pid=ticket_pid,
                created_at=created,
                updated_at=updated_at or created,
                closed_at=closed_at,
                is_overdue=is_overdue,
                **kw,
            )
        )

    def note(self, ticket, body="note", entry_type="N"):
        return self._add(ThreadEntry(ticket_id=ticket.id, type=entry_type, poster="API", body=body, format="text"))

    def api_key(self, key="test-key", ip_address="*", is_active=True, all_flags=False, **flags):
        values = {flag: all_flags for flag in ALL_FLAGS}
        values.update(flags)
        return self._add(ApiKey(key=key, ip_address=ip_address, is_active=is_active, **values))


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def admin_key(factory):
    return factory.api_key(key="admin-key", all_flags=True)


@pytest.fixture
def client(db, settings):
    def override_session():
        yield db

    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers(admin_key):
    return {"X-API-Key": admin_key.key}


@pytest.fixture
def statements(engine):
    """SQL statements executed on the test engine while the fixture is active."""
    seen = []

    def record(conn, cursor, statement, parameters, context, executemany):
        seen.append(statement)

    event.listen(engine, "before_cursor_execute", record)
    yield seen
    event.remove(engine, "before_cursor_execute", record)
