"""Parent/child ticket relationships.

A ticket has at most one parent, a ticket that is already a child can not
become a parent and a ticket with children can not become a child, so
hierarchies never go deeper than two levels. The edge itself is written by
the subticket plugin; when the plugin is not installed every relationship
operation reports it as unavailable.
"""

import logging
from typing import Protocol

from sqlalchemy.orm import Session

from ..core.errors import Conflict, Internal, InvalidInput, NotFound, Unavailable
from ..core.settings import Settings
from ..models.api_key import ApiKey
from ..models.ticket import Ticket
from .host_tickets import HostTickets
from .permissions import Operation, authorize
from .projections import serialize_subticket
from .resolver import is_numeric_reference

logger = logging.getLogger(__name__)


class RelationshipCollaborator(Protocol):
    def is_available(self) -> bool: ...

    def get_parent(self, ticket: Ticket) -> Ticket | None: ...

    def get_children(self, ticket: Ticket) -> list[int]: ...

    def link_ticket(self, child_id: int, parent_id: int) -> bool: ...

    def unlink_ticket(self, child_id: int) -> bool: ...


class SubticketPlugin:
    """Stores the parent reference in ``tickets.ticket_pid``."""

    def __init__(self, host: HostTickets):
        self.host = host

    def is_available(self) -> bool:
        return True

    def get_parent(self, ticket: Ticket) -> Ticket | None:
        if not ticket.ticket_pid:
            return None
        return self.host.lookup_by_id(ticket.ticket_pid)

    def get_children(self, ticket: Ticket) -> list[int]:
        return self.host.children_ids(ticket)

    def link_ticket(self, child_id: int, parent_id: int) -> bool:
        child = self.host.lookup_by_id(child_id)
        if not child:
            return False
        child.ticket_pid = parent_id
        self.host.save(child)
        return True

    def unlink_ticket(self, child_id: int) -> bool:
        child = self.host.lookup_by_id(child_id)
        if not child:
            return False
        child.ticket_pid = None
        self.host.save(child)
        return True


class AbsentSubtickets:
    """Used when the subticket plugin is missing or disabled."""

    def is_available(self) -> bool:
        return False

    def get_parent(self, ticket: Ticket) -> Ticket | None:
        raise Unavailable("Subticket plugin not available")

    def get_children(self, ticket: Ticket) -> list[int]:
        raise Unavailable("Subticket plugin not available")

    def link_ticket(self, child_id: int, parent_id: int) -> bool:
        raise Unavailable("Subticket plugin not available")

    def unlink_ticket(self, child_id: int) -> bool:
        raise Unavailable("Subticket plugin not available")


def select_relationships(host: HostTickets, settings: Settings) -> RelationshipCollaborator:
    if settings.SUBTICKET_PLUGIN_ENABLED:
        return SubticketPlugin(host)
    return AbsentSubtickets()


def parse_ticket_id(value, message: str = "Invalid ticket ID") -> int:
    if not is_numeric_reference(value) or int(value) <= 0:
        raise InvalidInput(message)
    return int(value)


def validate_ticket_ref(value, message: str) -> str:
    # Accepts a public number ("ABC100") or an internal id; ids must be positive.
    if value is None or isinstance(value, bool):
        raise InvalidInput(message)
    ref = str(value).strip()
    if not ref:
        raise InvalidInput(message)
    if is_numeric_reference(ref) and int(ref) <= 0:
        raise InvalidInput(message)
    return ref


class SubticketService:
    def __init__(
        self,
        session: Session,
        settings: Settings,
        relationships: RelationshipCollaborator | None = None,
    ):
        self.session = session
        self.settings = settings
        self.host = HostTickets(session, settings)
        self.relationships = relationships or select_relationships(self.host, settings)

    def _require_plugin(self) -> None:
        if not self.relationships.is_available():
            raise Unavailable("Subticket plugin not available")

    def get_parent(self, credential: ApiKey, ticket_id) -> dict:
        child_id = parse_ticket_id(ticket_id)
        authorize(credential, Operation.MANAGE_SUBTICKETS)
        self._require_plugin()

        child = self.host.lookup_by_id(child_id)
        if not child:
            raise NotFound("Ticket not found")

        parent = self.relationships.get_parent(child)
        if not parent:
            return {"parent": None}
        return {"parent": serialize_subticket(parent)}

    def list_children(self, credential: ApiKey, ticket_id) -> dict:
        parent_id = parse_ticket_id(ticket_id)
        authorize(credential, Operation.MANAGE_SUBTICKETS)
        self._require_plugin()

        parent = self.host.lookup_by_id(parent_id)
        if not parent:
            raise NotFound("Ticket not found")

        children = []
        for child_id in self.relationships.get_children(parent) or []:
            child = self.host.lookup_by_id(child_id)
            if not child:
                # stale id from the plugin
                continue
            children.append(serialize_subticket(child))
        return {"children": children}

    def create_link(self, credential: ApiKey, parent_ref, child_ref) -> dict:
        parent_ref = validate_ticket_ref(parent_ref, "Invalid parent ticket number")
        child_ref = validate_ticket_ref(child_ref, "Invalid child ticket number")
        if parent_ref == child_ref:
            raise InvalidInput("Cannot link ticket to itself")

        parent = self.host.lookup(parent_ref)
        if not parent:
            raise NotFound("Parent ticket not found")
        child = self.host.lookup(child_ref)
        if not child:
            raise NotFound("Child ticket not found")
        if parent.id == child.id:
            raise InvalidInput("Cannot link ticket to itself")

        authorize(credential, Operation.MANAGE_SUBTICKETS)
        self._require_plugin()

        current = self.relationships.get_parent(child)
        if current is not None:
            if current.id == parent.id:
                raise Conflict("Subticket relationship already exists")
            raise Conflict("Child ticket already has a different parent")
        if parent.ticket_pid:
            raise InvalidInput("Parent ticket cannot be a child of another ticket")
        if self.host.children_ids(child):
            raise InvalidInput("Ticket with subtickets cannot become a child")

        if not self.relationships.link_ticket(child.id, parent.id):
            raise Internal("Failed to create subticket relationship")
        logger.info("linked ticket %s under parent %s", child.number, parent.number)

        self.session.refresh(child)
        return {
            "success": True,
            "message": "Subticket relationship created successfully",
            "parent": serialize_subticket(parent),
            "child": serialize_subticket(child),
        }

    def unlink_child(self, credential: ApiKey, child_ref) -> dict:
        child_ref = validate_ticket_ref(child_ref, "Invalid child ticket number")

        child = self.host.lookup(child_ref)
        if not child:
            raise NotFound("Child ticket not found")

        authorize(credential, Operation.MANAGE_SUBTICKETS)
        self._require_plugin()

        if self.relationships.get_parent(child) is None:
            raise NotFound("Child has no parent to unlink")

        if not self.relationships.unlink_ticket(child.id):
            raise Internal("Failed to remove subticket relationship")
        logger.info("unlinked ticket %s from its parent", child.number)

        self.session.refresh(child)
        return {
            "success": True,
            "message": "Subticket relationship removed successfully",
            "child": serialize_subticket(child),
        }
