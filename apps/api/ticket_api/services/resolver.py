"""Resolve caller supplied references to canonical entity IDs.

A reference is either a numeric ID (``7`` or ``"7"``) or a name. Names match
case-insensitively; departments also accept a ``"Parent / Child"`` path that
is walked from the root departments down. Resolution always ends by loading
the entity so that missing and inactive entities are reported the same way
regardless of how they were referenced.
"""

from dataclasses import dataclass
from enum import Enum
import re

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ..core.errors import Inactive, InvalidInput, NotFound
from ..models.department import Department
from ..models.help_topic import HelpTopic
from ..models.sla import SLA
from ..models.staff import Staff
from ..models.ticket_status import TicketStatus

NUMERIC_RE = re.compile(r"^-?\d+$")
PATH_SEPARATOR = "/"


class ReferenceKind(str, Enum):
    DEPARTMENT = "department"
    HELP_TOPIC = "help_topic"
    STATUS = "status"
    SLA = "sla"
    STAFF = "staff"


@dataclass(frozen=True)
class EntityKind:
    model: type
    label: str
    has_active_flag: bool = True


ENTITY_KINDS = {
    ReferenceKind.DEPARTMENT: EntityKind(Department, "Department"),
    ReferenceKind.HELP_TOPIC: EntityKind(HelpTopic, "Help Topic"),
    ReferenceKind.STATUS: EntityKind(TicketStatus, "Status", has_active_flag=False),
    ReferenceKind.SLA: EntityKind(SLA, "SLA"),
    ReferenceKind.STAFF: EntityKind(Staff, "Staff member"),
}


def is_numeric_reference(reference) -> bool:
    if isinstance(reference, bool):
        return False
    if isinstance(reference, int):
        return True
    return isinstance(reference, str) and bool(NUMERIC_RE.match(reference.strip()))


def normalize_reference(reference) -> int | str:
    """Classify a reference as an ID (int) or a trimmed name (str)."""
    if is_numeric_reference(reference):
        return int(reference.strip()) if isinstance(reference, str) else reference
    if isinstance(reference, str):
        return reference.strip()
    raise InvalidInput(f"Invalid reference: {reference!r}")


class EntityResolver:
    def __init__(self, session: Session):
        self.session = session

    def resolve(self, kind: ReferenceKind, reference) -> int:
        entity_kind = ENTITY_KINDS[kind]
        ref = normalize_reference(reference)
        if ref == "":
            raise InvalidInput(f"{entity_kind.label} reference cannot be empty")

        if isinstance(ref, str):
            entity_id = self._find_id_by_name(kind, ref)
            if entity_id is None:
                raise NotFound(f"{entity_kind.label} '{ref}' not found")
        else:
            entity_id = ref

        entity = self.session.get(entity_kind.model, entity_id)
        if not entity:
            raise NotFound(f"{entity_kind.label} not found")
        if entity_kind.has_active_flag and not entity.is_active:
            raise Inactive(f"{entity_kind.label} is not active")
        return entity.id

    def lookup_id(self, kind: ReferenceKind, reference) -> int | None:
        """Lenient variant for filters: no existence or active checks."""
        if reference is None:
            return None
        try:
            ref = normalize_reference(reference)
        except InvalidInput:
            return None
        if isinstance(ref, int):
            return ref
        if not ref:
            return None
        return self._find_id_by_name(kind, ref)

    def _find_id_by_name(self, kind: ReferenceKind, name: str) -> int | None:
        if kind is ReferenceKind.DEPARTMENT and PATH_SEPARATOR in name:
            return self.resolve_department_path(name)
        if kind is ReferenceKind.STAFF:
            return self._find_staff_id(name)

        model = ENTITY_KINDS[kind].model
        stmt = (
            select(model.id)
            .where(func.lower(model.name) == name.lower())
            .order_by(model.id.asc())
            .limit(1)
        )
        return self.session.scalar(stmt)

    def resolve_department_path(self, path: str) -> int | None:
        parts = [p.strip() for p in path.split(PATH_SEPARATOR)]
        current_id: int | None = None
        for index, part in enumerate(parts):
            if not part:
                return None
            stmt = select(Department.id).where(func.lower(Department.name) == part.lower())
            if index == 0:
                stmt = stmt.where(Department.pid.is_(None))
            else:
                stmt = stmt.where(Department.pid == current_id)
            current_id = self.session.scalar(stmt.order_by(Department.id.asc()).limit(1))
            if current_id is None:
                return None
        return current_id

    def _find_staff_id(self, name: str) -> int | None:
        lowered = name.lower()
        stmt = (
            select(Staff.id)
            .where(
                or_(
                    func.lower(Staff.username) == lowered,
                    func.lower(Staff.email) == lowered,
                )
            )
            .order_by(Staff.id.asc())
            .limit(1)
        )
        staff_id = self.session.scalar(stmt)
        if staff_id is not None:
            return staff_id
        # display name is derived, so compare in Python
        for staff in self.session.scalars(select(Staff).order_by(Staff.id.asc())):
            if staff.name.lower() == lowered:
                return staff.id
        return None
