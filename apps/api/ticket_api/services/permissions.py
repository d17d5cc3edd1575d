from enum import Enum

from ..core.errors import Forbidden, Unauthorized
from ..models.api_key import ApiKey


class Operation(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    READ = "read"
    SEARCH = "search"
    DELETE = "delete"
    STATS = "stats"
    MANAGE_SUBTICKETS = "manage_subtickets"


# Ordered fallback chain per operation; the first flag set on the key grants access.
PERMISSION_RULES: dict[Operation, tuple[str, ...]] = {
    Operation.CREATE: ("can_create_tickets",),
    Operation.UPDATE: ("can_update_tickets",),
    Operation.READ: ("can_read_tickets",),
    Operation.SEARCH: ("can_search_tickets", "can_read_tickets"),
    Operation.DELETE: ("can_delete_tickets",),
    Operation.STATS: ("can_read_stats", "can_read_tickets"),
    Operation.MANAGE_SUBTICKETS: ("can_manage_subtickets",),
}

UNAUTHORIZED_MESSAGES = {
    Operation.CREATE: "API key not authorized to create tickets",
    Operation.UPDATE: "API key not authorized to update tickets",
    Operation.READ: "API key not authorized to read tickets",
    Operation.SEARCH: "API key not authorized to search tickets",
    Operation.DELETE: "API key not authorized to delete tickets",
    Operation.STATS: "API key not authorized to read ticket statistics",
    Operation.MANAGE_SUBTICKETS: "API key not authorized for subticket operations",
}

# Operations that report a missing flag as 403 instead of 401.
FORBIDDEN_OPERATIONS = {Operation.MANAGE_SUBTICKETS}


def has_permission(credential: ApiKey | None, operation: Operation) -> bool:
    if credential is None:
        return False
    for flag in PERMISSION_RULES[operation]:
        if getattr(credential, flag, False):
            return True
    return False


def authorize(credential: ApiKey | None, operation: Operation) -> None:
    if has_permission(credential, operation):
        return
    message = UNAUTHORIZED_MESSAGES[operation]
    if operation in FORBIDDEN_OPERATIONS:
        raise Forbidden(message)
    raise Unauthorized(message)


def granted_operations(credential: ApiKey | None) -> list[Operation]:
    return [op for op in Operation if has_permission(credential, op)]
