from .staff import Base, Staff
from .department import Department, Team
from .help_topic import HelpTopic
from .sla import SLA
from .ticket_status import TicketStatus, TicketPriority
from .thread_entry import ThreadEntry
from .ticket import Ticket
from .api_key import ApiKey

__all__ = [
    "ApiKey",
    "Base",
    "Department",
    "HelpTopic",
    "SLA",
    "Staff",
    "Team",
    "ThreadEntry",
    "Ticket",
    "TicketPriority",
    "TicketStatus",
]
