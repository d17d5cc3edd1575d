from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import String, Integer, Boolean, DateTime, ForeignKey, func
from .staff import Base, Staff
from .department import Department, Team
from .help_topic import HelpTopic
from .sla import SLA
from .ticket_status import TicketStatus, TicketPriority
from .thread_entry import ThreadEntry

class Ticket(Base):
    __tablename__ = "tickets"

    id: Mapped[int] = mapped_column(primary_key=True)
    # Public ticket number; opaque string, distinct from id.
    number: Mapped[str] = mapped_column(String(20), unique=True, index=True)
    subject: Mapped[str] = mapped_column(String(255), default="")

    dept_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    topic_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("help_topics.id", ondelete="SET NULL"), nullable=True)
    status_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("ticket_statuses.id"), nullable=True)
    priority_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("ticket_priorities.id"), nullable=True)
    staff_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True)
    team_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("teams.id", ondelete="SET NULL"), nullable=True)
    sla_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("slas.id", ondelete="SET NULL"), nullable=True)
    ticket_pid: Mapped[int | None] = mapped_column(Integer, ForeignKey("tickets.id", ondelete="SET NULL"), nullable=True, index=True)

    user_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    user_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    source: Mapped[str] = mapped_column(String(32), default="API")
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)

    is_overdue: Mapped[bool] = mapped_column(Boolean, default=False)
    is_answered: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    duedate: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    closed_at: Mapped[DateTime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    department: Mapped[Department | None] = relationship(Department)
    topic: Mapped[HelpTopic | None] = relationship(HelpTopic)
    status: Mapped[TicketStatus | None] = relationship(TicketStatus)
    priority: Mapped[TicketPriority | None] = relationship(TicketPriority)
    staff: Mapped[Staff | None] = relationship(Staff)
    team: Mapped[Team | None] = relationship(Team)
    sla: Mapped[SLA | None] = relationship(SLA)

    thread_entries: Mapped[list[ThreadEntry]] = relationship(
        ThreadEntry,
        order_by=ThreadEntry.id,
        cascade="all, delete-orphan",
    )

    @property
    def is_closed(self) -> bool:
        return self.closed_at is not None
