from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer
from .staff import Base


class TicketStatus(Base):
    __tablename__ = "ticket_statuses"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(60), unique=True)
    # open / closed / archived / deleted
    state: Mapped[str] = mapped_column(String(16), default="open")
    sort: Mapped[int] = mapped_column(Integer, default=0)


class TicketPriority(Base):
    __tablename__ = "ticket_priorities"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(60), unique=True)
    urgency: Mapped[int] = mapped_column(Integer, default=0)
