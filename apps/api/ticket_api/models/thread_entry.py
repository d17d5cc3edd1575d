from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, Text, DateTime, ForeignKey, func, String
from .staff import Base

class ThreadEntry(Base):
    __tablename__ = "thread_entries"

    id: Mapped[int] = mapped_column(primary_key=True)

    ticket_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("tickets.id", ondelete="CASCADE")
    )

    # M: message, R: response, N: internal note
    type: Mapped[str] = mapped_column(String(1), default="M")
    poster: Mapped[str] = mapped_column(String(128), server_default="")
    title: Mapped[str] = mapped_column(String(255), server_default="")
    body: Mapped[str] = mapped_column(Text)
    # markdown / html / text; read by the rendering plugin
    format: Mapped[str] = mapped_column(String(16), default="text")

    staff_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("staff.id", ondelete="SET NULL"), nullable=True
    )
    user_name: Mapped[str | None] = mapped_column(String(128), nullable=True)

    created_at: Mapped[DateTime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
