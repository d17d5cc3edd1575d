from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean, Integer, ForeignKey
from .staff import Base


class HelpTopic(Base):
    __tablename__ = "help_topics"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(128))
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # Department that tickets filed under this topic are routed to.
    dept_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("departments.id", ondelete="SET NULL"), nullable=True)
    sla_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("slas.id", ondelete="SET NULL"), nullable=True)
    priority_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("ticket_priorities.id", ondelete="SET NULL"), nullable=True)
