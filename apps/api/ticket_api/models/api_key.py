from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Boolean, Text, DateTime, func
from .staff import Base


class ApiKey(Base):
    __tablename__ = "api_keys"

    id: Mapped[int] = mapped_column(primary_key=True)
    key: Mapped[str] = mapped_column(String(128), unique=True, index=True)
    # "*" accepts requests from any address
    ip_address: Mapped[str] = mapped_column(String(64), default="*")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    can_create_tickets: Mapped[bool] = mapped_column(Boolean, default=False)
    can_read_tickets: Mapped[bool] = mapped_column(Boolean, default=False)
    can_update_tickets: Mapped[bool] = mapped_column(Boolean, default=False)
    can_search_tickets: Mapped[bool] = mapped_column(Boolean, default=False)
    can_delete_tickets: Mapped[bool] = mapped_column(Boolean, default=False)
    can_read_stats: Mapped[bool] = mapped_column(Boolean, default=False)
    can_manage_subtickets: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[DateTime] = mapped_column(DateTime(timezone=True), server_default=func.now())
