"""Initial schema: reference tables, tickets, thread entries, api keys

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "a1c3e5f7b9d2"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "departments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("pid", sa.Integer(), sa.ForeignKey("departments.id", ondelete="SET NULL"), nullable=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_public", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(125), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_table(
        "staff",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(32), nullable=False, unique=True),
        sa.Column("first_name", sa.String(32), nullable=True),
        sa.Column("last_name", sa.String(32), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("dept_id", sa.Integer(), sa.ForeignKey("departments.id", ondelete="SET NULL"), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "slas",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(64), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("grace_period", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_table(
        "ticket_statuses",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(60), nullable=False, unique=True),
        sa.Column("state", sa.String(16), nullable=False, server_default="open"),
        sa.Column("sort", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_table(
        "ticket_priorities",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(60), nullable=False, unique=True),
        sa.Column("urgency", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_table(
        "help_topics",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(128), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("dept_id", sa.Integer(), sa.ForeignKey("departments.id", ondelete="SET NULL"), nullable=True),
        sa.Column("sla_id", sa.Integer(), sa.ForeignKey("slas.id", ondelete="SET NULL"), nullable=True),
        sa.Column("priority_id", sa.Integer(), sa.ForeignKey("ticket_priorities.id", ondelete="SET NULL"), nullable=True),
    )
    op.create_table(
        "tickets",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("number", sa.String(20), nullable=False),
        sa.Column("subject", sa.String(255), nullable=False, server_default=""),
        sa.Column("dept_id", sa.Integer(), sa.ForeignKey("departments.id", ondelete="SET NULL"), nullable=True),
        sa.Column("topic_id", sa.Integer(), sa.ForeignKey("help_topics.id", ondelete="SET NULL"), nullable=True),
        sa.Column("status_id", sa.Integer(), sa.ForeignKey("ticket_statuses.id"), nullable=True),
        sa.Column("priority_id", sa.Integer(), sa.ForeignKey("ticket_priorities.id"), nullable=True),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id", ondelete="SET NULL"), nullable=True),
        sa.Column("team_id", sa.Integer(), sa.ForeignKey("teams.id", ondelete="SET NULL"), nullable=True),
        sa.Column("sla_id", sa.Integer(), sa.ForeignKey("slas.id", ondelete="SET NULL"), nullable=True),
        sa.Column("ticket_pid", sa.Integer(), sa.ForeignKey("tickets.id", ondelete="SET NULL"), nullable=True),
        sa.Column("user_name", sa.String(128), nullable=True),
        sa.Column("user_email", sa.String(255), nullable=True),
        sa.Column("source", sa.String(32), nullable=False, server_default="API"),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("is_overdue", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_answered", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("duedate", sa.DateTime(timezone=True), nullable=True),
        sa.Column("closed_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_tickets_number", "tickets", ["number"], unique=True)
    op.create_index("ix_tickets_ticket_pid", "tickets", ["ticket_pid"], unique=False)
    op.create_table(
        "thread_entries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ticket_id", sa.Integer(), sa.ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False),
        sa.Column("type", sa.String(1), nullable=False, server_default="M"),
        sa.Column("poster", sa.String(128), nullable=False, server_default=""),
        sa.Column("title", sa.String(255), nullable=False, server_default=""),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("format", sa.String(16), nullable=False, server_default="text"),
        sa.Column("staff_id", sa.Integer(), sa.ForeignKey("staff.id", ondelete="SET NULL"), nullable=True),
        sa.Column("user_name", sa.String(128), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "api_keys",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("key", sa.String(128), nullable=False),
        sa.Column("ip_address", sa.String(64), nullable=False, server_default="*"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("can_create_tickets", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_read_tickets", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_update_tickets", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_search_tickets", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_delete_tickets", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_read_stats", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_manage_subtickets", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_api_keys_key", "api_keys", ["key"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_api_keys_key", table_name="api_keys")
    op.drop_table("api_keys")
    op.drop_table("thread_entries")
    op.drop_index("ix_tickets_ticket_pid", table_name="tickets")
    op.drop_index("ix_tickets_number", table_name="tickets")
    op.drop_table("tickets")
    op.drop_table("help_topics")
    op.drop_table("ticket_priorities")
    op.drop_table("ticket_statuses")
    op.drop_table("slas")
    op.drop_table("staff")
    op.drop_table("teams")
    op.drop_table("departments")
