"""create core tables

Revision ID: 20261019_0001
Revises: 
Create Date: 2026-10-19
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20261019_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "auth_sessions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("token", sa.String(length=128), nullable=False),
        sa.Column("user_id", sa.String(length=36), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_auth_sessions_token", "auth_sessions", ["token"], unique=True)
    op.create_index("ix_auth_sessions_user_id", "auth_sessions", ["user_id"], unique=False)

    op.create_table(
        "habits",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("sort_order", sa.Integer(), nullable=False),
        sa.Column("reminder_time", sa.String(length=5), nullable=True),
        sa.Column("archived_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_habits_user_id", "habits", ["user_id"], unique=False)

    op.create_table(
        "habit_completions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("habit_id", sa.String(length=36), sa.ForeignKey("habits.id", ondelete="CASCADE"), nullable=False),
        sa.Column("completed_on", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("habit_id", "completed_on", name="uq_habit_completion_per_day"),
    )
    op.create_index("ix_habit_completions_user_id", "habit_completions", ["user_id"], unique=False)
    op.create_index("ix_habit_completions_habit_id", "habit_completions", ["habit_id"], unique=False)
    op.create_index("ix_habit_completions_completed_on", "habit_completions", ["completed_on"], unique=False)

    op.create_table(
        "habit_reminder_dispatches",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("habit_id", sa.String(length=36), sa.ForeignKey("habits.id", ondelete="CASCADE"), nullable=False),
        sa.Column("local_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("habit_id", "local_date", name="uq_habit_reminder_per_day"),
    )
    op.create_index("ix_habit_reminder_dispatches_user_id", "habit_reminder_dispatches", ["user_id"], unique=False)
    op.create_index("ix_habit_reminder_dispatches_habit_id", "habit_reminder_dispatches", ["habit_id"], unique=False)

    op.create_table(
        "partner_invites",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("inviter_user_id", sa.String(length=36), nullable=False),
        sa.Column("invitee_email", sa.String(length=320), nullable=False),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="pending"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("inviter_user_id", "invitee_email", "status", name="uq_partner_invite_pair_status"),
    )
    op.create_index("ix_partner_invites_inviter_user_id", "partner_invites", ["inviter_user_id"], unique=False)
    op.create_index("ix_partner_invites_invitee_email", "partner_invites", ["invitee_email"], unique=False)

    op.create_table(
        "partnerships",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_a_id", sa.String(length=36), nullable=False),
        sa.Column("user_b_id", sa.String(length=36), nullable=False),
        sa.Column("started_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_a_id", "user_b_id", name="uq_partnership_pair"),
    )
    op.create_index("ix_partnerships_user_a_id", "partnerships", ["user_a_id"], unique=False)
    op.create_index("ix_partnerships_user_b_id", "partnerships", ["user_b_id"], unique=False)

    op.create_table(
        "partner_nudges",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("sender_user_id", sa.String(length=36), nullable=False),
        sa.Column("receiver_user_id", sa.String(length=36), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_partner_nudges_sender_user_id", "partner_nudges", ["sender_user_id"], unique=False)
    op.create_index("ix_partner_nudges_receiver_user_id", "partner_nudges", ["receiver_user_id"], unique=False)
    op.create_index("ix_partner_nudges_created_at", "partner_nudges", ["created_at"], unique=False)

    op.create_table(
        "push_subscriptions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=36), nullable=False),
        sa.Column("endpoint", sa.Text(), nullable=False, unique=True),
        sa.Column("p256dh", sa.String(length=255), nullable=False),
        sa.Column("auth", sa.String(length=255), nullable=False),
        sa.Column("expiration_time", sa.DateTime(), nullable=True),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_push_subscriptions_user_id", "push_subscriptions", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_push_subscriptions_user_id", table_name="push_subscriptions")
    op.drop_table("push_subscriptions")

    op.drop_index("ix_partner_nudges_created_at", table_name="partner_nudges")
    op.drop_index("ix_partner_nudges_receiver_user_id", table_name="partner_nudges")
    op.drop_index("ix_partner_nudges_sender_user_id", table_name="partner_nudges")
    op.drop_table("partner_nudges")

    op.drop_index("ix_partnerships_user_b_id", table_name="partnerships")
    op.drop_index("ix_partnerships_user_a_id", table_name="partnerships")
    op.drop_table("partnerships")

    op.drop_index("ix_partner_invites_invitee_email", table_name="partner_invites")
    op.drop_index("ix_partner_invites_inviter_user_id", table_name="partner_invites")
    op.drop_table("partner_invites")

    op.drop_index("ix_habit_reminder_dispatches_habit_id", table_name="habit_reminder_dispatches")
    op.drop_index("ix_habit_reminder_dispatches_user_id", table_name="habit_reminder_dispatches")
    op.drop_table("habit_reminder_dispatches")

    op.drop_index("ix_habit_completions_completed_on", table_name="habit_completions")
    op.drop_index("ix_habit_completions_habit_id", table_name="habit_completions")
    op.drop_index("ix_habit_completions_user_id", table_name="habit_completions")
    op.drop_table("habit_completions")

    op.drop_index("ix_habits_user_id", table_name="habits")
    op.drop_table("habits")

    op.drop_index("ix_auth_sessions_user_id", table_name="auth_sessions")
    op.drop_index("ix_auth_sessions_token", table_name="auth_sessions")
    op.drop_table("auth_sessions")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
