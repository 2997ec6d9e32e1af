"""ledger_core_schema

Revision ID: 3c9e1a7b5d20
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "3c9e1a7b5d20"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("external_id", sa.String(64), nullable=False),
        sa.Column("referral_code", sa.String(16), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("email", sa.Text(), nullable=True),
        sa.Column("telegram_username", sa.Text(), nullable=True),
        sa.Column("whitelisted", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
        sa.UniqueConstraint("external_id", name="uq_users_external_id"),
        sa.UniqueConstraint("referral_code", name="uq_users_referral_code"),
    )
    op.create_index("idx_users_created_at", "users", ["created_at"])

    op.create_table(
        "referrals",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("referrer_external_id", sa.String(64), nullable=False),
        sa.Column("referee_external_id", sa.String(64), nullable=False),
        sa.Column("whitelist_bonus_awarded_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "referrer_external_id <> referee_external_id",
            name="ck_referrals_no_self_referral",
        ),
        sa.ForeignKeyConstraint(["referrer_external_id"], ["users.external_id"]),
        sa.ForeignKeyConstraint(["referee_external_id"], ["users.external_id"]),
        sa.UniqueConstraint("referee_external_id", name="uq_referrals_referee_external_id"),
    )
    op.create_index(
        "idx_referrals_referrer_created",
        "referrals",
        ["referrer_external_id", "created_at"],
    )

    op.create_table(
        "quests",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("platform", sa.String(32), nullable=False),
        sa.Column("action", sa.String(16), nullable=False),
        sa.Column("target", sa.String(128), nullable=True),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("points > 0", name="ck_quests_points_positive"),
        sa.CheckConstraint("action IN ('GROUP','INVITE','FOLLOW','VISIT')", name="ck_quests_action"),
    )
    op.create_index("idx_quests_action", "quests", ["action"])
    op.create_index("idx_quests_expires_at", "quests", ["expires_at"])

    op.create_table(
        "quest_completions",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("user_external_id", sa.String(64), nullable=False),
        sa.Column("quest_id", sa.BigInteger(), nullable=False),
        sa.Column("fully_completed", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["user_external_id"], ["users.external_id"]),
        sa.ForeignKeyConstraint(["quest_id"], ["quests.id"]),
    )
    op.create_index(
        "idx_quest_completions_user_created",
        "quest_completions",
        ["user_external_id", "created_at"],
    )
    op.create_index(
        "uq_quest_completions_user_quest_completed",
        "quest_completions",
        ["user_external_id", "quest_id"],
        unique=True,
        postgresql_where=sa.text("fully_completed"),
    )

    op.create_table(
        "points_history",
        sa.Column("id", sa.BigInteger(), primary_key=True),
        sa.Column("user_external_id", sa.String(64), nullable=False),
        sa.Column("points", sa.Integer(), nullable=False),
        sa.Column("activity", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("points <> 0", name="ck_points_history_points_non_zero"),
        sa.ForeignKeyConstraint(["user_external_id"], ["users.external_id"]),
    )
    op.create_index(
        "idx_points_history_user_created",
        "points_history",
        ["user_external_id", "created_at"],
    )
    op.execute(
        """
        CREATE OR REPLACE FUNCTION fn_points_history_append_only()
        RETURNS trigger
        LANGUAGE plpgsql
        AS $$
        BEGIN
            RAISE EXCEPTION 'points_history is append-only';
        END;
        $$;
        """
    )
    op.execute(
        """
        CREATE TRIGGER trg_points_history_append_only
        BEFORE UPDATE OR DELETE ON points_history
        FOR EACH ROW
        EXECUTE FUNCTION fn_points_history_append_only();
        """
    )


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS trg_points_history_append_only ON points_history;")
    op.execute("DROP FUNCTION IF EXISTS fn_points_history_append_only();")
    op.drop_index("idx_points_history_user_created", table_name="points_history")
    op.drop_table("points_history")
    op.drop_index("uq_quest_completions_user_quest_completed", table_name="quest_completions")
    op.drop_index("idx_quest_completions_user_created", table_name="quest_completions")
    op.drop_table("quest_completions")
    op.drop_index("idx_quests_expires_at", table_name="quests")
    op.drop_index("idx_quests_action", table_name="quests")
    op.drop_table("quests")
    op.drop_index("idx_referrals_referrer_created", table_name="referrals")
    op.drop_table("referrals")
    op.drop_index("idx_users_created_at", table_name="users")
    op.drop_table("users")
