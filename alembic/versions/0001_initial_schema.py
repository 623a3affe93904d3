"""initial schema: account, post, comment, account_follow

Revision ID: 0001
Revises:
Create Date: 2026-10-18 00:00:00
"""
from alembic import op
import sqlalchemy as sa


revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "account",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_account_username", "account", ["username"])
    op.create_index("ix_account_email", "account", ["email"])

    op.create_table(
        "post",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("account_id", sa.String(36), sa.ForeignKey("account.id"), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("removed", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_post_account_id", "post", ["account_id"])
    op.create_index("ix_post_account_id_created_at", "post", ["account_id", "created_at"])

    op.create_table(
        "comment",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("account_id", sa.String(36), sa.ForeignKey("account.id"), nullable=False),
        sa.Column("post_id", sa.String(36), sa.ForeignKey("post.id"), nullable=False),
        sa.Column("comment_id", sa.String(36), sa.ForeignKey("comment.id"), nullable=True),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("removed", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_comment_comment_id", "comment", ["comment_id"])
    op.create_index("ix_comment_post_id_created_at", "comment", ["post_id", "created_at"])
    op.create_index("ix_comment_account_id_created_at", "comment", ["account_id", "created_at"])

    op.create_table(
        "account_follow",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("account_id", sa.String(36), sa.ForeignKey("account.id"), nullable=False),
        sa.Column(
            "account_id_followed", sa.String(36), sa.ForeignKey("account.id"), nullable=False
        ),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("unfollowed", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index(
        "uq_account_follow_active",
        "account_follow",
        ["account_id", "account_id_followed"],
        unique=True,
        postgresql_where=sa.text("NOT unfollowed"),
        sqlite_where=sa.text("NOT unfollowed"),
    )
    op.create_index("ix_account_follow_account_id_followed", "account_follow", ["account_id_followed"])


def downgrade() -> None:
    op.drop_table("account_follow")
    op.drop_table("comment")
    op.drop_table("post")
    op.drop_table("account")
