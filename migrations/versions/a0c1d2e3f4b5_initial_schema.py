"""initial schema: users, sessions, documents, ideas, homepage content, docs/blog

Revision ID: a0c1d2e3f4b5
Revises:
Create Date: 2026-10-19 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a0c1d2e3f4b5'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Check if tables already exist (idempotent against databases created by create_all)
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    existing_tables = set(inspector.get_table_names())

    if "users" not in existing_tables:
        op.create_table(
            "users",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("email", sa.String(320), nullable=False, unique=True),
            sa.Column("password_hash", sa.String(255), nullable=False),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("role", sa.String(16), nullable=False, server_default="user"),
            sa.Column("plan", sa.String(16), nullable=False, server_default="free"),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    # Session rows: expires is an absolute Unix timestamp (seconds).
    if "sessions" not in existing_tables:
        op.create_table(
            "sessions",
            sa.Column("id", sa.String(128), primary_key=True),
            sa.Column("expires", sa.Integer(), nullable=False),
            sa.Column("data", sa.Text(), nullable=False),
        )
        op.create_index("idx_sessions_expires", "sessions", ["expires"])

    if "documents" not in existing_tables:
        op.create_table(
            "documents",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("title", sa.String(255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("file_name", sa.String(512), nullable=False),
            sa.Column("original_name", sa.String(255), nullable=False),
            sa.Column("mime_type", sa.String(128), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    if "ideas" not in existing_tables:
        op.create_table(
            "ideas",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("title", sa.String(255), nullable=False),
            sa.Column("description", sa.Text(), nullable=True),
            sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
            sa.Column("admin_notes", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_ideas_status"),
        )
        op.create_index("ix_ideas_user_id", "ideas", ["user_id"])
        op.create_index("ix_ideas_status", "ideas", ["status"])

    if "companies" not in existing_tables:
        op.create_table(
            "companies",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column("logo_url", sa.String(1024), nullable=True),
            sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        )

    if "testimonials" not in existing_tables:
        op.create_table(
            "testimonials",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("quote", sa.Text(), nullable=False),
            sa.Column("author_name", sa.String(255), nullable=False),
            sa.Column("author_title", sa.String(255), nullable=False, server_default=""),
            sa.Column("avatar_url", sa.String(1024), nullable=True),
            sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        )

    if "docs" not in existing_tables:
        op.create_table(
            "docs",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("title", sa.String(255), nullable=False),
            sa.Column("slug", sa.String(255), nullable=False, unique=True),
            sa.Column("body", sa.Text(), nullable=False, server_default=""),
            sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )

    if "blog_posts" not in existing_tables:
        op.create_table(
            "blog_posts",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("title", sa.String(255), nullable=False),
            sa.Column("slug", sa.String(255), nullable=False, unique=True),
            sa.Column("excerpt", sa.Text(), nullable=True),
            sa.Column("body", sa.Text(), nullable=False, server_default=""),
            sa.Column("author_name", sa.String(255), nullable=False, server_default=""),
            sa.Column("published_at", sa.DateTime(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
            sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        )


def downgrade() -> None:
    op.drop_table("blog_posts")
    op.drop_table("docs")
    op.drop_table("testimonials")
    op.drop_table("companies")
    op.drop_index("ix_ideas_status", table_name="ideas")
    op.drop_index("ix_ideas_user_id", table_name="ideas")
    op.drop_table("ideas")
    op.drop_table("documents")
    op.drop_index("idx_sessions_expires", table_name="sessions")
    op.drop_table("sessions")
    op.drop_table("users")
