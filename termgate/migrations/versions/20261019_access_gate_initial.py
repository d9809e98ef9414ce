"""access terms and content objects

Revision ID: 20261019_access_gate_initial
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_access_gate_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "access_term",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_access_term_slug", "access_term", ["slug"], unique=True)

    op.create_table(
        "content_object",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("object_type", sa.String(length=64), nullable=False),
        sa.Column("parent_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(length=255), nullable=False, server_default=""),
        sa.Column(
            "access_term_id",
            sa.Integer(),
            sa.ForeignKey("access_term.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_content_object_type_term", "content_object", ["object_type", "access_term_id"])
    op.create_index("ix_content_object_parent", "content_object", ["parent_id"])


def downgrade():
    op.drop_index("ix_content_object_parent", table_name="content_object")
    op.drop_index("ix_content_object_type_term", table_name="content_object")
    op.drop_table("content_object")
    op.drop_index("ix_access_term_slug", table_name="access_term")
    op.drop_table("access_term")
