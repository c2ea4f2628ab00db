"""Add inbox triage columns to conversations.

Revision ID: 002_conversation_triage
Revises: 001_initial
Create Date: 2026-10-02

category, needs_response, last_responder_id and priority let the inbox filter
landlord inquiries and surface threads waiting on a reply.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import UUID

revision: str = "002_conversation_triage"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "conversations",
        sa.Column("category", sa.String(30), nullable=False, server_default="general"),
    )
    op.add_column(
        "conversations",
        sa.Column("needs_response", sa.Boolean(), nullable=False, server_default="false"),
    )
    op.add_column(
        "conversations",
        sa.Column(
            "last_responder_id", UUID(as_uuid=True),
            sa.ForeignKey(
                "users.id", ondelete="SET NULL",
                name="fk_conversations_last_responder_id_users",
            ),
            nullable=True,
        ),
    )
    op.add_column(
        "conversations",
        sa.Column("priority", sa.Integer(), nullable=False, server_default="0"),
    )
    # Existing property-linked threads are landlord inquiries
    op.execute(
        "UPDATE conversations SET category = 'landlord_inquiry' "
        "WHERE property_id IS NOT NULL"
    )


def downgrade() -> None:
    op.drop_column("conversations", "priority")
    op.drop_column("conversations", "last_responder_id")
    op.drop_column("conversations", "needs_response")
    op.drop_column("conversations", "category")
