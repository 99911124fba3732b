# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Create notification ledger and reminder dispatch tables.

Revision ID: 001_notification_ledger
Revises:
Create Date: 2025-11-20

- notifications: append-only record of every delivered message
- reminder_dispatches: write-once markers claiming reminder sends
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001_notification_ledger"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create ledger tables."""
    # ==========================================================================
    # 1. notifications table
    # ==========================================================================
    op.create_table(
        "notifications",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("body", sa.Text, nullable=False),
        sa.Column("data", sa.JSON, nullable=False),
        sa.Column("channel", sa.String(16), nullable=False),
        sa.Column(
            "sent_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("read", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("delivery_message_id", sa.String(255), nullable=True),
    )
    op.create_index(
        "ix_notifications_user_sent",
        "notifications",
        ["user_id", "sent_at"],
    )

    # ==========================================================================
    # 2. reminder_dispatches table
    # ==========================================================================
    op.create_table(
        "reminder_dispatches",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("dedup_key", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.UniqueConstraint("dedup_key", name="uq_reminder_dispatches_dedup_key"),
    )


def downgrade() -> None:
    """Drop ledger tables."""
    op.drop_table("reminder_dispatches")
    op.drop_index("ix_notifications_user_sent", table_name="notifications")
    op.drop_table("notifications")
