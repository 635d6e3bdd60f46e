"""Add remote proposals table

Revision ID: 9b41d7e05c2a
Revises: 6f0c2a1d9b3e
Create Date: 2026-10-19 15:02:31.604117

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

import venus_indexer.database.models

# revision identifiers, used by Alembic.
revision: str = "9b41d7e05c2a"
down_revision: str | Sequence[str] | None = "6f0c2a1d9b3e"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "remote_proposals",
        sa.Column("id", sa.String(length=200), nullable=False),
        sa.Column(
            "proposal_id",
            venus_indexer.database.models.base.IntMappedToString(length=78),
            nullable=False,
        ),
        sa.Column("layer_zero_chain_id", sa.Integer(), nullable=False),
        sa.Column("trusted_remote_id", sa.String(length=200), nullable=True),
        sa.Column("targets", sa.JSON(), nullable=False),
        sa.Column("values", sa.JSON(), nullable=False),
        sa.Column("signatures", sa.JSON(), nullable=False),
        sa.Column("calldatas", sa.JSON(), nullable=False),
        sa.Column("proposal_type", sa.Integer(), nullable=False),
        sa.Column("stored_tx_hash", sa.String(length=66), nullable=True),
        sa.Column("stored_block", sa.Integer(), nullable=True),
        sa.Column("stored_timestamp", sa.Integer(), nullable=True),
        sa.Column("executed_tx_hash", sa.String(length=66), nullable=True),
        sa.Column("executed_block", sa.Integer(), nullable=True),
        sa.Column("executed_timestamp", sa.Integer(), nullable=True),
        sa.Column("withdrawn_tx_hash", sa.String(length=66), nullable=True),
        sa.Column("withdrawn_block", sa.Integer(), nullable=True),
        sa.Column("withdrawn_timestamp", sa.Integer(), nullable=True),
        sa.Column("failed_reason", sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(["trusted_remote_id"], ["trusted_remotes.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    with op.batch_alter_table("remote_proposals", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_remote_proposals_trusted_remote_id"),
            ["trusted_remote_id"],
            unique=False,
        )


def downgrade() -> None:
    """Downgrade schema."""

    with op.batch_alter_table("remote_proposals", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_remote_proposals_trusted_remote_id"))
    op.drop_table("remote_proposals")
