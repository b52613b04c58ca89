"""Initial schema

Revision ID: 001_initial
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the urls table holding link records.
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    # Startup schema creation may already have built it
    if 'urls' in existing_tables:
        return

    op.create_table(
        'urls',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('original_url', sa.Text(), nullable=False),
        sa.Column('short_code', sa.String(length=32), nullable=False),
        sa.Column('clicks', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index(
        'ix_urls_short_code',
        'urls',
        ['short_code'],
        unique=True
    )


def downgrade() -> None:
    op.drop_index('ix_urls_short_code', table_name='urls')
    op.drop_table('urls')
