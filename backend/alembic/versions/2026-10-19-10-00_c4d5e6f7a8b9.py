"""create pitch_decks

Revision ID: c4d5e6f7a8b9
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union
import sqlmodel
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c4d5e6f7a8b9'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'pitch_decks',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('kind', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('company_name', sqlmodel.sql.sqltypes.AutoString(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('theme', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('slide_count', sa.Integer(), nullable=False),
        sa.Column('quality_degraded', sa.Boolean(), nullable=False),
        sa.Column('deck', sa.JSON(), nullable=True),
        sa.Column('content', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_pitch_decks_id'), 'pitch_decks', ['id'], unique=False)
    op.create_index(op.f('ix_pitch_decks_kind'), 'pitch_decks', ['kind'], unique=False)
    op.create_index(op.f('ix_pitch_decks_company_name'), 'pitch_decks', ['company_name'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_pitch_decks_company_name'), table_name='pitch_decks')
    op.drop_index(op.f('ix_pitch_decks_kind'), table_name='pitch_decks')
    op.drop_index(op.f('ix_pitch_decks_id'), table_name='pitch_decks')
    op.drop_table('pitch_decks')
