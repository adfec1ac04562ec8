"""create_translatable_translations

Revision ID: 001_translations
Revises:
Create Date: 2026-10-18 12:00:00

One row per (translatable_type, translatable_id, locale).
translated_attributes holds attribute -> translated value;
source_checksum stays NULL until automatic content is written.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_translations'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """Create translatable_translations with its unique (entity, locale) constraint."""
    op.create_table(
        'translatable_translations',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('translatable_type', sa.String(100), nullable=False),
        sa.Column('translatable_id', sa.String(100), nullable=False),
        sa.Column('locale', sa.String(20), nullable=False),
        sa.Column('translated_attributes', sa.JSON(), nullable=False),
        sa.Column('source_checksum', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint(
            'translatable_type', 'translatable_id', 'locale',
            name='uq_translation_translatable_locale'
        ),
    )
    
    # Lookup of all locales of one entity
    op.create_index(
        'idx_translation_translatable',
        'translatable_translations',
        ['translatable_type', 'translatable_id']
    )


def downgrade():
    """Drop translatable_translations."""
    op.drop_index('idx_translation_translatable', table_name='translatable_translations')
    op.drop_table('translatable_translations')
