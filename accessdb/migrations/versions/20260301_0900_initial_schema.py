"""initial_schema

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-03-01 09:00:00.000000

Creates the five entry tables, the tag and accessibility feature tables,
their entry link tables, comments and reviews.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ENTRY_TYPES = ('game', 'hardware', 'place', 'software', 'service')
ACCESSIBILITY_TYPES = ('visual', 'auditory', 'motor', 'cognitive', 'general')
RATING_COLUMNS = (
    'overall_rating',
    'visual_accessibility',
    'auditory_accessibility',
    'motor_accessibility',
    'cognitive_accessibility',
)


def _entry_columns() -> list:
    """Columns shared by every entry table."""
    return [
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('created_by', sa.String(length=255), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('photos', sa.JSON(), nullable=False),
        sa.Column('overall_rating', sa.Integer(), nullable=False),
        sa.Column('visual_accessibility', sa.Integer(), nullable=True),
        sa.Column('auditory_accessibility', sa.Integer(), nullable=True),
        sa.Column('motor_accessibility', sa.Integer(), nullable=True),
        sa.Column('cognitive_accessibility', sa.Integer(), nullable=True),
        sa.Column('website', sa.String(length=2048), nullable=True),
        sa.Column('complete', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def _entry_constraints(prefix: str) -> list:
    checks = [
        sa.CheckConstraint(
            f'{column} IS NULL OR ({column} >= 1 AND {column} <= 5)',
            name=f'ck_{prefix}_{column}_range',
        )
        for column in RATING_COLUMNS
    ]
    checks.append(sa.CheckConstraint("name != ''", name=f'ck_{prefix}_non_empty_name'))
    return checks + [sa.PrimaryKeyConstraint('id')]


def _create_entry_table(table: str, prefix: str, *columns: sa.Column) -> None:
    op.create_table(table, *_entry_columns(), *columns, *_entry_constraints(prefix))
    for column in ('created_by', 'name', 'complete', 'created_at'):
        op.create_index(f'ix_{table}_{column}', table, [column], unique=False)


def _create_label_table(table: str, prefix: str) -> None:
    op.create_table(
        table,
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column(
            'accessibility_type',
            sa.Enum(*ACCESSIBILITY_TYPES, name='accessibilitytype'),
            nullable=False,
        ),
        sa.Column('usage_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('usage_count >= 0', name=f'ck_{prefix}_usage_count_non_negative'),
        sa.CheckConstraint("slug != ''", name=f'ck_{prefix}_non_empty_slug'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(f'ix_{table}_slug', table, ['slug'], unique=True)
    op.create_index(f'ix_{table}_accessibility_type', table, ['accessibility_type'], unique=False)
    op.create_index(f'ix_{table}_usage_count', table, ['usage_count'], unique=False)


def _entry_ref_columns() -> list:
    return [
        sa.Column('entry_type', sa.Enum(*ENTRY_TYPES, name='entrytype'), nullable=False),
        sa.Column('entry_id', sa.String(length=32), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""
    _create_entry_table(
        'games',
        'game',
        sa.Column('platforms', sa.JSON(), nullable=False),
        sa.Column('publisher', sa.String(length=255), nullable=True),
        sa.Column('developer', sa.String(length=255), nullable=True),
        sa.Column('release_year', sa.Integer(), nullable=True),
        sa.Column('genres', sa.JSON(), nullable=False),
    )
    _create_entry_table(
        'hardware',
        'hardware',
        sa.Column('manufacturer', sa.String(length=255), nullable=True),
        sa.Column('model', sa.String(length=255), nullable=True),
        sa.Column('product_type', sa.String(length=100), nullable=True),
        sa.Column('compatibility', sa.JSON(), nullable=False),
    )
    _create_entry_table(
        'places',
        'place',
        sa.Column('location_address', sa.String(length=500), nullable=True),
        sa.Column('location_city', sa.String(length=255), nullable=True),
        sa.Column('location_country', sa.String(length=255), nullable=True),
        sa.Column('location_latitude', sa.Float(), nullable=True),
        sa.Column('location_longitude', sa.Float(), nullable=True),
        sa.Column('place_type', sa.String(length=100), nullable=True),
        sa.Column('wheelchair_accessible', sa.Boolean(), nullable=True),
        sa.Column('has_accessible_parking', sa.Boolean(), nullable=True),
        sa.Column('has_accessible_restroom', sa.Boolean(), nullable=True),
    )
    op.create_index('ix_places_location_city', 'places', ['location_city'], unique=False)
    _create_entry_table(
        'software',
        'software',
        sa.Column('platforms', sa.JSON(), nullable=False),
        sa.Column('developer', sa.String(length=255), nullable=True),
        sa.Column('version', sa.String(length=100), nullable=True),
        sa.Column('software_type', sa.String(length=100), nullable=True),
        sa.Column('has_screen_reader_support', sa.Boolean(), nullable=True),
        sa.Column('has_keyboard_navigation', sa.Boolean(), nullable=True),
        sa.Column('has_high_contrast_mode', sa.Boolean(), nullable=True),
    )
    _create_entry_table(
        'services',
        'service',
        sa.Column('service_type', sa.String(length=100), nullable=True),
        sa.Column('provider', sa.String(length=255), nullable=True),
        sa.Column('availability', sa.JSON(), nullable=False),
        sa.Column('has_sign_language_support', sa.Boolean(), nullable=True),
        sa.Column('has_accessible_support', sa.Boolean(), nullable=True),
    )

    _create_label_table('tags', 'tag')
    _create_label_table('accessibility_features', 'feature')

    op.create_table(
        'entry_tags',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        *_entry_ref_columns(),
        sa.Column('tag_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('entry_type', 'entry_id', 'tag_id', name='uq_entry_tag'),
    )
    op.create_index('ix_entry_tags_entry', 'entry_tags', ['entry_type', 'entry_id'], unique=False)
    op.create_index('ix_entry_tags_tag_id', 'entry_tags', ['tag_id'], unique=False)

    op.create_table(
        'entry_features',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        *_entry_ref_columns(),
        sa.Column('feature_id', sa.Integer(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_entry_feature_rating'),
        sa.ForeignKeyConstraint(
            ['feature_id'], ['accessibility_features.id'], ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('entry_type', 'entry_id', 'feature_id', name='uq_entry_feature'),
    )
    op.create_index(
        'ix_entry_features_entry', 'entry_features', ['entry_type', 'entry_id'], unique=False
    )
    op.create_index(
        'ix_entry_features_feature_id', 'entry_features', ['feature_id'], unique=False
    )

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        *_entry_ref_columns(),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('user_name', sa.String(length=255), nullable=True),
        sa.Column('user_image', sa.String(length=2048), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('photo', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("content != ''", name='ck_comment_non_empty_content'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_comments_entry', 'comments', ['entry_type', 'entry_id'], unique=False)
    op.create_index('ix_comments_user_id', 'comments', ['user_id'], unique=False)
    op.create_index('ix_comments_created_at', 'comments', ['created_at'], unique=False)

    op.create_table(
        'reviews',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        *_entry_ref_columns(),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        sa.Column(
            'accessibility_type',
            sa.Enum(*ACCESSIBILITY_TYPES, name='accessibilitytype'),
            nullable=True,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('rating >= 1 AND rating <= 5', name='ck_review_rating'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_reviews_entry', 'reviews', ['entry_type', 'entry_id'], unique=False)
    op.create_index('ix_reviews_user_id', 'reviews', ['user_id'], unique=False)


def downgrade() -> None:
    """Drop all tables."""
    for table in ('reviews', 'comments', 'entry_features', 'entry_tags'):
        op.drop_table(table)
    for table in ('accessibility_features', 'tags'):
        op.drop_table(table)
    for table in ('services', 'software', 'places', 'hardware', 'games'):
        op.drop_table(table)
