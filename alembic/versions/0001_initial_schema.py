"""initial schema: users, cats, cat_images, matches

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.UniqueConstraint('email', name='ux_users_email'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=False)

    op.create_table(
        'cats',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', name='fk_cats_user_id_users'), nullable=False),
        sa.Column('name', sa.String(length=30), nullable=False),
        sa.Column('race', sa.String(length=32), nullable=False),
        sa.Column('sex', sa.String(length=6), nullable=False),
        sa.Column('age_in_month', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(length=200), nullable=False),
        sa.Column('has_matched', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_cats_user_id', 'cats', ['user_id'], unique=False)
    op.create_index('ix_cats_user_created', 'cats', ['user_id', 'created_at'], unique=False)

    op.create_table(
        'cat_images',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('cat_id', sa.Uuid(), sa.ForeignKey('cats.id', name='fk_cat_images_cat_id_cats'), nullable=False),
        sa.Column('image_url', sa.String(length=2048), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_cat_images_cat_id', 'cat_images', ['cat_id'], unique=False)

    op.create_table(
        'matches',
        sa.Column('id', sa.Uuid(), primary_key=True, nullable=False),
        sa.Column('match_cat_id', sa.Uuid(), sa.ForeignKey('cats.id', name='fk_matches_match_cat_id_cats'), nullable=False),
        sa.Column('user_cat_id', sa.Uuid(), sa.ForeignKey('cats.id', name='fk_matches_user_cat_id_cats'), nullable=False),
        sa.Column('message', sa.String(length=120), nullable=False),
        sa.Column('pair_key', sa.String(length=80), nullable=False),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_matches_match_cat_id', 'matches', ['match_cat_id'], unique=False)
    op.create_index('ix_matches_user_cat_id', 'matches', ['user_cat_id'], unique=False)
    op.create_index(
        'ux_matches_active_pair',
        'matches',
        ['pair_key'],
        unique=True,
        postgresql_where=sa.text('deleted_at IS NULL'),
    )


def downgrade() -> None:
    op.drop_index('ux_matches_active_pair', table_name='matches')
    op.drop_index('ix_matches_user_cat_id', table_name='matches')
    op.drop_index('ix_matches_match_cat_id', table_name='matches')
    op.drop_table('matches')
    op.drop_index('ix_cat_images_cat_id', table_name='cat_images')
    op.drop_table('cat_images')
    op.drop_index('ix_cats_user_created', table_name='cats')
    op.drop_index('ix_cats_user_id', table_name='cats')
    op.drop_table('cats')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
