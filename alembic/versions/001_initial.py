"""Initial migration

Revision ID: 001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('refresh_token', sa.String(500)),
        sa.Column('last_login', sa.DateTime()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now()),
    )
    
    # Create categories table
    op.create_table(
        'categories',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('order_index', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    
    # Create menu_items table (category_id is unconstrained: items may outlive their category)
    op.create_table(
        'menu_items',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('category_id', sa.Uuid(), nullable=False),
        sa.Column('image_url', sa.String(500)),
        sa.Column('tags', sa.JSON()),
        sa.Column('sub_category', sa.String(100)),
        sa.Column('is_special_offer', sa.Boolean(), server_default=sa.false()),
        sa.Column('original_price', sa.Numeric(10, 2)),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    
    # Create news_events table
    op.create_table(
        'news_events',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('type', sa.Enum('news', 'event', name='news_event_type'), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('event_date', sa.Date()),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    
    # Create indexes
    op.create_index('ix_categories_order_index', 'categories', ['order_index'])
    op.create_index('ix_menu_items_category_id', 'menu_items', ['category_id'])
    op.create_index('ix_news_events_active', 'news_events', ['active'])


def downgrade() -> None:
    op.drop_table('news_events')
    op.drop_table('menu_items')
    op.drop_table('categories')
    op.drop_table('users')
    sa.Enum(name='news_event_type').drop(op.get_bind(), checkfirst=True)
