"""initial schema: users, categories, products, product_likes

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('username', sa.String(length=32), nullable=False),
        sa.Column('profile_image_url', sa.String(length=2048), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_email_verified', sa.Boolean(), nullable=False),
        sa.Column(
            'email_verification_token_hash',
            sa.String(length=64),
            nullable=True,
            comment='SHA256 hex of the last issued token',
        ),
        sa.Column('email_verification_token_expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index(
        'ix_users_email_verification_token_hash', 'users', ['email_verification_token_hash'], unique=False
    )

    op.create_table(
        'categories',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'products',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('seller_id', sa.UUID(), nullable=False),
        sa.Column('title', sa.String(length=160), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('category_id', sa.UUID(), nullable=False),
        sa.Column(
            'images',
            postgresql.JSONB(astext_type=sa.Text()),
            nullable=False,
            comment='[{"url": "https://...", "publicId": "..."}]',
        ),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_products_seller_id', 'products', ['seller_id'], unique=False)
    op.create_index('ix_products_category_id', 'products', ['category_id'], unique=False)
    op.create_index('ix_products_published_at', 'products', ['published_at'], unique=False)

    op.create_table(
        'product_likes',
        sa.Column('product_id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('liked_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('product_id', 'user_id'),
    )
    op.create_index('ix_product_likes_user_id', 'product_likes', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_product_likes_user_id', table_name='product_likes')
    op.drop_table('product_likes')
    op.drop_index('ix_products_published_at', table_name='products')
    op.drop_index('ix_products_category_id', table_name='products')
    op.drop_index('ix_products_seller_id', table_name='products')
    op.drop_table('products')
    op.drop_table('categories')
    op.drop_index('ix_users_email_verification_token_hash', table_name='users')
    op.drop_table('users')
