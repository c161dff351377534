"""Create blogs table

Revision ID: 001_create_blogs
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '001_create_blogs'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('blogs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('body', sa.Text(), nullable=True),
        sa.Column('created', sa.DateTime(), nullable=False),
        sa.Column('modified', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_blogs_name', 'blogs', ['name'], unique=False)


def downgrade():
    op.drop_index('ix_blogs_name', table_name='blogs')
    op.drop_table('blogs')
