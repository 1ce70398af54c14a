from alembic import op
import sqlalchemy as sa

revision = '0001_init'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'inventory_items',
        sa.Column('id', sa.Uuid, primary_key=True),
        sa.Column('owner_id', sa.String(255), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('sku', sa.String(50), nullable=False),
        sa.Column('category', sa.String(100), nullable=False),
        sa.Column('quantity', sa.Integer, nullable=False, server_default='0'),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('description', sa.Text, nullable=False, server_default=''),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint('quantity >= 0', name='ck_inventory_items_quantity_non_negative'),
        sa.CheckConstraint('price > 0', name='ck_inventory_items_price_positive'),
    )
    op.create_index('ix_inventory_items_owner_id', 'inventory_items', ['owner_id'])
    op.create_index('ix_inventory_items_sku', 'inventory_items', ['sku'], unique=True)
    op.create_index('ix_inventory_items_category', 'inventory_items', ['category'])

def downgrade():
    op.drop_index('ix_inventory_items_category', table_name='inventory_items')
    op.drop_index('ix_inventory_items_sku', table_name='inventory_items')
    op.drop_index('ix_inventory_items_owner_id', table_name='inventory_items')
    op.drop_table('inventory_items')
