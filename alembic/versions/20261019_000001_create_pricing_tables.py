"""Create pricing tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

This migration creates developments, units, pricing parameter sets with their
floor curves, and the manual adjustment history.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the pricing tables."""
    op.create_table(
        'developments',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('address', sa.String(length=500), nullable=True),
        sa.Column('registration', sa.String(length=100), nullable=True),
        sa.Column('development_type', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('target_gross_vgv', sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column('swap_percentage', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'units',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('development_id', sa.Integer(), nullable=False),
        sa.Column('identifier', sa.String(length=50), nullable=False),
        sa.Column('unit_type', sa.String(length=50), nullable=False),
        sa.Column('private_area', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('total_area', sa.Numeric(precision=10, scale=2), nullable=False),
        sa.Column('floor', sa.Integer(), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=True),
        sa.Column('suites', sa.Integer(), nullable=True),
        sa.Column('parking_simple', sa.Integer(), nullable=True),
        sa.Column('parking_double', sa.Integer(), nullable=True),
        sa.Column('parking_moto', sa.Integer(), nullable=True),
        sa.Column('storage_boxes', sa.Integer(), nullable=True),
        sa.Column('solar_orientation', sa.String(length=20), nullable=True),
        sa.Column(
            'status',
            sa.Enum(
                'disponivel', 'reservado', 'vendido', 'indisponivel',
                name='unit_status',
                create_constraint=True
            ),
            nullable=False,
            server_default='disponivel'
        ),
        sa.Column('manual_adjustment_percentage', sa.Float(), nullable=True),
        sa.Column('manual_adjustment_reason', sa.Text(), nullable=True),
        sa.Column('computed_value', sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['development_id'],
            ['developments.id'],
            name='fk_units_development_id',
            ondelete='RESTRICT'
        ),
        sa.UniqueConstraint('development_id', 'identifier', name='uq_units_development_identifier'),
        sa.CheckConstraint('private_area > 0', name='ck_units_private_area_positive'),
        sa.CheckConstraint('total_area >= private_area', name='ck_units_total_area_min'),
    )
    op.create_index('ix_units_development_id', 'units', ['development_id'])
    op.create_index('ix_units_status', 'units', ['status'])

    op.create_table(
        'pricing_parameter_sets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('development_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('rate_studio', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('rate_apartment', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('rate_commercial', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('rate_garden', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('additional_suite', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('additional_simple_parking', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('additional_double_parking', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('additional_moto_parking', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('additional_storage_box', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('factor_north', sa.Numeric(precision=6, scale=4), nullable=False, server_default='1'),
        sa.Column('factor_south', sa.Numeric(precision=6, scale=4), nullable=False, server_default='1'),
        sa.Column('factor_east', sa.Numeric(precision=6, scale=4), nullable=False, server_default='1'),
        sa.Column('factor_west', sa.Numeric(precision=6, scale=4), nullable=False, server_default='1'),
        sa.Column('factor_northeast', sa.Numeric(precision=6, scale=4), nullable=False, server_default='1'),
        sa.Column('factor_northwest', sa.Numeric(precision=6, scale=4), nullable=False, server_default='1'),
        sa.Column('factor_southeast', sa.Numeric(precision=6, scale=4), nullable=False, server_default='1'),
        sa.Column('factor_southwest', sa.Numeric(precision=6, scale=4), nullable=False, server_default='1'),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['development_id'],
            ['developments.id'],
            name='fk_pricing_parameter_sets_development_id',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_pricing_parameter_sets_development_id', 'pricing_parameter_sets', ['development_id'])
    op.create_index('ix_pricing_parameter_sets_active', 'pricing_parameter_sets', ['active'])

    # One active set per development where the engine supports filtered indexes
    dialect = op.get_bind().dialect.name
    if dialect == 'postgresql':
        op.create_index(
            'uq_pricing_parameter_sets_one_active',
            'pricing_parameter_sets',
            ['development_id'],
            unique=True,
            postgresql_where=sa.text('active'),
        )
    elif dialect == 'sqlite':
        op.create_index(
            'uq_pricing_parameter_sets_one_active',
            'pricing_parameter_sets',
            ['development_id'],
            unique=True,
            sqlite_where=sa.text('active = 1'),
        )

    op.create_table(
        'floor_valorizations',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('parameter_set_id', sa.Integer(), nullable=False),
        sa.Column('floor', sa.Integer(), nullable=False),
        sa.Column('percentage', sa.Float(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['parameter_set_id'],
            ['pricing_parameter_sets.id'],
            name='fk_floor_valorizations_parameter_set_id',
            ondelete='CASCADE'
        ),
        sa.UniqueConstraint('parameter_set_id', 'floor', name='uq_floor_valorizations_set_floor'),
    )
    op.create_index('ix_floor_valorizations_parameter_set_id', 'floor_valorizations', ['parameter_set_id'])

    op.create_table(
        'adjustment_history',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('unit_id', sa.Integer(), nullable=False),
        sa.Column('operator_id', sa.String(length=100), nullable=False),
        sa.Column('previous_percentage', sa.Float(), nullable=True),
        sa.Column('new_percentage', sa.Float(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('value_before', sa.Numeric(precision=15, scale=2), nullable=True),
        sa.Column('value_after', sa.Numeric(precision=15, scale=2), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['unit_id'],
            ['units.id'],
            name='fk_adjustment_history_unit_id',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_adjustment_history_unit_id', 'adjustment_history', ['unit_id'])


def downgrade() -> None:
    """Drop the pricing tables."""
    op.drop_index('ix_adjustment_history_unit_id', table_name='adjustment_history')
    op.drop_table('adjustment_history')

    op.drop_index('ix_floor_valorizations_parameter_set_id', table_name='floor_valorizations')
    op.drop_table('floor_valorizations')

    if op.get_bind().dialect.name in ('postgresql', 'sqlite'):
        op.drop_index('uq_pricing_parameter_sets_one_active', table_name='pricing_parameter_sets')
    op.drop_index('ix_pricing_parameter_sets_active', table_name='pricing_parameter_sets')
    op.drop_index('ix_pricing_parameter_sets_development_id', table_name='pricing_parameter_sets')
    op.drop_table('pricing_parameter_sets')

    op.drop_index('ix_units_status', table_name='units')
    op.drop_index('ix_units_development_id', table_name='units')
    op.drop_table('units')

    op.drop_table('developments')

    # Drop the enum type
    if op.get_bind().dialect.name == 'postgresql':
        op.execute("DROP TYPE IF EXISTS unit_status")
