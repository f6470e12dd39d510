"""Initial storefront schema: users/roles, fleet, cart, payments, service bookings

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at() -> sa.Column:
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False)


def upgrade() -> None:
    # --- Accounts ---
    op.create_table('roles',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table('users',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=30), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('role_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('user_metadata', postgresql.JSONB(astext_type=sa.Text()), nullable=True, server_default='{}'),
        _created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['role_id'], ['roles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )

    op.create_table('staff',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('department', sa.String(length=100), nullable=True),
        sa.Column('id_card_url', sa.String(length=500), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('drivers',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('license_plate', sa.String(length=20), nullable=True),
        sa.Column('ktp_url', sa.String(length=500), nullable=True),
        sa.Column('sim_url', sa.String(length=500), nullable=True),
        sa.Column('kk_url', sa.String(length=500), nullable=True),
        sa.Column('stnk_url', sa.String(length=500), nullable=True),
        sa.Column('skck_url', sa.String(length=500), nullable=True),
        sa.Column('selfie_url', sa.String(length=500), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    # --- Rental fleet ---
    op.create_table('vehicles',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('make', sa.String(length=100), nullable=False),
        sa.Column('model', sa.String(length=100), nullable=False),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('vehicle_type', sa.String(length=30), nullable=False, server_default='sedan'),
        sa.Column('license_plate', sa.String(length=20), nullable=True),
        sa.Column('color', sa.String(length=30), nullable=True),
        sa.Column('seats', sa.Integer(), nullable=False, server_default='4'),
        sa.Column('transmission', sa.String(length=20), nullable=False, server_default='automatic'),
        sa.Column('fuel_type', sa.String(length=20), nullable=False, server_default='petrol'),
        sa.Column('price_per_day', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('front_image_url', sa.String(length=500), nullable=True),
        sa.Column('back_image_url', sa.String(length=500), nullable=True),
        sa.Column('side_image_url', sa.String(length=500), nullable=True),
        sa.Column('interior_image_url', sa.String(length=500), nullable=True),
        sa.Column('bpkb_url', sa.String(length=500), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('license_plate'),
    )

    op.create_table('bookings',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('booking_code', sa.String(length=40), nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=True),
        sa.Column('vehicle_id', sa.UUID(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('pickup_time', sa.String(length=5), nullable=True),
        sa.Column('with_driver', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('total_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('paid_amount', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('payment_status', sa.String(length=20), nullable=False, server_default='unpaid'),
        sa.Column('payment_id', sa.UUID(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('notes', sa.Text(), nullable=True),
        _created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['vehicle_id'], ['vehicles.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('booking_code'),
    )
    op.create_index('ix_bookings_user_status', 'bookings', ['user_id', 'status'])

    op.create_table('damages',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('booking_id', sa.UUID(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False, server_default='unpaid'),
        sa.Column('payment_id', sa.UUID(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['booking_id'], ['bookings.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    # --- Cart & payments ---
    op.create_table('shopping_cart',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('item_type', sa.String(length=30), nullable=False),
        sa.Column('item_id', sa.UUID(), nullable=True),
        sa.Column('service_name', sa.String(length=255), nullable=False),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('details', postgresql.JSONB(astext_type=sa.Text()), nullable=True, server_default='{}'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        _created_at(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_shopping_cart_user_id', 'shopping_cart', ['user_id'])

    op.create_table('payments',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', sa.UUID(), nullable=True),
        sa.Column('booking_id', sa.UUID(), nullable=True),
        sa.Column('amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('payment_method', sa.String(length=30), nullable=False),
        sa.Column('bank_name', sa.String(length=100), nullable=True),
        sa.Column('transaction_id', sa.String(length=100), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('is_partial_payment', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('is_damage_payment', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('customer_name', sa.String(length=255), nullable=True),
        sa.Column('customer_email', sa.String(length=255), nullable=True),
        sa.Column('customer_phone', sa.String(length=30), nullable=True),
        sa.Column('idempotency_key', sa.String(length=100), nullable=True),
        sa.Column('skipped_items', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('idempotency_key'),
    )
    op.create_index('ix_payments_booking_status', 'payments', ['booking_id', 'status'])

    op.create_table('payment_bookings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('payment_id', sa.UUID(), nullable=False),
        sa.Column('booking_id', sa.String(length=64), nullable=False),
        sa.Column('booking_type', sa.String(length=30), nullable=False),
        sa.Column('booking_code', sa.String(length=40), nullable=True),
        sa.Column('service_name', sa.String(length=255), nullable=True),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.ForeignKeyConstraint(['payment_id'], ['payments.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('payment_methods',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False, server_default='manual'),
        sa.Column('bank_name', sa.String(length=100), nullable=True),
        sa.Column('account_holder', sa.String(length=255), nullable=True),
        sa.Column('account_number', sa.String(length=50), nullable=True),
        sa.Column('swift_code', sa.String(length=20), nullable=True),
        sa.Column('branch', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.PrimaryKeyConstraint('id'),
    )

    # --- Airport services ---
    op.create_table('baggage_price',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('small_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('medium_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('large_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('extra_large_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('electronic_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('surfing_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('wheelchair_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('stickgolf_price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('baggage_booking',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_code', sa.String(length=40), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=30), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('item_name', sa.String(length=255), nullable=True),
        sa.Column('flight_number', sa.String(length=20), nullable=False, server_default='-'),
        sa.Column('baggage_size', sa.String(length=30), nullable=False),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('duration', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('duration_type', sa.String(length=10), nullable=False, server_default='hours'),
        sa.Column('hours', sa.Integer(), nullable=True),
        sa.Column('storage_location', sa.String(length=255), nullable=False, server_default='Terminal 1, Level 1'),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('start_time', sa.String(length=5), nullable=True),
        sa.Column('end_time', sa.String(length=5), nullable=True),
        sa.Column('airport', sa.String(length=100), nullable=True),
        sa.Column('terminal', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='confirmed'),
        sa.Column('customer_id', sa.UUID(), nullable=True),
        sa.Column('payment_id', sa.UUID(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['customer_id'], ['users.id']),
        sa.ForeignKeyConstraint(['payment_id'], ['payments.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('booking_code'),
    )

    op.create_table('airport_transfer',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('booking_code', sa.String(length=40), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=30), nullable=False),
        sa.Column('pickup_location', sa.String(length=500), nullable=False),
        sa.Column('dropoff_location', sa.String(length=500), nullable=False),
        sa.Column('pickup_date', sa.Date(), nullable=False),
        sa.Column('pickup_time', sa.String(length=5), nullable=False, server_default='09:00'),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('vehicle_name', sa.String(length=100), nullable=True),
        sa.Column('driver_name', sa.String(length=255), nullable=True),
        sa.Column('driver_id', sa.UUID(), nullable=True),
        sa.Column('license_plate', sa.String(length=20), nullable=True),
        sa.Column('distance', sa.String(length=30), nullable=True),
        sa.Column('duration', sa.String(length=30), nullable=True),
        sa.Column('transfer_type', sa.String(length=30), nullable=False, server_default='airport_transfer'),
        sa.Column('passenger', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('customer_id', sa.UUID(), nullable=True),
        sa.Column('payment_id', sa.UUID(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(['driver_id'], ['users.id']),
        sa.ForeignKeyConstraint(['customer_id'], ['users.id']),
        sa.ForeignKeyConstraint(['payment_id'], ['payments.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('booking_code'),
    )
    op.create_index('ix_airport_transfer_created', 'airport_transfer', ['created_at'])

    op.create_table('handling_bookings',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('booking_code', sa.String(length=40), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=30), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('passenger_area', sa.String(length=100), nullable=False),
        sa.Column('pickup_area', sa.String(length=100), nullable=False),
        sa.Column('flight_number', sa.String(length=20), nullable=False),
        sa.Column('travel_type', sa.String(length=30), nullable=False),
        sa.Column('pickup_date', sa.Date(), nullable=False),
        sa.Column('pickup_time', sa.String(length=5), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('passengers', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('price', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        _created_at(),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('booking_code'),
    )

    # --- Notifications ---
    op.create_table('notifications',
        sa.Column('id', sa.UUID(), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('reference_type', sa.String(length=50), nullable=True),
        sa.Column('reference_id', sa.String(length=64), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default='false'),
        _created_at(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_notifications_user_unread', 'notifications', ['user_id', 'is_read'])


def downgrade() -> None:
    op.drop_index('idx_notifications_user_unread')
    op.drop_table('notifications')
    op.drop_table('handling_bookings')
    op.drop_index('ix_airport_transfer_created')
    op.drop_table('airport_transfer')
    op.drop_table('baggage_booking')
    op.drop_table('baggage_price')
    op.drop_table('payment_methods')
    op.drop_table('payment_bookings')
    op.drop_index('ix_payments_booking_status')
    op.drop_table('payments')
    op.drop_index('ix_shopping_cart_user_id')
    op.drop_table('shopping_cart')
    op.drop_table('damages')
    op.drop_index('ix_bookings_user_status')
    op.drop_table('bookings')
    op.drop_table('vehicles')
    op.drop_table('drivers')
    op.drop_table('staff')
    op.drop_table('users')
    op.drop_table('roles')
