"""Initial custody schema

Revision ID: 001_initial
Revises:
Create Date: 2025-03-01 00:00:00.000000

Officer name/badge pairs are snapshot columns, not foreign keys to
staff_members. case_closures.incident_id is indexed but not unique: with
reclosure allowed an incident can carry several closures.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create staff, incident, evidence, transfer and closure tables."""
    op.create_table(
        'staff_members',
        sa.Column('staff_id', sa.String(length=36), nullable=False),
        sa.Column('full_name', sa.String(length=100), nullable=False),
        sa.Column('badge_number', sa.String(length=50), nullable=False),
        sa.Column('designation', sa.String(length=20), nullable=False),
        sa.Column('station_assignment', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('staff_id')
    )
    op.create_index(op.f('ix_staff_members_staff_id'), 'staff_members', ['staff_id'], unique=False)
    op.create_index(op.f('ix_staff_members_badge_number'), 'staff_members', ['badge_number'], unique=True)
    op.create_index(op.f('ix_staff_members_station_assignment'), 'staff_members', ['station_assignment'], unique=False)

    op.create_table(
        'incidents',
        sa.Column('incident_id', sa.String(length=36), nullable=False),
        sa.Column('registration_station', sa.String(length=150), nullable=False),
        sa.Column('fir_number', sa.String(length=100), nullable=False),
        sa.Column('registration_year', sa.Integer(), nullable=False),
        sa.Column('investigator_name', sa.String(length=100), nullable=True),
        sa.Column('investigator_badge', sa.String(length=50), nullable=True),
        sa.Column('fir_filing_date', sa.Date(), nullable=False),
        sa.Column('evidence_seizure_date', sa.Date(), nullable=False),
        sa.Column('applicable_sections', sa.Text(), nullable=False),
        sa.Column('current_status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('incident_id')
    )
    op.create_index(op.f('ix_incidents_incident_id'), 'incidents', ['incident_id'], unique=False)
    op.create_index(op.f('ix_incidents_fir_number'), 'incidents', ['fir_number'], unique=False)
    op.create_index(op.f('ix_incidents_investigator_badge'), 'incidents', ['investigator_badge'], unique=False)
    op.create_index(op.f('ix_incidents_current_status'), 'incidents', ['current_status'], unique=False)
    op.create_index(op.f('ix_incidents_created_at'), 'incidents', ['created_at'], unique=False)
    op.create_index('ix_incidents_station_year', 'incidents', ['registration_station', 'registration_year'], unique=False)

    op.create_table(
        'evidence_items',
        sa.Column('evidence_id', sa.String(length=36), nullable=False),
        sa.Column('incident_id', sa.String(length=36), nullable=False),
        sa.Column('item_category', sa.String(length=100), nullable=False),
        sa.Column('associated_party', sa.String(length=20), nullable=False),
        sa.Column('item_description', sa.Text(), nullable=False),
        sa.Column('quantity_amount', sa.Float(), nullable=False),
        sa.Column('measurement_unit', sa.String(length=50), nullable=False),
        sa.Column('room_number', sa.String(length=50), nullable=True),
        sa.Column('rack_number', sa.String(length=50), nullable=True),
        sa.Column('compartment_id', sa.String(length=50), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('photograph_key', sa.Text(), nullable=True),
        sa.Column('tracking_qr_key', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['incident_id'], ['incidents.incident_id']),
        sa.PrimaryKeyConstraint('evidence_id')
    )
    op.create_index(op.f('ix_evidence_items_evidence_id'), 'evidence_items', ['evidence_id'], unique=False)
    op.create_index(op.f('ix_evidence_items_incident_id'), 'evidence_items', ['incident_id'], unique=False)
    op.create_index(op.f('ix_evidence_items_item_category'), 'evidence_items', ['item_category'], unique=False)
    op.create_index('ix_evidence_items_incident_created', 'evidence_items', ['incident_id', 'created_at'], unique=False)

    op.create_table(
        'custody_transfers',
        sa.Column('transfer_id', sa.String(length=36), nullable=False),
        sa.Column('evidence_id', sa.String(length=36), nullable=False),
        sa.Column('source_location', sa.String(length=255), nullable=True),
        sa.Column('releasing_officer_name', sa.String(length=100), nullable=True),
        sa.Column('releasing_officer_badge', sa.String(length=50), nullable=True),
        sa.Column('destination_location', sa.String(length=255), nullable=False),
        sa.Column('receiving_officer_name', sa.String(length=100), nullable=True),
        sa.Column('receiving_officer_badge', sa.String(length=50), nullable=True),
        sa.Column('transfer_purpose', sa.String(length=30), nullable=False),
        sa.Column('transfer_timestamp', sa.DateTime(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['evidence_id'], ['evidence_items.evidence_id']),
        sa.PrimaryKeyConstraint('transfer_id')
    )
    op.create_index(op.f('ix_custody_transfers_transfer_id'), 'custody_transfers', ['transfer_id'], unique=False)
    op.create_index(op.f('ix_custody_transfers_evidence_id'), 'custody_transfers', ['evidence_id'], unique=False)
    op.create_index(
        'ix_custody_transfers_evidence_timestamp', 'custody_transfers', ['evidence_id', 'transfer_timestamp'], unique=False
    )

    op.create_table(
        'case_closures',
        sa.Column('closure_id', sa.String(length=36), nullable=False),
        sa.Column('incident_id', sa.String(length=36), nullable=False),
        sa.Column('disposition_method', sa.String(length=30), nullable=False),
        sa.Column('court_order_number', sa.String(length=100), nullable=True),
        sa.Column('closure_date', sa.Date(), nullable=False),
        sa.Column('closure_remarks', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['incident_id'], ['incidents.incident_id']),
        sa.PrimaryKeyConstraint('closure_id')
    )
    op.create_index(op.f('ix_case_closures_closure_id'), 'case_closures', ['closure_id'], unique=False)
    op.create_index(op.f('ix_case_closures_incident_id'), 'case_closures', ['incident_id'], unique=False)


def downgrade() -> None:
    """Drop all custody tables."""
    op.drop_table('case_closures')
    op.drop_table('custody_transfers')
    op.drop_table('evidence_items')
    op.drop_table('incidents')
    op.drop_table('staff_members')
