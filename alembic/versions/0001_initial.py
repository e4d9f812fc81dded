"""initial claims portal schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-12 09:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=True),
        sa.Column('role', sa.String(50), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('has_logged_in', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'insurance_policies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('policy_number', sa.String(100), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('insurer', sa.String(255), nullable=False),
        sa.Column('coverage_type', sa.String(100), nullable=True),
        sa.Column('excess_pence', sa.BigInteger(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('building_address', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_insurance_policies_id'), 'insurance_policies', ['id'], unique=False)
    op.create_index(op.f('ix_insurance_policies_policy_number'), 'insurance_policies', ['policy_number'], unique=True)

    op.create_table(
        'loss_assessors',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_name', sa.String(255), nullable=False),
        sa.Column('contact_name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('specializations', sa.JSON(), nullable=False),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_loss_assessors_id'), 'loss_assessors', ['id'], unique=False)

    op.create_table(
        'claims',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('reference_number', sa.String(50), nullable=False),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('stage', sa.String(100), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('claimant_name', sa.String(255), nullable=False),
        sa.Column('claimant_email', sa.String(255), nullable=False),
        sa.Column('claimant_phone', sa.String(50), nullable=False),
        sa.Column('property_address', sa.Text(), nullable=False),
        sa.Column('property_block', sa.String(255), nullable=True),
        sa.Column('property_unit', sa.String(100), nullable=True),
        sa.Column('property_place_id', sa.String(500), nullable=True),
        sa.Column('property_construction_age', sa.String(100), nullable=True),
        sa.Column('property_construction_type', sa.String(255), nullable=True),
        sa.Column('incident_date', sa.Date(), nullable=False),
        sa.Column('incident_type', sa.String(100), nullable=False),
        sa.Column('incident_description', sa.Text(), nullable=False),
        sa.Column('has_building_damage', sa.Boolean(), nullable=False),
        sa.Column('building_damage_description', sa.Text(), nullable=True),
        sa.Column('building_damage_affected_areas', sa.Text(), nullable=True),
        sa.Column('has_theft', sa.Boolean(), nullable=False),
        sa.Column('theft_description', sa.Text(), nullable=True),
        sa.Column('theft_police_reported', sa.Boolean(), nullable=False),
        sa.Column('theft_police_reference', sa.String(100), nullable=True),
        sa.Column('is_investment_property', sa.Boolean(), nullable=False),
        sa.Column('tenant_name', sa.String(255), nullable=True),
        sa.Column('tenant_phone', sa.String(50), nullable=True),
        sa.Column('tenant_email', sa.String(255), nullable=True),
        sa.Column('tenancy_agreements', sa.JSON(), nullable=False),
        sa.Column('damage_photos', sa.JSON(), nullable=False),
        sa.Column('repair_quotes', sa.JSON(), nullable=False),
        sa.Column('invoices', sa.JSON(), nullable=False),
        sa.Column('police_reports', sa.JSON(), nullable=False),
        sa.Column('other_documents', sa.JSON(), nullable=False),
        sa.Column('signature_data', sa.Text(), nullable=False),
        sa.Column('signature_type', sa.String(20), nullable=False),
        sa.Column('declaration_accepted', sa.Boolean(), nullable=False),
        sa.Column('fraud_warning_accepted', sa.Boolean(), nullable=False),
        sa.Column('contents_exclusion_accepted', sa.Boolean(), nullable=False),
        sa.Column('assigned_to_user_id', sa.Integer(), nullable=True),
        sa.Column('policy_id', sa.Integer(), nullable=True),
        sa.Column('loss_assessor_id', sa.Integer(), nullable=True),
        sa.Column('insurer_claim_ref', sa.String(255), nullable=True),
        sa.Column('insurer_submitted_at', sa.DateTime(), nullable=True),
        sa.Column('insurer_response_date', sa.DateTime(), nullable=True),
        sa.Column('closed_at', sa.DateTime(), nullable=True),
        sa.Column('closure_reason', sa.Text(), nullable=True),
        sa.Column('closed_by_user_id', sa.Integer(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('last_updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['assigned_to_user_id'], ['users.id'], ),
        sa.ForeignKeyConstraint(['policy_id'], ['insurance_policies.id'], ),
        sa.ForeignKeyConstraint(['loss_assessor_id'], ['loss_assessors.id'], ),
        sa.ForeignKeyConstraint(['closed_by_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_claims_id'), 'claims', ['id'], unique=False)
    op.create_index(op.f('ix_claims_reference_number'), 'claims', ['reference_number'], unique=True)
    op.create_index(op.f('ix_claims_status'), 'claims', ['status'], unique=False)
    op.create_index(op.f('ix_claims_assigned_to_user_id'), 'claims', ['assigned_to_user_id'], unique=False)
    op.create_index(op.f('ix_claims_policy_id'), 'claims', ['policy_id'], unique=False)
    op.create_index(op.f('ix_claims_loss_assessor_id'), 'claims', ['loss_assessor_id'], unique=False)

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('claim_id', sa.Integer(), nullable=True),
        sa.Column('actor_user_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(100), nullable=False),
        sa.Column('entity_type', sa.String(50), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('metadata_json', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['claim_id'], ['claims.id'], ),
        sa.ForeignKeyConstraint(['actor_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_audit_logs_id'), 'audit_logs', ['id'], unique=False)
    op.create_index(op.f('ix_audit_logs_claim_id'), 'audit_logs', ['claim_id'], unique=False)

    op.create_table(
        'claim_status_transitions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('claim_id', sa.Integer(), nullable=False),
        sa.Column('from_status', sa.String(50), nullable=False),
        sa.Column('to_status', sa.String(50), nullable=False),
        sa.Column('changed_by_user_id', sa.Integer(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['claim_id'], ['claims.id'], ),
        sa.ForeignKeyConstraint(['changed_by_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_claim_status_transitions_id'), 'claim_status_transitions', ['id'], unique=False)
    op.create_index(op.f('ix_claim_status_transitions_claim_id'), 'claim_status_transitions', ['claim_id'], unique=False)

    op.create_table(
        'claim_notes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('claim_id', sa.Integer(), nullable=False),
        sa.Column('author_user_id', sa.Integer(), nullable=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('note_type', sa.String(50), nullable=False),
        sa.Column('visibility', sa.String(20), nullable=False),
        sa.Column('follow_up_date', sa.Date(), nullable=True),
        sa.Column('auto_chaser_flag', sa.Boolean(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['claim_id'], ['claims.id'], ),
        sa.ForeignKeyConstraint(['author_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_claim_notes_id'), 'claim_notes', ['id'], unique=False)
    op.create_index(op.f('ix_claim_notes_claim_id'), 'claim_notes', ['claim_id'], unique=False)

    op.create_table(
        'claim_payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('claim_id', sa.Integer(), nullable=False),
        sa.Column('payment_type', sa.String(20), nullable=False),
        sa.Column('amount_pence', sa.BigInteger(), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('recipient_name', sa.String(255), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('transaction_reference', sa.String(255), nullable=True),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('created_by_user_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('amount_pence > 0', name='ck_claim_payments_amount_positive'),
        sa.ForeignKeyConstraint(['claim_id'], ['claims.id'], ),
        sa.ForeignKeyConstraint(['created_by_user_id'], ['users.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_claim_payments_id'), 'claim_payments', ['id'], unique=False)
    op.create_index(op.f('ix_claim_payments_claim_id'), 'claim_payments', ['claim_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_claim_payments_claim_id'), table_name='claim_payments')
    op.drop_index(op.f('ix_claim_payments_id'), table_name='claim_payments')
    op.drop_table('claim_payments')
    op.drop_index(op.f('ix_claim_notes_claim_id'), table_name='claim_notes')
    op.drop_index(op.f('ix_claim_notes_id'), table_name='claim_notes')
    op.drop_table('claim_notes')
    op.drop_index(op.f('ix_claim_status_transitions_claim_id'), table_name='claim_status_transitions')
    op.drop_index(op.f('ix_claim_status_transitions_id'), table_name='claim_status_transitions')
    op.drop_table('claim_status_transitions')
    op.drop_index(op.f('ix_audit_logs_claim_id'), table_name='audit_logs')
    op.drop_index(op.f('ix_audit_logs_id'), table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_index(op.f('ix_claims_loss_assessor_id'), table_name='claims')
    op.drop_index(op.f('ix_claims_policy_id'), table_name='claims')
    op.drop_index(op.f('ix_claims_assigned_to_user_id'), table_name='claims')
    op.drop_index(op.f('ix_claims_status'), table_name='claims')
    op.drop_index(op.f('ix_claims_reference_number'), table_name='claims')
    op.drop_index(op.f('ix_claims_id'), table_name='claims')
    op.drop_table('claims')
    op.drop_index(op.f('ix_loss_assessors_id'), table_name='loss_assessors')
    op.drop_table('loss_assessors')
    op.drop_index(op.f('ix_insurance_policies_policy_number'), table_name='insurance_policies')
    op.drop_index(op.f('ix_insurance_policies_id'), table_name='insurance_policies')
    op.drop_table('insurance_policies')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_table('users')
