"""Initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-12

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("navn", sa.String(length=256), nullable=False),
        sa.Column("aktiv", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("kontakt_epost", sa.String(length=512), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("full_name", sa.String(length=256), nullable=True),
        sa.Column("email", sa.String(length=512), nullable=True),
        sa.Column("approved", sa.Boolean(), nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_profiles_company_id_approved", "profiles", ["company_id", "approved"])

    op.create_table(
        "notification_preferences",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("email_new_incident", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("email_new_mission", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("email_document_expiry", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("email_new_user_pending", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("email_followup_assigned", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "documents",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("tittel", sa.String(length=512), nullable=False),
        sa.Column("kategori", sa.String(length=128), nullable=False),
        sa.Column("beskrivelse", sa.Text(), nullable=True),
        sa.Column("gyldig_til", sa.Date(), nullable=True),
        sa.Column("varsel_dager_for_utløp", sa.Integer(), server_default=sa.text("30"), nullable=True),
        sa.Column("opprettet_dato", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("oppdatert_dato", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_documents_gyldig_til", "documents", ["gyldig_til"])

    op.create_table(
        "email_templates",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("company_id", sa.Uuid(), nullable=False),
        sa.Column("template_type", sa.String(length=64), nullable=False),
        sa.Column("subject", sa.String(length=512), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("company_id", "template_type", name="uq_email_templates_company_type"),
    )


def downgrade() -> None:
    op.drop_table("email_templates")
    op.drop_index("ix_documents_gyldig_til", table_name="documents")
    op.drop_table("documents")
    op.drop_table("notification_preferences")
    op.drop_index("ix_profiles_company_id_approved", table_name="profiles")
    op.drop_table("profiles")
    op.drop_table("companies")
