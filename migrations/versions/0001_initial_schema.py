"""initial schema: templates, certificates, system_config

Revision ID: 0001_initial_schema
Revises: 
Create Date: 2026-10-19 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "templates",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("background_image", sa.LargeBinary(), nullable=False),
        sa.Column(
            "background_mime",
            sa.String(length=64),
            nullable=False,
            server_default="image/png",
        ),
        sa.Column("width", sa.Integer(), nullable=False),
        sa.Column("height", sa.Integer(), nullable=False),
        sa.Column("fields", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )

    op.create_table(
        "certificates",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("template_id", sa.String(length=36), nullable=False),
        sa.Column("certificate_number", sa.String(length=128), nullable=False),
        sa.Column("recipient_name", sa.String(length=255), nullable=False),
        sa.Column("recipient_email", sa.String(length=255), nullable=True),
        sa.Column("recipient_role", sa.String(length=255), nullable=True),
        sa.Column("event_name", sa.String(length=500), nullable=False),
        sa.Column("issue_date", sa.Date(), nullable=False),
        sa.Column("language", sa.String(length=2), nullable=False, server_default="ID"),
        sa.Column("custom_text", sa.Text(), nullable=True),
        sa.Column(
            "status", sa.String(length=16), nullable=False, server_default="published"
        ),
        sa.Column(
            "email_sent", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now()),
    )
    op.create_index(
        "uix_certificates_certificate_number",
        "certificates",
        ["certificate_number"],
        unique=True,
    )
    op.create_index(
        "ix_certificates_template_id", "certificates", ["template_id"], unique=False
    )

    op.create_table(
        "system_config",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "organization_name",
            sa.String(length=255),
            nullable=False,
            server_default="Politeknik ATI Padang",
        ),
        sa.Column(
            "default_language", sa.String(length=2), nullable=False, server_default="ID"
        ),
        sa.Column(
            "prefix_participant",
            sa.String(length=64),
            nullable=False,
            server_default="SRT-PST/{YEAR}/",
        ),
        sa.Column(
            "prefix_speaker",
            sa.String(length=64),
            nullable=False,
            server_default="SRT-NRS/{YEAR}/",
        ),
        sa.Column(
            "prefix_instructor",
            sa.String(length=64),
            nullable=False,
            server_default="SRT-INS/{YEAR}/",
        ),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("system_config")
    op.drop_index("ix_certificates_template_id", table_name="certificates")
    op.drop_index("uix_certificates_certificate_number", table_name="certificates")
    op.drop_table("certificates")
    op.drop_table("templates")
