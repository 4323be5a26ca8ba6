"""Initial schema for SignFlow

Revision ID: 20260301_000000
Revises: None
Create Date: 2026-03-01 00:00:00.000000

This is the initial migration that creates every SignFlow table:
- Accounts: users, teams, team_members, api_tokens, subscriptions
- Documents: document_data, documents, document_meta
- Signing: recipients, fields, signatures
- Templates: templates, template_meta, template_direct_links
- Logs: document_audit_logs, logs

Seed data (admin user and team) is created by ``python -m signflow.seed``.

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20260301_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("email_verified", sa.DateTime(), nullable=True),
        sa.Column("password", sa.String(), nullable=True),
        sa.Column("roles", sa.JSON(), nullable=False),
        sa.Column("disabled", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_created_at", "created_at"),
    )

    # Create teams table
    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("url", sa.String(255), nullable=False),
        sa.Column("owner_user_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["owner_user_id"], ["users.id"]),
        sa.Index("ix_teams_url", "url", unique=True),
        sa.Index("ix_teams_owner_user_id", "owner_user_id"),
    )

    # Create team_members table
    op.create_table(
        "team_members",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.UniqueConstraint("user_id", "team_id", name="uq_team_members_user_team"),
        sa.Index("ix_team_members_team_id", "team_id"),
        sa.Index("ix_team_members_user_id", "user_id"),
    )

    # Create api_tokens table
    op.create_table(
        "api_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("expires", sa.DateTime(), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("team_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"]),
        sa.Index("ix_api_tokens_token", "token", unique=True),
        sa.Index("ix_api_tokens_user_id", "user_id"),
        sa.Index("ix_api_tokens_team_id", "team_id"),
    )

    # Create subscriptions table
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("plan_id", sa.String(255), nullable=False),
        sa.Column("price_id", sa.String(255), nullable=False),
        sa.Column("period_end", sa.DateTime(), nullable=True),
        sa.Column("cancel_at_period_end", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("team_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"]),
        sa.Index("ix_subscriptions_status", "status"),
        sa.Index("ix_subscriptions_user_id", "user_id"),
        sa.Index("ix_subscriptions_team_id", "team_id"),
    )

    # Create document_data table
    op.create_table(
        "document_data",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("data", sa.Text(), nullable=False),
        sa.Column("initial_data", sa.Text(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create documents table
    op.create_table(
        "documents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("source", sa.String(32), nullable=False),
        sa.Column("visibility", sa.String(32), nullable=False),
        sa.Column("external_id", sa.String(255), nullable=True),
        sa.Column("form_key", sa.String(255), nullable=True),
        sa.Column("resident_id", sa.String(255), nullable=True),
        sa.Column("document_details", sa.JSON(), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=True),
        sa.Column("template_id", sa.Integer(), nullable=True),
        sa.Column("document_data_id", sa.String(64), nullable=False),
        sa.Column("activity_status", sa.String(16), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("document_url", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"]),
        sa.ForeignKeyConstraint(["document_data_id"], ["document_data.id"]),
        sa.Index("ix_documents_status", "status"),
        sa.Index("ix_documents_resident_id", "resident_id"),
        sa.Index("ix_documents_user_id", "user_id"),
        sa.Index("ix_documents_team_id", "team_id"),
        sa.Index("ix_documents_template_id", "template_id"),
        sa.Index("ix_documents_activity_status", "activity_status"),
        sa.Index("ix_documents_created_at", "created_at"),
        sa.Index("ix_documents_updated_at", "updated_at"),
    )

    # Create document_meta table
    op.create_table(
        "document_meta",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("document_id", sa.Integer(), nullable=False),
        sa.Column("subject", sa.String(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("timezone", sa.String(64), nullable=True),
        sa.Column("date_format", sa.String(64), nullable=True),
        sa.Column("redirect_url", sa.String(), nullable=True),
        sa.Column("signing_order", sa.String(16), nullable=False),
        sa.Column("typed_signature_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("language", sa.String(8), nullable=False),
        sa.Column("distribution_method", sa.String(16), nullable=False),
        sa.Column("email_settings", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["document_id"], ["documents.id"]),
        sa.Index("ix_document_meta_document_id", "document_id", unique=True),
    )

    # Create templates table
    op.create_table(
        "templates",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("visibility", sa.String(32), nullable=False),
        sa.Column("external_id", sa.String(255), nullable=True),
        sa.Column("public_title", sa.String(255), nullable=False),
        sa.Column("public_description", sa.Text(), nullable=False),
        sa.Column("form_key", sa.String(255), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=True),
        sa.Column("template_document_data_id", sa.String(64), nullable=False),
        sa.Column("activity_status", sa.String(16), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["team_id"], ["teams.id"]),
        sa.ForeignKeyConstraint(["template_document_data_id"], ["document_data.id"]),
        sa.Index("ix_templates_external_id", "external_id"),
        sa.Index("ix_templates_user_id", "user_id"),
        sa.Index("ix_templates_team_id", "team_id"),
    )

    # Create template_meta table
    op.create_table(
        "template_meta",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("template_id", sa.Integer(), nullable=False),
        sa.Column("subject", sa.String(), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("timezone", sa.String(64), nullable=True),
        sa.Column("date_format", sa.String(64), nullable=True),
        sa.Column("redirect_url", sa.String(), nullable=True),
        sa.Column("signing_order", sa.String(16), nullable=True),
        sa.Column("typed_signature_enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("language", sa.String(8), nullable=False),
        sa.Column("distribution_method", sa.String(16), nullable=False),
        sa.Column("email_settings", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["template_id"], ["templates.id"]),
        sa.Index("ix_template_meta_template_id", "template_id", unique=True),
    )

    # Create template_direct_links table
    op.create_table(
        "template_direct_links",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("template_id", sa.Integer(), nullable=False),
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("direct_template_recipient_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["template_id"], ["templates.id"]),
        sa.Index("ix_template_direct_links_template_id", "template_id", unique=True),
        sa.Index("ix_template_direct_links_token", "token", unique=True),
    )

    # Create recipients table
    op.create_table(
        "recipients",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("signing_order", sa.Integer(), nullable=True),
        sa.Column("document_id", sa.Integer(), nullable=True),
        sa.Column("template_id", sa.Integer(), nullable=True),
        sa.Column("token", sa.String(128), nullable=False),
        sa.Column("read_status", sa.String(16), nullable=False),
        sa.Column("signing_status", sa.String(16), nullable=False),
        sa.Column("send_status", sa.String(16), nullable=False),
        sa.Column("rejection_reason", sa.String(), nullable=True),
        sa.Column("signed_at", sa.DateTime(), nullable=True),
        sa.Column("expired", sa.DateTime(), nullable=True),
        sa.Column("document_deleted_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["document_id"], ["documents.id"]),
        sa.ForeignKeyConstraint(["template_id"], ["templates.id"]),
        sa.Index("ix_recipients_email", "email"),
        sa.Index("ix_recipients_document_id", "document_id"),
        sa.Index("ix_recipients_template_id", "template_id"),
        sa.Index("ix_recipients_token", "token"),
        sa.Index("ix_recipients_signed_at", "signed_at"),
    )

    # Create fields table
    op.create_table(
        "fields",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("secondary_id", sa.String(64), nullable=False),
        sa.Column("document_id", sa.Integer(), nullable=True),
        sa.Column("template_id", sa.Integer(), nullable=True),
        sa.Column("recipient_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("page", sa.Integer(), nullable=False),
        sa.Column("position_x", sa.Float(), nullable=False),
        sa.Column("position_y", sa.Float(), nullable=False),
        sa.Column("width", sa.Float(), nullable=False),
        sa.Column("height", sa.Float(), nullable=False),
        sa.Column("custom_text", sa.Text(), nullable=False),
        sa.Column("inserted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("field_meta", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["document_id"], ["documents.id"]),
        sa.ForeignKeyConstraint(["template_id"], ["templates.id"]),
        sa.ForeignKeyConstraint(["recipient_id"], ["recipients.id"]),
        sa.UniqueConstraint("secondary_id"),
        sa.Index("ix_fields_document_id", "document_id"),
        sa.Index("ix_fields_template_id", "template_id"),
        sa.Index("ix_fields_recipient_id", "recipient_id"),
    )

    # Create signatures table
    op.create_table(
        "signatures",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("recipient_id", sa.Integer(), nullable=False),
        sa.Column("field_id", sa.Integer(), nullable=False),
        sa.Column("signature_image_as_base64", sa.Text(), nullable=True),
        sa.Column("typed_signature", sa.String(), nullable=True),
        sa.Column("created", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["recipient_id"], ["recipients.id"]),
        sa.ForeignKeyConstraint(["field_id"], ["fields.id"]),
        sa.UniqueConstraint("field_id"),
        sa.Index("ix_signatures_recipient_id", "recipient_id"),
    )

    # Create document_audit_logs table (no FK: entries outlive hard-deleted documents)
    op.create_table(
        "document_audit_logs",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("document_id", sa.Integer(), nullable=False),
        sa.Column("type", sa.String(64), nullable=False),
        sa.Column("data", sa.JSON(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("user_agent", sa.String(), nullable=True),
        sa.Column("ip_address", sa.String(64), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_document_audit_logs_document_id", "document_id"),
        sa.Index("ix_document_audit_logs_created_at", "created_at"),
    )

    # Create logs table
    op.create_table(
        "logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("action", sa.String(128), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("data", sa.JSON(), nullable=True),
        sa.Column("request_metadata", sa.JSON(), nullable=True),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_logs_action", "action"),
        sa.Index("ix_logs_user_id", "user_id"),
        sa.Index("ix_logs_created_at", "created_at"),
    )


def downgrade() -> None:
    """Drop all tables created in upgrade."""
    op.drop_table("logs")
    op.drop_table("document_audit_logs")
    op.drop_table("signatures")
    op.drop_table("fields")
    op.drop_table("recipients")
    op.drop_table("template_direct_links")
    op.drop_table("template_meta")
    op.drop_table("templates")
    op.drop_table("document_meta")
    op.drop_table("documents")
    op.drop_table("document_data")
    op.drop_table("subscriptions")
    op.drop_table("api_tokens")
    op.drop_table("team_members")
    op.drop_table("teams")
    op.drop_table("users")
