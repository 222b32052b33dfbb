"""create hoaxify schema

Revision ID: 001
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id                      BIGSERIAL PRIMARY KEY,
            username                VARCHAR(32) NOT NULL,
            email                   VARCHAR(255) NOT NULL UNIQUE,
            password_hash           VARCHAR(255) NOT NULL,
            inactive                BOOLEAN NOT NULL DEFAULT TRUE,
            activation_token        VARCHAR(64),
            password_reset_token    VARCHAR(64),
            image                   VARCHAR(255)
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS tokens (
            token                   VARCHAR(255) PRIMARY KEY,
            user_id                 BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            last_used_at            TIMESTAMP NOT NULL
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS hoaxes (
            id                      BIGSERIAL PRIMARY KEY,
            content                 TEXT NOT NULL,
            timestamp               BIGINT NOT NULL,
            user_id                 BIGINT NOT NULL REFERENCES users(id) ON DELETE CASCADE
        )
    """)

    op.execute("""
        CREATE TABLE IF NOT EXISTS file_attachments (
            id                      BIGSERIAL PRIMARY KEY,
            filename                VARCHAR(255) NOT NULL UNIQUE,
            file_type               VARCHAR(255),
            upload_date             TIMESTAMP NOT NULL,
            hoax_id                 BIGINT REFERENCES hoaxes(id) ON DELETE CASCADE
        )
    """)

    op.create_index('ix_tokens_user_id', 'tokens', ['user_id'])
    op.create_index('ix_tokens_last_used_at', 'tokens', ['last_used_at'])
    op.create_index('ix_hoaxes_user_id', 'hoaxes', ['user_id'])
    op.create_index('ix_file_attachments_hoax_id', 'file_attachments', ['hoax_id'])
    op.create_index('ix_file_attachments_upload_date', 'file_attachments', ['upload_date'])


def downgrade() -> None:
    op.drop_index('ix_file_attachments_upload_date', table_name='file_attachments')
    op.drop_index('ix_file_attachments_hoax_id', table_name='file_attachments')
    op.drop_index('ix_hoaxes_user_id', table_name='hoaxes')
    op.drop_index('ix_tokens_last_used_at', table_name='tokens')
    op.drop_index('ix_tokens_user_id', table_name='tokens')

    op.execute("DROP TABLE IF EXISTS file_attachments")
    op.execute("DROP TABLE IF EXISTS hoaxes")
    op.execute("DROP TABLE IF EXISTS tokens")
    op.execute("DROP TABLE IF EXISTS users")
