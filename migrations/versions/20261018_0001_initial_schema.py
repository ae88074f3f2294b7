"""Initial registry schema."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261018_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("gh_login", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("gh_avatar", sa.String(length=512), nullable=True),
        sa.Column("gh_access_token", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("api_token", sa.String(length=64), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    )
    op.create_index("ix_users_gh_login", "users", ["gh_login"], unique=True)
    op.create_index("ix_users_api_token", "users", ["api_token"], unique=True)

    op.create_table(
        "teams",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("login", sa.String(length=255), nullable=False),
        sa.Column("github_id", sa.Integer(), nullable=False, unique=True),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("avatar", sa.String(length=512), nullable=True),
    )
    op.create_index("ix_teams_login", "teams", ["login"], unique=True)

    op.create_table(
        "crates",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("downloads", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_version", sa.String(length=255), nullable=False, server_default="0.0.0"),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("homepage", sa.String(length=1024), nullable=True),
        sa.Column("documentation", sa.String(length=1024), nullable=True),
        sa.Column("readme", sa.Text(), nullable=True),
        sa.Column("license", sa.String(length=255), nullable=True),
        sa.Column("repository", sa.String(length=1024), nullable=True),
        sa.Column("keywords", sa.JSON(), nullable=False, server_default="[]"),
    )
    op.create_index(
        "ix_crates_canonical_name",
        "crates",
        [sa.text("replace(lower(name), '-', '_')")],
        unique=True,
    )

    op.create_table(
        "versions",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("crate_id", sa.Integer(), sa.ForeignKey("crates.id"), nullable=False),
        sa.Column("num", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("downloads", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("authors", sa.JSON(), nullable=False),
        sa.Column("checksum", sa.String(length=64), nullable=False),
        sa.Column("yanked", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("crate_id", "num", name="uq_versions_crate_num"),
    )
    op.create_index("ix_versions_crate_id", "versions", ["crate_id"])

    op.create_table(
        "dependencies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("version_id", sa.Integer(), sa.ForeignKey("versions.id"), nullable=False),
        sa.Column("crate_id", sa.Integer(), sa.ForeignKey("crates.id"), nullable=False),
        sa.Column("req", sa.String(length=255), nullable=False),
        sa.Column("optional", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("default_features", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("features", sa.JSON(), nullable=False),
        sa.Column("target", sa.String(length=255), nullable=True),
        sa.Column("kind", sa.Integer(), nullable=False, server_default="0"),
    )
    op.create_index("ix_dependencies_version_id", "dependencies", ["version_id"])
    op.create_index("ix_dependencies_crate_id", "dependencies", ["crate_id"])

    op.create_table(
        "crate_owners",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("crate_id", sa.Integer(), sa.ForeignKey("crates.id"), nullable=False),
        sa.Column("owner_id", sa.Integer(), nullable=False),
        sa.Column("owner_kind", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.UniqueConstraint("crate_id", "owner_id", "owner_kind", name="uq_crate_owners_owner"),
    )
    op.create_index("ix_crate_owners_crate_id", "crate_owners", ["crate_id"])

    op.create_table(
        "keywords",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("keyword", sa.String(length=64), nullable=False),
        sa.Column("crates_cnt", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_keywords_keyword", "keywords", ["keyword"], unique=True)

    op.create_table(
        "crates_keywords",
        sa.Column("crate_id", sa.Integer(), sa.ForeignKey("crates.id"), primary_key=True),
        sa.Column("keyword_id", sa.Integer(), sa.ForeignKey("keywords.id"), primary_key=True),
    )

    op.create_table(
        "follows",
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), primary_key=True),
        sa.Column("crate_id", sa.Integer(), sa.ForeignKey("crates.id"), primary_key=True),
    )

    op.create_table(
        "version_downloads",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("version_id", sa.Integer(), sa.ForeignKey("versions.id"), nullable=False),
        sa.Column("downloads", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("counted", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("processed", sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index(
        "ix_version_downloads_version_date",
        "version_downloads",
        ["version_id", "date"],
    )

    op.create_table(
        "crate_downloads",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("crate_id", sa.Integer(), sa.ForeignKey("crates.id"), nullable=False),
        sa.Column("downloads", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("date", sa.Date(), nullable=False),
    )
    op.create_index("ix_crate_downloads_crate_id", "crate_downloads", ["crate_id"])


def downgrade() -> None:
    op.drop_index("ix_crate_downloads_crate_id", table_name="crate_downloads")
    op.drop_table("crate_downloads")
    op.drop_index("ix_version_downloads_version_date", table_name="version_downloads")
    op.drop_table("version_downloads")
    op.drop_table("follows")
    op.drop_table("crates_keywords")
    op.drop_index("ix_keywords_keyword", table_name="keywords")
    op.drop_table("keywords")
    op.drop_index("ix_crate_owners_crate_id", table_name="crate_owners")
    op.drop_table("crate_owners")
    op.drop_index("ix_dependencies_crate_id", table_name="dependencies")
    op.drop_index("ix_dependencies_version_id", table_name="dependencies")
    op.drop_table("dependencies")
    op.drop_index("ix_versions_crate_id", table_name="versions")
    op.drop_table("versions")
    op.drop_index("ix_crates_canonical_name", table_name="crates")
    op.drop_table("crates")
    op.drop_index("ix_teams_login", table_name="teams")
    op.drop_table("teams")
    op.drop_index("ix_users_api_token", table_name="users")
    op.drop_index("ix_users_gh_login", table_name="users")
    op.drop_table("users")
