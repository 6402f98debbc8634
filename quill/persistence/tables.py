"""SQLAlchemy table definitions for Quill.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# POSTS TABLE (owned by the publishing side, mirrored here for comments)
# ============================================================================
posts_table = Table(
    "posts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("author_id", UUID, nullable=False),
    Column("title", String(200), nullable=False),
    Column("comments_enabled", Boolean, nullable=False, server_default="true"),
    Column("comments_count", Integer, nullable=False, server_default="0"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint("comments_count >= 0", name="comments_count_non_negative"),
)

Index("idx_posts_author_id", posts_table.c.author_id)

# ============================================================================
# COMMENTS TABLE
# ============================================================================
comments_table = Table(
    "comments",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("post_id", UUID, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False),
    Column(
        "parent_id", UUID, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    ),
    Column("author_id", UUID, nullable=False),
    Column("content", Text, nullable=False),
    Column("level", Integer, nullable=False, server_default="0"),
    Column("path", String(512), nullable=False),  # Dot-separated ancestor IDs
    Column("liked_by", ARRAY(UUID), nullable=False, server_default="{}"),
    Column("likes_count", Integer, nullable=False, server_default="0"),
    Column("replies_count", Integer, nullable=False, server_default="0"),
    Column("is_edited", Boolean, nullable=False, server_default="false"),
    Column("edited_at", TIMESTAMP(timezone=True), nullable=True),
    Column("flags", JSONB, nullable=False, server_default="[]"),
    Column("is_flagged", Boolean, nullable=False, server_default="false"),
    Column("flag_reason", String(30), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
    Column("deleted_by", UUID, nullable=True),
    CheckConstraint("level >= 0 AND level <= 5", name="level_in_range"),
    CheckConstraint("likes_count >= 0", name="likes_count_non_negative"),
    CheckConstraint("replies_count >= 0", name="replies_count_non_negative"),
    CheckConstraint(
        "likes_count = cardinality(liked_by)", name="likes_count_matches_likers"
    ),
)

Index(
    "idx_comments_post_parent_created",
    comments_table.c.post_id,
    comments_table.c.parent_id,
    comments_table.c.created_at,
)
Index(
    "idx_comments_author_created",
    comments_table.c.author_id,
    comments_table.c.created_at.desc(),
)
Index("idx_comments_deleted_at", comments_table.c.deleted_at)
# Prefix (LIKE 'x.%') lookups on path need the pattern operator class
Index(
    "idx_comments_path",
    comments_table.c.path,
    postgresql_ops={"path": "varchar_pattern_ops"},
)
