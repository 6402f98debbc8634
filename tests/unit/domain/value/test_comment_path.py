"""Unit tests for CommentPath."""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from quill.domain.value import CommentId, CommentPath


class TestCommentPath:
    """Tests for the materialized path value object."""

    def test_top_level_path_is_own_id(self):
        comment_id = CommentId(uuid4())

        path = CommentPath.for_top_level(comment_id)

        assert path.root == str(comment_id)
        assert path.depth == 0
        assert path.ids == [comment_id]

    def test_child_appends_id_with_dot(self):
        root_id, child_id = CommentId(uuid4()), CommentId(uuid4())
        root = CommentPath.for_top_level(root_id)

        child = root.child(child_id)

        assert child.root == f"{root_id}.{child_id}"
        assert child.depth == 1
        assert child.ids == [root_id, child_id]

    def test_is_ancestor_of_descendants_only(self):
        root = CommentPath.for_top_level(CommentId(uuid4()))
        child = root.child(CommentId(uuid4()))
        grandchild = child.child(CommentId(uuid4()))
        sibling = CommentPath.for_top_level(CommentId(uuid4()))

        assert root.is_ancestor_of(child)
        assert root.is_ancestor_of(grandchild)
        assert not root.is_ancestor_of(root)
        assert not root.is_ancestor_of(sibling)
        assert not grandchild.is_ancestor_of(root)

    def test_descendant_prefix_ends_with_separator(self):
        root = CommentPath.for_top_level(CommentId(uuid4()))

        assert root.descendant_prefix == root.root + "."

    @pytest.mark.parametrize("raw", ["", "not-a-uuid", f"{uuid4()}..{uuid4()}"])
    def test_invalid_paths_rejected(self, raw):
        with pytest.raises(ValidationError):
            CommentPath(raw)
