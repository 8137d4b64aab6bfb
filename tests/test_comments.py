"""Tests for CommentThread: loading, replies, edits and both delete policies."""

import pytest

from showcase.core.comments import CommentThread, DeletePolicy
from showcase.core.errors import (
    CommentMutationFailed,
    CommentNotFound,
    LoadFailed,
    RequiresAuthentication,
    ValidationError,
)
from showcase.core.session import SessionState

from conftest import PASSWORD, project_id


@pytest.fixture
def pixel(store):
    return project_id(store, "Pixel Garden")


def sign_in(session, name):
    return session.sign_in(f"{name}@example.com", PASSWORD)


class TestLoad:
    def test_replies_attach_to_parent(self, thread, pixel):
        thread.load(pixel)

        assert thread.project_id == pixel
        assert len(thread.top_level) == 1
        parent = thread.top_level[0]
        assert parent.author_name == "linus@example.com"
        assert [r.author_name for r in parent.replies] == ["ada@example.com"]
        assert parent.replies[0].parent_id == parent.id
        assert thread.count() == 2

    def test_failure_keeps_prior_thread(self, thread, gateway, pixel):
        thread.load(pixel)
        gateway.fail_next("query_replies")
        with pytest.raises(LoadFailed):
            thread.load(pixel)
        assert thread.count() == 2


class TestAdd:
    def test_new_comment_goes_first(self, thread, session, pixel):
        user = sign_in(session, "grace")
        thread.load(pixel)

        comment = thread.add_comment(pixel, user.id, "  Beautiful  ")

        assert thread.top_level[0] == comment
        assert comment.content == "Beautiful"
        assert comment.author_name == "grace@example.com"

    def test_reply_appends_to_parent(self, thread, session, pixel):
        user = sign_in(session, "grace")
        thread.load(pixel)
        parent = thread.top_level[0]

        reply = thread.add_reply(parent.id, user.id, "Same here")

        replies = thread.top_level[0].replies
        assert replies[-1] == reply
        assert reply.parent_id == parent.id
        assert len(replies) == 2

    def test_reply_leaves_other_threads_untouched(self, thread, session, pixel):
        user = sign_in(session, "grace")
        thread.load(pixel)
        linus_comment = thread.top_level[0]
        other = thread.add_comment(pixel, user.id, "Which framework is this?")
        other_reply = thread.add_reply(other.id, user.id, "Asking for a friend")

        reply = thread.add_reply(linus_comment.id, user.id, "Agreed")

        assert thread.find(other.id).replies == (other_reply,)
        assert thread.find(linus_comment.id).replies[-1] == reply
        assert reply.is_reply and not other.is_reply
        assert thread.count() == 5

    def test_reply_to_reply_rejected(self, thread, gateway, session, pixel):
        user = sign_in(session, "grace")
        thread.load(pixel)
        nested = thread.top_level[0].replies[0]

        with pytest.raises(ValidationError):
            thread.add_reply(nested.id, user.id, "Too deep")
        assert gateway.calls_to("insert_comment") == []

    def test_blank_text_rejected(self, thread, session, pixel):
        user = sign_in(session, "grace")
        with pytest.raises(ValidationError):
            thread.add_comment(pixel, user.id, "   ")

    def test_requires_author(self, gateway, pixel):
        thread = CommentThread(gateway, SessionState(gateway))
        with pytest.raises(RequiresAuthentication):
            thread.add_comment(pixel, None, "Hello")

    def test_gateway_failure_leaves_thread_unchanged(self, thread, gateway, session, pixel):
        user = sign_in(session, "grace")
        thread.load(pixel)
        gateway.fail_next("insert_comment")

        with pytest.raises(CommentMutationFailed):
            thread.add_comment(pixel, user.id, "Hello")
        assert thread.count() == 2


class TestEdit:
    def test_edit_top_level(self, thread, session, pixel):
        sign_in(session, "linus")
        thread.load(pixel)
        parent = thread.top_level[0]

        edited = thread.edit_comment(parent.id, "Love the palette!!")

        assert thread.top_level[0].content == "Love the palette!!"
        assert edited.updated_at is not None
        assert len(thread.top_level[0].replies) == 1

    def test_edit_reply(self, thread, session, store, pixel):
        sign_in(session, "ada")
        thread.load(pixel)
        reply = thread.top_level[0].replies[0]

        thread.edit_comment(reply.id, "Thanks!")

        assert thread.top_level[0].replies[0].content == "Thanks!"
        assert store.comments[reply.id]["content"] == "Thanks!"

    def test_cannot_edit_someone_elses_comment(self, thread, session, pixel):
        sign_in(session, "grace")
        thread.load(pixel)
        parent = thread.top_level[0]

        with pytest.raises(CommentMutationFailed):
            thread.edit_comment(parent.id, "Hijacked")
        assert thread.top_level[0].content == parent.content
        assert thread.top_level[0].updated_at is None

    def test_unknown_comment(self, thread, pixel):
        thread.load(pixel)
        with pytest.raises(CommentNotFound):
            thread.edit_comment("missing", "text")


class TestDelete:
    def test_delete_reply(self, thread, session, store, pixel):
        sign_in(session, "ada")
        thread.load(pixel)
        reply = thread.top_level[0].replies[0]

        thread.delete_comment(reply.id)

        assert thread.top_level[0].replies == ()
        assert reply.id not in store.comments

    def test_orphan_policy_promotes_replies(self, thread, session, store, pixel):
        sign_in(session, "linus")
        thread.load(pixel)
        parent = thread.top_level[0]
        reply = parent.replies[0]

        thread.delete_comment(parent.id)

        assert [c.id for c in thread.top_level] == [reply.id]
        assert thread.top_level[0].parent_id is None
        assert store.comments[reply.id]["parent_id"] is None

        thread.load(pixel)
        assert [c.id for c in thread.top_level] == [reply.id]

    def test_cascade_policy_removes_replies(self, gateway, session, store, pixel):
        thread = CommentThread(gateway, session, delete_policy=DeletePolicy.CASCADE)
        user = sign_in(session, "linus")
        thread.load(pixel)
        parent = thread.add_comment(pixel, user.id, "Question for the maker")
        reply = thread.add_reply(parent.id, user.id, "Answering myself")

        thread.delete_comment(parent.id)

        assert thread.find(parent.id) is None
        assert parent.id not in store.comments
        assert reply.id not in store.comments
        assert thread.count() == 2

    def test_cascade_partial_failure(self, gateway, session, store, pixel):
        thread = CommentThread(gateway, session, delete_policy="cascade")
        linus = sign_in(session, "linus")
        thread.load(pixel)
        parent = thread.top_level[0]
        own_reply = thread.add_reply(parent.id, linus.id, "Also the fonts")
        ada_reply = parent.replies[0]

        # ada's reply is deleted first and linus may not delete it
        with pytest.raises(CommentMutationFailed):
            thread.delete_comment(parent.id)

        assert thread.find(parent.id) is not None
        assert thread.find(ada_reply.id) is not None
        assert own_reply.id in store.comments
