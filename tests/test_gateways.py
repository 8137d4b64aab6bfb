"""Tests for the gateway registry, the in-memory backend and Supabase error mapping."""

import pytest
from postgrest.exceptions import APIError

from showcase.core.comments import CommentThread
from showcase.core.errors import (
    ForeignKeyViolation,
    GatewayError,
    PermissionDenied,
    UniqueConstraintViolation,
)
from showcase.gateways import supabase_gateway
from showcase.gateways.base import BaseGateway, get_gateway, list_gateways, register_gateway
from showcase.gateways.memory_gateway import MemoryGateway
from showcase.gateways.supabase_gateway import SupabaseGateway

from conftest import PASSWORD, project_id


class TestRegistry:
    def test_builtin_gateways_registered(self):
        assert {"memory", "supabase"} <= set(list_gateways())

    def test_get_gateway_passes_kwargs(self, store):
        gateway = get_gateway("memory", store=store)
        assert isinstance(gateway, MemoryGateway)
        assert gateway.store is store

    def test_unknown_gateway(self):
        with pytest.raises(ValueError, match="Unknown gateway"):
            get_gateway("firebase")

    def test_rejects_non_gateway_class(self):
        with pytest.raises(TypeError):
            register_gateway("not-a-gateway")(object)

    def test_rejects_duplicate_name(self):
        with pytest.raises(ValueError, match="already registered"):
            register_gateway("memory")(MemoryGateway)

    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            BaseGateway()


class TestMemoryConstraints:
    def test_duplicate_vote(self, gateway, store):
        user = gateway.sign_in("grace@example.com", PASSWORD)
        with pytest.raises(UniqueConstraintViolation):
            gateway.insert_vote(user.id, project_id(store, "Pixel Garden"))

    def test_vote_for_missing_project(self, gateway):
        user = gateway.sign_in("grace@example.com", PASSWORD)
        with pytest.raises(ForeignKeyViolation):
            gateway.insert_vote(user.id, "missing")

    def test_writes_scoped_to_session_user(self, gateway, store):
        gateway.sign_in("grace@example.com", PASSWORD)
        ada_id = store.accounts["ada@example.com"]["id"]
        with pytest.raises(PermissionDenied):
            gateway.insert_vote(ada_id, project_id(store, "Commit Poet"))

    def test_ordering_breaks_ties_by_recency(self, gateway):
        titles = [p.title for p in gateway.query_projects()]
        assert titles.index("Commit Poet") < titles.index("Bug Bingo")

    def test_sessions_share_one_store(self, store):
        first, second = MemoryGateway(store), MemoryGateway(store)
        user = first.sign_in("grace@example.com", PASSWORD)
        first.insert_vote(user.id, project_id(store, "Commit Poet"))

        assert second.current_user() is None
        assert second.get_project(project_id(store, "Commit Poet")).vote_count == 2


def _api_error(code, message="boom"):
    return APIError({"message": message, "code": code, "hint": None, "details": None})


def _response(rows):
    return type("Response", (), {"data": rows})()


class FakeCommentsTable:
    """Query builder whose inserts commit and whose reads fail."""

    def __init__(self, client):
        self.client = client
        self.payload = None

    def insert(self, payload):
        self.payload = payload
        return self

    def select(self, *args):
        return self

    def eq(self, *args):
        return self

    def limit(self, *args):
        return self

    def execute(self):
        if self.payload is not None:
            row = {"id": f"c{len(self.client.rows) + 1}",
                   "created_at": "2024-06-15T12:00:00.12345+00:00", **self.payload}
            self.client.rows.append(row)
            return _response([row])
        raise _api_error("08006", "connection failure")


class FakeClient:
    def __init__(self):
        self.rows = []

    def table(self, name):
        return FakeCommentsTable(self)


class TestSupabaseErrors:
    @pytest.mark.parametrize("code, expected", [
        ("23505", UniqueConstraintViolation),
        ("23503", ForeignKeyViolation),
        ("42501", PermissionDenied),
    ])
    def test_postgres_codes_mapped(self, code, expected):
        error = SupabaseGateway._map_api_error(_api_error(code))
        assert type(error) is expected
        assert error.code == code

    def test_unknown_code_keeps_message(self):
        error = SupabaseGateway._map_api_error(_api_error("XX000", "internal"))
        assert type(error) is GatewayError
        assert error.message == "internal"

    def test_rate_limited_reads_are_retried(self, monkeypatch):
        monkeypatch.setattr(supabase_gateway.time, "sleep", lambda seconds: None)
        gateway = SupabaseGateway.__new__(SupabaseGateway)
        attempts = []

        class Query:
            def execute(self):
                attempts.append(1)
                if len(attempts) < 3:
                    raise _api_error("429", "rate limit exceeded")
                return type("Response", (), {"data": [{"id": "1"}]})()

        assert gateway._read(Query) == [{"id": "1"}]
        assert len(attempts) == 3

    def test_comment_kept_when_author_lookup_fails(self):
        gateway = SupabaseGateway.__new__(SupabaseGateway)
        gateway.client = FakeClient()
        thread = CommentThread(gateway)

        comment = thread.add_comment("p1", "u1", "Hello")

        assert len(gateway.client.rows) == 1
        assert [c.id for c in thread.top_level] == [comment.id]
        assert comment.content == "Hello"
        assert comment.author_name is None

    def test_writes_touching_no_rows_are_denied(self):
        gateway = SupabaseGateway.__new__(SupabaseGateway)
        with pytest.raises(PermissionDenied):
            gateway._expect_rows([], "comment")

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.setattr(supabase_gateway.config, "SUPABASE_URL", "")
        monkeypatch.setattr(supabase_gateway.config, "SUPABASE_ANON_KEY", "")
        with pytest.raises(ValueError, match="credentials"):
            SupabaseGateway()
