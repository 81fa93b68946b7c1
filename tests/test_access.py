"""Tests for meeting visibility (owner or share, optional project scope)."""

from __future__ import annotations

import pytest

from src.retrieval.access import (
    check_access,
    get_project_meeting_ids,
    list_accessible_meetings,
    list_accessible_projects,
    resolve_accessible_meeting_ids,
    resolve_accessible_project_ids,
    resolve_scope,
)
from tests.fakes import ACCESS_TABLES, FakeSupabase

USERS = ["alice", "bob", "carol", "dave"]
MEETINGS = ["m1", "m2", "m3", "m4", "missing"]


class TestResolveAccessibleMeetingIds:
    def test_owned_and_shared_are_combined(self, fake_client: FakeSupabase) -> None:
        assert resolve_accessible_meeting_ids(fake_client, "alice") == {"m1", "m2"}
        assert resolve_accessible_meeting_ids(fake_client, "bob") == {"m2", "m3", "m4"}

    def test_duplicates_collapse(self, fake_client: FakeSupabase) -> None:
        """alice owns m1 and also has a share record for it."""
        scope = resolve_accessible_meeting_ids(fake_client, "alice")
        assert sorted(scope) == ["m1", "m2"]

    def test_unknown_user_gets_empty_scope(self, fake_client: FakeSupabase) -> None:
        assert resolve_accessible_meeting_ids(fake_client, "dave") == frozenset()

    def test_recomputed_each_call(self) -> None:
        client = FakeSupabase(tables={"meetings": [], "meeting_shares": []})
        assert resolve_accessible_meeting_ids(client, "alice") == frozenset()
        client.tables["meetings"] = [{"id": "m9", "user_id": "alice"}]
        assert resolve_accessible_meeting_ids(client, "alice") == {"m9"}


class TestCheckAccess:
    @pytest.mark.parametrize("user_id", USERS)
    @pytest.mark.parametrize("meeting_id", MEETINGS)
    def test_point_check_matches_enumeration(
        self, fake_client: FakeSupabase, user_id: str, meeting_id: str
    ) -> None:
        enumerated = resolve_accessible_meeting_ids(fake_client, user_id)
        assert check_access(fake_client, meeting_id, user_id) == (meeting_id in enumerated)

    def test_shared_meeting_is_visible(self, fake_client: FakeSupabase) -> None:
        assert check_access(fake_client, "m4", "bob") is True

    def test_other_users_meeting_is_hidden(self, fake_client: FakeSupabase) -> None:
        assert check_access(fake_client, "m3", "alice") is False


class TestProjectScope:
    def test_project_meeting_ids(self, fake_client: FakeSupabase) -> None:
        assert get_project_meeting_ids(fake_client, "p1") == {"m1", "m3"}

    def test_scope_is_intersected_with_project(self, fake_client: FakeSupabase) -> None:
        assert resolve_scope(fake_client, "alice", "p1") == {"m1"}
        assert resolve_scope(fake_client, "bob", "p1") == {"m3"}

    def test_no_project_returns_full_scope(self, fake_client: FakeSupabase) -> None:
        assert resolve_scope(fake_client, "alice") == {"m1", "m2"}

    def test_project_without_visible_meetings_is_empty(self, fake_client: FakeSupabase) -> None:
        assert resolve_scope(fake_client, "carol", "p1") == frozenset()


class TestListAccessibleMeetings:
    def test_empty_scope_does_not_query(self) -> None:
        client = FakeSupabase(tables=ACCESS_TABLES)
        assert list_accessible_meetings(client, frozenset()) == []
        assert client.table_calls == []

    def test_only_scoped_meetings_are_listed(self, fake_client: FakeSupabase) -> None:
        rows = list_accessible_meetings(fake_client, frozenset({"m1", "m2"}))
        assert {r["id"] for r in rows} == {"m1", "m2"}


class TestAccessibleProjects:
    def test_owned_and_member_are_combined(self, fake_client: FakeSupabase) -> None:
        assert resolve_accessible_project_ids(fake_client, "alice") == {"p1"}
        assert resolve_accessible_project_ids(fake_client, "bob") == {"p1", "p2"}
        assert resolve_accessible_project_ids(fake_client, "carol") == {"p2", "p3"}

    def test_no_projects_does_not_list(self, fake_client: FakeSupabase) -> None:
        assert list_accessible_projects(fake_client, "dave") == []
        assert fake_client.table_calls == ["projects", "project_members"]

    def test_lists_only_accessible_projects(self, fake_client: FakeSupabase) -> None:
        rows = list_accessible_projects(fake_client, "bob")
        assert {r["id"] for r in rows} == {"p1", "p2"}
        assert {r["name"] for r in rows} == {"Launch", "Design"}
