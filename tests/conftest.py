"""Shared test fixtures."""

from __future__ import annotations

import pytest

from tests.fakes import ACCESS_TABLES, FakeSupabase


@pytest.fixture
def fake_client() -> FakeSupabase:
    return FakeSupabase(tables=ACCESS_TABLES)
