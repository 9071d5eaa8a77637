"""Shared test fixtures and configuration."""
import os

# Settings are read at import time; point them at a dummy project
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from fastapi.testclient import TestClient

from app.database.supabase_client import (
    get_anon_client_factory, get_client_factory, get_supabase
)
from app.main import app
from app.modules.auth.service import clear_auth_cache
from tests.fakes import FakeSupabase


@pytest.fixture(autouse=True)
def reset_auth_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def client(supabase):
    app.dependency_overrides[get_supabase] = lambda: supabase
    app.dependency_overrides[get_client_factory] = lambda: (lambda token: supabase)
    app.dependency_overrides[get_anon_client_factory] = lambda: (lambda: supabase)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
