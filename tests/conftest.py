"""Pytest configuration for the letters-to-Santa tests."""

import io

import pytest
from PIL import Image

from fakes import FakeSupabase


@pytest.fixture
def supabase() -> FakeSupabase:
    """Empty in-memory backend."""
    return FakeSupabase()


@pytest.fixture
def make_image():
    """Encode a solid-colour test picture of the given size and format."""

    def _make(width: int, height: int, fmt: str = "PNG", mode: str = "RGB") -> bytes:
        bio = io.BytesIO()
        color = {"RGB": (200, 30, 30), "RGBA": (200, 30, 30, 128), "L": 128}.get(mode, 0)
        Image.new(mode, (width, height), color=color).save(bio, format=fmt)
        return bio.getvalue()

    return _make


@pytest.fixture(autouse=True)
def _no_supabase_env(monkeypatch):
    for name in (
        "SUPABASE_URL", "SUPABASE__URL", "SUPABASE_ANON_KEY", "SUPABASE_PUBLISHABLE_KEY",
        "SUPABASE_KEY", "SANTA_ADMIN_EMAILS", "SANTA_LETTERS_TABLE", "SANTA_IMAGES_BUCKET",
        "SANTA_LIVE_POLL_SECONDS", "SANTA_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
