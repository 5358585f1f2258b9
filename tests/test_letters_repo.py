"""Tests for the santa_letters table and letter-images bucket access."""

import re
from datetime import datetime, timezone

import pytest

from fakes import FakeBackendError
from utils.letters_repo import (
    Behavior,
    Letter,
    delete_letter,
    image_object_name,
    insert_letter,
    list_letters,
    toggle_read,
    upload_image,
)

TABLE = "santa_letters"


@pytest.fixture
def seeded(supabase):
    supabase.seed(
        TABLE,
        {"name": "Tom", "wishlist": "sled"},
        {"name": "Amy", "wishlist": "doll", "behavior": "naughty", "is_read": True},
        {"name": "Bo", "wishlist": "train"},
    )
    return supabase


def test_letter_from_row_parses_types():
    letter = Letter.from_row({
        "id": "3f2a", "name": "Tom", "wishlist": "sled", "behavior": "naughty",
        "age": 7, "is_read": None, "created_at": "2025-12-01T09:00:00+00:00",
    })
    assert letter.behavior is Behavior.NAUGHTY
    assert letter.is_read is False
    assert letter.created_at == datetime(2025, 12, 1, 9, 0, tzinfo=timezone.utc)


def test_naive_timestamps_are_utc():
    letter = Letter.from_row({"id": 1, "name": "x", "wishlist": "y", "created_at": "2025-12-01T09:00:00"})
    assert letter.created_at.tzinfo is timezone.utc


def test_list_letters_newest_first(seeded):
    assert [l.name for l in list_letters(seeded)] == ["Bo", "Amy", "Tom"]


def test_insert_returns_the_created_letter(supabase):
    letter = insert_letter(supabase, {"name": "Tom", "wishlist": "sled", "behavior": "nice"})
    assert letter.name == "Tom"
    assert letter.id
    assert letter.created_at is not None


def test_toggle_read_flips_only_that_letter(seeded):
    before = {l.id: l.is_read for l in list_letters(seeded)}
    target = next(l for l in list_letters(seeded) if l.name == "Tom")

    toggle_read(seeded, target.id, target.is_read)

    after = {l.id: l.is_read for l in list_letters(seeded)}
    assert after[target.id] is True
    assert {k: v for k, v in after.items() if k != target.id} == {
        k: v for k, v in before.items() if k != target.id
    }

    toggle_read(seeded, target.id, True)
    assert {l.id: l.is_read for l in list_letters(seeded)} == before


def test_delete_removes_only_that_letter(seeded):
    letters = list_letters(seeded)
    gone = letters[1]

    delete_letter(seeded, gone.id)

    remaining = list_letters(seeded)
    assert gone.id not in {l.id for l in remaining}
    assert [l.id for l in remaining] == [l.id for l in letters if l.id != gone.id]


def test_backend_errors_propagate(seeded):
    seeded.fail_on.add("update")
    with pytest.raises(FakeBackendError):
        toggle_read(seeded, "whatever", False)


def test_image_object_name_format():
    name = image_object_name(now_ms=1733054400000)
    assert re.fullmatch(r"1733054400000-[a-z0-9]{7}\.jpg", name)
    assert image_object_name() != image_object_name()


def test_upload_returns_public_url(supabase):
    url = upload_image(supabase, b"\xff\xd8jpeg", path="1-abc.jpg")
    assert url == "https://fake.supabase.co/storage/v1/object/public/letter-images/1-abc.jpg"
    assert supabase.blobs[("letter-images", "1-abc.jpg")][0] == b"\xff\xd8jpeg"


def test_upload_error_payload_raises():
    class Bucket:
        def upload(self, **kwargs):
            return {"error": {"message": "duplicate"}}

    class Storage:
        def from_(self, name):
            return Bucket()

    class Client:
        storage = Storage()

    with pytest.raises(RuntimeError, match="Image upload failed"):
        upload_image(Client(), b"x", path="p.jpg")
