# src/utils/letters_repo.py
from __future__ import annotations

import enum
import logging
import random
import string
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from dateutil import parser as dtparser

from utils.supabase_utils import DEFAULT_BUCKET, DEFAULT_TABLE

logger = logging.getLogger(__name__)

JPEG_CONTENT_TYPE = "image/jpeg"


class Behavior(str, enum.Enum):
    NICE = "nice"
    NAUGHTY = "naughty"


@dataclass(frozen=True)
class Letter:
    id: str
    name: str
    wishlist: str
    behavior: Behavior = Behavior.NICE
    age: Optional[int] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    image_url: Optional[str] = None
    is_read: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Letter":
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            wishlist=row.get("wishlist") or "",
            behavior=Behavior(row.get("behavior") or Behavior.NICE.value),
            age=row.get("age"),
            email=row.get("email"),
            phone=row.get("phone"),
            image_url=row.get("image_url"),
            is_read=bool(row.get("is_read")),
            created_at=parse_ts(row.get("created_at")),
        )


def parse_ts(val: Any) -> Optional[datetime]:
    if val is None or isinstance(val, datetime):
        return val
    ts = dtparser.isoparse(str(val))
    # naive timestamps from the API are UTC
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def _raise_on_error(res: Any, what: str) -> Any:
    """Older storage clients return {error: ...} instead of raising."""
    err = getattr(res, "error", None)
    if isinstance(res, dict):
        err = err or res.get("error")
    if err:
        msg = getattr(err, "message", None) or str(err)
        raise RuntimeError(f"{what} failed: {msg}")
    return res


# ---------- storage ----------
def image_object_name(now_ms: Optional[int] = None) -> str:
    """Timestamp + random suffix, e.g. 1733054400000-k3j9x2a.jpg"""
    ms = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=7))
    return f"{ms}-{suffix}.jpg"


def upload_image(supabase, data: bytes, *, bucket: str = DEFAULT_BUCKET, path: Optional[str] = None) -> str:
    """Upload a JPEG to the bucket and return its public URL."""
    path = path or image_object_name()
    bucket_ref = supabase.storage.from_(bucket)
    res = bucket_ref.upload(
        path=path,
        file=data,
        file_options={"content-type": JPEG_CONTENT_TYPE, "upsert": "false"},
    )
    _raise_on_error(res, "Image upload")
    stored = getattr(res, "path", None) or path
    url = bucket_ref.get_public_url(stored)
    if isinstance(url, dict):
        url = url.get("publicUrl") or url.get("publicURL")
    logger.info("uploaded letter image %s", stored)
    return str(url)


# ---------- writes ----------
def insert_letter(supabase, row: Dict[str, Any], *, table: str = DEFAULT_TABLE) -> Optional[Letter]:
    res = supabase.table(table).insert(row).execute()
    data = getattr(res, "data", None) or []
    return Letter.from_row(data[0]) if data else None


def toggle_read(supabase, letter_id: str, current: bool, *, table: str = DEFAULT_TABLE) -> None:
    """Flip is_read for exactly one letter."""
    supabase.table(table).update({"is_read": not current}).eq("id", letter_id).execute()


def delete_letter(supabase, letter_id: str, *, table: str = DEFAULT_TABLE) -> None:
    supabase.table(table).delete().eq("id", letter_id).execute()


# ---------- reads ----------
def list_letters(supabase, *, table: str = DEFAULT_TABLE) -> List[Letter]:
    """All letters, newest first."""
    res = supabase.table(table).select("*").order("created_at", desc=True).execute()
    return [Letter.from_row(r) for r in (getattr(res, "data", None) or [])]


def latest_by_phone(supabase, phone: str, *, table: str = DEFAULT_TABLE) -> Optional[Dict[str, Any]]:
    """Most recently created row with this exact phone, or None."""
    res = (
        supabase.table(table)
        .select("id, name, behavior, created_at")
        .eq("phone", phone)
        .order("created_at", desc=True)
        .limit(1)
        .execute()
    )
    rows = getattr(res, "data", None) or []
    return rows[0] if rows else None
