# src/utils/admin_filters.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List

from utils.letters_repo import Letter

BEHAVIOR_OPTIONS = ("all", "nice", "naughty")
STATUS_OPTIONS = ("all", "unread", "read")
SORT_OPTIONS = ("newest", "oldest")

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class LetterFilter:
    search: str = ""
    behavior: str = "all"
    status: str = "all"
    sort: str = "newest"

    def __post_init__(self):
        if self.behavior not in BEHAVIOR_OPTIONS:
            raise ValueError(f"unknown behavior filter {self.behavior!r}")
        if self.status not in STATUS_OPTIONS:
            raise ValueError(f"unknown status filter {self.status!r}")
        if self.sort not in SORT_OPTIONS:
            raise ValueError(f"unknown sort order {self.sort!r}")

    def matches(self, letter: Letter) -> bool:
        term = self.search.strip().lower()
        if term and term not in letter.name.lower():
            return False
        if self.behavior != "all" and letter.behavior.value != self.behavior:
            return False
        if self.status == "read" and not letter.is_read:
            return False
        if self.status == "unread" and letter.is_read:
            return False
        return True


def _created(letter: Letter) -> datetime:
    return letter.created_at or _EPOCH


def apply_filters(letters: Iterable[Letter], flt: LetterFilter) -> List[Letter]:
    """
    Filter then sort by created_at. Returns a new list; the input is untouched.
    sorted() is stable, so equal timestamps keep their fetch order in both directions.
    """
    kept = [l for l in letters if flt.matches(l)]
    if flt.sort == "newest":
        return sorted(kept, key=_created, reverse=True)
    return sorted(kept, key=_created)
