# src/utils/tickets.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from utils.errors import ValidationError
from utils.letters_repo import Behavior, parse_ts, latest_by_phone
from utils.supabase_utils import DEFAULT_TABLE

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "We couldn't find a letter with this phone number."


def ticket_number(letter_id: str) -> str:
    """First 8 chars of the id, uppercased. Cosmetic, not unique."""
    return str(letter_id)[:8].upper()


@dataclass(frozen=True)
class Ticket:
    number: str
    name: str
    behavior: Behavior
    created_at: Optional[datetime]

    @property
    def list_status(self) -> str:
        return "NICE ✓" if self.behavior is Behavior.NICE else "NAUGHTY (but forgiven)"

    @property
    def registered(self) -> str:
        return self.created_at.strftime("%b %d, %Y") if self.created_at else "—"


def find_ticket(supabase, phone: str, *, table: str = DEFAULT_TABLE) -> Optional[Ticket]:
    """
    Ticket for the newest letter sent with exactly this phone number.
    No match and backend errors both come back as None.
    """
    phone = (phone or "").strip()
    if not phone:
        raise ValidationError("Please enter the phone number used when submitting the letter.")
    try:
        row = latest_by_phone(supabase, phone, table=table)
        if not row:
            return None
        return Ticket(
            number=ticket_number(row["id"]),
            name=row.get("name") or "",
            behavior=Behavior(row.get("behavior") or Behavior.NICE.value),
            created_at=parse_ts(row.get("created_at")),
        )
    except Exception:
        logger.warning("ticket lookup failed", exc_info=True)
        return None
