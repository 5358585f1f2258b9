# src/utils/admin_auth.py
"""
Admin access for Santa's workshop.

Sign-in is Streamlit's OIDC login (configured under [auth] in secrets.toml);
this module only decides whether the signed-in email is on the allowlist.
"""

from __future__ import annotations

from typing import Iterable, Optional

import streamlit as st

from utils.supabase_utils import admin_emails


def is_admin_email(email: Optional[str], allowlist: Iterable[str]) -> bool:
    if not email:
        return False
    allowed = {a.strip().lower() for a in allowlist if a and a.strip()}
    return email.strip().lower() in allowed


def signed_in_email() -> Optional[str]:
    try:
        if st.user.is_logged_in:
            return st.user.get("email")
    except Exception:
        return None
    return None


def admin_status() -> str:
    """One of: unconfigured, signed-out, denied, ok."""
    allowlist = admin_emails()
    if not allowlist:
        return "unconfigured"
    email = signed_in_email()
    if not email:
        return "signed-out"
    return "ok" if is_admin_email(email, allowlist) else "denied"
