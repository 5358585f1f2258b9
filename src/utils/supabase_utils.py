# src/utils/supabase_utils.py
"""
Secrets helper + Supabase client creator.

Resolution order for secrets:
1) st.secrets (Streamlit Cloud / local .streamlit/secrets.toml)
2) Environment variables (.env, Doppler CLI, GH Actions, Docker)

Aliases supported:
- SUPABASE_URL       or SUPABASE__URL
- SUPABASE_ANON_KEY  or SUPABASE_PUBLISHABLE_KEY  or SUPABASE_KEY
"""

from __future__ import annotations

import os
from typing import List

import streamlit as st
from dotenv import load_dotenv
from supabase import Client, create_client

from utils.errors import ConfigError

# make local .env work
load_dotenv()

URL_NAMES = ("SUPABASE_URL", "SUPABASE__URL")
KEY_NAMES = ("SUPABASE_ANON_KEY", "SUPABASE_PUBLISHABLE_KEY", "SUPABASE_KEY")

DEFAULT_TABLE = "santa_letters"
DEFAULT_BUCKET = "letter-images"


def sget(*names: str) -> str | None:
    """
    Return the first non-empty value among names,
    checking Streamlit secrets first, then environment.
    """
    for n in names:
        # Streamlit secrets raise when no secrets.toml exists
        try:
            if hasattr(st, "secrets") and n in st.secrets:
                v = st.secrets[n]
                if v:
                    return str(v)
        except Exception:
            pass
        v = os.getenv(n)
        if v:
            return v
    return None


def missing_supabase_config() -> List[str]:
    """Names of the required Supabase settings that are not set anywhere."""
    missing = []
    if not sget(*URL_NAMES):
        missing.append("SUPABASE_URL")
    if not sget(*KEY_NAMES):
        missing.append("SUPABASE_ANON_KEY")
    return missing


def supabase_credentials() -> tuple[str, str]:
    """(url, key) or ConfigError listing what is missing."""
    missing = missing_supabase_config()
    if missing:
        raise ConfigError(missing)
    return sget(*URL_NAMES), sget(*KEY_NAMES)  # type: ignore[return-value]


@st.cache_resource(show_spinner=False)
def get_supabase_client() -> Client:
    """Create a cached Supabase client."""
    url, key = supabase_credentials()
    return create_client(url, key)


# --- App settings -------------------------------------------------------------

def letters_table() -> str:
    return sget("SANTA_LETTERS_TABLE") or DEFAULT_TABLE


def images_bucket() -> str:
    return sget("SANTA_IMAGES_BUCKET") or DEFAULT_BUCKET


def admin_emails() -> List[str]:
    """Comma separated SANTA_ADMIN_EMAILS, lowercased. Empty list means nobody."""
    raw = sget("SANTA_ADMIN_EMAILS") or ""
    return [e.strip().lower() for e in raw.split(",") if e.strip()]


def live_poll_seconds(default: float = 2.0) -> float:
    raw = sget("SANTA_LIVE_POLL_SECONDS")
    try:
        return max(0.5, float(raw)) if raw else default
    except ValueError:
        return default


def event_details() -> dict:
    return {
        "venue": sget("SANTA_EVENT_VENUE") or "Phungreitang, Opposite Electric Dept Office",
        "time": sget("SANTA_EVENT_TIME") or "December 25th at Midnight",
    }


def log_level() -> str:
    return (sget("SANTA_LOG_LEVEL") or "INFO").upper()
