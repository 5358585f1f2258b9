# src/views/santa_admin.py
import logging
from dataclasses import asdict
from typing import List

import pandas as pd
import streamlit as st

from layout.menu import WRITE_LETTER
from layout.theme import page_header
from utils.admin_auth import admin_status
from utils.admin_filters import BEHAVIOR_OPTIONS, SORT_OPTIONS, STATUS_OPTIONS, LetterFilter, apply_filters
from utils.letters_repo import Letter, delete_letter, list_letters, toggle_read
from utils.live_sync import ChangeFeed
from utils.supabase_utils import (
    get_supabase_client,
    letters_table,
    live_poll_seconds,
    supabase_credentials,
)

logger = logging.getLogger(__name__)

BEHAVIOR_LABELS = {"all": "All Behavior", "nice": "Nice", "naughty": "Naughty"}
STATUS_LABELS = {"all": "All Status", "unread": "Unread", "read": "Read"}
SORT_LABELS = {"newest": "Newest First", "oldest": "Oldest First"}
FEED_IDLE_POLLS = 10


# ---------- live feed (scoped to this view) ----------
def get_feed() -> ChangeFeed:
    feed = st.session_state.get("admin_feed")
    if feed is None:
        url, key = supabase_credentials()
        # live_watch touches the feed every poll; a closed tab stops touching it
        feed = ChangeFeed(url, key, letters_table(), idle_timeout=FEED_IDLE_POLLS * live_poll_seconds())
        st.session_state["admin_feed"] = feed.start()
    elif feed.abandoned:
        # changes were missed while it was down
        st.session_state.pop("admin_letters", None)
        feed.start()
    feed.touch()
    return feed


def release_feed() -> None:
    """Tear down the subscription and forget the cached list."""
    feed = st.session_state.pop("admin_feed", None)
    if feed is not None:
        feed.stop()
    st.session_state.pop("admin_letters", None)
    st.session_state.pop("admin_seen_version", None)


def refresh_letters() -> None:
    """Full re-fetch. On error the previous list stays on screen."""
    try:
        st.session_state["admin_letters"] = list_letters(get_supabase_client(), table=letters_table())
    except Exception as e:
        logger.warning("fetching letters failed", exc_info=True)
        st.toast(f"Error fetching letters: {e}", icon="❌")


def sync_letters(feed: ChangeFeed) -> List[Letter]:
    version = feed.version  # read first so a change during the fetch triggers another one
    if "admin_letters" not in st.session_state or st.session_state.get("admin_seen_version") != version:
        refresh_letters()
        st.session_state["admin_seen_version"] = version
    return st.session_state.get("admin_letters", [])


@st.fragment(run_every=live_poll_seconds())
def live_watch():
    feed = st.session_state.get("admin_feed")
    if feed is None:
        return
    feed.touch()
    if feed.version != st.session_state.get("admin_seen_version"):
        st.rerun()
    if feed.error:
        st.caption(f"⚠️ Live updates off ({feed.error}). Use Refresh.")
    elif feed.subscribed:
        st.caption("🟢 Live")


# ---------- mutations ----------
def _toggle(letter: Letter) -> None:
    try:
        toggle_read(get_supabase_client(), letter.id, letter.is_read, table=letters_table())
    except Exception as e:
        logger.warning("toggle read failed for %s", letter.id, exc_info=True)
        st.toast(f"Error updating letter: {e}", icon="❌")


@st.dialog("Are you sure?")
def confirm_delete(letter: Letter):
    st.write(f"This will permanently delete the letter from **{letter.name}**. This action cannot be undone.")
    c1, c2 = st.columns(2)
    if c1.button("Cancel", use_container_width=True):
        st.rerun()
    if c2.button("Delete", type="primary", use_container_width=True):
        try:
            delete_letter(get_supabase_client(), letter.id, table=letters_table())
            st.toast("Letter deleted", icon="🗑️")
        except Exception as e:
            logger.warning("delete failed for %s", letter.id, exc_info=True)
            st.toast(f"Error deleting letter: {e}", icon="❌")
        st.rerun()


@st.dialog("Attached photo", width="large")
def show_image(url: str):
    st.image(url, use_container_width=True)


def _exit_workshop():
    release_feed()
    st.session_state["nav_view"] = WRITE_LETTER


# ---------- rendering ----------
def letters_frame(letters: List[Letter]) -> pd.DataFrame:
    rows = []
    for l in letters:
        row = asdict(l)
        row["behavior"] = l.behavior.value
        row["created_at"] = l.created_at.isoformat() if l.created_at else None
        rows.append(row)
    return pd.DataFrame(rows, columns=list(Letter.__dataclass_fields__))


def _letter_card(letter: Letter) -> None:
    with st.container(border=True):
        top, actions = st.columns([5, 2])
        with top:
            age = f" <small>({letter.age} y/o)</small>" if letter.age else ""
            unread = "" if letter.is_read else ' <span class="sl-badge unread">new</span>'
            st.markdown(
                f"### {letter.name}{age}{unread}<br>"
                f'<span class="sl-badge {letter.behavior.value}">{letter.behavior.value}</span>',
                unsafe_allow_html=True,
            )
        with actions:
            a1, a2 = st.columns(2)
            a1.button(
                "🙈" if letter.is_read else "👁️",
                key=f"read_{letter.id}",
                help="Mark as unread" if letter.is_read else "Mark as read",
                on_click=_toggle,
                args=(letter,),
            )
            if a2.button("🗑️", key=f"del_{letter.id}", help="Delete letter"):
                confirm_delete(letter)

        st.markdown(f"> {letter.wishlist}")
        if letter.image_url:
            st.image(letter.image_url, width=140)
            if st.button("🔍 Enlarge", key=f"img_{letter.id}"):
                show_image(letter.image_url)

        contact = []
        if letter.phone:
            contact.append(f"📞 {letter.phone}")
        if letter.email:
            contact.append(f"✉️ {letter.email}")
        if letter.created_at:
            contact.append(f"🕒 {letter.created_at:%b %d, %Y %H:%M}")
        if contact:
            st.caption(" · ".join(contact))


def _gate() -> bool:
    status = admin_status()
    if status == "ok":
        return True
    page_header("🎅 Santa's Workshop", "Elves only beyond this point.")
    if status == "unconfigured":
        st.error("Admin access is not configured. Set SANTA_ADMIN_EMAILS and the [auth] section in secrets.toml.")
    elif status == "signed-out":
        if st.button("Sign in", type="primary"):
            try:
                st.login()
            except Exception as e:
                st.error(f"Sign-in is unavailable: {e}")
    else:
        st.error("Nice try, Grinch! This account is not on Santa's admin list.")
        if st.button("Sign out"):
            st.logout()
    return False


def run_santa_admin():
    if not _gate():
        release_feed()
        return

    feed = get_feed()
    letters = sync_letters(feed)

    head, side = st.columns([3, 2])
    with head:
        page_header("🎅 Santa's Admin Panel", f"{len(letters)} Letters Received")
    with side:
        b1, b2 = st.columns(2)
        if b1.button("↻ Refresh", use_container_width=True):
            refresh_letters()
            st.rerun()
        b2.button("Exit Workshop", use_container_width=True, on_click=_exit_workshop)
        live_watch()

    search = st.text_input("Search by name...", key="admin_search")
    c1, c2, c3 = st.columns(3)
    behavior = c1.selectbox("Behavior", BEHAVIOR_OPTIONS, format_func=BEHAVIOR_LABELS.get, key="admin_behavior")
    status = c2.selectbox("Status", STATUS_OPTIONS, format_func=STATUS_LABELS.get, key="admin_status")
    sort = c3.selectbox("Sort", SORT_OPTIONS, format_func=SORT_LABELS.get, key="admin_sort")

    shown = apply_filters(letters, LetterFilter(search=search, behavior=behavior, status=status, sort=sort))

    st.download_button(
        "⬇️ Download CSV",
        letters_frame(shown).to_csv(index=False).encode("utf-8"),
        file_name="santa_letters.csv",
        mime="text/csv",
        disabled=not shown,
    )

    if not shown:
        st.info("No letters match these filters." if letters else "No letters yet.")
        return
    for letter in shown:
        _letter_card(letter)
