# layout/ui.py
from __future__ import annotations
import html
from contextlib import contextmanager
from typing import List

import streamlit as st
from layout.menu import MENU

def inject_styles() -> None:
    """Base styles shared by all views (cards, badges, ticket)."""
    st.markdown(
        """
        <style>
          .sl-card-header { font-weight: 700; margin: .15rem 0 .35rem; }
          .sl-card-sub { color: var(--sl-muted); font-size:.95rem; margin-top:-.2rem; margin-bottom:.35rem; }

          .sl-badge { display:inline-block; padding:.1rem .55rem; border-radius:999px;
                      font-size:.75rem; font-weight:700; text-transform:uppercase; }
          .sl-badge.nice { background: rgba(21,128,61,.15); color: var(--sl-accent); }
          .sl-badge.naughty { background: rgba(234,179,8,.3); color: var(--sl-text); }
          .sl-badge.unread { background: var(--sl-primary); color:#fff; }

          .sl-ticket { background: linear-gradient(135deg, var(--sl-primary), #7F1D1D);
                       color:#fff; border-radius: var(--sl-radius); padding: 1.5rem; }
          .sl-ticket .pill { display:inline-block; background: rgba(255,255,255,.2); padding:.15rem .7rem;
                             border-radius:999px; font-size:.7rem; font-weight:700;
                             letter-spacing:.08em; text-transform:uppercase; }
          .sl-ticket h3 { text-align:center; margin:.5rem 0 1rem; color:#fff; }
          .sl-ticket .row { display:flex; justify-content:space-between; margin:.35rem 0; }
          .sl-ticket .label { opacity:.7; font-size:.9rem; }
          .sl-ticket .mono { font-family: monospace; font-weight:700; font-size:1.1rem; }
          .sl-ticket .event { border-top:1px solid rgba(255,255,255,.25); margin-top:1rem; padding-top:.75rem; font-size:.9rem; }
          .sl-ticket .foot { text-align:center; opacity:.6; font-size:.75rem; margin-top:1rem; }

          .sl-stamp { float:right; transform: rotate(12deg); border:3px dashed var(--sl-primary);
                      border-radius:50%; width:90px; height:90px; display:flex; align-items:center;
                      justify-content:center; text-align:center; font-size:.65rem; font-weight:700;
                      color: var(--sl-primary); text-transform:uppercase; }
        </style>
        """,
        unsafe_allow_html=True,
    )

@contextmanager
def card(title: str, subtitle: str | None = None, *, border: bool = True):
    """Consistent panel used across views."""
    with st.container(border=border):
        st.markdown(f'<div class="sl-card-header">{title}</div>', unsafe_allow_html=True)
        if subtitle:
            st.markdown(f'<div class="sl-card-sub">{subtitle}</div>', unsafe_allow_html=True)
        yield

def render_sidebar() -> str:
    """View picker built from MENU; returns the chosen label."""
    labels = [item["label"] for item in MENU]
    icons = {item["label"]: item.get("icon", "") for item in MENU}
    return st.sidebar.selectbox(
        "Where to?",
        labels,
        format_func=lambda l: f"{icons[l]} {l}".strip(),
        key="nav_view",
    )

def render_config_error(missing: List[str]) -> None:
    """Full-screen blocking message; the app stops after this."""
    names = ", ".join(f"<code>{html.escape(m)}</code>" for m in missing)
    st.markdown(
        f"""
        <div style="display:flex;flex-direction:column;align-items:center;justify-content:center;
                    min-height:70vh;padding:20px;background:#1a1a2e;color:#fff;text-align:center;
                    border-radius:12px">
          <h1 style="font-size:24px;margin-bottom:16px;color:#ff6b6b">Configuration Error</h1>
          <p style="font-size:16px;margin-bottom:24px;max-width:500px;color:#ccc">
            The app is missing required environment variables: {names}.
          </p>
          <p style="font-size:14px;color:#999;max-width:500px">
            Add them in Streamlit Cloud → Settings → Secrets (TOML), in
            <code>.streamlit/secrets.toml</code>, or export them before starting the app.
          </p>
        </div>
        """,
        unsafe_allow_html=True,
    )
    st.stop()
