# layout/theme.py
from __future__ import annotations
import streamlit as st
from layout.ui import inject_styles as base_styles

# ---- Theme tokens (edit here to restyle the whole app) -----------------------
THEME = {
    "font_family": "Georgia, 'Times New Roman', serif",
    "bg": "#B91C1C",            # app background (Santa red)
    "panel": "#FFFBF0",         # letter paper
    "primary": "#B91C1C",
    "accent": "#15803D",        # nice
    "gold": "#EAB308",          # naughty / stamps
    "text": "#1F2937",
    "muted": "#6B7280",
    "radius": "12px",
    "shadow": "0 10px 30px rgba(0, 0, 0, 0.25)",
}

def _inject_theme_css() -> None:
    """Define global CSS variables + primitives, then load base component styles."""
    st.markdown(
        f"""
        <style>
          :root {{
            --sl-bg: {THEME['bg']};
            --sl-panel: {THEME['panel']};
            --sl-primary: {THEME['primary']};
            --sl-accent: {THEME['accent']};
            --sl-gold: {THEME['gold']};
            --sl-text: {THEME['text']};
            --sl-muted: {THEME['muted']};
            --sl-radius: {THEME['radius']};
            --sl-shadow: {THEME['shadow']};
            --sl-font: {THEME['font_family']};
          }}
          html, body, [data-testid="stAppViewContainer"] {{
            background: var(--sl-bg) !important;
          }}
          [data-testid="stMainBlockContainer"] {{
            background: var(--sl-panel);
            color: var(--sl-text);
            border-radius: var(--sl-radius);
            box-shadow: var(--sl-shadow);
            margin-top: 2rem;
          }}
          /* Primary buttons */
          .stButton > button[kind="primary"], .stFormSubmitButton > button {{
            background: var(--sl-primary);
            color:#fff; border:0; border-radius: var(--sl-radius);
            padding:.6rem 1rem; font-weight:700;
          }}
          .sl-hero {{ text-align:center; margin-bottom:1rem; }}
          .sl-hero h1 {{
            font-family: var(--sl-font); font-size:2.6rem; margin:0; color: var(--sl-primary);
          }}
          .sl-hero .tagline {{ margin-top:.35rem; color:var(--sl-muted); }}
          .sl-header h1 {{ font-family: var(--sl-font); font-size:2rem; margin:.25rem 0; }}
          .sl-header .tag {{ opacity:.75; margin-top:.15rem; }}
        </style>
        """,
        unsafe_allow_html=True,
    )
    base_styles()

def page_setup(page_title: str = "Dear Santa...") -> None:
    st.set_page_config(page_title=page_title, page_icon="🎅", layout="centered")
    _inject_theme_css()


def hero(title_html: str, tagline: str) -> None:
    """Landing hero block (HTML allowed in title_html for line breaks)."""
    st.markdown(
        f'<div class="sl-hero"><div style="font-size:48px">🎁</div>'
        f'<h1>{title_html}</h1><div class="tagline">{tagline}</div></div>',
        unsafe_allow_html=True,
    )

def page_header(title: str, tag: str = "") -> None:
    """Uniform page header for the ticket and admin views."""
    st.markdown(
        f'<div class="sl-header"><h1>{title}</h1><div class="tag">{tag}</div></div>',
        unsafe_allow_html=True,
    )
