import logging
import os
import sys

import streamlit as st

sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))          # /app/src

from layout.menu import CLAIM_TICKET, SANTA_ADMIN, WRITE_LETTER
from layout.theme import page_setup
from layout.ui import render_config_error, render_sidebar
from utils.supabase_utils import log_level, missing_supabase_config, sget


def doppler_bootstrap():
    DT = sget("DOPPLER_TOKEN")
    DP = sget("DOPPLER_PROJECT")
    DC = sget("DOPPLER_CONFIG")
    if not (DT and DP and DC):
        return  # Safe no-op locally or if Doppler not configured

    import requests
    r = requests.get(
        "https://api.doppler.com/v3/configs/config/secrets",
        params={"project": DP, "config": DC},
        headers={"Authorization": f"Bearer {DT}"},
        timeout=10,
    )
    r.raise_for_status()
    secrets = r.json().get("secrets", {})

    # Map Doppler names -> standard names the app expects
    ALIASES = {
        "SUPABASE__URL":            "SUPABASE_URL",
        "SUPABASE_URL":             "SUPABASE_URL",
        "SUPABASE_PUBLISHABLE_KEY": "SUPABASE_ANON_KEY",
        "SUPABASE__ANON_KEY":       "SUPABASE_ANON_KEY",
        "SUPABASE_ANON_KEY":        "SUPABASE_ANON_KEY",
        "SUPABASE_KEY":             "SUPABASE_ANON_KEY",
    }

    for k, v in secrets.items():
        val = v.get("computed") if isinstance(v, dict) else v
        if not val:
            continue
        target = ALIASES.get(k, k)  # normalize when we know the alias
        if not os.getenv(target):   # <-- do NOT clobber existing env
            os.environ[target] = str(val)


@st.cache_resource(show_spinner=False)
def configure_logging() -> None:
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


configure_logging()
page_setup("Dear Santa...")

try:
    doppler_bootstrap()
except Exception as e:
    logging.getLogger(__name__).warning("Doppler bootstrap failed: %s", e)

# Nothing below runs without Supabase credentials
missing = missing_supabase_config()
if missing:
    render_config_error(missing)

from views.claim_ticket import run_claim_ticket
from views.santa_admin import release_feed, run_santa_admin
from views.write_letter import release_camera, run_write_letter

page = render_sidebar()

# leaving a view releases what it held; the camera is also released on any
# full rerun, which is how a dismissed dialog closes it
release_camera()
if page != SANTA_ADMIN:
    release_feed()

if page == WRITE_LETTER:
    run_write_letter()
elif page == CLAIM_TICKET:
    run_claim_ticket()
else:
    run_santa_admin()
