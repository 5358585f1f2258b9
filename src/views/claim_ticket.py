# src/views/claim_ticket.py
import html

import streamlit as st

from layout.theme import page_header
from utils.errors import ValidationError
from utils.supabase_utils import event_details, get_supabase_client, letters_table
from utils.tickets import NOT_FOUND_MESSAGE, Ticket, find_ticket


def ticket_html(ticket: Ticket, event: dict) -> str:
    e = html.escape
    return f"""
    <div class="sl-ticket">
      <div style="text-align:center"><span class="pill">❄ Official Entry Ticket</span></div>
      <h3>Santa's Christmas Event</h3>
      <div class="row"><span class="label">Ticket ID:</span><span class="mono">#{e(ticket.number)}</span></div>
      <div class="row"><span class="label">Name:</span><b>{e(ticket.name)}</b></div>
      <div class="row"><span class="label">Santa's List:</span><b>{e(ticket.list_status)}</b></div>
      <div class="row"><span class="label">Registered:</span><span>{e(ticket.registered)}</span></div>
      <div class="event">
        📍 {e(event["venue"])}<br>
        🕛 {e(event["time"])}
      </div>
      <div class="foot">🎅<br>Present this ticket at the event</div>
    </div>
    """


def run_claim_ticket():
    page_header("🎟️ Claim Your Official Ticket", "Enter the phone number you used when sending your letter to Santa.")

    ticket = st.session_state.get("claimed_ticket")
    if ticket is not None:
        st.markdown(ticket_html(ticket, event_details()), unsafe_allow_html=True)
        if st.button("Close", use_container_width=True):
            st.session_state.pop("claimed_ticket", None)
            st.rerun()
        return

    with st.form("ticket_form"):
        phone = st.text_input("Phone number", placeholder="Your phone number...")
        find = st.form_submit_button("Find")

    if not find:
        return

    try:
        with st.spinner("Checking Santa's list…"):
            ticket = find_ticket(get_supabase_client(), phone, table=letters_table())
    except ValidationError as e:
        st.toast(f"Enter phone number: {e}", icon="⚠️")
        return

    if ticket is None:
        st.error(f"No letter found. {NOT_FOUND_MESSAGE}")
        return
    st.session_state["claimed_ticket"] = ticket
    st.rerun()
