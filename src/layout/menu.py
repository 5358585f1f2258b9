# layout/menu.py
WRITE_LETTER = "Write a Letter"
CLAIM_TICKET = "Claim Your Ticket"
SANTA_ADMIN = "Santa's Workshop"

MENU = [
    {"label": WRITE_LETTER, "icon": "✉️"},
    {"label": CLAIM_TICKET, "icon": "🎟️"},
    {"label": SANTA_ADMIN, "icon": "🎅"},
]
