from __future__ import annotations

POTION = {"name": "potion", "amount": 1, "currency": "usd"}

BLESSING = {
    "name": "Blessing",
    "description": "Get daily blessings delivered in your DMs",
    "amount": 1,
    "currency": "usd",
    "interval": "day",
    "interval_count": 1,
}
